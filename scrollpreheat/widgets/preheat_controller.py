import threading

from PySide6.QtCore import QObject, QPointF, Signal

from scrollpreheat.models.preheat_types import (LayoutQuery, NotificationSink,
                                                PreheatConfig, PreheatConfigError,
                                                ScrollAxis, ScrollDirection, ViewportSource)
from scrollpreheat.utils.flow_log import log_flow
from scrollpreheat.widgets.preheat_set_tracker import PreheatSetTracker
from scrollpreheat.widgets.preheat_window_service import PreheatWindowService

_SETTING_FIELDS = {
    'preheat_window_ratio': 'window_ratio',
    'preheat_update_threshold_ratio': 'update_threshold_ratio',
}


class PreheatController(QObject):
    """Predicts which items are about to scroll into view.

    The controller starts disabled. Enabling it computes a preheat window
    right away and then follows viewport changes; disabling it drops the
    whole preheat set and reports every held item as removed.
    """

    # (added: list[ItemId], removed: set[ItemId]). Emitted for every
    # recompute cycle that passes the update threshold, including cycles
    # where both collections are empty.
    preheat_set_changed = Signal(object, object)

    def __init__(self, viewport_source: ViewportSource, layout_query: LayoutQuery,
                 config: PreheatConfig | None = None, *,
                 sink: NotificationSink | None = None, axis: ScrollAxis | None = None, parent=None):
        super().__init__(parent)
        if axis is not None and axis is not layout_query.axis:
            raise PreheatConfigError(
                f"Controller axis {axis.value} does not match layout axis {layout_query.axis.value}")
        if layout_query.axis not in layout_query.supported_axes:
            raise PreheatConfigError(
                f"{type(layout_query).__name__} cannot scroll along {layout_query.axis.value}")

        self._viewport_source = viewport_source
        self._layout_query = layout_query
        self._config = config or PreheatConfig()
        self._window_service = PreheatWindowService()
        self._tracker = PreheatSetTracker(notify=self._emit_change)
        self._lock = threading.RLock()
        self._enabled = False
        self._previous_offset: QPointF | None = None
        self._bound_settings = None
        self._closed = False
        self._sink = sink

        self._viewport_source.subscribe(self._on_viewport_changed)

    # Collaborators

    @property
    def viewport_source(self):
        return self._viewport_source

    @property
    def layout_query(self):
        return self._layout_query

    @property
    def axis(self) -> ScrollAxis:
        return self._layout_query.axis

    # State

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool):
        self._apply_transition(bool(value))

    @property
    def current_preheat_set(self):
        return self._tracker.current_set

    @property
    def previous_offset(self) -> QPointF | None:
        if self._previous_offset is None:
            return None
        return QPointF(self._previous_offset)

    # Configuration

    @property
    def config(self) -> PreheatConfig:
        return self._config

    @config.setter
    def config(self, value: PreheatConfig):
        if not isinstance(value, PreheatConfig):
            raise PreheatConfigError(f"Expected PreheatConfig, got {type(value).__name__}")
        with self._lock:
            self._config = value

    @property
    def window_ratio(self) -> float:
        return self._config.window_ratio

    @window_ratio.setter
    def window_ratio(self, value: float):
        self._update_config(window_ratio=value)

    @property
    def update_threshold_ratio(self) -> float:
        return self._config.update_threshold_ratio

    @update_threshold_ratio.setter
    def update_threshold_ratio(self, value: float):
        self._update_config(update_threshold_ratio=value)

    def _update_config(self, **changes):
        with self._lock:
            fields = {
                'window_ratio': self._config.window_ratio,
                'update_threshold_ratio': self._config.update_threshold_ratio,
            }
            fields.update(changes)
            self._config = PreheatConfig(**fields)

    def bind_settings(self, settings):
        """Load ratios from `settings` and follow later changes to them."""
        self.config = PreheatConfig.from_settings(settings)
        if self._bound_settings is not None:
            self._bound_settings.change.disconnect(self._on_setting_changed)
        settings.change.connect(self._on_setting_changed)
        self._bound_settings = settings

    def _on_setting_changed(self, key, value):
        field_name = _SETTING_FIELDS.get(key)
        if field_name is None:
            return
        try:
            self._update_config(**{field_name: value})
        except PreheatConfigError as e:
            log_flow("PREHEAT", f"Ignoring setting {key}={value!r}: {e}", level="WARN")

    # Lifecycle

    def _apply_transition(self, enabled: bool):
        """Run the side effects of moving between Disabled and Enabled."""
        with self._lock:
            was_enabled = self._enabled
            self._enabled = enabled
            if enabled:
                if not was_enabled:
                    log_flow("PREHEAT", "Enabled; computing initial window")
                self._recompute()
            elif was_enabled:
                held = len(self._tracker)
                self._previous_offset = None
                self._tracker.propose_update((), ScrollDirection.FORWARD)
                log_flow("PREHEAT", f"Disabled; released {held} preheated items")

    def reset(self):
        """Drop the preheat set without notifying, then recompute if enabled.

        Useful when the model changes completely: stop preheating
        everything first, then reset the controller.
        """
        with self._lock:
            self._tracker.reset()
            self._previous_offset = None
            log_flow("PREHEAT", f"Reset (enabled={self._enabled})")
            if self._enabled:
                self._recompute()

    def close(self):
        """Disable and stop listening to the viewport source."""
        with self._lock:
            if self._closed:
                return
            self.enabled = False
            self._viewport_source.unsubscribe(self._on_viewport_changed)
            if self._bound_settings is not None:
                self._bound_settings.change.disconnect(self._on_setting_changed)
                self._bound_settings = None
            self._closed = True

    # Recompute cycle

    def _on_viewport_changed(self, offset=None):
        del offset  # the layout query is the authority for the viewport
        with self._lock:
            if self._enabled:
                self._recompute()

    def _recompute(self):
        viewport = self._layout_query.viewport_state()
        visible = set(self._layout_query.currently_visible_items())
        extent = self._layout_query.viewport_extent(self.axis)

        plan = self._window_service.plan(
            viewport,
            self._previous_offset,
            viewport_extent=extent,
            config=self._config,
        )
        if plan is None:
            log_flow("PREHEAT", "Offset moved less than update margin; skipping",
                     throttle_key="preheat_skip", every_s=0.5)
            return

        self._previous_offset = plan.offset
        candidates = set(self._layout_query.items_intersecting(plan.region)) - visible
        added, removed = self._tracker.propose_update(candidates, plan.direction)
        log_flow(
            "PREHEAT",
            f"{plan.direction.value} window y={plan.region.y()} x={plan.region.x()} "
            f"{plan.region.width()}x{plan.region.height()}: "
            f"+{len(added)} -{len(removed)} (held={len(self._tracker)})",
        )

    def _emit_change(self, added, removed):
        # Called directly so sink errors reach the host event path; Qt would
        # print and drop an exception raised inside a connected slot.
        if self._sink is not None:
            self._sink.on_preheat_set_changed(added, removed)
        self.preheat_set_changed.emit(added, removed)
