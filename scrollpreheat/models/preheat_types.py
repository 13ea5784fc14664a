"""Value types shared by the preheat window core and its host adapters."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from PySide6.QtCore import QPointF, QRect, QRectF, QSizeF

from scrollpreheat.utils.settings import DEFAULT_SETTINGS


class PreheatConfigError(ValueError):
    """Raised when a preheat controller or its configuration is misused."""


class ScrollAxis(Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class ScrollDirection(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


@dataclass(frozen=True, order=True)
class ItemId:
    """Stable identifier of a list/grid element.

    Ordering by ``(section, index)`` is the forward traversal order on
    either scroll axis.
    """

    section: int
    index: int

    @classmethod
    def from_model_index(cls, model_index, section: int = 0) -> "ItemId":
        return cls(int(section), int(model_index.row()))

    def __repr__(self):
        return f"ItemId({self.section}, {self.index})"


@dataclass(frozen=True)
class ViewportState:
    """Snapshot of the scroll viewport in content coordinates."""

    origin: QPointF
    size: QSizeF
    axis: ScrollAxis = ScrollAxis.VERTICAL

    def __post_init__(self):
        # Qt value types are mutable; keep our own copies.
        object.__setattr__(self, "origin", QPointF(self.origin))
        object.__setattr__(self, "size", QSizeF(self.size))

    def extent(self, axis: ScrollAxis | None = None) -> float:
        axis = axis or self.axis
        if axis is ScrollAxis.VERTICAL:
            return float(self.size.height())
        return float(self.size.width())

    def rect(self) -> QRectF:
        return QRectF(self.origin, self.size)


def _validated_ratio(name: str, value, *, upper: float | None = None) -> float:
    try:
        ratio = float(value)
    except (TypeError, ValueError) as e:
        raise PreheatConfigError(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(ratio) or ratio <= 0.0:
        raise PreheatConfigError(f"{name} must be a positive finite number, got {value!r}")
    if upper is not None and ratio > upper:
        raise PreheatConfigError(f"{name} must be in (0, {upper}], got {value!r}")
    return ratio


@dataclass(frozen=True)
class PreheatConfig:
    """Ratios that size the lookahead window and throttle recomputation."""

    window_ratio: float = DEFAULT_SETTINGS['preheat_window_ratio']
    update_threshold_ratio: float = DEFAULT_SETTINGS['preheat_update_threshold_ratio']

    def __post_init__(self):
        object.__setattr__(self, "window_ratio",
                           _validated_ratio("window_ratio", self.window_ratio))
        object.__setattr__(self, "update_threshold_ratio",
                           _validated_ratio("update_threshold_ratio",
                                            self.update_threshold_ratio, upper=1.0))

    @classmethod
    def from_settings(cls, settings) -> "PreheatConfig":
        window_ratio = settings.value(
            'preheat_window_ratio',
            defaultValue=DEFAULT_SETTINGS['preheat_window_ratio'],
            type=float)
        update_threshold_ratio = settings.value(
            'preheat_update_threshold_ratio',
            defaultValue=DEFAULT_SETTINGS['preheat_update_threshold_ratio'],
            type=float)
        return cls(window_ratio=window_ratio,
                   update_threshold_ratio=update_threshold_ratio)


@dataclass(frozen=True)
class PreheatWindowPlan:
    """Result of one recompute decision: where to look and which way."""

    offset: QPointF
    direction: ScrollDirection
    region: QRect


@runtime_checkable
class LayoutQuery(Protocol):
    axis: ScrollAxis
    supported_axes: frozenset

    def items_intersecting(self, region: QRect) -> set[ItemId]: ...

    def currently_visible_items(self) -> set[ItemId]: ...

    def viewport_extent(self, axis: ScrollAxis) -> float: ...

    def viewport_state(self) -> ViewportState: ...


@runtime_checkable
class ViewportSource(Protocol):
    def subscribe(self, handler) -> None: ...

    def unsubscribe(self, handler) -> None: ...


@runtime_checkable
class NotificationSink(Protocol):
    def on_preheat_set_changed(self, added: list[ItemId], removed: set[ItemId]) -> None: ...

