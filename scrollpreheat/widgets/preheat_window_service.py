from PySide6.QtCore import QPointF, QRect, QRectF

from scrollpreheat.models.preheat_types import (PreheatConfig, PreheatWindowPlan,
                                                ScrollAxis, ScrollDirection,
                                                ViewportState)
from scrollpreheat.utils import geometry


class PreheatWindowService:
    """Plans the lookahead region and throttles how often it is recomputed."""

    def should_recompute(
        self,
        current: QPointF,
        previous: QPointF | None,
        *,
        viewport_extent: float,
        threshold_ratio: float,
    ) -> bool:
        """True on the first call, then only once the offset moved far enough."""
        if previous is None:
            return True
        update_margin = float(viewport_extent) * float(threshold_ratio)
        return geometry.distance_between_points(current, previous) > update_margin

    def classify_direction(
        self,
        current: QPointF,
        previous: QPointF | None,
        axis: ScrollAxis,
    ) -> ScrollDirection:
        return geometry.classify_direction(current, previous, axis)

    def compute_window_region(
        self,
        viewport: ViewportState,
        *,
        axis: ScrollAxis,
        direction: ScrollDirection,
        window_ratio: float,
    ) -> QRect:
        """Return the pixel-aligned region abutting the viewport's leading edge.

        The region spans the whole viewport on the cross axis and
        ``window_ratio`` viewports along the scroll axis, either right after
        the viewport (forward) or right before it (backward).
        """
        rect = viewport.rect()
        if axis is ScrollAxis.VERTICAL:
            height = rect.height() * window_ratio
            if direction is ScrollDirection.FORWARD:
                y = rect.y() + rect.height()
            else:
                y = rect.y() - height
            region = QRectF(rect.x(), y, rect.width(), height)
        else:
            width = rect.width() * window_ratio
            if direction is ScrollDirection.FORWARD:
                x = rect.x() + rect.width()
            else:
                x = rect.x() - width
            region = QRectF(x, rect.y(), width, rect.height())
        # Smallest integral rect containing the float region.
        return region.toAlignedRect()

    def plan(
        self,
        viewport: ViewportState,
        previous: QPointF | None,
        *,
        viewport_extent: float,
        config: PreheatConfig,
    ) -> PreheatWindowPlan | None:
        """Combine the throttle, direction and region steps of one cycle."""
        current = QPointF(viewport.origin)
        if not self.should_recompute(
            current,
            previous,
            viewport_extent=viewport_extent,
            threshold_ratio=config.update_threshold_ratio,
        ):
            return None
        direction = self.classify_direction(current, previous, viewport.axis)
        region = self.compute_window_region(
            viewport,
            axis=viewport.axis,
            direction=direction,
            window_ratio=config.window_ratio,
        )
        return PreheatWindowPlan(offset=current, direction=direction, region=region)
