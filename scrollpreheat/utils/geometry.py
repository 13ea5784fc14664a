import math
from typing import Iterable

from PySide6.QtCore import QPointF

from scrollpreheat.models.preheat_types import ItemId, ScrollAxis, ScrollDirection


def distance_between_points(p1: QPointF, p2: QPointF) -> float:
    return math.hypot(p2.x() - p1.x(), p2.y() - p1.y())


def axis_coordinate(point: QPointF, axis: ScrollAxis) -> float:
    return float(point.y() if axis is ScrollAxis.VERTICAL else point.x())


def axis_extent(size, axis: ScrollAxis) -> float:
    return float(size.height() if axis is ScrollAxis.VERTICAL else size.width())


def classify_direction(current: QPointF, previous: QPointF | None,
                       axis: ScrollAxis) -> ScrollDirection:
    """Forward when the offset grew (or stayed put) along the axis."""
    if previous is None:
        return ScrollDirection.FORWARD
    if axis_coordinate(current, axis) >= axis_coordinate(previous, axis):
        return ScrollDirection.FORWARD
    return ScrollDirection.BACKWARD


def sort_item_ids(item_ids: Iterable[ItemId], direction: ScrollDirection) -> list[ItemId]:
    """Order ids so the ones nearest the leading edge of travel come first."""
    return sorted(set(item_ids), reverse=direction is ScrollDirection.BACKWARD)
