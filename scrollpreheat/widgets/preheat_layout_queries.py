"""Layout queries that adapt host widgets to the preheat controller.

Each host only translates its own geometry into item ids; the windowing
logic itself lives in the controller.
"""

from typing import Callable, Iterable

from PySide6.QtCore import QPointF, QRectF, QSizeF
from PySide6.QtWidgets import QAbstractItemView, QListView

from scrollpreheat.models.preheat_types import (ItemId, PreheatConfigError,
                                                ScrollAxis, ViewportState)
from scrollpreheat.utils.geometry import axis_extent

BOTH_AXES = frozenset({ScrollAxis.VERTICAL, ScrollAxis.HORIZONTAL})


def _scroll_offset(scroll_area) -> QPointF:
    return QPointF(scroll_area.horizontalScrollBar().value(),
                   scroll_area.verticalScrollBar().value())


def _viewport_size(scroll_area) -> QSizeF:
    viewport = scroll_area.viewport()
    return QSizeF(viewport.width(), viewport.height())


class ItemRectLayoutQuery:
    """Layout query over precomputed item rects in content coordinates.

    ``item_rects`` returns either ``(key, rect)`` pairs or masonry-style
    dicts with ``index`` and ``rect`` entries. Integer keys below zero mark
    spacers and other non-item entries; they are never reported.
    """

    supported_axes = BOTH_AXES

    def __init__(self, scroll_area, item_rects: Callable[[], Iterable],
                 axis: ScrollAxis = ScrollAxis.VERTICAL, *, section: int = 0):
        self._scroll_area = scroll_area
        self._item_rects = item_rects
        self.axis = axis
        self._section = int(section)

    def _entries(self):
        for entry in self._item_rects() or ():
            if isinstance(entry, dict):
                key, rect = entry.get("index", -1), entry.get("rect")
            else:
                key, rect = entry
            if rect is None:
                continue
            if isinstance(key, ItemId):
                yield key, rect
            elif int(key) >= 0:
                yield ItemId(self._section, int(key)), rect

    def items_intersecting(self, region) -> set[ItemId]:
        region = QRectF(region)
        if region.isEmpty():
            return set()
        return {
            item_id for item_id, rect in self._entries()
            if QRectF(rect).intersects(region)
        }

    def currently_visible_items(self) -> set[ItemId]:
        return self.items_intersecting(self.viewport_state().rect())

    def viewport_extent(self, axis: ScrollAxis) -> float:
        return axis_extent(self._scroll_area.viewport(), axis)

    def viewport_state(self) -> ViewportState:
        return ViewportState(_scroll_offset(self._scroll_area),
                             _viewport_size(self._scroll_area), self.axis)


class ItemViewLayoutQuery:
    """Layout query for `QListView`/`QTableView` style hosts.

    Rows are mapped through ``visualRect`` into content coordinates, which
    only holds while the view scrolls per pixel along ``axis``.
    """

    def __init__(self, view: QAbstractItemView, axis: ScrollAxis = ScrollAxis.VERTICAL,
                 *, section: int = 0):
        self._view = view
        self.axis = axis
        self._section = int(section)
        if isinstance(view, QListView):
            self.supported_axes = BOTH_AXES
        else:
            self.supported_axes = frozenset({ScrollAxis.VERTICAL})

        if axis not in self.supported_axes:
            raise PreheatConfigError(
                f"{type(view).__name__} does not scroll along {axis.value}")
        if axis is ScrollAxis.VERTICAL:
            scroll_mode = view.verticalScrollMode()
        else:
            scroll_mode = view.horizontalScrollMode()
        if scroll_mode != QAbstractItemView.ScrollMode.ScrollPerPixel:
            raise PreheatConfigError(
                f"{type(view).__name__} must use ScrollPerPixel along {axis.value}")

    def _is_linear(self) -> bool:
        """True when rows follow each other along the axis in row order."""
        if not isinstance(self._view, QListView):
            return self.axis is ScrollAxis.VERTICAL
        if self._view.viewMode() != QListView.ViewMode.ListMode or self._view.isWrapping():
            return False
        if self.axis is ScrollAxis.VERTICAL:
            return self._view.flow() == QListView.Flow.TopToBottom
        return self._view.flow() == QListView.Flow.LeftToRight

    def _content_rect(self, model, row: int, offset: QPointF) -> QRectF | None:
        if isinstance(self._view, QListView) and self._view.isRowHidden(row):
            return None
        rect = self._view.visualRect(model.index(row, 0))
        if rect.isEmpty():
            return None
        return QRectF(rect).translated(offset)

    def _axis_span(self, rect: QRectF) -> tuple[float, float]:
        if self.axis is ScrollAxis.VERTICAL:
            return rect.y(), rect.y() + rect.height()
        return rect.x(), rect.x() + rect.width()

    def _first_row_reaching(self, model, rows: int, offset: QPointF, start: float) -> int:
        """Binary search for the first row whose far edge lies past `start`.

        Hidden rows have no geometry, so each step walks forward past them.
        The result may land on a hidden row just before the answer.
        """
        lo, hi = 0, rows
        while lo < hi:
            mid = (lo + hi) // 2
            row = mid
            rect = self._content_rect(model, row, offset)
            while rect is None and row + 1 < hi:
                row += 1
                rect = self._content_rect(model, row, offset)
            if rect is None or self._axis_span(rect)[1] > start:
                hi = mid
            else:
                lo = row + 1
        return lo

    def items_intersecting(self, region) -> set[ItemId]:
        region = QRectF(region)
        model = self._view.model()
        if model is None or region.isEmpty():
            return set()

        offset = _scroll_offset(self._view)
        rows = model.rowCount()
        linear = self._is_linear()
        region_start, region_end = self._axis_span(region)
        first = self._first_row_reaching(model, rows, offset, region_start) if linear else 0

        result = set()
        for row in range(first, rows):
            rect = self._content_rect(model, row, offset)
            if rect is None:
                continue
            if linear and self._axis_span(rect)[0] >= region_end:
                break
            if rect.intersects(region):
                result.add(ItemId.from_model_index(model.index(row, 0), self._section))
        return result

    def currently_visible_items(self) -> set[ItemId]:
        return self.items_intersecting(self.viewport_state().rect())

    def viewport_extent(self, axis: ScrollAxis) -> float:
        return axis_extent(self._view.viewport(), axis)

    def viewport_state(self) -> ViewportState:
        return ViewportState(_scroll_offset(self._view), _viewport_size(self._view), self.axis)
