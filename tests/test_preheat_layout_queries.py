import pytest
from PySide6.QtCore import QRect, QRectF
from PySide6.QtWidgets import QAbstractItemView

from scrollpreheat.models.preheat_types import ItemId, PreheatConfigError, ScrollAxis
from scrollpreheat.widgets.preheat_layout_queries import ItemRectLayoutQuery, ItemViewLayoutQuery


class FakeScrollBar:
    def __init__(self, value=0):
        self._value = value

    def value(self):
        return self._value


class FakeViewport:
    def __init__(self, width=100, height=100):
        self._width = width
        self._height = height

    def width(self):
        return self._width

    def height(self):
        return self._height


class FakeScrollArea:
    def __init__(self, x=0, y=0, width=100, height=100):
        self._hbar = FakeScrollBar(x)
        self._vbar = FakeScrollBar(y)
        self._viewport = FakeViewport(width, height)

    def horizontalScrollBar(self):
        return self._hbar

    def verticalScrollBar(self):
        return self._vbar

    def viewport(self):
        return self._viewport


class FakeIndex:
    def __init__(self, row):
        self._row = row

    def row(self):
        return self._row


class FakeModel:
    def __init__(self, rows):
        self._rows = rows

    def rowCount(self):
        return self._rows

    def index(self, row, column):
        del column
        return FakeIndex(row)


class FakeTableView(FakeScrollArea):
    """Rows of height 20 laid out in viewport coordinates like `QTableView`."""

    def __init__(self, rows=50, y=0, scroll_mode=QAbstractItemView.ScrollMode.ScrollPerPixel):
        super().__init__(y=y, width=200, height=100)
        self._model = FakeModel(rows) if rows is not None else None
        self._scroll_mode = scroll_mode
        self.visual_rect_calls = 0

    def model(self):
        return self._model

    def verticalScrollMode(self):
        return self._scroll_mode

    def horizontalScrollMode(self):
        return self._scroll_mode

    def visualRect(self, index):
        self.visual_rect_calls += 1
        if index.row() == 7:
            return QRect()  # hidden row
        return QRect(0, index.row() * 20 - self._vbar.value(), 200, 20)


def masonry_items():
    return [
        {"index": -3, "rect": QRect(0, 0, 100, 5000)},  # prefix spacer
        {"index": 0, "rect": QRect(0, 0, 50, 80)},
        {"index": 1, "rect": QRect(50, 0, 50, 120)},
        {"index": 2, "rect": QRect(0, 80, 50, 90)},
        {"index": 3, "rect": QRect(50, 120, 50, 60)},
        {"index": -1, "rect": QRect(0, 180, 100, 400)},  # gap spacer
        {"index": 4, "rect": QRect(0, 580, 50, 50)},
    ]


def test_item_rect_query_skips_spacer_entries():
    query = ItemRectLayoutQuery(FakeScrollArea(), masonry_items)

    found = query.items_intersecting(QRect(0, 100, 100, 100))

    assert found == {ItemId(0, 1), ItemId(0, 2), ItemId(0, 3)}


def test_item_rect_query_treats_edges_as_half_open():
    query = ItemRectLayoutQuery(FakeScrollArea(), masonry_items)

    # Region [180, 580) only touches row 3's bottom and row 4's top.
    assert query.items_intersecting(QRectF(0, 180, 100, 400)) == set()
    assert query.items_intersecting(QRect(0, 0, 0, 0)) == set()


def test_item_rect_query_visible_items_follow_scroll_offset():
    area = FakeScrollArea(y=100)
    query = ItemRectLayoutQuery(area, masonry_items)

    assert query.currently_visible_items() == {ItemId(0, 1), ItemId(0, 2), ItemId(0, 3)}

    area._vbar._value = 560
    assert query.currently_visible_items() == {ItemId(0, 4)}


def test_item_rect_query_accepts_pairs_and_item_ids():
    rects = [(ItemId(2, 5), QRect(0, 0, 10, 10)), (3, QRect(0, 10, 10, 10)), (-1, QRect(0, 0, 10, 10))]
    query = ItemRectLayoutQuery(FakeScrollArea(), lambda: rects, section=1)

    assert query.items_intersecting(QRect(0, 0, 10, 20)) == {ItemId(2, 5), ItemId(1, 3)}


def test_item_rect_query_reports_viewport_state():
    query = ItemRectLayoutQuery(FakeScrollArea(x=5, y=40, width=300, height=120),
                                lambda: [], ScrollAxis.HORIZONTAL)
    state = query.viewport_state()

    assert state.origin.x() == 5 and state.origin.y() == 40
    assert state.axis is ScrollAxis.HORIZONTAL
    assert query.viewport_extent(ScrollAxis.HORIZONTAL) == 300
    assert query.viewport_extent(ScrollAxis.VERTICAL) == 120
    assert state.extent() == 300
    assert state.extent(ScrollAxis.VERTICAL) == 120
    assert query.supported_axes == frozenset({ScrollAxis.VERTICAL, ScrollAxis.HORIZONTAL})


def test_item_view_query_maps_rows_into_content_coordinates():
    view = FakeTableView(y=100)
    query = ItemViewLayoutQuery(view)

    # Viewport y in [100, 200) shows rows 5-9, row 7 has no geometry.
    assert query.currently_visible_items() == {ItemId(0, row) for row in (5, 6, 8, 9)}
    assert query.items_intersecting(QRect(0, 200, 200, 50)) == {ItemId(0, row) for row in (10, 11, 12)}


def test_item_view_query_without_model_is_empty():
    query = ItemViewLayoutQuery(FakeTableView(rows=None))

    assert query.items_intersecting(QRect(0, 0, 200, 200)) == set()


def test_item_view_query_requires_per_pixel_scrolling():
    view = FakeTableView(scroll_mode=QAbstractItemView.ScrollMode.ScrollPerItem)

    with pytest.raises(PreheatConfigError):
        ItemViewLayoutQuery(view)


def test_item_view_query_rejects_horizontal_axis_for_table_views():
    with pytest.raises(PreheatConfigError):
        ItemViewLayoutQuery(FakeTableView(), ScrollAxis.HORIZONTAL)


def test_item_view_query_scans_only_rows_near_the_region():
    view = FakeTableView(rows=100000, y=1000000)
    query = ItemViewLayoutQuery(view)

    visible = query.currently_visible_items()
    ahead = query.items_intersecting(QRect(0, 1000100, 200, 100))

    assert visible == {ItemId(0, row) for row in range(50000, 50005)}
    assert ahead == {ItemId(0, row) for row in range(50005, 50010)}
    assert view.visual_rect_calls < 200


def test_item_view_query_search_steps_over_rows_without_geometry():
    view = FakeTableView(rows=20)
    query = ItemViewLayoutQuery(view)

    # Row 7 has no rect; the region starts inside row 8.
    assert query.items_intersecting(QRect(0, 165, 200, 30)) == {ItemId(0, 8), ItemId(0, 9)}
    assert query.items_intersecting(QRect(0, 1000, 200, 30)) == set()
