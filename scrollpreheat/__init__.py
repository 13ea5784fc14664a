"""Scroll preheating: predict which list/grid items are about to scroll into view."""

from scrollpreheat.models.preheat_types import (ItemId, PreheatConfig, PreheatConfigError,
                                                ScrollAxis, ScrollDirection, ViewportState)
from scrollpreheat.widgets.preheat_controller import PreheatController
from scrollpreheat.widgets.preheat_layout_queries import ItemRectLayoutQuery, ItemViewLayoutQuery
from scrollpreheat.widgets.preheat_set_tracker import PreheatSetTracker
from scrollpreheat.widgets.preheat_window_service import PreheatWindowService
from scrollpreheat.widgets.viewport_sources import ManualViewportSource, ScrollAreaViewportSource

__all__ = [
    "ItemId",
    "ItemRectLayoutQuery",
    "ItemViewLayoutQuery",
    "ManualViewportSource",
    "PreheatConfig",
    "PreheatConfigError",
    "PreheatController",
    "PreheatSetTracker",
    "PreheatWindowService",
    "ScrollAreaViewportSource",
    "ScrollAxis",
    "ScrollDirection",
    "ViewportState",
]
