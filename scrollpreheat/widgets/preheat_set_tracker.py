from typing import Callable, Iterable

from scrollpreheat.models.preheat_types import ItemId, ScrollDirection
from scrollpreheat.utils.geometry import sort_item_ids


class PreheatSetTracker:
    """Owns the current preheat set and reports deltas against new proposals."""

    def __init__(self, notify: Callable[[list, set], None] | None = None):
        self._notify = notify
        self._current: tuple[ItemId, ...] = ()
        self._members: frozenset[ItemId] = frozenset()

    @property
    def current_set(self) -> tuple[ItemId, ...]:
        return self._current

    def __len__(self):
        return len(self._current)

    def __contains__(self, item_id):
        return item_id in self._members

    def propose_update(
        self,
        new_candidates: Iterable[ItemId],
        direction: ScrollDirection,
    ) -> tuple[list[ItemId], set[ItemId]]:
        """Replace the held set and notify once with ``(added, removed)``.

        ``added`` follows the traversal order of ``direction`` so items near
        the leading edge are requested first. The notification fires even
        when both lists are empty.
        """
        ordered = sort_item_ids(new_candidates, direction)
        candidates = frozenset(ordered)
        added = [item_id for item_id in ordered if item_id not in self._members]
        removed = set(self._members - candidates)

        self._current = tuple(ordered)
        self._members = candidates

        if self._notify is not None:
            self._notify(added, removed)
        return added, removed

    def reset(self):
        """Forget the held set without notifying."""
        self._current = ()
        self._members = frozenset()
