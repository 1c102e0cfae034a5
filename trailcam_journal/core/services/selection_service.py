"""Id-based selection tracking decoupled from any display order.

Selection is kept by entry id, so it survives re-sorting and re-filtering of
the displayed list. Ids that leave the visible set must be pruned so hidden
entries never receive later batch edits.
"""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger


class SelectionService:
    """A mutable set of selected entry ids."""

    def __init__(self, ids: Iterable[str] = ()) -> None:
        self._ids: set[str] = set(ids)

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._ids)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __bool__(self) -> bool:
        return bool(self._ids)

    def select(self, entry_id: str) -> None:
        self._ids.add(entry_id)

    def deselect(self, entry_id: str) -> None:
        self._ids.discard(entry_id)

    def toggle(self, entry_id: str) -> bool:
        """Flip selection of `entry_id`; return the new state."""
        if entry_id in self._ids:
            self._ids.remove(entry_id)
            return False
        self._ids.add(entry_id)
        return True

    def select_all(self, entry_ids: Iterable[str]) -> None:
        """Add every id in `entry_ids` (existing selections are kept)."""
        self._ids.update(entry_ids)

    def clear(self) -> None:
        self._ids.clear()

    def prune(self, visible_ids: Iterable[str]) -> set[str]:
        """Drop selected ids that are not in `visible_ids`.

        Returns:
            The ids that were removed.
        """
        visible = set(visible_ids)
        removed = self._ids - visible
        if removed:
            self._ids &= visible
            logger.debug("Pruned {} hidden selection(s)", len(removed))
        return removed
