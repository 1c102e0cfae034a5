"""ViewModel for the draft review queue: filtering, selection and batch edits."""

from __future__ import annotations

from loguru import logger

from trailcam_journal.core.models import (
    Coordinate,
    DraftFilter,
    FinalizeResult,
    LocationMode,
    TagMode,
    TrailEntry,
)
from trailcam_journal.core.services.batch_service import BatchEditService
from trailcam_journal.core.services.entry_store import EntryStore
from trailcam_journal.core.services.filter_service import draft_status, filter_drafts
from trailcam_journal.core.services.interfaces import BatchValidationError
from trailcam_journal.core.services.location_service import SavedLocationStore
from trailcam_journal.core.services.selection_service import SelectionService


class ReviewVM:
    """Review-queue view-model.

    Holds the active filter and an id-based selection. Whenever the visible
    draft set may have changed (filter switch, batch edit, finalize, delete)
    the selection is pruned to the visible ids, so hidden drafts never receive
    a later batch edit.
    """

    def __init__(
        self,
        store: EntryStore,
        saved_locations: SavedLocationStore | None = None,
        batch: BatchEditService | None = None,
    ) -> None:
        self._store = store
        self._saved_locations = saved_locations
        self._batch = batch or BatchEditService(store)
        self._filter = DraftFilter.ALL
        self.selection = SelectionService()
        self.selection_mode = False

    # ----- filter / visible drafts -----

    @property
    def filter(self) -> DraftFilter:
        return self._filter

    def set_filter(self, draft_filter: DraftFilter) -> None:
        """Switch the filter and drop selections that are no longer visible."""
        self._filter = draft_filter
        self.refresh()

    def visible_drafts(self) -> list[TrailEntry]:
        """Drafts passing the active filter, in store order."""
        return filter_drafts(self._store.entries, self._filter)

    def visible_ids(self) -> list[str]:
        return [e.id for e in self.visible_drafts()]

    @property
    def total_drafts(self) -> int:
        return len(self.visible_drafts())

    @property
    def ready_drafts(self) -> int:
        return sum(1 for e in self.visible_drafts() if e.can_finalize)

    @property
    def progress_text(self) -> str:
        return f"Ready {self.ready_drafts} / {self.total_drafts}"

    def status_for(self, entry: TrailEntry) -> str:
        return draft_status(entry)

    def refresh(self) -> None:
        """Prune the selection to the currently visible drafts."""
        self.selection.prune(self.visible_ids())

    # ----- selection -----

    @property
    def selected_count(self) -> int:
        return len(self.selection)

    @property
    def has_selection(self) -> bool:
        return bool(self.selection)

    def enter_selection_mode(self, entry_id: str | None = None) -> None:
        """Start selecting; a long-pressed entry is selected right away."""
        self.selection_mode = True
        if entry_id is not None and entry_id in self.visible_ids():
            self.selection.select(entry_id)

    def exit_selection_mode(self) -> None:
        self.selection_mode = False
        self.selection.clear()

    def toggle(self, entry_id: str) -> bool:
        """Toggle a visible draft; hidden or unknown ids are ignored."""
        if entry_id not in self.visible_ids():
            return False
        return self.selection.toggle(entry_id)

    def select_all_visible(self) -> None:
        self.selection.select_all(self.visible_ids())

    def clear_selection(self) -> None:
        self.selection.clear()

    # ----- batch edits -----

    def apply_species(self, species: str) -> int:
        return self._after_edit(self._batch.set_species(self._selected_ids(), species))

    def apply_location(self, mode: LocationMode, coordinate: Coordinate | None = None) -> int:
        return self._after_edit(self._batch.set_location(self._selected_ids(), mode, coordinate))

    def apply_saved_location(self, location_id: str) -> int:
        """Copy a saved location's coordinate onto the selection."""
        loc = self._saved_locations.get(location_id) if self._saved_locations else None
        if loc is None:
            raise BatchValidationError(f"Unknown saved location: {location_id}")
        return self.apply_location(LocationMode.COORDINATE, loc.coordinate)

    def apply_camera(self, camera: str | None) -> int:
        return self._after_edit(self._batch.set_camera(self._selected_ids(), camera))

    def apply_tags(self, text: str, mode: TagMode = TagMode.ADD) -> int:
        return self._after_edit(self._batch.set_tags(self._selected_ids(), text, mode))

    def finalize_selected(self) -> FinalizeResult:
        """Finalize the selection, then clear it."""
        ids = self._selected_ids()
        if not ids:
            return FinalizeResult()
        result = self._store.finalize(ids)
        self.clear_selection()
        if result.skipped:
            logger.info(result.message)
        return result

    def finalize_entry(self, entry_id: str) -> bool:
        """Finalize a single draft; returns True if it left the draft state."""
        result = self._store.finalize({entry_id})
        self.refresh()
        return result.finalized == 1

    def delete_selected(self) -> None:
        self._store.delete_entries(self._selected_ids())
        self.clear_selection()

    def delete_all_drafts(self) -> None:
        self._store.delete_all_drafts()
        self.clear_selection()

    def _selected_ids(self) -> frozenset[str]:
        """Prune to the currently visible drafts, then return the selection."""
        self.refresh()
        return self.selection.ids

    def _after_edit(self, count: int) -> int:
        self.refresh()
        return count
