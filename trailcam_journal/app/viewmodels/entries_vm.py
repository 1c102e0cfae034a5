"""ViewModel for the finalized entries list and single-entry editing."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from trailcam_journal.core.catalog import UNKNOWN_CAMERA
from trailcam_journal.core.models import Coordinate, SavedLocation, TrailEntry
from trailcam_journal.core.services.batch_service import normalize_camera, parse_tags
from trailcam_journal.core.services.entry_store import EntryStore
from trailcam_journal.core.services.location_service import (
    SavedLocationStore,
    suggest_location_name,
)


@dataclass
class EntryEdit:
    """Form values of the entry editor."""

    date: datetime
    species: str = ""
    camera: str = UNKNOWN_CAMERA
    notes: str = ""
    tags_text: str = ""
    location_unknown: bool = False
    latitude: float | None = None
    longitude: float | None = None

    @classmethod
    def from_entry(cls, entry: TrailEntry) -> EntryEdit:
        return cls(
            date=entry.date,
            species=entry.species or "",
            camera=entry.camera or UNKNOWN_CAMERA,
            notes=entry.notes,
            tags_text=", ".join(entry.tags),
            location_unknown=entry.location_unknown,
            latitude=entry.latitude,
            longitude=entry.longitude,
        )


class EntriesVM:
    """Lists finalized entries newest first and edits single entries."""

    def __init__(self, store: EntryStore, saved_locations: SavedLocationStore) -> None:
        self._store = store
        self._saved_locations = saved_locations

    def finalized_entries(self) -> list[TrailEntry]:
        return sorted(self._store.finalized, key=lambda e: e.date, reverse=True)

    def location_label(self, entry: TrailEntry) -> str:
        return self._saved_locations.label_for(entry)

    def search(self, query: str) -> list[TrailEntry]:
        """Case-insensitive match on species, camera, notes and location label."""
        q = query.strip().lower()
        entries = self.finalized_entries()
        if not q:
            return entries
        return [
            e
            for e in entries
            if any(
                q in text.lower()
                for text in (e.species or "", e.camera or "", e.notes, self.location_label(e))
            )
        ]

    def save_edit(self, entry_id: str, edit: EntryEdit) -> bool:
        """Write editor values back to the entry (no-op if it no longer exists)."""

        def _apply(entry: TrailEntry) -> None:
            entry.species = edit.species.strip() or None
            entry.date = edit.date
            camera = normalize_camera(edit.camera)
            entry.camera = None if camera == UNKNOWN_CAMERA else camera
            entry.notes = edit.notes
            entry.tags = parse_tags(edit.tags_text)
            entry.location_unknown = edit.location_unknown
            if edit.location_unknown or edit.latitude is None or edit.longitude is None:
                entry.coordinate = None
            else:
                entry.coordinate = Coordinate(edit.latitude, edit.longitude)

        return self._store.update(entry_id, _apply)

    def redraft(self, entry_id: str) -> bool:
        """Manually move a finalized entry back to the draft state."""

        def _apply(entry: TrailEntry) -> None:
            entry.is_draft = True

        return self._store.update(entry_id, _apply)

    def pin_location(self, entry_id: str, name: str | None = None) -> SavedLocation | None:
        """Save the entry's coordinate as a named location.

        Returns the stored location, the existing pin within 25m, or None when
        the entry has no coordinate.
        """
        entry = self._store.get(entry_id)
        if entry is None or entry.coordinate is None:
            return None
        return self._saved_locations.add(
            SavedLocation(
                name=(name or "").strip() or suggest_location_name(entry),
                latitude=entry.coordinate.latitude,
                longitude=entry.coordinate.longitude,
            )
        )

    def delete(self, entry_id: str) -> None:
        self._store.delete_entry(entry_id)
