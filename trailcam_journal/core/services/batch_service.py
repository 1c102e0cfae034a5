"""Batch field edits applied to a selection of entries.

Requests are validated here, before the store is touched; the store itself
trusts its callers. Every selected id present in the store receives the edit,
ids that have disappeared are skipped silently.
"""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from trailcam_journal.core.models import Coordinate, LocationMode, TagMode, TrailEntry
from trailcam_journal.core.services.entry_store import EntryStore
from trailcam_journal.core.services.interfaces import BatchValidationError


def parse_tags(text: str) -> list[str]:
    """Split comma separated `text` into trimmed, non-empty tags (order kept)."""
    return [piece.strip() for piece in text.split(",") if piece.strip()]


def merge_tags(existing: Iterable[str], new_tags: Iterable[str], mode: TagMode) -> list[str]:
    """Return the sorted, deduplicated tag list for `mode`."""
    if mode is TagMode.ADD:
        return sorted(set(existing) | set(new_tags))
    return sorted(set(new_tags))


def normalize_camera(camera: str | None) -> str | None:
    """Trim `camera`; empty results become None."""
    cam = (camera or "").strip()
    return cam or None


class BatchEditService:
    """Apply species/location/camera/tag edits to many entries at once."""

    def __init__(self, store: EntryStore) -> None:
        self._store = store

    def set_species(self, entry_ids: Iterable[str], species: str) -> int:
        """Set `species` on every selected entry.

        Raises:
            BatchValidationError: If `species` is empty.
        """
        value = (species or "").strip()
        if not value:
            raise BatchValidationError("Species must not be empty")

        def _apply(entry: TrailEntry) -> None:
            entry.species = value

        return self._apply("species", entry_ids, _apply)

    def set_location(
        self,
        entry_ids: Iterable[str],
        mode: LocationMode,
        coordinate: Coordinate | None = None,
    ) -> int:
        """Apply one of the three batch location modes.

        Args:
            entry_ids: Selected entry ids.
            mode: UNKNOWN marks the location unknown and drops coordinates;
                COORDINATE stores `coordinate` and clears the unknown flag;
                CLEAR drops coordinates and clears the unknown flag.
            coordinate: Required for COORDINATE, ignored otherwise.

        Raises:
            BatchValidationError: COORDINATE mode without a coordinate.
        """
        if mode is LocationMode.COORDINATE and coordinate is None:
            raise BatchValidationError("A coordinate is required to set an explicit location")

        def _apply(entry: TrailEntry) -> None:
            if mode is LocationMode.UNKNOWN:
                entry.location_unknown = True
                entry.coordinate = None
            elif mode is LocationMode.CLEAR:
                entry.location_unknown = False
                entry.coordinate = None
            else:
                entry.location_unknown = False
                entry.coordinate = coordinate

        return self._apply(f"location ({mode.value})", entry_ids, _apply)

    def mark_location_unknown(self, entry_ids: Iterable[str]) -> int:
        return self.set_location(entry_ids, LocationMode.UNKNOWN)

    def set_coordinate(self, entry_ids: Iterable[str], latitude: float, longitude: float) -> int:
        return self.set_location(entry_ids, LocationMode.COORDINATE, Coordinate(latitude, longitude))

    def clear_location(self, entry_ids: Iterable[str]) -> int:
        return self.set_location(entry_ids, LocationMode.CLEAR)

    def set_camera(self, entry_ids: Iterable[str], camera: str | None) -> int:
        """Set the trimmed camera name (None when blank) on every selected entry."""
        value = normalize_camera(camera)

        def _apply(entry: TrailEntry) -> None:
            entry.camera = value

        return self._apply("camera", entry_ids, _apply)

    def set_tags(self, entry_ids: Iterable[str], text: str, mode: TagMode = TagMode.ADD) -> int:
        """Add or replace tags parsed from comma separated `text`.

        Raises:
            BatchValidationError: If `text` contains no tags.
        """
        new_tags = parse_tags(text)
        if not new_tags:
            raise BatchValidationError("No tags given")

        def _apply(entry: TrailEntry) -> None:
            entry.tags = merge_tags(entry.tags, new_tags, mode)

        return self._apply(f"tags ({mode.value})", entry_ids, _apply)

    def _apply(self, what: str, entry_ids: Iterable[str], mutation) -> int:
        ids = set(entry_ids)
        if not ids:
            return 0
        count = self._store.update_many(ids, mutation)
        logger.info("Batch {} applied to {} of {} selected", what, count, len(ids))
        return count
