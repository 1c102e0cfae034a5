"""In-memory entry collection with save-on-write persistence.

`EntryStore` is the single owner of the ordered `TrailEntry` collection.
Every mutation goes through it and is followed by a full save through the
injected repository. Lookups by an unknown id are silent no-ops so that stale
selections never raise.

The store assumes a single writer; it does no locking.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from datetime import datetime

from loguru import logger

from trailcam_journal.core.models import FinalizeResult, ImportedPhoto, TrailEntry
from trailcam_journal.core.services.interfaces import EntryRepository, PhotoCleanup

EntryMutation = Callable[[TrailEntry], None]


class EntryStore:
    """Owns the entry collection (newest first) and persists every change."""

    def __init__(self, repo: EntryRepository, cleanup: PhotoCleanup | None = None) -> None:
        """Create the store and load the persisted collection.

        Args:
            repo: Repository with `load_all()` and `save_all(entries)`.
            cleanup: Optional collaborator removing locally stored photos of
                deleted entries.
        """
        self._repo = repo
        self._cleanup = cleanup
        self._entries: list[TrailEntry] = []
        self.load()

    # ----- reading -----

    def load(self) -> None:
        """Replace the in-memory collection with the repository contents."""
        try:
            self._entries = list(self._repo.load_all())
        except (OSError, ValueError) as ex:
            logger.error("Failed to load saved entries: {}", ex)
            self._entries = []
            return
        logger.info("Loaded {} entries ({} drafts)", len(self._entries), len(self.drafts))

    @property
    def entries(self) -> list[TrailEntry]:
        """Snapshot of the collection in stored order."""
        return list(self._entries)

    @property
    def drafts(self) -> list[TrailEntry]:
        return [e for e in self._entries if e.is_draft]

    @property
    def finalized(self) -> list[TrailEntry]:
        return [e for e in self._entries if not e.is_draft]

    def get(self, entry_id: str) -> TrailEntry | None:
        """Return the first entry with `entry_id`, or None."""
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TrailEntry]:
        return iter(list(self._entries))

    def __contains__(self, entry_id: object) -> bool:
        return any(e.id == entry_id for e in self._entries)

    # ----- creation -----

    def insert_draft(self, entry: TrailEntry) -> None:
        """Insert a draft at the front of the collection and save."""
        self._insert(entry)
        self._save()

    def create_draft(self, imported: ImportedPhoto, now: datetime | None = None) -> TrailEntry:
        """Wrap one imported photo into a new draft, insert it and save."""
        entry = self._draft_from_import(imported, now)
        self.insert_draft(entry)
        return entry

    def import_photos(
        self, photos: Iterable[ImportedPhoto], now: datetime | None = None
    ) -> list[TrailEntry]:
        """Create one draft per imported photo, saving once at the end.

        Each draft goes to the front, so the last imported photo ends up first.
        """
        created: list[TrailEntry] = []
        for imported in photos:
            entry = self._draft_from_import(imported, now)
            self._insert(entry)
            created.append(entry)
        if created:
            logger.info("Imported {} photo(s) as drafts", len(created))
            self._save()
        return created

    # ----- updating -----

    def update(self, entry_id: str, mutation: EntryMutation) -> bool:
        """Apply `mutation` to the entry with `entry_id` and save.

        Returns:
            True if the entry existed; False (and nothing saved) otherwise.
        """
        entry = self.get(entry_id)
        if entry is None:
            logger.debug("Update skipped, entry not found: {}", entry_id)
            return False
        mutation(entry)
        self._save()
        return True

    def update_many(self, entry_ids: Iterable[str], mutation: EntryMutation) -> int:
        """Apply `mutation` to every present entry whose id is in `entry_ids`.

        Unknown ids are skipped. The collection is saved once if anything changed.

        Returns:
            Number of entries mutated.
        """
        wanted = set(entry_ids)
        if not wanted:
            return 0
        count = 0
        for entry in self._entries:
            if entry.id in wanted:
                mutation(entry)
                count += 1
        if count:
            self._save()
        return count

    def finalize(self, entry_ids: Iterable[str]) -> FinalizeResult:
        """Move every finalizable entry among `entry_ids` out of the draft state.

        Entries failing `can_finalize` are left untouched and counted as
        skipped. Ids not in the collection are not counted at all.
        """
        wanted = set(entry_ids)
        finalized = 0
        skipped = 0
        for entry in self._entries:
            if entry.id not in wanted:
                continue
            if entry.can_finalize:
                entry.is_draft = False
                finalized += 1
            else:
                skipped += 1
        if finalized:
            self._save()
        logger.info("Finalize: {} finalized, {} skipped", finalized, skipped)
        return FinalizeResult(finalized=finalized, skipped=skipped)

    # ----- deletion -----

    def delete_entry(self, entry_id: str) -> None:
        """Remove the entry with `entry_id` (no-op if absent)."""
        for idx, entry in enumerate(self._entries):
            if entry.id == entry_id:
                self._cleanup_entries([entry])
                del self._entries[idx]
                self._save()
                return

    def delete_entries(self, entry_ids: Iterable[str]) -> None:
        """Remove every entry whose id is in `entry_ids`; unknown ids are ignored."""
        ids = set(entry_ids)
        if not ids:
            return
        self._remove_where(lambda e: e.id in ids)

    def delete_all_drafts(self) -> None:
        """Remove every draft; finalized entries are untouched."""
        self._remove_where(lambda e: e.is_draft)

    def delete_all_entries(self) -> None:
        self._remove_where(lambda e: True)

    # ----- internals -----

    def _remove_where(self, predicate: Callable[[TrailEntry], bool]) -> None:
        doomed = [e for e in self._entries if predicate(e)]
        if not doomed:
            return
        self._cleanup_entries(doomed)
        self._entries = [e for e in self._entries if not predicate(e)]
        logger.info("Deleted {} entries", len(doomed))
        self._save()

    def _insert(self, entry: TrailEntry) -> None:
        if not entry.id:
            raise ValueError("Entry must have an id")
        if not entry.is_draft:
            raise ValueError(f"Only drafts can be inserted, got finalized entry {entry.id}")
        self._entries.insert(0, entry)

    @staticmethod
    def _draft_from_import(imported: ImportedPhoto, now: datetime | None) -> TrailEntry:
        return TrailEntry(
            date=imported.captured_at or now or datetime.now(),
            photo_filename=imported.stored_filename,
            photo_asset_id=imported.external_asset_id,
            coordinate=imported.coordinate,
            original_filename=imported.source_filename,
            is_draft=True,
        )

    def _cleanup_entries(self, entries: Iterable[TrailEntry]) -> None:
        if self._cleanup is None:
            return
        filenames = [e.photo_filename for e in entries if e.photo_filename]
        if not filenames:
            return
        result = self._cleanup.remove_photos(filenames)
        if result.failed:
            logger.warning("{} photo file(s) could not be removed", len(result.failed))

    def _save(self) -> None:
        try:
            self._repo.save_all(self._entries)
        except (OSError, ValueError) as ex:
            logger.error("Failed to save entries: {}", ex)
