"""Core service interfaces and shared data structures.

The entry store depends only on these protocols so that persistence and
photo cleanup can be swapped (CSV files, in-memory fakes in tests, ...).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from trailcam_journal.core.models import SavedLocation, TrailEntry


class BatchValidationError(ValueError):
    """A batch request was rejected before any entry was touched."""


@dataclass
class CleanupResult:
    """Outcome of a photo cleanup pass.

    Attributes:
        removed: Filenames successfully removed.
        failed: Tuples of (filename, reason) for failures.
    """

    removed: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)


class EntryRepository(Protocol):
    """Durable storage for the whole entry collection."""

    def load_all(self) -> list[TrailEntry]:
        """Return every stored entry in collection order."""
        raise NotImplementedError

    def save_all(self, entries: Iterable[TrailEntry]) -> None:
        """Replace the stored collection with `entries`. May raise OSError."""
        raise NotImplementedError


class SavedLocationRepository(Protocol):
    """Durable storage for saved locations."""

    def load_all(self) -> list[SavedLocation]:
        raise NotImplementedError

    def save_all(self, locations: Iterable[SavedLocation]) -> None:
        raise NotImplementedError


class PhotoCleanup(Protocol):
    """Best-effort removal of locally stored photo files."""

    def remove_photos(self, filenames: Iterable[str]) -> CleanupResult:
        """Remove each file, never raising; failures are reported in the result."""
        raise NotImplementedError
