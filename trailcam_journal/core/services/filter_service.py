"""Draft filter predicates used by the review queue.

Filters are evaluated fresh on every call and never stored on the entries.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from trailcam_journal.core.models import DraftFilter, TrailEntry

_PREDICATES: dict[DraftFilter, Callable[[TrailEntry], bool]] = {
    DraftFilter.ALL: lambda e: True,
    DraftFilter.MISSING_SPECIES: lambda e: not e.has_species,
    DraftFilter.MISSING_LOCATION: lambda e: not e.has_location,
    DraftFilter.HAS_GPS: lambda e: e.coordinate is not None,
    DraftFilter.NO_GPS: lambda e: e.coordinate is None,
}


def matches(entry: TrailEntry, draft_filter: DraftFilter) -> bool:
    """Return True if `entry` belongs to the `draft_filter` partition."""
    return _PREDICATES[draft_filter](entry)


def filter_drafts(entries: Iterable[TrailEntry], draft_filter: DraftFilter) -> list[TrailEntry]:
    """Return drafts from `entries` matching `draft_filter`, keeping their order."""
    return [e for e in entries if e.is_draft and matches(e, draft_filter)]


def draft_status(entry: TrailEntry) -> str:
    """Short status line for a draft row."""
    if not entry.has_species:
        return "Missing species"
    if entry.has_location:
        return "Ready to finalize"
    return "Missing location"
