"""Statistics over finalized entries.

All helpers are pure: they take a list of entries (normally already narrowed
by `filter_final_entries`) and a reference `now`, and never touch the store.
Datetimes are naive local times, matching how entries are stored.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
import enum

from trailcam_journal.core.catalog import species_by_name
from trailcam_journal.core.models import TrailEntry

DAY_START_HOUR = 6
NIGHT_START_HOUR = 18


class StatsTimeframe(enum.Enum):
    LAST_7 = "Last 7 days"
    LAST_30 = "Last 30 days"
    THIS_YEAR = "This year"
    ALL_TIME = "All time"

    def start_date(self, now: datetime | None = None) -> datetime | None:
        """Lower bound used for filtering; None means no lower bound."""
        now = now or datetime.now()
        midnight = datetime.combine(now.date(), datetime.min.time())
        if self is StatsTimeframe.LAST_7:
            return midnight - timedelta(days=6)
        if self is StatsTimeframe.LAST_30:
            return midnight - timedelta(days=29)
        if self is StatsTimeframe.THIS_YEAR:
            return datetime(now.year, 1, 1)
        return None


@dataclass(frozen=True)
class StatsMetric:
    entries: int
    active_days: int
    unique_species: int
    unique_locations: int
    unique_cameras: int


@dataclass(frozen=True)
class BarPoint:
    """One bucket of a trend chart, keyed by the bucket's first day."""

    date: date
    count: int


@dataclass(frozen=True)
class RankedCount:
    name: str
    count: int


def _clean(value: str | None) -> str:
    return (value or "").strip()


def filter_final_entries(
    entries: Iterable[TrailEntry],
    timeframe: StatsTimeframe,
    camera: str | None = None,
    now: datetime | None = None,
) -> list[TrailEntry]:
    """Drop drafts, then keep entries matching `camera` (if given) inside `timeframe`."""
    result = [e for e in entries if not e.is_draft]
    if camera:
        result = [e for e in result if (e.camera or "") == camera]
    start = timeframe.start_date(now)
    if start is None:
        return result
    return [e for e in result if e.date >= start]


def metrics(entries: list[TrailEntry]) -> StatsMetric:
    """Overview counters. Locations are GPS only, rounded to ~100m."""
    species = {_clean(e.species) for e in entries} - {""}
    cameras = {_clean(e.camera) for e in entries} - {""}
    locations = {e.coordinate.rounded(3) for e in entries if e.coordinate is not None}
    return StatsMetric(
        entries=len(entries),
        active_days=len({e.date.date() for e in entries}),
        unique_species=len(species),
        unique_locations=len(locations),
        unique_cameras=len(cameras),
    )


# ----- trends -----


def start_of_week(day: date) -> date:
    """Monday of the week containing `day`."""
    return day - timedelta(days=day.weekday())


def _bucketed(
    entries: Iterable[TrailEntry],
    key: Callable[[TrailEntry], date],
    unique_species: bool,
) -> dict[date, int]:
    if not unique_species:
        return Counter(key(e) for e in entries)
    seen: dict[date, set[str]] = defaultdict(set)
    for e in entries:
        name = _clean(e.species)
        if name:
            seen[key(e)].add(name)
    return {k: len(v) for k, v in seen.items()}


def daily_counts(
    last_days: int,
    entries: Iterable[TrailEntry],
    now: datetime | None = None,
    unique_species: bool = False,
) -> list[BarPoint]:
    """One bucket per day for the `last_days` days ending today."""
    end = (now or datetime.now()).date()
    start = end - timedelta(days=last_days - 1)
    by_day = _bucketed(entries, lambda e: e.date.date(), unique_species)
    days = (start + timedelta(days=offset) for offset in range(last_days))
    return [BarPoint(d, by_day.get(d, 0)) for d in days]


def weekly_counts(
    last_weeks: int, entries: Iterable[TrailEntry], now: datetime | None = None
) -> list[BarPoint]:
    """One bucket per week (Monday start) for the `last_weeks` weeks ending this week."""
    end = start_of_week((now or datetime.now()).date())
    start = end - timedelta(weeks=last_weeks - 1)
    by_week = _bucketed(entries, lambda e: start_of_week(e.date.date()), False)
    weeks = (start + timedelta(weeks=offset) for offset in range(last_weeks))
    return [BarPoint(w, by_week.get(w, 0)) for w in weeks]


def monthly_counts(
    year: int, entries: Iterable[TrailEntry], unique_species: bool = False
) -> list[BarPoint]:
    """Twelve buckets, January to December of `year`."""
    by_month = _bucketed(entries, lambda e: date(e.date.year, e.date.month, 1), unique_species)
    months = (date(year, m, 1) for m in range(1, 13))
    return [BarPoint(m, by_month.get(m, 0)) for m in months]


def unique_species_daily_counts(
    last_days: int, entries: Iterable[TrailEntry], now: datetime | None = None
) -> list[BarPoint]:
    return daily_counts(last_days, entries, now, unique_species=True)


def unique_species_monthly_counts(year: int, entries: Iterable[TrailEntry]) -> list[BarPoint]:
    return monthly_counts(year, entries, unique_species=True)


# ----- rankings -----


def _ranking(values: Iterable[str | None], limit: int | None = None) -> list[RankedCount]:
    counts = Counter(v for v in (_clean(x) for x in values) if v)
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    if limit is not None:
        ranked = ranked[:limit]
    return [RankedCount(name, count) for name, count in ranked]


def species_ranking(entries: Iterable[TrailEntry], limit: int | None = None) -> list[RankedCount]:
    """Species by number of entries, most seen first (ties by name)."""
    return _ranking((e.species for e in entries), limit)


def top_species(entries: Iterable[TrailEntry], limit: int = 5) -> list[RankedCount]:
    return species_ranking(entries, limit)


def camera_ranking(entries: Iterable[TrailEntry], limit: int | None = None) -> list[RankedCount]:
    return _ranking((e.camera for e in entries), limit)


def top_cameras(entries: Iterable[TrailEntry], limit: int = 3) -> list[RankedCount]:
    return camera_ranking(entries, limit)


# ----- time of day -----


def hour_histogram(entries: Iterable[TrailEntry]) -> list[int]:
    """Always 24 buckets, index = hour of capture."""
    buckets = [0] * 24
    for e in entries:
        buckets[e.date.hour] += 1
    return buckets


def day_night_counts(entries: Iterable[TrailEntry]) -> tuple[int, int]:
    """Return (day, night) where day is 06:00-17:59."""
    day = night = 0
    for e in entries:
        if DAY_START_HOUR <= e.date.hour < NIGHT_START_HOUR:
            day += 1
        else:
            night += 1
    return day, night


# ----- bucket list -----


def first_sightings(entries: Iterable[TrailEntry]) -> dict[str, datetime]:
    """Catalog species id -> earliest finalized sighting. Computed, never stored."""
    first: dict[str, datetime] = {}
    for e in entries:
        if e.is_draft:
            continue
        species = species_by_name(e.species)
        if species is None:
            continue
        current = first.get(species.id)
        if current is None or e.date < current:
            first[species.id] = e.date
    return first
