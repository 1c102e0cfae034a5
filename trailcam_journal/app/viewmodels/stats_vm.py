"""ViewModel bundling the statistics shown on the stats screen."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from trailcam_journal.core.services import stats_service as stats
from trailcam_journal.core.services.entry_store import EntryStore
from trailcam_journal.core.services.stats_service import (
    BarPoint,
    RankedCount,
    StatsMetric,
    StatsTimeframe,
)


@dataclass(frozen=True)
class StatsSummary:
    timeframe: StatsTimeframe
    camera: str | None
    metric: StatsMetric
    trend: list[BarPoint]
    top_species: list[RankedCount]
    top_cameras: list[RankedCount]
    hours: list[int]
    day: int
    night: int


class StatsVM:
    """Computes a `StatsSummary` for a timeframe and optional camera."""

    def __init__(self, store: EntryStore) -> None:
        self._store = store

    def summary(
        self,
        timeframe: StatsTimeframe = StatsTimeframe.LAST_30,
        camera: str | None = None,
        now: datetime | None = None,
    ) -> StatsSummary:
        now = now or datetime.now()
        entries = stats.filter_final_entries(self._store.entries, timeframe, camera, now)
        if timeframe is StatsTimeframe.LAST_7:
            trend = stats.daily_counts(7, entries, now)
        elif timeframe is StatsTimeframe.LAST_30:
            trend = stats.daily_counts(30, entries, now)
        elif timeframe is StatsTimeframe.THIS_YEAR:
            trend = stats.monthly_counts(now.year, entries)
        else:
            trend = stats.weekly_counts(12, entries, now)
        day, night = stats.day_night_counts(entries)
        return StatsSummary(
            timeframe=timeframe,
            camera=camera,
            metric=stats.metrics(entries),
            trend=trend,
            top_species=stats.top_species(entries),
            top_cameras=stats.top_cameras(entries),
            hours=stats.hour_histogram(entries),
            day=day,
            night=night,
        )

    def first_sightings(self) -> dict[str, datetime]:
        return stats.first_sightings(self._store.entries)
