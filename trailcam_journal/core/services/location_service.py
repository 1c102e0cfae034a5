"""Saved locations: matching, labels and the persisted pin list."""

from __future__ import annotations

from collections.abc import Iterable
import math

from loguru import logger

from trailcam_journal.core.models import Coordinate, SavedLocation, TrailEntry
from trailcam_journal.core.services.interfaces import SavedLocationRepository

EARTH_RADIUS_M = 6_371_000.0
DUPLICATE_RADIUS_M = 25.0
LABEL_PRECISION = 4  # decimals, ~11m


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Great-circle (haversine) distance between `a` and `b` in meters."""
    lat1, lon1 = math.radians(a.latitude), math.radians(a.longitude)
    lat2, lon2 = math.radians(b.latitude), math.radians(b.longitude)
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(h))


def match_saved_location(
    coordinate: Coordinate, locations: Iterable[SavedLocation]
) -> SavedLocation | None:
    """Return the first saved location equal to `coordinate` at 4 decimals."""
    key = coordinate.rounded(LABEL_PRECISION)
    for loc in locations:
        if loc.coordinate.rounded(LABEL_PRECISION) == key:
            return loc
    return None


def find_near_duplicate(
    coordinate: Coordinate,
    locations: Iterable[SavedLocation],
    radius_m: float = DUPLICATE_RADIUS_M,
) -> SavedLocation | None:
    """Return the first saved location closer than `radius_m` to `coordinate`."""
    for loc in locations:
        if distance_meters(loc.coordinate, coordinate) < radius_m:
            return loc
    return None


def location_label(entry: TrailEntry, locations: Iterable[SavedLocation]) -> str:
    """Human readable location for `entry`."""
    if entry.location_unknown:
        return "Unknown location"
    if entry.coordinate is None:
        return "No location"
    match = match_saved_location(entry.coordinate, locations)
    if match is not None:
        return match.name
    return f"{entry.coordinate.latitude:.4f}, {entry.coordinate.longitude:.4f}"


def suggest_location_name(entry: TrailEntry) -> str:
    """Default name offered when pinning an entry's coordinate."""
    species = (entry.species or "").strip()
    if species:
        return species
    return f"Location {entry.date.strftime('%d %b %Y')}"


class SavedLocationStore:
    """Owns the saved-location list (newest first) and persists every change."""

    def __init__(self, repo: SavedLocationRepository) -> None:
        self._repo = repo
        self._locations: list[SavedLocation] = []
        try:
            self._locations = list(self._repo.load_all())
        except (OSError, ValueError) as ex:
            logger.error("Failed to load saved locations: {}", ex)

    @property
    def locations(self) -> list[SavedLocation]:
        return list(self._locations)

    def __len__(self) -> int:
        return len(self._locations)

    def get(self, location_id: str) -> SavedLocation | None:
        return next((loc for loc in self._locations if loc.id == location_id), None)

    def add(self, location: SavedLocation) -> SavedLocation:
        """Pin `location` unless another pin lies within 25m.

        Returns:
            `location` when stored, otherwise the existing nearby pin.

        Raises:
            ValueError: If the name is blank.
        """
        name = location.name.strip()
        if not name:
            raise ValueError("Saved location name must not be empty")
        existing = find_near_duplicate(location.coordinate, self._locations)
        if existing is not None:
            logger.info("Not saving '{}': '{}' is already saved nearby", name, existing.name)
            return existing
        location.name = name
        self._locations.insert(0, location)
        self._save()
        return location

    def remove(self, location_id: str) -> None:
        before = len(self._locations)
        self._locations = [loc for loc in self._locations if loc.id != location_id]
        if len(self._locations) != before:
            self._save()

    def clear_all(self) -> None:
        self._locations.clear()
        self._save()

    def label_for(self, entry: TrailEntry) -> str:
        return location_label(entry, self._locations)

    def _save(self) -> None:
        try:
            self._repo.save_all(self._locations)
        except (OSError, ValueError) as ex:
            logger.error("Failed to save saved locations: {}", ex)
