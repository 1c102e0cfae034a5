"""Tests for saved-location matching, labels and the pin store."""

from datetime import datetime

import pytest

from trailcam_journal.core.models import Coordinate, SavedLocation, TrailEntry
from trailcam_journal.core.services.location_service import (
    SavedLocationStore,
    distance_meters,
    find_near_duplicate,
    location_label,
    match_saved_location,
    suggest_location_name,
)
from trailcam_journal.infrastructure.csv_repository import CsvSavedLocationRepository

PIN = SavedLocation(name="Bekken", latitude=60.12344, longitude=10.98761)


def _entry(**kwargs):
    return TrailEntry(date=datetime(2024, 2, 3, 4, 5), **kwargs)


class TestMatching:
    def test_matches_at_four_decimals(self):
        assert match_saved_location(Coordinate(60.123441, 10.987609), [PIN]) is PIN

    def test_no_match_when_fourth_decimal_differs(self):
        assert match_saved_location(Coordinate(60.1236, 10.98761), [PIN]) is None

    def test_distance(self):
        one_degree = distance_meters(Coordinate(0.0, 0.0), Coordinate(1.0, 0.0))
        assert one_degree == pytest.approx(111_195, rel=1e-3)
        assert distance_meters(PIN.coordinate, PIN.coordinate) == 0.0

    def test_near_duplicate_radius(self):
        near = Coordinate(PIN.latitude + 0.0001, PIN.longitude)  # ~11m
        far = Coordinate(PIN.latitude + 0.001, PIN.longitude)  # ~111m
        assert find_near_duplicate(near, [PIN]) is PIN
        assert find_near_duplicate(far, [PIN]) is None


class TestLabels:
    def test_unknown_wins_over_coordinate(self):
        entry = _entry(location_unknown=True, coordinate=PIN.coordinate)
        assert location_label(entry, [PIN]) == "Unknown location"

    def test_no_location(self):
        assert location_label(_entry(), [PIN]) == "No location"

    def test_saved_name(self):
        entry = _entry(coordinate=Coordinate(60.12344, 10.98761))
        assert location_label(entry, [PIN]) == "Bekken"

    def test_raw_coordinate(self):
        entry = _entry(coordinate=Coordinate(59.9, -3.123456))
        assert location_label(entry, [PIN]) == "59.9000, -3.1235"

    def test_suggested_name(self):
        assert suggest_location_name(_entry(species=" Elg ")) == "Elg"
        assert suggest_location_name(_entry()) == "Location 03 Feb 2024"


class TestSavedLocationStore:
    @pytest.fixture
    def pins(self, tmp_path):
        return SavedLocationStore(CsvSavedLocationRepository(tmp_path / "pins.csv"))

    def test_add_persists_newest_first(self, pins, tmp_path):
        first = pins.add(SavedLocation(name=" Bekken ", latitude=60.0, longitude=10.0))
        second = pins.add(SavedLocation(name="Myra", latitude=61.0, longitude=11.0))
        assert first.name == "Bekken"
        reloaded = SavedLocationStore(CsvSavedLocationRepository(tmp_path / "pins.csv"))
        assert [p.id for p in reloaded.locations] == [second.id, first.id]

    def test_add_returns_existing_nearby_pin(self, pins):
        first = pins.add(SavedLocation(name="Bekken", latitude=60.0, longitude=10.0))
        again = pins.add(SavedLocation(name="Other", latitude=60.0001, longitude=10.0))
        assert again is first
        assert len(pins) == 1

    def test_blank_name_rejected(self, pins):
        with pytest.raises(ValueError):
            pins.add(SavedLocation(name="  ", latitude=60.0, longitude=10.0))

    def test_remove_and_clear(self, pins):
        a = pins.add(SavedLocation(name="A", latitude=60.0, longitude=10.0))
        pins.add(SavedLocation(name="B", latitude=61.0, longitude=10.0))
        pins.remove("unknown")
        assert len(pins) == 2
        pins.remove(a.id)
        assert pins.get(a.id) is None
        pins.clear_all()
        assert len(pins) == 0

    def test_label_for(self, pins):
        pin = pins.add(SavedLocation(name="Bekken", latitude=60.0, longitude=10.0))
        assert pins.label_for(_entry(coordinate=pin.coordinate)) == "Bekken"
