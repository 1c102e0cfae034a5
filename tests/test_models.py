"""Tests for the record model."""

from datetime import datetime
import itertools

import pytest

from trailcam_journal.core.models import Coordinate, FinalizeResult, TrailEntry


@pytest.mark.parametrize(
    "species,unknown,coordinate",
    list(itertools.product(["Elg", None], [True, False], [Coordinate(63.4, 10.4), None])),
)
def test_can_finalize_truth_table(species, unknown, coordinate):
    entry = TrailEntry(
        date=datetime(2024, 1, 1),
        species=species,
        location_unknown=unknown,
        coordinate=coordinate,
    )
    expected = species is not None and (unknown or coordinate is not None)
    assert entry.can_finalize is expected


def test_empty_species_is_missing():
    entry = TrailEntry(date=datetime(2024, 1, 1), species="", location_unknown=True)
    assert not entry.can_finalize


def test_can_finalize_follows_field_changes():
    entry = TrailEntry(date=datetime(2024, 1, 1))
    assert not entry.can_finalize
    entry.species = "Elg"
    entry.location_unknown = True
    assert entry.can_finalize
    entry.species = None
    assert not entry.can_finalize


def test_equality_is_by_id_only():
    a = TrailEntry(date=datetime(2024, 1, 1), species="Elg")
    b = TrailEntry(date=datetime(2025, 1, 1), species="Ulv", id=a.id)
    c = TrailEntry(date=datetime(2024, 1, 1), species="Elg")
    assert a == b
    assert a != c
    assert len({a, b, c}) == 2


def test_new_entries_get_unique_ids_and_defaults():
    a = TrailEntry(date=datetime(2024, 1, 1))
    b = TrailEntry(date=datetime(2024, 1, 1))
    assert a.id and b.id and a.id != b.id
    assert a.notes == ""
    assert a.tags == []
    assert a.is_draft
    assert a.latitude is None and a.longitude is None


def test_photo_reference_prefers_local_file():
    entry = TrailEntry(date=datetime(2024, 1, 1), photo_filename="x.jpg", photo_asset_id="asset")
    assert entry.photo_reference == "x.jpg"
    entry.photo_filename = None
    assert entry.photo_reference == "asset"
    entry.photo_asset_id = None
    assert entry.photo_reference is None


def test_coordinate_rounding():
    assert Coordinate(63.123449, 10.987651).rounded() == (63.1234, 10.9877)


class TestFinalizeResult:
    def test_message_with_skips(self):
        assert FinalizeResult(3, 2).message == (
            "Finalized 3. Skipped 2 because required fields are missing."
        )

    def test_message_without_skips(self):
        assert FinalizeResult(4, 0).message == "Finalized 4."
