"""Tests for the finalized entries view-model."""

from datetime import datetime

import pytest

from trailcam_journal.app.viewmodels.entries_vm import EntriesVM, EntryEdit
from trailcam_journal.core.catalog import UNKNOWN_CAMERA
from trailcam_journal.core.models import Coordinate
from trailcam_journal.core.services.location_service import SavedLocationStore
from trailcam_journal.infrastructure.csv_repository import CsvSavedLocationRepository


@pytest.fixture
def pins(tmp_path):
    return SavedLocationStore(CsvSavedLocationRepository(tmp_path / "pins.csv"))


@pytest.fixture
def vm(store, pins):
    return EntriesVM(store, pins)


@pytest.fixture
def finalized(store, make_entry):
    older = make_entry(
        date=datetime(2024, 1, 1, 3, 0), species="Gaupe", camera="Zeiss", lat=60.0, lon=10.0
    )
    newer = make_entry(
        date=datetime(2024, 2, 1, 3, 0), species="Elg", notes="by the salt lick", location_unknown=True
    )
    for e in (older, newer):
        store.insert_draft(e)
    store.finalize({older.id, newer.id})
    store.insert_draft(make_entry(species="Elg"))
    return older, newer


def test_finalized_newest_first(vm, finalized):
    older, newer = finalized
    assert [e.id for e in vm.finalized_entries()] == [newer.id, older.id]


def test_search(vm, pins, finalized):
    older, newer = finalized
    assert [e.id for e in vm.search("ZEISS")] == [older.id]
    assert [e.id for e in vm.search("salt")] == [newer.id]
    assert [e.id for e in vm.search("unknown location")] == [newer.id]
    assert len(vm.search("  ")) == 2

    vm.pin_location(older.id, "Myra")
    assert [e.id for e in vm.search("myra")] == [older.id]


def test_save_edit(vm, store, finalized):
    older, _ = finalized
    edit = EntryEdit.from_entry(store.get(older.id))
    assert edit.tags_text == "" and edit.latitude == 60.0
    edit.species = " Jerv "
    edit.camera = UNKNOWN_CAMERA
    edit.tags_text = "natt, snø"
    edit.latitude = 61.5
    assert vm.save_edit(older.id, edit)

    entry = store.get(older.id)
    assert entry.species == "Jerv"
    assert entry.camera is None
    assert entry.tags == ["natt", "snø"]
    assert entry.coordinate == Coordinate(61.5, 10.0)


def test_save_edit_location_unknown_drops_coordinate(vm, store, finalized):
    older, _ = finalized
    edit = EntryEdit.from_entry(store.get(older.id))
    edit.location_unknown = True
    vm.save_edit(older.id, edit)
    entry = store.get(older.id)
    assert entry.location_unknown and entry.coordinate is None


def test_save_edit_unknown_id(vm):
    assert vm.save_edit("missing", EntryEdit(date=datetime(2024, 1, 1))) is False


def test_redraft(vm, store, finalized):
    older, _ = finalized
    assert vm.redraft(older.id)
    assert store.get(older.id).is_draft


def test_pin_location(vm, pins, finalized):
    older, newer = finalized
    pin = vm.pin_location(older.id)
    assert pin.name == "Gaupe"
    assert vm.location_label(older) == "Gaupe"
    assert vm.pin_location(older.id, "Again") is pin
    assert vm.pin_location(newer.id) is None
    assert len(pins) == 1


def test_delete(vm, store, finalized):
    older, _ = finalized
    vm.delete(older.id)
    assert store.get(older.id) is None
