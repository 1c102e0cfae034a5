"""Tests for batch field edits."""

import pytest

from trailcam_journal.core.models import Coordinate, LocationMode, TagMode
from trailcam_journal.core.services.batch_service import (
    BatchEditService,
    merge_tags,
    normalize_camera,
    parse_tags,
)
from trailcam_journal.core.services.interfaces import BatchValidationError


@pytest.fixture
def batch(store):
    return BatchEditService(store)


@pytest.fixture
def drafts(store, make_entry):
    entries = [
        make_entry(lat=63.4, lon=10.4, tags=["a", "b"]),
        make_entry(location_unknown=True),
        make_entry(),
    ]
    for e in entries:
        store.insert_draft(e)
    return entries


class TestParseTags:
    def test_splits_trims_and_drops_empty(self):
        assert parse_tags(" jerv, natt ,, snø ,") == ["jerv", "natt", "snø"]

    def test_blank_input(self):
        assert parse_tags("  , ,") == []

    def test_merge_add_and_replace(self):
        assert merge_tags(["a", "b"], ["b", "c"], TagMode.ADD) == ["a", "b", "c"]
        assert merge_tags(["a", "b"], ["c", "b", "c"], TagMode.REPLACE) == ["b", "c"]


class TestSpecies:
    def test_sets_species_on_selection(self, batch, store, drafts):
        count = batch.set_species({drafts[0].id, drafts[1].id}, "Elg")
        assert count == 2
        assert store.get(drafts[0].id).species == "Elg"
        assert store.get(drafts[1].id).species == "Elg"
        assert store.get(drafts[2].id).species is None

    @pytest.mark.parametrize("value", ["", "   "])
    def test_empty_species_rejected_before_mutation(self, batch, store, repo, drafts, value):
        saves = repo.saves
        with pytest.raises(BatchValidationError):
            batch.set_species({d.id for d in drafts}, value)
        assert all(e.species is None for e in store.entries)
        assert repo.saves == saves


class TestLocation:
    def test_mark_unknown_overrides_any_prior_state(self, batch, store, drafts):
        batch.mark_location_unknown({d.id for d in drafts})
        for d in drafts:
            entry = store.get(d.id)
            assert entry.location_unknown is True
            assert entry.latitude is None and entry.longitude is None

    def test_explicit_coordinate_sets_pair_and_clears_unknown(self, batch, store, drafts):
        batch.set_coordinate({drafts[1].id}, 60.1, 11.2)
        entry = store.get(drafts[1].id)
        assert entry.location_unknown is False
        assert entry.coordinate == Coordinate(60.1, 11.2)

    def test_clear_differs_from_unknown(self, batch, store, drafts):
        batch.clear_location({drafts[0].id, drafts[1].id})
        for d in drafts[:2]:
            entry = store.get(d.id)
            assert entry.location_unknown is False
            assert entry.coordinate is None
            assert not entry.can_finalize

    def test_coordinate_mode_requires_coordinate(self, batch, drafts):
        with pytest.raises(BatchValidationError):
            batch.set_location({drafts[0].id}, LocationMode.COORDINATE)


class TestCamera:
    def test_trims_camera(self, batch, store, drafts):
        batch.set_camera({drafts[0].id}, "  Browning ")
        assert store.get(drafts[0].id).camera == "Browning"

    def test_blank_camera_becomes_none(self, batch, store, drafts):
        batch.set_camera({drafts[0].id}, "Zeiss")
        batch.set_camera({drafts[0].id}, "   ")
        assert store.get(drafts[0].id).camera is None

    def test_normalize_camera(self):
        assert normalize_camera(None) is None
        assert normalize_camera(" Reolink") == "Reolink"


class TestTags:
    def test_add_unions_with_existing(self, batch, store, drafts):
        batch.set_tags({drafts[0].id}, "b, c", TagMode.ADD)
        assert store.get(drafts[0].id).tags == ["a", "b", "c"]

    def test_replace_discards_existing(self, batch, store, drafts):
        batch.set_tags({drafts[0].id}, "c, b, c", TagMode.REPLACE)
        assert store.get(drafts[0].id).tags == ["b", "c"]

    def test_empty_tag_input_rejected(self, batch, drafts):
        with pytest.raises(BatchValidationError):
            batch.set_tags({drafts[0].id}, " , ")


class TestSelectionEdges:
    def test_empty_selection_is_noop(self, batch, store, repo, drafts):
        saves = repo.saves
        assert batch.set_species(set(), "Elg") == 0
        assert batch.mark_location_unknown([]) == 0
        assert repo.saves == saves

    def test_stale_ids_are_skipped(self, batch, store, drafts):
        store.delete_entry(drafts[2].id)
        count = batch.set_camera({drafts[0].id, drafts[2].id}, "Zeiss")
        assert count == 1
        assert store.get(drafts[0].id).camera == "Zeiss"
