"""Shared test fixtures."""

from __future__ import annotations

import copy
from datetime import datetime

from loguru import logger
import pytest

from trailcam_journal.core.models import Coordinate, TrailEntry
from trailcam_journal.core.services.entry_store import EntryStore
from trailcam_journal.core.services.interfaces import CleanupResult


class MemoryEntryRepository:
    """In-memory repository recording every save."""

    def __init__(self, entries=None, fail_save: bool = False, fail_load: bool = False) -> None:
        self.stored = list(entries or [])
        self.saves = 0
        self.fail_save = fail_save
        self.fail_load = fail_load

    def load_all(self):
        if self.fail_load:
            raise ValueError("corrupt data")
        return [copy.deepcopy(e) for e in self.stored]

    def save_all(self, entries):
        if self.fail_save:
            raise OSError("disk full")
        self.saves += 1
        self.stored = [copy.deepcopy(e) for e in entries]


class RecordingCleanup:
    def __init__(self) -> None:
        self.removed: list[str] = []

    def remove_photos(self, filenames):
        names = list(filenames)
        self.removed.extend(names)
        return CleanupResult(removed=names)


@pytest.fixture
def make_entry():
    """Factory fixture for TrailEntry with overrides."""

    def _make(**overrides):
        defaults = dict(
            date=datetime(2024, 5, 1, 21, 15),
            species=None,
            camera=None,
            coordinate=None,
            location_unknown=False,
            is_draft=True,
        )
        if "lat" in overrides or "lon" in overrides:
            overrides["coordinate"] = Coordinate(overrides.pop("lat"), overrides.pop("lon"))
        defaults.update(overrides)
        return TrailEntry(**defaults)

    return _make


@pytest.fixture
def make_repo():
    """Factory for in-memory repositories."""
    return MemoryEntryRepository


@pytest.fixture
def repo() -> MemoryEntryRepository:
    return MemoryEntryRepository()


@pytest.fixture
def cleanup() -> RecordingCleanup:
    return RecordingCleanup()


@pytest.fixture
def store(repo, cleanup) -> EntryStore:
    return EntryStore(repo, cleanup)


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
