"""Tests for photo cleanup."""

import pytest

from trailcam_journal.infrastructure import delete_service
from trailcam_journal.infrastructure.delete_service import PhotoCleanupService


@pytest.fixture
def photos(tmp_path):
    d = tmp_path / "photos"
    d.mkdir()
    (d / "a.jpg").write_bytes(b"a")
    (d / "b.jpg").write_bytes(b"b")
    return d


def test_permanent_delete(photos):
    result = PhotoCleanupService(photos, use_trash=False).remove_photos(["a.jpg", "gone.jpg"])
    assert result.removed == ["a.jpg"]
    assert result.failed == [("gone.jpg", "File does not exist")]
    assert not (photos / "a.jpg").exists()
    assert (photos / "b.jpg").exists()


def test_rejects_paths_outside_photo_dir(photos, tmp_path):
    (tmp_path / "secret.txt").write_text("x")
    result = PhotoCleanupService(photos, use_trash=False).remove_photos(["../secret.txt", ""])
    assert [name for name, _ in result.failed] == ["../secret.txt", ""]
    assert all(reason == "Invalid filename" for _, reason in result.failed)
    assert (tmp_path / "secret.txt").exists()


def test_moves_to_trash(photos, monkeypatch):
    trashed = []
    monkeypatch.setattr(delete_service, "send2trash", trashed.append)
    result = PhotoCleanupService(photos).remove_photos(["b.jpg"])
    assert result.removed == ["b.jpg"]
    assert trashed == [str(photos / "b.jpg")]


def test_falls_back_to_unlink_when_trash_fails(photos, monkeypatch, log_messages):
    def broken_trash(path):
        raise OSError("no trash here")

    monkeypatch.setattr(delete_service, "send2trash", broken_trash)
    result = PhotoCleanupService(photos).remove_photos(["a.jpg"])
    assert result.removed == ["a.jpg"]
    assert not (photos / "a.jpg").exists()
    assert any("deleting permanently" in m for m in log_messages)
