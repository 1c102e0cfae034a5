"""Best-effort removal of locally stored photos.

Photos belonging to deleted entries are moved to the system trash; when the
trash is unavailable (or disabled in settings) they are unlinked. Failures are
logged and reported in the result, never raised.
"""

from __future__ import annotations

from collections.abc import Iterable
import os
from pathlib import Path

from loguru import logger
from send2trash import send2trash

from trailcam_journal.core.services.interfaces import CleanupResult


class PhotoCleanupService:
    """Removes photo files stored under `photos_dir`."""

    def __init__(self, photos_dir: str | Path, use_trash: bool = True) -> None:
        self._photos_dir = Path(photos_dir)
        self._use_trash = use_trash

    def remove_photos(self, filenames: Iterable[str]) -> CleanupResult:
        """Remove each photo and report per-file results."""
        result = CleanupResult()
        for name in filenames:
            # Only plain names are accepted so a stored value cannot escape the photo dir
            if not name or Path(name).name != name:
                logger.error("Refusing to remove suspicious photo name: {}", name)
                result.failed.append((name, "Invalid filename"))
                continue

            path = os.path.normpath(self._photos_dir / name)
            if not os.path.exists(path):
                logger.debug("Photo already gone: {}", path)
                result.failed.append((name, "File does not exist"))
                continue

            try:
                self._remove(path)
                result.removed.append(name)
            except OSError as ex:
                logger.error("Failed to remove photo {}: {}", path, ex)
                result.failed.append((name, f"Unexpected error: {ex}"))
        if result.removed:
            logger.info("Removed {} photo file(s)", len(result.removed))
        return result

    def _remove(self, path: str) -> None:
        if not self._use_trash:
            os.remove(path)
            return
        try:
            send2trash(path)
        except OSError as ex:
            logger.warning("Trash unavailable for {} ({}), deleting permanently", path, ex)
            os.remove(path)
