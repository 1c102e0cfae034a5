"""Photo import from the local filesystem.

Reads each image file, extracts the EXIF capture date and GPS position, copies
the original bytes into the photo directory under a fresh name and yields an
`ImportedPhoto` the entry store can turn into a draft.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path
import uuid

from loguru import logger

from trailcam_journal.core.models import ImportedPhoto
from trailcam_journal.infrastructure.utils import read_exif_metadata

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".tif", ".tiff", ".heic", ".heif"})


def _is_image(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in IMAGE_EXTENSIONS


def discover_images(paths: Iterable[str | Path]) -> list[Path]:
    """Expand files and directories (non-recursive) into image file paths, sorted per dir."""
    found: list[Path] = []
    for raw in paths:
        p = Path(raw)
        if p.is_dir():
            found.extend(sorted(c for c in p.iterdir() if _is_image(c)))
        elif _is_image(p):
            found.append(p)
        elif p.is_file():
            logger.warning("Skipping non-image file: {}", p)
        else:
            logger.warning("Import path not found: {}", p)
    return found


class PhotoImportService:
    """Copies image files into `photos_dir` and yields their metadata."""

    def __init__(self, photos_dir: str | Path) -> None:
        self._photos_dir = Path(photos_dir)

    @property
    def photos_dir(self) -> Path:
        return self._photos_dir

    def store_bytes(self, data: bytes, suffix: str = ".jpg") -> str:
        """Write `data` under a new unique name and return that name."""
        self._photos_dir.mkdir(parents=True, exist_ok=True)
        filename = f"{uuid.uuid4()}{suffix.lower() or '.jpg'}"
        (self._photos_dir / filename).write_bytes(data)
        return filename

    def import_files(self, paths: Iterable[str | Path]) -> Iterator[ImportedPhoto]:
        """Yield one `ImportedPhoto` per readable file; unreadable files are skipped."""
        for path in discover_images(paths):
            try:
                data = path.read_bytes()
                stored = self.store_bytes(data, path.suffix)
            except OSError as ex:
                logger.error("Import failed for {}: {}", path, ex)
                continue
            captured_at, lat, lon = read_exif_metadata(data)
            logger.debug(
                "Imported {} -> {} (date={}, gps={})", path.name, stored, captured_at, lat is not None
            )
            yield ImportedPhoto(
                image_bytes=data,
                captured_at=captured_at,
                latitude=lat,
                longitude=lon,
                source_filename=path.name,
                stored_filename=stored,
            )
