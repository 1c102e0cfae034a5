"""CSV persistence for trail entries and saved locations.

Each repository owns one file and rewrites it completely on every save. The
file is written next to the target first and then moved into place, so a
failed write never truncates the previous collection.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
import csv
import json
import os
from pathlib import Path

from loguru import logger

from trailcam_journal.core.models import Coordinate, SavedLocation, TrailEntry
from trailcam_journal.infrastructure.utils import format_iso_datetime, parse_iso_datetime

ENTRY_HEADERS = [
    "Id",
    "Date",
    "Species",
    "Camera",
    "Notes",
    "Tags",
    "PhotoFilename",
    "PhotoAssetId",
    "Latitude",
    "Longitude",
    "LocationUnknown",
    "IsDraft",
    "OriginalFilename",
]

LOCATION_HEADERS = ["Id", "Name", "Latitude", "Longitude"]

# Notes are free text; the csv module rejects fields over 128 KiB by default
FIELD_SIZE_LIMIT = 2**31 - 1
csv.field_size_limit(FIELD_SIZE_LIMIT)


def _parse_bool_int(value: str | None) -> bool:
    """Parse CSV boolean encoded as 1/0 or true/false (case-insensitive)."""
    return str(value or "").strip().lower() in {"1", "true"}


def _parse_float(value: str | None) -> float | None:
    s = str(value or "").strip()
    if not s:
        return None
    return float(s)


def _optional(value: str | None) -> str | None:
    return value if value else None


def _parse_coordinate(lat_field: str | None, lon_field: str | None) -> Coordinate | None:
    lat = _parse_float(lat_field)
    lon = _parse_float(lon_field)
    if lat is None or lon is None:
        if lat is not None or lon is not None:
            logger.warning("Dropping half coordinate lat={} lon={}", lat_field, lon_field)
        return None
    return Coordinate(lat, lon)


def _parse_tags(value: str | None) -> list[str]:
    if not value:
        return []
    tags = json.loads(value)
    if not isinstance(tags, list):
        raise ValueError(f"Tags must be a list: {value}")
    return [str(t) for t in tags]


def _read_rows(path: Path, headers: list[str]) -> Iterator[dict[str, str]]:
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        try:
            missing = [h for h in headers if h not in (reader.fieldnames or [])]
            if missing:
                raise ValueError(f"CSV missing required headers: {missing}")
            yield from reader
        except csv.Error as ex:
            raise ValueError(f"Malformed CSV {path} (line {reader.line_num}): {ex}") from ex


def _write_rows(path: Path, headers: list[str], rows: Iterable[dict[str, object]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    with tmp_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=headers)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    os.replace(tmp_path, path)


class CsvEntryRepository:
    """Load and save the entry collection as one CSV file."""

    def __init__(self, csv_path: str | Path) -> None:
        self._path = Path(csv_path)

    @property
    def path(self) -> Path:
        return self._path

    def load_all(self) -> list[TrailEntry]:
        """Return all entries in file order; a missing file means no entries yet."""
        if not self._path.exists():
            logger.info("No entries file at {}, starting empty", self._path)
            return []
        entries: list[TrailEntry] = []
        for row in _read_rows(self._path, ENTRY_HEADERS):
            try:
                date = parse_iso_datetime(row.get("Date"))
                if not row.get("Id") or date is None:
                    raise ValueError("missing Id or Date")
                entries.append(
                    TrailEntry(
                        id=row["Id"],
                        date=date,
                        species=_optional(row.get("Species")),
                        camera=_optional(row.get("Camera")),
                        notes=row.get("Notes") or "",
                        tags=_parse_tags(row.get("Tags")),
                        photo_filename=_optional(row.get("PhotoFilename")),
                        photo_asset_id=_optional(row.get("PhotoAssetId")),
                        coordinate=_parse_coordinate(row.get("Latitude"), row.get("Longitude")),
                        location_unknown=_parse_bool_int(row.get("LocationUnknown")),
                        is_draft=_parse_bool_int(row.get("IsDraft")),
                        original_filename=_optional(row.get("OriginalFilename")),
                    )
                )
            except (ValueError, TypeError, KeyError) as ex:
                logger.error("CSV row error: {} | row={} ", ex, row)
                continue
        return entries

    def save_all(self, entries: Iterable[TrailEntry]) -> None:
        """Write all entries using canonical headers."""
        _write_rows(self._path, ENTRY_HEADERS, (self._to_row(e) for e in entries))

    @staticmethod
    def _to_row(entry: TrailEntry) -> dict[str, object]:
        return {
            "Id": entry.id,
            "Date": format_iso_datetime(entry.date),
            "Species": entry.species or "",
            "Camera": entry.camera or "",
            "Notes": entry.notes,
            "Tags": json.dumps(entry.tags, ensure_ascii=False) if entry.tags else "",
            "PhotoFilename": entry.photo_filename or "",
            "PhotoAssetId": entry.photo_asset_id or "",
            "Latitude": repr(entry.latitude) if entry.coordinate else "",
            "Longitude": repr(entry.longitude) if entry.coordinate else "",
            "LocationUnknown": 1 if entry.location_unknown else 0,
            "IsDraft": 1 if entry.is_draft else 0,
            "OriginalFilename": entry.original_filename or "",
        }


class CsvSavedLocationRepository:
    """Load and save saved locations as one CSV file."""

    def __init__(self, csv_path: str | Path) -> None:
        self._path = Path(csv_path)

    def load_all(self) -> list[SavedLocation]:
        if not self._path.exists():
            return []
        locations: list[SavedLocation] = []
        for row in _read_rows(self._path, LOCATION_HEADERS):
            try:
                locations.append(
                    SavedLocation(
                        id=row["Id"],
                        name=row.get("Name") or "",
                        latitude=float(row["Latitude"]),
                        longitude=float(row["Longitude"]),
                    )
                )
            except (ValueError, TypeError, KeyError) as ex:
                logger.error("CSV row error: {} | row={} ", ex, row)
                continue
        return locations

    def save_all(self, locations: Iterable[SavedLocation]) -> None:
        rows = (
            {
                "Id": loc.id,
                "Name": loc.name,
                "Latitude": repr(loc.latitude),
                "Longitude": repr(loc.longitude),
            }
            for loc in locations
        )
        _write_rows(self._path, LOCATION_HEADERS, rows)
