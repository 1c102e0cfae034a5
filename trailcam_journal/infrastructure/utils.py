"""Utilities for date parsing/formatting and EXIF metadata extraction.

This module centralizes date handling and EXIF reading so the rest of the app
can depend on a single behavior. Extraction is best-effort and never raises;
callers should expect `None` when data is not available.
"""

from __future__ import annotations

from datetime import datetime
import io
from typing import Any

from loguru import logger
from PIL import Image, UnidentifiedImageError
from pillow_heif import register_heif_opener

# HEIC/HEIF captures open through Pillow like any other image
register_heif_opener()

EXIF_DT_FMT = "%Y:%m:%d %H:%M:%S"

# EXIF tag ids
TAG_DATETIME = 306
TAG_DATETIME_ORIGINAL = 36867
IFD_EXIF = 0x8769
IFD_GPS = 0x8825
GPS_LAT_REF = 1
GPS_LAT = 2
GPS_LON_REF = 3
GPS_LON = 4


def parse_iso_datetime(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp; return None on empty or invalid input."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.strip())
    except (ValueError, TypeError):
        logger.warning("Invalid datetime: {}", value)
        return None


def format_iso_datetime(dt: datetime | None) -> str:
    """Format datetime as ISO-8601; empty string when None."""
    return dt.isoformat() if dt else ""


def parse_exif_datetime(value: Any) -> datetime | None:
    """Parse an EXIF "YYYY:MM:DD HH:MM:SS" value."""
    if not value:
        return None
    try:
        return datetime.strptime(str(value).strip().rstrip("\x00"), EXIF_DT_FMT)
    except ValueError:
        return None


def _dms_to_degrees(value: Any, ref: Any) -> float | None:
    """Convert an EXIF (deg, min, sec) triple to signed decimal degrees."""
    try:
        if isinstance(value, (tuple, list)):
            degrees = float(value[0]) + float(value[1]) / 60 + float(value[2]) / 3600
        else:
            degrees = float(value)
    except (TypeError, ValueError, IndexError, ZeroDivisionError):
        return None
    if str(ref or "").strip().upper() in {"S", "W"}:
        degrees = -abs(degrees)
    return degrees


def read_exif_metadata(data: bytes) -> tuple[datetime | None, float | None, float | None]:
    """Extract (capture date, latitude, longitude) from encoded image bytes.

    The date comes from DateTimeOriginal, falling back to DateTime. Latitude
    and longitude are only returned as a pair; if either is missing both are None.
    """
    try:
        with Image.open(io.BytesIO(data)) as im:
            exif = im.getexif()
            if not exif:
                return None, None, None
            exif_ifd = exif.get_ifd(IFD_EXIF)
            captured = parse_exif_datetime(exif_ifd.get(TAG_DATETIME_ORIGINAL))
            if captured is None:
                captured = parse_exif_datetime(exif.get(TAG_DATETIME))

            gps = exif.get_ifd(IFD_GPS)
            lat = _dms_to_degrees(gps.get(GPS_LAT), gps.get(GPS_LAT_REF)) if gps else None
            lon = _dms_to_degrees(gps.get(GPS_LON), gps.get(GPS_LON_REF)) if gps else None
            if lat is None or lon is None:
                lat = lon = None
            return captured, lat, lon
    except (UnidentifiedImageError, OSError, ValueError, TypeError) as ex:
        logger.debug("EXIF read failed: {}", ex)
        return None, None, None
