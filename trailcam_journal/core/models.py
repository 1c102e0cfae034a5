"""Core domain models for trail-camera entries and saved locations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import enum
import uuid


def new_id() -> str:
    """Return a fresh opaque identifier for an entry or saved location."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair. Both halves are always present together."""

    latitude: float
    longitude: float

    def rounded(self, places: int = 4) -> tuple[float, float]:
        """Return both halves rounded to `places` decimals (4 places is ~11m)."""
        return (round(self.latitude, places), round(self.longitude, places))


@dataclass(eq=False)
class TrailEntry:
    """One trail-camera observation.

    Identity is the `id` alone: two entries are equal iff their ids match.
    """

    date: datetime
    id: str = field(default_factory=new_id)
    species: str | None = None
    camera: str | None = None
    notes: str = ""
    tags: list[str] = field(default_factory=list)
    # Image storage
    photo_filename: str | None = None
    photo_asset_id: str | None = None
    # Location
    coordinate: Coordinate | None = None
    location_unknown: bool = False
    # State
    is_draft: bool = True
    # Import provenance
    original_filename: str | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TrailEntry):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def latitude(self) -> float | None:
        return self.coordinate.latitude if self.coordinate else None

    @property
    def longitude(self) -> float | None:
        return self.coordinate.longitude if self.coordinate else None

    @property
    def has_species(self) -> bool:
        return bool(self.species)

    @property
    def has_location(self) -> bool:
        """True when the location is either known coordinates or declared unknown."""
        return self.location_unknown or self.coordinate is not None

    @property
    def can_finalize(self) -> bool:
        """Whether the entry has everything required to leave the draft state."""
        return self.has_species and self.has_location

    @property
    def photo_reference(self) -> str | None:
        """Locally stored filename if any, else the external asset id, else None."""
        return self.photo_filename or self.photo_asset_id or None


@dataclass(eq=False)
class SavedLocation:
    """A named coordinate pinned by the user for reuse."""

    name: str
    latitude: float
    longitude: float
    id: str = field(default_factory=new_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SavedLocation):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


@dataclass
class ImportedPhoto:
    """One asset yielded by a photo import provider."""

    image_bytes: bytes
    captured_at: datetime | None = None
    latitude: float | None = None
    longitude: float | None = None
    source_filename: str | None = None
    external_asset_id: str | None = None
    stored_filename: str | None = None  # set once the image is copied locally

    @property
    def coordinate(self) -> Coordinate | None:
        """The GPS pair, or None unless both halves were found."""
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(self.latitude, self.longitude)


@dataclass(frozen=True)
class FinalizeResult:
    """Outcome of a finalize request."""

    finalized: int = 0
    skipped: int = 0

    @property
    def message(self) -> str:
        """Human summary, e.g. "Finalized 3. Skipped 2 because required fields are missing."."""
        if self.skipped:
            return (
                f"Finalized {self.finalized}. Skipped {self.skipped} "
                "because required fields are missing."
            )
        return f"Finalized {self.finalized}."


class DraftFilter(enum.Enum):
    """Partitions of the draft queue shown by the review workflow."""

    ALL = "All"
    MISSING_SPECIES = "Missing species"
    MISSING_LOCATION = "Missing location"
    HAS_GPS = "Has GPS"
    NO_GPS = "No GPS"


class LocationMode(enum.Enum):
    """Batch location modes."""

    UNKNOWN = "unknown"  # declare location unknown, drop coordinates
    COORDINATE = "coordinate"  # set an explicit pair
    CLEAR = "clear"  # drop coordinates without declaring unknown


class TagMode(enum.Enum):
    ADD = "add"
    REPLACE = "replace"


class SpeciesGroup(enum.Enum):
    MAMMAL = "mammal"
    BIRD = "bird"


@dataclass(frozen=True)
class Species:
    """A catalog species with a stable id and a Norwegian display name."""

    id: str
    name_no: str
    name_en: str | None
    group: SpeciesGroup

    @property
    def display_name(self) -> str:
        return self.name_no
