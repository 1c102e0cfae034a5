"""Built-in species and camera catalogs."""

from __future__ import annotations

from trailcam_journal.core.models import Species, SpeciesGroup

_M = SpeciesGroup.MAMMAL
_B = SpeciesGroup.BIRD

SPECIES: tuple[Species, ...] = (
    # Mammals
    Species("brown_bear", "Bjørn", "Brown bear", _M),
    Species("red_fox", "Rødrev", "Red fox", _M),
    Species("arctic_fox", "Fjellrev", "Arctic fox", _M),
    Species("moose", "Elg", "Moose", _M),
    Species("lynx", "Gaupe", "Lynx", _M),
    Species("roe_deer", "Rådyr", "Roe deer", _M),
    Species("red_deer", "Hjort", "Red deer", _M),
    Species("wolverine", "Jerv", "Wolverine", _M),
    Species("pine_marten", "Mår", "Pine marten", _M),
    Species("weasel", "Røyskatt", "Weasel", _M),
    Species("otter", "Oter", "Otter", _M),
    Species("badger", "Grevling", "Badger", _M),
    Species("hare", "Hare", "Hare", _M),
    Species("squirrel", "Ekorn", "Red squirrel", _M),
    Species("beaver", "Bever", "Beaver", _M),
    Species("wolf", "Ulv", "Wolf", _M),
    Species("mouse", "Mus", "Mouse", _M),
    # Birds
    Species("capercaillie", "Storfugl", "Capercaillie", _B),
    Species("black_grouse", "Orrfugl", "Black grouse", _B),
    Species("ptarmigan", "Rype", "Ptarmigan", _B),
    Species("crow", "Kråke", "Crow", _B),
    Species("magpie", "Skjære", "Magpie", _B),
    Species("jay", "Nøtteskrike", "Eurasian jay", _B),
    Species("raven", "Ravn", "Raven", _B),
    Species("heron", "Hegre", "Heron", _B),
)

UNKNOWN_CAMERA = "Unknown camera"

CAMERA_BRANDS: tuple[str, ...] = (
    "Zeiss",
    "Browning",
    "Reolink",
    "Spypoint",
    "Bushnell",
    "Hikmicro",
    "Bushwacker",
    "Biltema",
    "Reconyx",
)

CAMERAS: tuple[str, ...] = (UNKNOWN_CAMERA, *CAMERA_BRANDS)


def species_by_name(name: str | None) -> Species | None:
    """Look up a species by its display name (whitespace-insensitive)."""
    key = (name or "").strip()
    if not key:
        return None
    return next((s for s in SPECIES if s.name_no == key), None)
