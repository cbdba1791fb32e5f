"""Normalisers for the raw fields of a cull-sheet CSV export."""

import re
from datetime import datetime
from typing import Optional

from . import config

# Month abbreviation mapping for date parsing
_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

_SPECIES = {
    "FALLOW": "Fallow Deer",
    "MUNTJAC": "Muntjac",
    "ROE": "Roe Deer",
    "FOX": "Fox",
}

_ADULT_WORDS = ("ADULT", "BUCK", "DOE", "STAG", "HIND", "SORREL", "PRICKET", "SORE", "BARE")
_JUVENILE_WORDS = ("FAWN", "JUVENILE", "YOUNG", "YEARLING")

_TIME_OF_DAY = {
    "AM": "Morning",
    "MORNING": "Morning",
    "PM": "Afternoon",
    "AFTERNOON": "Afternoon",
    "EVENING": "Afternoon",
    "DAWN": "Dawn",
    "DUSK": "Dusk",
    "NIGHT": "Night",
}

# Known data-entry typos in the historic cull sheets
_GRID_REF_PATCHES = (
    ("6065 3922", "SO 606 392"),
    ("307 643", "SO 607 643"),
)
_BARE_DIGITS_RE = re.compile(r"^\d{3}\s+\d{3}$")
_WEIGHT_RE = re.compile(r"^(\d+(?:\.\d+)?)")

_LOCATION_FIXES = (
    (re.compile(r"LEANING TOWER\s*$"), "LEANING TOWER"),
    (re.compile(r"FRITH\s*WOODS?"), "FRITH WOODS"),
    (re.compile(r"DORMINGTON\s*WOODS?"), "DORMINGTON WOODS"),
)


def parse_csv_date(date_str: str, default_year: Optional[int] = None) -> Optional[str]:
    """Parse a cull-sheet date like '08-Apr-23' into ISO format '2023-04-08'.

    Handles '08-Apr-23', '8-Apr-2023' and year-less '16-Oct' (which takes
    *default_year*, IMPORT_DEFAULT_YEAR unless given).
    Returns None if the string cannot be parsed.
    """
    if not date_str or not date_str.strip():
        return None
    parts = date_str.strip().split("-")
    if len(parts) == 3:
        day_str, month_str, year_str = parts
        if not year_str.isdigit() or len(year_str) not in (2, 4):
            return None
        year = int(year_str) + 2000 if len(year_str) == 2 else int(year_str)
    elif len(parts) == 2:
        day_str, month_str = parts
        year = default_year if default_year is not None else config.IMPORT_DEFAULT_YEAR
    else:
        return None

    month = _MONTHS.get(month_str.strip().lower()[:3])
    if month is None or not day_str.strip().isdigit():
        return None
    try:
        return datetime(year, month, int(day_str)).strftime("%Y-%m-%d")
    except ValueError:
        return None


def normalise_species(species: str) -> Optional[str]:
    """Map cull-sheet species names to display names; None if blank."""
    if not species or not species.strip():
        return None
    return _SPECIES.get(species.strip().upper(), species.strip())


def normalise_sex(sex: str) -> str:
    normalised = (sex or "").strip().upper()
    if normalised in ("M", "MALE"):
        return "Male"
    if normalised in ("F", "FEMALE"):
        return "Female"
    return "Unknown"


def normalise_maturity(maturity: str) -> str:
    """Classify free-text maturity ('Pricket', 'Yearling') as Adult/Juvenile/Unknown."""
    normalised = (maturity or "").strip().upper()
    if not normalised:
        return "Unknown"
    if any(word in normalised for word in _ADULT_WORDS):
        return "Adult"
    if any(word in normalised for word in _JUVENILE_WORDS):
        return "Juvenile"
    return "Unknown"


def parse_weight(weight: str) -> float:
    """Parse a weight in kg, e.g. '12.5', '"14"' or '11kg'. Blank, N/A or junk gives 0."""
    if not weight or weight.strip() in ("", "N/A"):
        return 0.0
    cleaned = re.sub(r'[!"]', "", weight).strip()
    match = _WEIGHT_RE.match(cleaned)
    if match:
        return float(match.group(1))
    return 0.0


def normalise_grid_ref(grid_ref: str, default_square: Optional[str] = None) -> str:
    """Clean a raw grid reference before it is handed to the grid engine.

    Bare '600 393' references are assumed to lie in *default_square*
    (IMPORT_DEFAULT_GRID_SQUARE unless given). Blank and 'N/K' give ''.
    """
    if not grid_ref or grid_ref.strip() in ("", "N/K"):
        return ""
    normalised = grid_ref.strip().upper()
    if _BARE_DIGITS_RE.match(normalised):
        square = default_square or config.IMPORT_DEFAULT_GRID_SQUARE
        normalised = f"{square} {normalised}"
    for typo, fix in _GRID_REF_PATCHES:
        if typo in normalised:
            normalised = fix
    return normalised


def normalise_time_of_day(time_of_day: str) -> str:
    """Map AM/PM style entries onto a time-of-day slot; defaults to Morning."""
    return _TIME_OF_DAY.get((time_of_day or "").strip().upper(), "Morning")


def normalise_location(location: str) -> str:
    if not location or not location.strip():
        return "Unknown Location"
    normalised = " ".join(location.split())
    for pattern, replacement in _LOCATION_FIXES:
        normalised = pattern.sub(replacement, normalised)
    return normalised
