"""The National Grid lettered 100 km square table.

The letter "I" is never used at either level, so the table is spelled out
rather than derived from letter arithmetic.
"""

from typing import Optional

from .constants import GRID_ROWS
from .models import GridSquareIndex

# Row 0 is the northernmost band (HL..JM), the last row the southernmost
# (SV..TW). Column 0 is the westernmost band.
GRID_SQUARES: tuple[tuple[str, ...], ...] = (
    ("HL", "HM", "HN", "HO", "HP", "JL", "JM"),
    ("HQ", "HR", "HS", "HT", "HU", "JQ", "JR"),
    ("HV", "HW", "HX", "HY", "HZ", "JV", "JW"),
    ("NA", "NB", "NC", "ND", "NE", "OA", "OB"),
    ("NF", "NG", "NH", "NJ", "NK", "OF", "OG"),
    ("NL", "NM", "NN", "NO", "NP", "OL", "OM"),
    ("NQ", "NR", "NS", "NT", "NU", "OQ", "OR"),
    ("NV", "NW", "NX", "NY", "NZ", "OV", "OW"),
    ("SA", "SB", "SC", "SD", "SE", "TA", "TB"),
    ("SF", "SG", "SH", "SJ", "SK", "TF", "TG"),
    ("SL", "SM", "SN", "SO", "SP", "TL", "TM"),
    ("SQ", "SR", "SS", "ST", "SU", "TQ", "TR"),
    ("SV", "SW", "SX", "SY", "SZ", "TV", "TW"),
)

SQUARE_INDEX: dict[str, GridSquareIndex] = {
    letters: GridSquareIndex(column=col, row=row)
    for row, cells in enumerate(GRID_SQUARES)
    for col, letters in enumerate(cells)
}


def lookup(letters: str) -> Optional[GridSquareIndex]:
    """Return the table position of a two-letter square, or None."""
    return SQUARE_INDEX.get(letters)


def letters_for(square: GridSquareIndex) -> str:
    """Reverse lookup: the two letters at a table position."""
    return GRID_SQUARES[square.row][square.column]


def band_of(square: GridSquareIndex) -> int:
    """Northing band (0 = southernmost) of a square's storage row."""
    return GRID_ROWS - 1 - square.row


def square_for_band(column: int, band: int) -> GridSquareIndex:
    """Table position of the square at an easting column and northing band."""
    return GridSquareIndex(column=column, row=GRID_ROWS - 1 - band)
