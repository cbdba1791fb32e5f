"""Convert between decoded grid references and full National Grid metres."""

from . import squares
from .constants import MAX_EASTING, MAX_NORTHING, MAX_PRECISION, SQUARE_SIZE
from .models import DecodedReference, GridReference
from .parser import decode


def to_meters(decoded: DecodedReference) -> tuple[int, int]:
    """Full OSGB36 (easting, northing) in metres of a decoded reference.

    Storage row 0 is the northernmost band, so the northing band counts up
    from the bottom of the table.
    """
    multiplier = 10 ** (MAX_PRECISION - decoded.precision)
    easting = decoded.square.column * SQUARE_SIZE + decoded.easting_digits * multiplier
    northing = squares.band_of(decoded.square) * SQUARE_SIZE + decoded.northing_digits * multiplier
    return easting, northing


def parse(text: str) -> GridReference:
    """Parse free text into a GridReference.

    Raises a GridReferenceError subclass if the text is not a valid reference.
    """
    decoded = decode(text)
    easting, northing = to_meters(decoded)
    return GridReference(easting=easting, northing=northing, precision=decoded.precision)


def _split(easting: int, northing: int, precision: int) -> tuple[str, str, str]:
    """Letters plus zero-padded easting/northing digit strings."""
    if not 1 <= precision <= MAX_PRECISION:
        raise ValueError(f"precision must be 1-{MAX_PRECISION}, got {precision}")
    easting = int(easting)
    northing = int(northing)
    if not (0 <= easting < MAX_EASTING and 0 <= northing < MAX_NORTHING):
        raise ValueError(f"coordinates outside the National Grid: E={easting} N={northing}")

    square = squares.square_for_band(easting // SQUARE_SIZE, northing // SQUARE_SIZE)
    divisor = 10 ** (MAX_PRECISION - precision)
    e_digits = (easting % SQUARE_SIZE) // divisor
    n_digits = (northing % SQUARE_SIZE) // divisor
    return (
        squares.letters_for(square),
        f"{e_digits:0{precision}d}",
        f"{n_digits:0{precision}d}",
    )


def from_meters(easting: int, northing: int, precision: int) -> str:
    """Compact reference text, e.g. (351400, 239800, 3) -> 'SO514398'.

    Offsets finer than the requested precision are truncated.
    """
    return "".join(_split(easting, northing, precision))


def format_reference(easting: int, northing: int, precision: int) -> str:
    """Canonical display text, e.g. (351400, 239800, 3) -> 'SO 514 398'."""
    return " ".join(_split(easting, northing, precision))
