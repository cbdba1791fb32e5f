"""Decode textual National Grid references into squares and digit offsets."""

import re

from . import squares
from .constants import MAX_PRECISION
from .errors import MalformedReference, OddDigitCount, PrecisionOverflow, UnknownGridSquare
from .models import DecodedReference

_WHITESPACE_RE = re.compile(r"\s+")
_REFERENCE_RE = re.compile(r"^([A-Z]{2})([0-9]+)$")


def normalise(text: str) -> str:
    """Strip all whitespace and upper-case, e.g. 'so 514 398' -> 'SO514398'."""
    return _WHITESPACE_RE.sub("", text).upper()


def decode(text: str) -> DecodedReference:
    """Decode a grid reference like 'SO 514 398' into its components.

    Accepts any spacing and case: 'SO514398', 'so 514 398', 'SO 5139'.

    Raises MalformedReference, PrecisionOverflow, OddDigitCount or
    UnknownGridSquare.
    """
    clean = normalise(text)
    match = _REFERENCE_RE.match(clean)
    if not match:
        raise MalformedReference(text)

    letters, digits = match.groups()
    if len(digits) > 2 * MAX_PRECISION:
        raise PrecisionOverflow(text, len(digits))
    if len(digits) % 2:
        raise OddDigitCount(text, len(digits))

    square = squares.lookup(letters)
    if square is None:
        raise UnknownGridSquare(text, letters)

    precision = len(digits) // 2
    return DecodedReference(
        letters=letters,
        square=square,
        easting_digits=int(digits[:precision]),
        northing_digits=int(digits[precision:]),
        precision=precision,
    )
