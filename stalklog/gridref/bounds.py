"""Validity and region-containment predicates for grid references."""

from .convert import locate, try_parse
from .errors import GridReferenceError
from .models import BoundingBox

# Approximate bounds for Herefordshire
HEREFORDSHIRE = BoundingBox(south=51.8, west=-3.2, north=52.4, east=-2.3)


def is_valid(text: str) -> bool:
    """Return True if *text* parses as a National Grid reference."""
    return not isinstance(try_parse(text), GridReferenceError)


def contained_in(text: str, bbox: BoundingBox) -> bool:
    """Return True if *text* converts to a WGS84 point inside *bbox*."""
    point = locate(text)
    if isinstance(point, GridReferenceError):
        return False
    return bbox.contains(point)


def is_in_herefordshire(text: str) -> bool:
    return contained_in(text, HEREFORDSHIRE)
