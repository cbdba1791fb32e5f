"""Grid reference conversions used by the rest of the application.

Failures never propagate from here: callers get a typed error value, None,
or their input back, and treat it as "no location available".
"""

import logging
from typing import Optional, Union

from .encoder import format_reference, parse
from .errors import GridReferenceError
from .models import GeodeticPoint, GridReference
from .transform import bng_to_wgs84

logger = logging.getLogger(__name__)


def try_parse(text: str) -> Union[GridReference, GridReferenceError]:
    """Parse *text*, returning the error instead of raising it."""
    try:
        return parse(text)
    except GridReferenceError as e:
        return e


def locate(text: str) -> Union[GeodeticPoint, GridReferenceError]:
    """Convert a grid reference to a WGS84 point, or the error explaining why not."""
    try:
        ref = parse(text)
        return bng_to_wgs84(ref.easting, ref.northing)
    except GridReferenceError as e:
        return e


def to_lat_lng(text: str) -> Optional[GeodeticPoint]:
    """Convert a grid reference to a WGS84 point, or None on any failure."""
    result = locate(text)
    if isinstance(result, GridReferenceError):
        logger.debug("Could not locate grid reference %r: %s", text, result)
        return None
    return result


def format_grid_reference(text: str) -> str:
    """Format for display, e.g. 'so514398' -> 'SO 514 398'.

    Returns *text* unchanged if it is not a valid grid reference.
    """
    ref = try_parse(text)
    if isinstance(ref, GridReferenceError):
        return text
    return format_reference(ref.easting, ref.northing, ref.precision)


def precision_metres(text: str) -> Optional[int]:
    """Resolution of a grid reference in metres (10000 for 'SO54'), or None."""
    ref = try_parse(text)
    if isinstance(ref, GridReferenceError):
        return None
    return ref.resolution
