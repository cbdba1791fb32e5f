"""Immutable value types passed between the grid reference stages."""

from dataclasses import dataclass
from typing import NamedTuple

from .constants import MAX_EASTING, MAX_NORTHING, MAX_PRECISION


class GridSquareIndex(NamedTuple):
    """Position of a lettered 100 km square in the 7x13 table.

    ``row`` is the storage row: row 0 is the northernmost band.
    """

    column: int
    row: int


@dataclass(frozen=True)
class DecodedReference:
    """A grid reference decoded into symbols, before any unit conversion."""

    letters: str
    square: GridSquareIndex
    easting_digits: int
    northing_digits: int
    precision: int  # digits per axis, 1-5


@dataclass(frozen=True)
class GridReference:
    """Full OSGB36 National Grid coordinates of a reference."""

    easting: int    # metres, [0, 700000)
    northing: int   # metres, [0, 1300000)
    precision: int  # digits per axis, 1-5

    def __post_init__(self):
        if not 1 <= self.precision <= MAX_PRECISION:
            raise ValueError(f"precision must be 1-{MAX_PRECISION}, got {self.precision}")
        if not 0 <= self.easting < MAX_EASTING:
            raise ValueError(f"easting out of range: {self.easting}")
        if not 0 <= self.northing < MAX_NORTHING:
            raise ValueError(f"northing out of range: {self.northing}")
        step = self.resolution
        if self.easting % step or self.northing % step:
            raise ValueError(
                f"easting/northing must be multiples of {step} at precision {self.precision}"
            )

    @property
    def resolution(self) -> int:
        """Size in metres of the square the reference denotes."""
        return 10 ** (MAX_PRECISION - self.precision)


@dataclass(frozen=True)
class GeodeticPoint:
    """Latitude/longitude in decimal degrees."""

    lat: float
    lng: float
    datum: str = "WGS84"

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned lat/lng rectangle, bounds inclusive."""

    south: float
    west: float
    north: float
    east: float

    def contains(self, point: GeodeticPoint) -> bool:
        return (
            self.south <= point.lat <= self.north
            and self.west <= point.lng <= self.east
        )
