"""Ordnance Survey constants for the OSGB36 National Grid and WGS84.

Values from "A guide to coordinate systems in Great Britain" (OS, v3.6).
"""

import math
from typing import NamedTuple


class Ellipsoid(NamedTuple):
    a: float  # semi-major axis (m)
    b: float  # semi-minor axis (m)

    @property
    def e2(self) -> float:
        """First eccentricity squared."""
        return 1 - (self.b ** 2) / (self.a ** 2)


class HelmertParameters(NamedTuple):
    tx: float  # translations (m)
    ty: float
    tz: float
    rx: float  # rotations (rad)
    ry: float
    rz: float
    s: float   # scale, dimensionless (ppm * 1e-6)


def _arcsec(value: float) -> float:
    return math.radians(value / 3600)


# Airy 1830 ellipsoid (OSGB36)
AIRY_1830 = Ellipsoid(a=6377563.396, b=6356256.909)

# GRS80 ellipsoid (WGS84); b derived from 1/f = 298.257223563
_GRS80_A = 6378137.0
_GRS80_INV_F = 298.257223563
GRS80 = Ellipsoid(a=_GRS80_A, b=_GRS80_A * (1 - 1 / _GRS80_INV_F))

# National Grid projection constants
N0 = -100000.0  # northing of true origin
E0 = 400000.0   # easting of true origin
F0 = 0.9996012717  # scale factor on central meridian
PHI0 = math.radians(49.0)  # latitude of true origin
LAMBDA0 = math.radians(-2.0)  # longitude of true origin

# Helmert parameters: OSGB36 -> WGS84
OSGB36_TO_WGS84 = HelmertParameters(
    tx=446.448,
    ty=-125.157,
    tz=542.060,
    rx=_arcsec(0.1502),
    ry=_arcsec(0.2470),
    rz=_arcsec(0.8421),
    s=-20.4894e-6,
)

# Inverse projection convergence
LATITUDE_TOLERANCE = 1e-12  # rad
MAX_ITERATIONS = 100

# Extent of the lettered square table
SQUARE_SIZE = 100000
GRID_COLUMNS = 7
GRID_ROWS = 13
MAX_EASTING = GRID_COLUMNS * SQUARE_SIZE
MAX_NORTHING = GRID_ROWS * SQUARE_SIZE
MAX_PRECISION = 5
