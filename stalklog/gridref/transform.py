"""Pure Python conversion from British National Grid (OSGB36) to WGS84.

Inverse Transverse Mercator on the Airy 1830 ellipsoid followed by the
OSGB36 -> WGS84 Helmert 7-parameter transformation. Formulas follow the
Ordnance Survey "guide to coordinate systems in Great Britain".
Accuracy: a few metres, limited by the Helmert approximation.
"""

import math

from .constants import (
    AIRY_1830,
    E0,
    F0,
    GRS80,
    LAMBDA0,
    LATITUDE_TOLERANCE,
    MAX_ITERATIONS,
    N0,
    OSGB36_TO_WGS84,
    PHI0,
    Ellipsoid,
    HelmertParameters,
)
from .errors import ProjectionDivergence
from .models import GeodeticPoint


def _meridional_arc(phi, phi0, a, b):
    """Compute meridional arc distance from phi0 to phi."""
    n = (a - b) / (a + b)
    n2 = n * n
    n3 = n2 * n

    dphi = phi - phi0
    sphi = phi + phi0

    ma = (1 + n + (5.0 / 4.0) * n2 + (5.0 / 4.0) * n3) * dphi
    mb = (3 * n + 3 * n2 + (21.0 / 8.0) * n3) * math.sin(dphi) * math.cos(sphi)
    mc = ((15.0 / 8.0) * n2 + (15.0 / 8.0) * n3) * math.sin(2 * dphi) * math.cos(2 * sphi)
    md = (35.0 / 24.0) * n3 * math.sin(3 * dphi) * math.cos(3 * sphi)

    return b * F0 * (ma - mb + mc - md)


def _footpoint_latitude(easting: float, northing: float, ellipsoid: Ellipsoid) -> float:
    """Latitude whose meridional arc equals the true northing (radians).

    Raises ProjectionDivergence if the correction does not fall below
    LATITUDE_TOLERANCE within MAX_ITERATIONS.
    """
    a, b = ellipsoid
    phi = PHI0
    m = 0.0
    for _ in range(MAX_ITERATIONS):
        correction = (northing - N0 - m) / (a * F0)
        phi += correction
        m = _meridional_arc(phi, PHI0, a, b)
        if abs(correction) < LATITUDE_TOLERANCE:
            return phi
    raise ProjectionDivergence(easting, northing, MAX_ITERATIONS)


def project(easting: float, northing: float) -> GeodeticPoint:
    """Convert National Grid easting/northing to OSGB36 lat/lng in degrees."""
    a = AIRY_1830.a
    e2 = AIRY_1830.e2

    phi = _footpoint_latitude(easting, northing, AIRY_1830)

    sin_phi = math.sin(phi)
    cos_phi = math.cos(phi)
    tan_phi = math.tan(phi)

    nu = a * F0 / math.sqrt(1 - e2 * sin_phi ** 2)
    rho = a * F0 * (1 - e2) / (1 - e2 * sin_phi ** 2) ** 1.5
    eta2 = nu / rho - 1

    de = easting - E0

    VII = tan_phi / (2 * rho * nu)
    VIII = tan_phi / (24 * rho * nu ** 3) * (5 + 3 * tan_phi ** 2 + eta2 - 9 * tan_phi ** 2 * eta2)
    IX = tan_phi / (720 * rho * nu ** 5) * (61 + 90 * tan_phi ** 2 + 45 * tan_phi ** 4)
    X = 1 / (cos_phi * nu)
    XI = 1 / (6 * cos_phi * nu ** 3) * (nu / rho + 2 * tan_phi ** 2)
    XII = 1 / (120 * cos_phi * nu ** 5) * (5 + 28 * tan_phi ** 2 + 24 * tan_phi ** 4)
    XIIA = 1 / (5040 * cos_phi * nu ** 7) * (61 + 662 * tan_phi ** 2 + 1320 * tan_phi ** 4 + 720 * tan_phi ** 6)

    lat = phi - VII * de ** 2 + VIII * de ** 4 - IX * de ** 6
    lon = LAMBDA0 + X * de - XI * de ** 3 + XII * de ** 5 - XIIA * de ** 7

    return GeodeticPoint(lat=math.degrees(lat), lng=math.degrees(lon), datum="OSGB36")


def _to_cartesian(lat_rad: float, lon_rad: float, ellipsoid: Ellipsoid) -> tuple[float, float, float]:
    """Geodetic (height 0) to 3-D Cartesian coordinates."""
    sin_lat = math.sin(lat_rad)
    cos_lat = math.cos(lat_rad)
    e2 = ellipsoid.e2
    nu = ellipsoid.a / math.sqrt(1 - e2 * sin_lat ** 2)

    x = nu * cos_lat * math.cos(lon_rad)
    y = nu * cos_lat * math.sin(lon_rad)
    z = nu * (1 - e2) * sin_lat
    return x, y, z


def _helmert(x: float, y: float, z: float, p: HelmertParameters) -> tuple[float, float, float]:
    """Apply a small-angle 7-parameter Helmert transformation."""
    x2 = p.tx + (1 + p.s) * x + (-p.rz) * y + p.ry * z
    y2 = p.ty + p.rz * x + (1 + p.s) * y + (-p.rx) * z
    z2 = p.tz + (-p.ry) * x + p.rx * y + (1 + p.s) * z
    return x2, y2, z2


def _to_geodetic(x: float, y: float, z: float, ellipsoid: Ellipsoid) -> tuple[float, float]:
    """Cartesian to geodetic (lat, lon) in radians by short iteration."""
    a = ellipsoid.a
    e2 = ellipsoid.e2
    p = math.sqrt(x ** 2 + y ** 2)
    lat = math.atan2(z, p * (1 - e2))

    for _ in range(10):
        nu = a / math.sqrt(1 - e2 * math.sin(lat) ** 2)
        new_lat = math.atan2(z + e2 * nu * math.sin(lat), p)
        converged = abs(new_lat - lat) < LATITUDE_TOLERANCE
        lat = new_lat
        if converged:
            break

    lon = math.atan2(y, x)
    return lat, lon


def shift_datum(point: GeodeticPoint) -> GeodeticPoint:
    """Shift an OSGB36 (Airy 1830) point onto WGS84 (GRS80)."""
    x, y, z = _to_cartesian(math.radians(point.lat), math.radians(point.lng), AIRY_1830)
    x2, y2, z2 = _helmert(x, y, z, OSGB36_TO_WGS84)
    lat, lon = _to_geodetic(x2, y2, z2, GRS80)
    return GeodeticPoint(lat=math.degrees(lat), lng=math.degrees(lon))


def bng_to_wgs84(easting: float, northing: float) -> GeodeticPoint:
    """Convert British National Grid easting/northing to a WGS84 point.

    Raises ProjectionDivergence if the inverse projection fails to converge.
    """
    return shift_datum(project(easting, northing))
