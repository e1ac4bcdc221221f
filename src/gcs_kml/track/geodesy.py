"""Local-tangent-plane (NED) ↔ geodetic (LLA) conversions on the WGS-84 ellipsoid.

A NED offset is rotated into Earth-centred Earth-fixed (ECEF) coordinates
around the home location, added to the home ECEF position, and converted
back to latitude/longitude/altitude.
"""

from __future__ import annotations

import math

_A = 6378137.0  # WGS-84 semi-major axis [m]
_F = 1.0 / 298.257223563
_E2 = _F * (2.0 - _F)  # first eccentricity squared

_MAX_ITERATIONS = 10
_LAT_TOLERANCE = 1e-12  # radians


def lla_to_ecef(lat_deg: float, lon_deg: float, alt_m: float) -> tuple[float, float, float]:
    """Convert geodetic coordinates to ECEF metres."""
    lat = math.radians(lat_deg)
    lon = math.radians(lon_deg)
    sin_lat = math.sin(lat)
    n = _A / math.sqrt(1.0 - _E2 * sin_lat * sin_lat)
    return (
        (n + alt_m) * math.cos(lat) * math.cos(lon),
        (n + alt_m) * math.cos(lat) * math.sin(lon),
        (n * (1.0 - _E2) + alt_m) * sin_lat,
    )


def ecef_to_lla(x: float, y: float, z: float) -> tuple[float, float, float]:
    """Convert ECEF metres to ``(lat_deg, lon_deg, alt_m)`` by fixed-point iteration."""
    lon = math.atan2(y, x)
    p = math.hypot(x, y)
    lat = math.atan2(z, p * (1.0 - _E2))
    alt = 0.0
    for _ in range(_MAX_ITERATIONS):
        sin_lat = math.sin(lat)
        n = _A / math.sqrt(1.0 - _E2 * sin_lat * sin_lat)
        if abs(math.cos(lat)) > 1e-9:
            alt = p / math.cos(lat) - n
        else:
            alt = abs(z) - n * (1.0 - _E2)
        new_lat = math.atan2(z, p * (1.0 - _E2 * n / (n + alt)))
        if abs(new_lat - lat) < _LAT_TOLERANCE:
            lat = new_lat
            break
        lat = new_lat
    return math.degrees(lat), math.degrees(lon), alt


def ned_to_lla(
    home: tuple[float, float, float],
    north: float,
    east: float,
    down: float,
) -> tuple[float, float, float]:
    """Offset *home* ``(lat_deg, lon_deg, alt_m)`` by a NED vector in metres.

    Returns the resulting ``(lat_deg, lon_deg, alt_m)``.
    """
    lat = math.radians(home[0])
    lon = math.radians(home[1])
    sin_lat, cos_lat = math.sin(lat), math.cos(lat)
    sin_lon, cos_lon = math.sin(lon), math.cos(lon)

    # Rows of the ECEF→NED rotation; its transpose maps NED back to ECEF.
    dx = -sin_lat * cos_lon * north - sin_lon * east - cos_lat * cos_lon * down
    dy = -sin_lat * sin_lon * north + cos_lon * east - cos_lat * sin_lon * down
    dz = cos_lat * north - sin_lat * down

    hx, hy, hz = lla_to_ecef(*home)
    return ecef_to_lla(hx + dx, hy + dy, hz + dz)
