"""Telemetry object models handed over by the decoder.

Only the fields the KML export consumes are modelled. Units follow the
flight controller's object definitions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class GPSStatus(Enum):
    """Fix quality reported by the GPS subsystem."""

    NOGPS = "NoGPS"
    NOFIX = "NoFix"
    FIX2D = "Fix2D"
    FIX3D = "Fix3D"

    @property
    def has_fix(self) -> bool:
        """True for a 2D or 3D fix."""
        return self in (GPSStatus.FIX2D, GPSStatus.FIX3D)


@dataclass(frozen=True)
class HomeLocation:
    """Geodetic reference used to convert NED offsets into LLA."""

    set: bool
    """True once the flight controller has committed a home location."""

    latitude: int
    """Latitude in degrees × 1e7."""

    longitude: int
    """Longitude in degrees × 1e7."""

    altitude: float
    """Altitude in metres."""

    @property
    def latitude_deg(self) -> float:
        return self.latitude / 1e7

    @property
    def longitude_deg(self) -> float:
        return self.longitude / 1e7


@dataclass(frozen=True)
class PositionActual:
    """Estimated position as NED offsets from home, in metres."""

    north: float
    east: float
    down: float


@dataclass(frozen=True)
class VelocityActual:
    """Estimated velocity in NED, m/s."""

    north: float
    east: float
    down: float = 0.0


@dataclass(frozen=True)
class AttitudeActual:
    """Vehicle attitude in degrees."""

    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0


@dataclass(frozen=True)
class AirspeedActual:
    calibrated_airspeed: float


@dataclass(frozen=True)
class GPSPosition:
    status: GPSStatus


TelemetryObject = Union[
    HomeLocation,
    PositionActual,
    VelocityActual,
    AttitudeActual,
    AirspeedActual,
    GPSPosition,
]
