"""Track geometry data structures."""

from __future__ import annotations

from dataclasses import dataclass, field

from gcs_kml.track.colormap import KmlColor


@dataclass(frozen=True)
class GeoPoint:
    """A geodetic track point with the horizontal speed measured at that point."""

    latitude: float
    """Latitude in degrees."""

    longitude: float
    """Longitude in degrees."""

    altitude: float
    """Altitude in metres (WGS-84 ellipsoid)."""

    groundspeed: float = 0.0
    """Horizontal speed in m/s."""


@dataclass(frozen=True)
class Segment:
    """A colored line from the previous accepted point to the current one.

    ``timestamp`` is the log time (ms) of the frame that produced ``end``.
    ``airspeed`` is the calibrated airspeed cached when the segment was cut.
    """

    start: GeoPoint
    end: GeoPoint
    timestamp: int
    airspeed: float = 0.0
    color: KmlColor | None = None
    """Line color derived from :attr:`groundspeed`."""

    @property
    def groundspeed(self) -> float:
        """Mean groundspeed of both endpoints; drives the segment color."""
        return (self.start.groundspeed + self.end.groundspeed) / 2


@dataclass(frozen=True)
class Keyframe:
    """A periodic marker spanning ``[interval_start, interval_end]`` in log ms."""

    point: GeoPoint
    interval_start: int
    interval_end: int
    heading: float
    """Vehicle yaw in degrees."""

    airspeed: float
    """Calibrated airspeed in m/s."""


@dataclass
class TrackState:
    """Mutable accumulator state owned by a single :class:`TrackBuilder`.

    ``reference_lines`` has a fixed length (one coordinate list per wall
    axis); only the lists grow.
    """

    previous_point: GeoPoint | None = None
    last_keyframe_ms: int = 0
    reference_lines: list[list[GeoPoint]] = field(default_factory=list)

    @property
    def is_tracking(self) -> bool:
        """True once the seed point has been recorded."""
        return self.previous_point is not None
