"""TrackBuilder — turns decoded telemetry updates into track geometry."""

from __future__ import annotations

import logging
import math

from gcs_kml.telemetry.frame_reader import FrameHeader
from gcs_kml.telemetry.models import (
    AirspeedActual,
    AttitudeActual,
    GPSPosition,
    GPSStatus,
    HomeLocation,
    PositionActual,
    TelemetryObject,
    VelocityActual,
)
from gcs_kml.track.colormap import DEFAULT_MAX_VELOCITY, map_velocity_to_color
from gcs_kml.track.geodesy import ned_to_lla
from gcs_kml.track.models import GeoPoint, Keyframe, Segment, TrackState

_logger = logging.getLogger(__name__)

KEYFRAME_INTERVAL_MS = 2000
WALL_AXIS_COUNT = 5
WALL_AXIS_SEPARATION = 20.0  # metres between stacked wall axes

_U32_MASK = 0xFFFFFFFF


class TrackBuilder:
    """Accumulates segments, keyframes and wall-axis lines from telemetry updates.

    Register :meth:`on_object_updated` with the decoder and :meth:`begin_frame`
    with the scanner. Every :class:`PositionActual` update is a candidate
    sample; it is accepted only when the home location is set and the GPS
    reports a 2D or 3D fix. Other updates refresh the cached values used
    when the next position arrives.

    Parameters
    ----------
    keyframe_interval_ms:
        Minimum log time between keyframes; a keyframe is emitted when the
        gap strictly exceeds it.
    wall_axis_count:
        Number of stacked reference lines.
    wall_axis_separation:
        Vertical spacing of the reference lines in metres, starting at the
        home altitude.
    max_velocity:
        Speed mapped onto the last segment color.
    """

    def __init__(
        self,
        keyframe_interval_ms: int = KEYFRAME_INTERVAL_MS,
        wall_axis_count: int = WALL_AXIS_COUNT,
        wall_axis_separation: float = WALL_AXIS_SEPARATION,
        max_velocity: float = DEFAULT_MAX_VELOCITY,
    ) -> None:
        self._keyframe_interval_ms = keyframe_interval_ms
        self._wall_axis_separation = wall_axis_separation
        self._max_velocity = max_velocity
        self.state = TrackState(reference_lines=[[] for _ in range(wall_axis_count)])

        self.segments: list[Segment] = []
        self.keyframes: list[Keyframe] = []
        self.track_points: list[GeoPoint] = []

        self._timestamp_ms = 0
        self._home = HomeLocation(set=False, latitude=0, longitude=0, altitude=0.0)
        self._gps_status = GPSStatus.NOFIX
        self._velocity = VelocityActual(north=0.0, east=0.0)
        self._attitude = AttitudeActual()
        self._airspeed = AirspeedActual(calibrated_airspeed=0.0)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def reference_lines(self) -> list[list[GeoPoint]]:
        return self.state.reference_lines

    def begin_frame(self, header: FrameHeader) -> None:
        """Stamp subsequent updates with the log time of *header*."""
        self._timestamp_ms = header.timestamp_ms

    def set_timestamp(self, timestamp_ms: int) -> None:
        self._timestamp_ms = timestamp_ms

    def on_object_updated(self, obj: TelemetryObject) -> None:
        """Decoder callback: cache *obj*, and process it if it is a position."""
        if isinstance(obj, PositionActual):
            self.add_position(obj)
        elif isinstance(obj, HomeLocation):
            self._home = obj
        elif isinstance(obj, GPSPosition):
            self._gps_status = obj.status
        elif isinstance(obj, VelocityActual):
            self._velocity = obj
        elif isinstance(obj, AttitudeActual):
            self._attitude = obj
        elif isinstance(obj, AirspeedActual):
            self._airspeed = obj

    def add_position(self, position: PositionActual) -> bool:
        """Process one position sample. Returns True if it was accepted."""
        if not self._home.set:
            return False
        if not self._gps_status.has_fix:
            return False

        point = self._to_geo_point(position)
        self.track_points.append(point)

        state = self.state
        if state.previous_point is None:
            # Seed point: nothing to connect to yet.
            state.previous_point = point
            _logger.debug("Track seeded at t=%d ms", self._timestamp_ms)
            return True

        for i, line in enumerate(state.reference_lines):
            line.append(
                GeoPoint(
                    latitude=point.latitude,
                    longitude=point.longitude,
                    altitude=i * self._wall_axis_separation + self._home.altitude,
                )
            )

        start = state.previous_point
        self.segments.append(
            Segment(
                start=start,
                end=point,
                timestamp=self._timestamp_ms,
                airspeed=self._airspeed.calibrated_airspeed,
                color=map_velocity_to_color(
                    (start.groundspeed + point.groundspeed) / 2,
                    max_velocity=self._max_velocity,
                ),
            )
        )

        # Log time is u32; a backward jump wraps to a large gap.
        gap = (self._timestamp_ms - state.last_keyframe_ms) & _U32_MASK
        if gap > self._keyframe_interval_ms:
            self.keyframes.append(
                Keyframe(
                    point=point,
                    interval_start=state.last_keyframe_ms,
                    interval_end=self._timestamp_ms,
                    heading=self._attitude.yaw,
                    airspeed=self._airspeed.calibrated_airspeed,
                )
            )
            state.last_keyframe_ms = self._timestamp_ms

        state.previous_point = point
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _to_geo_point(self, position: PositionActual) -> GeoPoint:
        home = (self._home.latitude_deg, self._home.longitude_deg, self._home.altitude)
        lat, lon, alt = ned_to_lla(home, position.north, position.east, position.down)
        return GeoPoint(
            latitude=lat,
            longitude=lon,
            altitude=alt,
            groundspeed=math.hypot(self._velocity.north, self._velocity.east),
        )
