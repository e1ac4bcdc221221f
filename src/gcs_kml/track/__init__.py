"""Track geometry from decoded telemetry."""

from gcs_kml.track.builder import TrackBuilder
from gcs_kml.track.colormap import (
    DEFAULT_MAX_VELOCITY,
    JET,
    KmlColor,
    map_velocity_to_color,
    velocity_to_index,
)
from gcs_kml.track.geodesy import ecef_to_lla, lla_to_ecef, ned_to_lla
from gcs_kml.track.models import GeoPoint, Keyframe, Segment, TrackState

__all__ = [
    "DEFAULT_MAX_VELOCITY",
    "JET",
    "GeoPoint",
    "Keyframe",
    "KmlColor",
    "Segment",
    "TrackBuilder",
    "TrackState",
    "ecef_to_lla",
    "lla_to_ecef",
    "map_velocity_to_color",
    "ned_to_lla",
    "velocity_to_index",
]
