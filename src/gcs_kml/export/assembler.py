"""Composes TrackBuilder output into a :class:`KmlDocument`."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from gcs_kml.export.models import (
    AltitudeMode,
    Folder,
    KmlDocument,
    LineString,
    Placemark,
    Point,
    Style,
    StyleMap,
    TimeSpan,
    format_time,
)
from gcs_kml.track.builder import TrackBuilder
from gcs_kml.track.colormap import DEFAULT_MAX_VELOCITY, map_velocity_to_color
from gcs_kml.track.models import GeoPoint, Keyframe, Segment

ARROW_STYLE_ID = "directiveArrowStyle"
GROUND_TRACK_STYLE_ID = "ts_2_tb"
WALL_AXES_STYLE_ID = "ts_1_tb"

TRACK_FOLDER = "Track"
KEYFRAME_FOLDER = "Arrows"
WALL_AXES_FOLDER = "Wall axes"
GROUND_TRACK_NAME = "Ground track"

_ARROW_ICON = "http://maps.google.com/mapfiles/kml/shapes/arrow.png"
_BLACK = "ff000000"
_MAGENTA = "ffff00ff"
_POLY_ALPHA = 100
_ARROW_HEADING_OFFSET = 180.0  # arrow art points south


def describe(point: GeoPoint, airspeed: float) -> str:
    """Balloon text shown for a segment or keyframe."""
    return (
        f"Latitude: {point.latitude:.7f} deg\n"
        f"Longitude: {point.longitude:.7f} deg\n"
        f"Altitude: {point.altitude:.2f} m\n"
        f"Airspeed: {airspeed:.2f} m/s\n"
        f"Groundspeed: {point.groundspeed:.2f} m/s\n"
    )


def _shared_styles() -> list[Style | StyleMap]:
    arrow = StyleMap(
        id=ARROW_STYLE_ID,
        normal=Style(
            balloon_text="$[description]",
            icon_href=_ARROW_ICON,
            icon_scale=0.65,
            label_color=_MAGENTA,
            label_scale=0.75,
            line_width=3.25,
        ),
        highlight=Style(
            balloon_text="$[description]",
            icon_href=_ARROW_ICON,
            icon_scale=0.65,
            label_color=_MAGENTA,
            label_scale=0.9,
            line_width=6.5,
        ),
    )
    ground_track = Style(
        id=GROUND_TRACK_STYLE_ID,
        balloon_text="$[id]",
        icon_scale=0.0,
        label_color=_MAGENTA,
        label_scale=0.0,
        line_color=_BLACK,
        line_width=9.0,
    )
    wall_axes = StyleMap(
        id=WALL_AXES_STYLE_ID,
        normal=Style(
            balloon_text="$[id]",
            icon_scale=0.0,
            label_color=_MAGENTA,
            label_scale=0.0,
            line_color=_BLACK,
            line_width=0.9,
        ),
        highlight=Style(
            balloon_text="$[id]",
            icon_scale=0.0,
            label_color=_MAGENTA,
            label_scale=0.75,
            line_color=_BLACK,
            line_width=1.8,
        ),
    )
    return [arrow, ground_track, wall_axes]


class DocumentAssembler:
    """Builds the final document from a finished :class:`TrackBuilder`.

    Parameters
    ----------
    name:
        Document name.
    start_time:
        Wall-clock instant that log time 0 maps to. Defaults to the moment
        the assembler is created.
    max_velocity:
        Speed mapped onto the last keyframe color.
    """

    def __init__(
        self,
        name: str = "Flight log",
        start_time: datetime | None = None,
        max_velocity: float = DEFAULT_MAX_VELOCITY,
    ) -> None:
        self._name = name
        self._start_time = start_time or datetime.now(timezone.utc)
        self._max_velocity = max_velocity

    def assemble(self, builder: TrackBuilder) -> KmlDocument:
        """Return the document for everything *builder* accumulated."""
        doc = KmlDocument(name=self._name, styles=_shared_styles())

        doc.features.append(
            Folder(TRACK_FOLDER, [self.segment_placemark(s) for s in builder.segments])
        )
        doc.features.append(
            Folder(KEYFRAME_FOLDER, [self.keyframe_placemark(k) for k in builder.keyframes])
        )
        doc.features.append(
            Placemark(
                name=GROUND_TRACK_NAME,
                style_url=f"#{GROUND_TRACK_STYLE_ID}",
                geometry=LineString(
                    coordinates=tuple(builder.track_points),
                    extrude=False,
                    altitude_mode=AltitudeMode.CLAMP_TO_GROUND,
                    multi_geometry=True,
                ),
            )
        )
        doc.features.append(
            Folder(
                WALL_AXES_FOLDER,
                [
                    Placemark(
                        style_url=f"#{WALL_AXES_STYLE_ID}",
                        geometry=LineString(
                            coordinates=tuple(line),
                            extrude=False,
                            altitude_mode=AltitudeMode.ABSOLUTE,
                            multi_geometry=True,
                        ),
                    )
                    for line in builder.reference_lines
                ],
            )
        )
        return doc

    def segment_placemark(self, segment: Segment) -> Placemark:
        """Ground-extruded line colored by the segment's mean groundspeed."""
        line_color = segment.color or self._color(segment.groundspeed)
        poly_color = self._color(segment.groundspeed, alpha=_POLY_ALPHA)
        when = self._wall_time(segment.timestamp)
        return Placemark(
            name=format_time(when),
            description=describe(segment.end, segment.airspeed),
            geometry=LineString(
                coordinates=(segment.start, segment.end),
                extrude=True,
                altitude_mode=AltitudeMode.ABSOLUTE,
            ),
            style=StyleMap(
                normal=Style(
                    balloon_text="$[description]",
                    line_color=line_color.hex,
                    poly_color=poly_color.hex,
                ),
                highlight=Style(
                    balloon_text="$[description]",
                    line_color=line_color.hex,
                    poly_color=poly_color.hex,
                    poly_fill=False,
                ),
            ),
            time_span=TimeSpan(begin=when, end=when),
        )

    def keyframe_placemark(self, keyframe: Keyframe) -> Placemark:
        """Arrow marker rotated to the vehicle heading, spanning its interval."""
        return Placemark(
            name=f"{keyframe.interval_end / 1000.0:g}",
            description=describe(keyframe.point, keyframe.airspeed),
            geometry=Point(
                coordinate=keyframe.point,
                extrude=True,
                altitude_mode=AltitudeMode.ABSOLUTE,
            ),
            style_url=f"#{ARROW_STYLE_ID}",
            style=Style(
                icon_color=self._color(keyframe.airspeed).hex,
                icon_heading=keyframe.heading + _ARROW_HEADING_OFFSET,
                line_color=self._color(keyframe.point.groundspeed).hex,
            ),
            time_span=TimeSpan(
                begin=self._wall_time(keyframe.interval_start),
                end=self._wall_time(keyframe.interval_end),
            ),
        )

    def _wall_time(self, timestamp_ms: int) -> datetime:
        return self._start_time + timedelta(milliseconds=timestamp_ms)

    def _color(self, velocity: float, alpha: int = 255):
        return map_velocity_to_color(velocity, alpha=alpha, max_velocity=self._max_velocity)
