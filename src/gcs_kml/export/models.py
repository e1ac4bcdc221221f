"""KML document model handed from the assembler to the writer.

These types mirror the subset of KML the export produces. They carry data
only; markup is generated by :mod:`gcs_kml.export.writer`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Union

from gcs_kml.track.models import GeoPoint

DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"  # XML Schema dateTime, required by KML


def format_time(value: datetime) -> str:
    """Render *value* as a UTC KML timestamp."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(DATETIME_FORMAT)


class AltitudeMode(Enum):
    ABSOLUTE = "absolute"
    CLAMP_TO_GROUND = "clampToGround"


@dataclass(frozen=True)
class Style:
    """A KML ``<Style>``; unset fields are omitted from the markup."""

    id: str | None = None
    balloon_text: str | None = None
    icon_href: str | None = None
    icon_color: str | None = None
    icon_scale: float | None = None
    icon_heading: float | None = None
    label_color: str | None = None
    label_scale: float | None = None
    line_color: str | None = None
    line_width: float | None = None
    poly_color: str | None = None
    poly_fill: bool | None = None


@dataclass(frozen=True)
class StyleMap:
    """Normal/highlight style pair."""

    normal: Style
    highlight: Style
    id: str | None = None


@dataclass(frozen=True)
class TimeSpan:
    begin: datetime
    end: datetime


@dataclass(frozen=True)
class LineString:
    coordinates: tuple[GeoPoint, ...]
    extrude: bool = False
    altitude_mode: AltitudeMode = AltitudeMode.ABSOLUTE
    multi_geometry: bool = False
    """Wrap the line in ``<MultiGeometry>``."""


@dataclass(frozen=True)
class Point:
    coordinate: GeoPoint
    extrude: bool = False
    altitude_mode: AltitudeMode = AltitudeMode.ABSOLUTE


Geometry = Union[LineString, Point]


@dataclass(frozen=True)
class Placemark:
    geometry: Geometry
    name: str | None = None
    description: str | None = None
    style_url: str | None = None
    style: Style | StyleMap | None = None
    time_span: TimeSpan | None = None
    visible: bool = True


@dataclass
class Folder:
    name: str
    features: list[Placemark] = field(default_factory=list)


@dataclass
class KmlDocument:
    """Root of the assembled export."""

    name: str
    styles: list[Style | StyleMap] = field(default_factory=list)
    features: list[Folder | Placemark] = field(default_factory=list)
