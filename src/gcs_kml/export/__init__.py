"""KML/KMZ document assembly and export.

Public API
----------
KmlExporter         - runs a complete log → KML/KMZ export
ExportConfig        - tunables, overridable from GCS_KML_* variables
DocumentAssembler   - TrackBuilder output → KmlDocument
KmlWriter           - KmlDocument → .kml / .kmz file
"""

from gcs_kml.export.assembler import DocumentAssembler
from gcs_kml.export.config import ExportConfig
from gcs_kml.export.exporter import ExportResult, KmlExporter
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
)
from gcs_kml.export.writer import KmlWriter, output_mode

__all__ = [
    "AltitudeMode",
    "DocumentAssembler",
    "ExportConfig",
    "ExportResult",
    "Folder",
    "KmlDocument",
    "KmlExporter",
    "KmlWriter",
    "LineString",
    "Placemark",
    "Point",
    "Style",
    "StyleMap",
    "TimeSpan",
    "output_mode",
]
