"""Telemetry log framing, scanning and decoder interface.

Public API
----------
FrameReader         - reads 12-byte frame headers from a binary stream
LogScanner          - two-pass reader: validation index, then decoder replay
TelemetryDecoder    - protocol implemented by the external object decoder
load_decoder_factory - resolves a "module:factory" decoder reference
HomeLocation, PositionActual, VelocityActual, AttitudeActual,
AirspeedActual, GPSPosition - decoded telemetry objects
"""

from gcs_kml.telemetry.decoder import (
    DECODER_ENV_VAR,
    DecoderFactory,
    TelemetryDecoder,
    load_decoder_factory,
)
from gcs_kml.telemetry.frame_reader import (
    HEADER_SIZE,
    FrameCorruptError,
    FrameHeader,
    FrameReader,
)
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
from gcs_kml.telemetry.scanner import (
    FrameIndexEntry,
    LogHeader,
    LogScanner,
    StreamReport,
    ValidationReport,
)

__all__ = [
    "DECODER_ENV_VAR",
    "HEADER_SIZE",
    "AirspeedActual",
    "AttitudeActual",
    "DecoderFactory",
    "FrameCorruptError",
    "FrameHeader",
    "FrameIndexEntry",
    "FrameReader",
    "GPSPosition",
    "GPSStatus",
    "HomeLocation",
    "LogHeader",
    "LogScanner",
    "PositionActual",
    "StreamReport",
    "TelemetryDecoder",
    "TelemetryObject",
    "ValidationReport",
    "VelocityActual",
    "load_decoder_factory",
]
