"""Shared fixtures: a fake telemetry decoder and a log-file builder."""

from __future__ import annotations

import json
import struct
from pathlib import Path

import pytest

from gcs_kml.telemetry.models import (
    AirspeedActual,
    AttitudeActual,
    GPSPosition,
    GPSStatus,
    HomeLocation,
    PositionActual,
    VelocityActual,
)

_OBJECT_TYPES = {
    "HomeLocation": HomeLocation,
    "PositionActual": PositionActual,
    "VelocityActual": VelocityActual,
    "AttitudeActual": AttitudeActual,
    "AirspeedActual": AirspeedActual,
    "GPSPosition": GPSPosition,
}

# Payloads are padded so the second length byte is non-zero; a header
# window shifted by a few bytes then always fails the sync check.
_MIN_PAYLOAD = 300


class FakeDecoder:
    """Decodes newline-terminated JSON objects, one input byte at a time."""

    def __init__(self) -> None:
        self._callbacks = []
        self._buffer = bytearray()
        self.bytes_seen = 0

    def register_callback(self, callback) -> None:
        self._callbacks.append(callback)

    def process_input_byte(self, byte: int) -> None:
        self.bytes_seen += 1
        if byte != ord("\n"):
            self._buffer.append(byte)
            return
        line = bytes(self._buffer).strip()
        self._buffer.clear()
        if not line:
            return
        fields = json.loads(line)
        cls = _OBJECT_TYPES[fields.pop("object")]
        if cls is GPSPosition:
            fields["status"] = GPSStatus(fields["status"])
        obj = cls(**fields)
        for cb in self._callbacks:
            cb(obj)


class LogFactory:
    """Builds GCS log files in a temporary directory."""

    HOME = {
        "object": "HomeLocation",
        "set": True,
        "latitude": 473977420,
        "longitude": 85455940,
        "altitude": 488.0,
    }
    UNSET_HOME = {**HOME, "set": False}
    FIX3D = {"object": "GPSPosition", "status": "Fix3D"}
    NOFIX = {"object": "GPSPosition", "status": "NoFix"}

    def __init__(self, directory: Path) -> None:
        self._dir = directory

    @staticmethod
    def position(north: float, east: float = 0.0, down: float = 0.0) -> dict:
        return {"object": "PositionActual", "north": north, "east": east, "down": down}

    @staticmethod
    def velocity(north: float, east: float = 0.0) -> dict:
        return {"object": "VelocityActual", "north": north, "east": east}

    @staticmethod
    def payload(*objects: dict) -> bytes:
        """Encode telemetry objects as one padded frame payload."""
        data = b"".join(json.dumps(o).encode() + b"\n" for o in objects)
        return data.ljust(_MIN_PAYLOAD, b" ")

    @staticmethod
    def frame(timestamp_ms: int, payload: bytes, length: int | None = None) -> bytes:
        """One frame: uint32 timestamp, int64 length, payload (little-endian)."""
        length = len(payload) if length is None else length
        return struct.pack("<Iq", timestamp_ms, length) + payload

    @staticmethod
    def header(
        branch: str = "next",
        build_hash: str = "0123abcd",
        schema_hash: str = "deadbeef",
        separator: bool = True,
    ) -> bytes:
        text = f"{branch}\n{build_hash}\n{schema_hash}\n"
        if separator:
            text += "##\n"
        return text.encode()

    def write(
        self,
        frames: list[tuple[int, bytes]],
        header: bytes | None = None,
        tail: bytes = b"",
        name: str = "flight.opl",
    ) -> str:
        """Write header, frames and *tail* to a new file and return its path."""
        data = self.header() if header is None else header
        data += b"".join(self.frame(ts, payload) for ts, payload in frames)
        data += tail
        path = self._dir / name
        path.write_bytes(data)
        return str(path)

    def flight(self) -> list[tuple[int, bytes]]:
        """Home, fix and a seed position, then two more positions."""
        return [
            (
                1000,
                self.payload(self.HOME, self.FIX3D, self.velocity(3.0, 4.0), self.position(0.0)),
            ),
            (1002000, self.payload(self.velocity(6.0, 8.0), self.position(10.0, 5.0, -2.0))),
            (1004100, self.payload(self.position(20.0, 10.0, -4.0))),
        ]


@pytest.fixture
def fake_decoder() -> FakeDecoder:
    return FakeDecoder()


@pytest.fixture
def logs(tmp_path) -> LogFactory:
    return LogFactory(tmp_path)
