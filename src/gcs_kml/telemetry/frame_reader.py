"""Header-level access to the frame region of a GCS log.

Each frame is laid out as::

    uint32 timestamp_ms   (little-endian)
    int64  payload_length (little-endian)
    payload_length bytes of telemetry stream

The format has no sync marker. The only integrity check available is that
a sane length never uses more than the low 16 bits, so bits 16-63 act as a
must-be-zero region.

Known limitation: resynchronizing after a bad header advances one byte at
a time and accepts the first offset whose would-be length field passes the
check. Six zero bytes are weak evidence of a real boundary, so arbitrary
corrupted data can produce any number of false restarts before (or
instead of) realigning with a genuine frame.
"""

from __future__ import annotations

import ctypes
import io
from dataclasses import dataclass
from typing import BinaryIO

_SYNC_MASK = 0xFFFFFFFFFFFF0000  # bits that must be clear in payload_length


class _RawFrameHeader(ctypes.LittleEndianStructure):
    _pack_ = 1
    _fields_ = [
        ("timestamp_ms", ctypes.c_uint32),
        ("payload_length", ctypes.c_int64),
    ]


HEADER_SIZE = ctypes.sizeof(_RawFrameHeader)  # 12


class FrameCorruptError(Exception):
    """Raised when the header at *offset* fails the length-field check."""

    def __init__(self, offset: int, payload_length: int) -> None:
        super().__init__(
            f"Corrupted frame header at offset 0x{offset:x}: "
            f"length field 0x{payload_length & 0xFFFFFFFFFFFFFFFF:016x}"
        )
        self.offset = offset
        self.payload_length = payload_length


@dataclass(frozen=True)
class FrameHeader:
    """A successfully parsed frame header."""

    offset: int
    """File offset of the first header byte."""

    timestamp_ms: int
    payload_length: int

    @property
    def payload_offset(self) -> int:
        return self.offset + HEADER_SIZE

    @property
    def end_offset(self) -> int:
        """Offset of the byte following the payload (the next header)."""
        return self.payload_offset + self.payload_length


class FrameReader:
    """Reads frame headers from a seekable binary stream.

    Parameters
    ----------
    stream:
        A seekable binary file object positioned at the start of a frame.
        The reader never closes it; ownership stays with the caller.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def tell(self) -> int:
        return self._stream.tell()

    def seek(self, offset: int) -> None:
        self._stream.seek(offset, io.SEEK_SET)

    def read_header(self, check_sync: bool = True) -> FrameHeader | None:
        """Read one header at the current position.

        Returns ``None`` at end of stream, including when fewer than
        :data:`HEADER_SIZE` bytes remain. On success the cursor sits at the
        first payload byte.

        Raises
        ------
        FrameCorruptError
            If *check_sync* is set and the length field has any bit above
            bit 15 set. The cursor is left after the attempted header; call
            :meth:`resync` to recover.
        """
        offset = self._stream.tell()
        buf = self._stream.read(HEADER_SIZE)
        if len(buf) < HEADER_SIZE:
            return None

        raw = _RawFrameHeader.from_buffer_copy(buf)
        if check_sync and raw.payload_length & _SYNC_MASK:
            raise FrameCorruptError(offset, raw.payload_length)
        return FrameHeader(
            offset=offset,
            timestamp_ms=raw.timestamp_ms,
            payload_length=raw.payload_length,
        )

    def resync(self, failed_offset: int) -> None:
        """Move to one byte past *failed_offset*, the start of the bad header."""
        self.seek(failed_offset + 1)

    def skip_payload(self, header: FrameHeader) -> bool:
        """Position the cursor on the next header without reading the payload.

        Returns ``False`` when the payload runs past the end of the stream.
        """
        end = self._stream.seek(0, io.SEEK_END)
        if header.end_offset > end:
            return False
        self.seek(header.end_offset)
        return True

    def read_payload(self, header: FrameHeader) -> bytes | None:
        """Read the payload of *header*; ``None`` if the stream ends first."""
        self.seek(header.payload_offset)
        data = self._stream.read(header.payload_length)
        if len(data) < header.payload_length:
            return None
        return data
