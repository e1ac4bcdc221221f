"""LogScanner — two-pass reader for GCS telemetry logs.

Pass 1 (:meth:`LogScanner.validate`) walks every frame header without
decoding anything, resynchronizing past corrupted headers, and builds the
frame index. Pass 2 (:meth:`LogScanner.stream`) replays the payloads, byte
by byte and in file order, into a telemetry decoder. Pass 2 cannot
resynchronize because the decoder has already consumed part of the stream,
so a bad length there stops the scan and keeps what was decoded so far.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import BinaryIO, NamedTuple

from gcs_kml.errors import EmptyLogError, LogOpenError
from gcs_kml.telemetry.decoder import TelemetryDecoder
from gcs_kml.telemetry.frame_reader import FrameCorruptError, FrameHeader, FrameReader

_logger = logging.getLogger(__name__)

HEADER_SEPARATOR = b"##"
MAX_PAYLOAD_LENGTH = 1024 * 1024


class FrameIndexEntry(NamedTuple):
    offset: int
    timestamp_ms: int


@dataclass(frozen=True)
class LogHeader:
    """The text header preceding the frame region."""

    branch: str
    build_hash: str
    schema_hash: str
    marker_found: bool
    """False when ``##`` was not found and the frame region falls back to offset 0."""

    frames_offset: int


@dataclass
class ValidationReport:
    """Result of pass 1."""

    index: list[FrameIndexEntry] = field(default_factory=list)
    payload_bytes: int = 0
    corrupt_headers: int = 0
    out_of_order: int = 0
    format_marker_found: bool = True

    @property
    def timestamps(self) -> list[int]:
        return [entry.timestamp_ms for entry in self.index]


@dataclass
class StreamReport:
    """Result of pass 2."""

    frames: int = 0
    payload_bytes: int = 0
    halted_at: int | None = None
    """Offset of the frame that stopped streaming early, if any."""

    halt_reason: str = ""

    @property
    def truncated(self) -> bool:
        return self.halted_at is not None


class LogScanner:
    """Owns one log file for the duration of an export run.

    Parameters
    ----------
    path:
        Path to the GCS log file.
    expected_build_hash, expected_schema_hash:
        Values the header lines are compared with. ``None`` skips the
        corresponding comparison.
    marker_search_lines:
        How many lines after the three header lines may precede ``##``.
    max_payload_length:
        Largest payload pass 2 accepts before declaring the stream corrupt.
    initial_resync_limit:
        Number of failed header attempts at the start of the frame region,
        with no valid frame yet, after which the format marker is reported
        missing. Scanning continues regardless.
    """

    def __init__(
        self,
        path: str,
        expected_build_hash: str | None = None,
        expected_schema_hash: str | None = None,
        marker_search_lines: int = 10,
        max_payload_length: int = MAX_PAYLOAD_LENGTH,
        initial_resync_limit: int = 10,
    ) -> None:
        self._path = path
        self._expected_build_hash = expected_build_hash
        self._expected_schema_hash = expected_schema_hash
        self._marker_search_lines = marker_search_lines
        self._max_payload_length = max_payload_length
        self._initial_resync_limit = initial_resync_limit
        self._file: BinaryIO | None = None
        self._reader: FrameReader | None = None
        self._header: LogHeader | None = None
        self.warnings: list[str] = []

    def __enter__(self) -> LogScanner:
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def header(self) -> LogHeader | None:
        return self._header

    def open(self) -> LogHeader:
        """Open the log, check the text header and locate the frame region.

        Raises
        ------
        LogOpenError
            If the file cannot be opened for reading.
        """
        self.close()
        try:
            self._file = open(self._path, "rb")
        except OSError as exc:
            raise LogOpenError(f"Unable to open {self._path!r}: {exc}") from exc

        self._reader = FrameReader(self._file)
        self._header = self._read_header(self._file)
        return self._header

    def validate(self) -> ValidationReport:
        """Pass 1: index every well-formed frame without decoding payloads.

        Leaves the cursor at the start of the frame region.

        Raises
        ------
        EmptyLogError
            If no frame could be indexed. The file is closed first.
        """
        reader = self._require_reader()
        start = self._header.frames_offset
        reader.seek(start)

        report = ValidationReport()
        initial_failures = 0

        while True:
            try:
                header = reader.read_header()
            except FrameCorruptError as exc:
                report.corrupt_headers += 1
                _logger.debug("%s; resynchronizing", exc)
                if not report.index:
                    initial_failures += 1
                    if initial_failures == self._initial_resync_limit:
                        report.format_marker_found = False
                        self._warn(
                            "Format marker not found: no valid frame in the first "
                            f"{initial_failures} header attempts. Export continues best-effort."
                        )
                reader.resync(exc.offset)
                continue

            if header is None:
                break
            if not reader.skip_payload(header):
                _logger.info(
                    "Ignoring trailing partial frame at 0x%x (%d payload bytes declared)",
                    header.offset,
                    header.payload_length,
                )
                break

            if report.index and header.timestamp_ms < report.index[-1].timestamp_ms:
                report.out_of_order += 1
                _logger.warning(
                    "Timestamps are not sequential at 0x%x: %d after %d",
                    header.offset,
                    header.timestamp_ms,
                    report.index[-1].timestamp_ms,
                )

            report.index.append(FrameIndexEntry(header.offset, header.timestamp_ms))
            report.payload_bytes += header.payload_length

        if report.corrupt_headers:
            self._warn(
                f"Corrupted file: skipped {report.corrupt_headers} bad frame header(s) "
                "while resynchronizing."
            )
        if report.out_of_order:
            self._warn(
                f"Corrupted file: {report.out_of_order} timestamp(s) are not sequential. "
                "Playback may have unexpected behavior."
            )

        if not report.index:
            self.close()
            raise EmptyLogError(f"Empty logfile: no log data can be found in {self._path!r}")

        _logger.info(
            "Validated %d frame(s), %d payload byte(s)", len(report.index), report.payload_bytes
        )
        reader.seek(start)
        return report

    def stream(
        self,
        decoder: TelemetryDecoder,
        on_frame: Callable[[FrameHeader], None] | None = None,
    ) -> StreamReport:
        """Pass 2: feed every payload into *decoder*, in order, one byte at a time.

        *on_frame* is called with each frame header before its payload is
        pushed, so listeners can stamp decoded objects with the frame time.
        The log is closed when streaming ends, however it ends.
        """
        reader = self._require_reader()
        report = StreamReport()
        reader.seek(self._header.frames_offset)

        try:
            while True:
                offset = reader.tell()
                header = reader.read_header(check_sync=False)
                if header is None:
                    if reader.tell() != offset:
                        self._halt(report, offset, "trailing partial frame header")
                    break

                if not 1 <= header.payload_length <= self._max_payload_length:
                    self._halt(report, offset, f"unlikely packet size {header.payload_length}")
                    self._warn(
                        "Corrupted file: incorrect packet size. "
                        "Stopping export; data up to this point will be saved."
                    )
                    break

                payload = reader.read_payload(header)
                if payload is None:
                    self._halt(report, offset, "trailing partial frame payload")
                    break

                if on_frame is not None:
                    on_frame(header)
                for byte in payload:
                    decoder.process_input_byte(byte)

                report.frames += 1
                report.payload_bytes += header.payload_length
        finally:
            self.close()

        _logger.info("Streamed %d frame(s), %d payload byte(s)", report.frames, report.payload_bytes)
        return report

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
            self._reader = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read_header(self, f: BinaryIO) -> LogHeader:
        branch = f.readline().decode("latin-1").strip()
        build_hash = f.readline().decode("latin-1").strip()
        schema_hash = f.readline().decode("latin-1").strip()

        if self._expected_schema_hash is not None and schema_hash != self._expected_schema_hash:
            self._warn(
                "Likely log file incompatibility: the log file was made with branch "
                f"{build_hash}, schema hash {schema_hash}. Export will be attempted."
            )
        elif self._expected_build_hash is not None and build_hash != self._expected_build_hash:
            self._warn(
                "Possible log file incompatibility: the log file was made with branch "
                f"{build_hash}. Export will be attempted."
            )

        marker_found = False
        for _ in range(self._marker_search_lines):
            line = f.readline()
            if not line:
                break
            if line.strip() == HEADER_SEPARATOR:
                marker_found = True
                break

        if not marker_found:
            self._warn(
                "Corrupted file: cannot find the header separator. Export will be attempted "
                "from the start of the file."
            )
            f.seek(0)

        return LogHeader(
            branch=branch,
            build_hash=build_hash,
            schema_hash=schema_hash,
            marker_found=marker_found,
            frames_offset=f.tell(),
        )

    def _require_reader(self) -> FrameReader:
        if self._reader is None or self._header is None:
            raise RuntimeError("LogScanner.open() must be called first")
        return self._reader

    def _halt(self, report: StreamReport, offset: int, reason: str) -> None:
        report.halted_at = offset
        report.halt_reason = reason
        _logger.warning("Streaming stopped at 0x%x: %s", offset, reason)

    def _warn(self, message: str) -> None:
        _logger.warning(message)
        self.warnings.append(message)
