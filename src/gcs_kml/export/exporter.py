"""Runs one log-to-KML export end to end.

Steps:

1. Validate the output extension (nothing is read before this).
2. Open the log and check its text header.
3. Pass 1: index frames, resynchronizing past corrupted headers.
4. Pass 2: replay payloads into the decoder; the track builder listens.
5. Assemble the KML document and write it as ``.kml`` or ``.kmz``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from gcs_kml.export.assembler import DocumentAssembler
from gcs_kml.export.config import ExportConfig
from gcs_kml.export.writer import KmlWriter, output_mode
from gcs_kml.telemetry.decoder import DecoderFactory, load_decoder_factory
from gcs_kml.telemetry.scanner import LogScanner, StreamReport, ValidationReport
from gcs_kml.track.builder import TrackBuilder

_logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """Outcome of a successful export run."""

    output_path: str
    mode: str
    """``"kml"`` or ``"kmz"``."""

    frames: int
    segments: int
    keyframes: int
    partial: bool
    """True when pass 2 stopped before the end of the log."""

    warnings: list[str] = field(default_factory=list)
    validation: ValidationReport | None = None
    streaming: StreamReport | None = None


class KmlExporter:
    """Exports one telemetry log to a KML or KMZ document.

    Parameters
    ----------
    config:
        Tunables; defaults to :meth:`ExportConfig.from_env`.
    decoder_factory:
        Callable returning a fresh telemetry decoder. When ``None`` the
        factory is resolved lazily from *decoder_reference* or the
        ``GCS_KML_DECODER`` environment variable.
    decoder_reference:
        ``"package.module:factory"`` reference used when no factory is given.
    """

    def __init__(
        self,
        config: ExportConfig | None = None,
        decoder_factory: DecoderFactory | None = None,
        decoder_reference: str | None = None,
    ) -> None:
        self._config = config or ExportConfig.from_env()
        self._decoder_factory = decoder_factory
        self._decoder_reference = decoder_reference
        self._writer = KmlWriter()

    @property
    def config(self) -> ExportConfig:
        return self._config

    def export(
        self,
        log_path: str,
        output_path: str,
        start_time: datetime | None = None,
    ) -> ExportResult:
        """Convert *log_path* into *output_path*.

        Parameters
        ----------
        log_path:
            GCS telemetry log to read.
        output_path:
            Destination; its extension selects ``.kml`` or ``.kmz``.
        start_time:
            Wall-clock instant mapped to log time 0. Defaults to now.

        Returns
        -------
        ExportResult
            Counts, warnings and whether the export is partial.

        Raises
        ------
        UnsupportedOutputError
            If *output_path* has neither extension; the log is not opened.
        LogOpenError, EmptyLogError, DecoderUnavailableError, OutputWriteError
            On any other fatal failure. No output file is written.
        """
        cfg = self._config
        mode = output_mode(output_path)
        factory = self._factory()

        scanner = LogScanner(
            log_path,
            expected_build_hash=cfg.expected_build_hash,
            expected_schema_hash=cfg.expected_schema_hash,
            marker_search_lines=cfg.marker_search_lines,
            max_payload_length=cfg.max_payload_length,
        )
        with scanner:
            header = scanner.header
            _logger.info(
                "Exporting %s (branch=%s build=%s) to %s",
                log_path,
                header.branch if header else "?",
                header.build_hash if header else "?",
                output_path,
            )
            validation = scanner.validate()

            builder = TrackBuilder(
                keyframe_interval_ms=cfg.keyframe_interval_ms,
                wall_axis_count=cfg.wall_axis_count,
                wall_axis_separation=cfg.wall_axis_separation,
                max_velocity=cfg.max_velocity,
            )
            decoder = factory()
            decoder.register_callback(builder.on_object_updated)
            streaming = scanner.stream(decoder, on_frame=builder.begin_frame)

        assembler = DocumentAssembler(
            name=cfg.document_name,
            start_time=start_time,
            max_velocity=cfg.max_velocity,
        )
        document = assembler.assemble(builder)
        self._writer.write(document, output_path)

        result = ExportResult(
            output_path=output_path,
            mode=mode,
            frames=streaming.frames,
            segments=len(builder.segments),
            keyframes=len(builder.keyframes),
            partial=streaming.truncated,
            warnings=list(scanner.warnings),
            validation=validation,
            streaming=streaming,
        )
        if result.partial:
            _logger.warning(
                "Partial export: streaming stopped at 0x%x (%s)",
                streaming.halted_at,
                streaming.halt_reason,
            )
        _logger.info(
            "Export finished: %d frame(s), %d segment(s), %d keyframe(s)",
            result.frames,
            result.segments,
            result.keyframes,
        )
        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _factory(self) -> DecoderFactory:
        if self._decoder_factory is None:
            self._decoder_factory = load_decoder_factory(self._decoder_reference)
        return self._decoder_factory
