"""ExportService — wraps :class:`KmlExporter` for the web API."""

from __future__ import annotations

from gcs_kml.export.config import ExportConfig
from gcs_kml.export.exporter import ExportResult, KmlExporter
from gcs_kml.telemetry.decoder import DecoderFactory
from gcs_kml.web.schemas import ExportRequest


class ExportService:
    """Runs one export per request.

    Parameters
    ----------
    config:
        Export tunables. If None they are read from the environment on
        every request.
    decoder_factory:
        Optional decoder factory for testing injection. If None the
        factory is resolved from the request or ``GCS_KML_DECODER``.
    """

    def __init__(
        self,
        config: ExportConfig | None = None,
        decoder_factory: DecoderFactory | None = None,
    ) -> None:
        self._config = config
        self._decoder_factory = decoder_factory

    def run_export(self, req: ExportRequest) -> ExportResult:
        """Export ``req.log_path`` to ``req.output_path``.

        Raises
        ------
        ExportError
            On any fatal export failure.
        """
        exporter = KmlExporter(
            config=self._config or ExportConfig.from_env(),
            decoder_factory=self._decoder_factory,
            decoder_reference=req.decoder,
        )
        return exporter.export(req.log_path, req.output_path)
