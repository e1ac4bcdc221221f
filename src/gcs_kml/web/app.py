"""FastAPI web application exposing the KML export."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException

from gcs_kml.errors import ExportError
from gcs_kml.web.schemas import ExportRequest, ExportResponse, HealthResponse
from gcs_kml.web.service import ExportService

load_dotenv()  # loads .env from project root; must run before env vars are consumed

_logger = logging.getLogger(__name__)

__version__ = "0.1.0"

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(title="GCS KML Export", version=__version__)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


@app.post("/api/export", response_model=ExportResponse)
def export(req: ExportRequest) -> ExportResponse:
    """Convert a telemetry log into a .kml or .kmz file on the server."""
    svc = ExportService()
    try:
        result = svc.run_export(req)
    except ExportError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except Exception as exc:
        _logger.exception("Export of %s failed", req.log_path)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return ExportResponse(
        output_path=result.output_path,
        partial=result.partial,
        frames=result.frames,
        segments=result.segments,
        keyframes=result.keyframes,
        warnings=result.warnings,
    )
