"""Pydantic request/response schemas for the export API."""

from __future__ import annotations

from pydantic import BaseModel


class ExportRequest(BaseModel):
    log_path: str
    output_path: str
    decoder: str | None = None
    """``"package.module:factory"``; falls back to ``GCS_KML_DECODER``."""


class HealthResponse(BaseModel):
    status: str
    version: str


class ExportResponse(BaseModel):
    output_path: str
    partial: bool
    frames: int
    segments: int
    keyframes: int
    warnings: list[str] = []
