"""Telemetry decoder interface and factory resolution.

The byte-level telemetry protocol lives outside this package. A decoder is
any object that accepts raw bytes one at a time and synchronously calls the
registered callbacks with the typed objects from
:mod:`gcs_kml.telemetry.models` as they complete.
"""

from __future__ import annotations

import importlib
import os
from collections.abc import Callable
from typing import Protocol

from gcs_kml.errors import DecoderUnavailableError
from gcs_kml.telemetry.models import TelemetryObject

DECODER_ENV_VAR = "GCS_KML_DECODER"


class TelemetryDecoder(Protocol):
    def register_callback(self, callback: Callable[[TelemetryObject], None]) -> None:
        """Register *callback(obj)* for every decoded object update."""

    def process_input_byte(self, byte: int) -> None:
        """Feed one raw byte (0-255) into the decoder state machine."""


DecoderFactory = Callable[[], TelemetryDecoder]


def load_decoder_factory(reference: str | None = None) -> DecoderFactory:
    """Resolve a ``"package.module:factory"`` reference to a callable.

    Falls back to the ``GCS_KML_DECODER`` environment variable when
    *reference* is not given.

    Raises
    ------
    DecoderUnavailableError
        If no reference is configured, it is malformed, or the import fails.
    """
    reference = reference or os.environ.get(DECODER_ENV_VAR, "")
    if not reference:
        raise DecoderUnavailableError(
            f"No telemetry decoder configured; pass --decoder or set {DECODER_ENV_VAR}"
        )

    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise DecoderUnavailableError(
            f"Decoder reference must look like 'package.module:factory', got {reference!r}"
        )

    try:
        module = importlib.import_module(module_name)  # lazy: decoders are plugins
    except ImportError as exc:
        raise DecoderUnavailableError(f"Cannot import decoder module {module_name!r}: {exc}") from exc

    try:
        factory = getattr(module, attr)
    except AttributeError as exc:
        raise DecoderUnavailableError(f"{module_name!r} has no attribute {attr!r}") from exc

    if not callable(factory):
        raise DecoderUnavailableError(f"Decoder factory {reference!r} is not callable")
    return factory
