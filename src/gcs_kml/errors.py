"""Fatal export errors.

Everything here aborts an export run. Framing corruption is not an
``ExportError``: it is absorbed by the scanner and only surfaces as warnings.
"""

from __future__ import annotations


class ExportError(Exception):
    """Base class for failures that abort an export run."""


class LogOpenError(ExportError):
    """Raised when the input log cannot be opened."""


class EmptyLogError(ExportError):
    """Raised when validation finds no well-formed frame in the log."""


class UnsupportedOutputError(ExportError):
    """Raised when the output extension selects no known serialization mode."""


class OutputWriteError(ExportError):
    """Raised when the serialized document cannot be written."""


class DecoderUnavailableError(ExportError):
    """Raised when no decoder factory can be resolved or imported."""


class ConfigError(ExportError):
    """Raised when a ``GCS_KML_*`` variable holds a value of the wrong type."""
