"""Export configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any

from gcs_kml.errors import ConfigError

ENV_PREFIX = "GCS_KML_"


@dataclass
class ExportConfig:
    """Tunable constants of an export run.

    Every field can be overridden from the environment as
    ``GCS_KML_<FIELD_NAME_UPPERCASE>``, see :meth:`from_env`.
    """

    max_velocity: float = 20.0          # m/s, last color in the jet table
    wall_axis_count: int = 5
    wall_axis_separation: float = 20.0  # m
    keyframe_interval_ms: int = 2000
    max_payload_length: int = 1024 * 1024
    marker_search_lines: int = 10
    expected_build_hash: str | None = None
    expected_schema_hash: str | None = None
    document_name: str = "Flight log"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides: Any) -> ExportConfig:
        """Build a config from defaults, then ``GCS_KML_*`` variables, then *overrides*.

        Raises
        ------
        ConfigError
            If a numeric variable cannot be parsed.
        """
        environ = os.environ if environ is None else environ
        kwargs: dict[str, Any] = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None or raw == "":
                continue
            try:
                if f.type == "int":
                    kwargs[f.name] = int(raw)
                elif f.type == "float":
                    kwargs[f.name] = float(raw)
                else:
                    kwargs[f.name] = raw
            except ValueError as exc:
                raise ConfigError(
                    f"Invalid value for {ENV_PREFIX}{f.name.upper()}: {raw!r}"
                ) from exc
        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**kwargs)
