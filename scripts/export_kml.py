"""Export a GCS telemetry log to Google Earth KML/KMZ.

Usage:
  python scripts/export_kml.py flight.opl flight.kmz \\
      --decoder my_uavobjects.decoder:create_decoder \\
      --start-time 2026-05-01T09:30:00Z \\
      --max-velocity 25

The decoder can also be configured with the GCS_KML_DECODER environment
variable (a .env file in the working directory is honoured).
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime

from dotenv import load_dotenv

from gcs_kml.errors import ExportError
from gcs_kml.export.config import ExportConfig
from gcs_kml.export.exporter import KmlExporter


def _parse_time(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an ISO-8601 timestamp: {value!r}") from exc


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Export a GCS telemetry log to KML/KMZ")
    ap.add_argument("log", help="Telemetry log file")
    ap.add_argument("output", help="Output file; .kml or .kmz")
    ap.add_argument("--decoder", default=None, help="Decoder factory as package.module:callable")
    ap.add_argument(
        "--start-time",
        type=_parse_time,
        default=None,
        help="Wall-clock time of log time 0 (ISO-8601, default: now)",
    )
    ap.add_argument(
        "--max-velocity",
        type=float,
        default=None,
        help="Speed in m/s mapped onto the last color (default: 20)",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(argv)

    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    print(f"Log    : {args.log}")
    print(f"Output : {args.output}")
    print()

    try:
        config = ExportConfig.from_env(max_velocity=args.max_velocity)
        exporter = KmlExporter(config=config, decoder_reference=args.decoder)
        result = exporter.export(args.log, args.output, start_time=args.start_time)
    except ExportError as exc:
        print(f"  [!] {exc}", file=sys.stderr)
        return 1

    print(f"Frames    : {result.frames}")
    print(f"Segments  : {result.segments}")
    print(f"Keyframes : {result.keyframes}")
    for warning in result.warnings:
        print(f"  [!] {warning}")
    if result.partial:
        print(f"\n[PARTIAL] Log was truncated; data up to the corruption was saved to {args.output}")
    else:
        print(f"\n[OK] Done: {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
