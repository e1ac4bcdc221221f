"""Tests for scripts/export_kml.py."""

from __future__ import annotations

import importlib.util
from pathlib import Path

import pytest

_SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "export_kml.py"


@pytest.fixture
def export_script():
    spec = importlib.util.spec_from_file_location("export_kml", _SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_malformed_environment_exits_with_error(export_script, logs, tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("GCS_KML_WALL_AXIS_COUNT", "five")
    out = tmp_path / "flight.kml"
    code = export_script.main([logs.write(logs.flight()), str(out)])
    assert code == 1
    assert "GCS_KML_WALL_AXIS_COUNT" in capsys.readouterr().err
    assert not out.exists()


def test_unsupported_output_exits_with_error(export_script, logs, tmp_path, capsys):
    code = export_script.main([logs.write(logs.flight()), str(tmp_path / "flight.gpx")])
    assert code == 1
    assert "[!]" in capsys.readouterr().err
