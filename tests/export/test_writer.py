"""Tests for KmlWriter — markup, .kml / .kmz output and extension checks."""

from __future__ import annotations

import xml.etree.ElementTree as ET
import zipfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

from gcs_kml.errors import OutputWriteError, UnsupportedOutputError
from gcs_kml.export.assembler import DocumentAssembler
from gcs_kml.export.writer import KmlWriter, output_mode
from gcs_kml.telemetry.models import GPSPosition, GPSStatus, HomeLocation, PositionActual
from gcs_kml.track.builder import TrackBuilder

_NS = {"kml": "http://www.opengis.net/kml/2.2"}


@pytest.fixture
def document():
    b = TrackBuilder()
    b.on_object_updated(HomeLocation(set=True, latitude=473977420, longitude=85455940, altitude=488.0))
    b.on_object_updated(GPSPosition(status=GPSStatus.FIX3D))
    for ts, north in ((0, 0.0), (1500, 15.0), (3000, 30.0)):
        b.set_timestamp(ts)
        b.on_object_updated(PositionActual(north=north, east=0.0, down=0.0))
    start = datetime(2026, 5, 1, 9, 30, 0, tzinfo=timezone.utc)
    return DocumentAssembler(name="Writer test", start_time=start).assemble(b)


# ---------------------------------------------------------------------------
# output_mode
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "path, mode",
    [("a.kml", "kml"), ("a.kmz", "kmz"), ("dir/A.KML", "kml"), ("x.y.KmZ", "kmz")],
)
def test_output_mode(path, mode):
    assert output_mode(path) == mode


@pytest.mark.parametrize("path", ["track.txt", "track", "track.kml.bak"])
def test_output_mode_rejects_other_extensions(path):
    with pytest.raises(UnsupportedOutputError):
        output_mode(path)


# ---------------------------------------------------------------------------
# Markup
# ---------------------------------------------------------------------------


def test_serialize_has_declaration_and_namespace(document):
    data = KmlWriter().serialize(document)
    assert data.startswith(b"<?xml")
    assert b'xmlns="http://www.opengis.net/kml/2.2"' in data
    assert b"ns0:" not in data


def test_serialize_structure(document):
    root = ET.fromstring(KmlWriter().serialize(document))
    doc = root.find("kml:Document", _NS)
    assert doc.find("kml:name", _NS).text == "Writer test"
    folders = [f.find("kml:name", _NS).text for f in doc.findall("kml:Folder", _NS)]
    assert folders == ["Track", "Arrows", "Wall axes"]
    assert len(doc.findall("kml:Folder", _NS)[0].findall("kml:Placemark", _NS)) == 2


def test_shared_styles_have_ids(document):
    root = ET.fromstring(KmlWriter().serialize(document))
    doc = root.find("kml:Document", _NS)
    ids = {el.get("id") for el in doc.findall("kml:StyleMap", _NS) + doc.findall("kml:Style", _NS)}
    assert ids == {"directiveArrowStyle", "ts_2_tb", "ts_1_tb"}


def test_coordinates_are_lon_lat_alt(document):
    root = ET.fromstring(KmlWriter().serialize(document))
    ground = next(
        p for p in root.iter(f"{{{_NS['kml']}}}Placemark") if p.findtext("kml:name", namespaces=_NS) == "Ground track"
    )
    coords = ground.find(".//kml:coordinates", _NS).text.split()
    assert len(coords) == 3
    lon, lat, alt = (float(v) for v in coords[0].split(","))
    assert lon == pytest.approx(8.545594)
    assert lat == pytest.approx(47.397742)
    assert alt == pytest.approx(488.0, abs=0.01)
    assert ground.find(".//kml:altitudeMode", _NS).text == "clampToGround"
    assert ground.find("kml:MultiGeometry", _NS) is not None


def test_segment_timespan(document):
    root = ET.fromstring(KmlWriter().serialize(document))
    first = root.find(".//kml:Folder/kml:Placemark", _NS)
    assert first.find("kml:name", _NS).text == "2026-05-01T09:30:01Z"
    assert first.find("kml:TimeSpan/kml:begin", _NS).text == "2026-05-01T09:30:01Z"
    assert first.find("kml:TimeSpan/kml:end", _NS).text == "2026-05-01T09:30:01Z"


def test_keyframe_icon_style(document):
    root = ET.fromstring(KmlWriter().serialize(document))
    arrows = root.findall("kml:Document/kml:Folder", _NS)[1]
    placemark = arrows.find("kml:Placemark", _NS)
    assert placemark.find("kml:styleUrl", _NS).text == "#directiveArrowStyle"
    assert placemark.find("kml:Style/kml:IconStyle/kml:heading", _NS).text == "180"
    assert placemark.find("kml:Point/kml:extrude", _NS).text == "1"


# ---------------------------------------------------------------------------
# write
# ---------------------------------------------------------------------------


def test_write_kml(document, tmp_path):
    path = tmp_path / "out.kml"
    assert KmlWriter().write(document, str(path)) == "kml"
    ET.fromstring(path.read_bytes())  # well-formed


def test_write_kmz_contains_doc_kml(document, tmp_path):
    path = tmp_path / "out.kmz"
    writer = KmlWriter()
    assert writer.write(document, str(path)) == "kmz"
    with zipfile.ZipFile(path) as kmz:
        assert kmz.namelist() == ["doc.kml"]
        assert kmz.getinfo("doc.kml").compress_type == zipfile.ZIP_DEFLATED
        assert kmz.read("doc.kml") == writer.serialize(document)


def test_write_rejects_bad_extension_without_writing(document, tmp_path):
    path = tmp_path / "out.txt"
    with pytest.raises(UnsupportedOutputError):
        KmlWriter().write(document, str(path))
    assert not path.exists()


def test_write_failure_raises_output_write_error(document, tmp_path):
    path = tmp_path / "missing_dir" / "out.kml"
    with pytest.raises(OutputWriteError):
        KmlWriter().write(document, str(path))
    assert not Path(path).exists()
