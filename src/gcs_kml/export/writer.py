"""KmlWriter — serializes a :class:`KmlDocument` to ``.kml`` or ``.kmz``.

The output mode is chosen by file extension: ``.kml`` writes the XML as
UTF-8 text, ``.kmz`` writes a deflated zip archive holding ``doc.kml``.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
import zipfile
from pathlib import Path

from gcs_kml.errors import OutputWriteError, UnsupportedOutputError
from gcs_kml.export.models import (
    Folder,
    KmlDocument,
    LineString,
    Placemark,
    Point,
    Style,
    StyleMap,
    format_time,
)
from gcs_kml.track.models import GeoPoint

_logger = logging.getLogger(__name__)

_KML_NS = "http://www.opengis.net/kml/2.2"

KML = "kml"
KMZ = "kmz"


def output_mode(path: str) -> str:
    """Return ``"kml"`` or ``"kmz"`` for *path*.

    Raises
    ------
    UnsupportedOutputError
        If the extension is neither (case-insensitive).
    """
    suffix = Path(path).suffix.lower().lstrip(".")
    if suffix not in (KML, KMZ):
        raise UnsupportedOutputError(f"Write failed. Invalid file name: {path!r} (expected .kml or .kmz)")
    return suffix


def _q(tag: str) -> str:
    return f"{{{_KML_NS}}}{tag}"


def _sub_element(parent: ET.Element, tag: str, text: str | None = None, **attribs: str) -> ET.Element:
    """Create a namespaced sub-element with optional text and attributes."""
    elem = ET.SubElement(parent, _q(tag), **attribs)
    if text is not None:
        elem.text = text
    return elem


def _fmt(value: float) -> str:
    return f"{value:g}"


def _coordinates(points: tuple[GeoPoint, ...]) -> str:
    return " ".join(f"{p.longitude:.8f},{p.latitude:.8f},{p.altitude:.2f}" for p in points)


def _bool(value: bool) -> str:
    return "1" if value else "0"


class KmlWriter:
    """Turns the document model into KML markup and writes it to disk."""

    def to_element(self, document: KmlDocument) -> ET.Element:
        """Build the ``<kml>`` element tree for *document*."""
        ET.register_namespace("", _KML_NS)  # avoid ns0: prefixes

        kml = ET.Element(_q("kml"))
        doc = _sub_element(kml, "Document")
        _sub_element(doc, "name", document.name)

        for style in document.styles:
            self._add_style_selector(doc, style)
        for feature in document.features:
            if isinstance(feature, Folder):
                self._add_folder(doc, feature)
            else:
                self._add_placemark(doc, feature)
        return kml

    def serialize(self, document: KmlDocument) -> bytes:
        """Return the pretty-printed UTF-8 document, XML declaration included."""
        tree = ET.ElementTree(self.to_element(document))
        ET.indent(tree, space="  ")
        return ET.tostring(tree.getroot(), encoding="utf-8", xml_declaration=True)

    def write(self, document: KmlDocument, path: str) -> str:
        """Write *document* to *path* in the mode its extension selects.

        Returns the mode used.

        Raises
        ------
        UnsupportedOutputError
            If the extension is neither ``.kml`` nor ``.kmz``. Nothing is written.
        OutputWriteError
            If the file cannot be written.
        """
        mode = output_mode(path)
        data = self.serialize(document)
        try:
            if mode == KMZ:
                with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as kmz:
                    kmz.writestr("doc.kml", data)
            else:
                Path(path).write_bytes(data)
        except OSError as exc:
            raise OutputWriteError(f"{mode.upper()} write failed: {path!r}: {exc}") from exc

        _logger.info("Wrote %s (%d bytes of KML)", path, len(data))
        return mode

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _add_folder(self, parent: ET.Element, folder: Folder) -> None:
        elem = _sub_element(parent, "Folder")
        _sub_element(elem, "name", folder.name)
        for placemark in folder.features:
            self._add_placemark(elem, placemark)

    def _add_placemark(self, parent: ET.Element, placemark: Placemark) -> None:
        elem = _sub_element(parent, "Placemark")
        if placemark.name is not None:
            _sub_element(elem, "name", placemark.name)
        _sub_element(elem, "visibility", _bool(placemark.visible))
        if placemark.description is not None:
            _sub_element(elem, "description", placemark.description)
        if placemark.time_span is not None:
            span = _sub_element(elem, "TimeSpan")
            _sub_element(span, "begin", format_time(placemark.time_span.begin))
            _sub_element(span, "end", format_time(placemark.time_span.end))
        if placemark.style_url is not None:
            _sub_element(elem, "styleUrl", placemark.style_url)
        if placemark.style is not None:
            self._add_style_selector(elem, placemark.style)
        self._add_geometry(elem, placemark.geometry)

    def _add_geometry(self, parent: ET.Element, geometry: LineString | Point) -> None:
        if isinstance(geometry, Point):
            elem = _sub_element(parent, "Point")
            _sub_element(elem, "extrude", _bool(geometry.extrude))
            _sub_element(elem, "altitudeMode", geometry.altitude_mode.value)
            _sub_element(elem, "coordinates", _coordinates((geometry.coordinate,)))
            return

        if geometry.multi_geometry:
            parent = _sub_element(parent, "MultiGeometry")
        elem = _sub_element(parent, "LineString")
        _sub_element(elem, "extrude", _bool(geometry.extrude))
        _sub_element(elem, "altitudeMode", geometry.altitude_mode.value)
        _sub_element(elem, "coordinates", _coordinates(geometry.coordinates))

    def _add_style_selector(self, parent: ET.Element, selector: Style | StyleMap) -> None:
        if isinstance(selector, Style):
            self._add_style(parent, selector)
            return

        attribs = {"id": selector.id} if selector.id else {}
        style_map = _sub_element(parent, "StyleMap", **attribs)
        for key, style in (("normal", selector.normal), ("highlight", selector.highlight)):
            pair = _sub_element(style_map, "Pair")
            _sub_element(pair, "key", key)
            self._add_style(pair, style)

    def _add_style(self, parent: ET.Element, style: Style) -> None:
        attribs = {"id": style.id} if style.id else {}
        elem = _sub_element(parent, "Style", **attribs)

        if any(v is not None for v in (style.icon_href, style.icon_color, style.icon_scale, style.icon_heading)):
            icon_style = _sub_element(elem, "IconStyle")
            if style.icon_color is not None:
                _sub_element(icon_style, "color", style.icon_color)
            if style.icon_scale is not None:
                _sub_element(icon_style, "scale", _fmt(style.icon_scale))
            if style.icon_heading is not None:
                _sub_element(icon_style, "heading", _fmt(style.icon_heading))
            if style.icon_href is not None:
                icon = _sub_element(icon_style, "Icon")
                _sub_element(icon, "href", style.icon_href)

        if style.label_color is not None or style.label_scale is not None:
            label_style = _sub_element(elem, "LabelStyle")
            if style.label_color is not None:
                _sub_element(label_style, "color", style.label_color)
            if style.label_scale is not None:
                _sub_element(label_style, "scale", _fmt(style.label_scale))

        if style.line_color is not None or style.line_width is not None:
            line_style = _sub_element(elem, "LineStyle")
            if style.line_color is not None:
                _sub_element(line_style, "color", style.line_color)
            if style.line_width is not None:
                _sub_element(line_style, "width", _fmt(style.line_width))

        if style.poly_color is not None or style.poly_fill is not None:
            poly_style = _sub_element(elem, "PolyStyle")
            if style.poly_color is not None:
                _sub_element(poly_style, "color", style.poly_color)
            if style.poly_fill is not None:
                _sub_element(poly_style, "fill", _bool(style.poly_fill))

        if style.balloon_text is not None:
            balloon = _sub_element(elem, "BalloonStyle")
            _sub_element(balloon, "text", style.balloon_text)
