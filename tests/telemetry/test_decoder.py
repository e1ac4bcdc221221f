"""Tests for decoder factory resolution."""

from __future__ import annotations

import pytest

from gcs_kml.errors import DecoderUnavailableError, ExportError
from gcs_kml.telemetry.decoder import DECODER_ENV_VAR, load_decoder_factory


def test_resolves_module_attribute():
    factory = load_decoder_factory("collections:OrderedDict")
    assert callable(factory)
    assert factory.__name__ == "OrderedDict"


def test_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv(DECODER_ENV_VAR, "collections:deque")
    factory = load_decoder_factory()
    assert factory.__name__ == "deque"


def test_explicit_reference_wins_over_environment(monkeypatch):
    monkeypatch.setenv(DECODER_ENV_VAR, "collections:deque")
    assert load_decoder_factory("collections:Counter").__name__ == "Counter"


def test_missing_reference_raises(monkeypatch):
    monkeypatch.delenv(DECODER_ENV_VAR, raising=False)
    with pytest.raises(DecoderUnavailableError, match=DECODER_ENV_VAR):
        load_decoder_factory()


@pytest.mark.parametrize("ref", ["collections", "collections:", ":deque"])
def test_malformed_reference_raises(ref):
    with pytest.raises(DecoderUnavailableError, match="package.module:factory"):
        load_decoder_factory(ref)


def test_unknown_module_raises():
    with pytest.raises(DecoderUnavailableError, match="Cannot import"):
        load_decoder_factory("no_such_module_for_gcs_kml:make")


def test_unknown_attribute_raises():
    with pytest.raises(DecoderUnavailableError, match="no attribute"):
        load_decoder_factory("collections:no_such_factory")


def test_non_callable_raises():
    with pytest.raises(DecoderUnavailableError, match="not callable"):
        load_decoder_factory("math:pi")


def test_decoder_error_is_export_error():
    assert issubclass(DecoderUnavailableError, ExportError)
