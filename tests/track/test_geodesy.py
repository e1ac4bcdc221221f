"""Tests for NED ↔ LLA conversions."""

from __future__ import annotations

import pytest

from gcs_kml.track.geodesy import ecef_to_lla, lla_to_ecef, ned_to_lla

_HOME = (47.397742, 8.545594, 488.0)


def test_ecef_of_equator_prime_meridian():
    x, y, z = lla_to_ecef(0.0, 0.0, 0.0)
    assert x == pytest.approx(6378137.0)
    assert y == pytest.approx(0.0, abs=1e-6)
    assert z == pytest.approx(0.0, abs=1e-6)


def test_ecef_of_north_pole():
    x, y, z = lla_to_ecef(90.0, 0.0, 0.0)
    assert x == pytest.approx(0.0, abs=1e-6)
    assert z == pytest.approx(6356752.314, abs=1e-3)


@pytest.mark.parametrize("lla", [_HOME, (-33.86, 151.21, 10.0), (0.0, -179.5, 12000.0)])
def test_ecef_lla_inverse(lla):
    lat, lon, alt = ecef_to_lla(*lla_to_ecef(*lla))
    assert lat == pytest.approx(lla[0], abs=1e-9)
    assert lon == pytest.approx(lla[1], abs=1e-9)
    assert alt == pytest.approx(lla[2], abs=1e-4)


def test_ned_zero_offset_is_home():
    lat, lon, alt = ned_to_lla(_HOME, 0.0, 0.0, 0.0)
    assert lat == pytest.approx(_HOME[0], abs=1e-9)
    assert lon == pytest.approx(_HOME[1], abs=1e-9)
    assert alt == pytest.approx(_HOME[2], abs=1e-4)


def test_ned_north_increases_latitude():
    lat, lon, _ = ned_to_lla(_HOME, 100.0, 0.0, 0.0)
    assert lat > _HOME[0]
    assert lon == pytest.approx(_HOME[1], abs=1e-9)
    # ~111 km per degree of latitude
    assert (lat - _HOME[0]) * 111_200 == pytest.approx(100.0, rel=0.01)


def test_ned_east_increases_longitude():
    lat, lon, _ = ned_to_lla(_HOME, 0.0, 100.0, 0.0)
    assert lon > _HOME[1]
    assert lat == pytest.approx(_HOME[0], abs=1e-5)


def test_ned_down_is_negative_altitude():
    _, _, alt = ned_to_lla(_HOME, 0.0, 0.0, -50.0)
    assert alt == pytest.approx(_HOME[2] + 50.0, abs=1e-3)
