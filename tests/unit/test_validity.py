"""
Tests for the orbit feasibility gate.
"""

from datetime import datetime

import pytest

from satpredict.observation import ObserverLocation
from satpredict.validity import (
    aos_happens,
    approximate_apogee_km,
    decay_date,
    is_bad_satellite,
    is_decayed,
    is_geostationary,
)


class TestGeostationary:
    """Tests for is_geostationary."""

    def test_geo_detected(self, geo_orbit) -> None:
        assert is_geostationary(geo_orbit) is True

    def test_leo_not_geo(self, iss_orbit, noaa_orbit) -> None:
        assert is_geostationary(iss_orbit) is False
        assert is_geostationary(noaa_orbit) is False


class TestAosHappens:
    """Tests for aos_happens."""

    def test_apogee_of_iss(self, iss_orbit) -> None:
        assert 350 < approximate_apogee_km(iss_orbit) < 500

    def test_equator_sees_iss(self, iss_orbit, equator_observer) -> None:
        assert aos_happens(iss_orbit, equator_observer) is True

    def test_pole_never_sees_iss(self, iss_orbit, polar_observer) -> None:
        assert aos_happens(iss_orbit, polar_observer) is False

    def test_southern_latitude_symmetric(self, iss_orbit) -> None:
        assert aos_happens(iss_orbit, ObserverLocation(-89.0, 0.0, 0.0)) is False
        assert aos_happens(iss_orbit, ObserverLocation(-60.0, 0.0, 0.0)) is True

    def test_retrograde_orbit_folded(self, noaa_orbit, polar_observer) -> None:
        # 99° inclination reaches 81° plus the horizon angle
        assert aos_happens(noaa_orbit, polar_observer) is True


class TestDecay:
    """Tests for the decay heuristic."""

    def test_not_decayed_near_epoch(self, iss_orbit) -> None:
        assert is_decayed(iss_orbit, datetime(2024, 6, 1)) is False

    def test_decayed_far_future(self, iss_orbit) -> None:
        # (16.67 - 15.49) rev/day / (10 * 2.18e-5 rev/day^2) ~ 5400 days
        assert is_decayed(iss_orbit, datetime(2040, 1, 1)) is True

    def test_decay_date_order(self, iss_orbit) -> None:
        decayed_at = decay_date(iss_orbit)
        assert datetime(2035, 1, 1) < decayed_at < datetime(2040, 1, 1)

    def test_no_drag_never_decays(self, iss_orbit) -> None:
        iss_orbit.satrec = type("Satrec", (), {})()
        iss_orbit.satrec.ndot = 0.0
        assert decay_date(iss_orbit) is None
        assert is_decayed(iss_orbit, datetime(2999, 1, 1)) is False


class TestIsBadSatellite:
    """Tests for is_bad_satellite."""

    def test_good(self, iss_orbit, equator_observer, base_datetime) -> None:
        assert is_bad_satellite(iss_orbit, equator_observer, base_datetime) is False

    def test_never_rises(self, iss_orbit, polar_observer, base_datetime) -> None:
        assert is_bad_satellite(iss_orbit, polar_observer, base_datetime) is True

    def test_decayed(self, iss_orbit) -> None:
        assert is_bad_satellite(iss_orbit, None, datetime(2040, 1, 1)) is True

    def test_no_checks(self, iss_orbit) -> None:
        assert is_bad_satellite(iss_orbit, None, None) is False
