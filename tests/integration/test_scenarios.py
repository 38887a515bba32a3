"""
End-to-end prediction scenarios.

Runs the public ``Predictor`` API against real element sets and checks
the cross-module properties a caller relies on: pass ordering, horizon
crossings at pass edges, and agreement between the pass, ephemeris and
window views of the same satellite.
"""

from datetime import timedelta

import pytest

from satpredict import ObserverLocation, Predictor
from satpredict.observation import observe


@pytest.fixture
def predictor() -> Predictor:
    return Predictor()


class TestIssOverEquator:
    """ISS passes over an observer at 0°N 0°E."""

    def test_passes_ordered_and_consistent(self, predictor, iss_orbit, equator_observer, time_range) -> None:
        start, end = time_range
        transits = predictor.transits(iss_orbit, equator_observer, start, end)

        assert len(transits) > 0
        for transit in transits:
            assert transit.duration == transit.end - transit.start
            at_start = observe(iss_orbit, equator_observer, transit.start)
            at_end = observe(iss_orbit, equator_observer, transit.end)
            assert transit.max_elevation >= at_start.elevation
            assert transit.max_elevation >= at_end.elevation
            assert transit.min_azimuth <= transit.apex_azimuth <= transit.max_azimuth

        for earlier, later in zip(transits, transits[1:]):
            assert later.start >= earlier.end + timedelta(seconds=60)

    @pytest.mark.slow
    def test_ephemeris_agrees_with_passes(self, predictor, iss_orbit, equator_observer, time_range) -> None:
        start, end = time_range
        transits = predictor.transits(iss_orbit, equator_observer, start, end, min_elevation=0.0)
        samples = predictor.ephemeris(iss_orbit, equator_observer, start, end, timedelta(seconds=30))

        # Every sample well above the horizon lies inside some pass
        cutoff = end - timedelta(minutes=30)
        for sample in samples:
            if sample.elevation > 10.0 and sample.timestamp < cutoff:
                assert any(t.start <= sample.timestamp <= t.end for t in transits)

    def test_windows_match_passes(self, predictor, iss_orbit, equator_observer, time_range) -> None:
        start, end = time_range
        windows = predictor.visibility_windows(iss_orbit, equator_observer, start, end)
        transits = predictor.transits(iss_orbit, equator_observer, start, end)
        assert [(w.start, w.end) for w in windows] == [(t.start, t.end) for t in transits]


class TestGeostationary:
    """A geostationary satellite has no discrete passes."""

    def test_no_transits(self, predictor, geo_orbit, time_range) -> None:
        start, end = time_range
        sub_point = observe(geo_orbit, None, start)
        observer = ObserverLocation(sub_point.latitude, sub_point.longitude, 0.0)

        assert predictor.transits(geo_orbit, observer, start, end) == []

    def test_visible_all_day_from_sub_point(self, predictor, geo_orbit, time_range) -> None:
        start, end = time_range
        sub_point = observe(geo_orbit, None, start)
        observer = [sub_point.latitude, sub_point.longitude, 0.0]

        windows = predictor.visibility_windows(geo_orbit, observer, start, end)
        assert len(windows) == 1
        assert windows[0].duration == end - start


class TestSatelliteToSatellite:
    """Mutual visibility between satellites."""

    def test_identical_satellites_always_visible(self, predictor, iss_tle_text, time_range) -> None:
        start, end = time_range
        windows = predictor.satellite_visibility_windows(iss_tle_text, iss_tle_text, start, end)
        assert len(windows) == 1
        assert (windows[0].start, windows[0].end) == (start, end)

    def test_leo_pair_alternates(self, predictor, iss_orbit, noaa_orbit, base_datetime) -> None:
        end = base_datetime + timedelta(hours=12)
        windows = predictor.satellite_visibility_windows(iss_orbit, noaa_orbit, base_datetime, end)

        assert len(windows) > 1
        total = sum((w.duration for w in windows), timedelta(0))
        assert timedelta(0) < total < end - base_datetime


class TestEdgeCases:
    """Empty and gated requests."""

    def test_empty_ephemeris_window(self, predictor, iss_orbit, base_datetime) -> None:
        assert predictor.ephemeris(
            iss_orbit, None, base_datetime, base_datetime, timedelta(seconds=60)
        ) == []

    def test_never_rising_observer(self, predictor, iss_orbit, polar_observer, time_range) -> None:
        start, end = time_range
        assert predictor.transits(iss_orbit, polar_observer, start, end) == []
        assert predictor.visibility_windows(iss_orbit, polar_observer, start, end) == []
        assert predictor.position_at(iss_orbit, polar_observer, start) is None
