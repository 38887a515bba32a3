"""
Comprehensive tests for sunlight module.
"""

import math
from datetime import datetime

import numpy as np
import pytest

from satpredict.sunlight import (
    AU_KM,
    calculate_sun_position,
    delta_et,
    is_satellite_sunlit,
    satellite_eclipse,
)


class TestCalculateSunPosition:
    """Tests for calculate_sun_position function."""

    def test_returns_vector_and_distance(self) -> None:
        sun, distance = calculate_sun_position(datetime(2024, 6, 21, 12, 0, 0))
        assert sun.shape == (3,)
        assert distance == pytest.approx(float(np.linalg.norm(sun)))

    def test_distance_reasonable(self) -> None:
        # Sun should be roughly 1 AU away (150 million km)
        for month in (1, 4, 7, 10):
            _, distance = calculate_sun_position(datetime(2024, month, 1))
            assert 0.98 * AU_KM < distance < 1.02 * AU_KM

    def test_perihelion_closer_than_aphelion(self) -> None:
        _, january = calculate_sun_position(datetime(2024, 1, 3))
        _, july = calculate_sun_position(datetime(2024, 7, 5))
        assert january < july

    def test_solstice_declination(self) -> None:
        june, d_june = calculate_sun_position(datetime(2024, 6, 20, 21, 0, 0))
        december, d_dec = calculate_sun_position(datetime(2024, 12, 21, 9, 0, 0))
        assert math.degrees(math.asin(june[2] / d_june)) == pytest.approx(23.44, abs=0.1)
        assert math.degrees(math.asin(december[2] / d_dec)) == pytest.approx(-23.44, abs=0.1)

    def test_march_equinox_direction(self) -> None:
        sun, distance = calculate_sun_position(datetime(2024, 3, 20, 3, 6, 0))
        assert sun[0] / distance == pytest.approx(1.0, abs=1e-3)

    def test_delta_et_order_of_magnitude(self) -> None:
        assert 60 < delta_et(2024.0) < 90


class TestSatelliteEclipse:
    """Tests for the umbral eclipse model."""

    SUN = np.array([AU_KM, 0.0, 0.0])

    def _position(self, angle_deg: float, radius: float = 7000.0) -> np.ndarray:
        # Angle measured from the anti-sun axis
        theta = math.radians(angle_deg)
        return radius * np.array([-math.cos(theta), math.sin(theta), 0.0])

    def test_behind_earth_is_eclipsed(self) -> None:
        state = satellite_eclipse(self._position(0.0), self.SUN)
        assert state.eclipsed is True
        assert state.sunlit is False
        assert state.depth > 0

    def test_sunward_is_sunlit(self) -> None:
        state = satellite_eclipse(self._position(180.0), self.SUN)
        assert state.eclipsed is False
        assert state.depth < 0

    def test_depth_increases_towards_occlusion(self) -> None:
        depths = [satellite_eclipse(self._position(a), self.SUN).depth for a in range(180, -1, -10)]
        assert all(later >= earlier for earlier, later in zip(depths, depths[1:]))

    def test_inside_earth_raises(self) -> None:
        with pytest.raises(ValueError):
            satellite_eclipse((1000.0, 0.0, 0.0), self.SUN)

    def test_is_satellite_sunlit_matches_model(self) -> None:
        when = datetime(2024, 3, 20, 3, 6, 0)
        sun, _ = calculate_sun_position(when)
        unit = sun / np.linalg.norm(sun)
        assert is_satellite_sunlit(unit * 7000.0, when) is True
        assert is_satellite_sunlit(-unit * 7000.0, when) is False
