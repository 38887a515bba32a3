"""
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest and provides:
- Custom markers for test categorization
- Shared element sets, observers and time windows
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, List, Tuple

import pytest
from _pytest.config import Config
from _pytest.python import Function

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def pytest_collection_modifyitems(config: Config, items: List[Function]) -> None:
    """Auto-mark integration tests."""
    for item in items:
        if "integration" in str(item.path):
            item.add_marker(pytest.mark.integration)


def pytest_configure(config: Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "integration: marks integration tests")


# =============================================================================
# FIXTURES - Common test setup
# =============================================================================


ISS_TLE = (
    "ISS (ZARYA)",
    "1 25544U 98067A   24001.00000000  .00002182  00000-0  40864-4 0  9990",
    "2 25544  51.6461 339.7939 0001220  92.8340 267.3124 15.49309239426382",
)

NOAA_TLE = (
    "NOAA 18",
    "1 28654U 05018A   24001.00000000  .00000012  00000-0  28110-4 0  9997",
    "2 28654  99.0581 161.3857 0013414  73.9446 286.3932 14.12501637967188",
)

GEO_TLE = (
    "GOES 16",
    "1 41866U 16071A   24001.00000000 -.00000269  00000-0  00000+0 0  9992",
    "2 41866   0.0447 280.8520 0001030 228.1970 232.4250  1.00271618 26040",
)


@pytest.fixture
def iss_tle_text() -> str:
    """Three-line ISS element set as one string."""
    return "\n".join(ISS_TLE)


@pytest.fixture
def iss_orbit() -> Any:
    from satpredict.orbit import SatelliteOrbit

    return SatelliteOrbit(list(ISS_TLE))


@pytest.fixture
def noaa_orbit() -> Any:
    from satpredict.orbit import SatelliteOrbit

    return SatelliteOrbit(list(NOAA_TLE))


@pytest.fixture
def geo_orbit() -> Any:
    from satpredict.orbit import SatelliteOrbit

    return SatelliteOrbit(list(GEO_TLE))


@pytest.fixture
def equator_observer() -> Any:
    """Observer at 0°N 0°E, sea level."""
    from satpredict.observation import ObserverLocation

    return ObserverLocation(0.0, 0.0, 0.0)


@pytest.fixture
def polar_observer() -> Any:
    """Observer too far north for the ISS to ever rise."""
    from satpredict.observation import ObserverLocation

    return ObserverLocation(89.0, 0.0, 0.0)


@pytest.fixture
def base_datetime() -> datetime:
    """Standard base datetime for tests (epoch of the sample element sets)."""
    return datetime(2024, 1, 1, 0, 0, 0)


@pytest.fixture
def time_range(base_datetime: datetime) -> Tuple[datetime, datetime]:
    """Standard 24-hour time range for tests."""
    return base_datetime, base_datetime + timedelta(hours=24)


@pytest.fixture
def sample_tle_file(tmp_path: Path) -> Path:
    """TLE file holding the ISS, NOAA 18 and GOES 16 element sets."""
    tle_file = tmp_path / "sample.tle"
    tle_file.write_text("\n".join(ISS_TLE + NOAA_TLE + GEO_TLE) + "\n")
    return tle_file
