"""
Sun position and satellite eclipse calculations.

This module provides a low-precision analytic solar ephemeris, accurate
enough for shadow tests, and an umbral eclipse model for satellites.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Tuple

import numpy as np

from .frames import julian_date
from .geometry import VectorLike, angle_between, as_vector, magnitude, scalar_multiply, vec_sub

# Constants
EARTH_RADIUS_KM = 6378.137  # WGS84 equatorial radius
AU_KM = 1.49597870691e8  # Astronomical Unit (IAU 76)
SOLAR_RADIUS_KM = 6.96e5  # Solar radius (IAU 76)
SECONDS_PER_DAY = 86400.0
JD_1900 = 2415020.0


def delta_et(year: float) -> float:
    """
    Approximate difference between Ephemeris Time and UTC in seconds.

    Args:
        year: Fractional year

    Returns:
        ET - UTC in seconds
    """
    return 26.465 + 0.747622 * (year - 1950) + 1.886913 * math.sin(
        2 * math.pi * (year - 1975) / 33
    )


def calculate_sun_position(timestamp: datetime) -> Tuple[np.ndarray, float]:
    """
    Calculate the sun's position in Earth-Centered Inertial (ECI) coordinates.

    Uses mean anomaly, ecliptic longitude with periodic corrections,
    eccentricity-corrected distance and the obliquity of the ecliptic.

    Args:
        timestamp: UTC datetime (naive)

    Returns:
        Tuple of (x, y, z) vector in kilometers and its magnitude
    """
    # Days since 1900 January 0.5
    mjd = julian_date(timestamp) - JD_1900
    year = 1900 + mjd / 365.25
    T = (mjd + delta_et(year) / SECONDS_PER_DAY) / 36525.0

    # Mean anomaly
    M = math.radians(
        (358.47583 + ((35999.04975 * T) % 360) - (0.000150 + 0.0000033 * T) * T**2) % 360
    )

    # Mean longitude
    L = math.radians((279.69668 + ((36000.76892 * T) % 360) + 0.0003025 * T**2) % 360)

    # Orbital eccentricity
    e = 0.01675104 - (0.0000418 + 0.000000126 * T) * T

    # Equation of center
    C = math.radians(
        (1.919460 - (0.004789 + 0.000100 * T) * T) * math.sin(M)
        + (0.020094 - 0.000100 * T) * math.sin(2 * M)
        + 0.000293 * math.sin(3 * M)
    )

    # Longitude of the ascending node of the Moon's orbit (nutation term)
    O = math.radians((259.18 - 1934.142 * T) % 360.0)

    # Apparent ecliptic longitude and true anomaly
    lambda_sun = (L + C - math.radians(0.00569 - 0.00479 * math.sin(O))) % (2 * math.pi)
    nu = (M + C) % (2 * math.pi)

    distance = AU_KM * 1.0000002 * (1 - e**2) / (1 + e * math.cos(nu))

    # Obliquity of ecliptic
    epsilon = math.radians(
        23.452294
        - (0.0130125 + (0.00000164 - 0.000000503 * T) * T) * T
        + 0.00256 * math.cos(O)
    )

    sun = np.array(
        [
            distance * math.cos(lambda_sun),
            distance * math.sin(lambda_sun) * math.cos(epsilon),
            distance * math.sin(lambda_sun) * math.sin(epsilon),
        ]
    )
    return sun, distance


@dataclass(frozen=True)
class EclipseState:
    """Shadow state of a satellite."""

    depth: float  # radians, >= 0 inside the umbra
    eclipsed: bool

    @property
    def sunlit(self) -> bool:
        return not self.eclipsed


def satellite_eclipse(position: VectorLike, sun: VectorLike) -> EclipseState:
    """
    Check whether a satellite is inside the Earth's umbra.

    Compares the angular semi-diameters of the Earth and the Sun seen from
    the satellite with the angle between the anti-Earth and Sun directions.
    Penumbra is not distinguished.

    Args:
        position: Satellite ECI position in km
        sun: Sun ECI position in km

    Returns:
        EclipseState with the eclipse depth in radians

    Raises:
        ValueError: If the satellite is not above the Earth's surface
    """
    pos = as_vector(position)
    radius = magnitude(pos)
    if radius <= EARTH_RADIUS_KM:
        raise ValueError(f"Satellite radius {radius:.1f} km is inside the Earth")

    sd_earth = math.asin(EARTH_RADIUS_KM / radius)
    _, sun_distance = vec_sub(sun, pos)
    sd_sun = math.asin(SOLAR_RADIUS_KM / sun_distance)

    earth = scalar_multiply(-1, pos)
    delta = angle_between(sun, earth)

    depth = sd_earth - sd_sun - delta
    eclipsed = sd_earth >= sd_sun and depth >= 0
    return EclipseState(depth=depth, eclipsed=eclipsed)


def is_satellite_sunlit(position: VectorLike, timestamp: datetime) -> bool:
    """
    Check if a satellite is illuminated by the sun.

    Args:
        position: Satellite ECI position in km
        timestamp: UTC datetime

    Returns:
        True if the satellite is outside the Earth's umbra
    """
    sun, _ = calculate_sun_position(timestamp)
    return satellite_eclipse(position, sun).sunlit
