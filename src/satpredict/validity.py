"""
Orbit feasibility checks applied before any pass search.

Classifies geostationary orbits, orbits that can never rise above an
observer's horizon, and element sets whose epoch is too old for the
orbit to have survived.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Optional

from .observation import ObserverLocation
from .orbit import EARTH_RADIUS_KM, SatelliteOrbit

logger = logging.getLogger(__name__)

SIDEREAL_REVS_PER_DAY = 1.0027
GEO_TOLERANCE_REVS_PER_DAY = 0.005
DECAY_REVS_PER_DAY = 16.666666  # SGP4 accuracy breaks down past this mean motion


def is_geostationary(orbit: SatelliteOrbit) -> bool:
    """True if the orbit turns with the Earth (within 0.005 rev/day)."""
    return abs(orbit.revs_per_day - SIDEREAL_REVS_PER_DAY) < GEO_TOLERANCE_REVS_PER_DAY


def approximate_apogee_km(orbit: SatelliteOrbit) -> float:
    """Apogee height from a semi-empirical semi-major axis."""
    sma = 331.25 * math.exp(math.log(1440.0 / orbit.revs_per_day) * (2.0 / 3.0))
    return sma * (1.0 + orbit.eccentricity) - EARTH_RADIUS_KM


def aos_happens(orbit: SatelliteOrbit, observer: ObserverLocation) -> bool:
    """
    Check if the satellite can ever rise above the observer's horizon.

    The orbit's reach in latitude is its effective inclination (retrograde
    orbits folded to 180 - i) plus the Earth-central angle visible from
    apogee.

    Args:
        orbit: Satellite orbit
        observer: Ground observer

    Returns:
        False if the satellite never rises at the observer's latitude
    """
    if orbit.revs_per_day == 0:
        return False

    inclination_deg = math.degrees(orbit.inclination)
    if inclination_deg >= 90.0:
        inclination_deg = 180.0 - inclination_deg

    apogee = approximate_apogee_km(orbit)
    horizon_angle = math.acos(min(1.0, EARTH_RADIUS_KM / (apogee + EARTH_RADIUS_KM)))
    reach = horizon_angle + math.radians(inclination_deg)
    return reach > abs(math.radians(observer.latitude))


def decay_date(orbit: SatelliteOrbit) -> Optional[datetime]:
    """
    Estimated date after which the orbit has decayed.

    Extrapolates the drag term until the mean motion reaches the decay
    threshold. Returns None for orbits without drag.
    """
    drag = orbit.drag_revs_per_day2
    if drag == 0:
        return None
    days = (DECAY_REVS_PER_DAY - orbit.revs_per_day) / (10.0 * abs(drag))
    try:
        return orbit.epoch + timedelta(days=days)
    except OverflowError:
        return datetime.max if days > 0 else datetime.min


def is_decayed(orbit: SatelliteOrbit, timestamp: datetime) -> bool:
    """True if the orbit is estimated to have decayed before ``timestamp``."""
    decayed_at = decay_date(orbit)
    return decayed_at is not None and decayed_at < timestamp


def is_bad_satellite(
    orbit: SatelliteOrbit,
    observer: Optional[ObserverLocation],
    timestamp: Optional[datetime],
) -> bool:
    """
    Gate applied before sampling or searching.

    Args:
        orbit: Satellite orbit
        observer: Optional ground observer (skips the horizon check if None)
        timestamp: Optional instant (skips the decay check if None)

    Returns:
        True if the orbit should not be predicted
    """
    if observer is not None and not aos_happens(orbit, observer):
        logger.debug(f"{orbit.satellite_name} never rises at latitude {observer.latitude}")
        return True
    if timestamp is not None and is_decayed(orbit, timestamp):
        logger.debug(f"{orbit.satellite_name} is estimated to have decayed before {timestamp}")
        return True
    return False
