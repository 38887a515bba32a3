"""
Reference frame conversions and observer look angles.

Thin adapter over ``orbit_predictor.coordinate_systems``: converts SGP4
inertial (TEME/ECI) states to the Earth-fixed frame and to geodetic
coordinates, and computes azimuth, elevation, slant range and Doppler
factor for a ground observer. Angles crossing these functions are in
radians; callers convert to degrees at their own boundary.
"""

import math
from datetime import datetime
from typing import NamedTuple

import numpy as np
from orbit_predictor import coordinate_systems
from orbit_predictor.constants import LIGHT_SPEED_KMS, OMEGA_E, R_E_KM
from sgp4.api import jday
from sgp4.propagation import gstime

from .geometry import VectorLike, as_vector

WGS84_A_KM = R_E_KM


class Geodetic(NamedTuple):
    """Geodetic position (radians, radians, km)."""

    latitude: float
    longitude: float
    height: float


class LookAngles(NamedTuple):
    """Topocentric look angles (radians, radians, km)."""

    azimuth: float
    elevation: float
    range_km: float


def julian_date(timestamp: datetime) -> float:
    """Julian date of a naive UTC datetime."""
    jd, fr = jday(
        timestamp.year,
        timestamp.month,
        timestamp.day,
        timestamp.hour,
        timestamp.minute,
        timestamp.second + timestamp.microsecond * 1e-6,
    )
    return jd + fr


def gmst(timestamp: datetime) -> float:
    """Greenwich Mean Sidereal Time in radians for a naive UTC datetime."""
    return gstime(julian_date(timestamp))


def eci_to_ecf(vector: VectorLike, sidereal_time: float) -> np.ndarray:
    """Rotate an ECI vector into the Earth-fixed frame."""
    return np.array(coordinate_systems.eci_to_ecef(as_vector(vector), sidereal_time))


def ecf_to_geodetic(position_ecf: VectorLike) -> Geodetic:
    """
    Convert an Earth-fixed position to geodetic coordinates on WGS84.

    Returns:
        Geodetic latitude and longitude in radians (longitude in [-pi, pi])
        and height above the ellipsoid in km
    """
    lat_deg, lon_deg, height = coordinate_systems.ecef_to_llh(as_vector(position_ecf))
    return Geodetic(math.radians(lat_deg), math.radians(lon_deg), height)


def eci_to_geodetic(position: VectorLike, sidereal_time: float) -> Geodetic:
    """
    Convert an ECI position to geodetic coordinates.

    Args:
        position: ECI position in km
        sidereal_time: GMST in radians
    """
    return ecf_to_geodetic(eci_to_ecf(position, sidereal_time))


def geodetic_to_ecf(latitude: float, longitude: float, height: float) -> np.ndarray:
    """Earth-fixed position in km of a geodetic point given in radians."""
    return np.array(coordinate_systems.geodetic_to_ecef(latitude, longitude, height))


def ecf_to_look_angles(
    latitude: float, longitude: float, height: float, target_ecf: VectorLike
) -> LookAngles:
    """
    Azimuth, elevation and slant range from a geodetic observer to a target.

    Args:
        latitude: Observer geodetic latitude in radians
        longitude: Observer longitude in radians
        height: Observer height in km
        target_ecf: Target ECF position in km

    Returns:
        LookAngles with azimuth measured clockwise from north
    """
    observer_ecf = geodetic_to_ecf(latitude, longitude, height)
    top_s, top_e, top_z = coordinate_systems.to_horizon(
        latitude, longitude, observer_ecf, as_vector(target_ecf)
    )
    azimuth, elevation = coordinate_systems.horizon_to_az_elev(top_s, top_e, top_z)
    range_km = math.sqrt(top_s**2 + top_e**2 + top_z**2)
    return LookAngles(azimuth, elevation, range_km)


def doppler_factor(
    observer_ecf: VectorLike, position_ecf: VectorLike, velocity_ecf: VectorLike
) -> float:
    """
    Doppler factor seen by a ground observer.

    The target velocity is corrected for Earth rotation at the observer.
    Values above 1 mean the target is approaching (received frequency is
    higher than transmitted).
    """
    obs = as_vector(observer_ecf)
    range_vec = as_vector(position_ecf) - obs
    range_km = float(np.linalg.norm(range_vec))
    if range_km == 0:
        return 1.0

    vel = as_vector(velocity_ecf)
    range_vel = np.array(
        [
            vel[0] + OMEGA_E * obs[1],
            vel[1] - OMEGA_E * obs[0],
            vel[2],
        ]
    )
    range_rate = float(np.dot(range_vec, range_vel)) / range_km
    return 1 - range_rate / LIGHT_SPEED_KMS
