"""
Single-instant satellite observation.

Combines propagation, geodetic conversion, the eclipse model and (for a
ground observer) look angles into one ``ObservationResult``.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence, Tuple

from . import frames
from .sunlight import EARTH_RADIUS_KM, calculate_sun_position, satellite_eclipse

if TYPE_CHECKING:
    from .orbit import SatelliteOrbit

logger = logging.getLogger(__name__)

FOOTPRINT_DIAMETER_FACTOR_KM = 12756.33  # Twice the mean Earth radius

Vector3 = Tuple[float, float, float]


@dataclass(frozen=True)
class ObserverLocation:
    """Ground observer position (degrees, degrees, km)."""

    latitude: float
    longitude: float
    altitude: float = 0.0

    def __post_init__(self) -> None:
        if not -90 <= self.latitude <= 90:
            raise ValueError(f"Latitude must be in [-90, 90], got {self.latitude}")
        if not -180 <= self.longitude <= 360:
            raise ValueError(f"Longitude must be in [-180, 360], got {self.longitude}")

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "ObserverLocation":
        """Create from a ``[latitude, longitude, altitude_km]`` sequence."""
        if len(values) != 3:
            raise ValueError(
                f"Observer location needs [latitude, longitude, altitude], got {list(values)}"
            )
        latitude, longitude, altitude = values
        return cls(float(latitude), float(longitude), float(altitude))

    @property
    def latitude_rad(self) -> float:
        return math.radians(self.latitude)

    @property
    def longitude_rad(self) -> float:
        return math.radians(self.longitude)

    def to_ecf(self):
        """Earth-fixed position of the observer in km."""
        return frames.geodetic_to_ecf(self.latitude_rad, self.longitude_rad, self.altitude)


@dataclass(frozen=True)
class ObservationResult:
    """Satellite state as seen at one instant."""

    timestamp: datetime
    eci_position: Vector3  # km
    eci_velocity: Vector3  # km/s
    gmst: float  # radians
    latitude: float  # degrees
    longitude: float  # degrees, [-180, 180]
    altitude: float  # km
    footprint: float  # km, diameter of the visibility circle
    sunlit: bool
    eclipse_depth: float  # radians
    azimuth: Optional[float] = None  # degrees
    elevation: Optional[float] = None  # degrees
    range_km: Optional[float] = None
    doppler: Optional[float] = None

    @property
    def has_look_angles(self) -> bool:
        return self.elevation is not None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "time": self.timestamp.isoformat(),
            "eci_position_km": list(self.eci_position),
            "eci_velocity_kms": list(self.eci_velocity),
            "gmst_rad": self.gmst,
            "latitude_deg": self.latitude,
            "longitude_deg": self.longitude,
            "altitude_km": self.altitude,
            "footprint_km": self.footprint,
            "sunlit": self.sunlit,
            "eclipse_depth_rad": self.eclipse_depth,
        }
        if self.has_look_angles:
            result["azimuth_deg"] = self.azimuth
            result["elevation_deg"] = self.elevation
            result["range_km"] = self.range_km
            result["doppler_factor"] = self.doppler
        return result


def bound_longitude(longitude: float) -> float:
    """Wrap a longitude in degrees to [-180, 180]."""
    while longitude < -180:
        longitude += 360
    while longitude > 180:
        longitude -= 360
    return longitude


def footprint_diameter(altitude_km: float) -> float:
    """Diameter in km of the ground circle within line of sight."""
    return FOOTPRINT_DIAMETER_FACTOR_KM * math.acos(
        EARTH_RADIUS_KM / (EARTH_RADIUS_KM + altitude_km)
    )


def observe(
    orbit: "SatelliteOrbit",
    observer: Optional[ObserverLocation],
    timestamp: datetime,
) -> Optional[ObservationResult]:
    """
    Observe a satellite at one instant.

    Args:
        orbit: Satellite orbit
        observer: Optional ground observer; look angles are only computed
            when given
        timestamp: UTC datetime (naive)

    Returns:
        ObservationResult, or None if propagation fails at ``timestamp``
    """
    eci = orbit.propagate(timestamp)
    if eci is None:
        return None

    radius = math.sqrt(sum(c * c for c in eci.position))
    if radius <= EARTH_RADIUS_KM:
        logger.debug(f"{orbit.satellite_name} is below the surface at {timestamp}")
        return None

    gmst = frames.gmst(timestamp)
    position_ecf = frames.eci_to_ecf(eci.position, gmst)
    geo = frames.ecf_to_geodetic(position_ecf)

    sun, _ = calculate_sun_position(timestamp)
    eclipse = satellite_eclipse(eci.position, sun)

    look: Dict[str, float] = {}
    if observer is not None:
        velocity_ecf = frames.eci_to_ecf(eci.velocity, gmst)
        observer_ecf = observer.to_ecf()
        angles = frames.ecf_to_look_angles(
            observer.latitude_rad, observer.longitude_rad, observer.altitude, position_ecf
        )
        look = {
            "azimuth": math.degrees(angles.azimuth),
            "elevation": math.degrees(angles.elevation),
            "range_km": angles.range_km,
            "doppler": frames.doppler_factor(observer_ecf, position_ecf, velocity_ecf),
        }

    return ObservationResult(
        timestamp=timestamp,
        eci_position=tuple(float(c) for c in eci.position),  # type: ignore[arg-type]
        eci_velocity=tuple(float(c) for c in eci.velocity),  # type: ignore[arg-type]
        gmst=gmst,
        latitude=math.degrees(geo.latitude),
        longitude=bound_longitude(math.degrees(geo.longitude)),
        altitude=geo.height,
        footprint=footprint_diameter(geo.height),
        sunlit=eclipse.sunlit,
        eclipse_depth=eclipse.depth,
        **look,
    )
