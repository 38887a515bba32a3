"""
Satellite orbit propagation and TLE handling module.

This module loads two-line element sets and propagates satellite orbits
with the sgp4 library.
"""

from datetime import datetime, timedelta
import logging
import math
from pathlib import Path
from typing import List, NamedTuple, Optional, Sequence, Union

import numpy as np
from sgp4.api import SGP4_ERRORS, Satrec, jday

from .geometry import VectorLike, magnitude

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6378.137
MU_KM3_S2 = 398600.5  # Earth gravitational parameter (km^3/s^2)
MINUTES_PER_DAY = 24 * 60


class EciState(NamedTuple):
    """Inertial state returned by the propagator (km, km/s)."""

    position: np.ndarray
    velocity: np.ndarray


def split_tle_text(tle_text: str) -> List[str]:
    """
    Split element set text into its non-blank lines.

    Raises:
        TypeError: If ``tle_text`` is not a string
        ValueError: If the text doesn't hold 2 or 3 lines
    """
    if not isinstance(tle_text, str):
        raise TypeError(f"TLE must be a string, got {type(tle_text).__name__}")
    lines = [line.strip() for line in tle_text.splitlines() if line.strip()]
    if len(lines) < 2 or len(lines) > 3:
        raise ValueError(f"Invalid TLE format: expected 2 or 3 lines, got {len(lines)}")
    return lines


class SatelliteOrbit:
    """
    Immutable handle on one satellite's orbital elements.

    Wraps an sgp4 ``Satrec`` built from a two-line element set and exposes
    the raw elements the visibility gate needs. Nothing here mutates the
    elements after construction.
    """

    def __init__(self, tle_lines: Sequence[str], satellite_name: Optional[str] = None) -> None:
        """
        Initialize satellite orbit from TLE data.

        Args:
            tle_lines: 2 or 3 strings containing TLE data ([name,] line1, line2)
            satellite_name: Name of the satellite (defaults to the name line,
                or the catalogue number for 2-line sets)

        Raises:
            ValueError: If TLE data is invalid
        """
        lines = [line.strip() for line in tle_lines]
        if len(lines) < 2 or len(lines) > 3:
            raise ValueError(f"Invalid TLE format: expected 2 or 3 lines, got {len(lines)}")

        line1, line2 = lines[-2], lines[-1]
        try:
            self.satrec = Satrec.twoline2rv(line1, line2)
        except Exception as e:
            logger.error(f"Failed to parse TLE: {e}")
            raise ValueError(f"Invalid TLE data: {e}") from e

        if self.satrec.error != 0:
            message = SGP4_ERRORS.get(self.satrec.error, "unknown error")
            raise ValueError(f"Invalid TLE data: {message}")

        if satellite_name is None:
            if len(lines) == 3:
                satellite_name = lines[0][2:] if lines[0].startswith("0 ") else lines[0]
            else:
                satellite_name = str(self.satrec.satnum)

        self.satellite_name = satellite_name
        self.tle_lines = tuple(lines)
        logger.info(f"Successfully loaded orbit for satellite: {satellite_name}")

    @classmethod
    def from_tle_text(cls, tle_text: str, satellite_name: Optional[str] = None) -> "SatelliteOrbit":
        """Create SatelliteOrbit from newline separated element set text."""
        return cls(split_tle_text(tle_text), satellite_name)

    @classmethod
    def from_tle_file(cls, tle_file_path: Union[str, Path], satellite_name: str) -> "SatelliteOrbit":
        """
        Create SatelliteOrbit instance from a 3-line TLE file.

        Args:
            tle_file_path: Path to TLE file
            satellite_name: Name of the satellite to extract from TLE file

        Returns:
            SatelliteOrbit instance

        Raises:
            FileNotFoundError: If TLE file doesn't exist
            ValueError: If satellite not found in TLE file
        """
        tle_path = Path(tle_file_path)
        if not tle_path.exists():
            raise FileNotFoundError(f"TLE file not found: {tle_file_path}")

        with open(tle_path, "r") as f:
            lines = [line.strip() for line in f.readlines() if line.strip()]

        for i in range(0, len(lines) - 2, 3):
            name_line = lines[i]
            if satellite_name.upper() in name_line.upper():
                return cls(lines[i:i + 3], satellite_name)

        raise ValueError(f"Satellite '{satellite_name}' not found in TLE file")

    @classmethod
    def first_in_file(cls, tle_file_path: Union[str, Path]) -> "SatelliteOrbit":
        """Load the first element set of a 2- or 3-line TLE file."""
        tle_path = Path(tle_file_path)
        if not tle_path.exists():
            raise FileNotFoundError(f"TLE file not found: {tle_file_path}")

        lines = [line.strip() for line in tle_path.read_text().splitlines() if line.strip()]
        if len(lines) >= 3 and not lines[0].startswith("1 "):
            return cls(lines[:3])
        return cls(lines[:2])

    # Raw elements

    @property
    def mean_motion(self) -> float:
        """Brouwer (un-Kozai) mean motion in rad/min, as recovered by SGP4 init."""
        return self.satrec.no_unkozai

    @property
    def revs_per_day(self) -> float:
        return self.mean_motion * MINUTES_PER_DAY / (2 * math.pi)

    @property
    def inclination(self) -> float:
        """Inclination in radians."""
        return self.satrec.inclo

    @property
    def eccentricity(self) -> float:
        return self.satrec.ecco

    @property
    def drag_revs_per_day2(self) -> float:
        """First derivative of mean motion in rev/day^2."""
        return self.satrec.ndot * MINUTES_PER_DAY * MINUTES_PER_DAY / (2 * math.pi)

    @property
    def semi_major_axis_km(self) -> float:
        return self.satrec.a * EARTH_RADIUS_KM

    @property
    def epoch(self) -> datetime:
        """Element set epoch as naive UTC datetime."""
        year = self.satrec.epochyr
        year += 2000 if year < 57 else 1900
        return datetime(year, 1, 1) + timedelta(days=self.satrec.epochdays - 1)

    def propagate(self, timestamp: datetime) -> Optional[EciState]:
        """
        Propagate the orbit to ``timestamp``.

        Args:
            timestamp: UTC datetime (naive)

        Returns:
            EciState in km and km/s, or None if SGP4 reports an error
        """
        jd, fr = jday(
            timestamp.year,
            timestamp.month,
            timestamp.day,
            timestamp.hour,
            timestamp.minute,
            timestamp.second + timestamp.microsecond * 1e-6,
        )
        error, position, velocity = self.satrec.sgp4(jd, fr)
        if error != 0:
            logger.debug(
                f"Propagation of {self.satellite_name} failed at {timestamp}: "
                f"{SGP4_ERRORS.get(error, error)}"
            )
            return None
        return EciState(np.array(position, dtype=float), np.array(velocity, dtype=float))

    def get_orbital_period(self) -> timedelta:
        """
        Orbital period from the semi-major axis (Kepler's third law).

        Returns:
            Orbital period as timedelta
        """
        a = self.semi_major_axis_km
        return timedelta(seconds=2 * math.pi * math.sqrt(a**3 / MU_KM3_S2))

    def __repr__(self) -> str:
        """String representation of the satellite orbit."""
        period = self.get_orbital_period()
        return f"SatelliteOrbit(name='{self.satellite_name}', period={period})"


def orbital_period_from_position(position: VectorLike) -> float:
    """
    Circular orbit period for a position vector.

    Args:
        position: Position in km, origin at the Earth's centre

    Returns:
        Period in seconds
    """
    r = magnitude(position)
    return 2 * math.pi * math.sqrt(r**3 / MU_KM3_S2)
