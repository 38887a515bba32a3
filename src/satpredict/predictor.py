"""
Pass prediction front end.

``Predictor`` accepts element set text (or loaded orbits), observer
coordinates and datetimes, normalises them, and dispatches to the
observation, pass and sat-to-sat modules with one explicit configuration.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Union
import logging

from .config import PredictionConfig
from .geometry import VectorLike
from .observation import ObservationResult, ObserverLocation, observe
from .orbit import SatelliteOrbit, orbital_period_from_position
from .passes import Transit, VisibilityWindow, ephemeris, find_transits, scan_transit, visibility_windows
from .sat_visibility import satellite_visibility_windows
from .utils import ensure_utc
from .validity import is_bad_satellite

logger = logging.getLogger(__name__)

OrbitInput = Union[str, SatelliteOrbit]
ObserverInput = Union[ObserverLocation, Sequence[float]]


def _to_orbit(tle: OrbitInput) -> SatelliteOrbit:
    if isinstance(tle, SatelliteOrbit):
        return tle
    return SatelliteOrbit.from_tle_text(tle)


def _to_observer(observer: Optional[ObserverInput]) -> Optional[ObserverLocation]:
    if observer is None or isinstance(observer, ObserverLocation):
        return observer
    return ObserverLocation.from_sequence(observer)


class Predictor:
    """
    Satellite pass and visibility predictor.

    Stateless apart from its configuration, so one instance can serve any
    number of satellites and observers.
    """

    def __init__(self, config: Optional[PredictionConfig] = None) -> None:
        self.config = config or PredictionConfig()

    def position_at(
        self,
        tle: OrbitInput,
        observer: Optional[ObserverInput],
        when: datetime,
    ) -> Optional[ObservationResult]:
        """
        Observe a satellite at one instant.

        Args:
            tle: Element set text or loaded orbit
            observer: Optional observer ``[lat, lon, alt_km]``
            when: Observation time

        Returns:
            ObservationResult, or None if the orbit is gated out or
            propagation fails
        """
        orbit = _to_orbit(tle)
        location = _to_observer(observer)
        when = ensure_utc(when)
        if is_bad_satellite(orbit, location, when):
            return None
        return observe(orbit, location, when)

    def ephemeris(
        self,
        tle: OrbitInput,
        observer: Optional[ObserverInput],
        start: datetime,
        end: datetime,
        interval: timedelta,
    ) -> List[ObservationResult]:
        """Fixed-interval observations over ``[start, end)``."""
        return ephemeris(
            _to_orbit(tle),
            _to_observer(observer),
            ensure_utc(start),
            ensure_utc(end),
            interval,
            self.config,
        )

    def transits(
        self,
        tle: OrbitInput,
        observer: ObserverInput,
        start: datetime,
        end: datetime,
        min_elevation: Optional[float] = None,
        max_transits: Optional[int] = None,
    ) -> List[Transit]:
        """All passes ending in ``[start, end]`` that peak above ``min_elevation``."""
        return find_transits(
            _to_orbit(tle),
            _to_observer(observer),
            ensure_utc(start),
            ensure_utc(end),
            min_elevation=min_elevation,
            max_transits=max_transits,
            config=self.config,
        )

    def transit_segment(
        self,
        tle: OrbitInput,
        observer: ObserverInput,
        start: datetime,
        end: datetime,
    ) -> Optional[Transit]:
        """The next pass after ``start``, truncated at ``end``."""
        orbit = _to_orbit(tle)
        location = _to_observer(observer)
        start = ensure_utc(start)
        if is_bad_satellite(orbit, location, start):
            return None
        return scan_transit(orbit, location, start, ensure_utc(end), self.config)

    def visibility_windows(
        self,
        tle: OrbitInput,
        observer: ObserverInput,
        start: datetime,
        end: datetime,
    ) -> List[VisibilityWindow]:
        """Intervals during which the satellite is above the horizon."""
        return visibility_windows(
            _to_orbit(tle),
            _to_observer(observer),
            ensure_utc(start),
            ensure_utc(end),
            self.config,
        )

    def satellite_visibility_windows(
        self,
        tle1: OrbitInput,
        tle2: OrbitInput,
        start: datetime,
        end: datetime,
        step_seconds: Optional[float] = None,
    ) -> List[VisibilityWindow]:
        """
        Windows of mutual line of sight between two satellites.

        Raises:
            TypeError: If either satellite is neither text nor an orbit
            ValueError: If either element set is malformed
        """
        for tle in (tle1, tle2):
            if not isinstance(tle, (str, SatelliteOrbit)) or not tle:
                raise TypeError("Invalid TLE: expected strings for both satellites")
        return satellite_visibility_windows(
            _to_orbit(tle1),
            _to_orbit(tle2),
            ensure_utc(start),
            ensure_utc(end),
            step_seconds=step_seconds,
            config=self.config,
        )

    @staticmethod
    def orbital_period_from_tle(tle: OrbitInput) -> float:
        """Orbital period in seconds from the element set's semi-major axis."""
        return _to_orbit(tle).get_orbital_period().total_seconds()

    @staticmethod
    def orbital_period_from_position(position: VectorLike) -> float:
        """Circular orbit period in seconds for an ECI/ECEF position in km."""
        return orbital_period_from_position(position)
