"""
Satellite pass prediction for a ground observer.

This module finds horizon crossings (AOS/LOS), walks individual passes to
build ``Transit`` records, enumerates all passes in a time window and
samples fixed-interval ephemerides.

The crossing searches are secant-like steppers tuned to typical angular
rates rather than bisections: each step is proportional to the current
elevation and to the square root of the satellite altitude. Every loop is
capped by ``PredictionConfig.max_iterations``.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional

from .config import PredictionConfig
from .observation import ObservationResult, ObserverLocation, observe
from .orbit import SatelliteOrbit
from .validity import aos_happens, is_bad_satellite, is_geostationary

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS - Empirical step factors of the crossing searches
# =============================================================================

AOS_COARSE_LIMIT_DEG = -1.0  # Coarse stepping until elevation reaches this
AOS_COARSE_RATE = 0.00035
AOS_REFINE_DIVISOR = 530000.0
LOS_REFINE_DIVISOR = 502500.0
TRANSIT_STEP_DIVISOR = 25000.0


class CrossingStatus(Enum):
    """Outcome of a horizon crossing search."""

    FOUND = "found"
    NOT_CONVERGED = "not_converged"  # Iteration cap reached
    PROPAGATION_FAILED = "propagation_failed"


@dataclass(frozen=True)
class CrossingSearch:
    """Result of an AOS or LOS search."""

    status: CrossingStatus
    time: Optional[datetime] = None
    iterations: int = 0

    @property
    def found(self) -> bool:
        return self.status is CrossingStatus.FOUND


@dataclass(frozen=True)
class Transit:
    """One continuous above-horizon pass over an observer."""

    start: datetime
    end: datetime
    max_elevation: float  # degrees
    apex_azimuth: float  # azimuth at max elevation, degrees
    max_azimuth: float
    min_azimuth: float

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "duration_seconds": self.duration.total_seconds(),
            "max_elevation_deg": round(self.max_elevation, 2),
            "apex_azimuth_deg": round(self.apex_azimuth, 2),
            "max_azimuth_deg": round(self.max_azimuth, 2),
            "min_azimuth_deg": round(self.min_azimuth, 2),
        }


@dataclass(frozen=True)
class VisibilityWindow:
    """Interval of continuous visibility."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "duration_seconds": self.duration.total_seconds(),
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity."""
    return math.floor(value + 0.5)


def _shift(timestamp: datetime, days: float) -> Optional[datetime]:
    try:
        return timestamp + timedelta(days=days)
    except OverflowError:
        logger.debug(f"Search stepped out of the datetime range from {timestamp}")
        return None


def _sample(
    orbit: SatelliteOrbit,
    observer: Optional[ObserverLocation],
    timestamp: Optional[datetime],
    config: PredictionConfig,
) -> Optional[ObservationResult]:
    if timestamp is None:
        return None
    if config.log_intervals:
        logger.debug(f"Sampling {orbit.satellite_name} at {timestamp:%Y-%m-%d %H:%M:%S}")
    return observe(orbit, observer, timestamp)


def find_aos(
    orbit: SatelliteOrbit,
    observer: ObserverLocation,
    start: datetime,
    config: Optional[PredictionConfig] = None,
) -> CrossingSearch:
    """
    Find the next acquisition of signal at or after ``start``.

    Steps forward with a coarse rate while the satellite is well below the
    horizon, then refines until the elevation is within the crossing
    tolerance.

    Args:
        orbit: Satellite orbit
        observer: Ground observer
        start: Search start (UTC)
        config: Prediction configuration

    Returns:
        CrossingSearch; ``time`` is set only when the status is FOUND
    """
    config = config or PredictionConfig()
    current: Optional[datetime] = start
    observed = _sample(orbit, observer, current, config)
    if observed is None:
        return CrossingSearch(CrossingStatus.PROPAGATION_FAILED)

    if observed.elevation > 0:
        return CrossingSearch(CrossingStatus.FOUND, start)

    total = 0
    iterations = 0
    while observed.elevation < AOS_COARSE_LIMIT_DEG and iterations < config.max_iterations:
        rate = observed.elevation * (observed.altitude / 8400.0 + 0.46) - 2.0
        current = _shift(current, -AOS_COARSE_RATE * rate)
        observed = _sample(orbit, observer, current, config)
        if observed is None:
            return CrossingSearch(CrossingStatus.PROPAGATION_FAILED, iterations=total + iterations)
        iterations += 1
    total += iterations

    iterations = 0
    while iterations < config.max_iterations:
        if abs(observed.elevation) < config.crossing_tolerance_deg:
            return CrossingSearch(CrossingStatus.FOUND, current, total + iterations)
        step = observed.elevation * math.sqrt(observed.altitude) / AOS_REFINE_DIVISOR
        current = _shift(current, -step)
        observed = _sample(orbit, observer, current, config)
        if observed is None:
            return CrossingSearch(CrossingStatus.PROPAGATION_FAILED, iterations=total + iterations)
        iterations += 1

    return CrossingSearch(CrossingStatus.NOT_CONVERGED, iterations=total + iterations)


def find_los(
    orbit: SatelliteOrbit,
    observer: ObserverLocation,
    start: datetime,
    config: Optional[PredictionConfig] = None,
) -> CrossingSearch:
    """
    Refine a loss of signal near ``start``.

    Positive elevations step forward in time, negative ones step back.
    """
    config = config or PredictionConfig()
    current: Optional[datetime] = start
    observed = _sample(orbit, observer, current, config)
    if observed is None:
        return CrossingSearch(CrossingStatus.PROPAGATION_FAILED)

    iterations = 0
    while iterations < config.max_iterations:
        if abs(observed.elevation) < config.crossing_tolerance_deg:
            return CrossingSearch(CrossingStatus.FOUND, current, iterations)
        step = observed.elevation * math.sqrt(observed.altitude) / LOS_REFINE_DIVISOR
        current = _shift(current, step)
        observed = _sample(orbit, observer, current, config)
        if observed is None:
            return CrossingSearch(CrossingStatus.PROPAGATION_FAILED, iterations=iterations)
        iterations += 1

    return CrossingSearch(CrossingStatus.NOT_CONVERGED, iterations=iterations)


def scan_transit(
    orbit: SatelliteOrbit,
    observer: ObserverLocation,
    start: datetime,
    end: Optional[datetime] = None,
    config: Optional[PredictionConfig] = None,
) -> Optional[Transit]:
    """
    Find the next pass after ``start`` and walk it to its end.

    The walk step is proportional to the cosine of the elevation and the
    square root of the altitude. Azimuth extrema cover every sample of the
    pass, including the AOS sample.

    Args:
        orbit: Satellite orbit
        observer: Ground observer
        start: Search start (UTC)
        end: Optional bound; the pass is truncated here
        config: Prediction configuration

    Returns:
        Transit, or None for geostationary or gated orbits and when no
        crossing is found
    """
    config = config or PredictionConfig()
    if is_geostationary(orbit):
        logger.debug(f"{orbit.satellite_name} is geostationary, no discrete passes")
        return None

    if is_bad_satellite(orbit, observer, start):
        return None

    aos = find_aos(orbit, observer, start, config)
    if not aos.found:
        logger.debug(f"No AOS for {orbit.satellite_name} after {start}: {aos.status.value}")
        return None

    aos_time = aos.time
    if end is not None and aos_time >= end:
        return None

    observed = _sample(orbit, observer, aos_time, config)
    if observed is None:
        return None

    current = last_good = aos_time
    elevation = round_half_up(observed.elevation)
    last_elevation = 0
    max_elevation = observed.elevation
    apex_azimuth = max_azimuth = min_azimuth = observed.azimuth

    iterations = 0
    while (
        elevation >= 0
        and iterations < config.max_iterations
        and (end is None or current < end)
    ):
        last_elevation = elevation
        step = (
            math.cos(math.radians(observed.elevation - 1.0))
            * math.sqrt(observed.altitude)
            / TRANSIT_STEP_DIVISOR
        )
        next_time = _shift(current, step)
        sample = _sample(orbit, observer, next_time, config)
        if sample is None:
            logger.warning(
                f"Propagation of {orbit.satellite_name} failed during pass at {next_time}"
            )
            break
        current = last_good = next_time
        observed = sample
        elevation = round_half_up(observed.elevation)
        iterations += 1
        if end is not None and next_time > end:
            # Past the bound; the pass is clipped there
            continue
        if observed.elevation > max_elevation:
            max_elevation = observed.elevation
            apex_azimuth = observed.azimuth
        max_azimuth = max(max_azimuth, observed.azimuth)
        min_azimuth = min(min_azimuth, observed.azimuth)

    if elevation < 0 and last_elevation != 0:
        los = find_los(orbit, observer, current, config)
        if not los.found:
            logger.debug(f"No LOS for {orbit.satellite_name} near {current}: {los.status.value}")
            return None
        end_time = los.time
    else:
        end_time = last_good
        if end is not None and end_time > end:
            end_time = end

    if end_time < aos_time:
        end_time = aos_time

    return Transit(
        start=aos_time,
        end=end_time,
        max_elevation=max_elevation,
        apex_azimuth=apex_azimuth,
        max_azimuth=max_azimuth,
        min_azimuth=min_azimuth,
    )


def find_transits(
    orbit: SatelliteOrbit,
    observer: ObserverLocation,
    start: datetime,
    end: datetime,
    min_elevation: Optional[float] = None,
    max_transits: Optional[int] = None,
    config: Optional[PredictionConfig] = None,
) -> List[Transit]:
    """
    Find all passes ending within ``[start, end]``.

    Args:
        orbit: Satellite orbit
        observer: Ground observer
        start: Window start (UTC)
        end: Window end (UTC)
        min_elevation: Passes must peak above this (degrees); defaults to
            ``config.min_elevation_deg``
        max_transits: Maximum number of passes; defaults to
            ``config.transit_cap``
        config: Prediction configuration

    Returns:
        Time-ordered list of transits
    """
    config = config or PredictionConfig()
    if min_elevation is None:
        min_elevation = config.min_elevation_deg
    if max_transits is None:
        max_transits = config.transit_cap

    if is_bad_satellite(orbit, observer, start):
        return []

    gap = timedelta(seconds=config.transit_gap_seconds)
    transits: List[Transit] = []
    current = start
    iterations = 0

    while iterations < config.max_iterations and len(transits) < max_transits:
        transit = scan_transit(orbit, observer, current, config=config)
        if transit is None:
            break
        if transit.end > end:
            break
        if transit.end > start and transit.max_elevation > min_elevation:
            transits.append(transit)
        current = transit.end + gap
        iterations += 1

    logger.info(
        f"Found {len(transits)} passes of {orbit.satellite_name} "
        f"between {start} and {end} (min elevation {min_elevation}°)"
    )
    return transits


def ephemeris(
    orbit: SatelliteOrbit,
    observer: Optional[ObserverLocation],
    start: datetime,
    end: datetime,
    interval: timedelta,
    config: Optional[PredictionConfig] = None,
) -> List[ObservationResult]:
    """
    Sample the satellite every ``interval`` from ``start`` until ``end``.

    Stops early, keeping the samples gathered so far, if propagation fails.

    Raises:
        ValueError: If ``interval`` is not positive
    """
    config = config or PredictionConfig()
    if interval <= timedelta(0):
        raise ValueError(f"Ephemeris interval must be positive, got {interval}")

    if is_bad_satellite(orbit, observer, start):
        return []

    samples: List[ObservationResult] = []
    current = start
    iterations = 0
    while current < end and iterations < config.max_iterations:
        observed = _sample(orbit, observer, current, config)
        if observed is None:
            logger.warning(
                f"Propagation of {orbit.satellite_name} failed at {current}, "
                f"returning {len(samples)} samples"
            )
            break
        samples.append(observed)
        current += interval
        iterations += 1

    logger.info(f"Generated ephemeris with {len(samples)} points")
    return samples


def visibility_windows(
    orbit: SatelliteOrbit,
    observer: ObserverLocation,
    start: datetime,
    end: datetime,
    config: Optional[PredictionConfig] = None,
) -> List[VisibilityWindow]:
    """
    Intervals during which the satellite is above the observer's horizon.

    A geostationary satellite that is up at ``start`` is visible for the
    whole window; otherwise the windows are the passes of
    ``find_transits``.
    """
    config = config or PredictionConfig()
    if start >= end:
        return []

    if is_geostationary(orbit):
        if not aos_happens(orbit, observer):
            return []
        observed = observe(orbit, observer, start)
        if observed is None or observed.elevation <= 0:
            return []
        return [VisibilityWindow(start, end)]

    transits = find_transits(orbit, observer, start, end, config=config)
    return [VisibilityWindow(t.start, t.end) for t in transits]
