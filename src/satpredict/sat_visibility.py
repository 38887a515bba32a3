"""
Satellite-to-satellite line-of-sight windows.

Two satellites see each other when the segment joining them doesn't cross
the Earth sphere. The scan steps adaptively: full steps while the pair is
visible, shorter steps while occluded so the rising edge is caught early.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import List, Optional

from .config import PredictionConfig
from .geometry import VectorLike, as_vector, vec_sub
from .orbit import EARTH_RADIUS_KM, EciState, SatelliteOrbit
from .passes import VisibilityWindow
from .validity import is_bad_satellite

logger = logging.getLogger(__name__)

ADAPTIVE_DISTANCE_FACTOR = 1000.0


def is_sat_to_sat_visible(pos1: VectorLike, pos2: VectorLike) -> bool:
    """
    Check whether the Earth blocks the line of sight between two positions.

    Intersects ``P(t) = pos1 + t * (pos2 - pos1)`` with the sphere of the
    Earth's equatorial radius. The pair is visible when the line misses the
    sphere or neither intersection lies on the segment (both parameters
    outside ``[0, 1]``).

    Args:
        pos1: First ECI position in km
        pos2: Second ECI position in km

    Returns:
        True if the line of sight is clear
    """
    p1 = as_vector(pos1)
    d, distance = vec_sub(pos2, p1)
    if distance == 0:
        # Coincident points: nothing lies between them
        return bool(p1.dot(p1) > EARTH_RADIUS_KM**2)

    a = float(d.dot(d))
    b = 2 * float(p1.dot(d))
    c = float(p1.dot(p1)) - EARTH_RADIUS_KM**2

    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return True

    root = math.sqrt(discriminant)
    t1 = (-b + root) / (2 * a)
    t2 = (-b - root) / (2 * a)
    return (t1 < 0 or t1 > 1) and (t2 < 0 or t2 > 1)


def adaptive_step(
    state1: EciState,
    state2: EciState,
    visible: bool,
    nominal_step: float,
    min_step: float = 1.0,
) -> float:
    """
    Next scan step in seconds.

    Args:
        state1: First satellite state
        state2: Second satellite state
        visible: Whether the pair is currently visible
        nominal_step: Default step in seconds
        min_step: Lower bound on the step in seconds

    Returns:
        ``nominal_step`` while visible, otherwise half the step bounded by
        the separation over the relative speed
    """
    _, distance = vec_sub(state2.position, state1.position)
    _, rel_speed = vec_sub(state2.velocity, state1.velocity)
    if rel_speed == 0 or visible:
        return nominal_step
    step = max(min_step, min(nominal_step, ADAPTIVE_DISTANCE_FACTOR * distance / rel_speed))
    return max(min_step, step / 2)


def satellite_visibility_windows(
    orbit1: SatelliteOrbit,
    orbit2: SatelliteOrbit,
    start: datetime,
    end: datetime,
    step_seconds: Optional[float] = None,
    config: Optional[PredictionConfig] = None,
) -> List[VisibilityWindow]:
    """
    Find windows of mutual line of sight between two satellites.

    Args:
        orbit1: First satellite
        orbit2: Second satellite
        start: Window start (UTC)
        end: Window end (UTC)
        step_seconds: Nominal step; defaults to ``config.sat_step_seconds``
        config: Prediction configuration

    Returns:
        List of windows; one still open at the end is closed at ``end``
    """
    config = config or PredictionConfig()
    if step_seconds is None:
        step_seconds = config.sat_step_seconds
    if step_seconds <= 0:
        raise ValueError(f"step_seconds must be positive, got {step_seconds}")
    min_step = min(config.sat_min_step_seconds, step_seconds)

    if is_bad_satellite(orbit1, None, start) or is_bad_satellite(orbit2, None, start):
        return []

    windows: List[VisibilityWindow] = []
    current = start
    is_visible = False
    window_start: Optional[datetime] = None
    iterations = 0

    while current <= end and iterations < config.max_iterations:
        state1 = orbit1.propagate(current)
        state2 = orbit2.propagate(current)
        if state1 is None or state2 is None:
            logger.warning(
                f"Propagation failed at {current}, stopping "
                f"{orbit1.satellite_name}/{orbit2.satellite_name} scan"
            )
            break

        visible = is_sat_to_sat_visible(state1.position, state2.position)
        if visible and not is_visible:
            is_visible = True
            window_start = current
        elif not visible and is_visible:
            is_visible = False
            windows.append(VisibilityWindow(window_start, current))
            window_start = None

        if config.log_intervals:
            logger.debug(f"{current:%Y-%m-%d %H:%M:%S} visible={visible}")

        step = adaptive_step(state1, state2, visible, step_seconds, min_step)
        current += timedelta(seconds=step)
        iterations += 1

    if is_visible and window_start is not None:
        windows.append(VisibilityWindow(window_start, end))

    logger.info(
        f"Found {len(windows)} visibility windows between "
        f"{orbit1.satellite_name} and {orbit2.satellite_name}"
    )
    return windows
