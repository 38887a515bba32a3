"""
Prediction configuration.

Every search and scan takes a ``PredictionConfig`` explicitly. Defaults
match the classic predict behaviour; values can be loaded from a YAML file.
"""

import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SATPREDICT_CONFIG"

DEFAULT_MAX_ITERATIONS = 99999
DEFAULT_MIN_ELEVATION_DEG = 4.0


@dataclass(frozen=True)
class PredictionConfig:
    """
    Iteration limits, tolerances and diagnostics for pass prediction.
    """

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    log_intervals: bool = False  # Log every sampled instant at DEBUG
    min_elevation_deg: float = DEFAULT_MIN_ELEVATION_DEG
    max_transits: Optional[int] = None  # None means max_iterations
    transit_gap_seconds: float = 60.0  # Guard gap between pass searches
    crossing_tolerance_deg: float = 0.5  # AOS/LOS convergence tolerance
    sat_step_seconds: float = 60.0
    sat_min_step_seconds: float = 1.0

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be > 0, got {self.max_iterations}")

        if self.max_transits is not None and self.max_transits <= 0:
            raise ValueError(f"max_transits must be > 0, got {self.max_transits}")

        if not -90 <= self.min_elevation_deg <= 90:
            raise ValueError(
                f"min_elevation_deg must be in [-90, 90], got {self.min_elevation_deg}"
            )

        if self.transit_gap_seconds < 0:
            raise ValueError(
                f"transit_gap_seconds must be >= 0, got {self.transit_gap_seconds}"
            )

        if self.crossing_tolerance_deg <= 0:
            raise ValueError(
                f"crossing_tolerance_deg must be > 0, got {self.crossing_tolerance_deg}"
            )

        if self.sat_step_seconds <= 0 or self.sat_min_step_seconds <= 0:
            raise ValueError("Sat-to-sat step sizes must be > 0")

        if self.sat_min_step_seconds > self.sat_step_seconds:
            raise ValueError(
                f"sat_min_step_seconds ({self.sat_min_step_seconds}) exceeds "
                f"sat_step_seconds ({self.sat_step_seconds})"
            )

    @property
    def transit_cap(self) -> int:
        """Effective maximum number of transits per search."""
        return self.max_transits if self.max_transits is not None else self.max_iterations

    def with_overrides(self, **overrides: Any) -> "PredictionConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PredictionConfig":
        """
        Create a configuration from a mapping.

        Raises:
            ValueError: If the mapping has unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {unknown}")
        return cls(**dict(data))

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "PredictionConfig":
        """
        Load configuration from a YAML file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file doesn't hold a mapping
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(config_path, "r") as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")

        logger.info(f"Loaded prediction config from {config_path}")
        return cls.from_dict(data)


def load_config(path: Optional[Union[str, Path]] = None) -> PredictionConfig:
    """
    Resolve the prediction configuration.

    Uses ``path`` when given, else the ``SATPREDICT_CONFIG`` environment
    variable, else the defaults.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return PredictionConfig()
    return PredictionConfig.from_yaml(path)
