"""
Satellite Pass Prediction

Predicts when and how a satellite is observable from a ground site, and
when two satellites can see each other, from two-line element sets.
"""

from .config import PredictionConfig, load_config
from .observation import ObservationResult, ObserverLocation, observe
from .orbit import SatelliteOrbit
from .passes import CrossingSearch, CrossingStatus, Transit, VisibilityWindow
from .predictor import Predictor

__version__ = "0.1.0"

__all__ = [
    "CrossingSearch",
    "CrossingStatus",
    "ObservationResult",
    "ObserverLocation",
    "PredictionConfig",
    "Predictor",
    "SatelliteOrbit",
    "Transit",
    "VisibilityWindow",
    "load_config",
    "observe",
]
