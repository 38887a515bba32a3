"""
Vector helpers shared by the eclipse model and the visibility scanners.

All vectors are 3-element numpy arrays in kilometres (or km/s).
"""

import math
from typing import Sequence, Tuple, Union

import numpy as np

VectorLike = Union[np.ndarray, Sequence[float]]


def as_vector(values: VectorLike) -> np.ndarray:
    """Return ``values`` as a float 3-vector."""
    vec = np.asarray(values, dtype=float)
    if vec.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {vec.shape}")
    return vec


def magnitude(v: VectorLike) -> float:
    return float(np.linalg.norm(as_vector(v)))


def vec_sub(v1: VectorLike, v2: VectorLike) -> Tuple[np.ndarray, float]:
    """
    Subtract ``v2`` from ``v1``.

    Returns:
        Tuple of (difference vector, its magnitude)
    """
    diff = as_vector(v1) - as_vector(v2)
    return diff, float(np.linalg.norm(diff))


def scalar_multiply(k: float, v: VectorLike) -> np.ndarray:
    return k * as_vector(v)


def angle_between(v1: VectorLike, v2: VectorLike) -> float:
    """
    Angle between two vectors in radians.

    The cosine is clipped to [-1, 1] so rounding noise on parallel vectors
    cannot leave the arccos domain. Callers guard against zero-length
    vectors.

    Raises:
        ValueError: If either vector has zero length
    """
    a = as_vector(v1)
    b = as_vector(v2)
    norms = np.linalg.norm(a) * np.linalg.norm(b)
    if norms == 0:
        raise ValueError("Angle is undefined for a zero-length vector")
    cos_angle = np.clip(np.dot(a, b) / norms, -1.0, 1.0)
    return math.acos(float(cos_angle))
