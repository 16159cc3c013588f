from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy import typing as npt


def as_vector(values: npt.ArrayLike, size: int) -> npt.NDArray[np.float64]:
    """
    Convert a sequence into a float64 vector of a fixed size.

    Args:
        values: Sequence of numbers (tuple, list or array).
        size: Expected number of components.

    Raises:
        ValueError: If the number of components does not match `size`.

    Returns:
        A new float64 array of shape (size,).
    """
    vector = np.array(values, dtype=np.float64).reshape(-1)
    if vector.shape[0] != size:
        raise ValueError(f"Expected a vector with {size} components, got {vector.shape[0]}: {values!r}")
    return vector


def normalize(vector: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Return the unit vector, or a zero vector if the magnitude is zero."""
    magnitude = float(np.linalg.norm(vector))
    if magnitude == 0.0:
        return np.zeros_like(vector, dtype=np.float64)
    return vector / magnitude


def angle_between(a: npt.NDArray[np.float64], b: npt.NDArray[np.float64]) -> float:
    """
    Angle between two vectors in degrees.

    Uses atan2(|a x b|, a . b), which stays accurate for nearly parallel vectors.
    A zero vector gives an angle of 90 degrees against anything.
    """
    if not np.any(a) or not np.any(b):
        return 90.0
    return float(np.degrees(np.arctan2(np.linalg.norm(np.cross(a, b)), np.dot(a, b))))


def lerp(a: npt.NDArray[np.float64], b: npt.NDArray[np.float64], t: float) -> npt.NDArray[np.float64]:
    """Linear interpolation, ``a`` at t=0 and ``b`` at t=1."""
    return a + (b - a) * t
