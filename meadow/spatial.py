"""
Spatial utility functions for arena geometry.

Helper functions for horizontal distances, the axis-aligned vision box,
and wall clamping. The arena is flat: all tests use the x and z axes
and ignore y.
"""

import numpy as np
from typing import Tuple

from .constants import DISTANCE_EPSILON


def distance_xz(pos_a: np.ndarray, pos_b: np.ndarray) -> float:
    """
    Horizontal Euclidean distance between two points.

    Args:
        pos_a: Position [x, y, z]
        pos_b: Position [x, y, z]

    Returns:
        Distance in arena units
    """
    dx = pos_a[0] - pos_b[0]
    dz = pos_a[2] - pos_b[2]
    return float(np.sqrt(dx * dx + dz * dz))


def within_box(center: np.ndarray, point: np.ndarray, half_extent: float) -> bool:
    """
    Chebyshev box test on x and z (inclusive).

    A point is inside when both |dx| and |dz| are at most half_extent.
    """
    return (abs(point[0] - center[0]) <= half_extent
            and abs(point[2] - center[2]) <= half_extent)


def vision_range(vision: float, max_range: float) -> float:
    """Vision box half-extent for a vision attribute in [0, 100]"""
    return max_range * (vision / 100.0)


def clamp_to_wall(value: float, wall: float) -> float:
    """Clamp one coordinate into [-wall, wall]"""
    return max(-wall, min(wall, value))


def inside_wall(value: float, wall: float) -> bool:
    return -wall <= value <= wall


def direction_xz(origin: np.ndarray, target: np.ndarray) -> Tuple[np.ndarray, float]:
    """
    Normalized horizontal direction from origin to target.

    Args:
        origin: Start position [x, y, z]
        target: Target position [x, y, z]

    Returns:
        Tuple of (unit vector [dx, 0, dz], distance). A sub-epsilon distance
        returns a zero vector and 0.0 so callers treat it as arrival.
    """
    offset = np.array([target[0] - origin[0], 0.0, target[2] - origin[2]], dtype=np.float64)
    length = float(np.sqrt(np.dot(offset, offset)))

    if length < DISTANCE_EPSILON:
        return np.zeros(3, dtype=np.float64), 0.0

    return offset / length, length
