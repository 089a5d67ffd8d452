"""
Rotation and translation of integer points.

Pure functions over Points and (N, 3) int64 arrays. Rotations are applied as
column-vector products: p' = R @ p.
"""

from __future__ import annotations

from typing import Union

import numpy as np

from .point import Point, points_to_array

PointLike = Union[Point, np.ndarray]


def rotate(matrix: np.ndarray, point: Point) -> Point:
    """Integer matrix-vector product R @ p."""
    return Point.from_array(np.asarray(matrix, dtype=np.int64) @ point.as_array())


def rotate_all(matrix: np.ndarray, points) -> np.ndarray:
    """
    Rotate every point of a set.

    Args:
        matrix: 3x3 integer rotation
        points: (N, 3) array or iterable of Points

    Returns:
        (N, 3) int64 array with row i equal to R @ points[i]
    """
    arr = points_to_array(points)
    if arr.size == 0:
        return arr.copy()
    return arr @ np.asarray(matrix, dtype=np.int64).T


def translate(point: PointLike, offset: Point) -> PointLike:
    """Component-wise addition; arrays are shifted row by row."""
    if isinstance(point, Point):
        return point + offset
    return points_to_array(point) + offset.as_array()


def manhattan(a: Point, b: Point) -> int:
    return a.manhattan(b)
