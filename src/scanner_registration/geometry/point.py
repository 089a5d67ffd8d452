"""
Integer 3D points.

A Point is the value type used for scanner positions and translation vectors.
Beacon sets are carried as (N, 3) int64 numpy arrays; `as_array` and
`points_to_array` convert between the two representations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

import numpy as np


@dataclass(frozen=True, order=True)
class Point:
    """Immutable integer triple, ordered lexicographically on (x, y, z)."""

    x: int
    y: int
    z: int

    @classmethod
    def origin(cls) -> "Point":
        return cls(0, 0, 0)

    @classmethod
    def from_array(cls, values) -> "Point":
        """Build a Point from any length-3 sequence or array."""
        arr = np.asarray(values).reshape(-1)
        if arr.shape != (3,):
            raise ValueError(f"Expected 3 coordinates, got shape {arr.shape}")
        return cls(int(arr[0]), int(arr[1]), int(arr[2]))

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.int64)

    def manhattan(self, other: "Point") -> int:
        return abs(self.x - other.x) + abs(self.y - other.y) + abs(self.z - other.z)

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: "Point") -> "Point":
        if not isinstance(other, Point):
            return NotImplemented
        return Point(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Point") -> "Point":
        if not isinstance(other, Point):
            return NotImplemented
        return Point(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> "Point":
        return Point(-self.x, -self.y, -self.z)

    def __str__(self) -> str:
        return f"{self.x},{self.y},{self.z}"


def points_to_array(points: Iterable) -> np.ndarray:
    """
    Convert an iterable of Points (or coordinate triples) to an (N, 3) int64 array.

    Args:
        points: Points, tuples or an existing array

    Returns:
        (N, 3) int64 array; an empty input yields shape (0, 3)
    """
    if isinstance(points, np.ndarray):
        arr = points.astype(np.int64, copy=False)
    else:
        arr = np.array([tuple(p) for p in points], dtype=np.int64)
    if arr.size == 0:
        return np.empty((0, 3), dtype=np.int64)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"Expected Nx3 array, got shape {arr.shape}")
    return arr


def array_to_points(arr: np.ndarray) -> list[Point]:
    return [Point(int(x), int(y), int(z)) for x, y, z in np.asarray(arr)]
