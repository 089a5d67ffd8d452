"""
Scanner records.

A scanner is either unaligned (local beacons only) or aligned (beacons in the
anchor's orientation plus a global position). The two states are separate
types so that only aligned scanners can produce global beacon coordinates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

import numpy as np

from .point import Point, points_to_array
from .transform import rotate_all


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr = np.array(arr, dtype=np.int64)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class UnalignedScanner:
    """
    Scanner whose frame is not yet related to the anchor.

    Attributes:
        id: Scanner id from the report (consecutive from 0)
        beacons: (N, 3) int64 beacon coordinates in the scanner's own frame
    """

    id: int
    beacons: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "beacons", _frozen(points_to_array(self.beacons)))

    @property
    def num_beacons(self) -> int:
        return len(self.beacons)

    def rotated(self, matrix: np.ndarray) -> np.ndarray:
        return rotate_all(matrix, self.beacons)

    def align(self, position: Point, rotation: np.ndarray) -> "AlignedScanner":
        """Return the aligned counterpart of this scanner under `rotation` at `position`."""
        return AlignedScanner(
            id=self.id,
            beacons=self.rotated(rotation),
            position=position,
            rotation=np.asarray(rotation, dtype=np.int64),
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, UnalignedScanner):
            return NotImplemented
        return self.id == other.id and np.array_equal(self.beacons, other.beacons)


@dataclass(frozen=True, eq=False)
class AlignedScanner:
    """
    Scanner registered into the global frame.

    Attributes:
        id: Scanner id
        beacons: (N, 3) beacons rotated into the anchor's orientation, still
            relative to the scanner
        position: Scanner position in the global frame
        rotation: Rotation that maps the original report into the anchor's
            orientation
    """

    id: int
    beacons: np.ndarray
    position: Point
    rotation: np.ndarray = field(default_factory=lambda: np.eye(3, dtype=np.int64))

    def __post_init__(self):
        object.__setattr__(self, "beacons", _frozen(points_to_array(self.beacons)))
        object.__setattr__(self, "rotation", _frozen(self.rotation))

    @classmethod
    def anchor(cls, scanner: UnalignedScanner) -> "AlignedScanner":
        return cls(id=scanner.id, beacons=scanner.beacons, position=Point.origin())

    @property
    def num_beacons(self) -> int:
        return len(self.beacons)

    def global_beacons(self) -> np.ndarray:
        return self.beacons + self.position.as_array()

    def __eq__(self, other) -> bool:
        if not isinstance(other, AlignedScanner):
            return NotImplemented
        return (
            self.id == other.id
            and self.position == other.position
            and np.array_equal(self.beacons, other.beacons)
            and np.array_equal(self.rotation, other.rotation)
        )


Scanner = Union[UnalignedScanner, AlignedScanner]
