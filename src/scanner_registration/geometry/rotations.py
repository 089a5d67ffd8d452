"""
Axis-aligned Rotation Group

Enumerates the 24 proper rotations that map an axis-aligned integer frame onto
another axis-aligned integer frame (the rotational symmetries of a cube).

The set is built by composing elementary quarter turns about x, y and z for
every step combination in {0, 1, 2, 3}^3 and keeping the distinct products.
The 64 candidates collapse to exactly 24 matrices; the order in which they are
first produced is kept so that searches over the group are reproducible.
"""

from __future__ import annotations

from typing import Iterator, List, Sequence

import numpy as np

from ..exceptions import RotationGroupError
from ..utils.logging import setup_logger

logger = setup_logger(__name__)

GROUP_ORDER = 24

# cos/sin of k quarter turns
_COS = (1, 0, -1, 0)
_SIN = (0, 1, 0, -1)


def rot_x(steps: int) -> np.ndarray:
    c, s = _COS[steps % 4], _SIN[steps % 4]
    return np.array([[1, 0, 0], [0, c, -s], [0, s, c]], dtype=np.int64)


def rot_y(steps: int) -> np.ndarray:
    c, s = _COS[steps % 4], _SIN[steps % 4]
    return np.array([[c, 0, s], [0, 1, 0], [-s, 0, c]], dtype=np.int64)


def rot_z(steps: int) -> np.ndarray:
    c, s = _COS[steps % 4], _SIN[steps % 4]
    return np.array([[c, -s, 0], [s, c, 0], [0, 0, 1]], dtype=np.int64)


def generate_unique_rotations() -> List[np.ndarray]:
    """
    Compose Rx(a) @ Ry(b) @ Rz(c) for all quarter-turn counts and deduplicate.

    Returns:
        List of distinct 3x3 int64 matrices, in first-seen order
    """
    seen: dict[bytes, np.ndarray] = {}
    for step_x in range(4):
        for step_y in range(4):
            for step_z in range(4):
                m = rot_x(step_x) @ rot_y(step_y) @ rot_z(step_z)
                key = m.tobytes()
                if key not in seen:
                    m.setflags(write=False)
                    seen[key] = m
    return list(seen.values())


class RotationGroup:
    """
    The 24 axis-aligned rotations, computed once and shared read-only.

    Example:
        >>> group = RotationGroup.generate()
        >>> len(group)
        24
    """

    def __init__(self, matrices: Sequence[np.ndarray]):
        self._matrices: List[np.ndarray] = [np.asarray(m, dtype=np.int64) for m in matrices]
        self._keys = {m.tobytes() for m in self._matrices}

    @classmethod
    def generate(cls, *, validate: bool = True) -> "RotationGroup":
        group = cls(generate_unique_rotations())
        if validate:
            group.validate()
        logger.debug(f"Generated rotation group with {len(group)} members")
        return group

    # ------------------------ Queries ------------------------
    def __len__(self) -> int:
        return len(self._matrices)

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._matrices)

    def __getitem__(self, index: int) -> np.ndarray:
        return self._matrices[index]

    def all_rotations(self) -> List[np.ndarray]:
        return list(self._matrices)

    def contains(self, matrix: np.ndarray) -> bool:
        return np.asarray(matrix, dtype=np.int64).tobytes() in self._keys

    def index_of(self, matrix: np.ndarray) -> int:
        key = np.asarray(matrix, dtype=np.int64).tobytes()
        for i, m in enumerate(self._matrices):
            if m.tobytes() == key:
                return i
        raise KeyError("Matrix is not a member of the rotation group")

    @property
    def identity(self) -> np.ndarray:
        return np.eye(3, dtype=np.int64)

    @staticmethod
    def inverse(matrix: np.ndarray) -> np.ndarray:
        # Orthogonal, so the transpose is the inverse
        return np.ascontiguousarray(np.asarray(matrix).T)

    # ------------------------ Invariants ------------------------
    def validate(self) -> None:
        """
        Check the group invariants.

        Raises:
            RotationGroupError: wrong cardinality, duplicate members, entries
                outside {-1, 0, 1}, non-orthogonal matrix or det != +1
        """
        if len(self._matrices) != GROUP_ORDER:
            raise RotationGroupError(
                f"Expected {GROUP_ORDER} rotations, got {len(self._matrices)}"
            )
        if len(self._keys) != len(self._matrices):
            raise RotationGroupError("Rotation set contains duplicate matrices")
        eye = np.eye(3, dtype=np.int64)
        for m in self._matrices:
            if m.shape != (3, 3):
                raise RotationGroupError(f"Rotation must be 3x3, got {m.shape}")
            if not np.all(np.isin(m, (-1, 0, 1))):
                raise RotationGroupError(f"Rotation has entries outside {{-1, 0, 1}}:\n{m}")
            if not np.array_equal(m @ m.T, eye):
                raise RotationGroupError(f"Rotation is not orthogonal:\n{m}")
            if int(round(np.linalg.det(m))) != 1:
                raise RotationGroupError(f"Rotation is not proper (det != 1):\n{m}")
        if not self.contains(eye):
            raise RotationGroupError("Rotation set does not contain the identity")
