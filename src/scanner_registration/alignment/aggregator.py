"""
Beacon Aggregation

Merges the beacons of aligned scanners into one deduplicated global set and
answers distance queries between scanner positions.
"""

from __future__ import annotations

from itertools import combinations
from typing import Sequence

import numpy as np

from ..geometry.scanner import AlignedScanner


def _check_aligned(scanners: Sequence[AlignedScanner]) -> None:
    for s in scanners:
        if not isinstance(s, AlignedScanner):
            raise TypeError(
                f"Scanner {getattr(s, 'id', '?')} is not aligned; global beacons are undefined"
            )


def unique_beacons(scanners: Sequence[AlignedScanner]) -> np.ndarray:
    """
    Global beacon coordinates of all scanners, deduplicated by exact equality.

    Returns:
        (K, 3) int64 array sorted lexicographically
    """
    _check_aligned(scanners)
    if not scanners:
        return np.empty((0, 3), dtype=np.int64)
    stacked = np.concatenate([s.global_beacons() for s in scanners], axis=0)
    if stacked.size == 0:
        return np.empty((0, 3), dtype=np.int64)
    return np.unique(stacked, axis=0)


def unique_beacon_count(scanners: Sequence[AlignedScanner]) -> int:
    return int(len(unique_beacons(scanners)))


def max_scanner_distance(scanners: Sequence[AlignedScanner]) -> int:
    """Largest Manhattan distance between any two scanner positions (0 for fewer than two)."""
    _check_aligned(scanners)
    positions = [s.position for s in scanners]
    return max((a.manhattan(b) for a, b in combinations(positions, 2)), default=0)
