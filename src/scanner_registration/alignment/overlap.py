"""
Overlap Matching

Decides whether a candidate beacon set (already rotated into a trial
orientation) observes the same region as a reference set, and recovers the
translation between them.

Every ordered pair (reference beacon, candidate beacon) votes for the
difference vector `reference - candidate`. When the two sets overlap, the true
translation collects one vote per shared beacon; all other vectors are
scattered. The top-voted vector is accepted when its tally reaches
`min_overlap`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..geometry.point import Point, points_to_array
from ..utils.logging import setup_logger

logger = setup_logger(__name__)


@dataclass
class OverlapMatcher:
    min_overlap: int

    def __post_init__(self):
        if int(self.min_overlap) < 1:
            raise ValueError(f"min_overlap must be >= 1, got {self.min_overlap}")
        self.min_overlap = int(self.min_overlap)

    def score(self, reference, candidate) -> Tuple[Optional[Point], int]:
        """
        Find the most frequent difference vector between two beacon sets.

        Ties are broken towards the lexicographically smallest (x, y, z) vector.

        Args:
            reference: (N, 3) beacons of the already aligned scanner
            candidate: (M, 3) beacons of the scanner being tested

        Returns:
            (best vector, tally); (None, 0) when either set is empty
        """
        ref = points_to_array(reference)
        cand = points_to_array(candidate)
        if ref.size == 0 or cand.size == 0:
            return None, 0

        diffs = (ref[:, None, :] - cand[None, :, :]).reshape(-1, 3)
        # Rows come back sorted lexicographically, argmax takes the first maximum
        vectors, counts = np.unique(diffs, axis=0, return_counts=True)
        best = int(np.argmax(counts))
        return Point.from_array(vectors[best]), int(counts[best])

    def match(self, reference, candidate) -> Optional[Point]:
        """
        Return the translation mapping candidate onto reference, or None.

        `reference = candidate + translation` holds for every shared beacon of
        a successful match. Falling short of `min_overlap` is an ordinary
        outcome of the search and is not an error.
        """
        vector, tally = self.score(reference, candidate)
        if vector is None or tally < self.min_overlap:
            return None
        return vector
