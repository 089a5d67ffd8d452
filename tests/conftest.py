"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import numpy as np
import pytest

from scanner_registration.geometry import Point, RotationGroup, UnalignedScanner
from scanner_registration.preprocessing import ScanReportLoader

DATA_DIR = Path(__file__).parent / "data"
WORKED_EXAMPLE = DATA_DIR / "worked_example.txt"

# Known poses of the worked example relative to scanner 0
WORKED_EXAMPLE_POSITIONS = {
    0: Point(0, 0, 0),
    1: Point(68, -1246, -43),
    2: Point(1105, -1205, 1229),
    3: Point(-92, -2380, -20),
    4: Point(-20, -1133, 1061),
}


@dataclass
class SyntheticScene:
    """Scanners generated from known global beacons and poses."""

    scanners: List[UnalignedScanner]
    positions: Dict[int, Point]
    rotations: Dict[int, np.ndarray]
    unique_beacons: int


def make_chain_scene(
    n_scanners: int = 5,
    *,
    shared: int = 14,
    private: int = 5,
    seed: int = 0,
) -> SyntheticScene:
    """
    Build a chain of scanners where scanner k shares `shared` beacons with k+1.

    Scanner 0 sits at the origin with the identity rotation. Every other
    scanner gets a random pose; its report holds `R^T (g - p)` for each of its
    global beacons g.
    """
    rng = np.random.default_rng(seed)
    group = RotationGroup.generate()

    total = (n_scanners - 1) * shared + n_scanners * private
    pool = np.unique(rng.integers(-1000, 1001, size=(total * 2, 3)), axis=0)
    pool = pool[rng.permutation(len(pool))][:total]

    links = [pool[k * shared:(k + 1) * shared] for k in range(n_scanners - 1)]
    rest = pool[(n_scanners - 1) * shared:]
    privates = [rest[k * private:(k + 1) * private] for k in range(n_scanners)]

    scanners, positions, rotations = [], {}, {}
    for k in range(n_scanners):
        parts = [privates[k]]
        if k > 0:
            parts.append(links[k - 1])
        if k < n_scanners - 1:
            parts.append(links[k])
        global_beacons = np.concatenate(parts, axis=0)
        global_beacons = global_beacons[rng.permutation(len(global_beacons))]

        if k == 0:
            position = Point(0, 0, 0)
            rotation = group.identity
        else:
            position = Point.from_array(rng.integers(-3000, 3001, size=3))
            rotation = group[int(rng.integers(0, len(group)))]

        local = (global_beacons - position.as_array()) @ rotation  # R^T (g - p) row-wise
        scanners.append(UnalignedScanner(id=k, beacons=local))
        positions[k] = position
        rotations[k] = rotation

    return SyntheticScene(scanners=scanners, positions=positions, rotations=rotations, unique_beacons=total)


@pytest.fixture(scope="session")
def rotation_group() -> RotationGroup:
    return RotationGroup.generate()


@pytest.fixture(scope="session")
def worked_example_path() -> Path:
    return WORKED_EXAMPLE


@pytest.fixture
def worked_example() -> List[UnalignedScanner]:
    return ScanReportLoader().load(str(WORKED_EXAMPLE))


@pytest.fixture
def chain_scene() -> SyntheticScene:
    return make_chain_scene()
