"""Tests for beacon aggregation and scanner distance queries."""

import numpy as np
import pytest

from scanner_registration.alignment import (
    max_scanner_distance,
    unique_beacon_count,
    unique_beacons,
)
from scanner_registration.geometry import AlignedScanner, Point, UnalignedScanner


def _aligned(sid, beacons, position):
    return AlignedScanner(id=sid, beacons=np.array(beacons), position=position)


def test_duplicates_across_scanners_counted_once():
    a = _aligned(0, [[0, 0, 0], [1, 1, 1]], Point(0, 0, 0))
    # Local (-9, -9, -9) at (10, 10, 10) is global (1, 1, 1)
    b = _aligned(1, [[-9, -9, -9], [0, 0, 0]], Point(10, 10, 10))
    beacons = unique_beacons([a, b])
    assert beacons.tolist() == [[0, 0, 0], [1, 1, 1], [10, 10, 10]]
    assert unique_beacon_count([a, b]) == 3


def test_exact_equality_only():
    a = _aligned(0, [[0, 0, 0]], Point(0, 0, 0))
    b = _aligned(1, [[0, 0, 0]], Point(0, 0, 1))
    assert unique_beacon_count([a, b]) == 2


def test_max_scanner_distance():
    scanners = [
        _aligned(0, [[0, 0, 0]], Point(0, 0, 0)),
        _aligned(1, [[0, 0, 0]], Point(1105, -1205, 1229)),
        _aligned(2, [[0, 0, 0]], Point(-92, -2380, -20)),
    ]
    assert max_scanner_distance(scanners) == 3621


def test_single_and_empty():
    only = _aligned(0, [[1, 2, 3], [1, 2, 3], [4, 5, 6]], Point(0, 0, 0))
    assert max_scanner_distance([only]) == 0
    assert unique_beacon_count([only]) == 2
    assert unique_beacon_count([]) == 0
    assert max_scanner_distance([]) == 0


def test_unaligned_scanners_rejected():
    with pytest.raises(TypeError, match="not aligned"):
        unique_beacons([UnalignedScanner(id=3, beacons=[[1, 2, 3]])])
    with pytest.raises(TypeError):
        max_scanner_distance([UnalignedScanner(id=3, beacons=[[1, 2, 3]])])
