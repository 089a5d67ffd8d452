"""
Tests for the axis-aligned rotation group.

These tests verify:
- Cardinality, orthogonality and determinant of every member
- Identity membership, inverses and closure under composition
- Deterministic generation order
- Invariant violations are reported
"""

import numpy as np
import pytest

from scanner_registration.exceptions import RotationGroupError
from scanner_registration.geometry import Point, RotationGroup, rotate, rot_x, rot_y, rot_z
from scanner_registration.geometry.rotations import generate_unique_rotations


class TestRotationGroupInvariants:
    def test_exactly_24_distinct_members(self, rotation_group):
        assert len(rotation_group) == 24
        keys = {m.tobytes() for m in rotation_group}
        assert len(keys) == 24

    def test_members_are_proper_rotations(self, rotation_group):
        eye = np.eye(3, dtype=np.int64)
        for m in rotation_group:
            assert m.dtype == np.int64
            assert np.array_equal(m @ m.T, eye)
            assert round(np.linalg.det(m)) == 1
            assert set(np.unique(m)).issubset({-1, 0, 1})
            # Each row and column is a signed unit vector
            assert np.all(np.abs(m).sum(axis=0) == 1)
            assert np.all(np.abs(m).sum(axis=1) == 1)

    def test_identity_is_member(self, rotation_group):
        assert rotation_group.contains(np.eye(3, dtype=np.int64))
        assert np.array_equal(rotation_group[0], np.eye(3, dtype=np.int64))

    def test_inverse_is_member(self, rotation_group):
        for m in rotation_group:
            inv = rotation_group.inverse(m)
            assert rotation_group.contains(inv)
            assert np.array_equal(m @ inv, np.eye(3, dtype=np.int64))

    def test_closed_under_composition(self, rotation_group):
        for a in rotation_group:
            for b in rotation_group:
                assert rotation_group.contains(a @ b)

    def test_validate_passes(self, rotation_group):
        rotation_group.validate()


def test_generation_is_deterministic():
    first = generate_unique_rotations()
    second = generate_unique_rotations()
    assert len(first) == len(second) == 24
    for a, b in zip(first, second):
        assert np.array_equal(a, b)


def test_elementary_quarter_turns():
    # Quarter turn about z maps x onto y
    assert np.array_equal(rot_z(1) @ np.array([1, 0, 0]), np.array([0, 1, 0]))
    # Quarter turn about x maps y onto z
    assert np.array_equal(rot_x(1) @ np.array([0, 1, 0]), np.array([0, 0, 1]))
    # Quarter turn about y maps z onto x
    assert np.array_equal(rot_y(1) @ np.array([0, 0, 1]), np.array([1, 0, 0]))
    # Four quarter turns are the identity
    for r in (rot_x, rot_y, rot_z):
        assert np.array_equal(np.linalg.matrix_power(r(1), 4), np.eye(3, dtype=np.int64))
        assert np.array_equal(r(4), r(0))


def test_rotate_then_inverse_restores_point(rotation_group):
    points = [Point(404, -588, -901), Point(-1, 2, -3), Point(0, 0, 7)]
    for m in rotation_group:
        for p in points:
            assert rotate(rotation_group.inverse(m), rotate(m, p)) == p


def test_every_orientation_of_a_point_is_reached(rotation_group):
    # (1, 2, 3) has distinct magnitudes, so all 24 images differ
    images = {rotate(m, Point(1, 2, 3)) for m in rotation_group}
    assert len(images) == 24


def test_all_rotations_in_generation_order(rotation_group):
    members = rotation_group.all_rotations()
    assert len(members) == 24
    assert np.array_equal(members[0], np.eye(3, dtype=np.int64))
    for m, expected in zip(members, generate_unique_rotations()):
        assert np.array_equal(m, expected)
    # A fresh list each call
    members.pop()
    assert len(rotation_group.all_rotations()) == 24


def test_index_of(rotation_group):
    for i, m in enumerate(rotation_group):
        assert rotation_group.index_of(m) == i
    with pytest.raises(KeyError):
        rotation_group.index_of(np.diag([-1, 1, 1]))


class TestRotationGroupValidation:
    def test_wrong_cardinality(self):
        group = RotationGroup(generate_unique_rotations()[:23])
        with pytest.raises(RotationGroupError, match="24"):
            group.validate()

    def test_improper_rotation(self):
        members = generate_unique_rotations()
        members[5] = np.diag([-1, 1, 1])  # reflection, det = -1
        with pytest.raises(RotationGroupError):
            RotationGroup(members).validate()

    def test_duplicate_member(self):
        members = generate_unique_rotations()
        members[3] = members[2]
        with pytest.raises(RotationGroupError, match="duplicate"):
            RotationGroup(members).validate()

    def test_non_orthogonal(self):
        members = generate_unique_rotations()
        members[7] = np.array([[1, 1, 0], [0, 1, 0], [0, 0, 1]])
        with pytest.raises(RotationGroupError, match="orthogonal"):
            RotationGroup(members).validate()
