"""
Geometry Module

Integer points, the 24 axis-aligned rotations and the scanner records that
carry beacon observations through registration.
"""

from .point import Point, points_to_array, array_to_points
from .rotations import RotationGroup, generate_unique_rotations, rot_x, rot_y, rot_z
from .transform import rotate, rotate_all, translate, manhattan
from .scanner import UnalignedScanner, AlignedScanner, Scanner

__all__ = [
    "Point",
    "points_to_array",
    "array_to_points",
    "RotationGroup",
    "generate_unique_rotations",
    "rot_x",
    "rot_y",
    "rot_z",
    "rotate",
    "rotate_all",
    "translate",
    "manhattan",
    "UnalignedScanner",
    "AlignedScanner",
    "Scanner",
]
