"""
Scanner Registration Package

A Python package for registering 3D beacon scans taken in unknown, axis-aligned
local frames into one global frame. Scanners are matched pairwise by voting on
beacon difference vectors under each of the 24 cube rotations, and registered
incrementally relative to the first scanner. The registered beacons are then
deduplicated and scanner distances reported.
"""

__version__ = "0.1.0"

from .exceptions import *
from .geometry import *
from .alignment import *
from .preprocessing import *
from .utils import *

__all__ = [
    "exceptions",
    "geometry",
    "alignment",
    "preprocessing",
    "utils",
]
