"""
Scanner Alignment Module

This module registers scanners with unknown axis-aligned orientation and
offset into the frame of an anchor scanner, by voting on beacon difference
vectors, and aggregates the registered beacons.
"""

from .overlap import OverlapMatcher
from .engine import AlignmentEngine, RegistrationResult, CandidateSearch, search_candidate
from .aggregator import unique_beacons, unique_beacon_count, max_scanner_distance

__all__ = [
    "OverlapMatcher",
    "AlignmentEngine",
    "RegistrationResult",
    "CandidateSearch",
    "search_candidate",
    "unique_beacons",
    "unique_beacon_count",
    "max_scanner_distance",
]
