"""
Exceptions raised by scanner registration.
"""

from __future__ import annotations

from typing import Iterable, List

__all__ = [
    "RegistrationError",
    "EmptyInputError",
    "AlignmentImpossibleError",
    "RotationGroupError",
    "ScanReportError",
]


class RegistrationError(Exception):
    """Base class for registration failures."""


class EmptyInputError(RegistrationError, ValueError):
    """No scanners were provided, so no anchor can be chosen."""


class AlignmentImpossibleError(RegistrationError):
    """
    A full sweep over the pending scanners produced no new alignment.

    Attributes:
        unaligned_ids: ids of the scanners that could not be connected to the
            aligned set, in pending order
    """

    def __init__(self, unaligned_ids: Iterable[int], min_overlap: int | None = None):
        self.unaligned_ids: List[int] = list(unaligned_ids)
        self.min_overlap = min_overlap
        msg = f"Could not align scanners {self.unaligned_ids} to any aligned scanner"
        if min_overlap is not None:
            msg += f" (min_overlap={min_overlap})"
        super().__init__(msg)


class RotationGroupError(RegistrationError):
    """The generated rotation set violates the cube rotation group invariants."""


class ScanReportError(ValueError):
    """A scan report could not be parsed into scanners."""
