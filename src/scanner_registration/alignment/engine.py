"""
Alignment Engine

Registers every scanner of a report into the frame of the first scanner (the
anchor) by sweeping a retry queue of unaligned scanners.

Each sweep visits the pending scanners in order. A candidate is tried under
every rotation of the group (outer loop) against every aligned scanner in
alignment order (inner loop); the first successful overlap fixes its rotation
and global position. A sweep that aligns nothing means the remaining scanners
are not connected to the aligned set, and registration fails.

Pairs (candidate, reference) that failed under all rotations are not searched
again in later sweeps. Because the rotation loop is outermost, skipping them
does not change which match is found first.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence, Set, Tuple

import numpy as np

from ..exceptions import AlignmentImpossibleError, EmptyInputError
from ..geometry.point import Point
from ..geometry.rotations import RotationGroup
from ..geometry.scanner import AlignedScanner, UnalignedScanner
from ..utils.logging import setup_logger
from ..utils.config import RegistrationConfig
from .aggregator import max_scanner_distance, unique_beacon_count, unique_beacons
from .overlap import OverlapMatcher

if TYPE_CHECKING:
    from ..acceleration.parallel_executor import SweepParallelExecutor
    from ..utils.config import AppConfig

logger = setup_logger(__name__)


@dataclass
class CandidateSearch:
    """Outcome of searching one pending scanner against a set of references."""

    candidate_id: int
    aligned: Optional[AlignedScanner] = None
    reference_id: Optional[int] = None
    rotation_index: Optional[int] = None
    tested_reference_ids: Tuple[int, ...] = ()

    @property
    def found(self) -> bool:
        return self.aligned is not None


def search_candidate(
    candidate: UnalignedScanner,
    *,
    references: Sequence[AlignedScanner],
    rotations: Sequence[np.ndarray],
    matcher: OverlapMatcher,
) -> CandidateSearch:
    """
    Find the first (rotation, reference) pair under which `candidate` overlaps.

    Module level so it can be shipped to worker processes.

    Args:
        candidate: Scanner to align
        references: Aligned scanners to test against, in alignment order
        rotations: Rotation matrices in search order
        matcher: Overlap test

    Returns:
        CandidateSearch; when nothing matched, `tested_reference_ids` lists the
        references that failed under every rotation
    """
    if not references:
        return CandidateSearch(candidate_id=candidate.id)

    for rot_idx, rotation in enumerate(rotations):
        rotated = candidate.rotated(rotation)
        for reference in references:
            translation = matcher.match(reference.beacons, rotated)
            if translation is None:
                continue
            aligned = AlignedScanner(
                id=candidate.id,
                beacons=rotated,
                position=reference.position + translation,
                rotation=rotation,
            )
            return CandidateSearch(
                candidate_id=candidate.id,
                aligned=aligned,
                reference_id=reference.id,
                rotation_index=rot_idx,
            )

    return CandidateSearch(
        candidate_id=candidate.id,
        tested_reference_ids=tuple(r.id for r in references),
    )


@dataclass
class RegistrationResult:
    """
    Aligned scanners in the order they were registered (anchor first).

    Attributes:
        scanners: Aligned scanners, anchor at index 0
        min_overlap: Overlap threshold used
        sweeps: Number of sweeps over the pending queue
        parents: Map scanner id -> id of the aligned scanner it was matched
            against (None for the anchor)
    """

    scanners: List[AlignedScanner]
    min_overlap: int
    sweeps: int = 0
    parents: Dict[int, Optional[int]] = field(default_factory=dict)

    @property
    def anchor(self) -> AlignedScanner:
        return self.scanners[0]

    def __len__(self) -> int:
        return len(self.scanners)

    def by_id(self, scanner_id: int) -> AlignedScanner:
        for s in self.scanners:
            if s.id == scanner_id:
                return s
        raise KeyError(f"No aligned scanner with id {scanner_id}")

    def positions(self) -> Dict[int, Point]:
        """Scanner id -> global position, ordered by id."""
        return {s.id: s.position for s in sorted(self.scanners, key=lambda s: s.id)}

    def unique_beacons(self) -> np.ndarray:
        return unique_beacons(self.scanners)

    def unique_beacon_count(self) -> int:
        return unique_beacon_count(self.scanners)

    def max_scanner_distance(self) -> int:
        return max_scanner_distance(self.scanners)


class AlignmentEngine:
    """
    Incremental registration of scanners into one global frame.

    The rotation group is computed once by the caller (or on construction) and
    reused for every search.
    """

    def __init__(
        self,
        matcher: Optional[OverlapMatcher] = None,
        rotations: Optional[RotationGroup] = None,
        *,
        skip_failed_pairs: bool = True,
        executor: Optional["SweepParallelExecutor"] = None,
    ):
        """
        Args:
            matcher: Overlap test (default: threshold from RegistrationConfig)
            rotations: Rotation group to search; validated on construction
            skip_failed_pairs: Do not re-test (candidate, reference) pairs that
                already failed under every rotation
            executor: Optional parallel executor; when given, each sweep's
                candidates are searched concurrently against the aligned set
                as it was at sweep start
        """
        self.matcher = matcher if matcher is not None else OverlapMatcher(RegistrationConfig().min_overlap)
        self.rotations = rotations if rotations is not None else RotationGroup.generate()
        self.rotations.validate()
        self.skip_failed_pairs = skip_failed_pairs
        self.executor = executor

    @classmethod
    def from_config(cls, cfg: "AppConfig", rotations: Optional[RotationGroup] = None) -> "AlignmentEngine":
        executor = None
        if cfg.parallel.enabled:
            from ..acceleration.parallel_executor import SweepParallelExecutor
            executor = SweepParallelExecutor(n_workers=cfg.parallel.n_workers)
        return cls(
            matcher=OverlapMatcher(min_overlap=cfg.registration.min_overlap),
            rotations=rotations,
            skip_failed_pairs=cfg.registration.skip_failed_pairs,
            executor=executor,
        )

    @property
    def min_overlap(self) -> int:
        return self.matcher.min_overlap

    def align(self, scanners: Iterable[UnalignedScanner]) -> RegistrationResult:
        """
        Register all scanners relative to the first one.

        Args:
            scanners: Parsed scanners in report order

        Returns:
            RegistrationResult with every scanner aligned

        Raises:
            EmptyInputError: If no scanners are given
            AlignmentImpossibleError: If a sweep aligns no pending scanner
            ValueError: If scanner ids are not unique
        """
        scanners = list(scanners)
        if not scanners:
            raise EmptyInputError("No scanners provided; cannot choose an anchor")
        for s in scanners:
            if not isinstance(s, UnalignedScanner):
                raise TypeError(f"Expected UnalignedScanner, got {type(s).__name__}")
        ids = [s.id for s in scanners]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Scanner ids must be unique, got {ids}")

        anchor = AlignedScanner.anchor(scanners[0])
        aligned: List[AlignedScanner] = [anchor]
        parents: Dict[int, Optional[int]] = {anchor.id: None}
        pending = deque(scanners[1:])
        failed: Dict[int, Set[int]] = {s.id: set() for s in pending}

        logger.info(
            f"Starting registration of {len(scanners)} scanners "
            f"(anchor={anchor.id}, min_overlap={self.min_overlap})"
        )

        sweep = 0
        while pending:
            sweep += 1
            if self.executor is not None:
                newly = self._parallel_sweep(pending, aligned, failed)
            else:
                newly = self._sequential_sweep(pending, aligned, failed)

            for result in newly:
                parents[result.candidate_id] = result.reference_id

            logger.info(
                f"Sweep {sweep}: aligned {len(newly)} scanner(s), "
                f"{len(aligned)}/{len(scanners)} total, {len(pending)} pending"
            )

            if not newly:
                unaligned_ids = [s.id for s in pending]
                logger.debug(f"No progress in sweep {sweep}: scanners {unaligned_ids} cannot be aligned")
                raise AlignmentImpossibleError(unaligned_ids, min_overlap=self.min_overlap)

        return RegistrationResult(
            scanners=aligned,
            min_overlap=self.min_overlap,
            sweeps=sweep,
            parents=parents,
        )

    # ------------------------ Sweeps ------------------------
    def _references_for(self, candidate_id: int, aligned: Sequence[AlignedScanner],
                        failed: Dict[int, Set[int]]) -> List[AlignedScanner]:
        if not self.skip_failed_pairs:
            return list(aligned)
        skip = failed.get(candidate_id, ())
        return [a for a in aligned if a.id not in skip]

    def _record(self, result: CandidateSearch, candidate: UnalignedScanner,
                pending: deque, aligned: List[AlignedScanner],
                failed: Dict[int, Set[int]]) -> bool:
        if result.found:
            aligned.append(result.aligned)
            failed.pop(candidate.id, None)
            logger.debug(
                f"Scanner {candidate.id} aligned against scanner {result.reference_id} "
                f"(rotation #{result.rotation_index}) at {result.aligned.position}"
            )
            return True
        failed.setdefault(candidate.id, set()).update(result.tested_reference_ids)
        pending.append(candidate)
        return False

    def _sequential_sweep(self, pending: deque, aligned: List[AlignedScanner],
                          failed: Dict[int, Set[int]]) -> List[CandidateSearch]:
        newly = []
        for _ in range(len(pending)):
            candidate = pending.popleft()
            result = search_candidate(
                candidate,
                references=self._references_for(candidate.id, aligned, failed),
                rotations=self.rotations,
                matcher=self.matcher,
            )
            if self._record(result, candidate, pending, aligned, failed):
                newly.append(result)
        return newly

    def _parallel_sweep(self, pending: deque, aligned: List[AlignedScanner],
                        failed: Dict[int, Set[int]]) -> List[CandidateSearch]:
        candidates = list(pending)
        pending.clear()
        snapshot = list(aligned)
        rotations = list(self.rotations)

        # One task per candidate; reference lists differ when pairs are skipped
        results = self.executor.map_items(
            items=[(c, self._references_for(c.id, snapshot, failed)) for c in candidates],
            worker_fn=_search_task,
            worker_kwargs={"rotations": rotations, "matcher": self.matcher},
        )

        newly = []
        for candidate, result in zip(candidates, results):
            if self._record(result, candidate, pending, aligned, failed):
                newly.append(result)
        return newly


def _search_task(task: Tuple[UnalignedScanner, List[AlignedScanner]], *,
                 rotations: Sequence[np.ndarray], matcher: OverlapMatcher) -> CandidateSearch:
    candidate, references = task
    return search_candidate(candidate, references=references, rotations=rotations, matcher=matcher)
