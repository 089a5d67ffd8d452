"""
Scan Report Loader

This module parses scan reports into scanners. A report is a sequence of
blocks separated by blank lines:

    --- scanner 0 ---
    404,-588,-901
    528,-643,409
    ...

    --- scanner 1 ---
    686,422,578
    ...

Each block holds one header line and one `x,y,z` integer line per beacon in
the scanner's own frame.
"""

import re
from pathlib import Path
from typing import List, Tuple

import numpy as np

from ..exceptions import ScanReportError
from ..geometry.scanner import UnalignedScanner
from ..utils.logging import setup_logger

logger = setup_logger(__name__)

_HEADER_RE = re.compile(r"^---\s*scanner\s+(\d+)\s*---$")
_BEACON_RE = re.compile(r"^(-?\d+)\s*,\s*(-?\d+)\s*,\s*(-?\d+)$")


class ScanReportLoader:
    """
    Loads scanner beacon reports from text.

    Features:
    - Header and coordinate validation with line numbers in errors
    - Tolerates trailing whitespace, CRLF line endings and extra blank lines
    - Checks that scanner ids run consecutively from 0
    """

    def __init__(self, *, strict_ids: bool = True):
        """
        Args:
            strict_ids: If True, ids that are not 0..n-1 in order raise
                ScanReportError; otherwise they only produce a warning.
        """
        self.strict_ids = strict_ids

    def load(self, file_path: str) -> List[UnalignedScanner]:
        """
        Load a scan report file.

        Args:
            file_path: Path to the report

        Returns:
            Scanners in report order

        Raises:
            FileNotFoundError: If the file does not exist
            ScanReportError: If the content is malformed
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        logger.info(f"Loading scan report from {file_path}")
        scanners = self.parse(file_path.read_text(encoding="utf-8"))
        total = sum(s.num_beacons for s in scanners)
        logger.info(f"Found {len(scanners)} scanners with {total} beacon observations")
        return scanners

    def parse(self, content: str) -> List[UnalignedScanner]:
        """Parse report text into scanners."""
        blocks = self._split_blocks(content)
        if not blocks:
            raise ScanReportError("Scan report contains no scanners")

        scanners = [self._parse_block(block) for block in blocks]
        self._check_ids(scanners)
        return scanners

    # ------------------------ Helpers ------------------------
    @staticmethod
    def _split_blocks(content: str) -> List[List[Tuple[int, str]]]:
        blocks: List[List[Tuple[int, str]]] = []
        current: List[Tuple[int, str]] = []
        for lineno, raw in enumerate(content.splitlines(), start=1):
            line = raw.strip()
            if not line:
                if current:
                    blocks.append(current)
                    current = []
                continue
            current.append((lineno, line))
        if current:
            blocks.append(current)
        return blocks

    @staticmethod
    def _parse_block(block: List[Tuple[int, str]]) -> UnalignedScanner:
        lineno, header = block[0]
        m = _HEADER_RE.match(header)
        if m is None:
            raise ScanReportError(f"Line {lineno}: expected '--- scanner <id> ---', got {header!r}")
        scanner_id = int(m.group(1))

        beacons = []
        for lineno, line in block[1:]:
            b = _BEACON_RE.match(line)
            if b is None:
                raise ScanReportError(f"Line {lineno}: expected 'x,y,z' integers, got {line!r}")
            beacons.append((int(b.group(1)), int(b.group(2)), int(b.group(3))))

        if not beacons:
            raise ScanReportError(f"Scanner {scanner_id} (line {block[0][0]}) has no beacons")

        return UnalignedScanner(id=scanner_id, beacons=np.array(beacons, dtype=np.int64))

    def _check_ids(self, scanners: List[UnalignedScanner]) -> None:
        ids = [s.id for s in scanners]
        if ids == list(range(len(ids))):
            return
        msg = f"Scanner ids are not consecutive from 0: {ids}"
        if self.strict_ids or len(set(ids)) != len(ids):
            raise ScanReportError(msg)
        logger.warning(msg)
