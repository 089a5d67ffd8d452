"""
Export utilities for registration results.

Writes the outcome of a registration run to disk:
- a JSON document with per-scanner poses and the summary numbers
- a plain-text beacon list (one `x y z` row per unique global beacon)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, TYPE_CHECKING

import numpy as np

from .logging import setup_logger

if TYPE_CHECKING:
    from ..alignment.engine import RegistrationResult

logger = setup_logger(__name__)


def registration_to_dict(result: "RegistrationResult") -> Dict[str, Any]:
    beacons = result.unique_beacons()
    return {
        "min_overlap": result.min_overlap,
        "sweeps": result.sweeps,
        "unique_beacon_count": int(len(beacons)),
        "max_scanner_distance": result.max_scanner_distance(),
        "scanners": [
            {
                "id": s.id,
                "position": list(s.position),
                "rotation": np.asarray(s.rotation).tolist(),
                "matched_against": result.parents.get(s.id),
                "num_beacons": s.num_beacons,
            }
            for s in result.scanners
        ],
        "beacons": beacons.tolist(),
    }


def save_registration(result: "RegistrationResult", output_file: str | Path) -> Path:
    """
    Save a registration result as JSON.

    Args:
        result: Output of AlignmentEngine.align
        output_file: Destination path; parent directories are created

    Returns:
        Path of the written file
    """
    path = Path(output_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(registration_to_dict(result), f, indent=2)
    logger.info(f"Saved registration of {len(result)} scanners to {path}")
    return path


def load_registration_summary(input_file: str | Path) -> Dict[str, Any]:
    """
    Load a registration JSON written by `save_registration`.

    Raises:
        ValueError: If required keys are missing
    """
    path = Path(input_file)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    missing = {"unique_beacon_count", "max_scanner_distance", "scanners"} - set(data)
    if missing:
        raise ValueError(f"Registration file {path} is missing keys: {sorted(missing)}")
    logger.info(f"Loaded registration summary from {path}")
    return data


def save_beacons(beacons: np.ndarray, output_file: str | Path) -> None:
    """Save global beacons as integer rows `x y z`."""
    arr = np.asarray(beacons, dtype=np.int64).reshape(-1, 3)
    np.savetxt(output_file, arr, fmt="%d", header="x y z (global beacon coordinates)")
    logger.info(f"Saved {len(arr)} beacons to {output_file}")


def load_beacons(input_file: str | Path) -> np.ndarray:
    arr = np.loadtxt(input_file, dtype=np.int64, ndmin=2)
    if arr.size == 0:
        return np.empty((0, 3), dtype=np.int64)
    if arr.shape[1] != 3:
        raise ValueError(f"Expected Nx3 beacon rows, got shape {arr.shape}")
    return arr
