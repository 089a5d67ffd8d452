"""
Scanner registration workflow

Loads a scan report, registers all scanners into the frame of the first one,
and reports the number of unique beacons and the largest Manhattan distance
between two scanners.
"""

import sys
import argparse
from pathlib import Path

from pydantic import ValidationError

# Add the src to the path to import modules
sys.path.append(str(Path(__file__).parent.parent / "src"))

from scanner_registration.alignment import AlignmentEngine
from scanner_registration.exceptions import RegistrationError, ScanReportError
from scanner_registration.geometry import RotationGroup
from scanner_registration.preprocessing import ScanReportLoader
from scanner_registration.utils.config import load_config, AppConfig
from scanner_registration.utils.export import save_registration, save_beacons
from scanner_registration.utils.logging import setup_logger, configure_package_logging, parse_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scanner Registration Workflow")
    parser.add_argument(
        "input",
        nargs="?",
        default=None,
        help="Scan report to register (defaults to paths.input_file from config)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file (defaults to config/default.yaml)",
    )
    parser.add_argument(
        "--min-overlap",
        type=int,
        default=None,
        help="Override registration.min_overlap (coincident beacons required for a match).",
    )
    parser.add_argument(
        "--export",
        type=str,
        default=None,
        help="Directory to write registration.json and beacons.txt (overrides export.output_dir).",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Search candidates in worker processes (overrides parallel.enabled).",
    )
    parser.add_argument(
        "--visualize",
        action="store_true",
        help="Open a 3D view of the registered scene in the browser.",
    )
    return parser


def main(argv=None) -> int:
    """
    Main function to run the registration workflow.

    Returns:
        Process exit code (0 on success)
    """
    args = build_parser().parse_args(argv)

    cfg: AppConfig = load_config(args.config)
    if args.input:
        cfg.paths.input_file = args.input
    if args.min_overlap is not None:
        cfg.registration.min_overlap = args.min_overlap
    if args.export:
        cfg.export.output_dir = args.export
    if args.parallel:
        cfg.parallel.enabled = True
    if args.visualize:
        cfg.visualization.enabled = True

    # Setup logging from config
    log_level = parse_level(cfg.logging.level)
    logger = setup_logger(__name__, level=log_level, log_file=cfg.logging.file)
    configure_package_logging(log_level, cfg.logging.file)

    logger.info("Scanner Registration Workflow")
    logger.info("=============================")

    # Overrides bypass field validation on assignment
    try:
        cfg = AppConfig.model_validate(cfg.model_dump())
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    # ============================================================
    # Step 1: Load scan report
    # ============================================================
    logger.info("=== STEP 1: Load scan report ===")
    loader = ScanReportLoader(strict_ids=cfg.registration.strict_ids)
    try:
        scanners = loader.load(cfg.paths.input_file)
    except (FileNotFoundError, ScanReportError) as e:
        logger.error(f"Could not load scan report: {e}")
        return 2

    # ============================================================
    # Step 2: Register scanners
    # ============================================================
    logger.info("=== STEP 2: Registration ===")
    rotations = RotationGroup.generate()
    engine = AlignmentEngine.from_config(cfg, rotations=rotations)
    try:
        result = engine.align(scanners)
    except RegistrationError as e:
        logger.error(f"Registration failed: {e}")
        return 1

    # ============================================================
    # Step 3: Report
    # ============================================================
    logger.info("=== STEP 3: Results ===")
    for scanner_id, position in result.positions().items():
        logger.info(f"Scanner {scanner_id}: position {position}")
    beacon_count = result.unique_beacon_count()
    max_distance = result.max_scanner_distance()
    logger.info(f"Unique beacons: {beacon_count}")
    logger.info(f"Max scanner Manhattan distance: {max_distance}")
    print(beacon_count)
    print(max_distance)

    if cfg.export.output_dir:
        out_dir = Path(cfg.export.output_dir)
        save_registration(result, out_dir / "registration.json")
        save_beacons(result.unique_beacons(), out_dir / "beacons.txt")

    if cfg.visualization.enabled:
        from scanner_registration.visualization import RegistrationVisualizer
        RegistrationVisualizer(
            beacon_marker_size=cfg.visualization.beacon_marker_size,
            scanner_marker_size=cfg.visualization.scanner_marker_size,
        ).visualize(result)

    return 0


if __name__ == "__main__":
    sys.exit(main())
