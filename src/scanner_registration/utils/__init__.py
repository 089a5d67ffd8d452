"""
Utility Functions Module

Common utilities used across the scanner registration project:
- Logging setup
- Typed YAML configuration
- Export of registration results
"""

from .logging import setup_logger, configure_package_logging
from .config import AppConfig, load_config
from .export import (
    save_registration,
    load_registration_summary,
    save_beacons,
    load_beacons,
)

__all__ = [
    "setup_logger",
    "configure_package_logging",
    "AppConfig",
    "load_config",
    "save_registration",
    "load_registration_summary",
    "save_beacons",
    "load_beacons",
]
