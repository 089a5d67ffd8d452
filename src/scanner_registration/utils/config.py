"""
Configuration management for scanner-registration.

Provides a typed pydantic model and YAML loader with sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Literal, Any, Dict

from pydantic import BaseModel, Field, ValidationError
import yaml


# -----------------------
# Typed config structures
# -----------------------


class PathsConfig(BaseModel):
    input_file: str = Field(default="data/input.txt", description="Scan report to register")


class RegistrationConfig(BaseModel):
    min_overlap: int = Field(
        default=12,
        ge=1,
        description="Number of coincident beacons required to declare two scanners overlapping",
    )
    skip_failed_pairs: bool = Field(
        default=True,
        description="Do not re-test (candidate, reference) pairs that failed under every rotation",
    )
    strict_ids: bool = Field(
        default=True,
        description="Reject reports whose scanner ids are not consecutive from 0",
    )


class ParallelConfig(BaseModel):
    enabled: bool = Field(default=False, description="Search each sweep's candidates in worker processes")
    n_workers: Optional[int] = Field(default=None, description="Number of worker processes (None = auto-detect: cpu_count - 1)")


class VisualizationConfig(BaseModel):
    enabled: bool = Field(default=False)
    beacon_marker_size: int = Field(default=3)
    scanner_marker_size: int = Field(default=8)


class ExportConfig(BaseModel):
    output_dir: Optional[str] = Field(default=None, description="Directory for registration results (None = no export)")


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    file: Optional[str] = Field(default=None)


class AppConfig(BaseModel):
    paths: PathsConfig = Field(default_factory=PathsConfig)
    registration: RegistrationConfig = Field(default_factory=RegistrationConfig)
    parallel: ParallelConfig = Field(default_factory=ParallelConfig)
    visualization: VisualizationConfig = Field(default_factory=VisualizationConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# -----------------------
# Loader
# -----------------------


def _project_root() -> Path:
    """
    Resolve the repository root directory.

    File is at: repo_root/src/scanner_registration/utils/config.py
    parents sequence:
      0 -> .../src/scanner_registration/utils
      1 -> .../src/scanner_registration
      2 -> .../src
      3 -> repo_root
    """
    return Path(__file__).resolve().parents[3]


def resolve_config_path(path: str | Path) -> Path:
    """Relative paths that do not exist from the CWD are tried against the repo root."""
    p = Path(path)
    if p.is_absolute() or p.exists():
        return p
    candidate = _project_root() / p
    return candidate if candidate.exists() else p


def load_config(path: Optional[str | Path] = None, *, allow_missing: bool = True) -> AppConfig:
    """
    Load configuration from YAML into a typed AppConfig.

    Search order when path is None:
    1) repo_root/config/default.yaml
    2) if missing and allow_missing=True: return default AppConfig()

    Args:
        path: Explicit YAML file path.
        allow_missing: If True, returns defaults when the default file is
            missing. An explicit path that does not exist always raises.

    Returns:
        AppConfig instance
    """
    cfg_path: Path
    if path is None:
        cfg_path = _project_root() / "config" / "default.yaml"
    else:
        cfg_path = resolve_config_path(path)

    if not cfg_path.exists():
        if allow_missing and path is None:
            return AppConfig()
        raise FileNotFoundError(f"Config file not found: {cfg_path}")

    with cfg_path.open("r", encoding="utf-8") as f:
        raw: Dict[str, Any] = yaml.safe_load(f) or {}

    try:
        return AppConfig.model_validate(raw)
    except ValidationError as e:
        # Re-raise with context to help users fix the YAML
        raise ValueError(f"Invalid configuration in {cfg_path}: {e}") from e
