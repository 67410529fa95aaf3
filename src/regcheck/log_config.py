# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Shared log location configuration for regcheck.

- Configurable data root directory (default: ~/.regcheck/)
- Date-run filename pattern (YYYY-MM-DD-<RUN-ID>.jsonl)
- Subdirectory structure: results/, logs/
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Default data root directory (user home)
DEFAULT_DATA_ROOT = Path.home() / ".regcheck"

# Subdirectory names
RESULTS_SUBDIR = "results"
LOGS_SUBDIR = "logs"


def get_default_data_root() -> Path:
    """Get the default data root directory.

    Returns:
        Path to ~/.regcheck/
    """
    return DEFAULT_DATA_ROOT


def get_current_utc_date() -> str:
    """Get the current UTC date in YYYY-MM-DD format."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


def validate_filename_component(value: str, name: str = "value") -> None:
    """Validate a string for safe use in filenames.

    Raises:
        ValueError: If value is empty or contains path separators, parent
                   references, or null bytes.
    """
    if not value:
        raise ValueError(f"{name} must not be empty")
    if "\0" in value:
        raise ValueError(f"{name} contains null bytes: {value}")
    if "/" in value or "\\" in value or ":" in value:
        raise ValueError(f"{name} must not contain path separators: {value}")
    if ".." in value:
        raise ValueError(f"{name} must not contain parent references: {value}")


def build_log_filename(run_id: str, extension: str = "jsonl") -> str:
    """Build a log filename with date and run ID.

    Returns:
        Filename like "2025-12-11-abc123-def456.jsonl"

    Raises:
        ValueError: If run_id contains path separators or invalid chars.
    """
    validate_filename_component(run_id, "run_id")
    return f"{get_current_utc_date()}-{run_id}.{extension}"


def get_results_dir(data_root: Optional[Path] = None) -> Path:
    """Get the result log directory ({data_root}/results/)."""
    root = data_root or DEFAULT_DATA_ROOT
    return root / RESULTS_SUBDIR


def get_logs_dir(data_root: Optional[Path] = None) -> Path:
    """Get the Python logging output directory ({data_root}/logs/)."""
    root = data_root or DEFAULT_DATA_ROOT
    return root / LOGS_SUBDIR
