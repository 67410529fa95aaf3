# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Scenario result logging in JSONL format.

- JSONL format (one JSON object per line)
- Immediate flush after each write
- Pass/fail statistics for the run summary

Log Location: ~/.regcheck/results/<DATE>-<RUN-ID>.jsonl
"""

import json
import logging
import uuid
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from regcheck.log_config import build_log_filename, get_results_dir
from regcheck.models import ScenarioResult

logger = logging.getLogger(__name__)


@dataclass
class RunStatistics:
    """Aggregated outcome of the scenarios logged in one run.

    Attributes:
        total: Number of results logged.
        passed: Number of passing results.
        failed: Number of failing results.
        failures_by_type: Count of failures by exception class name.
    """

    total: int = 0
    passed: int = 0
    failed: int = 0
    failures_by_type: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary suitable for JSON serialization."""
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "failures_by_type": self.failures_by_type,
        }


class ResultLogger:
    """Logger for writing scenario results to a JSONL file.

    Usage:
        with ResultLogger(data_root=path) as result_logger:
            result_logger.log_result(result)
            stats = result_logger.get_statistics()
    """

    def __init__(self, data_root: Optional[Path] = None, run_id: Optional[str] = None) -> None:
        """Initialize the result logger.

        Args:
            data_root: Root directory for logs. Results go to {data_root}/results/.
                      If None, uses ~/.regcheck/results/.
            run_id: Run ID for the log filename. Generated when None.

        Raises:
            ValueError: If run_id contains path separators.
        """
        self._log_dir = get_results_dir(data_root)
        self._run_id = run_id or str(uuid.uuid4())
        self._log_file = build_log_filename(self._run_id)

        self._total = 0
        self._passed = 0
        self._failures_by_type: Counter[str] = Counter()

        # File handle (lazy initialization)
        self._file_handle: Optional[TextIO] = None

    @property
    def run_id(self) -> str:
        return self._run_id

    def _open_file(self) -> TextIO:
        if self._file_handle is None:
            self._log_dir.mkdir(parents=True, exist_ok=True)
            log_path = self.get_log_path()
            self._file_handle = open(log_path, "a", encoding="utf-8")  # noqa: SIM115
            logger.debug(f"Opened result log file: {log_path}")
        return self._file_handle

    def log_result(self, result: ScenarioResult) -> None:
        """Log a single result, flushing immediately."""
        file_handle = self._open_file()

        record = result.to_dict()
        record["run_id"] = self._run_id
        file_handle.write(json.dumps(record, separators=(",", ":")) + "\n")
        file_handle.flush()

        self._total += 1
        if result.passed:
            self._passed += 1
        else:
            self._failures_by_type[result.error_type or "unknown"] += 1

    def get_statistics(self) -> RunStatistics:
        """Get pass/fail statistics for the results logged so far."""
        return RunStatistics(
            total=self._total,
            passed=self._passed,
            failed=self._total - self._passed,
            failures_by_type=dict(self._failures_by_type),
        )

    def get_log_path(self) -> Path:
        """Get the path to the log file."""
        return self._log_dir / self._log_file

    def close(self) -> None:
        """Close the log file handle."""
        if self._file_handle is not None:
            self._file_handle.close()
            self._file_handle = None
            logger.debug(f"Closed result log file: {self.get_log_path()}")

    def __enter__(self) -> "ResultLogger":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit - ensures file is closed."""
        self.close()


def read_results_from_log(log_path: Path, limit: Optional[int] = None) -> List[ScenarioResult]:
    """Read scenario results back from a JSONL log file.

    Raises:
        FileNotFoundError: If log file doesn't exist.
        json.JSONDecodeError: If log file contains invalid JSON.
    """
    results: List[ScenarioResult] = []

    with open(log_path, encoding="utf-8") as f:
        for line in f:
            if limit is not None and len(results) >= limit:
                break

            line = line.strip()
            if not line:
                continue

            results.append(ScenarioResult.from_dict(json.loads(line)))

    return results
