# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Structured logging for harness runs.

When enabled, every record of a run goes to ``{data_root}/logs/<DATE>-<RUN-ID>.log``
as one JSON object per line. The run ID matches the one in the result log,
so a failing result can be traced to the log lines around it.

Scenario records carry their context as extra fields:

    logger.info("passed", extra=scenario_log_fields(scenario, actual=42, passed=True))

produces ``{"message": "passed", "scenario": "invalidateLow", "arg": 42, ...}``.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from regcheck.log_config import build_log_filename, get_logs_dir

if TYPE_CHECKING:
    from regcheck.models import Scenario

# Marks handlers installed by setup_logging so teardown_logging leaves others alone
_HANDLER_MARK = "_regcheck_handler"


class StructuredFormatter(logging.Formatter):
    """JSON formatter stamping each record with the run ID."""

    def __init__(self, run_id: Optional[str] = None) -> None:
        super().__init__()
        self.run_id = run_id

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if self.run_id is not None:
            log_data["run_id"] = self.run_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            log_data.update(extra_fields)

        return json.dumps(log_data)


def scenario_log_fields(
    scenario: "Scenario", actual: Optional[int] = None, passed: Optional[bool] = None
) -> Dict[str, Dict[str, Any]]:
    """Build the ``extra`` mapping that attaches a scenario to a log record."""
    fields: Dict[str, Any] = {
        "scenario": scenario.name,
        "target": scenario.target,
        "arg": scenario.arg,
        "expected": scenario.expected,
    }
    if actual is not None:
        fields["actual"] = actual
    if passed is not None:
        fields["passed"] = passed
    return {"extra_fields": fields}


def setup_logging(
    run_id: str,
    data_root: Optional[Path] = None,
    log_level: int = logging.INFO,
    console_output: bool = True,
) -> Path:
    """Route the root logger to a JSON log file for this run.

    Existing root handlers are replaced. Call teardown_logging() when the
    run is over to close the file.

    Args:
        run_id: Run ID used in the log filename and in every record.
        data_root: Root directory; the log goes to {data_root}/logs/.
        log_level: Logging level (default: INFO)
        console_output: Whether to also output plain text to stderr

    Returns:
        Path to the log file.

    Raises:
        ValueError: If run_id is not usable in a filename.
    """
    log_dir = get_logs_dir(data_root)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / build_log_filename(run_id, extension="log")

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    handlers: List[logging.Handler] = []

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(StructuredFormatter(run_id))
    handlers.append(file_handler)

    # stderr, so stdout stays free for the summary line
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        handlers.append(console_handler)

    for handler in handlers:
        handler.setLevel(log_level)
        setattr(handler, _HANDLER_MARK, True)
        root_logger.addHandler(handler)

    logging.getLogger(__name__).info(f"Run {run_id} logging to {log_file}")
    return log_file


def teardown_logging() -> None:
    """Detach and close the handlers installed by setup_logging."""
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root_logger.removeHandler(handler)
            handler.close()
