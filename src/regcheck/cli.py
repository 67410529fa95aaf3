# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Command-line entry point for the regression harness.

Usage:
    python -m regcheck
    python -m regcheck --case invalidateLow 42 42 --target regcheck.cases.wide_store:TestCase
    python -m regcheck --config .regcheck.yml --keep-going

Exit status is 0 when every scenario passes and 1 otherwise.
"""

import argparse
import logging
import sys
import uuid
from pathlib import Path
from typing import List, Optional, Sequence

from regcheck.config import Config
from regcheck.harness import run_scenarios
from regcheck.log_config import get_default_data_root
from regcheck.logging_setup import setup_logging, teardown_logging
from regcheck.models import Scenario, ScenarioResult
from regcheck.registry import default_registry
from regcheck.result_logger import ResultLogger

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="regcheck",
        description="Run reflective regression scenarios and compare integer results",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file. Default: ./.regcheck.yml",
    )
    parser.add_argument(
        "--target",
        type=str,
        default=None,
        help="Dotted target holding the callables, e.g. 'package.module:Class'",
    )
    parser.add_argument(
        "--case",
        nargs=3,
        action="append",
        metavar=("NAME", "ARG", "EXPECTED"),
        default=None,
        help="Run an ad-hoc scenario instead of the registered ones (repeatable)",
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Run every scenario even after a failure",
    )
    parser.add_argument(
        "--data-root",
        type=Path,
        default=None,
        help=f"Root directory for result and log files. Default: {get_default_data_root()}",
    )
    parser.add_argument(
        "--no-result-log",
        action="store_true",
        help="Do not write the JSONL result log",
    )
    parser.add_argument(
        "--structured-logs",
        action="store_true",
        help="Write JSON logs to <data-root>/logs/ in addition to stderr",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    if args.case:
        parsed_cases = []
        for name, arg, expected in args.case:
            try:
                parsed_cases.append((name, int(arg), int(expected)))
            except ValueError:
                parser.error(f"--case {name}: ARG and EXPECTED must be integers")
        args.case = parsed_cases

    return args


def build_scenarios(args: argparse.Namespace, config: Config) -> List[Scenario]:
    """Collect the scenarios for this run.

    Ad-hoc --case scenarios replace the registered ones. Otherwise the
    default registry is extended with the scenarios from the config file.
    """
    target = args.target or config.target

    if args.case:
        return [
            Scenario(name=name, arg=arg, expected=expected, target=target)
            for name, arg, expected in args.case
        ]

    registry = default_registry(target)
    for scenario in config.scenarios:
        try:
            registry.register(scenario)
        except ValueError as e:
            logger.warning(f"Skipping configured scenario: {e}")

    return registry.get_scenarios()


def _report(results: List[ScenarioResult]) -> None:
    for result in results:
        if not result.passed:
            print(f"FAILED {result.scenario.name}: {result.error}", file=sys.stderr)

    passed = sum(1 for r in results if r.passed)
    print(f"{passed}/{len(results)} scenarios passed")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 when all scenarios pass, 1 otherwise).
    """
    args = parse_args(argv)
    config = Config(config_path=args.config)
    run_id = str(uuid.uuid4())

    log_level = logging.DEBUG if args.verbose else config.log_level
    if args.structured_logs:
        setup_logging(run_id, data_root=args.data_root, log_level=log_level)
    else:
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    try:
        scenarios = build_scenarios(args, config)
        fail_fast = config.fail_fast and not args.keep_going

        result_logger: Optional[ResultLogger] = None
        if config.enable_result_logging and not args.no_result_log:
            result_logger = ResultLogger(data_root=args.data_root, run_id=run_id)

        try:
            results = run_scenarios(scenarios, fail_fast=fail_fast, result_logger=result_logger)
        finally:
            if result_logger is not None:
                result_logger.close()
                logger.info(f"Results written to {result_logger.get_log_path()}")
    finally:
        if args.structured_logs:
            teardown_logging()

    _report(results)
    return 0 if all(r.passed for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
