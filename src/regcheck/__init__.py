# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Reflective regression-scenario harness."""

from .config import Config, ConfigurationError
from .harness import (
    ArgumentOverflowError,
    ArgumentTypeError,
    CaseLookupError,
    HarnessError,
    ResultTypeError,
    WrongResultError,
    assert_equals,
    load_target,
    resolve_case,
    run_scenario,
    run_scenarios,
    run_test_case,
)
from .models import DEFAULT_TARGET, Scenario, ScenarioResult
from .registry import ScenarioRegistry, default_registry
from .result_logger import ResultLogger, RunStatistics, read_results_from_log

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ConfigurationError",
    "HarnessError",
    "ArgumentOverflowError",
    "ArgumentTypeError",
    "CaseLookupError",
    "ResultTypeError",
    "WrongResultError",
    "assert_equals",
    "load_target",
    "resolve_case",
    "run_scenario",
    "run_scenarios",
    "run_test_case",
    "DEFAULT_TARGET",
    "Scenario",
    "ScenarioResult",
    "ScenarioRegistry",
    "default_registry",
    "ResultLogger",
    "RunStatistics",
    "read_results_from_log",
]
