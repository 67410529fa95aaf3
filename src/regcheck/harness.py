# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Reflective test driver for regression scenarios.

The driver resolves a callable by name on a dotted target, invokes it with
a single 64-bit integer and compares the 32-bit integer it returns against
an expected constant:

    run_test_case("invalidateLow", 42)   # -> 42
    assert_equals(42, 42)                # passes silently

Targets are written "package.module" or "package.module:Class" (nested
attributes are separated by dots after the colon). The driver keeps no
state between calls; module caching is left to importlib.

Error kinds (all subclasses of HarnessError):
- CaseLookupError (LookupError): target or callable cannot be found/invoked
- WrongResultError (AssertionError): expected and actual differ
- ArgumentTypeError (TypeError) / ArgumentOverflowError (OverflowError):
  the argument is not a 64-bit integer
- ResultTypeError (TypeError): the return value is not a 32-bit integer

Exceptions raised by the callable itself are never HarnessErrors and always
propagate.
"""

import importlib
import inspect
import logging
import operator
import time
from typing import TYPE_CHECKING, Any, Callable, Iterable, List, Optional

from regcheck.logging_setup import scenario_log_fields
from regcheck.models import DEFAULT_TARGET, Scenario, ScenarioResult

if TYPE_CHECKING:
    from regcheck.result_logger import ResultLogger

logger = logging.getLogger(__name__)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


class HarnessError(Exception):
    """Base class for failures detected by the harness rather than by the callable."""

    pass


class CaseLookupError(HarnessError, LookupError):
    """Raised when the callable under test cannot be found or invoked."""

    pass


class WrongResultError(HarnessError, AssertionError):
    """Raised when a callable returns something other than the expected value."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Wrong result: {expected} != {actual}")
        self.expected = expected
        self.actual = actual


class ArgumentTypeError(HarnessError, TypeError):
    """Raised when the scenario argument is not an int."""

    pass


class ArgumentOverflowError(HarnessError, OverflowError):
    """Raised when the scenario argument does not fit in 64 bits."""

    pass


class ResultTypeError(HarnessError, TypeError):
    """Raised when a callable's return value is not a 32-bit int.

    Attributes:
        value: The value the callable actually returned.
    """

    def __init__(self, message: str, value: Any) -> None:
        super().__init__(message)
        self.value = value


def load_target(target: str) -> Any:
    """Import the module named by a dotted target and walk to its attribute.

    Args:
        target: "package.module" or "package.module:Class.Inner".

    Returns:
        The module, or the attribute named after the colon.

    Raises:
        CaseLookupError: If the module cannot be imported or an attribute is missing.
    """
    module_name, _, attr_path = target.partition(":")
    if not module_name:
        raise CaseLookupError(f"Invalid target '{target}': missing module name")

    try:
        owner: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise CaseLookupError(f"Cannot load target module '{module_name}': {e}") from e

    if attr_path:
        for part in attr_path.split("."):
            try:
                owner = getattr(owner, part)
            except AttributeError as e:
                raise CaseLookupError(f"Target '{target}' has no attribute '{part}'") from e

    return owner


def resolve_case(target: str, name: str) -> Callable[[int], Any]:
    """Look up the public callable `name` on `target`.

    The callable must accept exactly one positional argument.

    Raises:
        CaseLookupError: If the callable is missing, private, not callable,
            or has an incompatible signature.
    """
    if not name or name.startswith("_"):
        raise CaseLookupError(f"Case '{name}' is not accessible on '{target}'")

    owner = load_target(target)
    member = getattr(owner, name, None)
    if member is None or not callable(member):
        raise CaseLookupError(f"No callable '{name}' on '{target}'")

    try:
        inspect.signature(member).bind(0)
    except TypeError as e:
        raise CaseLookupError(
            f"Case '{name}' on '{target}' does not take a single integer argument"
        ) from e
    except ValueError:
        # No introspectable signature (some builtins); let the call decide
        pass

    return member


def _check_arg(arg: Any) -> int:
    """Validate that arg fits a signed 64-bit integer."""
    if isinstance(arg, bool) or not isinstance(arg, int):
        raise ArgumentTypeError(f"Argument must be an int, got {type(arg).__name__}")
    if not INT64_MIN <= arg <= INT64_MAX:
        raise ArgumentOverflowError(f"Argument {arg} does not fit in 64 bits")
    return arg


def _to_int32(value: Any, name: str) -> int:
    """Convert a callable's return value to a signed 32-bit integer."""
    if isinstance(value, bool):
        raise ResultTypeError(f"Case '{name}' returned bool, expected int", value)
    try:
        result = operator.index(value)
    except TypeError as e:
        raise ResultTypeError(
            f"Case '{name}' returned {type(value).__name__}, expected int", value
        ) from e
    if not INT32_MIN <= result <= INT32_MAX:
        raise ResultTypeError(
            f"Case '{name}' returned {result}, which does not fit in 32 bits", value
        )
    return result


def run_test_case(name: str, arg: int, target: str = DEFAULT_TARGET) -> int:
    """Invoke the callable `name` on `target` with `arg` and return its result.

    Exceptions raised inside the callable propagate unchanged.
    """
    checked = _check_arg(arg)
    case = resolve_case(target, name)
    logger.debug(f"Invoking {target}.{name}({checked})")
    return _to_int32(case(checked), name)


def assert_equals(expected: int, actual: int) -> None:
    """Raise WrongResultError unless expected == actual."""
    if expected != actual:
        raise WrongResultError(expected, actual)


def _returned_value(error: HarnessError) -> Optional[int]:
    """The int the callable returned, if the failure happened after the call."""
    if isinstance(error, WrongResultError):
        return error.actual
    if isinstance(error, ResultTypeError):
        value = error.value
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def run_scenario(scenario: Scenario) -> ScenarioResult:
    """Run one scenario, raising on any failure.

    Pass and fail are logged with the scenario as structured fields.

    Returns:
        A passing ScenarioResult.

    Raises:
        HarnessError: The callable could not be run or returned a wrong value.
        Exception: Anything the callable itself raises, unchanged.
    """
    start = time.perf_counter()
    try:
        actual = run_test_case(scenario.name, scenario.arg, target=scenario.target)
        assert_equals(scenario.expected, actual)
    except HarnessError as e:
        logger.error(
            f"Scenario '{scenario.name}' failed: {e}",
            extra=scenario_log_fields(scenario, actual=_returned_value(e), passed=False),
        )
        raise

    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"Scenario '{scenario.name}' passed ({scenario.arg} -> {actual})",
        extra=scenario_log_fields(scenario, actual=actual, passed=True),
    )
    return ScenarioResult(
        scenario=scenario, passed=True, actual=actual, duration_ms=duration_ms
    )


def _failed_result(scenario: Scenario, error: HarnessError, duration_ms: float) -> ScenarioResult:
    return ScenarioResult(
        scenario=scenario,
        passed=False,
        actual=_returned_value(error),
        error=str(error),
        error_type=type(error).__name__,
        duration_ms=duration_ms,
    )


def run_scenarios(
    scenarios: Iterable[Scenario],
    fail_fast: bool = True,
    result_logger: Optional["ResultLogger"] = None,
) -> List[ScenarioResult]:
    """Run scenarios in order, recording harness failures as failing results.

    Exceptions raised by a callable are not harness failures: they propagate
    and end the run, whatever fail_fast says.

    Args:
        scenarios: Scenarios to run.
        fail_fast: Stop after the first failing scenario.
        result_logger: Optional JSONL log receiving every result.

    Returns:
        One result per scenario that ran.
    """
    results: List[ScenarioResult] = []
    for scenario in scenarios:
        start = time.perf_counter()
        try:
            result = run_scenario(scenario)
        except HarnessError as e:
            result = _failed_result(scenario, e, (time.perf_counter() - start) * 1000)

        if result_logger is not None:
            result_logger.log_result(result)
        results.append(result)

        if fail_fast and not result.passed:
            break

    return results
