# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Tests for the reflective test driver."""

import pytest

from regcheck.harness import (
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
from regcheck.models import DEFAULT_TARGET, Scenario


class TestRunTestCase:
    """Tests for run_test_case()."""

    def test_invalidate_low_returns_argument(self):
        """Test the wide-store regression scenario returns 42 for 42."""
        assert run_test_case("invalidateLow", 42) == 42

    def test_default_target_is_wide_store(self):
        """Test the default target is the wide-store TestCase."""
        assert run_test_case("invalidateLow", 42, target=DEFAULT_TARGET) == 42

    def test_module_level_function(self, fake_target):
        """Test resolving a plain function on a module target."""
        assert run_test_case("identity", -5, target=fake_target) == -5

    def test_class_target(self, fake_target):
        """Test resolving a static method on a class target."""
        assert run_test_case("returnsSeven", 42, target=f"{fake_target}:Cases") == 7

    def test_repeated_runs_are_deterministic(self):
        """Test running the same scenario repeatedly gives the same result."""
        results = {run_test_case("invalidateLow", 42) for _ in range(5)}
        assert results == {42}

    def test_callable_exceptions_propagate(self, fake_target):
        """Test exceptions raised inside the callable are not wrapped."""
        with pytest.raises(RuntimeError, match="boom"):
            run_test_case("boom", 1, target=fake_target)

    def test_argument_is_passed_through(self, fake_target):
        """Test the callable receives exactly the argument given."""
        import regcheck_fake_cases

        run_test_case("counting", 9, target=fake_target)
        assert regcheck_fake_cases.CALLS == [9]


class TestLookupFailures:
    """Tests for callables that cannot be found or invoked."""

    def test_missing_callable(self, fake_target):
        """Test a missing name raises a LookupError."""
        with pytest.raises(LookupError):
            run_test_case("doesNotExist", 42, target=fake_target)

    def test_missing_callable_is_case_lookup_error(self):
        """Test the raised error is the harness's own lookup error."""
        with pytest.raises(CaseLookupError, match="doesNotExist"):
            run_test_case("doesNotExist", 42)

    def test_missing_module(self):
        """Test an unimportable target raises a LookupError."""
        with pytest.raises(CaseLookupError, match="Cannot load target module"):
            run_test_case("invalidateLow", 42, target="no_such_module_anywhere")

    def test_missing_class(self, fake_target):
        """Test a missing attribute after the colon raises a LookupError."""
        with pytest.raises(CaseLookupError, match="no attribute 'Missing'"):
            run_test_case("invalidateLow", 42, target=f"{fake_target}:Missing")

    def test_private_callable_is_not_accessible(self, fake_target):
        """Test names with a leading underscore are rejected."""
        with pytest.raises(CaseLookupError, match="not accessible"):
            run_test_case("_private", 42, target=fake_target)

    def test_empty_name(self, fake_target):
        """Test an empty name is rejected."""
        with pytest.raises(CaseLookupError):
            run_test_case("", 42, target=fake_target)

    def test_non_callable_attribute(self, fake_target):
        """Test a non-callable attribute is not a case."""
        with pytest.raises(CaseLookupError, match="No callable"):
            run_test_case("not_callable", 42, target=fake_target)

    def test_wrong_arity(self, fake_target):
        """Test callables that cannot take a single argument are rejected."""
        with pytest.raises(CaseLookupError, match="single integer argument"):
            run_test_case("two_args", 42, target=fake_target)

    def test_unbound_instance_method(self, fake_target):
        """Test instance methods looked up on the class are rejected."""
        with pytest.raises(CaseLookupError):
            run_test_case("needsSelf", 42, target=f"{fake_target}:Cases")

    def test_target_without_module(self):
        """Test a target with nothing before the colon is rejected."""
        with pytest.raises(CaseLookupError, match="missing module name"):
            load_target(":TestCase")


class TestTypeChecks:
    """Tests for argument and return value conversion."""

    def test_string_result_rejected(self, fake_target):
        """Test a non-integer return value raises TypeError."""
        with pytest.raises(TypeError, match="returned str"):
            run_test_case("returns_str", 42, target=fake_target)

    def test_float_result_rejected(self, fake_target):
        """Test floats are not integer-convertible."""
        with pytest.raises(TypeError):
            run_test_case("returns_float", 42, target=fake_target)

    def test_bool_result_rejected(self, fake_target):
        """Test bool is not accepted as an integer result."""
        with pytest.raises(TypeError, match="bool"):
            run_test_case("returns_bool", 42, target=fake_target)

    def test_result_wider_than_32_bits_rejected(self, fake_target):
        """Test results outside the 32-bit range are rejected."""
        with pytest.raises(TypeError, match="32 bits"):
            run_test_case("returns_wide", 42, target=fake_target)

    def test_non_int_argument_rejected(self):
        """Test a non-integer argument raises TypeError."""
        with pytest.raises(TypeError, match="Argument must be an int"):
            run_test_case("invalidateLow", "42")  # type: ignore[arg-type]

    def test_bool_argument_rejected(self):
        """Test bool arguments are rejected."""
        with pytest.raises(TypeError):
            run_test_case("invalidateLow", True)

    @pytest.mark.parametrize("arg", [2**63, -(2**63) - 1])
    def test_argument_outside_64_bits(self, arg):
        """Test arguments outside the signed 64-bit range raise OverflowError."""
        with pytest.raises(OverflowError):
            run_test_case("invalidateLow", arg)

    @pytest.mark.parametrize("arg", [2**63 - 1, -(2**63)])
    def test_argument_at_64_bit_limits(self, fake_target, arg):
        """Test the 64-bit limits themselves are accepted."""
        assert run_test_case("returns_seven", arg, target=fake_target) == 7

    def test_conversion_errors_are_harness_errors(self, fake_target):
        """Test harness-raised type errors are distinguishable from callable errors."""
        with pytest.raises(ResultTypeError) as exc_info:
            run_test_case("returns_wide", 42, target=fake_target)
        assert exc_info.value.value == 2**40
        with pytest.raises(ArgumentTypeError):
            run_test_case("identity", "42", target=fake_target)  # type: ignore[arg-type]
        with pytest.raises(ArgumentOverflowError):
            run_test_case("identity", 2**63, target=fake_target)

    def test_type_error_inside_callable_is_not_a_harness_error(self, fake_target):
        """Test a TypeError raised by the callable is passed through untouched."""
        with pytest.raises(TypeError) as exc_info:
            run_test_case("type_bug", 42, target=fake_target)
        assert not isinstance(exc_info.value, HarnessError)


class TestAssertEquals:
    """Tests for assert_equals()."""

    def test_equal_values_pass(self):
        """Test equal integers do not raise."""
        assert_equals(42, 42)

    def test_unequal_values_raise_assertion_error(self):
        """Test unequal integers raise an AssertionError with both values."""
        with pytest.raises(AssertionError) as exc_info:
            assert_equals(42, 7)

        message = str(exc_info.value)
        assert "42" in message
        assert "7" in message
        assert message == "Wrong result: 42 != 7"

    def test_error_carries_values(self):
        """Test the raised error exposes expected and actual."""
        with pytest.raises(WrongResultError) as exc_info:
            assert_equals(42, -1)

        assert exc_info.value.expected == 42
        assert exc_info.value.actual == -1


class TestResolveCase:
    """Tests for resolve_case()."""

    def test_returns_callable(self, fake_target):
        """Test the resolved callable can be invoked directly."""
        case = resolve_case(fake_target, "identity")
        assert case(3) == 3

    def test_load_target_returns_module(self, fake_target):
        """Test a target without a colon resolves to the module."""
        module = load_target(fake_target)
        assert module.__name__ == fake_target

    def test_load_target_walks_nested_attributes(self):
        """Test dotted attributes after the colon are followed."""
        method = load_target("regcheck.cases.wide_store:TestCase.invalidateLow")
        assert method(42) == 42


class TestRunScenario:
    """Tests for run_scenario() and run_scenarios()."""

    def test_passing_scenario(self):
        """Test the literal scenario passes."""
        result = run_scenario(Scenario(name="invalidateLow", arg=42, expected=42))

        assert result.passed is True
        assert result.actual == 42
        assert result.error is None
        assert result.duration_ms >= 0

    def test_failing_scenario_raises(self, fake_target):
        """Test a wrong result raises from run_scenario."""
        scenario = Scenario(name="returns_seven", arg=42, expected=42, target=fake_target)

        with pytest.raises(AssertionError, match="42 != 7"):
            run_scenario(scenario)

    def test_missing_scenario_raises(self, fake_target):
        """Test a missing callable raises from run_scenario."""
        scenario = Scenario(name="nope", arg=42, expected=42, target=fake_target)

        with pytest.raises(LookupError):
            run_scenario(scenario)

    def test_run_scenarios_records_failures(self, fake_target):
        """Test failures become failing results when not failing fast."""
        scenarios = [
            Scenario(name="returns_seven", arg=42, expected=42, target=fake_target),
            Scenario(name="nope", arg=42, expected=42, target=fake_target),
            Scenario(name="identity", arg=42, expected=42, target=fake_target),
        ]

        results = run_scenarios(scenarios, fail_fast=False)

        assert [r.passed for r in results] == [False, False, True]
        assert results[0].actual == 7
        assert results[0].error_type == "WrongResultError"
        assert results[1].actual is None
        assert results[1].error_type == "CaseLookupError"

    def test_run_scenarios_fail_fast_stops(self, fake_target):
        """Test fail_fast stops after the first failure."""
        scenarios = [
            Scenario(name="returns_seven", arg=42, expected=42, target=fake_target),
            Scenario(name="identity", arg=42, expected=42, target=fake_target),
        ]

        results = run_scenarios(scenarios, fail_fast=True)

        assert len(results) == 1
        assert results[0].passed is False

    def test_run_scenarios_all_pass(self, fake_target):
        """Test every scenario runs when all pass."""
        scenarios = [
            Scenario(name="identity", arg=n, expected=n, target=fake_target) for n in range(3)
        ]

        results = run_scenarios(scenarios)

        assert len(results) == 3
        assert all(r.passed for r in results)

    def test_unexpected_errors_propagate(self, fake_target):
        """Test errors raised by the callable itself are not swallowed."""
        scenarios = [Scenario(name="boom", arg=1, expected=1, target=fake_target)]

        with pytest.raises(RuntimeError):
            run_scenarios(scenarios, fail_fast=False)

    def test_lookup_error_inside_callable_propagates(self, fake_target):
        """Test a KeyError raised by the callable is not recorded as a failure."""
        scenarios = [
            Scenario(name="lookup_bug", arg=1, expected=1, target=fake_target),
            Scenario(name="identity", arg=1, expected=1, target=fake_target),
        ]

        with pytest.raises(KeyError, match="missing"):
            run_scenarios(scenarios, fail_fast=False)

    def test_type_error_inside_callable_propagates(self, fake_target):
        """Test a TypeError raised by the callable is not recorded as a failure."""
        scenarios = [Scenario(name="type_bug", arg=1, expected=1, target=fake_target)]

        with pytest.raises(TypeError) as exc_info:
            run_scenarios(scenarios, fail_fast=False)
        assert not isinstance(exc_info.value, HarnessError)

    def test_out_of_range_result_keeps_actual(self, fake_target):
        """Test a result too wide for 32 bits is still recorded as the actual value."""
        scenarios = [Scenario(name="returns_wide", arg=1, expected=1, target=fake_target)]

        results = run_scenarios(scenarios, fail_fast=False)

        assert results[0].passed is False
        assert results[0].actual == 2**40
        assert results[0].error_type == "ResultTypeError"

    def test_non_int_result_has_no_actual(self, fake_target):
        """Test a non-integer result is not recorded as the actual value."""
        scenarios = [Scenario(name="returns_str", arg=1, expected=1, target=fake_target)]

        results = run_scenarios(scenarios, fail_fast=False)

        assert results[0].actual is None
        assert results[0].error_type == "ResultTypeError"
