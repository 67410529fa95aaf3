# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Core data models for regression scenarios.

This module defines the data structures passed between the harness,
the scenario registry and the result log:
- Scenario: A (name, argument, expected-result) triple bound to a target
- ScenarioResult: Outcome of running one scenario

All models use JSON-compatible primitives so results can be written to
and read back from the JSONL result log.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

# Dotted target holding the callables under test ("module:Class")
DEFAULT_TARGET = "regcheck.cases.wide_store:TestCase"


@dataclass(frozen=True)
class Scenario:
    """A fixed regression scenario.

    Frozen so a registered scenario cannot drift between runs.
    """

    name: str  # Name of the callable under test, e.g. "invalidateLow"
    arg: int  # Single 64-bit integer argument
    expected: int  # Expected 32-bit integer result
    target: str = DEFAULT_TARGET

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            "name": self.name,
            "arg": self.arg,
            "expected": self.expected,
            "target": self.target,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Scenario":
        """Deserialize from JSON-compatible dict."""
        return cls(
            name=data["name"],
            arg=data["arg"],
            expected=data["expected"],
            target=data.get("target", DEFAULT_TARGET),
        )


@dataclass
class ScenarioResult:
    """Outcome of a single scenario run.

    Attributes:
        scenario: The scenario that was run.
        passed: True if the callable returned the expected value.
        actual: Value returned by the callable, None if it was never obtained.
        error: Error message when the run failed.
        error_type: Exception class name when the run failed.
        duration_ms: Wall time spent resolving and invoking the callable.
    """

    scenario: Scenario
    passed: bool
    actual: Optional[int] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    duration_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        result: Dict[str, Any] = {
            "scenario": self.scenario.to_dict(),
            "passed": self.passed,
            "duration_ms": round(self.duration_ms, 3),
        }
        if self.actual is not None:
            result["actual"] = self.actual
        if self.error is not None:
            result["error"] = self.error
        if self.error_type is not None:
            result["error_type"] = self.error_type
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScenarioResult":
        """Deserialize from JSON-compatible dict."""
        return cls(
            scenario=Scenario.from_dict(data["scenario"]),
            passed=data["passed"],
            actual=data.get("actual"),
            error=data.get("error"),
            error_type=data.get("error_type"),
            duration_ms=data.get("duration_ms", 0.0),
        )
