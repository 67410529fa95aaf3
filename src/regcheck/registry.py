# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Registry of regression scenarios.

Scenarios are registered by name and dispatched in registration order,
so the entry point never hard-codes the calls it makes.
"""

import logging
from typing import Dict, List

from .models import DEFAULT_TARGET, Scenario

logger = logging.getLogger(__name__)


class ScenarioRegistry:
    """Registry mapping scenario names to Scenario triples.

    Thread Safety:
    - NOT thread-safe: Designed for single-threaded use
    - Register all scenarios before running them
    """

    def __init__(self) -> None:
        """Initialize empty scenario registry."""
        self._scenarios: Dict[str, Scenario] = {}

    def register(self, scenario: Scenario) -> None:
        """Register a scenario.

        Args:
            scenario: Scenario to register.

        Raises:
            TypeError: If scenario is not a Scenario instance.
            ValueError: If a scenario with the same name is already registered.
        """
        if not isinstance(scenario, Scenario):
            raise TypeError(f"Scenario must be a Scenario instance, got {type(scenario)}")
        if scenario.name in self._scenarios:
            raise ValueError(f"Scenario '{scenario.name}' is already registered")

        self._scenarios[scenario.name] = scenario
        logger.debug(
            f"Registered scenario '{scenario.name}' "
            f"(arg={scenario.arg}, expected={scenario.expected})"
        )

    def get(self, name: str) -> Scenario:
        """Get a registered scenario by name.

        Raises:
            KeyError: If no scenario is registered under name.
        """
        try:
            return self._scenarios[name]
        except KeyError:
            raise KeyError(f"Unknown scenario '{name}'") from None

    def get_scenarios(self) -> List[Scenario]:
        """Get all registered scenarios in registration order."""
        return list(self._scenarios.values())

    def names(self) -> List[str]:
        return list(self._scenarios)

    def clear(self) -> None:
        """Remove all registered scenarios.

        Used for testing and reconfiguration.
        """
        self._scenarios.clear()

    def count(self) -> int:
        """Return number of registered scenarios."""
        return len(self._scenarios)


def default_registry(target: str = DEFAULT_TARGET) -> ScenarioRegistry:
    """Build a registry holding the wide-store regression scenario."""
    registry = ScenarioRegistry()
    registry.register(Scenario(name="invalidateLow", arg=42, expected=42, target=target))
    return registry
