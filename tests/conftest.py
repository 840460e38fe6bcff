"""Shared pytest fixtures for fieldtree tests."""

from __future__ import annotations

from typing import Any

import pytest

from fieldtree.core.config import Settings
from fieldtree.engine import Engine, create_engine
from fieldtree.engine.registry import RuleRegistry
from fieldtree.engine.runner import RuleRunner
from fieldtree.rules import DEFAULT_RULES


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def engine(settings: Settings) -> Engine:
    """Engine with only the built-in rules."""
    return create_engine(settings=settings)


@pytest.fixture
def registry() -> RuleRegistry:
    return RuleRegistry.from_overrides(DEFAULT_RULES)


@pytest.fixture
def runner(registry: RuleRegistry) -> RuleRunner:
    return RuleRunner(registry)


@pytest.fixture
def signup_declaration() -> dict[str, Any]:
    """Two top-level fields plus a group needing at least one valid contact."""
    return {
        "keys": {
            "first_name": {
                "validatorSchemes": [["name"]],
                "sanitizationSchemes": [["dotPlus"]],
            },
            "dob": {"optional": True},
            "online_offline": {
                "keys": {
                    "online": {"sanitizations": [["toInt"]]},
                    "offline": {"optional": True},
                },
                "validators": [["validMin", [1]]],
            },
        },
    }
