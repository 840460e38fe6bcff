"""Tests for the rule registry."""

import pytest

from fieldtree.core.errors import (
    ConfigurationError,
    ErrorCode,
    RuleExecutionError,
    UnknownRuleError,
)
from fieldtree.engine.registry import RuleClass, RuleRegistry
from fieldtree.rules import DEFAULT_RULES


def _always_false(value, *options):
    return False


class TestRuleClass:
    def test_parse_accepts_declaration_keys(self) -> None:
        assert RuleClass.parse("validatorSchemes") is RuleClass.VALIDATOR_SCHEME
        assert RuleClass.parse("sanitizations") is RuleClass.SANITIZER

    def test_parse_accepts_snake_case(self) -> None:
        assert RuleClass.parse("sanitization_schemes") is RuleClass.SANITIZER_SCHEME

    def test_parse_rejects_unknown_class(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            RuleClass.parse("filters")
        assert exc_info.value.error.code is ErrorCode.E7003_INVALID_REGISTRY


class TestRuleRegistry:
    def test_defaults_are_registered(self, registry: RuleRegistry) -> None:
        assert "range" in registry.names(RuleClass.VALIDATOR)
        assert "dotPlus" in registry.names(RuleClass.SANITIZER_SCHEME)
        assert (RuleClass.VALIDATOR, "validMin") in registry

    def test_override_replaces_default_of_same_name(self) -> None:
        registry = RuleRegistry.from_overrides(DEFAULT_RULES, {"validators": {"range": _always_false}})
        assert registry.lookup(RuleClass.VALIDATOR, "range") is _always_false
        # other defaults in the same class survive the shallow merge
        assert registry.lookup(RuleClass.VALIDATOR, "between") is DEFAULT_RULES["validators"]["between"]

    def test_override_is_per_class(self) -> None:
        registry = RuleRegistry.from_overrides(DEFAULT_RULES, {"sanitizations": {"range": _always_false}})
        assert registry.lookup(RuleClass.SANITIZER, "range") is _always_false
        assert registry.lookup(RuleClass.VALIDATOR, "range") is not _always_false

    def test_overrides_do_not_leak_into_defaults(self) -> None:
        RuleRegistry.from_overrides(DEFAULT_RULES, {"validators": {"custom": _always_false}})
        assert "custom" not in DEFAULT_RULES["validators"]

    def test_unknown_name_raises_on_lookup(self, registry: RuleRegistry) -> None:
        with pytest.raises(UnknownRuleError) as exc_info:
            registry.lookup(RuleClass.VALIDATOR_SCHEME, "emailFree")
        assert exc_info.value.name == "emailFree"
        assert exc_info.value.rule_class == "Validator scheme"
        assert exc_info.value.error.code is ErrorCode.E7001_UNKNOWN_RULE

    def test_non_callable_implementation_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            RuleRegistry.from_overrides(DEFAULT_RULES, {"validators": {"broken": 42}})

    def test_registry_is_immutable(self, registry: RuleRegistry) -> None:
        with pytest.raises(TypeError):
            registry._rules[RuleClass.VALIDATOR]["new"] = _always_false  # type: ignore[index]


class TestInvoke:
    @pytest.mark.asyncio
    async def test_sync_rule(self, registry: RuleRegistry) -> None:
        assert await registry.invoke(RuleClass.VALIDATOR, "range", "Jo", (2, 35)) is True

    @pytest.mark.asyncio
    async def test_coroutine_rule_is_awaited(self) -> None:
        async def available(value):
            return value != "taken"

        registry = RuleRegistry.from_overrides(DEFAULT_RULES, {"validators": {"available": available}})
        assert await registry.invoke(RuleClass.VALIDATOR, "available", "free") is True
        assert await registry.invoke(RuleClass.VALIDATOR, "available", "taken") is False

    @pytest.mark.asyncio
    async def test_raising_rule_is_wrapped(self) -> None:
        def explode(value):
            raise RuntimeError("backend down")

        registry = RuleRegistry.from_overrides(DEFAULT_RULES, {"validators": {"explode": explode}})
        with pytest.raises(RuleExecutionError) as exc_info:
            await registry.invoke(RuleClass.VALIDATOR, "explode", "x")
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert exc_info.value.error.code is ErrorCode.E7010_RULE_FAILED
