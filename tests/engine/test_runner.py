"""Tests for rule evaluation: ordering, concurrency and failure policy."""

import asyncio
import gc

import pytest

from fieldtree.core.errors import RuleExecutionError
from fieldtree.engine.declaration import parse_rule_calls
from fieldtree.engine.registry import RuleRegistry
from fieldtree.engine.runner import RuleRunner, fan_out
from fieldtree.rules import DEFAULT_RULES


def slow_false(delay):
    async def validator(value):
        await asyncio.sleep(delay)
        return False
    return validator


def boom(value, *options):
    raise ValueError("cannot evaluate")


@pytest.fixture
def slow_registry() -> RuleRegistry:
    return RuleRegistry.from_overrides(DEFAULT_RULES, {
        "validators": {
            "slow": slow_false(0.05),
            "medium": slow_false(0.02),
            "fast": slow_false(0),
            "boom": boom,
        },
        "sanitizations": {"boom": boom},
    })


class TestFanOut:
    @pytest.mark.asyncio
    async def test_preserves_input_order(self) -> None:
        async def delayed(value, delay):
            await asyncio.sleep(delay)
            return value

        assert await fan_out([delayed("a", 0.03), delayed("b", 0), delayed("c", 0.01)]) == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_cancels_siblings_on_failure(self) -> None:
        cancelled = asyncio.Event()

        async def waits():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        async def fails():
            await asyncio.sleep(0)
            raise RuntimeError("first")

        with pytest.raises(RuntimeError):
            await fan_out([waits(), fails()])
        await asyncio.sleep(0)
        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_siblings_are_joined_before_raising(self) -> None:
        finished = []

        async def slow_cleanup():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                await asyncio.sleep(0.01)
                finished.append("cleanup")
                raise

        async def fails(message, delay):
            await asyncio.sleep(delay)
            raise RuntimeError(message)

        with pytest.raises(RuntimeError, match="first"):
            await fan_out([slow_cleanup(), fails("first", 0), fails("second", 0)])
        # no extra yield: the tier is fully settled when fan_out raises
        assert finished == ["cleanup"]

    @pytest.mark.asyncio
    async def test_second_failure_is_retrieved(self) -> None:
        loop = asyncio.get_running_loop()
        unretrieved = []
        previous = loop.get_exception_handler()
        loop.set_exception_handler(lambda _loop, context: unretrieved.append(context))
        try:
            async def fails(message):
                await asyncio.sleep(0)
                raise RuntimeError(message)

            with pytest.raises(RuntimeError):
                await fan_out([fails("first"), fails("second")])
            gc.collect()
            await asyncio.sleep(0)
        finally:
            loop.set_exception_handler(previous)
        assert unretrieved == []


class TestValidate:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("concurrent", [True, False])
    async def test_error_order_matches_declaration(self, slow_registry: RuleRegistry, concurrent: bool) -> None:
        runner = RuleRunner(slow_registry, concurrent=concurrent)
        calls = parse_rule_calls(["slow", "fast", "medium"], origin="test")
        errors = await runner.validate(calls, "x")
        assert list(errors) == ["slow", "fast", "medium"]

    @pytest.mark.asyncio
    async def test_falsy_return_is_failure(self) -> None:
        registry = RuleRegistry.from_overrides(DEFAULT_RULES, {"validators": {"none": lambda v: None}})
        errors = await RuleRunner(registry).validate(parse_rule_calls(["none"], origin="test"), "x")
        assert errors == {"none": []}

    @pytest.mark.asyncio
    async def test_scheme_errors_merge_in_declaration_order(self, runner: RuleRunner) -> None:
        calls = parse_rule_calls(["boolean", "name"], origin="test")
        errors = await runner.validate_schemes(calls, "x")
        assert list(errors) == ["isNumber", "between", "range"]


class TestFailurePolicy:
    @pytest.mark.asyncio
    async def test_raise_is_default(self, slow_registry: RuleRegistry) -> None:
        runner = RuleRunner(slow_registry)
        with pytest.raises(RuleExecutionError) as exc_info:
            await runner.validate(parse_rule_calls(["boom"], origin="test"), "x")
        assert exc_info.value.name == "boom"

    @pytest.mark.asyncio
    async def test_record_reports_validator_as_failed(self, slow_registry: RuleRegistry) -> None:
        runner = RuleRunner(slow_registry, failure_policy="record")
        errors = await runner.validate(parse_rule_calls([["boom", [1]], ["range", [1, 5]]], origin="test"), "abc")
        assert errors == {"boom": [1]}

    @pytest.mark.asyncio
    async def test_record_keeps_value_when_sanitizer_raises(self, slow_registry: RuleRegistry) -> None:
        runner = RuleRunner(slow_registry, failure_policy="record")
        value, errors = await runner.sanitize(parse_rule_calls(["boom", "dotAdd"], origin="test"), "a")
        assert value == "a."
        assert errors == {"boom": []}


class TestSanitize:
    @pytest.mark.asyncio
    async def test_threads_value(self, runner: RuleRunner) -> None:
        value, errors = await runner.sanitize(parse_rule_calls(["dotAdd", "dotAdd"], origin="test"), "a")
        assert value == "a.."
        assert errors == {}

    @pytest.mark.asyncio
    async def test_async_sanitizer(self) -> None:
        async def upper(value):
            await asyncio.sleep(0)
            return value.upper()

        runner = RuleRunner(RuleRegistry.from_overrides(DEFAULT_RULES, {"sanitizations": {"upper": upper}}))
        value, _ = await runner.sanitize(parse_rule_calls(["upper", ["plusAdd", ["right"]]], origin="test"), "ab")
        assert value == "AB+"
