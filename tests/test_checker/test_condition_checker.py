"""Tests for ConditionChecker single-kind queries."""

import asyncio
from datetime import timedelta
from enum import Enum, auto
import time

import pytest

import condkit.checker.checker as checker_module
from condkit.checker import ConditionChecker, ConditionProvider
from condkit.conditions import (
    NOT_FOUND_MESSAGE,
    UNKNOWN_ERROR_MESSAGE,
    ConditionResult,
    LambdaCondition,
)
from condkit.context import DataFilter
from condkit.errors import UnsupportedOperationError
from condkit.settings import CheckerSettings


class UserStates(Enum):
    HAS_ID = auto()
    IS_ACTIVE = auto()
    IS_ADMIN = auto()


class OrderStates(Enum):
    IS_PAID = auto()


def make_checker(registrations):
    """Build a checker with one UserStates provider from (kind, condition) pairs."""
    provider = ConditionProvider(UserStates)
    for kind, condition in registrations:
        provider.register(kind, condition)
    checker = ConditionChecker()
    checker.register_provider(UserStates, provider)
    return checker


class TestRegisterProvider:
    """Test provider registration on the checker."""

    def test_register_and_get(self):
        """Test retrieving a registered provider."""
        provider = ConditionProvider(UserStates)
        checker = ConditionChecker()
        checker.register_provider(UserStates, provider)

        assert checker.get_provider(UserStates) is provider
        assert checker.get_provider(OrderStates) is None

    def test_replacing_provider(self, caplog):
        """Test that a second provider for the same type replaces the first."""
        first, second = ConditionProvider(UserStates), ConditionProvider(UserStates)
        checker = ConditionChecker()
        checker.register_provider(UserStates, first)
        checker.register_provider(UserStates, second)

        assert checker.get_provider(UserStates) is second
        assert "Replacing condition provider for UserStates" in caplog.text

    def test_provider_must_match_kind_type(self):
        """Test that providers are registered under their own enumeration."""
        checker = ConditionChecker()
        with pytest.raises(TypeError, match="bound to UserStates"):
            checker.register_provider(OrderStates, ConditionProvider(UserStates))
        with pytest.raises(TypeError, match="provider must be a ConditionProvider"):
            checker.register_provider(UserStates, {})

    def test_settings(self):
        """Test default and custom settings."""
        assert ConditionChecker().settings == CheckerSettings()
        custom = CheckerSettings(default_timeout=1.0)
        assert ConditionChecker(custom).settings is custom
        with pytest.raises(TypeError, match="settings must be a CheckerSettings"):
            ConditionChecker({"default_timeout": 1.0})

    def test_repr(self):
        """Test the diagnostic representation."""
        checker = make_checker([])
        assert repr(checker) == "ConditionChecker(providers=[UserStates])"


class TestCheck:
    """Test check and check_and_result."""

    @pytest.mark.asyncio
    async def test_no_provider(self):
        """Test checking a kind whose enumeration has no provider."""
        checker = ConditionChecker()

        assert await checker.check(OrderStates.IS_PAID) is False
        result = await checker.check_and_result(OrderStates.IS_PAID)
        assert result.passed is False
        assert result.message == NOT_FOUND_MESSAGE

    @pytest.mark.asyncio
    async def test_no_condition_for_kind(self):
        """Test checking a kind with zero registered conditions."""
        checker = make_checker([(UserStates.HAS_ID, LambdaCondition("HasId", lambda f: True))])

        assert await checker.check(UserStates.IS_ADMIN, "1") is False
        result = await checker.check_and_result(UserStates.IS_ADMIN, "1")
        assert result.message == NOT_FOUND_MESSAGE

    @pytest.mark.asyncio
    async def test_kth_condition_wins(self):
        """Test that the first passing condition's result is returned."""
        conditions = [
            LambdaCondition("a", lambda f: ConditionResult.to_failure("a", "a failed")),
            LambdaCondition("b", lambda f: ConditionResult.to_failure("b", "b failed")),
            LambdaCondition("c", lambda f: ConditionResult.to_success("c")),
            LambdaCondition("d", lambda f: ConditionResult.to_success("d")),
        ]
        checker = make_checker([(UserStates.HAS_ID, c) for c in conditions])

        assert await checker.check(UserStates.HAS_ID, "1") is True
        result = await checker.check_and_result(UserStates.HAS_ID, "1")
        assert result.result == "c"

    @pytest.mark.asyncio
    async def test_all_fail(self):
        """Test the result when every condition fails."""
        checker = make_checker(
            [
                (UserStates.HAS_ID, LambdaCondition("a", lambda f: False)),
                (UserStates.HAS_ID, LambdaCondition("b", lambda f: False)),
            ]
        )
        result = await checker.check_and_result(UserStates.HAS_ID)
        assert result.passed is False
        assert result.message == "No HAS_ID conditions passed"

    @pytest.mark.asyncio
    async def test_context_reaches_predicate(self):
        """Test that DataFilter contexts are handed to predicates."""
        checker = make_checker(
            [(UserStates.IS_ADMIN, LambdaCondition("Admin", lambda f: f.value == "admin"))]
        )
        assert await checker.check(UserStates.IS_ADMIN, DataFilter(value="admin")) is True
        assert await checker.check(UserStates.IS_ADMIN, DataFilter(value="guest")) is False


class TestCheckWithError:
    """Test check_with_error, which reports message availability only."""

    @pytest.mark.asyncio
    async def test_true_even_for_failures(self):
        """Test that a failing result still yields True with its message."""
        checker = make_checker(
            [(UserStates.HAS_ID, LambdaCondition("HasId", lambda f: False, "Id is missing"))]
        )
        available, message = await checker.check_with_error(UserStates.HAS_ID)
        assert available is True
        assert message == "No HAS_ID conditions passed"

    @pytest.mark.asyncio
    async def test_true_for_not_found(self):
        """Test the not-found case."""
        available, message = await ConditionChecker().check_with_error(UserStates.HAS_ID)
        assert available is True
        assert message == NOT_FOUND_MESSAGE

    @pytest.mark.asyncio
    async def test_success_message(self):
        """Test the message of a passing result."""
        checker = make_checker(
            [
                (
                    UserStates.HAS_ID,
                    LambdaCondition("HasId", lambda f: ConditionResult.to_success(1, "found")),
                )
            ]
        )
        assert await checker.check_with_error(UserStates.HAS_ID) == (True, "found")

    @pytest.mark.asyncio
    async def test_missing_message_falls_back(self):
        """Test the fallback used when a result carries no message."""
        checker = make_checker(
            [
                (
                    UserStates.HAS_ID,
                    LambdaCondition(
                        "HasId", lambda f: ConditionResult(success=True, message=None)
                    ),
                )
            ]
        )
        assert await checker.check_with_error(UserStates.HAS_ID) == (
            True,
            UNKNOWN_ERROR_MESSAGE,
        )


class TestMultipleContexts:
    """Test multi-context and context-data checks."""

    @pytest.mark.asyncio
    async def test_every_context_must_pass(self):
        """Test short-circuiting on the first failing context."""
        seen = []

        def predicate(f):
            seen.append(f.id)
            return f.id != "bad"

        checker = make_checker([(UserStates.HAS_ID, LambdaCondition("HasId", predicate))])

        assert await checker.check_with_multiple_contexts(UserStates.HAS_ID, ["1", "2"]) is True
        seen.clear()
        assert (
            await checker.check_with_multiple_contexts(UserStates.HAS_ID, ["1", "bad", "3"])
            is False
        )
        assert seen == ["1", "bad"]

    @pytest.mark.asyncio
    async def test_uses_first_condition_only(self):
        """Test that only the kind's first condition is consulted."""
        checker = make_checker(
            [
                (UserStates.HAS_ID, LambdaCondition("a", lambda f: False)),
                (UserStates.HAS_ID, LambdaCondition("b", lambda f: True)),
            ]
        )
        assert await checker.check_with_multiple_contexts(UserStates.HAS_ID, ["1"]) is False

    @pytest.mark.asyncio
    async def test_edge_cases(self):
        """Test empty context lists and unregistered kinds."""
        checker = make_checker([(UserStates.HAS_ID, LambdaCondition("a", lambda f: False))])

        assert await checker.check_with_multiple_contexts(UserStates.HAS_ID, []) is True
        assert await checker.check_with_multiple_contexts(UserStates.IS_ADMIN, []) is True
        assert await checker.check_with_multiple_contexts(UserStates.IS_ADMIN, ["1", "2"]) is True
        assert await checker.check_with_multiple_contexts(OrderStates.IS_PAID, ["1"]) is True

    @pytest.mark.asyncio
    async def test_empty_provider_passes(self):
        """Test that a registered provider with no conditions has nothing to fail."""
        checker = ConditionChecker()
        checker.register_provider(UserStates, ConditionProvider(UserStates))

        assert await checker.check_with_multiple_contexts(UserStates.HAS_ID, ["1", "2"]) is True
        assert await checker.check_with_contextual_dependencies(UserStates.HAS_ID, ["1"]) is True

    @pytest.mark.asyncio
    async def test_contextual_dependencies_alias(self):
        """Test that check_with_contextual_dependencies shares the contract."""
        checker = make_checker(
            [(UserStates.HAS_ID, LambdaCondition("HasId", lambda f: f.id is not None))]
        )
        assert await checker.check_with_contextual_dependencies(UserStates.HAS_ID, ["1"]) is True
        assert (
            await checker.check_with_contextual_dependencies(UserStates.HAS_ID, ["1", None])
            is False
        )

    @pytest.mark.asyncio
    async def test_context_data_is_merged_into_copy(self):
        """Test check_with_context_data."""
        checker = make_checker(
            [
                (
                    UserStates.IS_ADMIN,
                    LambdaCondition(
                        "Admin", lambda f: (f.extras or {}).get("role") == "admin"
                    ),
                )
            ]
        )
        original = DataFilter(id="1", extras={"tenant": "t1"})

        assert (
            await checker.check_with_context_data(
                UserStates.IS_ADMIN, original, {"role": "admin"}
            )
            is True
        )
        assert original.extras == {"tenant": "t1"}
        assert (
            await checker.check_with_context_data(UserStates.IS_ADMIN, "1", {"role": "guest"})
            is False
        )
        assert (
            await checker.check_with_context_data(UserStates.HAS_ID, "1", {"role": "admin"})
            is False
        )

    @pytest.mark.asyncio
    async def test_custom_evaluator(self):
        """Test check_condition_by_custom_evaluator."""
        checker = make_checker([(UserStates.HAS_ID, LambdaCondition("a", lambda f: False))])

        async def evaluator(context):
            return context == "yes"

        assert await checker.check_condition_by_custom_evaluator(
            UserStates.HAS_ID, "yes", evaluator
        ) is True
        assert await checker.check_condition_by_custom_evaluator(
            UserStates.HAS_ID, "no", lambda c: c == "yes"
        ) is False
        assert await checker.check_condition_by_custom_evaluator(
            UserStates.IS_ADMIN, "yes", lambda c: True
        ) is False


class TestTimeout:
    """Test check_condition_with_timeout."""

    @pytest.mark.asyncio
    async def test_never_completing_condition_times_out(self):
        """Test that a hung condition yields False after about the timeout."""

        async def hang(f):
            await asyncio.Event().wait()

        checker = make_checker([(UserStates.HAS_ID, LambdaCondition("Hang", hang))])

        start = time.monotonic()
        result = await checker.check_condition_with_timeout(UserStates.HAS_ID, "1", 0.01)
        elapsed = time.monotonic() - start

        assert result is False
        assert 0.009 <= elapsed < 1.0

    @pytest.mark.asyncio
    async def test_timed_out_evaluation_is_cancelled(self):
        """Test that the abandoned evaluation receives cancellation."""
        cancelled = asyncio.Event()

        async def hang(f):
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.set()
                raise

        checker = make_checker([(UserStates.HAS_ID, LambdaCondition("Hang", hang))])

        assert await checker.check_condition_with_timeout(
            UserStates.HAS_ID, "1", timedelta(milliseconds=10)
        ) is False
        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_fast_condition_passes(self):
        """Test that a result within the limit is returned."""
        checker = make_checker([(UserStates.HAS_ID, LambdaCondition("Fast", lambda f: True))])
        assert await checker.check_condition_with_timeout(UserStates.HAS_ID, "1", 1) is True

    @pytest.mark.asyncio
    async def test_default_timeout_from_settings(self):
        """Test that settings.default_timeout is used when no timeout is given."""

        async def hang(f):
            await asyncio.Event().wait()

        provider = ConditionProvider(UserStates)
        provider.register(UserStates.HAS_ID, LambdaCondition("Hang", hang))
        checker = ConditionChecker(CheckerSettings(default_timeout=0.01))
        checker.register_provider(UserStates, provider)

        assert await checker.check_condition_with_timeout(UserStates.HAS_ID) is False


class TestRetry:
    """Test evaluate_condition_with_retry."""

    @staticmethod
    def flaky(failures):
        """Condition that fails a fixed number of times, then passes."""
        attempts = []

        def predicate(f):
            attempts.append(1)
            return len(attempts) > failures

        return LambdaCondition("Flaky", predicate), attempts

    @staticmethod
    def record_sleeps(monkeypatch):
        delays = []

        async def fake_sleep(seconds):
            delays.append(seconds)

        monkeypatch.setattr(checker_module.asyncio, "sleep", fake_sleep)
        return delays

    @pytest.mark.asyncio
    async def test_passes_on_third_attempt(self, monkeypatch):
        """Test three attempts with a wait between each pair."""
        condition, attempts = self.flaky(2)
        checker = make_checker([(UserStates.HAS_ID, condition)])
        delays = self.record_sleeps(monkeypatch)

        assert await checker.evaluate_condition_with_retry(UserStates.HAS_ID, "1", 3, 0.5) is True
        assert len(attempts) == 3
        assert delays == [0.5, 0.5]

    @pytest.mark.asyncio
    async def test_exhausts_attempts(self, monkeypatch):
        """Test that no wait follows the final failed attempt."""
        condition, attempts = self.flaky(10)
        checker = make_checker([(UserStates.HAS_ID, condition)])
        delays = self.record_sleeps(monkeypatch)

        assert await checker.evaluate_condition_with_retry(
            UserStates.HAS_ID, "1", 3, timedelta(milliseconds=200)
        ) is False
        assert len(attempts) == 3
        assert delays == [0.2, 0.2]

    @pytest.mark.asyncio
    async def test_first_attempt_pass_does_not_wait(self, monkeypatch):
        """Test that an immediate pass never sleeps."""
        condition, attempts = self.flaky(0)
        checker = make_checker([(UserStates.HAS_ID, condition)])
        delays = self.record_sleeps(monkeypatch)

        assert await checker.evaluate_condition_with_retry(UserStates.HAS_ID, "1") is True
        assert len(attempts) == 1
        assert delays == []

    @pytest.mark.asyncio
    async def test_defaults_from_settings(self, monkeypatch):
        """Test that settings provide max_retries and retry_delay."""
        condition, attempts = self.flaky(10)
        provider = ConditionProvider(UserStates)
        provider.register(UserStates.HAS_ID, condition)
        checker = ConditionChecker(CheckerSettings(max_retries=4, retry_delay=0.01))
        checker.register_provider(UserStates, provider)
        delays = self.record_sleeps(monkeypatch)

        assert await checker.evaluate_condition_with_retry(UserStates.HAS_ID, "1") is False
        assert len(attempts) == 4
        assert delays == [0.01, 0.01, 0.01]


class TestCallbacks:
    """Test execute_condition_with_callbacks and notifications."""

    @pytest.mark.asyncio
    async def test_success_path(self):
        """Test that condition_met fires before on_success."""
        checker = make_checker([(UserStates.HAS_ID, LambdaCondition("HasId", lambda f: True))])
        order = []

        checker.condition_met.subscribe(lambda sender, r: order.append(("met", sender)))
        checker.condition_failed.subscribe(lambda sender, r: order.append(("failed", sender)))

        result = await checker.execute_condition_with_callbacks(
            UserStates.HAS_ID,
            "1",
            on_success=lambda r: order.append(("success", r.passed)),
            on_failure=lambda r: order.append(("failure", r.passed)),
        )

        assert result.passed is True
        assert order == [("met", checker), ("success", True)]

    @pytest.mark.asyncio
    async def test_failure_path_with_async_callback(self):
        """Test that condition_failed fires before an async on_failure."""
        checker = make_checker(
            [(UserStates.HAS_ID, LambdaCondition("HasId", lambda f: False, "Id is missing"))]
        )
        order = []

        async def on_failure(result):
            order.append(("failure", result.message))

        checker.condition_failed.subscribe(lambda sender, r: order.append(("failed", r.message)))

        result = await checker.execute_condition_with_callbacks(
            UserStates.HAS_ID, "1", on_failure=on_failure
        )

        assert result.passed is False
        assert order == [
            ("failed", "No HAS_ID conditions passed"),
            ("failure", "No HAS_ID conditions passed"),
        ]

    @pytest.mark.asyncio
    async def test_callbacks_are_optional(self):
        """Test evaluating without callbacks or listeners."""
        result = await ConditionChecker().execute_condition_with_callbacks(UserStates.HAS_ID)
        assert result.message == NOT_FOUND_MESSAGE

    @pytest.mark.asyncio
    async def test_hooks_can_be_overridden(self):
        """Test the notification hooks used by subclasses."""
        seen = []

        class AuditingChecker(ConditionChecker):
            async def _on_condition_met(self, result):
                seen.append(result.result)
                await super()._on_condition_met(result)

        checker = AuditingChecker()
        provider = ConditionProvider(UserStates)
        provider.register(
            UserStates.HAS_ID, LambdaCondition("HasId", lambda f: ConditionResult.to_success(7))
        )
        checker.register_provider(UserStates, provider)

        await checker.execute_condition_with_callbacks(UserStates.HAS_ID)

        assert seen == [7]


class TestUnsupported:
    """Test operations that deliberately fail fast."""

    def test_reset_condition_state(self):
        """Test that resetting state is not supported."""
        with pytest.raises(UnsupportedOperationError, match="reset_condition_state"):
            ConditionChecker().reset_condition_state(UserStates)

    @pytest.mark.asyncio
    async def test_all_conditions_met_with_retry(self):
        """Test that retrying all conditions is not supported."""
        with pytest.raises(NotImplementedError) as excinfo:
            await ConditionChecker().are_all_conditions_met_with_retry(UserStates)
        assert excinfo.value.operation == "are_all_conditions_met_with_retry"
