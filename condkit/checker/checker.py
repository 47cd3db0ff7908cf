"""The condition checker: one provider per kind enumeration.

ConditionChecker holds exactly one ConditionProvider for each Enum type and
exposes the query surface over them: single checks, enumeration-wide
aggregations, timeouts, retries, failure details and callbacks.

Aggregations over an enumeration walk its members in declaration order. Note
the deliberate differences in how unregistered members are treated:

- check_all skips them, so it can return True without checking every member.
- check_any stops and returns False at the first one.
- get_failed_condition_details reports them as "Condition not found".
- check_all_with_details reports them as "Unknown error".
- check_with_multiple_contexts treats a kind with no condition as passing.

Every query is a coroutine. Blocking ``*_sync`` twins are provided for
callers outside an event loop.

Examples:
    >>> from enum import Enum, auto
    >>> from condkit import ConditionChecker, ConditionProvider, LambdaCondition
    >>>
    >>> class OrderStates(Enum):
    ...     HAS_ID = auto()
    ...     IS_PAID = auto()
    >>>
    >>> provider = ConditionProvider(OrderStates)
    >>> provider.register(
    ...     OrderStates.HAS_ID, LambdaCondition("HasId", lambda f: f.id is not None)
    ... )
    >>> checker = ConditionChecker()
    >>> checker.register_provider(OrderStates, provider)
    >>> await checker.check(OrderStates.HAS_ID, "order-1")
    True
    >>> await checker.check_all(OrderStates, "order-1")  # IS_PAID is skipped
    True
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable, Mapping
from datetime import timedelta
from enum import Enum
import logging
from typing import Any, TypeVar

from condkit.conditions import (
    CONDITION_NOT_FOUND_MESSAGE,
    NOT_FOUND_MESSAGE,
    SUCCESS_MESSAGE,
    UNKNOWN_ERROR_MESSAGE,
    Condition,
    ConditionResult,
)
from condkit.context import DataFilter
from condkit.errors import UnsupportedOperationError
from condkit.settings import CheckerSettings
from condkit.utils import maybe_await, run_sync, to_seconds

from .events import ConditionEvent
from .provider import ConditionProvider

logger = logging.getLogger(__name__)

KindT = TypeVar("KindT", bound=Enum)

ResultCallback = Callable[[ConditionResult], Any]


class ConditionChecker:
    """Aggregates condition providers and evaluates conditions by kind.

    Providers are registered once during setup and only read afterwards.
    No checker operation changes provider contents; the only side effects
    are the condition_met / condition_failed notifications raised by
    execute_condition_with_callbacks.

    Attributes:
        settings: Default timeout and retry values.
        condition_met: Raised when execute_condition_with_callbacks sees a pass.
        condition_failed: Raised when execute_condition_with_callbacks sees a failure.
    """

    def __init__(self, settings: CheckerSettings | None = None) -> None:
        """Initialize a checker with no providers.

        Args:
            settings: Defaults for timeouts and retries. Uses
                CheckerSettings() if omitted.

        Raises:
            TypeError: If settings is not a CheckerSettings instance.
        """
        if settings is None:
            settings = CheckerSettings()
        if not isinstance(settings, CheckerSettings):
            raise TypeError(
                f"settings must be a CheckerSettings instance, got {type(settings).__name__}"
            )
        self._settings = settings
        self._providers: dict[type[Enum], ConditionProvider] = {}
        self.condition_met = ConditionEvent("condition_met")
        self.condition_failed = ConditionEvent("condition_failed")

    @property
    def settings(self) -> CheckerSettings:
        return self._settings

    # ------------------------------------------------------------------
    # Providers
    # ------------------------------------------------------------------

    def register_provider(
        self, kind_type: type[KindT], provider: ConditionProvider[KindT]
    ) -> None:
        """Register the provider for an enumeration type.

        A provider already registered for the same type is replaced
        wholesale; the two are never merged.

        Raises:
            TypeError: If provider is not a ConditionProvider bound to kind_type.
        """
        if not isinstance(provider, ConditionProvider):
            raise TypeError(
                f"provider must be a ConditionProvider, got {type(provider).__name__}"
            )
        if provider.kind_type is not kind_type:
            raise TypeError(
                f"provider is bound to {provider.kind_type.__name__}, "
                f"cannot register it for {getattr(kind_type, '__name__', kind_type)!r}"
            )
        previous = self._providers.get(kind_type)
        if previous is not None and previous is not provider:
            logger.warning("Replacing condition provider for %s", kind_type.__name__)
        self._providers[kind_type] = provider

    def get_provider(self, kind_type: type[KindT]) -> ConditionProvider[KindT] | None:
        """Return the provider registered for an enumeration type, or None."""
        return self._providers.get(kind_type)

    def _get_condition(self, kind: Enum) -> Condition | None:
        provider = self._providers.get(type(kind))
        if provider is None:
            return None
        return provider.get(kind)

    # ------------------------------------------------------------------
    # Single-kind queries
    # ------------------------------------------------------------------

    async def check(self, kind: Enum, context: Any = None) -> bool:
        """Return True if any condition registered for kind passes.

        Conditions are tried in registration order; the first pass wins.
        """
        result = await self.check_and_result(kind, context)
        return result.passed

    async def check_and_result(self, kind: Enum, context: Any = None) -> ConditionResult:
        """Evaluate a kind and return the full result.

        Returns the first passing result among the kind's conditions, or the
        provider's "no conditions passed" failure. If no provider or no
        condition is registered, returns a failure with NOT_FOUND_MESSAGE.
        """
        provider = self._providers.get(type(kind))
        if provider is None or provider.get(kind) is None:
            return ConditionResult.to_error(NOT_FOUND_MESSAGE)
        return await provider.check(kind, context)

    async def check_with_error(self, kind: Enum, context: Any = None) -> tuple[bool, str]:
        """Evaluate a kind and return a (message available, message) pair.

        The boolean does NOT say whether the condition passed. It is True
        whenever a result was obtained, including a failing or not-found
        result, and the string always carries that result's message. Use
        check() or check_and_result() for a pass/fail answer.
        """
        result = await self.check_and_result(kind, context)
        if result.message is None:
            return True, UNKNOWN_ERROR_MESSAGE
        return True, result.message

    async def check_with_multiple_contexts(
        self, kind: Enum, contexts: Iterable[Any]
    ) -> bool:
        """Return True if the kind's first condition passes for every context.

        Stops at the first failing context. With no condition registered for
        kind, or an empty context list, there is nothing to fail and the
        result is True.
        """
        condition = self._get_condition(kind)
        if condition is None:
            return True
        for context in contexts:
            result = await condition.evaluate(context)
            if not result.passed:
                return False
        return True

    async def check_with_contextual_dependencies(
        self, kind: Enum, contexts: Iterable[Any]
    ) -> bool:
        """Same contract as check_with_multiple_contexts."""
        return await self.check_with_multiple_contexts(kind, contexts)

    async def check_with_context_data(
        self, kind: Enum, context: Any, additional_data: Mapping[str, Any]
    ) -> bool:
        """Evaluate the kind's first condition with extra data in the context.

        additional_data is merged into the extras of a copy of the context,
        so the caller's DataFilter is left untouched. Contexts that are not
        DataFilter-shaped (a DataFilter, an identifier or None) are passed
        through unchanged.
        """
        condition = self._get_condition(kind)
        if condition is None:
            return False
        if context is None or isinstance(context, (str, DataFilter)):
            context = DataFilter.coerce(context).with_extras(dict(additional_data))
        result = await condition.evaluate(context)
        return result.passed

    async def check_condition_by_custom_evaluator(
        self,
        kind: Enum,
        context: Any,
        evaluator: Callable[[Any], bool | Awaitable[bool]],
    ) -> bool:
        """Let evaluator decide, provided a condition is registered for kind.

        The registered condition itself is not evaluated; its presence only
        gates the call. Returns False if nothing is registered.
        """
        if self._get_condition(kind) is None:
            return False
        return bool(await maybe_await(evaluator(context)))

    async def check_condition_with_timeout(
        self,
        kind: Enum,
        context: Any = None,
        timeout: float | timedelta | None = None,
    ) -> bool:
        """Run check() under a time limit.

        If the limit elapses first, the evaluation is cancelled and False is
        returned; no timeout error reaches the caller. Cancellation is
        propagated into the running condition, so a condition that shields
        itself from cancellation may still finish later in the background.

        Args:
            kind: The kind to check.
            context: The evaluation context.
            timeout: Seconds or a timedelta. Defaults to settings.default_timeout.
        """
        seconds = to_seconds(timeout if timeout is not None else self._settings.default_timeout)
        try:
            return await asyncio.wait_for(self.check(kind, context), timeout=seconds)
        except asyncio.TimeoutError:
            logger.warning("Condition %s timed out after %ss", kind, seconds)
            return False

    async def evaluate_condition_with_retry(
        self,
        kind: Enum,
        context: Any = None,
        max_retries: int | None = None,
        delay: float | timedelta | None = None,
    ) -> bool:
        """Repeat check() until it passes or the attempts run out.

        Waits delay between consecutive attempts, so a pass on attempt n
        costs n - 1 waits. There is no wait after the final attempt.

        Args:
            kind: The kind to check.
            context: The evaluation context.
            max_retries: Total number of attempts. Defaults to settings.max_retries.
            delay: Seconds or a timedelta. Defaults to settings.retry_delay.

        Returns:
            True on the first passing attempt, False after exhausting them.
        """
        attempts = max_retries if max_retries is not None else self._settings.max_retries
        seconds = to_seconds(delay if delay is not None else self._settings.retry_delay)

        for attempt in range(1, attempts + 1):
            if await self.check(kind, context):
                return True
            logger.debug("Condition %s failed attempt %d/%d", kind, attempt, attempts)
            if attempt < attempts:
                await asyncio.sleep(seconds)
        return False

    async def execute_condition_with_callbacks(
        self,
        kind: Enum,
        context: Any = None,
        on_success: ResultCallback | None = None,
        on_failure: ResultCallback | None = None,
    ) -> ConditionResult:
        """Evaluate a kind, notify listeners, then run the matching callback.

        condition_met or condition_failed is raised before the callback runs.
        Callbacks may be plain functions or coroutine functions.

        Returns:
            The evaluated result.
        """
        result = await self.check_and_result(kind, context)
        if result.passed:
            await self._on_condition_met(result)
            if on_success is not None:
                await maybe_await(on_success(result))
        else:
            await self._on_condition_failed(result)
            if on_failure is not None:
                await maybe_await(on_failure(result))
        return result

    async def _on_condition_met(self, result: ConditionResult) -> None:
        await self.condition_met.emit(self, result)

    async def _on_condition_failed(self, result: ConditionResult) -> None:
        await self.condition_failed.emit(self, result)

    # ------------------------------------------------------------------
    # Enumeration-wide queries
    # ------------------------------------------------------------------

    async def check_all(self, kind_type: type[KindT], context: Any = None) -> bool:
        """Return True if every registered member of kind_type passes.

        Each member is checked with its first condition. Members with no
        registered condition are left out of the aggregation entirely, so a
        partially registered enumeration can pass without every member being
        checked. Returns True when no provider is registered.
        """
        provider = self._providers.get(kind_type)
        if provider is None:
            return True
        for kind in kind_type:
            condition = provider.get(kind)
            if condition is None:
                continue
            result = await condition.evaluate(context)
            if not result.passed:
                return False
        return True

    async def check_any(self, kind_type: type[KindT], context: Any = None) -> bool:
        """Return True if a member of kind_type passes before an unregistered one.

        Members are visited in declaration order. The first pass returns
        True. Reaching a member with no registered condition returns False
        immediately, even if a later member would have passed.
        """
        provider = self._providers.get(kind_type)
        if provider is None:
            return False
        for kind in kind_type:
            condition = provider.get(kind)
            if condition is None:
                return False
            result = await condition.evaluate(context)
            if result.passed:
                return True
        return False

    async def check_all_with_details(
        self, kind_type: type[KindT], context: Any = None
    ) -> tuple[bool, dict[KindT, str]]:
        """Evaluate every member and report each outcome.

        Returns:
            A pair of (all passed, details). details maps every member to
            SUCCESS_MESSAGE, its failure message, or UNKNOWN_ERROR_MESSAGE
            when nothing is registered for it.
        """
        details: dict[KindT, str] = {}
        provider = self._providers.get(kind_type)
        if provider is None:
            return True, details
        for kind in kind_type:
            condition = provider.get(kind)
            if condition is None:
                details[kind] = UNKNOWN_ERROR_MESSAGE
                continue
            result = await condition.evaluate(context)
            details[kind] = SUCCESS_MESSAGE if result.passed else _failure_message(result)
        return all(message == SUCCESS_MESSAGE for message in details.values()), details

    async def are_all_conditions_met(
        self, kind_type: type[KindT], context: Any = None
    ) -> tuple[bool, dict[KindT, str]]:
        """Evaluate every registered member and collect the failures.

        Unregistered members are skipped.

        Returns:
            A pair of (no failures, failures by kind).
        """
        failures: dict[KindT, str] = {}
        provider = self._providers.get(kind_type)
        if provider is not None:
            for kind in kind_type:
                condition = provider.get(kind)
                if condition is None:
                    continue
                result = await condition.evaluate(context)
                if not result.passed:
                    failures[kind] = _failure_message(result)
        return not failures, failures

    async def get_failed_condition_details(
        self, kind_type: type[KindT], context: Any = None
    ) -> dict[KindT, str]:
        """Map every member that failed or is unregistered to a message.

        Unregistered members get CONDITION_NOT_FOUND_MESSAGE; failing members
        get their result's message. Returns an empty dict when no provider
        is registered.
        """
        failures: dict[KindT, str] = {}
        provider = self._providers.get(kind_type)
        if provider is None:
            return failures
        for kind in kind_type:
            condition = provider.get(kind)
            if condition is None:
                failures[kind] = CONDITION_NOT_FOUND_MESSAGE
                continue
            result = await condition.evaluate(context)
            if not result.passed:
                failures[kind] = _failure_message(result)
        return failures

    async def get_condition_history(
        self, kind_type: type[KindT], context: Any = None
    ) -> dict[KindT, list[ConditionResult]]:
        """Evaluate every registered member once and collect the results.

        This is a snapshot of a single pass, not a record kept across calls:
        each list holds exactly one result, and nothing is remembered
        between invocations.
        """
        history: dict[KindT, list[ConditionResult]] = {}
        provider = self._providers.get(kind_type)
        if provider is None:
            return history
        for kind in kind_type:
            condition = provider.get(kind)
            if condition is None:
                continue
            result = await condition.evaluate(context)
            history.setdefault(kind, []).append(result)
        return history

    # ------------------------------------------------------------------
    # Unsupported operations
    # ------------------------------------------------------------------

    def reset_condition_state(self, kind_type: type[KindT], context: Any = None) -> None:
        """Not supported. Subclasses that keep state may override it.

        Raises:
            UnsupportedOperationError: Always.
        """
        raise UnsupportedOperationError("reset_condition_state")

    async def are_all_conditions_met_with_retry(
        self,
        kind_type: type[KindT],
        context: Any = None,
        max_retries: int | None = None,
        delay: float | timedelta | None = None,
    ) -> bool:
        """Not supported. Subclasses may override it.

        Raises:
            UnsupportedOperationError: Always.
        """
        raise UnsupportedOperationError("are_all_conditions_met_with_retry")

    # ------------------------------------------------------------------
    # Blocking adapters
    # ------------------------------------------------------------------

    def check_sync(self, kind: Enum, context: Any = None) -> bool:
        return run_sync(self.check(kind, context))

    def check_and_result_sync(self, kind: Enum, context: Any = None) -> ConditionResult:
        return run_sync(self.check_and_result(kind, context))

    def check_with_error_sync(self, kind: Enum, context: Any = None) -> tuple[bool, str]:
        return run_sync(self.check_with_error(kind, context))

    def check_with_multiple_contexts_sync(
        self, kind: Enum, contexts: Iterable[Any]
    ) -> bool:
        return run_sync(self.check_with_multiple_contexts(kind, contexts))

    def check_all_sync(self, kind_type: type[KindT], context: Any = None) -> bool:
        return run_sync(self.check_all(kind_type, context))

    def check_any_sync(self, kind_type: type[KindT], context: Any = None) -> bool:
        return run_sync(self.check_any(kind_type, context))

    def check_all_with_details_sync(
        self, kind_type: type[KindT], context: Any = None
    ) -> tuple[bool, dict[KindT, str]]:
        return run_sync(self.check_all_with_details(kind_type, context))

    def are_all_conditions_met_sync(
        self, kind_type: type[KindT], context: Any = None
    ) -> tuple[bool, dict[KindT, str]]:
        return run_sync(self.are_all_conditions_met(kind_type, context))

    def get_failed_condition_details_sync(
        self, kind_type: type[KindT], context: Any = None
    ) -> dict[KindT, str]:
        return run_sync(self.get_failed_condition_details(kind_type, context))

    def get_condition_history_sync(
        self, kind_type: type[KindT], context: Any = None
    ) -> dict[KindT, list[ConditionResult]]:
        return run_sync(self.get_condition_history(kind_type, context))

    def __repr__(self) -> str:
        kinds = ", ".join(kind_type.__name__ for kind_type in self._providers)
        return f"ConditionChecker(providers=[{kinds}])"


def _failure_message(result: ConditionResult) -> str:
    return result.message or UNKNOWN_ERROR_MESSAGE
