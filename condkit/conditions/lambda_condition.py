"""Conditions defined by a custom function.

LambdaCondition wraps a predicate and normalises the shapes a predicate may
take into a single asynchronous contract:

- a sync or async function returning bool
- a sync or async function returning ConditionResult
- a function returning anything else (treated as a failure carrying that value)

It also reconciles the context it is given with the context type the
predicate expects. A bare identifier or None is turned into a DataFilter
when the predicate expects one; any other mismatch is reported as a failed
result rather than raised.
"""

from collections.abc import Callable
import logging
from typing import Any

from condkit.context import DataFilter
from condkit.utils import describe_callable, maybe_await

from .base import Condition
from .result import ConditionResult

logger = logging.getLogger(__name__)


class LambdaCondition(Condition):
    """Condition whose outcome is computed by a user-supplied predicate.

    Attributes:
        predicate: The function that evaluates the condition.
        context_type: The type of context the predicate expects.

    Examples:
        >>> from condkit import DataFilter, LambdaCondition
        >>>
        >>> has_id = LambdaCondition(
        ...     "HasId", lambda f: f.id is not None, "Id is missing"
        ... )
        >>> result = await has_id.evaluate("42")  # bare id becomes a DataFilter
        >>> result.passed
        True
    """

    def __init__(
        self,
        name: str,
        predicate: Callable[[Any], Any],
        error_message: str | None = None,
        context_type: type = DataFilter,
    ) -> None:
        """Initialize a LambdaCondition.

        Args:
            name: Diagnostic name of the condition.
            predicate: A callable taking one context argument and returning
                a bool, a ConditionResult, or an awaitable of either.
            error_message: Message attached to failures produced from a
                bool or non-result return value.
            context_type: The context type the predicate expects. Defaults
                to DataFilter.

        Raises:
            TypeError: If predicate is not callable or context_type is not a type.
        """
        super().__init__(name, error_message)
        if not callable(predicate):
            raise TypeError(f"predicate must be callable, got {type(predicate).__name__}")
        if not isinstance(context_type, type):
            raise TypeError(
                f"context_type must be a type, got {type(context_type).__name__}"
            )
        self._predicate = predicate
        self._context_type = context_type

    @property
    def predicate(self) -> Callable[[Any], Any]:
        """The function that evaluates the condition."""
        return self._predicate

    @property
    def context_type(self) -> type:
        """The type of context the predicate expects."""
        return self._context_type

    async def evaluate(self, context: Any = None) -> ConditionResult:
        """Evaluate the predicate against a context.

        Args:
            context: An instance of context_type, or (when context_type is a
                DataFilter) a bare identifier string or None.

        Returns:
            The predicate's result, normalised to a ConditionResult. Faults
            raised by the predicate become failed results whose message
            states the fault.
        """
        try:
            typed_context = self._reconcile(context)
            if typed_context is _MISMATCH:
                return ConditionResult.to_error(
                    f"Invalid context type: {type(context).__name__}, "
                    f"expected {self._context_type.__name__}"
                )
            outcome = await maybe_await(self._predicate(typed_context))
            return self._normalize(outcome)
        except Exception as e:
            logger.debug("Condition %r raised during evaluation", self.name, exc_info=True)
            return ConditionResult.to_error(f"An error occurred: {e}")

    def _reconcile(self, context: Any) -> Any:
        if isinstance(context, self._context_type):
            return context
        if (context is None or isinstance(context, str)) and issubclass(
            self._context_type, DataFilter
        ):
            return self._context_type.narrow(context)
        return _MISMATCH

    def _normalize(self, outcome: Any) -> ConditionResult:
        if isinstance(outcome, ConditionResult):
            return outcome
        if isinstance(outcome, bool):
            if outcome:
                return ConditionResult.to_success(outcome)
            return ConditionResult.to_failure(outcome, self._failure_message())
        return ConditionResult.to_failure(outcome, self._failure_message())

    def _failure_message(self) -> str:
        if self.error_message:
            return self.error_message
        return f"Condition {self.name!r} was not met"

    def __repr__(self) -> str:
        return f"LambdaCondition({self.name!r}, {describe_callable(self._predicate)})"


# Marker for a context that cannot be reconciled with the expected type
_MISMATCH = object()
