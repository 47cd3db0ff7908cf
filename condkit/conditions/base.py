"""Base class for conditions.

This module defines the abstract base class that all conditions must implement.
A condition is a named, asynchronously evaluated predicate over a context.
"""

from abc import ABC, abstractmethod
from typing import Any

from .result import ConditionResult


class Condition(ABC):
    """Abstract base class for all conditions.

    A Condition evaluates a context and produces a ConditionResult. The
    name is diagnostic only; conditions are looked up by kind, never by name.
    The same Condition instance may be registered under several kinds.

    Implementations must make evaluate() total: any fault, including a
    context of the wrong shape, is reported as a failed result rather than
    raised.
    """

    def __init__(self, name: str, error_message: str | None = None) -> None:
        """Initialize a Condition.

        Args:
            name: Diagnostic name of the condition.
            error_message: Optional static message used when the condition fails.

        Raises:
            TypeError: If name is not a string or error_message is not a
                string or None.
        """
        if not isinstance(name, str):
            raise TypeError(f"name must be str, got {type(name).__name__}")
        if error_message is not None and not isinstance(error_message, str):
            raise TypeError(
                f"error_message must be str or None, got {type(error_message).__name__}"
            )
        self._name = name
        self._error_message = error_message

    @property
    def name(self) -> str:
        """Diagnostic name of this condition."""
        return self._name

    @property
    def error_message(self) -> str | None:
        """Static failure message, if one was given."""
        return self._error_message

    @abstractmethod
    async def evaluate(self, context: Any = None) -> ConditionResult:
        """Evaluate the condition against a context.

        Args:
            context: The evaluation input. Usually a DataFilter, a bare
                identifier string, or None.

        Returns:
            The outcome of the evaluation. Never raises.
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._name!r})"
