"""Outcome of a single condition evaluation.

ConditionResult is tri-state: success may be True, False, or None (unknown).
Everything in condkit treats anything other than True as a failure, so an
unknown result never counts as having passed.
"""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict

# Fixed diagnostic messages
NOT_FOUND_MESSAGE = "Condition not found or provider unavailable"
CONDITION_NOT_FOUND_MESSAGE = "Condition not found"
UNKNOWN_ERROR_MESSAGE = "Unknown error"
SUCCESS_MESSAGE = "Success"


class ConditionResult(BaseModel):
    """Immutable result of evaluating a condition.

    Attributes:
        success: True if the condition passed, False if it failed, None if
            the outcome is unknown (treated as a failure).
        result: The value the predicate examined or produced, for diagnostics.
        message: Human-readable explanation. Expected on failure, optional
            on success.

    Examples:
        >>> ConditionResult.to_success(42).passed
        True
        >>> ConditionResult.to_failure(None, "Id is missing").message
        'Id is missing'
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool | None = None
    result: Any = None
    message: str | None = ""

    @property
    def passed(self) -> bool:
        """True only when success is exactly True."""
        return self.success is True

    @classmethod
    def to_success(cls, result: Any = None, message: str | None = "") -> Self:
        """Create a successful result."""
        return cls(success=True, result=result, message=message)

    @classmethod
    def to_failure(cls, result: Any = None, message: str | None = "") -> Self:
        """Create a failed result."""
        return cls(success=False, result=result, message=message)

    @classmethod
    def to_error(cls, message: str) -> Self:
        """Create a failed result that carries only an explanation."""
        return cls(success=False, result=None, message=message)

    def __str__(self) -> str:
        return f"Success: {self.success}, Message: {self.message}, Result: {self.result}"
