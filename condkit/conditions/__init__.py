"""Conditions and their results.

A Condition is a named, asynchronously evaluated predicate over a context.
Evaluating one always yields a ConditionResult; faults are reported inside
the result instead of being raised.

Condition Types:
---------------
- Condition: Abstract base class with the evaluate() contract
- LambdaCondition: Condition backed by a plain or async function

Examples:
    >>> from condkit.conditions import ConditionResult, LambdaCondition
    >>>
    >>> is_enabled = LambdaCondition(
    ...     "IsEnabled",
    ...     lambda f: ConditionResult.to_success(f.subject)
    ...     if getattr(f.subject, "is_enabled", False)
    ...     else ConditionResult.to_failure(f.subject, "Object is not enabled"),
    ... )
"""

from .base import Condition
from .lambda_condition import LambdaCondition
from .result import (
    CONDITION_NOT_FOUND_MESSAGE,
    NOT_FOUND_MESSAGE,
    SUCCESS_MESSAGE,
    UNKNOWN_ERROR_MESSAGE,
    ConditionResult,
)

__all__ = [
    # Base class
    "Condition",
    # Implementations
    "LambdaCondition",
    # Results
    "ConditionResult",
    # Fixed messages
    "NOT_FOUND_MESSAGE",
    "CONDITION_NOT_FOUND_MESSAGE",
    "UNKNOWN_ERROR_MESSAGE",
    "SUCCESS_MESSAGE",
]
