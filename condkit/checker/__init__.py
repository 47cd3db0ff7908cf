"""Condition providers and the checker that aggregates them.

- ConditionProvider: ordered registry of conditions for one kind enumeration
- ConditionChecker: one provider per enumeration, plus the query surface
- ConditionEvent: notification channel for met / failed conditions

Examples:
    >>> from condkit.checker import ConditionChecker, ConditionProvider
    >>>
    >>> checker = ConditionChecker()
    >>> checker.register_provider(OrderStates, ConditionProvider(OrderStates))
"""

from .checker import ConditionChecker
from .events import ConditionEvent
from .provider import ConditionProvider

__all__ = [
    "ConditionChecker",
    "ConditionEvent",
    "ConditionProvider",
]
