"""Notification channels raised by ConditionChecker.

A ConditionEvent keeps an ordered list of listeners. Each listener is called
with the emitting checker and the ConditionResult; it may be a plain function
or a coroutine function. A listener that raises is logged and skipped so it
cannot disturb the evaluation that triggered it or the listeners after it.
"""

from collections.abc import Awaitable, Callable
import logging
from typing import Any

from condkit.conditions import ConditionResult
from condkit.utils import maybe_await

logger = logging.getLogger(__name__)

Listener = Callable[[Any, ConditionResult], None | Awaitable[None]]


class ConditionEvent:
    """A subscribable notification channel.

    Examples:
        >>> checker = ConditionChecker()
        >>>
        >>> @checker.condition_failed.subscribe
        ... def log_failure(sender, result):
        ...     print("failed:", result.message)
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._listeners: list[Listener] = []

    @property
    def name(self) -> str:
        return self._name

    def subscribe(self, listener: Listener) -> Listener:
        """Add a listener. Returns it unchanged so this works as a decorator.

        Raises:
            TypeError: If listener is not callable.
        """
        if not callable(listener):
            raise TypeError(f"listener must be callable, got {type(listener).__name__}")
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: Listener) -> None:
        """Remove a listener. Removing one that is not subscribed is a no-op."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    async def emit(self, sender: Any, result: ConditionResult) -> None:
        """Call every listener with sender and result, isolating failures."""
        for listener in list(self._listeners):
            try:
                await maybe_await(listener(sender, result))
            except Exception:
                logger.exception("Listener %r for %s failed", listener, self._name)

    def __len__(self) -> int:
        return len(self._listeners)

    def __repr__(self) -> str:
        return f"ConditionEvent({self._name!r}, listeners={len(self._listeners)})"
