"""Registry of conditions for one kind enumeration.

A ConditionProvider maps each member of one Enum type (the "kinds") to an
ordered list of conditions. Registration order is significant: check()
evaluates a kind's conditions in the order they were registered and returns
the first result that passed.

A kind with no registered conditions is a normal, queryable state. Lookups
never raise for missing kinds.

The provider does no locking. Populate it during setup; concurrent readers
are safe, but registering while evaluations are running must be serialised
by the caller.
"""

from collections.abc import AsyncIterator, Callable, Iterable
from enum import Enum
from typing import Any, Generic, TypeVar

from condkit.conditions import Condition, ConditionResult

KindT = TypeVar("KindT", bound=Enum)


class ConditionProvider(Generic[KindT]):
    """Ordered registry of conditions keyed by kind.

    Attributes:
        kind_type: The Enum type whose members this provider accepts.

    Examples:
        >>> from enum import Enum, auto
        >>> from condkit import ConditionProvider, LambdaCondition
        >>>
        >>> class UserStates(Enum):
        ...     HAS_ID = auto()
        >>>
        >>> provider = ConditionProvider(UserStates)
        >>> provider.register(
        ...     UserStates.HAS_ID, LambdaCondition("HasId", lambda f: f.id is not None)
        ... )
        >>> result = await provider.check(UserStates.HAS_ID, "42")
        >>> result.passed
        True
    """

    def __init__(self, kind_type: type[KindT]) -> None:
        """Initialize an empty provider.

        Args:
            kind_type: The Enum type this provider stores conditions for.

        Raises:
            TypeError: If kind_type is not an Enum subclass.
        """
        if not (isinstance(kind_type, type) and issubclass(kind_type, Enum)):
            raise TypeError(f"kind_type must be an Enum type, got {kind_type!r}")
        self._kind_type = kind_type
        self._conditions: dict[KindT, list[Condition]] = {}

    @property
    def kind_type(self) -> type[KindT]:
        """The Enum type whose members this provider accepts."""
        return self._kind_type

    def register(self, kind: KindT, condition: Condition) -> None:
        """Append a condition to the list for a kind.

        Existing conditions for the kind are kept; the new one is evaluated
        after them.

        Args:
            kind: A member of kind_type.
            condition: The condition to register.

        Raises:
            TypeError: If kind is not a member of kind_type or condition is
                not a Condition.
        """
        if not isinstance(kind, self._kind_type):
            raise TypeError(
                f"kind must be a member of {self._kind_type.__name__}, got {kind!r}"
            )
        if not isinstance(condition, Condition):
            raise TypeError(
                f"condition must be a Condition instance, got {type(condition).__name__}"
            )
        self._conditions.setdefault(kind, []).append(condition)

    def get(self, kind: KindT) -> Condition | None:
        """Return the first condition registered for a kind, or None."""
        conditions = self._conditions.get(kind)
        if conditions:
            return conditions[0]
        return None

    def get_all(self, kind: KindT) -> list[Condition]:
        """Return a copy of the conditions registered for a kind."""
        return list(self._conditions.get(kind, ()))

    def get_conditions(
        self, kind: KindT, predicate: Callable[[Condition], bool] | None = None
    ) -> list[Condition]:
        """Return the conditions for a kind, optionally filtered by predicate."""
        conditions = self.get_all(kind)
        if predicate is None:
            return conditions
        return [condition for condition in conditions if predicate(condition)]

    def get_all_conditions(self) -> list[Condition]:
        """Return every registered condition, grouped by kind in registration order."""
        return [
            condition
            for conditions in self._conditions.values()
            for condition in conditions
        ]

    def get_kinds(self) -> list[KindT]:
        """Return the kinds that have at least one registered condition."""
        return [kind for kind, conditions in self._conditions.items() if conditions]

    def get_kinds_for(self, condition: Condition) -> list[KindT]:
        """Return the kinds under which a condition instance is registered."""
        return [
            kind
            for kind, conditions in self._conditions.items()
            if any(registered is condition for registered in conditions)
        ]

    def where(self, predicate: Callable[[Condition], bool]) -> list[Condition]:
        """Return every registered condition that matches predicate."""
        return [
            condition for condition in self.get_all_conditions() if predicate(condition)
        ]

    async def check(self, kind: KindT, context: Any = None) -> ConditionResult:
        """Evaluate a kind's conditions in registration order.

        Returns the first result that passed. If none passed, or nothing is
        registered for the kind, returns a failure reporting that no
        conditions of this kind passed.
        """
        for condition in self._conditions.get(kind, ()):
            result = await condition.evaluate(context)
            if result.passed:
                return result
        return ConditionResult.to_error(f"No {_kind_label(kind)} conditions passed")

    async def any_pass(self, context: Any = None) -> AsyncIterator[ConditionResult]:
        """Lazily yield the passing results of every registered condition.

        Conditions are evaluated one at a time, only as the caller iterates.
        Failing results are skipped.
        """
        for condition in self.get_all_conditions():
            result = await condition.evaluate(context)
            if result.passed:
                yield result

    async def any_pass_many(
        self, contexts: Iterable[Any]
    ) -> AsyncIterator[ConditionResult]:
        """Like any_pass, for each context in turn."""
        for context in contexts:
            async for result in self.any_pass(context):
                yield result

    def __len__(self) -> int:
        return sum(len(conditions) for conditions in self._conditions.values())

    def __repr__(self) -> str:
        return f"ConditionProvider({self._kind_type.__name__}, conditions={len(self)})"


def _kind_label(kind: Any) -> str:
    return kind.name if isinstance(kind, Enum) else repr(kind)
