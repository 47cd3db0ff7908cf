"""The context object handed to every condition.

A DataFilter carries the input of one evaluation: an optional identifier,
a label, the subject under evaluation, a comparison value, and a bag of
extras. It is a pydantic generic model: ``DataFilter`` on its own is the
untyped carrier, while ``DataFilter[ValueType, SubjectType]`` is a typed
variant whose ``value`` and ``subject`` fields are checked against the
given types.

Narrowing an untyped filter into a typed one never fails. Fields whose
runtime type does not match the target parameters are simply dropped.

Examples:
    >>> from condkit import DataFilter
    >>>
    >>> raw = DataFilter(id="42", subject=user, value="admin")
    >>> typed = DataFilter[str, User].narrow(raw)
    >>> typed.subject is user
    True
    >>>
    >>> # A bare identifier converts implicitly
    >>> DataFilter.coerce("42").id
    '42'
"""

from typing import Any, Generic, Self, TypeVar

from pydantic import BaseModel, ConfigDict, PrivateAttr

from .utils import generic_arguments, matches_type

ValueT = TypeVar("ValueT")
SubjectT = TypeVar("SubjectT")


class DataFilter(BaseModel, Generic[ValueT, SubjectT]):
    """Generic carrier of evaluation input.

    Attributes:
        id: Optional correlation key, typically the identifier used to
            resolve the subject.
        name: Optional label.
        subject: The entity under evaluation.
        value: The comparison operand.
        extras: Ad hoc key/value data.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    id: str | None = None
    name: str | None = None
    subject: SubjectT | None = None
    value: ValueT | None = None
    extras: dict[str, Any] | None = None

    # Set once deferred subject resolution has been attempted on this instance
    _resolved: bool = PrivateAttr(default=False)

    @classmethod
    def type_arguments(cls) -> tuple[Any, Any]:
        """Return the (value type, subject type) this class is parametrised with.

        Unparametrised classes report (Any, Any).
        """
        _, args = generic_arguments(cls)
        if len(args) != 2:
            return Any, Any
        return args[0], args[1]

    @classmethod
    def coerce(cls, context: Any) -> "DataFilter":
        """Convert a raw evaluation context into a DataFilter.

        This is the implicit conversion used when a condition expecting a
        DataFilter is evaluated with a bare identifier or with nothing.

        Args:
            context: None, an identifier string, or a DataFilter.

        Returns:
            The context itself if it already is a DataFilter, otherwise a new
            untyped DataFilter.

        Raises:
            TypeError: If context is of any other type.
        """
        if isinstance(context, DataFilter):
            return context
        if context is None:
            return DataFilter()
        if isinstance(context, str):
            return DataFilter(id=context)
        raise TypeError(
            f"Cannot build a DataFilter from {type(context).__name__}; "
            f"expected DataFilter, str or None"
        )

    @classmethod
    def narrow(cls, context: Any) -> Self:
        """Build an instance of this (typed) class from a raw context.

        id, name and extras are always carried over. subject and value are
        carried over unchanged only when they pass strict validation against
        this class's type parameters; otherwise they are left absent. Values
        are never coerced, so narrowing cannot fail on a mismatched field.

        Args:
            context: None, an identifier string, or any DataFilter.

        Returns:
            A new instance of cls.

        Raises:
            TypeError: If context cannot be coerced to a DataFilter.
        """
        source = DataFilter.coerce(context)
        value_type, subject_type = cls.type_arguments()

        # Matched fields are stored as-is
        narrowed = cls.model_construct(
            id=source.id,
            name=source.name,
            subject=source.subject if matches_type(source.subject, subject_type) else None,
            value=source.value if matches_type(source.value, value_type) else None,
            extras=source.extras,
        )
        narrowed._resolved = source._resolved and narrowed.subject is not None
        return narrowed

    def with_extras(self, additional: dict[str, Any]) -> Self:
        """Return a copy whose extras are updated with ``additional``."""
        extras = dict(self.extras or {})
        extras.update(additional)
        return self.model_copy(update={"extras": extras})

    @property
    def is_resolved(self) -> bool:
        """Whether deferred subject resolution has already run for this filter."""
        return self._resolved

    def mark_resolved(self) -> None:
        self._resolved = True
