"""Declarative registration metadata for validator handlers.

The condition_handler decorator marks a validator method as the
implementation of one condition kind. It does not register anything by
itself; it attaches a HandlerSpec to the function, and the validator turns
those specs into registered conditions when it is constructed.

The decorator may be stacked to register one handler under several kinds.
Stacked specs are kept in top-to-bottom order.

Examples:
    >>> class UserValidator(SubjectValidator[User, UserStates]):
    ...     kind_type = UserStates
    ...     subject_type = User
    ...
    ...     @condition_handler(UserStates.HAS_EMAIL, "Email is missing")
    ...     async def has_email(self, f: DataFilter[str, User]) -> ConditionResult:
    ...         ...
    ...
    ...     @condition_handler(UserStates.IS_ROLE, "Wrong role", value="admin")
    ...     @condition_handler(UserStates.IS_OWNER_ROLE, "Wrong role", value="owner")
    ...     def has_role(self, f: DataFilter[str, User]) -> bool:
    ...         return f.subject is not None and f.subject.role == f.value
"""

from collections.abc import Callable
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator

F = TypeVar("F", bound=Callable[..., Any])

# Attribute under which specs are stored on the decorated function
HANDLER_SPECS_ATTR = "__condition_handlers__"


class HandlerSpec(BaseModel):
    """Registration metadata for one (handler, kind) pair.

    Attributes:
        kind: The Enum member the handler implements.
        message: Default failure message.
        value: Optional static comparison value injected into the filter.
        cacheable: Whether deferred subject resolution runs before the handler.
        value_type: Explicit value type for the filter. When None, it is
            taken from the handler's context parameter annotation.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Any
    message: str = ""
    value: Any = None
    cacheable: bool = True
    value_type: Any = None

    @field_validator("kind")
    @classmethod
    def _kind_is_enum_member(cls, kind: Any) -> Any:
        if not isinstance(kind, Enum):
            raise ValueError(f"kind must be an Enum member, got {type(kind).__name__}")
        return kind


def condition_handler(
    kind: Enum,
    message: str = "",
    *,
    value: Any = None,
    cacheable: bool = True,
    value_type: Any = None,
) -> Callable[[F], F]:
    """Mark a validator method as the handler for a condition kind.

    Args:
        kind: The Enum member to register the handler under. Must belong to
            the validator's kind_type, which is checked at construction.
        message: Default failure message.
        value: Static comparison value placed in the filter's value field.
        cacheable: Resolve the subject by id before calling the handler.
        value_type: Value type of the filter passed to the handler. Taken
            from the handler's annotation when omitted.

    Returns:
        A decorator that records the spec and returns the function unchanged.

    Raises:
        TypeError: If kind is not an Enum member.
    """
    if not isinstance(kind, Enum):
        raise TypeError(f"kind must be an Enum member, got {type(kind).__name__}")

    spec = HandlerSpec(
        kind=kind,
        message=message,
        value=value,
        cacheable=cacheable,
        value_type=value_type,
    )

    def decorator(func: F) -> F:
        if not callable(func):
            raise TypeError(
                f"condition_handler can only decorate callables, got {type(func).__name__}"
            )
        specs: list[HandlerSpec] = func.__dict__.setdefault(HANDLER_SPECS_ATTR, [])
        # Decorators apply bottom-up; prepend to keep source order
        specs.insert(0, spec)
        return func

    return decorator


def get_handler_specs(func: Any) -> list[HandlerSpec]:
    """Return the specs attached to a function, in source order."""
    return list(getattr(func, HANDLER_SPECS_ATTR, ()))
