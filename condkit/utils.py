"""Utility functions for condkit.

This module provides helper functions used throughout the condkit library,
particularly for runtime type narrowing, type annotation processing, and
bridging between synchronous and asynchronous callers.
"""

import asyncio
from collections.abc import Awaitable, Callable, Coroutine
from datetime import timedelta
from functools import lru_cache
import inspect
from typing import Any, TypeVar, get_args, get_origin

from pydantic import ConfigDict, PydanticUserError, TypeAdapter, ValidationError

T = TypeVar("T")

_ARBITRARY_TYPES = ConfigDict(arbitrary_types_allowed=True)


@lru_cache(maxsize=256)
def _strict_adapter(annotation: Any) -> TypeAdapter:
    try:
        return TypeAdapter(annotation, config=_ARBITRARY_TYPES)
    except PydanticUserError:
        # Models, dataclasses and TypedDicts bring their own config
        return TypeAdapter(annotation)


def matches_type(value: Any, annotation: Any) -> bool:
    """Check whether a runtime value satisfies a type annotation.

    This is the narrowing rule used when an untyped DataFilter is converted
    into a typed one: a field survives only if this returns True for it.

    The check is pydantic strict-mode validation, so parametrised generics
    are checked element by element and nothing is coerced: ``"1"`` is not
    an int, and neither is ``True``. Plain classes fall back to an
    isinstance check. Any and unbound TypeVars match everything.

    None never matches, because a None field is already "absent".

    Args:
        value: The runtime value to test.
        annotation: The type annotation to test against.

    Returns:
        True if the value is accepted by the annotated type as-is.

    Examples:
        >>> matches_type("abc", str)
        True
        >>> matches_type(5, str | int)
        True
        >>> matches_type(["a"], list[str])
        True
        >>> matches_type(["1"], list[int])
        False
        >>> matches_type(True, int)
        False
    """
    if value is None:
        return False

    if annotation is Any or isinstance(annotation, TypeVar):
        return True

    try:
        adapter = _strict_adapter(annotation)
    except TypeError:
        # Unhashable annotation metadata; build an uncached adapter
        adapter = _strict_adapter.__wrapped__(annotation)

    try:
        adapter.validate_python(value, strict=True)
    except ValidationError:
        return False
    return True


def generic_arguments(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    """Split a parametrised annotation into its origin and type arguments.

    Works for both typing generics (list[str]) and parametrised pydantic
    generic models (DataFilter[str, User]), which are real classes and
    therefore invisible to typing.get_origin. A named subclass such as
    ``class UserFilter(DataFilter[str, User])`` is its own origin and
    carries the arguments of its parametrised base.

    Args:
        annotation: The annotation to split.

    Returns:
        A (origin, args) tuple. For an unparametrised annotation the origin
        is the annotation itself and args is empty.

    Examples:
        >>> generic_arguments(list[str])
        (<class 'list'>, (<class 'str'>,))
        >>> generic_arguments(int)
        (<class 'int'>, ())
    """
    metadata = getattr(annotation, "__pydantic_generic_metadata__", None)
    if metadata is not None:
        if metadata.get("origin") is not None:
            return metadata["origin"], tuple(metadata.get("args", ()))
        if isinstance(annotation, type):
            # A named subclass of a parametrised model reports its base's arguments
            for base in annotation.__mro__[1:]:
                base_metadata = getattr(base, "__pydantic_generic_metadata__", None) or {}
                if base_metadata.get("origin") is not None:
                    return annotation, tuple(base_metadata.get("args", ()))

    origin = get_origin(annotation)
    if origin is not None:
        return origin, get_args(annotation)

    return annotation, ()


def to_seconds(duration: float | int | timedelta) -> float:
    """Normalise a duration given as seconds or a timedelta.

    Raises:
        TypeError: If duration is neither a number nor a timedelta.
        ValueError: If duration is negative.
    """
    if isinstance(duration, timedelta):
        seconds = duration.total_seconds()
    elif isinstance(duration, (int, float)) and not isinstance(duration, bool):
        seconds = float(duration)
    else:
        raise TypeError(
            f"duration must be a number of seconds or a timedelta, "
            f"got {type(duration).__name__}"
        )

    if seconds < 0:
        raise ValueError(f"duration cannot be negative, got {seconds}")
    return seconds


async def maybe_await(value: T | Awaitable[T]) -> T:
    """Await value if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


def run_sync(coroutine: Coroutine[Any, Any, T]) -> T:
    """Block the calling thread until a coroutine completes.

    This is the adapter behind every ``*_sync`` method. It refuses to run
    inside an already running event loop, since blocking there would
    deadlock the loop the coroutine needs.

    Raises:
        RuntimeError: If called from a thread with a running event loop.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coroutine)

    coroutine.close()
    raise RuntimeError(
        "Synchronous condkit entry points cannot be called from a running "
        "event loop; await the asynchronous variant instead"
    )


def describe_callable(func: Callable[..., Any]) -> str:
    """Return a short 'name(signature)' description of a callable."""
    func_name = getattr(func, "__name__", "<lambda>")
    try:
        return f"{func_name}{inspect.signature(func)}"
    except (ValueError, TypeError):
        return func_name
