"""Validator base classes.

A validator owns one ConditionProvider for its kind enumeration, fills it
when constructed, and registers it with a ConditionChecker.

- BaseValidator: hand-written registrations only, via initialize_conditions().
- SubjectValidator: additionally turns methods decorated with
  condition_handler into conditions, and resolves the subject under
  evaluation by id, on demand.

Construction order for a SubjectValidator:
1. Declared handlers are collected along the MRO (base classes first) and
   registered in declaration order.
2. initialize_conditions() runs for hand-written registrations.
3. The provider is registered with the checker.

A declared handler that cannot be wired (wrong enumeration, wrong signature,
unresolvable annotations) raises RegistrationError during construction.
A handler whose value type cannot be determined is skipped.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum
import inspect
import logging
from typing import Any, ClassVar, Generic, TypeVar, get_type_hints

from condkit.checker import ConditionChecker, ConditionProvider
from condkit.conditions import LambdaCondition
from condkit.context import DataFilter
from condkit.errors import RegistrationError
from condkit.utils import generic_arguments, matches_type, maybe_await

from .handlers import HandlerSpec, get_handler_specs

logger = logging.getLogger(__name__)

KindT = TypeVar("KindT", bound=Enum)
SubjectT = TypeVar("SubjectT")


class BaseValidator(ABC, Generic[KindT]):
    """Base class for validators that register conditions for one enumeration.

    Subclasses set kind_type and implement initialize_conditions().

    Class Attributes:
        kind_type: The Enum type whose members this validator registers.

    Examples:
        >>> class OrderValidator(BaseValidator[OrderStates]):
        ...     kind_type = OrderStates
        ...
        ...     def initialize_conditions(self):
        ...         self.provider.register(
        ...             OrderStates.HAS_ID,
        ...             LambdaCondition("HasId", lambda f: f.id is not None),
        ...         )
        >>>
        >>> checker = ConditionChecker()
        >>> OrderValidator(checker)
        >>> checker.check_sync(OrderStates.HAS_ID, "order-1")
        True
    """

    kind_type: ClassVar[type[Enum]]

    def __init__(self, checker: ConditionChecker) -> None:
        """Build the provider, populate it, and register it with checker.

        Args:
            checker: The checker to register this validator's provider with.

        Raises:
            TypeError: If kind_type is not set to an Enum type, or checker
                is not a ConditionChecker.
            RegistrationError: If a declared handler cannot be wired.
        """
        kind_type = getattr(type(self), "kind_type", None)
        if not (isinstance(kind_type, type) and issubclass(kind_type, Enum)):
            raise TypeError(
                f"{type(self).__name__}.kind_type must be an Enum type, got {kind_type!r}"
            )
        if not isinstance(checker, ConditionChecker):
            raise TypeError(
                f"checker must be a ConditionChecker, got {type(checker).__name__}"
            )

        self._provider: ConditionProvider[KindT] = ConditionProvider(kind_type)
        self._checker = checker

        self._initialize()

        self._checker.register_provider(kind_type, self._provider)

    @property
    def provider(self) -> ConditionProvider[KindT]:
        """The provider this validator fills."""
        return self._provider

    @property
    def checker(self) -> ConditionChecker:
        """The checker this validator registered with on construction."""
        return self._checker

    def register(self, checker: ConditionChecker) -> None:
        """Register this validator's provider with another checker."""
        checker.register_provider(self.kind_type, self._provider)

    @abstractmethod
    def initialize_conditions(self) -> None:
        """Register hand-written conditions. Runs once, during construction."""
        pass

    def _initialize(self) -> None:
        self.initialize_conditions()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind_type.__name__}, conditions={len(self._provider)})"


class SubjectValidator(BaseValidator[KindT], Generic[SubjectT, KindT]):
    """Validator whose conditions examine a subject resolved by id.

    Subclasses set kind_type and subject_type, implement resolve(), and
    declare handlers with condition_handler. Each handler receives a
    DataFilter[ValueType, subject_type] built from the raw evaluation
    context. initialize_conditions() may be overridden for hand-written
    registrations; by default it does nothing.

    Class Attributes:
        kind_type: The Enum type whose members this validator registers.
        subject_type: The type of subject resolve() returns.

    Examples:
        >>> class UserValidator(SubjectValidator[User, UserStates]):
        ...     kind_type = UserStates
        ...     subject_type = User
        ...
        ...     async def resolve(self, id):
        ...         return await users.get(id)
        ...
        ...     @condition_handler(UserStates.IS_ACTIVE, "User is not active")
        ...     def is_active(self, f: DataFilter[str, User]) -> bool:
        ...         return f.subject is not None and f.subject.active
        >>>
        >>> checker = ConditionChecker()
        >>> UserValidator(checker)
        >>> await checker.check(UserStates.IS_ACTIVE, "user-7")
    """

    subject_type: ClassVar[Any] = Any

    @abstractmethod
    async def resolve(self, id: str) -> SubjectT | None:
        """Fetch the subject for an identifier.

        Returns None when the identifier cannot be resolved. Handlers then
        see an absent subject and fail with their own message.
        """
        pass

    def initialize_conditions(self) -> None:
        pass

    async def map_to(self, data_filter: DataFilter) -> DataFilter:
        """Attach the resolved subject to a filter, resolving at most once.

        Resolution only happens when the filter has an id and no subject.
        A resolved object that is not an instance of subject_type is
        discarded.
        """
        if data_filter.is_resolved:
            return data_filter
        if data_filter.id is not None and data_filter.subject is None:
            subject = await self.resolve(data_filter.id)
            if matches_type(subject, self.subject_type):
                data_filter.subject = subject
            elif subject is not None:
                logger.debug(
                    "%s.resolve(%r) returned %s, expected %s; leaving subject empty",
                    type(self).__name__,
                    data_filter.id,
                    type(subject).__name__,
                    getattr(self.subject_type, "__name__", self.subject_type),
                )
            data_filter.mark_resolved()
        return data_filter

    def register_condition(
        self,
        kind: KindT,
        handler: Callable[[DataFilter], Any],
        message: str = "",
        value: Any = None,
        cacheable: bool = False,
        value_type: Any = Any,
        filter_type: type[DataFilter] | None = None,
    ) -> None:
        """Register a handler as the next condition for kind.

        The registered condition builds a DataFilter[value_type, subject_type]
        (or filter_type, when given) from the raw context, injects value if
        it matches value_type, resolves the subject when cacheable is set,
        then calls handler.

        Args:
            kind: A member of kind_type.
            handler: Function or coroutine function taking the typed filter
                and returning a bool or ConditionResult.
            message: Failure message used when handler returns a bool.
            value: Static comparison value, overriding the context's value.
            cacheable: Resolve the subject by id before calling handler.
            value_type: Value type parameter of the filter.
            filter_type: A named DataFilter subclass to narrow into instead.
        """
        if filter_type is None:
            filter_type = DataFilter[value_type, self.subject_type]

        async def evaluate(context: DataFilter) -> Any:
            data_filter = filter_type.narrow(context)
            if value is not None and matches_type(value, value_type):
                data_filter.value = value
            if cacheable:
                data_filter = await self.map_to(data_filter)
            return await maybe_await(handler(data_filter))

        self._provider.register(kind, LambdaCondition(kind.name, evaluate, message or None))

    def _initialize(self) -> None:
        self._register_declared_handlers()
        super()._initialize()

    def _register_declared_handlers(self) -> None:
        for attr_name, func in self._declared_handlers():
            for spec in get_handler_specs(func):
                self._register_handler(attr_name, func, spec)

    @classmethod
    def _declared_handlers(cls) -> list[tuple[str, Any]]:
        handlers: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            for attr_name, attr in vars(klass).items():
                if get_handler_specs(attr):
                    handlers[attr_name] = attr
        return list(handlers.items())

    def _register_handler(self, attr_name: str, func: Any, spec: HandlerSpec) -> None:
        qualified = f"{type(self).__name__}.{attr_name}"

        if not isinstance(spec.kind, self.kind_type):
            raise RegistrationError(
                f"Error registering condition: handler {qualified} targets "
                f"{type(spec.kind).__name__}.{spec.kind.name}, but "
                f"{type(self).__name__} validates {self.kind_type.__name__}"
            )

        value_type, filter_type = spec.value_type, None
        if value_type is None:
            context_type = self._handler_context_type(qualified, func)
            if context_type is None:
                logger.debug("Skipping handler %s: no resolvable value type", qualified)
                return
            value_type, filter_type = context_type

        self.register_condition(
            spec.kind,
            getattr(self, attr_name),
            spec.message,
            spec.value,
            spec.cacheable,
            value_type,
            filter_type,
        )
        logger.debug("Registered handler %s for %s", qualified, spec.kind)

    def _handler_context_type(
        self, qualified: str, func: Any
    ) -> tuple[Any, type[DataFilter] | None] | None:
        """Read (value type, filter class) from the context annotation.

        The filter class is only returned for named DataFilter subclasses;
        plain DataFilter[...] annotations are rebuilt per validator.
        """
        if not inspect.isfunction(func):
            raise RegistrationError(
                f"Error registering condition: handler {qualified} must be a plain "
                f"method, got {type(func).__name__}"
            )

        parameters = list(inspect.signature(func).parameters.values())[1:]
        if len(parameters) != 1 or parameters[0].kind not in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            raise RegistrationError(
                f"Error registering condition: handler {qualified} must accept "
                f"exactly one context parameter"
            )

        try:
            hints = get_type_hints(func)
        except Exception as e:
            raise RegistrationError(
                f"Error registering condition: cannot resolve annotations of "
                f"handler {qualified}: {e}"
            ) from e

        annotation = hints.get(parameters[0].name)
        if annotation is None:
            return None

        origin, args = generic_arguments(annotation)
        if not (isinstance(origin, type) and issubclass(origin, DataFilter)):
            raise RegistrationError(
                f"Error registering condition: handler {qualified} must take a "
                f"DataFilter context, got {annotation!r}"
            )
        if len(args) != 2:
            return None

        value_arg, subject_arg = args
        if (
            isinstance(subject_arg, type)
            and isinstance(self.subject_type, type)
            and not issubclass(self.subject_type, subject_arg)
        ):
            raise RegistrationError(
                f"Error registering condition: handler {qualified} expects subject "
                f"type {subject_arg.__name__}, but {type(self).__name__} resolves "
                f"{self.subject_type.__name__}"
            )

        filter_type = origin if origin is not DataFilter else None
        if isinstance(value_arg, TypeVar):
            return Any, filter_type
        return value_arg, filter_type
