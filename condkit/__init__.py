"""condkit: named, asynchronous condition checks keyed by enumeration.

condkit lets an application declare the conditions it cares about ("the user
has an id", "the order is paid") as members of an Enum, attach one or more
predicates to each member, and query them by kind from anywhere.

Core Components:
---------------
- ConditionResult: Tri-state outcome of one evaluation
- Condition, LambdaCondition: Named predicates over a context
- DataFilter: The typed context handed to predicates
- ConditionProvider: Ordered conditions for one kind enumeration
- ConditionChecker: One provider per enumeration, plus the query surface
- BaseValidator, SubjectValidator: Grouped, declarative registration

Key Features:
------------
- Plain or async predicates, evaluated without raising
- First-pass-wins evaluation over several conditions per kind
- Enumeration-wide checks with per-kind failure details
- Timeouts, retries and success / failure callbacks
- Declarative handlers with on-demand subject resolution
- Blocking ``*_sync`` adapters for callers outside an event loop

Quick Start:
-----------
    >>> from enum import Enum, auto
    >>> import condkit as ck
    >>>
    >>> class UserStates(Enum):
    ...     HAS_ID = auto()
    ...     IS_ACTIVE = auto()
    >>>
    >>> class UserValidator(ck.SubjectValidator[User, UserStates]):
    ...     kind_type = UserStates
    ...     subject_type = User
    ...
    ...     async def resolve(self, id):
    ...         return await users.get(id)
    ...
    ...     @ck.condition_handler(UserStates.HAS_ID, "Id is missing")
    ...     def has_id(self, f: ck.DataFilter[str, User]) -> bool:
    ...         return f.id is not None
    ...
    ...     @ck.condition_handler(UserStates.IS_ACTIVE, "User is not active")
    ...     def is_active(self, f: ck.DataFilter[str, User]) -> bool:
    ...         return f.subject is not None and f.subject.active
    >>>
    >>> checker = ck.ConditionChecker()
    >>> ck.register_validators(checker, [UserValidator])
    >>>
    >>> await checker.check(UserStates.IS_ACTIVE, "user-7")
    >>> await checker.get_failed_condition_details(UserStates, "user-7")
    >>> checker.check_all_sync(UserStates, "user-7")
"""

import logging

from .checker import ConditionChecker, ConditionEvent, ConditionProvider
from .conditions import (
    CONDITION_NOT_FOUND_MESSAGE,
    NOT_FOUND_MESSAGE,
    SUCCESS_MESSAGE,
    UNKNOWN_ERROR_MESSAGE,
    Condition,
    ConditionResult,
    LambdaCondition,
)
from .context import DataFilter
from .errors import RegistrationError, UnsupportedOperationError
from .settings import CheckerSettings
from .validators import (
    BaseValidator,
    GeneralStates,
    GeneralValidator,
    SubjectValidator,
    condition_handler,
    register_validators,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Results and conditions
    "ConditionResult",
    "Condition",
    "LambdaCondition",
    # Context
    "DataFilter",
    # Providers and checker
    "ConditionProvider",
    "ConditionChecker",
    "ConditionEvent",
    "CheckerSettings",
    # Validators
    "BaseValidator",
    "SubjectValidator",
    "GeneralStates",
    "GeneralValidator",
    "condition_handler",
    "register_validators",
    # Errors
    "RegistrationError",
    "UnsupportedOperationError",
    # Fixed messages
    "NOT_FOUND_MESSAGE",
    "CONDITION_NOT_FOUND_MESSAGE",
    "UNKNOWN_ERROR_MESSAGE",
    "SUCCESS_MESSAGE",
    # Version
    "__version__",
]
