"""Exceptions raised for programmer and configuration errors.

Runtime outcomes (a missing condition, a failing predicate, a timeout) are
never raised; they come back as ConditionResult objects or False. The
exceptions here signal mistakes in how conditions were wired up, or calls to
operations this library deliberately does not provide.
"""


class RegistrationError(TypeError):
    """A declared condition handler cannot be turned into a Condition.

    Raised while a validator is being constructed, for example when a handler
    targets a kind from the wrong enumeration or does not take exactly one
    context parameter. The message always names the offending handler.
    """


class UnsupportedOperationError(NotImplementedError):
    """The operation exists on the interface but is not supported."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"{operation} is not supported by this checker")
        self.operation = operation
