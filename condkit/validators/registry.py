"""Startup registration of validators.

Validators are listed explicitly rather than discovered. Construct each one
against the same checker at application start:

    >>> checker = ConditionChecker()
    >>> register_validators(checker, [UserValidator, DocumentValidator])
"""

from collections.abc import Iterable
import inspect
import logging

from condkit.checker import ConditionChecker

from .base import BaseValidator

logger = logging.getLogger(__name__)


def register_validators(
    checker: ConditionChecker, validator_classes: Iterable[type[BaseValidator]]
) -> list[BaseValidator]:
    """Instantiate each validator class with checker, in order.

    Each validator registers its provider during construction. A later
    validator for the same kind enumeration replaces an earlier one.

    Args:
        checker: The checker every validator registers with.
        validator_classes: Concrete BaseValidator subclasses.

    Returns:
        The constructed validators, in the order given.

    Raises:
        TypeError: If an entry is not a concrete BaseValidator subclass.
        RegistrationError: If a validator's declared handlers cannot be wired.
    """
    validators: list[BaseValidator] = []
    for validator_class in validator_classes:
        if not (isinstance(validator_class, type) and issubclass(validator_class, BaseValidator)):
            raise TypeError(
                f"validator_classes must contain BaseValidator subclasses, got {validator_class!r}"
            )
        if inspect.isabstract(validator_class):
            raise TypeError(f"Cannot register abstract validator {validator_class.__name__}")

        validators.append(validator_class(checker))
        logger.debug("Registered validator %s", validator_class.__name__)

    logger.info("Registered %d validator(s)", len(validators))
    return validators
