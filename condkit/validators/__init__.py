"""Validators: grouped condition registrations for one kind enumeration.

- BaseValidator: registers hand-written conditions in initialize_conditions()
- SubjectValidator: adds declared handlers and subject resolution by id
- GeneralValidator: ready-made GeneralStates checks over common properties
- condition_handler: decorator declaring a method as a condition handler
- register_validators: construct a list of validators against one checker
"""

from .base import BaseValidator, SubjectValidator
from .general import GeneralStates, GeneralValidator, read_property
from .handlers import HandlerSpec, condition_handler, get_handler_specs
from .registry import register_validators

__all__ = [
    # Base classes
    "BaseValidator",
    "SubjectValidator",
    # Declarative registration
    "condition_handler",
    "HandlerSpec",
    "get_handler_specs",
    # General-purpose validator
    "GeneralStates",
    "GeneralValidator",
    "read_property",
    # Startup
    "register_validators",
]
