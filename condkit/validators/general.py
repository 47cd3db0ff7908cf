"""General-purpose validator for common object properties.

GeneralValidator implements a fixed set of GeneralStates checks over the
resolved subject: presence of identifying fields, boolean flags, non-empty
collections, and well-formed URIs and email addresses.

Subjects may be plain objects (properties read as attributes) or mappings
(properties read as keys). Property names are snake_case.

Subclass it with a concrete subject type and a resolve() implementation:

    >>> class DocumentValidator(GeneralValidator[Document]):
    ...     subject_type = Document
    ...
    ...     async def resolve(self, id):
    ...         return await documents.get(id)
    >>>
    >>> checker = ConditionChecker()
    >>> DocumentValidator(checker)
    >>> await checker.check(GeneralStates.HAS_VALID_URI, "doc-1")
"""

from collections.abc import Collection, Mapping
from enum import Enum, auto
import re
from typing import Any, Generic, TypeVar

from pydantic import AnyUrl, TypeAdapter, ValidationError

from condkit.conditions import ConditionResult
from condkit.context import DataFilter

from .base import SubjectValidator
from .handlers import condition_handler

SubjectT = TypeVar("SubjectT")

_URL_ADAPTER = TypeAdapter(AnyUrl)
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class GeneralStates(Enum):
    """Condition kinds implemented by GeneralValidator."""

    HAS_ID = auto()
    HAS_NAME = auto()
    IS_ENABLED = auto()
    IS_DISABLED = auto()
    HAS_OWNER = auto()
    IS_LINKED_TO_ENTITY = auto()
    IS_ACTIVE = auto()
    IS_ARCHIVED = auto()
    HAS_CREATED_DATE = auto()
    HAS_UPDATED_DATE = auto()
    HAS_VALID_URI = auto()
    HAS_DESCRIPTION = auto()
    HAS_CATEGORY = auto()
    IS_VERIFIED = auto()
    HAS_TAGS = auto()
    HAS_PERMISSIONS = auto()
    IS_IN_USER_CLAIMS = auto()
    HAS_PARENT = auto()
    HAS_CHILDREN = auto()
    HAS_VALID_EMAIL = auto()
    HAS_PHONE = auto()
    IS_PUBLIC = auto()
    IS_PRIVATE = auto()
    IS_DEFAULT = auto()
    IS_REQUIRED = auto()
    IS_EDITABLE = auto()
    IS_DELETABLE = auto()
    IS_VALID_STATE = auto()
    HAS_VALID_STATUS = auto()
    IS_SYSTEM_DEFINED = auto()


def read_property(subject: Any, name: str) -> Any:
    """Read a property from an object or mapping. Missing reads as None."""
    if subject is None:
        return None
    if isinstance(subject, Mapping):
        return subject.get(name)
    return getattr(subject, name, None)


class GeneralValidator(SubjectValidator[SubjectT, GeneralStates], Generic[SubjectT]):
    """Validator for GeneralStates over an arbitrary subject type.

    Every handler resolves the subject by id before running. An absent
    subject fails with the handler's message. The leaf helpers
    (validate_property_exists and friends) may be overridden to change how
    a whole family of checks behaves.
    """

    kind_type = GeneralStates

    @condition_handler(GeneralStates.HAS_ID)
    def validate_has_id(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_property_exists(f, "id", "Id is missing")

    @condition_handler(GeneralStates.HAS_NAME)
    def validate_has_name(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_property_exists(f, "name", "Name is missing")

    @condition_handler(GeneralStates.IS_ENABLED)
    def validate_is_enabled(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_bool_property(f, "is_enabled", True, "Object is not enabled")

    @condition_handler(GeneralStates.IS_DISABLED)
    def validate_is_disabled(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_bool_property(f, "is_enabled", False, "Object is not disabled")

    @condition_handler(GeneralStates.HAS_OWNER)
    def validate_has_owner(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_property_exists(f, "owner_id", "Owner is missing")

    @condition_handler(GeneralStates.IS_LINKED_TO_ENTITY)
    def validate_is_linked_to_entity(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_collection_not_empty(
            f, "linked_entities", "Not linked to any entity"
        )

    @condition_handler(GeneralStates.IS_ACTIVE)
    def validate_is_active(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_bool_property(f, "is_active", True, "Object is not active")

    @condition_handler(GeneralStates.IS_ARCHIVED)
    def validate_is_archived(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_bool_property(f, "is_archived", True, "Object is not archived")

    @condition_handler(GeneralStates.HAS_CREATED_DATE)
    def validate_has_created_date(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_property_exists(f, "created_at", "Missing created date")

    @condition_handler(GeneralStates.HAS_UPDATED_DATE)
    def validate_has_updated_date(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_property_exists(f, "updated_at", "Missing updated date")

    @condition_handler(GeneralStates.HAS_VALID_URI)
    def validate_has_valid_uri(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_uri(f, "uri", "Invalid URI")

    @condition_handler(GeneralStates.HAS_DESCRIPTION)
    def validate_has_description(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_property_exists(f, "description", "Description is missing")

    @condition_handler(GeneralStates.HAS_CATEGORY)
    def validate_has_category(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_property_exists(f, "category", "Category is missing")

    @condition_handler(GeneralStates.IS_VERIFIED)
    def validate_is_verified(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_bool_property(f, "is_verified", True, "Object is not verified")

    @condition_handler(GeneralStates.HAS_TAGS)
    def validate_has_tags(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_collection_not_empty(f, "tags", "Tags are missing")

    @condition_handler(GeneralStates.HAS_PERMISSIONS)
    def validate_has_permissions(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_collection_not_empty(f, "permissions", "Permissions are missing")

    @condition_handler(GeneralStates.IS_IN_USER_CLAIMS)
    def validate_is_in_user_claims(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_property_exists(f, "user_claims", "Not in user claims")

    @condition_handler(GeneralStates.HAS_PARENT)
    def validate_has_parent(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_property_exists(f, "parent_id", "Missing parent")

    @condition_handler(GeneralStates.HAS_CHILDREN)
    def validate_has_children(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_collection_not_empty(f, "children", "No children found")

    @condition_handler(GeneralStates.HAS_VALID_EMAIL)
    def validate_has_valid_email(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_email(f, "email", "Invalid email")

    @condition_handler(GeneralStates.HAS_PHONE)
    def validate_has_phone(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_property_exists(f, "phone", "Phone is missing")

    @condition_handler(GeneralStates.IS_PUBLIC)
    def validate_is_public(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_bool_property(f, "is_public", True, "Not public")

    @condition_handler(GeneralStates.IS_PRIVATE)
    def validate_is_private(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_bool_property(f, "is_private", True, "Not private")

    @condition_handler(GeneralStates.IS_DEFAULT)
    def validate_is_default(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_bool_property(f, "is_default", True, "Not default")

    @condition_handler(GeneralStates.IS_REQUIRED)
    def validate_is_required(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_bool_property(f, "is_required", True, "Not required")

    @condition_handler(GeneralStates.IS_EDITABLE)
    def validate_is_editable(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_bool_property(f, "is_editable", True, "Not editable")

    @condition_handler(GeneralStates.IS_DELETABLE)
    def validate_is_deletable(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_bool_property(f, "is_deletable", True, "Not deletable")

    @condition_handler(GeneralStates.IS_VALID_STATE)
    def validate_is_valid_state(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_property_exists(f, "state", "Invalid state")

    @condition_handler(GeneralStates.HAS_VALID_STATUS)
    def validate_has_valid_status(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_property_exists(f, "status", "Invalid status")

    @condition_handler(GeneralStates.IS_SYSTEM_DEFINED)
    def validate_is_system_defined(self, f: DataFilter[str, Any]) -> ConditionResult:
        return self.validate_bool_property(f, "is_system", True, "Not system defined")

    def validate_property_exists(
        self, f: DataFilter, property_name: str, error_message: str
    ) -> ConditionResult:
        """Pass with the property's value if it is present and not None."""
        value = read_property(f.subject, property_name)
        if value is not None:
            return ConditionResult.to_success(value)
        return ConditionResult.to_failure(None, error_message)

    def validate_bool_property(
        self, f: DataFilter, property_name: str, expected: bool, error_message: str
    ) -> ConditionResult:
        """Pass if the property is a bool equal to expected.

        Non-bool values are reported as None in the failure result.
        """
        value = read_property(f.subject, property_name)
        if not isinstance(value, bool):
            value = None
        if value is expected:
            return ConditionResult.to_success(value)
        return ConditionResult.to_failure(value, error_message)

    def validate_collection_not_empty(
        self, f: DataFilter, property_name: str, error_message: str
    ) -> ConditionResult:
        """Pass with the collection if the property holds at least one item."""
        value = read_property(f.subject, property_name)
        if isinstance(value, Collection) and len(value) > 0:
            return ConditionResult.to_success(value)
        return ConditionResult.to_failure(None, error_message)

    def validate_uri(
        self, f: DataFilter, property_name: str, error_message: str
    ) -> ConditionResult:
        """Pass if the property's string form is an absolute URL."""
        value = read_property(f.subject, property_name)
        if value is None:
            return ConditionResult.to_failure(None, error_message)
        text = str(value)
        try:
            _URL_ADAPTER.validate_python(text)
        except ValidationError:
            return ConditionResult.to_failure(text, error_message)
        return ConditionResult.to_success(text)

    def validate_email(
        self, f: DataFilter, property_name: str, error_message: str
    ) -> ConditionResult:
        """Pass if the property's string form looks like an email address."""
        value = read_property(f.subject, property_name)
        text = None if value is None else str(value)
        if text and _EMAIL_PATTERN.fullmatch(text):
            return ConditionResult.to_success(text)
        return ConditionResult.to_failure(text, error_message)
