"""Domain exceptions for neo-identity.

Validation, lookup, uniqueness and state-transition failures.
"""

from typing import Optional

from .base import IdentityError


# Validation Errors
class ValidationError(IdentityError):
    """Raised when a value object receives malformed input."""
    pass


class InvalidEmailError(ValidationError):
    """Raised when an email address fails format validation."""

    def __init__(self, message: str = "Invalid email format", value: Optional[str] = None):
        super().__init__(message, details={"value": value} if value is not None else None)


class InvalidStatusError(ValidationError):
    """Raised when a user status is not one of the known values."""

    def __init__(self, value: object):
        super().__init__(f"Invalid user status: {value}", details={"value": str(value)})


# Lookup Errors
class EntityNotFoundError(IdentityError):
    """Raised when no entity exists for the given id within an organization."""

    def __init__(self, entity_type: str, entity_id: str, org_id: Optional[str] = None):
        super().__init__(
            f"{entity_type} not found: {entity_id}",
            details={"entity_type": entity_type, "entity_id": entity_id, "org_id": org_id},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.org_id = org_id


# Conflict Errors
class DuplicateIdentityError(IdentityError):
    """Raised when a uniqueness constraint is violated at the persistence boundary."""

    def __init__(self, entity_type: str, field: str, value: str, org_id: Optional[str] = None):
        scope = f" in organization {org_id}" if org_id else ""
        super().__init__(
            f"{entity_type} with {field} '{value}' already exists{scope}",
            details={"entity_type": entity_type, "field": field, "value": value, "org_id": org_id},
        )
        self.entity_type = entity_type
        self.field = field
        self.value = value
        self.org_id = org_id


# State Errors
class InvalidStateError(IdentityError):
    """Raised when an operation is not allowed in the entity's current state."""
    pass
