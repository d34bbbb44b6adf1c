"""Exceptions module for neo-identity.

Error taxonomy shared by value objects, entities and managers.
"""

from .base import IdentityError, create_error_response
from .domain import (
    ValidationError,
    InvalidEmailError,
    InvalidStatusError,
    EntityNotFoundError,
    DuplicateIdentityError,
    InvalidStateError,
)
from .auth import (
    AuthenticationError,
    UserInactiveError,
    SessionInvalid,
    OtpVerificationFailed,
    OtpNotFound,
    OtpExpired,
    OtpAlreadyUsed,
    OtpMismatch,
    OtpAttemptsExceeded,
    OtpRequestThrottled,
)

__all__ = [
    "IdentityError",
    "create_error_response",
    "ValidationError",
    "InvalidEmailError",
    "InvalidStatusError",
    "EntityNotFoundError",
    "DuplicateIdentityError",
    "InvalidStateError",
    "AuthenticationError",
    "UserInactiveError",
    "SessionInvalid",
    "OtpVerificationFailed",
    "OtpNotFound",
    "OtpExpired",
    "OtpAlreadyUsed",
    "OtpMismatch",
    "OtpAttemptsExceeded",
    "OtpRequestThrottled",
]
