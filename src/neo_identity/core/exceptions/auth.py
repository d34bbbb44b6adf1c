"""Authentication exceptions for neo-identity."""

from typing import Optional

from .base import IdentityError


class AuthenticationError(IdentityError):
    """Base exception for authentication failures."""
    pass


class UserInactiveError(AuthenticationError):
    """Raised when a user whose status or lock forbids login tries to authenticate."""

    def __init__(self, user_id: str, status: str):
        super().__init__(
            "User is not allowed to log in",
            details={"user_id": user_id, "status": status},
        )
        self.user_id = user_id
        self.status = status


class SessionInvalid(AuthenticationError):
    """Raised when a session token does not resolve to an active session."""

    def __init__(self, reason: str, session_id: Optional[str] = None):
        super().__init__("Session is invalid", details={"reason": reason, "session_id": session_id})
        self.reason = reason
        self.session_id = session_id

    @classmethod
    def not_found(cls) -> "SessionInvalid":
        return cls("not_found")

    @classmethod
    def expired(cls, session_id: str) -> "SessionInvalid":
        return cls("expired", session_id)

    @classmethod
    def revoked(cls, session_id: str) -> "SessionInvalid":
        return cls("revoked", session_id)


class OtpVerificationFailed(AuthenticationError):
    """Base class for OTP verification failures.

    Every subclass exposes the same message and error code so that callers
    cannot tell which check failed. The concrete class is for internal logging.
    """

    PUBLIC_MESSAGE = "Invalid or expired verification code"
    ERROR_CODE = "OTP_VERIFICATION_FAILED"

    def __init__(self):
        super().__init__(self.PUBLIC_MESSAGE, error_code=self.ERROR_CODE)

    @property
    def reason(self) -> str:
        return self.__class__.__name__


class OtpNotFound(OtpVerificationFailed):
    """No OTP exists for the (email, type, org) tuple."""
    pass


class OtpExpired(OtpVerificationFailed):
    """The OTP's expiry time has passed."""
    pass


class OtpAlreadyUsed(OtpVerificationFailed):
    """The OTP was already consumed."""
    pass


class OtpMismatch(OtpVerificationFailed):
    """The supplied code differs from the stored one."""
    pass


class OtpAttemptsExceeded(OtpVerificationFailed):
    """Too many wrong codes were tried against this OTP."""
    pass


class OtpRequestThrottled(AuthenticationError):
    """Raised when an address asks for more OTPs than the request window allows."""

    def __init__(self, email: str, otp_type: str, retry_after_seconds: int):
        super().__init__(
            "Too many verification codes requested",
            error_code="OTP_REQUEST_THROTTLED",
            details={"email": email, "type": otp_type, "retry_after_seconds": retry_after_seconds},
        )
        self.retry_after_seconds = retry_after_seconds
