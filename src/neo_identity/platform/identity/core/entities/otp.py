"""One-time passcode entity."""

import hmac
import secrets
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .....core.entities import EntityIdentity, IdentifiedEntity
from .....core.exceptions import InvalidStateError, ValidationError
from .....utils import ensure_utc, minutes_from, utc_now
from ..value_objects import Email, OtpState, OtpType

OTP_CODE_LENGTH = 6
DEFAULT_OTP_TTL_MINUTES = 15
DEFAULT_OTP_MAX_ATTEMPTS = 3


def generate_otp_code() -> str:
    """Random 6-digit code in 100000-999999."""
    return str(secrets.randbelow(900000) + 100000)


@dataclass(eq=False)
class Otp(IdentifiedEntity):
    identity: EntityIdentity
    email: Email
    type: OtpType
    code: str = field(repr=False)
    expires_at: datetime
    used: bool = False
    superseded: bool = False
    attempts: int = 0
    max_attempts: int = DEFAULT_OTP_MAX_ATTEMPTS
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.email = Email.create(self.email)
        self.type = OtpType.create(self.type)
        if not isinstance(self.code, str) or len(self.code) != OTP_CODE_LENGTH or not self.code.isdigit():
            raise ValidationError("OTP code must be a 6-digit string")
        if self.max_attempts < 1:
            raise ValidationError("OTP max_attempts must be at least 1")
        self.expires_at = ensure_utc(self.expires_at)
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at)

    @classmethod
    def issue(
        cls,
        email: object,
        otp_type: object,
        org_id: str,
        ttl_minutes: float = DEFAULT_OTP_TTL_MINUTES,
        max_attempts: int = DEFAULT_OTP_MAX_ATTEMPTS,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "Otp":
        if ttl_minutes <= 0:
            raise ValidationError("OTP TTL must be positive")
        moment = ensure_utc(now) if now else utc_now()
        return cls(
            identity=EntityIdentity.new(org_id),
            email=Email.create(email),
            type=OtpType.create(otp_type),
            code=generate_otp_code(),
            expires_at=minutes_from(moment, ttl_minutes),
            max_attempts=max_attempts,
            ip_address=ip_address,
            user_agent=user_agent,
            created_at=moment,
            updated_at=moment,
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utc_now()) >= self.expires_at

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """Unused, not superseded and not yet expired."""
        return not self.used and not self.superseded and not self.is_expired(now)

    @property
    def attempts_exhausted(self) -> bool:
        return self.attempts >= self.max_attempts

    def matches(self, code: object) -> bool:
        """Constant-time comparison against the stored code."""
        return hmac.compare_digest(str(code).strip().encode(), self.code.encode())

    def state(self, now: Optional[datetime] = None) -> OtpState:
        if self.used:
            return OtpState.VERIFIED
        if self.superseded:
            return OtpState.SUPERSEDED
        if self.is_expired(now):
            return OtpState.EXPIRED
        return OtpState.ISSUED

    def mark_used(self, now: Optional[datetime] = None) -> None:
        if self.used:
            raise InvalidStateError("OTP already used", details={"otp_id": self.id})
        self.used = True
        self._touch(now)

    def supersede(self, now: Optional[datetime] = None) -> bool:
        """Invalidate in favour of a newer OTP. Returns False if already settled."""
        if self.used or self.superseded:
            return False
        self.superseded = True
        self._touch(now)
        return True

    def record_failed_attempt(self, now: Optional[datetime] = None) -> int:
        self.attempts += 1
        self._touch(now)
        return self.attempts

    def __repr__(self) -> str:
        return f"Otp(id={self.id!r}, org_id={self.org_id!r}, email={self.email.value!r}, type={self.type.value}, state={self.state().value})"
