"""Authentication session entity."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from .....config.logging_config import mask_secret
from .....core.entities import EntityIdentity, IdentifiedEntity
from .....core.exceptions import ValidationError
from .....utils import ensure_utc, format_iso, optional_utc, utc_now
from ..value_objects import SessionState


@dataclass(frozen=True, eq=False)
class Session(IdentifiedEntity):
    """Opaque-token session for one user inside one organization.

    Sessions are never mutated in place: revocation and refresh return a
    new instance that the caller persists.
    """

    identity: EntityIdentity
    user_id: str
    token: str = field(repr=False)
    expires_at: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    revoked_at: Optional[datetime] = None
    revoke_reason: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValidationError("Session user_id cannot be empty")
        if not self.token:
            raise ValidationError("Session token cannot be empty")
        object.__setattr__(self, "expires_at", ensure_utc(self.expires_at))
        object.__setattr__(self, "revoked_at", optional_utc(self.revoked_at))
        object.__setattr__(self, "created_at", ensure_utc(self.created_at))
        object.__setattr__(self, "updated_at", ensure_utc(self.updated_at))

    @classmethod
    def issue(
        cls,
        user_id: str,
        org_id: str,
        token: str,
        ttl: timedelta,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "Session":
        if ttl <= timedelta(0):
            raise ValidationError("Session TTL must be positive")
        moment = ensure_utc(now) if now else utc_now()
        return cls(
            identity=EntityIdentity.new(org_id),
            user_id=user_id,
            token=token,
            expires_at=moment + ttl,
            ip_address=ip_address,
            user_agent=user_agent,
            created_at=moment,
            updated_at=moment,
        )

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    @property
    def token_hint(self) -> str:
        """Masked token safe for logs and events."""
        return mask_secret(self.token)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utc_now()) >= self.expires_at

    def is_active(self, now: Optional[datetime] = None) -> bool:
        """True iff ``now < expires_at`` and the session was not revoked."""
        return not self.is_revoked and not self.is_expired(now)

    def state(self, now: Optional[datetime] = None) -> SessionState:
        if self.is_revoked:
            return SessionState.REVOKED
        if self.is_expired(now):
            return SessionState.EXPIRED
        return SessionState.ACTIVE

    def seconds_until_expiry(self, now: Optional[datetime] = None) -> int:
        delta = self.expires_at - (now or utc_now())
        return max(0, int(delta.total_seconds()))

    def revoked(self, reason: str = "manual_revocation", now: Optional[datetime] = None) -> "Session":
        """Return a revoked copy. Revoking twice keeps the first revocation."""
        if self.is_revoked:
            return self
        moment = ensure_utc(now) if now else utc_now()
        return replace(self, revoked_at=moment, revoke_reason=reason, updated_at=max(moment, self.updated_at))

    def refreshed(self, ttl: timedelta, now: Optional[datetime] = None) -> "Session":
        """Return a copy whose deadline is pushed to ``now + ttl``."""
        moment = ensure_utc(now) if now else utc_now()
        return replace(self, expires_at=moment + ttl, updated_at=max(moment, self.updated_at))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "org_id": self.org_id,
            "user_id": self.user_id,
            "token_hint": self.token_hint,
            "expires_at": format_iso(self.expires_at),
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "revoked_at": format_iso(self.revoked_at),
            "revoke_reason": self.revoke_reason,
            "created_at": format_iso(self.created_at),
        }

    def __repr__(self) -> str:
        return f"Session(id={self.id!r}, org_id={self.org_id!r}, user_id={self.user_id!r}, token={self.token_hint})"
