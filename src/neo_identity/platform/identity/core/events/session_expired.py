"""Session expiration event."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from .....core.events import DomainEvent
from .....utils import ensure_utc


@dataclass(frozen=True, kw_only=True)
class SessionExpired(DomainEvent):
    """Raised when a session is detected as past its deadline.

    ``occurred_on`` is the time of detection; the deadline itself is
    carried separately in ``expires_at``. Explicit revocation never raises
    this event.
    """

    EVENT_NAME = "SessionExpired"

    session_id: str
    user_id: str
    org_id: str
    token_hint: str
    expires_at: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "expires_at", ensure_utc(self.expires_at))

    @property
    def detection_lag_seconds(self) -> float:
        """Seconds between the deadline and its detection."""
        return (self.occurred_on - self.expires_at).total_seconds()

    def payload(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "user_id": self.user_id,
            "org_id": self.org_id,
            "token_hint": self.token_hint,
            "expires_at": self.expires_at.isoformat(),
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
        }
