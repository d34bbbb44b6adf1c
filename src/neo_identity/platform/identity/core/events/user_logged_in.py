"""Successful login event."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .....core.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class UserLoggedIn(DomainEvent):
    """Raised when a user authenticates successfully.

    ``occurred_on`` is the login timestamp recorded on the user.
    """

    EVENT_NAME = "UserLoggedIn"

    user_id: str
    org_id: str
    email: str
    username: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    def payload(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "org_id": self.org_id,
            "email": self.email,
            "username": self.username,
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
        }
