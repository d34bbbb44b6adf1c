"""User registration event."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .....core.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class UserRegistered(DomainEvent):
    """Raised once when a user account is created."""

    EVENT_NAME = "UserRegistered"

    user_id: str
    org_id: str
    email: str
    username: str
    name: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    status: str = "ACTIVE"

    def payload(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "org_id": self.org_id,
            "email": self.email,
            "username": self.username,
            "name": self.name,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "status": self.status,
        }
