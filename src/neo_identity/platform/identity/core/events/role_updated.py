"""Role update event."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .....core.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class RoleUpdated(DomainEvent):
    """Raised on any change to a role, including its active flag and permission set.

    Holders of a cached effective-permission set for the role's organization
    must re-resolve after this event.
    """

    EVENT_NAME = "RoleUpdated"

    role_id: str
    org_id: str
    role_name: str
    description: Optional[str] = None
    is_active: bool = True
    permission_ids: Tuple[str, ...] = ()

    def payload(self) -> Dict[str, Any]:
        return {
            "role_id": self.role_id,
            "org_id": self.org_id,
            "role_name": self.role_name,
            "description": self.description,
            "is_active": self.is_active,
            "permission_ids": list(self.permission_ids),
        }
