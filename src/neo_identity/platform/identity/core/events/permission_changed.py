"""Permission change event."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .....core.events import DomainEvent


class PermissionChangeType(str, Enum):
    CREATED = "CREATED"
    UPDATED = "UPDATED"
    DELETED = "DELETED"
    GRANTED = "GRANTED"   # attached to a role
    REVOKED = "REVOKED"   # detached from a role


@dataclass(frozen=True, kw_only=True)
class PermissionChanged(DomainEvent):
    """Raised when a permission is defined, edited, removed, or (re)assigned to a role.

    ``org_id`` is the organization whose authorization state changed: the
    role's organization for GRANTED/REVOKED, the permission's own
    organization otherwise (empty for system permissions).
    """

    EVENT_NAME = "PermissionChanged"

    permission_id: str
    org_id: str
    permission_name: str
    module: str
    action: str
    change_type: PermissionChangeType
    changed_by: str
    role_id: Optional[str] = None

    @property
    def is_system_wide(self) -> bool:
        return self.org_id == ""

    def payload(self) -> Dict[str, Any]:
        return {
            "permission_id": self.permission_id,
            "org_id": self.org_id,
            "permission_name": self.permission_name,
            "module": self.module,
            "action": self.action,
            "change_type": self.change_type.value,
            "changed_by": self.changed_by,
            "role_id": self.role_id,
        }
