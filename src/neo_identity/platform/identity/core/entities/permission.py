"""Permission entity.

A permission with an empty ``org_id`` is a system permission available to
every organization; otherwise it is a custom permission visible only
inside its owning organization.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .....core.entities import SYSTEM_ORG_ID, EntityIdentity, EventRecorder, IdentifiedEntity
from .....core.exceptions import ValidationError
from .....utils import ensure_utc, utc_now
from ..events import PermissionChanged, PermissionChangeType


@dataclass(eq=False)
class Permission(IdentifiedEntity, EventRecorder):
    identity: EntityIdentity
    name: str
    module: str
    action: str
    description: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        for label, value in (("name", self.name), ("module", self.module), ("action", self.action)):
            if not value or not str(value).strip():
                raise ValidationError(f"Permission {label} cannot be empty")
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at)

    @classmethod
    def create(
        cls,
        name: str,
        module: str,
        action: str,
        org_id: str = SYSTEM_ORG_ID,
        description: Optional[str] = None,
        changed_by: str = "system",
        now: Optional[datetime] = None,
    ) -> "Permission":
        moment = ensure_utc(now) if now else utc_now()
        permission = cls(
            identity=EntityIdentity.new(org_id),
            name=name,
            module=module,
            action=action,
            description=description,
            created_at=moment,
            updated_at=moment,
        )
        permission._record_change(PermissionChangeType.CREATED, changed_by, moment)
        return permission

    @property
    def is_system(self) -> bool:
        return self.identity.is_system

    @property
    def full_permission(self) -> str:
        return f"{self.module}:{self.action}"

    def is_available_to(self, org_id: str) -> bool:
        """System permissions reach every organization; custom ones only their own."""
        return self.is_system or self.org_id == org_id

    def is_module_permission(self, module: str) -> bool:
        return self.module == module

    def is_action_permission(self, action: str) -> bool:
        return self.action == action

    def update(
        self,
        changed_by: str,
        name: Optional[str] = None,
        module: Optional[str] = None,
        action: Optional[str] = None,
        description: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> PermissionChanged:
        moment = ensure_utc(now) if now else utc_now()
        if name is not None:
            self.name = name
        if module is not None:
            self.module = module
        if action is not None:
            self.action = action
        if description is not None:
            self.description = description
        self._touch(moment)
        return self._record_change(PermissionChangeType.UPDATED, changed_by, self.updated_at)

    def record_deletion(self, changed_by: str, now: Optional[datetime] = None) -> PermissionChanged:
        """Raise the DELETED event; removing the row is the repository's job."""
        moment = ensure_utc(now) if now else utc_now()
        return self._record_change(PermissionChangeType.DELETED, changed_by, moment)

    def _record_change(self, change_type: PermissionChangeType, changed_by: str, moment: datetime) -> PermissionChanged:
        event = PermissionChanged(
            occurred_on=moment,
            permission_id=self.id,
            org_id=self.org_id,
            permission_name=self.name,
            module=self.module,
            action=self.action,
            change_type=change_type,
            changed_by=changed_by,
        )
        self._record_event(event)
        return event

    def __repr__(self) -> str:
        scope = "system" if self.is_system else self.org_id
        return f"Permission({self.name!r}, {self.full_permission}, scope={scope})"
