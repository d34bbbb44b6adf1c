"""Role aggregate."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Iterable, Optional

from .....core.entities import EntityIdentity, EventRecorder, IdentifiedEntity
from .....core.exceptions import InvalidStateError, ValidationError
from .....utils import ensure_utc, utc_now
from ..events import PermissionChanged, PermissionChangeType, RoleCreated, RoleUpdated
from .permission import Permission


@dataclass(eq=False)
class Role(IdentifiedEntity, EventRecorder):
    """Named bundle of permission IDs inside one organization.

    An inactive role grants nothing, whatever its permission set says.
    """

    identity: EntityIdentity
    name: str
    description: Optional[str] = None
    is_active: bool = True
    permission_ids: FrozenSet[str] = frozenset()
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Role name cannot be empty")
        self.permission_ids = frozenset(self.permission_ids)
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at)

    @classmethod
    def create(
        cls,
        name: str,
        org_id: str,
        description: Optional[str] = None,
        is_active: bool = True,
        permission_ids: Iterable[str] = (),
        now: Optional[datetime] = None,
    ) -> "Role":
        moment = ensure_utc(now) if now else utc_now()
        role = cls(
            identity=EntityIdentity.new(org_id),
            name=name.strip() if isinstance(name, str) else name,
            description=description,
            is_active=is_active,
            permission_ids=frozenset(permission_ids),
            created_at=moment,
            updated_at=moment,
        )
        role._record_event(
            RoleCreated(
                occurred_on=role.created_at,
                role_id=role.id,
                org_id=role.org_id,
                role_name=role.name,
                description=role.description,
                is_active=role.is_active,
                permission_ids=tuple(sorted(role.permission_ids)),
            )
        )
        return role

    def update(
        self,
        name: Optional[str] = None,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
        now: Optional[datetime] = None,
    ) -> RoleUpdated:
        if name is not None:
            if not name.strip():
                raise ValidationError("Role name cannot be empty")
            self.name = name.strip()
        if description is not None:
            self.description = description
        if is_active is not None:
            self.is_active = is_active
        return self._updated(now)

    def activate(self, now: Optional[datetime] = None) -> RoleUpdated:
        self.is_active = True
        return self._updated(now)

    def deactivate(self, now: Optional[datetime] = None) -> RoleUpdated:
        self.is_active = False
        return self._updated(now)

    def has_permission(self, permission_id: str) -> bool:
        return permission_id in self.permission_ids

    def grant_permission(self, permission: Permission, changed_by: str, now: Optional[datetime] = None) -> bool:
        """Attach a permission. Returns False when it was already attached.

        Raises:
            InvalidStateError: If the permission belongs to another organization
        """
        if not permission.is_available_to(self.org_id):
            raise InvalidStateError(
                f"Permission {permission.name} is not available to organization {self.org_id}",
                details={"permission_id": permission.id, "org_id": self.org_id},
            )
        if permission.id in self.permission_ids:
            return False
        self.permission_ids = self.permission_ids | {permission.id}
        self._permission_changed(permission, PermissionChangeType.GRANTED, changed_by, now)
        return True

    def revoke_permission(self, permission: Permission, changed_by: str, now: Optional[datetime] = None) -> bool:
        """Detach a permission. Returns False when it was not attached."""
        if permission.id not in self.permission_ids:
            return False
        self.permission_ids = self.permission_ids - {permission.id}
        self._permission_changed(permission, PermissionChangeType.REVOKED, changed_by, now)
        return True

    def _permission_changed(
        self,
        permission: Permission,
        change_type: PermissionChangeType,
        changed_by: str,
        now: Optional[datetime],
    ) -> None:
        moment = ensure_utc(now) if now else utc_now()
        self._touch(moment)
        self._record_event(
            PermissionChanged(
                occurred_on=self.updated_at,
                permission_id=permission.id,
                org_id=self.org_id,
                permission_name=permission.name,
                module=permission.module,
                action=permission.action,
                change_type=change_type,
                changed_by=changed_by,
                role_id=self.id,
            )
        )
        self._updated(moment)

    def _updated(self, now: Optional[datetime]) -> RoleUpdated:
        self._touch(ensure_utc(now) if now else None)
        event = RoleUpdated(
            occurred_on=self.updated_at,
            role_id=self.id,
            org_id=self.org_id,
            role_name=self.name,
            description=self.description,
            is_active=self.is_active,
            permission_ids=tuple(sorted(self.permission_ids)),
        )
        self._record_event(event)
        return event

    def __repr__(self) -> str:
        state = "active" if self.is_active else "inactive"
        return f"Role({self.name!r}, org_id={self.org_id!r}, {state}, permissions={len(self.permission_ids)})"
