"""Permission resolution engine.

Effective permissions are the union of permissions attached to every
active role a user holds inside their own organization. System
permissions are usable by every organization; custom permissions only
by the organization that owns them. Resolution is pure: it never
caches and never raises for a missing permission.
"""

import logging
from typing import Iterable, List, Set

from ...core.entities import Permission, Role, User
from ...core.protocols import PermissionRepository, RoleRepository
from ...core.value_objects import EffectivePermissions

logger = logging.getLogger(__name__)


def granting_roles(user: User, roles: Iterable[Role]) -> List[Role]:
    """Roles that contribute permissions: assigned, same org, active."""
    return [
        role
        for role in roles
        if role.id in user.role_ids and role.org_id == user.org_id and role.is_active
    ]


def resolve_effective_permissions(
    user: User,
    roles: Iterable[Role],
    permissions: Iterable[Permission],
) -> EffectivePermissions:
    """Compute the effective permission set from already-loaded state."""
    permission_ids: Set[str] = set()
    for role in granting_roles(user, roles):
        permission_ids.update(role.permission_ids)

    names: Set[str] = set()
    scopes: Set[str] = set()
    for permission in permissions:
        if permission.id in permission_ids and permission.is_available_to(user.org_id):
            names.add(permission.name)
            scopes.add(permission.full_permission)

    return EffectivePermissions(names=frozenset(names), scopes=frozenset(scopes))


class PermissionResolver:
    """Loads a user's roles and permissions and resolves them."""

    def __init__(self, role_repository: RoleRepository, permission_repository: PermissionRepository):
        self._roles = role_repository
        self._permissions = permission_repository

    async def resolve(self, user: User) -> EffectivePermissions:
        if not user.role_ids:
            return EffectivePermissions.empty()

        roles = await self._roles.find_by_ids(user.role_ids, user.org_id)
        permission_ids: Set[str] = set()
        for role in granting_roles(user, roles):
            permission_ids.update(role.permission_ids)
        if not permission_ids:
            return EffectivePermissions.empty()

        permissions = await self._permissions.find_by_ids(permission_ids, user.org_id)
        resolved = resolve_effective_permissions(user, roles, permissions)
        logger.debug(f"Resolved {len(resolved)} permissions for user {user.id} in org {user.org_id}")
        return resolved

    async def has_permission(self, user: User, permission_name: str) -> bool:
        return (await self.resolve(user)).has(permission_name)

    async def has_any_permission(self, user: User, permission_names: Iterable[str]) -> bool:
        return (await self.resolve(user)).has_any(permission_names)

    async def has_all_permissions(self, user: User, permission_names: Iterable[str]) -> bool:
        return (await self.resolve(user)).has_all(permission_names)

    async def has_module_access(self, user: User, module: str) -> bool:
        return (await self.resolve(user)).has_module_access(module)

    async def can_perform(self, user: User, module: str, action: str) -> bool:
        return (await self.resolve(user)).can_perform(module, action)
