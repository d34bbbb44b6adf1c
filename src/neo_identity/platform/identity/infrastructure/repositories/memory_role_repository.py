"""In-memory RoleRepository."""

from typing import Iterable, List, Optional, Tuple

from .....core.exceptions import DuplicateIdentityError
from ...core.entities import Permission, Role
from .memory_base import InMemoryRepository
from .memory_permission_repository import InMemoryPermissionRepository


class InMemoryRoleRepository(InMemoryRepository[Role]):
    entity_type = "Role"

    def __init__(self, permission_repository: Optional[InMemoryPermissionRepository] = None) -> None:
        super().__init__()
        self._permissions = permission_repository

    def _check_unique(self, role: Role) -> None:
        for other in self._iter(lambda item: item.org_id == role.org_id and item.id != role.id):
            if other.name == role.name:
                raise DuplicateIdentityError("Role", "name", role.name, role.org_id)

    async def find_by_name(self, name: str, org_id: str) -> Optional[Role]:
        async with self._lock:
            matches = self._select(lambda item: item.org_id == org_id and item.name == name)
        return matches[0] if matches else None

    async def find_by_ids(self, role_ids: Iterable[str], org_id: str) -> List[Role]:
        wanted = set(role_ids)
        async with self._lock:
            return self._select(lambda item: item.org_id == org_id and item.id in wanted)

    async def find_active_roles(self, org_id: str) -> List[Role]:
        async with self._lock:
            return self._select(lambda item: item.org_id == org_id and item.is_active)

    async def find_roles_with_permissions(
        self, role_ids: Iterable[str], org_id: str
    ) -> List[Tuple[Role, List[Permission]]]:
        roles = await self.find_by_ids(role_ids, org_id)
        result = []
        for role in roles:
            permissions: List[Permission] = []
            if self._permissions is not None and role.permission_ids:
                permissions = await self._permissions.find_by_ids(role.permission_ids, org_id)
            result.append((role, permissions))
        return result
