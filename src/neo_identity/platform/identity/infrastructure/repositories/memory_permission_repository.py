"""In-memory PermissionRepository."""

from typing import Iterable, List, Optional

from .....core.entities import SYSTEM_ORG_ID
from .....core.exceptions import DuplicateIdentityError
from ...core.entities import Permission
from .memory_base import InMemoryRepository


class InMemoryPermissionRepository(InMemoryRepository[Permission]):
    """System permissions are stored under the empty org_id and visible to all orgs."""

    entity_type = "Permission"

    def _check_unique(self, permission: Permission) -> None:
        for other in self._iter(lambda item: not (item.org_id == permission.org_id and item.id == permission.id)):
            if other.name == permission.name:
                raise DuplicateIdentityError("Permission", "name", permission.name)

    async def find_by_id(self, permission_id: str, org_id: str) -> Optional[Permission]:
        async with self._lock:
            item = self._items.get((org_id, permission_id)) or self._items.get((SYSTEM_ORG_ID, permission_id))
            return self._snapshot(item) if item is not None else None

    async def find_all(self, org_id: str) -> List[Permission]:
        async with self._lock:
            return self._select(lambda item: item.is_available_to(org_id))

    async def exists(self, permission_id: str, org_id: str) -> bool:
        async with self._lock:
            return (org_id, permission_id) in self._items or (SYSTEM_ORG_ID, permission_id) in self._items

    async def find_by_name(self, name: str) -> Optional[Permission]:
        async with self._lock:
            matches = self._select(lambda item: item.name == name)
        return matches[0] if matches else None

    async def find_by_ids(self, permission_ids: Iterable[str], org_id: str) -> List[Permission]:
        wanted = set(permission_ids)
        async with self._lock:
            return self._select(lambda item: item.id in wanted and item.is_available_to(org_id))

    async def find_system_permissions(self) -> List[Permission]:
        async with self._lock:
            return self._select(lambda item: item.is_system)

    async def find_custom_permissions(self, org_id: str) -> List[Permission]:
        async with self._lock:
            return self._select(lambda item: not item.is_system and item.org_id == org_id)
