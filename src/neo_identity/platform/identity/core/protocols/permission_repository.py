"""Permission repository protocol contract."""

from typing import Iterable, List, Optional, Protocol, runtime_checkable

from ..entities import Permission


@runtime_checkable
class PermissionRepository(Protocol):
    """Persistence port for permissions.

    System permissions have an empty ``org_id`` and are visible to every
    organization. Permission names are globally unique.
    """

    async def find_by_id(self, permission_id: str, org_id: str) -> Optional[Permission]:
        """Find a permission visible to ``org_id`` (system or the org's own)."""
        ...

    async def find_all(self, org_id: str) -> List[Permission]:
        """System permissions plus custom permissions of ``org_id``."""
        ...

    async def exists(self, permission_id: str, org_id: str) -> bool:
        ...

    async def save(self, permission: Permission) -> Permission:
        """Insert or update a permission.

        Raises:
            DuplicateIdentityError: If the name is already used anywhere
        """
        ...

    async def delete(self, permission_id: str, org_id: str) -> bool:
        ...

    async def find_by_name(self, name: str) -> Optional[Permission]:
        """Global lookup; names are unique across organizations."""
        ...

    async def find_by_ids(self, permission_ids: Iterable[str], org_id: str) -> List[Permission]:
        ...

    async def find_system_permissions(self) -> List[Permission]:
        ...

    async def find_custom_permissions(self, org_id: str) -> List[Permission]:
        ...
