"""Role repository protocol contract."""

from typing import Iterable, List, Optional, Protocol, Tuple, runtime_checkable

from ..entities import Permission, Role


@runtime_checkable
class RoleRepository(Protocol):
    """Persistence port for Role aggregates, scoped by organization.

    Role names are unique within an organization.
    """

    async def find_by_id(self, role_id: str, org_id: str) -> Optional[Role]:
        ...

    async def find_all(self, org_id: str) -> List[Role]:
        ...

    async def exists(self, role_id: str, org_id: str) -> bool:
        ...

    async def save(self, role: Role) -> Role:
        """Insert or update a role.

        Raises:
            DuplicateIdentityError: If the name is taken within the org
        """
        ...

    async def delete(self, role_id: str, org_id: str) -> bool:
        ...

    async def find_by_name(self, name: str, org_id: str) -> Optional[Role]:
        ...

    async def find_by_ids(self, role_ids: Iterable[str], org_id: str) -> List[Role]:
        """Roles of ``org_id`` among ``role_ids``; unknown IDs are skipped."""
        ...

    async def find_active_roles(self, org_id: str) -> List[Role]:
        ...

    async def find_roles_with_permissions(
        self, role_ids: Iterable[str], org_id: str
    ) -> List[Tuple[Role, List[Permission]]]:
        """Roles paired with the permissions they reference.

        Only permissions available to ``org_id`` are returned (system
        permissions plus the organization's own custom ones).
        """
        ...
