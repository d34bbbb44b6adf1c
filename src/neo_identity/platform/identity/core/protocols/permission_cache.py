"""Effective-permission cache protocol contract."""

from typing import Optional, Protocol, runtime_checkable

from ..value_objects import EffectivePermissions


@runtime_checkable
class PermissionCache(Protocol):
    """Cache of resolved permission sets keyed by ``(org_id, user_id)``."""

    async def get(self, org_id: str, user_id: str) -> Optional[EffectivePermissions]:
        ...

    async def set(self, org_id: str, user_id: str, permissions: EffectivePermissions) -> None:
        ...

    async def invalidate_user(self, org_id: str, user_id: str) -> None:
        ...

    async def invalidate_org(self, org_id: str) -> int:
        """Drop every cached set of an organization. Returns the number of keys removed."""
        ...

    async def invalidate_all(self) -> int:
        """Drop every cached set; used when a system-wide permission changes."""
        ...
