"""Permission resolver backed by a PermissionCache."""

import logging
from typing import Iterable

from .....core.events import DomainEvent
from ...core.entities import User
from ...core.events import AUTHORIZATION_EVENTS
from ...core.protocols import PermissionCache
from ...core.value_objects import EffectivePermissions
from .permission_resolver import PermissionResolver

logger = logging.getLogger(__name__)


class CachedPermissionResolver:
    """Caches resolved sets and drops them when authorization data changes.

    Register ``handle_event`` with the event pipeline so that
    PermissionChanged, RoleCreated and RoleUpdated invalidate the cache.
    """

    def __init__(self, resolver: PermissionResolver, cache: PermissionCache):
        self._resolver = resolver
        self._cache = cache

    async def resolve(self, user: User) -> EffectivePermissions:
        cached = await self._cache.get(user.org_id, user.id)
        if cached is not None:
            return cached

        resolved = await self._resolver.resolve(user)
        await self._cache.set(user.org_id, user.id, resolved)
        return resolved

    async def has_permission(self, user: User, permission_name: str) -> bool:
        return (await self.resolve(user)).has(permission_name)

    async def has_any_permission(self, user: User, permission_names: Iterable[str]) -> bool:
        return (await self.resolve(user)).has_any(permission_names)

    async def has_all_permissions(self, user: User, permission_names: Iterable[str]) -> bool:
        return (await self.resolve(user)).has_all(permission_names)

    async def invalidate_user(self, user: User) -> None:
        """Call after a user's role assignments change."""
        await self._cache.invalidate_user(user.org_id, user.id)

    async def handle_event(self, event: DomainEvent) -> int:
        """Invalidate cached sets affected by ``event``.

        Returns:
            Number of cache entries dropped
        """
        if not isinstance(event, AUTHORIZATION_EVENTS):
            return 0

        # System permissions (empty org_id) reach every organization
        if not event.org_id:
            removed = await self._cache.invalidate_all()
        else:
            removed = await self._cache.invalidate_org(event.org_id)

        logger.debug(f"{event.event_name} invalidated {removed} cached permission sets")
        return removed
