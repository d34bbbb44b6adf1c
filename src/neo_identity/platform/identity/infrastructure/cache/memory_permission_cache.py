"""Process-local PermissionCache for tests and single-process deployments."""

from typing import Dict, Optional, Tuple

from ...core.value_objects import EffectivePermissions


class MemoryPermissionCache:
    """Dict-backed cache without expiry."""

    def __init__(self) -> None:
        self._entries: Dict[Tuple[str, str], EffectivePermissions] = {}

    async def get(self, org_id: str, user_id: str) -> Optional[EffectivePermissions]:
        return self._entries.get((org_id, user_id))

    async def set(self, org_id: str, user_id: str, permissions: EffectivePermissions) -> None:
        self._entries[(org_id, user_id)] = permissions

    async def invalidate_user(self, org_id: str, user_id: str) -> None:
        self._entries.pop((org_id, user_id), None)

    async def invalidate_org(self, org_id: str) -> int:
        keys = [key for key in self._entries if key[0] == org_id]
        for key in keys:
            del self._entries[key]
        return len(keys)

    async def invalidate_all(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    def __len__(self) -> int:
        return len(self._entries)
