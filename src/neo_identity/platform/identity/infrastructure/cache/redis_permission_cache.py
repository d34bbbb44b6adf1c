"""
Redis cache for resolved permission sets.

Keys are ``{prefix}:perms:{org_id}:{user_id}`` so that a whole
organization can be invalidated with one pattern scan.
"""
import json
import logging
from typing import List, Optional

import redis.asyncio as redis

from .....config import IdentitySettings
from ...core.value_objects import EffectivePermissions

logger = logging.getLogger(__name__)


class RedisPermissionCache:
    """Redis implementation of PermissionCache.

    Reads and writes degrade to a cache miss when Redis is unavailable;
    invalidation errors propagate so that stale grants are never hidden.
    """

    def __init__(self, redis_client: redis.Redis, key_prefix: str = "neo_identity", ttl_seconds: int = 600):
        self._redis = redis_client
        self._key_prefix = key_prefix
        self._ttl = ttl_seconds

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "neo_identity", ttl_seconds: int = 600) -> "RedisPermissionCache":
        return cls(redis.from_url(url), key_prefix, ttl_seconds)

    @classmethod
    def from_settings(cls, settings: IdentitySettings) -> "RedisPermissionCache":
        """Build a cache from ``redis_url``; raises ValueError when it is unset."""
        if not settings.redis_url:
            raise ValueError("redis_url must be configured for the Redis permission cache")
        return cls.from_url(settings.redis_url, settings.cache_key_prefix, settings.permission_cache_ttl_seconds)

    def _key(self, org_id: str, user_id: str) -> str:
        return f"{self._key_prefix}:perms:{org_id}:{user_id}"

    async def get(self, org_id: str, user_id: str) -> Optional[EffectivePermissions]:
        try:
            raw = await self._redis.get(self._key(org_id, user_id))
        except redis.RedisError as e:
            logger.warning(f"Failed to get permissions from cache: {e}")
            return None
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode()
        return EffectivePermissions.from_dict(json.loads(raw))

    async def set(self, org_id: str, user_id: str, permissions: EffectivePermissions) -> None:
        try:
            await self._redis.setex(self._key(org_id, user_id), self._ttl, json.dumps(permissions.to_dict()))
        except redis.RedisError as e:
            logger.warning(f"Failed to cache permissions: {e}")

    async def invalidate_user(self, org_id: str, user_id: str) -> None:
        await self._redis.delete(self._key(org_id, user_id))

    async def invalidate_org(self, org_id: str) -> int:
        return await self._delete_matching(f"{self._key_prefix}:perms:{org_id}:*")

    async def invalidate_all(self) -> int:
        return await self._delete_matching(f"{self._key_prefix}:perms:*")

    async def _delete_matching(self, pattern: str) -> int:
        keys: List[bytes] = []
        async for key in self._redis.scan_iter(match=pattern):
            keys.append(key)

        if not keys:
            return 0
        await self._redis.delete(*keys)
        logger.debug(f"Invalidated {len(keys)} cache entries matching {pattern}")
        return len(keys)
