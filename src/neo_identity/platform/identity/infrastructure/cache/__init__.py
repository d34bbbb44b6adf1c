"""Permission cache adapters."""

from .memory_permission_cache import MemoryPermissionCache
from .redis_permission_cache import RedisPermissionCache

__all__ = ["MemoryPermissionCache", "RedisPermissionCache"]
