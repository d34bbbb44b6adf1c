"""Identity application layer."""

from .services import (
    CachedPermissionResolver,
    OtpManager,
    PermissionResolver,
    SessionManager,
    UserLifecycleManager,
)

__all__ = [
    "CachedPermissionResolver",
    "OtpManager",
    "PermissionResolver",
    "SessionManager",
    "UserLifecycleManager",
]
