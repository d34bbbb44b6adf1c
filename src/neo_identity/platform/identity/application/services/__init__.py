"""Identity application services."""

from .event_dispatch import dispatch_events, publish_events
from .user_lifecycle import UserLifecycleManager
from .permission_resolver import PermissionResolver, granting_roles, resolve_effective_permissions
from .cached_permission_resolver import CachedPermissionResolver
from .session_manager import SessionManager
from .otp_manager import OtpManager

__all__ = [
    "dispatch_events",
    "publish_events",
    "UserLifecycleManager",
    "PermissionResolver",
    "granting_roles",
    "resolve_effective_permissions",
    "CachedPermissionResolver",
    "SessionManager",
    "OtpManager",
]
