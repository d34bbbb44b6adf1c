"""Identity core protocols.

Ports consumed by the managers and implemented by persistence and cache
adapters. Every query takes ``org_id`` explicitly.
"""

from .....core.events import EventPublisher
from .user_repository import UserRepository
from .role_repository import RoleRepository
from .permission_repository import PermissionRepository
from .session_repository import SessionRepository
from .otp_repository import OtpRepository
from .permission_cache import PermissionCache

__all__ = [
    "EventPublisher",
    "UserRepository",
    "RoleRepository",
    "PermissionRepository",
    "SessionRepository",
    "OtpRepository",
    "PermissionCache",
]
