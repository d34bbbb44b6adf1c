"""Identity domain entities."""

from .user import User
from .role import Role
from .permission import Permission
from .session import Session
from .otp import Otp, generate_otp_code

__all__ = [
    "User",
    "Role",
    "Permission",
    "Session",
    "Otp",
    "generate_otp_code",
]
