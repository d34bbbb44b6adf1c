"""Identity repository adapters: in-memory and asyncpg."""

from .memory_base import InMemoryRepository
from .memory_user_repository import InMemoryUserRepository
from .memory_role_repository import InMemoryRoleRepository
from .memory_permission_repository import InMemoryPermissionRepository
from .memory_session_repository import InMemorySessionRepository
from .memory_otp_repository import InMemoryOtpRepository
from .postgres_session_repository import PostgresSessionRepository
from .postgres_otp_repository import PostgresOtpRepository
from .session_repository_queries import SessionQueries
from .otp_repository_queries import OtpQueries

__all__ = [
    "InMemoryRepository",
    "InMemoryUserRepository",
    "InMemoryRoleRepository",
    "InMemoryPermissionRepository",
    "InMemorySessionRepository",
    "InMemoryOtpRepository",
    "PostgresSessionRepository",
    "PostgresOtpRepository",
    "SessionQueries",
    "OtpQueries",
]
