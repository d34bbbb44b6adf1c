"""Pytest configuration and fixtures for neo-identity tests."""

from datetime import datetime, timezone
from typing import List
from unittest.mock import AsyncMock, MagicMock

import pytest

from neo_identity.config import IdentitySettings
from neo_identity.core.events import DomainEvent
from neo_identity.platform.identity.application.services import (
    OtpManager,
    PermissionResolver,
    SessionManager,
    UserLifecycleManager,
)
from neo_identity.platform.identity.core.entities import Permission, Role, User
from neo_identity.platform.identity.infrastructure.repositories import (
    InMemoryOtpRepository,
    InMemoryPermissionRepository,
    InMemoryRoleRepository,
    InMemorySessionRepository,
    InMemoryUserRepository,
)


class RecordingPublisher:
    """EventPublisher that keeps every published event."""

    def __init__(self):
        self.published: List[DomainEvent] = []

    async def publish(self, event: DomainEvent) -> None:
        self.published.append(event)

    @property
    def names(self) -> List[str]:
        return [event.event_name for event in self.published]


@pytest.fixture
def settings():
    """Settings with defaults only, ignoring any local .env file."""
    return IdentitySettings(_env_file=None)


@pytest.fixture
def now():
    """Fixed reference time."""
    return datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def publisher():
    return RecordingPublisher()


# Repositories

@pytest.fixture
def user_repository():
    return InMemoryUserRepository()


@pytest.fixture
def permission_repository():
    return InMemoryPermissionRepository()


@pytest.fixture
def role_repository(permission_repository):
    return InMemoryRoleRepository(permission_repository)


@pytest.fixture
def session_repository():
    return InMemorySessionRepository()


@pytest.fixture
def otp_repository():
    return InMemoryOtpRepository()


# Managers

@pytest.fixture
def user_manager(user_repository, role_repository, publisher, settings):
    return UserLifecycleManager(user_repository, role_repository, publisher, settings)


@pytest.fixture
def permission_resolver(role_repository, permission_repository):
    return PermissionResolver(role_repository, permission_repository)


@pytest.fixture
def session_manager(session_repository, publisher, settings):
    return SessionManager(session_repository, publisher, settings)


@pytest.fixture
def otp_manager(otp_repository, settings):
    return OtpManager(otp_repository, settings)


# Sample entities

@pytest.fixture
def sample_user(now):
    """Registered ACTIVE user in org ``acme`` with its events cleared."""
    user = User.register(
        email="Jane.Doe@Example.com",
        username="jane",
        name="Jane Doe",
        org_id="acme",
        first_name="Jane",
        last_name="Doe",
        now=now,
    )
    user.clear_events()
    return user


@pytest.fixture
def system_permission(now):
    permission = Permission.create("users.read", "users", "read", now=now)
    permission.clear_events()
    return permission


@pytest.fixture
def custom_permission(now):
    permission = Permission.create("reports.export", "reports", "export", org_id="acme", now=now)
    permission.clear_events()
    return permission


@pytest.fixture
def sample_role(now):
    role = Role.create("Viewer", org_id="acme", description="Read-only access", now=now)
    role.clear_events()
    return role


# asyncpg mocks

@pytest.fixture
def mock_connection():
    """Mock asyncpg connection."""
    conn = AsyncMock()
    conn.fetchrow = AsyncMock(return_value=None)
    conn.fetch = AsyncMock(return_value=[])
    conn.fetchval = AsyncMock(return_value=None)
    conn.execute = AsyncMock(return_value="UPDATE 0")
    return conn


@pytest.fixture
def mock_db_pool(mock_connection):
    """Mock asyncpg pool whose ``acquire()`` yields ``mock_connection``."""
    pool = MagicMock()
    pool.acquire.return_value.__aenter__.return_value = mock_connection
    pool.acquire.return_value.__aexit__.return_value = False
    return pool
