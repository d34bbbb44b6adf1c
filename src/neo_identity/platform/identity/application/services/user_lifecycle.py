"""User lifecycle manager.

Application-facing entry point for registration, authentication
bookkeeping and account status changes. Every mutation is persisted
through the UserRepository and its events are released afterwards.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from .....config import IdentitySettings, get_settings
from .....core.exceptions import EntityNotFoundError
from ...core.entities import User
from ...core.protocols import EventPublisher, PermissionCache, RoleRepository, UserRepository
from ...core.value_objects import Email, UserStatus
from .event_dispatch import dispatch_events

logger = logging.getLogger(__name__)


class UserLifecycleManager:
    """Orchestrates User aggregate operations.

    When a ``permission_cache`` is given, role changes and deletions drop
    the user's cached permission set.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        role_repository: Optional[RoleRepository] = None,
        event_publisher: Optional[EventPublisher] = None,
        settings: Optional[IdentitySettings] = None,
        permission_cache: Optional[PermissionCache] = None,
    ):
        self._users = user_repository
        self._roles = role_repository
        self._publisher = event_publisher
        self._settings = settings or get_settings()
        self._cache = permission_cache

    # Queries

    async def get_user(self, user_id: str, org_id: str) -> User:
        """Load a user or raise EntityNotFoundError."""
        user = await self._users.find_by_id(user_id, org_id)
        if user is None:
            raise EntityNotFoundError("User", user_id, org_id)
        return user

    async def find_by_email(self, email: object, org_id: str) -> Optional[User]:
        return await self._users.find_by_email(Email.create(email), org_id)

    async def find_by_email_any_org(self, email: object) -> List[User]:
        return await self._users.find_by_email_any_org(Email.create(email))

    async def list_users(self, org_id: str) -> List[User]:
        return await self._users.find_all(org_id)

    # Commands

    async def register(
        self,
        email: object,
        username: str,
        name: str,
        org_id: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        password_hash: Optional[str] = None,
        role_ids: Iterable[str] = (),
        now: Optional[datetime] = None,
    ) -> User:
        """Register a new user.

        Raises:
            InvalidEmailError: If the email is malformed
            DuplicateIdentityError: If email or username is taken in the org
        """
        user = User.register(
            email=email,
            username=username,
            name=name,
            org_id=org_id,
            first_name=first_name,
            last_name=last_name,
            password_hash=password_hash,
            role_ids=role_ids,
            now=now,
        )
        await self._save(user)
        logger.info(f"Registered user {user.id} ({user.email}) in org {org_id}")
        return user

    async def record_login(
        self,
        user_id: str,
        org_id: str,
        timestamp: Optional[datetime] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> User:
        """Record a successful authentication.

        Raises:
            EntityNotFoundError: If the user does not exist in the org
            UserInactiveError: If the user may not log in
        """
        user = await self.get_user(user_id, org_id)
        user.record_login(timestamp, ip_address, user_agent)
        await self._save(user)
        logger.debug(f"Recorded login for user {user_id} in org {org_id}")
        return user

    async def record_failed_login(self, user_id: str, org_id: str, now: Optional[datetime] = None) -> int:
        """Count a failed login; locks the account once the configured limit is hit."""
        user = await self.get_user(user_id, org_id)
        was_locked = user.status is UserStatus.LOCKED
        attempts = user.record_failed_login(
            max_attempts=self._settings.max_failed_login_attempts,
            lockout_minutes=self._settings.lockout_duration_minutes,
            now=now,
        )
        await self._save(user)
        if not was_locked and user.status is UserStatus.LOCKED:
            logger.warning(f"User {user_id} in org {org_id} locked after {attempts} failed logins")
        return attempts

    async def lock(
        self,
        user_id: str,
        org_id: str,
        duration_minutes: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> User:
        """Lock a user. Without ``duration_minutes`` the lock lasts until unlocked."""
        user = await self.get_user(user_id, org_id)
        user.lock(duration_minutes, now)
        await self._save(user)
        logger.info(f"Locked user {user_id} in org {org_id}")
        return user

    async def unlock(self, user_id: str, org_id: str, now: Optional[datetime] = None) -> User:
        user = await self.get_user(user_id, org_id)
        user.unlock(now)
        await self._save(user)
        logger.info(f"Unlocked user {user_id} in org {org_id}")
        return user

    async def change_status(self, user_id: str, org_id: str, new_status: object, now: Optional[datetime] = None) -> User:
        """Raises InvalidStatusError for an unknown status."""
        user = await self.get_user(user_id, org_id)
        user.change_status(new_status, now)
        await self._save(user)
        logger.info(f"User {user_id} in org {org_id} is now {user.status.value}")
        return user

    async def change_password(self, user_id: str, org_id: str, password_hash: str, now: Optional[datetime] = None) -> User:
        user = await self.get_user(user_id, org_id)
        user.change_password(password_hash, now)
        await self._save(user)
        return user

    async def update_profile(self, user_id: str, org_id: str, now: Optional[datetime] = None, **changes) -> User:
        user = await self.get_user(user_id, org_id)
        user.update_profile(now=now, **changes)
        await self._save(user)
        return user

    async def assign_role(self, user_id: str, org_id: str, role_id: str, now: Optional[datetime] = None) -> bool:
        """Assign a role of the same organization.

        Raises:
            EntityNotFoundError: If the user, or the role within the user's org, is missing
        """
        user = await self.get_user(user_id, org_id)
        if self._roles is not None and not await self._roles.exists(role_id, org_id):
            raise EntityNotFoundError("Role", role_id, org_id)
        changed = user.assign_role(role_id, now)
        if changed:
            await self._save(user)
            await self._invalidate_permissions(user_id, org_id)
        return changed

    async def revoke_role(self, user_id: str, org_id: str, role_id: str, now: Optional[datetime] = None) -> bool:
        user = await self.get_user(user_id, org_id)
        changed = user.revoke_role(role_id, now)
        if changed:
            await self._save(user)
            await self._invalidate_permissions(user_id, org_id)
        return changed

    async def delete(self, user_id: str, org_id: str) -> bool:
        deleted = await self._users.delete(user_id, org_id)
        if deleted:
            await self._invalidate_permissions(user_id, org_id)
            logger.info(f"Deleted user {user_id} from org {org_id}")
        return deleted

    async def _save(self, user: User) -> None:
        await self._users.save(user)
        await dispatch_events(user, self._publisher)

    async def _invalidate_permissions(self, user_id: str, org_id: str) -> None:
        if self._cache is not None:
            await self._cache.invalidate_user(org_id, user_id)
