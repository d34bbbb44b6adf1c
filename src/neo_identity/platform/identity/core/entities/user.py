"""User aggregate.

Owns account status, lockout bookkeeping and the set of assigned role
IDs. Roles are referenced by ID only; the aggregate never holds Role
objects.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import FrozenSet, Iterable, Optional

from .....core.entities import EntityIdentity, EventRecorder, IdentifiedEntity
from .....core.exceptions import UserInactiveError, ValidationError
from .....utils import ensure_utc, optional_utc, utc_now
from ..events import UserLoggedIn, UserRegistered
from ..value_objects import Email, UserStatus

DEFAULT_MAX_FAILED_LOGINS = 5
DEFAULT_LOCKOUT_MINUTES = 30


@dataclass(eq=False)
class User(IdentifiedEntity, EventRecorder):
    """Tenant-scoped user account."""

    identity: EntityIdentity
    email: Email
    username: str
    name: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    status: UserStatus = UserStatus.ACTIVE
    password_hash: Optional[str] = field(default=None, repr=False)
    failed_login_attempts: int = 0
    role_ids: FrozenSet[str] = frozenset()
    last_login_at: Optional[datetime] = None
    locked_until: Optional[datetime] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.email = Email.create(self.email)
        self.status = UserStatus.create(self.status)
        self.role_ids = frozenset(self.role_ids)
        if not self.username or not self.username.strip():
            raise ValidationError("Username cannot be empty")
        if self.failed_login_attempts < 0:
            raise ValidationError("Failed login attempts cannot be negative")
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at)
        self.last_login_at = optional_utc(self.last_login_at)
        self.locked_until = optional_utc(self.locked_until)

    @classmethod
    def register(
        cls,
        email: object,
        username: str,
        name: str,
        org_id: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        password_hash: Optional[str] = None,
        role_ids: Iterable[str] = (),
        now: Optional[datetime] = None,
    ) -> "User":
        """Create a new ACTIVE user and raise UserRegistered.

        Raises:
            InvalidEmailError: If ``email`` is malformed
            ValidationError: If ``username`` is empty
        """
        moment = ensure_utc(now) if now else utc_now()
        user = cls(
            identity=EntityIdentity.new(org_id),
            email=Email.create(email),
            username=username.strip() if isinstance(username, str) else username,
            name=name,
            first_name=first_name,
            last_name=last_name,
            password_hash=password_hash,
            role_ids=frozenset(role_ids),
            created_at=moment,
            updated_at=moment,
        )
        user._record_event(
            UserRegistered(
                occurred_on=user.created_at,
                user_id=user.id,
                org_id=user.org_id,
                email=str(user.email),
                username=user.username,
                name=user.name,
                first_name=user.first_name,
                last_name=user.last_name,
                status=user.status.value,
            )
        )
        return user

    # Status checks

    def is_locked(self, now: Optional[datetime] = None) -> bool:
        """True while the account is LOCKED and any lock period is still running."""
        if self.status is not UserStatus.LOCKED:
            return False
        if self.locked_until is None:
            return True
        return (now or utc_now()) < self.locked_until

    def lock_expired(self, now: Optional[datetime] = None) -> bool:
        """True when a timed lock has run out but the status was not reset yet."""
        return (
            self.status is UserStatus.LOCKED
            and self.locked_until is not None
            and (now or utc_now()) >= self.locked_until
        )

    def can_login(self) -> bool:
        return self.status.can_login()

    # Authentication bookkeeping

    def record_login(
        self,
        timestamp: Optional[datetime] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> UserLoggedIn:
        """Record a successful authentication.

        A timed lock that has already run out is lifted first.

        Raises:
            UserInactiveError: If the account status does not allow login
        """
        moment = ensure_utc(timestamp) if timestamp else utc_now()

        if self.lock_expired(moment):
            self.unlock(moment)

        if not self.can_login():
            raise UserInactiveError(self.id, self.status.value)

        self.last_login_at = moment
        self.failed_login_attempts = 0
        self.locked_until = None
        self._touch(moment)

        event = UserLoggedIn(
            occurred_on=moment,
            user_id=self.id,
            org_id=self.org_id,
            email=str(self.email),
            username=self.username,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        self._record_event(event)
        return event

    def record_failed_login(
        self,
        max_attempts: int = DEFAULT_MAX_FAILED_LOGINS,
        lockout_minutes: int = DEFAULT_LOCKOUT_MINUTES,
        now: Optional[datetime] = None,
    ) -> int:
        """Count a failed login, locking the account once the limit is reached.

        Returns:
            The incremented failed-login counter
        """
        moment = ensure_utc(now) if now else utc_now()
        self.failed_login_attempts += 1

        if self.failed_login_attempts >= max_attempts and self.status is not UserStatus.LOCKED:
            self.lock(lockout_minutes, moment)

        self._touch(moment)
        return self.failed_login_attempts

    # Status transitions

    def lock(self, duration_minutes: Optional[int] = DEFAULT_LOCKOUT_MINUTES, now: Optional[datetime] = None) -> None:
        """Lock the account. ``duration_minutes=None`` locks until explicitly unlocked."""
        moment = ensure_utc(now) if now else utc_now()
        self.status = UserStatus.LOCKED
        self.locked_until = moment + timedelta(minutes=duration_minutes) if duration_minutes else None
        self._touch(moment)

    def unlock(self, now: Optional[datetime] = None) -> None:
        self.status = UserStatus.ACTIVE
        self.failed_login_attempts = 0
        self.locked_until = None
        self._touch(now)

    def activate(self, now: Optional[datetime] = None) -> None:
        self.unlock(now)

    def deactivate(self, now: Optional[datetime] = None) -> None:
        self.status = UserStatus.INACTIVE
        self._touch(now)

    def change_status(self, new_status: object, now: Optional[datetime] = None) -> UserStatus:
        """Move to ``new_status`` through the matching transition.

        Raises:
            InvalidStatusError: If ``new_status`` is not a known status
        """
        status = UserStatus.create(new_status)
        if status is UserStatus.ACTIVE:
            self.activate(now)
        elif status is UserStatus.INACTIVE:
            self.deactivate(now)
        else:
            self.lock(DEFAULT_LOCKOUT_MINUTES, now)
        return self.status

    # Profile and credentials

    def update_profile(
        self,
        name: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        username: Optional[str] = None,
        email: Optional[object] = None,
        now: Optional[datetime] = None,
    ) -> None:
        if username is not None:
            if not username.strip():
                raise ValidationError("Username cannot be empty")
            self.username = username.strip()
        if email is not None:
            self.email = Email.create(email)
        if name is not None:
            self.name = name
        if first_name is not None:
            self.first_name = first_name
        if last_name is not None:
            self.last_name = last_name
        self._touch(now)

    def change_password(self, password_hash: str, now: Optional[datetime] = None) -> None:
        """Store a new (already hashed) password and clear lockout state."""
        if not password_hash:
            raise ValidationError("Password hash cannot be empty")
        self.password_hash = password_hash
        self.failed_login_attempts = 0
        self.locked_until = None
        if self.status is UserStatus.LOCKED:
            self.status = UserStatus.ACTIVE
        self._touch(now)

    # Role assignment

    def assign_role(self, role_id: str, now: Optional[datetime] = None) -> bool:
        if role_id in self.role_ids:
            return False
        self.role_ids = self.role_ids | {role_id}
        self._touch(now)
        return True

    def revoke_role(self, role_id: str, now: Optional[datetime] = None) -> bool:
        if role_id not in self.role_ids:
            return False
        self.role_ids = self.role_ids - {role_id}
        self._touch(now)
        return True

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, org_id={self.org_id!r}, email={self.email.value!r}, status={self.status.value})"
