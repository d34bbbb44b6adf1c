"""Session repository protocol contract."""

from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable

from ..entities import Session


@runtime_checkable
class SessionRepository(Protocol):
    """Persistence port for sessions.

    Tokens are globally unique. Sweeps and bulk revocations are idempotent
    and return the number of affected rows, which may be zero.
    """

    async def find_by_id(self, session_id: str, org_id: str) -> Optional[Session]:
        ...

    async def find_all(self, org_id: str) -> List[Session]:
        ...

    async def exists(self, session_id: str, org_id: str) -> bool:
        ...

    async def save(self, session: Session) -> Session:
        """Insert or replace a session.

        Raises:
            DuplicateIdentityError: If the token belongs to another session
        """
        ...

    async def delete(self, session_id: str, org_id: str) -> bool:
        ...

    async def find_by_token(self, token: str) -> Optional[Session]:
        ...

    async def find_active_sessions(self, user_id: str, org_id: str, now: datetime) -> List[Session]:
        """Unrevoked sessions of a user with ``expires_at > now``, newest first."""
        ...

    async def count_active_sessions(self, user_id: str, org_id: str, now: datetime) -> int:
        ...

    async def revoke_all_for_user(self, user_id: str, org_id: str, reason: str, now: datetime) -> int:
        """Revoke every unrevoked session of a user.

        Returns:
            Number of sessions revoked
        """
        ...

    async def delete_expired_sessions(self, now: datetime) -> int:
        """Delete sessions with ``expires_at <= now``.

        Returns:
            Number of deleted rows; zero is not an error
        """
        ...
