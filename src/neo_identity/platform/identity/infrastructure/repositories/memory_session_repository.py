"""In-memory SessionRepository."""

from datetime import datetime
from typing import List, Optional

from .....core.exceptions import DuplicateIdentityError
from ...core.entities import Session
from .memory_base import InMemoryRepository


class InMemorySessionRepository(InMemoryRepository[Session]):
    entity_type = "Session"

    def _check_unique(self, session: Session) -> None:
        for other in self._iter(lambda item: item.token == session.token):
            if (other.org_id, other.id) != (session.org_id, session.id):
                raise DuplicateIdentityError("Session", "token", session.token_hint)

    async def find_by_token(self, token: str) -> Optional[Session]:
        async with self._lock:
            matches = self._select(lambda item: item.token == token)
        return matches[0] if matches else None

    async def find_active_sessions(self, user_id: str, org_id: str, now: datetime) -> List[Session]:
        async with self._lock:
            sessions = self._select(
                lambda item: item.user_id == user_id and item.org_id == org_id and item.is_active(now)
            )
        return list(reversed(sessions))

    async def count_active_sessions(self, user_id: str, org_id: str, now: datetime) -> int:
        async with self._lock:
            return sum(
                1
                for _ in self._iter(
                    lambda item: item.user_id == user_id and item.org_id == org_id and item.is_active(now)
                )
            )

    async def revoke_all_for_user(self, user_id: str, org_id: str, reason: str, now: datetime) -> int:
        async with self._lock:
            targets = list(
                self._iter(lambda item: item.user_id == user_id and item.org_id == org_id and not item.is_revoked)
            )
            for session in targets:
                self._items[(session.org_id, session.id)] = session.revoked(reason, now)
            return len(targets)

    async def delete_expired_sessions(self, now: datetime) -> int:
        async with self._lock:
            expired = [key for key, item in self._items.items() if item.is_expired(now)]
            for key in expired:
                del self._items[key]
            return len(expired)
