"""asyncpg implementation of SessionRepository."""

import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional

import asyncpg

from .....config import IdentitySettings
from .....core.entities import EntityIdentity
from .....core.exceptions import DuplicateIdentityError
from ...core.entities import Session
from .postgres_base import affected_rows
from .session_repository_queries import SessionQueries

logger = logging.getLogger(__name__)


class PostgresSessionRepository:
    """Stores sessions in ``<schema>.sessions``; ``token`` has a unique index."""

    def __init__(self, db_pool: asyncpg.Pool, schema: str = "identity"):
        self._db_pool = db_pool
        self.queries = SessionQueries(schema)

    @classmethod
    def from_settings(cls, db_pool: asyncpg.Pool, settings: IdentitySettings) -> "PostgresSessionRepository":
        return cls(db_pool, settings.db_schema)

    async def find_by_id(self, session_id: str, org_id: str) -> Optional[Session]:
        async with self._db_pool.acquire() as conn:
            row = await conn.fetchrow(self.queries.GET_SESSION, session_id, org_id)
            return self._row_to_session(row) if row else None

    async def find_all(self, org_id: str) -> List[Session]:
        async with self._db_pool.acquire() as conn:
            rows = await conn.fetch(self.queries.LIST_ORG_SESSIONS, org_id)
            return [self._row_to_session(row) for row in rows]

    async def exists(self, session_id: str, org_id: str) -> bool:
        async with self._db_pool.acquire() as conn:
            return bool(await conn.fetchval(self.queries.SESSION_EXISTS, session_id, org_id))

    async def save(self, session: Session) -> Session:
        try:
            async with self._db_pool.acquire() as conn:
                await conn.execute(
                    self.queries.UPSERT_SESSION,
                    session.id,
                    session.org_id,
                    session.user_id,
                    session.token,
                    session.expires_at,
                    session.ip_address,
                    session.user_agent,
                    session.revoked_at,
                    session.revoke_reason,
                    session.created_at,
                    session.updated_at,
                )
        except asyncpg.UniqueViolationError as e:
            logger.warning(f"Session token collision for session {session.id}: {e}")
            raise DuplicateIdentityError("Session", "token", session.token_hint) from e
        return session

    async def delete(self, session_id: str, org_id: str) -> bool:
        async with self._db_pool.acquire() as conn:
            result = await conn.execute(self.queries.DELETE_SESSION, session_id, org_id)
            return affected_rows(result) > 0

    async def find_by_token(self, token: str) -> Optional[Session]:
        async with self._db_pool.acquire() as conn:
            row = await conn.fetchrow(self.queries.GET_SESSION_BY_TOKEN, token)
            return self._row_to_session(row) if row else None

    async def find_active_sessions(self, user_id: str, org_id: str, now: datetime) -> List[Session]:
        async with self._db_pool.acquire() as conn:
            rows = await conn.fetch(self.queries.GET_ACTIVE_SESSIONS, user_id, org_id, now)
            return [self._row_to_session(row) for row in rows]

    async def count_active_sessions(self, user_id: str, org_id: str, now: datetime) -> int:
        async with self._db_pool.acquire() as conn:
            return int(await conn.fetchval(self.queries.COUNT_ACTIVE_SESSIONS, user_id, org_id, now) or 0)

    async def revoke_all_for_user(self, user_id: str, org_id: str, reason: str, now: datetime) -> int:
        async with self._db_pool.acquire() as conn:
            result = await conn.execute(self.queries.REVOKE_USER_SESSIONS, user_id, org_id, reason, now)
            return affected_rows(result)

    async def delete_expired_sessions(self, now: datetime) -> int:
        async with self._db_pool.acquire() as conn:
            result = await conn.execute(self.queries.DELETE_EXPIRED_SESSIONS, now)
            deleted = affected_rows(result)
            if deleted:
                logger.debug(f"Deleted {deleted} expired sessions")
            return deleted

    @staticmethod
    def _row_to_session(row: Mapping[str, Any]) -> Session:
        return Session(
            identity=EntityIdentity(str(row["id"]), row["org_id"] or ""),
            user_id=str(row["user_id"]),
            token=row["token"],
            expires_at=row["expires_at"],
            ip_address=row["ip_address"],
            user_agent=row["user_agent"],
            revoked_at=row["revoked_at"],
            revoke_reason=row["revoke_reason"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
