"""Session lifecycle manager.

ACTIVE sessions end either by natural expiry (detected, reported with a
SessionExpired event) or by explicit revocation (logout, password
change), which raises no event. Sessions are replaced, never mutated.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import List, Optional

from .....config import IdentitySettings, get_settings
from .....core.exceptions import InvalidStateError, SessionInvalid, ValidationError
from .....utils import ensure_utc, utc_now
from ...core.entities import Session
from ...core.events import SessionExpired
from ...core.protocols import EventPublisher, SessionRepository
from .event_dispatch import publish_events

logger = logging.getLogger(__name__)


class SessionManager:
    """Creates, validates, refreshes and ends sessions.

    Concurrent-session limits are a caller policy; a user may hold any
    number of active sessions.
    """

    def __init__(
        self,
        session_repository: SessionRepository,
        event_publisher: Optional[EventPublisher] = None,
        settings: Optional[IdentitySettings] = None,
    ):
        self._sessions = session_repository
        self._publisher = event_publisher
        self._settings = settings or get_settings()

    @property
    def default_ttl(self) -> timedelta:
        return timedelta(minutes=self._settings.session_ttl_minutes)

    def generate_token(self) -> str:
        return secrets.token_urlsafe(self._settings.session_token_bytes)

    async def create(
        self,
        user_id: str,
        org_id: str,
        ttl: Optional[timedelta] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Session:
        """Open a session with a fresh opaque token; ``expires_at = now + ttl``."""
        session = Session.issue(
            user_id=user_id,
            org_id=org_id,
            token=self.generate_token(),
            ttl=ttl if ttl is not None else self.default_ttl,
            ip_address=ip_address,
            user_agent=user_agent,
            now=now,
        )
        await self._sessions.save(session)
        logger.info(f"Created session {session.id} for user {user_id} in org {org_id} (token {session.token_hint})")
        return session

    def is_active(self, session: Session, now: Optional[datetime] = None) -> bool:
        return session.is_active(now)

    async def expire(self, session: Session, now: Optional[datetime] = None) -> SessionExpired:
        """Record that ``session`` has expired and report it.

        A session still running at ``now`` is cut short: its deadline is
        moved to ``now`` and persisted. The event's ``occurred_on`` is the
        detection time, while ``expires_at`` keeps the deadline.

        Raises:
            InvalidStateError: If the session was revoked
        """
        moment = ensure_utc(now) if now else utc_now()
        if session.is_revoked:
            raise InvalidStateError(
                "Revoked session cannot expire",
                details={"session_id": session.id, "org_id": session.org_id},
            )

        if session.is_active(moment):
            session = session.refreshed(timedelta(0), moment)
            await self._sessions.save(session)

        event = SessionExpired(
            occurred_on=moment,
            session_id=session.id,
            user_id=session.user_id,
            org_id=session.org_id,
            token_hint=session.token_hint,
            expires_at=session.expires_at,
            ip_address=session.ip_address,
            user_agent=session.user_agent,
        )
        await publish_events([event], self._publisher)
        logger.debug(f"Session {session.id} expired (detected {event.detection_lag_seconds:.0f}s after deadline)")
        return event

    async def revoke(self, session: Session, reason: str = "logout", now: Optional[datetime] = None) -> Session:
        """Explicitly end a session. Revoking twice is a no-op."""
        revoked = session.revoked(reason, now)
        if revoked is not session:
            await self._sessions.save(revoked)
            logger.info(f"Revoked session {session.id} for user {session.user_id} ({reason})")
        return revoked

    async def revoke_all_for_user(
        self,
        user_id: str,
        org_id: str,
        reason: str = "revoke_all",
        now: Optional[datetime] = None,
    ) -> int:
        count = await self._sessions.revoke_all_for_user(user_id, org_id, reason, ensure_utc(now) if now else utc_now())
        logger.info(f"Revoked {count} sessions for user {user_id} in org {org_id} ({reason})")
        return count

    async def validate_token(self, token: str, now: Optional[datetime] = None) -> Session:
        """Resolve a token to its active session.

        Raises:
            SessionInvalid: If the token is unknown, revoked or expired
        """
        session = await self._sessions.find_by_token(token) if token else None
        if session is None:
            raise SessionInvalid.not_found()
        if session.is_revoked:
            raise SessionInvalid.revoked(session.id)
        if session.is_expired(now):
            raise SessionInvalid.expired(session.id)
        return session

    async def refresh(self, token: str, ttl: Optional[timedelta] = None, now: Optional[datetime] = None) -> Session:
        """Push an active session's deadline to ``now + ttl``.

        Raises:
            ValidationError: If ``ttl`` is not positive
            SessionInvalid: If the token does not resolve to an active session
        """
        ttl = ttl if ttl is not None else self.default_ttl
        if ttl <= timedelta(0):
            raise ValidationError("Session TTL must be positive")
        moment = ensure_utc(now) if now else utc_now()
        session = await self.validate_token(token, moment)
        refreshed = session.refreshed(ttl, moment)
        await self._sessions.save(refreshed)
        return refreshed

    async def find_active_sessions(self, user_id: str, org_id: str, now: Optional[datetime] = None) -> List[Session]:
        return await self._sessions.find_active_sessions(user_id, org_id, ensure_utc(now) if now else utc_now())

    async def count_active_sessions(self, user_id: str, org_id: str, now: Optional[datetime] = None) -> int:
        return await self._sessions.count_active_sessions(user_id, org_id, ensure_utc(now) if now else utc_now())

    async def delete_expired_sessions(self, now: Optional[datetime] = None) -> int:
        """Idempotent sweep; safe to run from many workers at once."""
        deleted = await self._sessions.delete_expired_sessions(ensure_utc(now) if now else utc_now())
        if deleted:
            logger.info(f"Deleted {deleted} expired sessions")
        return deleted
