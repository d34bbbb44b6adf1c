"""Tests for SessionManager."""

from datetime import timedelta

import pytest

from neo_identity.core.exceptions import InvalidStateError, SessionInvalid, ValidationError
from neo_identity.platform.identity.core.value_objects import SessionState


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_sets_deadline(self, session_manager, session_repository, now):
        session = await session_manager.create("u1", "acme", ttl=timedelta(hours=1), now=now)

        assert session.expires_at == now + timedelta(hours=1)
        assert await session_repository.find_by_token(session.token) == session

    @pytest.mark.asyncio
    async def test_default_ttl_from_settings(self, session_manager, settings, now):
        session = await session_manager.create("u1", "acme", now=now)

        assert session.expires_at == now + timedelta(minutes=settings.session_ttl_minutes)

    @pytest.mark.asyncio
    async def test_tokens_are_unique(self, session_manager, now):
        first = await session_manager.create("u1", "acme", now=now)
        second = await session_manager.create("u1", "acme", now=now)

        assert first.token != second.token

    @pytest.mark.asyncio
    async def test_non_positive_ttl_rejected(self, session_manager, now):
        with pytest.raises(ValidationError):
            await session_manager.create("u1", "acme", ttl=timedelta(seconds=-5), now=now)

    @pytest.mark.asyncio
    async def test_zero_ttl_is_not_replaced_by_default(self, session_manager, session_repository, now):
        with pytest.raises(ValidationError):
            await session_manager.create("u1", "acme", ttl=timedelta(0), now=now)

        assert await session_repository.find_all("acme") == []

    @pytest.mark.asyncio
    async def test_token_not_in_repr(self, session_manager, now):
        session = await session_manager.create("u1", "acme", now=now)

        assert session.token not in repr(session)
        assert "token" not in session.to_dict()


class TestExpiry:
    @pytest.mark.asyncio
    async def test_active_window(self, session_manager, now):
        session = await session_manager.create("u1", "acme", ttl=timedelta(hours=1), now=now)

        assert session_manager.is_active(session, now + timedelta(minutes=30))
        assert not session_manager.is_active(session, now + timedelta(minutes=61))
        assert not session_manager.is_active(session, now + timedelta(hours=1))

    @pytest.mark.asyncio
    async def test_expire_reports_detection_time(self, session_manager, publisher, now):
        session = await session_manager.create("u1", "acme", ttl=timedelta(hours=1), now=now)
        detected = now + timedelta(minutes=61)

        event = await session_manager.expire(session, detected)

        assert event.occurred_on == detected
        assert event.expires_at == now + timedelta(hours=1)
        assert event.detection_lag_seconds == 60
        assert event.token_hint == session.token_hint
        assert publisher.names == ["SessionExpired"]
        assert event.is_marked_for_dispatch

    @pytest.mark.asyncio
    async def test_expire_active_session_cuts_deadline(self, session_manager, session_repository, now):
        session = await session_manager.create("u1", "acme", ttl=timedelta(hours=1), now=now)
        cut = now + timedelta(minutes=10)

        event = await session_manager.expire(session, cut)

        stored = await session_repository.find_by_id(session.id, "acme")
        assert stored.expires_at == cut
        assert stored.state(cut) is SessionState.EXPIRED
        assert event.expires_at == cut

    @pytest.mark.asyncio
    async def test_revoked_session_cannot_expire(self, session_manager, publisher, now):
        session = await session_manager.create("u1", "acme", now=now)
        revoked = await session_manager.revoke(session, "logout", now)

        with pytest.raises(InvalidStateError):
            await session_manager.expire(revoked, now + timedelta(days=1))
        assert publisher.published == []


class TestRevocation:
    @pytest.mark.asyncio
    async def test_revoke_raises_no_event(self, session_manager, publisher, now):
        session = await session_manager.create("u1", "acme", now=now)

        revoked = await session_manager.revoke(session, "logout", now)

        assert revoked.state(now) is SessionState.REVOKED
        assert revoked.revoke_reason == "logout"
        assert publisher.published == []

    @pytest.mark.asyncio
    async def test_revoke_twice_keeps_first(self, session_manager, now):
        session = await session_manager.create("u1", "acme", now=now)
        first = await session_manager.revoke(session, "logout", now)

        second = await session_manager.revoke(first, "password_change", now + timedelta(minutes=5))

        assert second.revoke_reason == "logout"
        assert second.revoked_at == now

    @pytest.mark.asyncio
    async def test_revoke_all_for_user(self, session_manager, now):
        await session_manager.create("u1", "acme", now=now)
        await session_manager.create("u1", "acme", now=now)
        await session_manager.create("u1", "globex", now=now)
        await session_manager.create("u2", "acme", now=now)

        assert await session_manager.revoke_all_for_user("u1", "acme", "password_change", now) == 2
        assert await session_manager.count_active_sessions("u1", "acme", now) == 0
        assert await session_manager.count_active_sessions("u1", "globex", now) == 1
        assert await session_manager.count_active_sessions("u2", "acme", now) == 1


class TestValidation:
    @pytest.mark.asyncio
    async def test_valid_token(self, session_manager, now):
        session = await session_manager.create("u1", "acme", now=now)

        assert await session_manager.validate_token(session.token, now) == session

    @pytest.mark.asyncio
    async def test_unknown_token(self, session_manager, now):
        with pytest.raises(SessionInvalid) as exc_info:
            await session_manager.validate_token("nope", now)

        assert exc_info.value.reason == "not_found"

    @pytest.mark.asyncio
    async def test_expired_token(self, session_manager, now):
        session = await session_manager.create("u1", "acme", ttl=timedelta(minutes=5), now=now)

        with pytest.raises(SessionInvalid) as exc_info:
            await session_manager.validate_token(session.token, now + timedelta(minutes=5))

        assert exc_info.value.reason == "expired"

    @pytest.mark.asyncio
    async def test_revoked_token(self, session_manager, now):
        session = await session_manager.create("u1", "acme", now=now)
        await session_manager.revoke(session, now=now)

        with pytest.raises(SessionInvalid) as exc_info:
            await session_manager.validate_token(session.token, now)

        assert exc_info.value.reason == "revoked"

    @pytest.mark.asyncio
    async def test_refresh_extends_deadline(self, session_manager, now):
        session = await session_manager.create("u1", "acme", ttl=timedelta(minutes=5), now=now)
        later = now + timedelta(minutes=4)

        refreshed = await session_manager.refresh(session.token, timedelta(minutes=30), later)

        assert refreshed.expires_at == later + timedelta(minutes=30)
        assert await session_manager.validate_token(session.token, now + timedelta(minutes=20))

    @pytest.mark.asyncio
    async def test_refresh_rejects_zero_ttl(self, session_manager, now):
        session = await session_manager.create("u1", "acme", ttl=timedelta(minutes=5), now=now)

        with pytest.raises(ValidationError):
            await session_manager.refresh(session.token, timedelta(0), now)

        assert (await session_manager.validate_token(session.token, now)).expires_at == session.expires_at


class TestQueries:
    @pytest.mark.asyncio
    async def test_active_sessions_newest_first(self, session_manager, now):
        older = await session_manager.create("u1", "acme", now=now)
        newer = await session_manager.create("u1", "acme", now=now + timedelta(minutes=1))

        active = await session_manager.find_active_sessions("u1", "acme", now + timedelta(minutes=2))

        assert [s.id for s in active] == [newer.id, older.id]

    @pytest.mark.asyncio
    async def test_delete_expired_sessions(self, session_manager, now):
        await session_manager.create("u1", "acme", ttl=timedelta(minutes=5), now=now)
        await session_manager.create("u1", "acme", ttl=timedelta(hours=5), now=now)
        later = now + timedelta(minutes=10)

        assert await session_manager.delete_expired_sessions(later) == 1
        assert await session_manager.delete_expired_sessions(later) == 0
