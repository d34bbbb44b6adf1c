"""Tests for identity domain events."""

from datetime import timedelta
from typing import get_args

import pytest

from neo_identity.platform.identity.core.events import (
    AUTHORIZATION_EVENTS,
    IdentityEvent,
    PermissionChanged,
    PermissionChangeType,
    RoleCreated,
    RoleUpdated,
    SessionExpired,
    UserLoggedIn,
    UserRegistered,
)


@pytest.fixture
def session_expired(now):
    return SessionExpired(
        occurred_on=now,
        session_id="s1",
        user_id="u1",
        org_id="acme",
        token_hint="abcdef...uvwxyz",
        expires_at=now - timedelta(minutes=5),
    )


class TestIdentityEventUnion:
    def test_closed_set(self):
        assert set(get_args(IdentityEvent)) == {
            PermissionChanged,
            RoleCreated,
            RoleUpdated,
            SessionExpired,
            UserLoggedIn,
            UserRegistered,
        }

    def test_authorization_events(self):
        assert set(AUTHORIZATION_EVENTS) == {PermissionChanged, RoleCreated, RoleUpdated}

    def test_event_names_match_classes(self):
        for event_type in get_args(IdentityEvent):
            assert event_type.EVENT_NAME == event_type.__name__


class TestEventPayloads:
    def test_to_dict_includes_name_time_and_payload(self, now):
        event = UserLoggedIn(occurred_on=now, user_id="u1", org_id="acme", email="a@b.io", username="a")

        data = event.to_dict()

        assert data["event_name"] == "UserLoggedIn"
        assert data["occurred_on"] == now.isoformat()
        assert data["user_id"] == "u1"
        assert data["ip_address"] is None

    def test_permission_changed_payload(self, now):
        event = PermissionChanged(
            occurred_on=now,
            permission_id="p1",
            org_id="acme",
            permission_name="reports.export",
            module="reports",
            action="export",
            change_type=PermissionChangeType.GRANTED,
            changed_by="admin-1",
            role_id="r1",
        )

        assert event.payload()["change_type"] == "GRANTED"
        assert not event.is_system_wide

    def test_role_events_carry_permission_snapshot(self, now):
        event = RoleUpdated(
            occurred_on=now,
            role_id="r1",
            org_id="acme",
            role_name="Viewer",
            is_active=False,
            permission_ids=("p1",),
        )

        assert event.payload()["permission_ids"] == ["p1"]
        assert event.payload()["is_active"] is False

    def test_user_registered_payload(self, now):
        event = UserRegistered(
            occurred_on=now,
            user_id="u1",
            org_id="acme",
            email="a@b.io",
            username="a",
            name="A",
        )

        assert event.payload()["status"] == "ACTIVE"


class TestSessionExpired:
    def test_detection_time_differs_from_deadline(self, session_expired, now):
        assert session_expired.occurred_on == now
        assert session_expired.expires_at == now - timedelta(minutes=5)
        assert session_expired.detection_lag_seconds == 300

    def test_payload_has_no_raw_token(self, session_expired):
        payload = session_expired.payload()

        assert "token" not in payload
        assert payload["token_hint"] == "abcdef...uvwxyz"

    def test_equality_ignores_dispatch_state(self, session_expired, now):
        twin = SessionExpired(
            occurred_on=now,
            session_id="s1",
            user_id="u1",
            org_id="acme",
            token_hint="abcdef...uvwxyz",
            expires_at=now - timedelta(minutes=5),
        )
        session_expired.mark_for_dispatch()

        assert twin == session_expired
        assert not twin.is_marked_for_dispatch
