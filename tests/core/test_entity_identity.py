"""Tests for entity identity and domain event dispatch marking."""

import copy
from datetime import datetime, timezone

import pytest

from neo_identity.core.entities import SYSTEM_ORG_ID, EntityIdentity, EventRecorder, same_identity
from neo_identity.core.events import DispatchMarker, DomainEvent
from neo_identity.platform.identity.core.entities import Role, User
from neo_identity.platform.identity.core.events import UserRegistered


class TestEntityIdentity:
    """Identity value shared by every entity."""

    def test_defaults_to_system_org(self):
        identity = EntityIdentity("perm-1")

        assert identity.org_id == SYSTEM_ORG_ID
        assert identity.is_system
        assert str(identity) == "<system>/perm-1"

    def test_new_generates_unique_ids(self):
        first = EntityIdentity.new("acme")
        second = EntityIdentity.new("acme")

        assert first.id != second.id
        assert first.org_id == "acme"
        assert not first.is_system

    @pytest.mark.parametrize("entity_id", ["", None])
    def test_rejects_empty_id(self, entity_id):
        with pytest.raises(ValueError):
            EntityIdentity(entity_id, "acme")


class TestEntityEquality:
    """Equality is decided by (id, org_id) only."""

    def test_same_identity_different_fields_are_equal(self, sample_user):
        other = copy.deepcopy(sample_user)
        other.name = "Someone Else"
        other.failed_login_attempts = 4

        assert other == sample_user
        assert hash(other) == hash(sample_user)
        assert same_identity(other, sample_user)

    def test_same_id_different_org_is_never_equal(self, sample_user):
        other = copy.deepcopy(sample_user)
        other.identity = EntityIdentity(sample_user.id, "globex")

        assert other != sample_user
        assert not same_identity(other, sample_user)

    def test_entities_of_different_types_compare_by_identity(self, sample_user, now):
        role = Role(identity=sample_user.identity, name="Admin", created_at=now, updated_at=now)

        assert role == sample_user

    def test_non_entity_comparison(self, sample_user):
        assert sample_user != "not an entity"
        assert not same_identity(sample_user, object())

    def test_entities_work_in_sets(self, sample_user):
        clone = copy.deepcopy(sample_user)
        clone.username = "renamed"

        assert len({sample_user, clone}) == 1


class TestTouch:
    def test_touch_moves_updated_at_forward(self, sample_user, now):
        later = datetime(2025, 3, 2, tzinfo=timezone.utc)

        sample_user._touch(later)

        assert sample_user.updated_at == later

    def test_touch_never_moves_backwards(self, sample_user, now):
        earlier = datetime(2024, 1, 1, tzinfo=timezone.utc)

        sample_user._touch(earlier)

        assert sample_user.updated_at == now


class TestDispatchMarking:
    """Events flip their dispatch flag false -> true exactly once."""

    def test_marker_is_monotonic(self):
        marker = DispatchMarker()

        assert not marker.is_marked
        assert marker.mark() is True
        assert marker.mark() is False
        assert marker.is_marked

    def test_event_starts_unmarked(self, now):
        event = DomainEvent(occurred_on=now)

        assert not event.is_marked_for_dispatch
        assert event.event_name == "DomainEvent"

    def test_remarking_is_a_noop(self, now):
        event = DomainEvent(occurred_on=now)

        assert event.mark_for_dispatch() is True
        assert event.mark_for_dispatch() is False
        assert event.is_marked_for_dispatch

    def test_naive_occurred_on_is_treated_as_utc(self):
        event = DomainEvent(occurred_on=datetime(2025, 1, 1, 8, 30))

        assert event.occurred_on.tzinfo == timezone.utc
        assert event.occurred_on.hour == 8

    def test_events_are_immutable(self, now):
        event = DomainEvent(occurred_on=now)

        with pytest.raises(AttributeError):
            event.occurred_on = now  # type: ignore[misc]


class TestEventRecorder:
    def test_events_kept_in_insertion_order(self, now):
        user = User.register("a@example.com", "a", "A", "acme", now=now)
        user.record_login(now)

        assert [event.event_name for event in user.domain_events] == ["UserRegistered", "UserLoggedIn"]

    def test_mark_events_for_dispatch_counts_new_marks(self, now):
        user = User.register("a@example.com", "a", "A", "acme", now=now)
        user.record_login(now)

        assert user.mark_events_for_dispatch() == 2
        assert user.mark_events_for_dispatch() == 0
        assert all(event.is_marked_for_dispatch for event in user.domain_events)

    def test_clear_events(self, now):
        user = User.register("a@example.com", "a", "A", "acme", now=now)

        user.clear_events()

        assert user.domain_events == ()

    def test_domain_events_is_a_read_only_view(self, now):
        user = User.register("a@example.com", "a", "A", "acme", now=now)

        events = user.domain_events

        assert isinstance(events, tuple)
        assert isinstance(events[0], UserRegistered)

    def test_recorder_on_plain_object(self, now):
        class Aggregate(EventRecorder):
            pass

        aggregate = Aggregate()
        aggregate._record_event(DomainEvent(occurred_on=now))

        assert len(aggregate.domain_events) == 1
