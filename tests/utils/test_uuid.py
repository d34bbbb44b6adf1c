"""Tests for UUID helpers."""

import uuid

from neo_identity.utils import generate_uuid_v7, is_uuid_v7


def test_generates_version_7():
    value = uuid.UUID(generate_uuid_v7())

    assert value.version == 7
    assert value.variant == uuid.RFC_4122


def test_values_are_unique():
    assert len({generate_uuid_v7() for _ in range(1000)}) == 1000


def test_time_ordered_prefix():
    first = generate_uuid_v7()
    second = generate_uuid_v7()

    assert first[:8] <= second[:8]


def test_is_uuid_v7():
    assert is_uuid_v7(generate_uuid_v7())
    assert not is_uuid_v7(str(uuid.uuid4()))
    assert not is_uuid_v7("not-a-uuid")
