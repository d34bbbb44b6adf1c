"""UUID utilities for neo-identity."""

import secrets
import time
import uuid

_VERSION_7 = 0x7 << 76
_VARIANT_RFC4122 = 0x2 << 62


def generate_uuid_v7() -> str:
    """
    Generate a time-ordered UUIDv7 string.

    The top 48 bits hold the Unix time in milliseconds, so identities
    issued later sort after earlier ones (index-friendly primary keys).
    The remaining 74 non-fixed bits are random.
    """
    timestamp_ms = time.time_ns() // 1_000_000
    rand_a = secrets.randbits(12)
    rand_b = secrets.randbits(62)

    value = (timestamp_ms & 0xFFFF_FFFF_FFFF) << 80
    value |= _VERSION_7 | (rand_a << 64) | _VARIANT_RFC4122 | rand_b
    return str(uuid.UUID(int=value))


def is_uuid_v7(value: str) -> bool:
    """True when ``value`` parses as a version-7 UUID."""
    try:
        return uuid.UUID(value).version == 7
    except (ValueError, AttributeError, TypeError):
        return False
