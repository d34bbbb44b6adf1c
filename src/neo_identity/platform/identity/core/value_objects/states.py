"""Derived lifecycle states for sessions and OTPs."""

from enum import Enum


class SessionState(str, Enum):
    """ACTIVE -> {EXPIRED, REVOKED}; both outcomes are terminal."""

    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    REVOKED = "REVOKED"


class OtpState(str, Enum):
    """ISSUED -> {VERIFIED, EXPIRED, SUPERSEDED}."""

    ISSUED = "ISSUED"
    VERIFIED = "VERIFIED"
    EXPIRED = "EXPIRED"
    SUPERSEDED = "SUPERSEDED"
