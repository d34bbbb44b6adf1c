"""Entity building blocks: identity and event recording."""

from .identity import SYSTEM_ORG_ID, EntityIdentity, IdentifiedEntity, same_identity
from .aggregate import EventRecorder

__all__ = [
    "SYSTEM_ORG_ID",
    "EntityIdentity",
    "IdentifiedEntity",
    "same_identity",
    "EventRecorder",
]
