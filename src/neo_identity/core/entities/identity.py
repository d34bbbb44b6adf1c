"""Entity identity shared by every identity-domain entity.

Each entity embeds an ``EntityIdentity`` (id + organization) and gets
equality and hashing from it through ``IdentifiedEntity``. Field values
never take part in equality.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ...utils import generate_uuid_v7, utc_now

SYSTEM_ORG_ID = ""


@dataclass(frozen=True)
class EntityIdentity:
    """Immutable ``(id, org_id)`` pair. An empty org_id means system-wide."""

    id: str
    org_id: str = SYSTEM_ORG_ID

    def __post_init__(self):
        if not self.id or not isinstance(self.id, str):
            raise ValueError("Entity id must be a non-empty string")
        if not isinstance(self.org_id, str):
            raise ValueError("Organization id must be a string")

    @classmethod
    def new(cls, org_id: str = SYSTEM_ORG_ID) -> "EntityIdentity":
        """Generate a fresh identity (UUIDv7) within an organization."""
        return cls(generate_uuid_v7(), org_id)

    @property
    def is_system(self) -> bool:
        return self.org_id == SYSTEM_ORG_ID

    def __str__(self) -> str:
        return f"{self.org_id or '<system>'}/{self.id}"


def same_identity(left: Any, right: Any) -> bool:
    """True when both objects carry the same (id, org_id) identity."""
    left_identity = getattr(left, "identity", None)
    right_identity = getattr(right, "identity", None)
    if left_identity is None or right_identity is None:
        return False
    return left_identity == right_identity


class IdentifiedEntity:
    """Mixin giving identity-based equality to dataclass entities.

    Concrete entities declare ``identity``, ``created_at`` and ``updated_at``
    fields and must be decorated with ``@dataclass(eq=False)`` so the
    methods below are kept.
    """

    identity: EntityIdentity
    created_at: datetime
    updated_at: datetime

    @property
    def id(self) -> str:
        return self.identity.id

    @property
    def org_id(self) -> str:
        return self.identity.org_id

    def _touch(self, now: Optional[datetime] = None) -> None:
        """Update ``updated_at``; never moves it backwards."""
        moment = now or utc_now()
        if moment > self.updated_at:
            self.updated_at = moment

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IdentifiedEntity):
            return NotImplemented
        return same_identity(self, other)

    def __hash__(self) -> int:
        return hash(self.identity)
