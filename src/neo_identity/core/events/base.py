"""Domain event base with one-way dispatch marking."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Dict

from ...utils import ensure_utc


class DispatchMarker:
    """Monotonic false -> true flag recording that an event was claimed for dispatch."""

    __slots__ = ("_marked",)

    def __init__(self) -> None:
        self._marked = False

    @property
    def is_marked(self) -> bool:
        return self._marked

    def mark(self) -> bool:
        """Flip the flag. Returns False (no-op) if it was already set."""
        if self._marked:
            return False
        self._marked = True
        return True

    def __deepcopy__(self, memo: Dict[int, Any]) -> "DispatchMarker":
        clone = DispatchMarker()
        clone._marked = self._marked
        return clone

    def __repr__(self) -> str:
        return f"DispatchMarker(marked={self._marked})"


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """Immutable snapshot of something that happened to an aggregate.

    Payload fields are copies of the source entity's public data taken at
    the moment the event is raised, so an event stays valid after the
    entity changes or is deleted. ``occurred_on`` is the logical event
    time, not the time of dispatch.
    """

    EVENT_NAME: ClassVar[str] = "DomainEvent"

    occurred_on: datetime
    _dispatch: DispatchMarker = field(default_factory=DispatchMarker, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "occurred_on", ensure_utc(self.occurred_on))

    @property
    def event_name(self) -> str:
        return self.EVENT_NAME

    @property
    def is_marked_for_dispatch(self) -> bool:
        return self._dispatch.is_marked

    def mark_for_dispatch(self) -> bool:
        """Claim the event for dispatch. Re-marking is a no-op returning False."""
        return self._dispatch.mark()

    def payload(self) -> Dict[str, Any]:
        """Event-specific fields; overridden by concrete events."""
        return {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "event_name": self.event_name,
            "occurred_on": self.occurred_on.isoformat(),
            **self.payload(),
        }
