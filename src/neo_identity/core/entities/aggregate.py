"""Domain event accumulation for aggregates."""

from typing import List, Tuple

from ..events.base import DomainEvent


class EventRecorder:
    """Mixin for aggregates that raise domain events.

    Events are kept in insertion order until the owner either marks them
    for dispatch (handing them to the event pipeline) or clears them
    after a successful commit.
    """

    def _pending_events(self) -> List[DomainEvent]:
        events = self.__dict__.get("_domain_events")
        if events is None:
            events = []
            self.__dict__["_domain_events"] = events
        return events

    def _record_event(self, event: DomainEvent) -> DomainEvent:
        self._pending_events().append(event)
        return event

    @property
    def domain_events(self) -> Tuple[DomainEvent, ...]:
        return tuple(self._pending_events())

    def clear_events(self) -> None:
        self._pending_events().clear()

    def mark_events_for_dispatch(self) -> int:
        """Mark every pending event for dispatch.

        Returns:
            Number of events that were newly marked; already-marked
            events are left untouched.
        """
        return sum(1 for event in self._pending_events() if event.mark_for_dispatch())
