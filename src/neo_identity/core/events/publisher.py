"""Port to the external event pipeline."""

from typing import Protocol, runtime_checkable

from .base import DomainEvent


@runtime_checkable
class EventPublisher(Protocol):
    """Delivers claimed domain events to external consumers (bus, log sink, ...)."""

    async def publish(self, event: DomainEvent) -> None:
        """Publish one event. Called in the order events were raised."""
        ...
