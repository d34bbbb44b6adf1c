"""Domain event primitives."""

from .base import DispatchMarker, DomainEvent
from .publisher import EventPublisher

__all__ = ["DispatchMarker", "DomainEvent", "EventPublisher"]
