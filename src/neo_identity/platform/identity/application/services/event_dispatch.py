"""Hand-off of aggregate events to the external event pipeline."""

import logging
from typing import Iterable, Optional

from .....core.entities import EventRecorder
from .....core.events import DomainEvent, EventPublisher

logger = logging.getLogger(__name__)


async def publish_events(events: Iterable[DomainEvent], publisher: Optional[EventPublisher]) -> int:
    """Claim and publish events in order.

    Events already claimed by an earlier dispatch are skipped, so the
    same event is never handed to the publisher twice.

    Returns:
        Number of events published
    """
    published = 0
    for event in events:
        if not event.mark_for_dispatch():
            continue
        if publisher is None:
            logger.debug(f"No event publisher configured, dropping {event.event_name}")
            continue
        await publisher.publish(event)
        published += 1
    return published


async def dispatch_events(aggregate: EventRecorder, publisher: Optional[EventPublisher]) -> int:
    """Publish an aggregate's pending events, then clear them.

    Call only after the aggregate was persisted. If the publisher fails
    the exception propagates and the events stay queued on the aggregate;
    the failed event is already claimed and will not be published again.
    """
    published = await publish_events(aggregate.domain_events, publisher)
    aggregate.clear_events()
    return published
