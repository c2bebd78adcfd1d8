"""
Event publisher that writes domain events to the application log.
"""
import logging
from typing import Any, List

from ...application.interfaces.services import EventPublisher

logger = logging.getLogger(__name__)


class LoggingEventPublisher(EventPublisher):
    """Publishes domain events as structured log records."""

    async def publish(self, event: Any) -> None:
        data = event.to_dict()
        logger.info(
            "Domain event %s",
            data['event_type'],
            extra={'context': data},
        )

    async def publish_many(self, events: List[Any]) -> None:
        for event in events:
            await self.publish(event)
