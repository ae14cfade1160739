"""
Audit Log Subscriber

Architectural Intent:
- Writes every rollback lifecycle event to the log so rollbacks are auditable
- Keeps a copy of handled events for the current process (used by tests)
"""

import json
import logging

from tidemark.domain.events.event_base import DomainEvent

logger = logging.getLogger(__name__)


class AuditLogSubscriber:
    def __init__(self) -> None:
        self.events: list[DomainEvent] = []

    async def __call__(self, event: DomainEvent) -> None:
        self.events.append(event)
        logger.info(
            "audit %s %s",
            event.event_type,
            json.dumps(event.to_dict(), default=str),
            extra={"service_name": event.aggregate_id, "event_type": event.event_type},
        )
