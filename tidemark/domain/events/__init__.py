"""
Domain Events Package

Architectural Intent:
- Contains domain events and event bus infrastructure
- Events are the primary mechanism for cross-boundary communication
"""

from tidemark.domain.events.event_base import DomainEvent
from tidemark.domain.events.rollback_events import (
    RollbackRequestedEvent,
    RollbackValidatedEvent,
    RollbackSubmittedEvent,
    RollbackConfirmedEvent,
    RollbackFailedEvent,
    RollbackRejectedEvent,
)

__all__ = [
    "DomainEvent",
    "RollbackRequestedEvent",
    "RollbackValidatedEvent",
    "RollbackSubmittedEvent",
    "RollbackConfirmedEvent",
    "RollbackFailedEvent",
    "RollbackRejectedEvent",
]
