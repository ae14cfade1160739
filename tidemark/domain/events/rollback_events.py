"""
Rollback Events

Architectural Intent:
- One event per RollbackAttempt state transition
- Published after orchestration so audit subscribers see the full sequence
"""

from dataclasses import dataclass
from typing import Optional

from tidemark.domain.events.event_base import DomainEvent


@dataclass(frozen=True)
class RollbackRequestedEvent(DomainEvent):
    service_name: str = ""
    target_id: str = ""
    message: Optional[str] = None


@dataclass(frozen=True)
class RollbackValidatedEvent(DomainEvent):
    target_id: str = ""
    verified_locally: bool = False


@dataclass(frozen=True)
class RollbackSubmittedEvent(DomainEvent):
    target_id: str = ""


@dataclass(frozen=True)
class RollbackConfirmedEvent(DomainEvent):
    target_id: str = ""
    new_deployment_id: str = ""


@dataclass(frozen=True)
class RollbackFailedEvent(DomainEvent):
    target_id: str = ""
    error_message: str = ""


@dataclass(frozen=True)
class RollbackRejectedEvent(DomainEvent):
    target_id: str = ""
    error_message: str = ""
