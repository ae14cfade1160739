"""
Rollback Module

Architectural Intent:
- RollbackAttempt is the consistency boundary for a single rollback request
- Lifecycle enforced through state transitions on the aggregate:
  REQUESTED -> VALIDATED -> SUBMITTED -> CONFIRMED | FAILED, or REQUESTED -> REJECTED
- All state changes produce new instances so every step is auditable
- The attempt lives for one orchestration call only; nothing is persisted

Domain Events:
- RollbackRequestedEvent, RollbackValidatedEvent, RollbackSubmittedEvent
- RollbackConfirmedEvent: the remote service created a new deployment
- RollbackFailedEvent / RollbackRejectedEvent: terminal failures
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Optional

from tidemark.domain.events.event_base import DomainEvent
from tidemark.domain.events.rollback_events import (
    RollbackRequestedEvent,
    RollbackValidatedEvent,
    RollbackSubmittedEvent,
    RollbackConfirmedEvent,
    RollbackFailedEvent,
    RollbackRejectedEvent,
)


class RollbackStatus(Enum):
    REQUESTED = auto()
    VALIDATED = auto()
    SUBMITTED = auto()
    CONFIRMED = auto()
    FAILED = auto()
    REJECTED = auto()


TERMINAL_STATUSES = frozenset(
    {RollbackStatus.CONFIRMED, RollbackStatus.FAILED, RollbackStatus.REJECTED}
)


class RollbackAttempt:
    __slots__ = (
        "_service_name",
        "_target_id",
        "_message",
        "_status",
        "_new_deployment_id",
        "_error_message",
        "_domain_events",
    )

    def __init__(
        self,
        service_name: str,
        target_id: str,
        message: Optional[str] = None,
        status: RollbackStatus = RollbackStatus.REQUESTED,
        new_deployment_id: Optional[str] = None,
        error_message: Optional[str] = None,
        domain_events: tuple = (),
    ):
        self._service_name = service_name
        self._target_id = target_id
        self._message = message
        self._status = status
        self._new_deployment_id = new_deployment_id
        self._error_message = error_message
        self._domain_events = domain_events

    @classmethod
    def request(
        cls, service_name: str, target_id: str, message: Optional[str] = None
    ) -> "RollbackAttempt":
        return cls(
            service_name=service_name,
            target_id=target_id,
            message=message,
            domain_events=(
                RollbackRequestedEvent(
                    aggregate_id=service_name,
                    service_name=service_name,
                    target_id=target_id,
                    message=message,
                ),
            ),
        )

    @property
    def service_name(self) -> str:
        return self._service_name

    @property
    def target_id(self) -> str:
        return self._target_id

    @property
    def message(self) -> Optional[str]:
        return self._message

    @property
    def status(self) -> RollbackStatus:
        return self._status

    @property
    def new_deployment_id(self) -> Optional[str]:
        return self._new_deployment_id

    @property
    def error_message(self) -> Optional[str]:
        return self._error_message

    @property
    def domain_events(self) -> tuple:
        return self._domain_events

    @property
    def is_terminal(self) -> bool:
        return self._status in TERMINAL_STATUSES

    def _evolve(self, status: RollbackStatus, event: DomainEvent, **changes) -> "RollbackAttempt":
        return RollbackAttempt(
            service_name=self._service_name,
            target_id=self._target_id,
            message=self._message,
            status=status,
            new_deployment_id=changes.get("new_deployment_id", self._new_deployment_id),
            error_message=changes.get("error_message", self._error_message),
            domain_events=self._domain_events + (event,),
        )

    def validate(self, verified_locally: bool = False) -> "RollbackAttempt":
        if self._status != RollbackStatus.REQUESTED:
            raise ValueError("Rollback can only be validated from REQUESTED state")
        return self._evolve(
            RollbackStatus.VALIDATED,
            RollbackValidatedEvent(
                aggregate_id=self._service_name,
                target_id=self._target_id,
                verified_locally=verified_locally,
            ),
        )

    def reject(self, reason: str) -> "RollbackAttempt":
        if self._status != RollbackStatus.REQUESTED:
            raise ValueError("Rollback can only be rejected from REQUESTED state")
        return self._evolve(
            RollbackStatus.REJECTED,
            RollbackRejectedEvent(
                aggregate_id=self._service_name,
                target_id=self._target_id,
                error_message=reason,
            ),
            error_message=reason,
        )

    def submit(self) -> "RollbackAttempt":
        if self._status != RollbackStatus.VALIDATED:
            raise ValueError("Rollback must be VALIDATED to submit")
        return self._evolve(
            RollbackStatus.SUBMITTED,
            RollbackSubmittedEvent(aggregate_id=self._service_name, target_id=self._target_id),
        )

    def confirm(self, new_deployment_id: str) -> "RollbackAttempt":
        if self._status != RollbackStatus.SUBMITTED:
            raise ValueError("Rollback must be SUBMITTED to confirm")
        return self._evolve(
            RollbackStatus.CONFIRMED,
            RollbackConfirmedEvent(
                aggregate_id=self._service_name,
                target_id=self._target_id,
                new_deployment_id=new_deployment_id,
            ),
            new_deployment_id=new_deployment_id,
        )

    def fail(self, message: str) -> "RollbackAttempt":
        if self._status not in (RollbackStatus.VALIDATED, RollbackStatus.SUBMITTED):
            raise ValueError("Rollback can only fail once VALIDATED or SUBMITTED")
        return self._evolve(
            RollbackStatus.FAILED,
            RollbackFailedEvent(
                aggregate_id=self._service_name,
                target_id=self._target_id,
                error_message=message,
            ),
            error_message=message,
        )

    def __repr__(self) -> str:
        return (
            f"RollbackAttempt(service_name={self._service_name}, "
            f"target_id={self._target_id}, status={self._status}, "
            f"new_deployment_id={self._new_deployment_id}, error_message={self._error_message})"
        )
