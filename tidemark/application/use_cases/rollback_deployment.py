"""
Rollback Deployment Use Case

Architectural Intent:
- Orchestrates a single rollback as a short-lived RollbackAttempt:
  REQUESTED -> VALIDATED -> SUBMITTED -> CONFIRMED | FAILED, or REQUESTED -> REJECTED
- A rollback creates a NEW deployment on the remote service; history is never
  edited
- Exactly one mutating call per invocation and no retries here. A submission
  whose acknowledgement was lost may still have been applied, so callers that
  want to retry must re-read the history first
- Attempt events are published to the event bus whatever the outcome,
  including unexpected errors after submission

Validation:
- Only the id's shape is checked locally (non-empty). Unknown ids are
  reported by the remote service at submission, unless the caller already
  holds the history, in which case an absent id fails before any request
"""

import logging
from typing import Any, Optional

from tidemark.application.dtos.deployment_dtos import RollbackResult
from tidemark.application.payloads import record_from_rollback_confirmation
from tidemark.domain.entities.deployment import DeploymentHistory
from tidemark.domain.entities.rollback import RollbackAttempt
from tidemark.domain.exceptions import (
    InvalidTargetError,
    MalformedRecordError,
    RemoteNotFoundError,
    RemoteRejectedError,
    RemoteServiceNotFoundError,
    RemoteUnavailableError,
    RollbackNotFoundError,
    RollbackRejectedError,
    ServiceNotFoundError,
)
from tidemark.domain.ports.deployments_port import DeploymentsPort
from tidemark.domain.ports.event_bus_port import EventBusPort

logger = logging.getLogger(__name__)


class RollbackDeployment:
    def __init__(
        self,
        deployments: DeploymentsPort,
        event_bus: Optional[EventBusPort] = None,
    ):
        self.deployments = deployments
        self.event_bus = event_bus

    async def execute(
        self,
        service_name: str,
        target_id: str,
        message: Optional[str] = None,
        known_history: Optional[DeploymentHistory] = None,
    ) -> RollbackResult:
        if not service_name:
            raise ValueError("service_name cannot be empty")

        attempt = RollbackAttempt.request(service_name, target_id, message)
        try:
            attempt, result = await self._run(attempt, known_history)
            return result
        except _AttemptEnded as ended:
            attempt = ended.attempt
            raise ended.error from ended.error.__cause__
        finally:
            await self._publish(attempt)

    async def _run(
        self, attempt: RollbackAttempt, known_history: Optional[DeploymentHistory]
    ) -> tuple[RollbackAttempt, RollbackResult]:
        service_name = attempt.service_name
        target_id = attempt.target_id

        if not isinstance(target_id, str) or not target_id.strip():
            reason = "deployment ID must be a non-empty string"
            raise _AttemptEnded(
                attempt.reject(reason),
                InvalidTargetError(reason, service_name=service_name, deployment_id=target_id),
            )

        attempt = attempt.validate(verified_locally=known_history is not None)
        if known_history is not None and target_id not in known_history:
            error = RollbackNotFoundError(service_name, target_id)
            raise _AttemptEnded(attempt.fail(error.message), error)

        attempt = attempt.submit()
        try:
            payload = await self._submit(attempt)
            return self._confirm(attempt, payload, known_history)
        except _AttemptEnded:
            raise
        except Exception as e:
            logger.error(
                "Rollback of %s to %s ended with an unexpected error after submission: %s",
                service_name,
                target_id,
                e,
            )
            raise _AttemptEnded(attempt.fail(f"unexpected error: {e}"), e) from e

    async def _submit(self, attempt: RollbackAttempt) -> Any:
        service_name = attempt.service_name
        target_id = attempt.target_id
        logger.info("Submitting rollback of %s to deployment %s", service_name, target_id)
        try:
            return await self.deployments.submit_rollback(
                service_name, target_id, attempt.message
            )
        except RemoteServiceNotFoundError as e:
            error = ServiceNotFoundError(service_name)
            error.__cause__ = e
            raise _AttemptEnded(attempt.fail(error.message), error)
        except RemoteNotFoundError as e:
            error = RollbackNotFoundError(service_name, target_id)
            error.__cause__ = e
            raise _AttemptEnded(attempt.fail(error.message), error)
        except RemoteRejectedError as e:
            error = RollbackRejectedError(service_name, target_id, e.reason)
            error.__cause__ = e
            raise _AttemptEnded(attempt.fail(error.message), error)
        except RemoteUnavailableError as e:
            logger.warning(
                "Rollback of %s to %s was not acknowledged; re-read the history "
                "before resubmitting",
                service_name,
                target_id,
            )
            error = RollbackRejectedError(
                service_name, target_id, f"no confirmation received: {e.reason}", outcome_unknown=True
            )
            error.__cause__ = e
            raise _AttemptEnded(attempt.fail(error.message), error)

    def _confirm(
        self,
        attempt: RollbackAttempt,
        payload: Any,
        known_history: Optional[DeploymentHistory],
    ) -> tuple[RollbackAttempt, RollbackResult]:
        service_name = attempt.service_name
        target_id = attempt.target_id
        try:
            record = record_from_rollback_confirmation(payload)
        except MalformedRecordError as e:
            error = RollbackRejectedError(
                service_name, target_id, f"malformed confirmation ({e.message})"
            )
            error.__cause__ = e
            raise _AttemptEnded(attempt.fail(error.message), error)

        if record.id == target_id or (known_history is not None and record.id in known_history):
            error = RollbackRejectedError(
                service_name,
                target_id,
                f"confirmation reused existing deployment ID '{record.id}'",
            )
            raise _AttemptEnded(attempt.fail(error.message), error)

        attempt = attempt.confirm(record.id)
        logger.info(
            "Rolled back %s to %s as new deployment %s", service_name, target_id, record.id
        )
        return attempt, RollbackResult(
            service_name=service_name, target_id=target_id, record=record, attempt=attempt
        )

    async def _publish(self, attempt: RollbackAttempt) -> None:
        if self.event_bus is None:
            return
        await self.event_bus.publish(list(attempt.domain_events))


class _AttemptEnded(Exception):
    """Carries the terminal attempt alongside the error to raise."""

    def __init__(self, attempt: RollbackAttempt, error: BaseException) -> None:
        super().__init__(str(error))
        self.attempt = attempt
        self.error = error
