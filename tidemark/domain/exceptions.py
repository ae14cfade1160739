"""
Domain Exceptions

Architectural Intent:
- Single error taxonomy for the deployment lifecycle manager
- Every error carries the service name and deployment id it concerns so the
  message is actionable without reading logs
- Transport errors are raised by adapters and mapped onto domain errors by
  the application layer

Design Decisions:
- An empty history is a value, not an error, so there is no EmptyHistoryError
- Validation errors (MalformedRecordError, InvalidTargetError) name the
  violated constraint
"""

from typing import Optional


class TidemarkError(Exception):
    """Base class for all tidemark errors."""

    def __init__(
        self,
        message: str,
        service_name: Optional[str] = None,
        deployment_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.service_name = service_name
        self.deployment_id = deployment_id


class MalformedRecordError(TidemarkError):
    """A deployment payload is missing a required field or has the wrong shape."""

    def __init__(self, field_name: str, reason: str, deployment_id: Optional[str] = None) -> None:
        where = f" (deployment {deployment_id})" if deployment_id else ""
        super().__init__(
            f"Malformed deployment record{where}: field '{field_name}' {reason}",
            deployment_id=deployment_id,
        )
        self.field_name = field_name


class ServiceNotFoundError(TidemarkError):
    def __init__(self, service_name: str) -> None:
        super().__init__(f"Service '{service_name}' was not found", service_name=service_name)


class DeploymentNotFoundError(TidemarkError):
    def __init__(self, service_name: str, deployment_id: str) -> None:
        super().__init__(
            f"Deployment '{deployment_id}' was not found for service '{service_name}'",
            service_name=service_name,
            deployment_id=deployment_id,
        )


class NoActiveDeploymentError(TidemarkError):
    def __init__(self, service_name: Optional[str] = None) -> None:
        target = f"service '{service_name}'" if service_name else "an empty history"
        super().__init__(
            f"No active deployment for {target}: it has never been deployed",
            service_name=service_name,
        )


class InvalidTargetError(TidemarkError):
    """The rollback target id is not well-formed."""

    def __init__(self, reason: str, service_name: Optional[str] = None, deployment_id: Optional[str] = None) -> None:
        super().__init__(
            f"Invalid rollback target for service '{service_name}': {reason}",
            service_name=service_name,
            deployment_id=deployment_id,
        )
        self.reason = reason


class RollbackNotFoundError(TidemarkError):
    def __init__(self, service_name: str, deployment_id: str) -> None:
        super().__init__(
            f"Cannot roll back service '{service_name}': deployment '{deployment_id}' does not exist",
            service_name=service_name,
            deployment_id=deployment_id,
        )


class RollbackRejectedError(TidemarkError):
    """The remote service refused the rollback, or its outcome could not be confirmed.

    ``outcome_unknown`` is True when the submission may have been applied
    (timeout, dropped connection). Callers must re-read the history before
    deciding to resubmit.
    """

    def __init__(
        self,
        service_name: str,
        deployment_id: str,
        reason: str,
        outcome_unknown: bool = False,
    ) -> None:
        super().__init__(
            f"Rollback of service '{service_name}' to deployment '{deployment_id}' was rejected: {reason}",
            service_name=service_name,
            deployment_id=deployment_id,
        )
        self.reason = reason
        self.outcome_unknown = outcome_unknown


class FetchRejectedError(TidemarkError):
    """The remote service refused a read (bad credentials, forbidden, bad request).

    Not retryable: the same request will be refused again.
    """

    def __init__(self, reason: str, service_name: Optional[str] = None, deployment_id: Optional[str] = None) -> None:
        where = f"service '{service_name}'" if service_name else "remote service"
        if deployment_id:
            where += f", deployment '{deployment_id}'"
        super().__init__(
            f"Remote service refused the request ({where}): {reason}",
            service_name=service_name,
            deployment_id=deployment_id,
        )
        self.reason = reason


class TransientFetchError(TidemarkError):
    """A read from the remote service failed in a way that may succeed later."""

    def __init__(self, reason: str, service_name: Optional[str] = None, deployment_id: Optional[str] = None) -> None:
        where = f"service '{service_name}'" if service_name else "remote service"
        if deployment_id:
            where += f", deployment '{deployment_id}'"
        super().__init__(
            f"Temporary failure talking to the remote service ({where}): {reason}",
            service_name=service_name,
            deployment_id=deployment_id,
        )
        self.reason = reason


# Transport errors, raised by adapters only


class TransportError(TidemarkError):
    def __init__(self, reason: str, status_code: Optional[int] = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


class RemoteNotFoundError(TransportError):
    pass


class RemoteServiceNotFoundError(RemoteNotFoundError):
    """The service itself does not exist, as opposed to one of its deployments."""


class RemoteRejectedError(TransportError):
    pass


class RemoteUnavailableError(TransportError):
    pass
