"""
Fetch Error Mapping

Architectural Intent:
- Maps transport errors raised during reads onto domain errors, shared by the
  history fetcher, the detail fetcher and the listing use case
- Only RemoteUnavailableError is transient. A refusal (bad token, forbidden,
  bad request) is reported with the remote's reason and is not retryable
- A missing service is never reported as a missing deployment
"""

from typing import Optional

from tidemark.domain.exceptions import (
    DeploymentNotFoundError,
    FetchRejectedError,
    RemoteNotFoundError,
    RemoteServiceNotFoundError,
    RemoteUnavailableError,
    ServiceNotFoundError,
    TidemarkError,
    TransientFetchError,
    TransportError,
)


def translate_fetch_error(
    error: TransportError,
    service_name: str,
    deployment_id: Optional[str] = None,
) -> TidemarkError:
    if isinstance(error, RemoteServiceNotFoundError):
        return ServiceNotFoundError(service_name)
    if isinstance(error, RemoteNotFoundError):
        if deployment_id is None:
            return ServiceNotFoundError(service_name)
        return DeploymentNotFoundError(service_name, deployment_id)
    if isinstance(error, RemoteUnavailableError):
        return TransientFetchError(
            error.reason, service_name=service_name, deployment_id=deployment_id
        )
    return FetchRejectedError(
        error.reason, service_name=service_name, deployment_id=deployment_id
    )
