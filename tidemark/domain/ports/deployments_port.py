"""
Deployments Port

Architectural Intent:
- Port interface for the remote service that owns deployment history
- Returns raw JSON-like payloads; mapping to domain records happens in the
  application layer so payload shape variance stays out of adapters
- Implemented by the HTTP adapter and the in-memory adapter

Error contract:
- RemoteNotFoundError when the service or deployment does not exist
- RemoteRejectedError when the remote service refuses a request
- RemoteUnavailableError for timeouts, connection failures and 5xx responses
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class HistoryPage:
    """One page of a paginated history listing. Pages are numbered from 1."""
    items: tuple[dict[str, Any], ...]
    page: int = 1
    total_pages: int = 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


class DeploymentsPort(ABC):
    @abstractmethod
    async def fetch_history_page(self, service_name: str, page: int = 1) -> HistoryPage:
        """Fetch one page of the deployment history for a service."""
        pass

    @abstractmethod
    async def fetch_detail(self, service_name: str, deployment_id: str) -> dict[str, Any]:
        """Fetch the full payload for one deployment, including resources."""
        pass

    @abstractmethod
    async def fetch_script_content(self, service_name: str, deployment_id: str) -> str:
        """Fetch the script source that was uploaded with a deployment."""
        pass

    @abstractmethod
    async def submit_rollback(
        self, service_name: str, target_id: str, message: Optional[str] = None
    ) -> dict[str, Any]:
        """
        Ask the remote service to create a new deployment from target_id.
        Exactly one mutating request; never retried by implementations.
        """
        pass
