"""
Deployment DTOs

Architectural Intent:
- Data Transfer Objects returned by the use cases to the presentation layer
- An empty listing is a valid value distinct from any error
"""

from dataclasses import dataclass
from typing import Optional

from tidemark.domain.entities.deployment import DeploymentHistory, DeploymentRecord
from tidemark.domain.entities.rollback import RollbackAttempt

DEFAULT_HISTORY_LIMIT = 10


@dataclass(frozen=True)
class DeploymentListing:
    service_name: str
    history: DeploymentHistory
    active: Optional[DeploymentRecord] = None
    limit: int = DEFAULT_HISTORY_LIMIT

    @property
    def is_empty(self) -> bool:
        return self.history.is_empty

    @property
    def visible(self) -> tuple[DeploymentRecord, ...]:
        """The most recent `limit` deployments, oldest first."""
        return self.history.tail(self.limit)


@dataclass(frozen=True)
class DeploymentDetail:
    service_name: str
    record: DeploymentRecord
    script_content: Optional[str] = None


@dataclass(frozen=True)
class RollbackResult:
    service_name: str
    target_id: str
    record: DeploymentRecord
    attempt: RollbackAttempt
