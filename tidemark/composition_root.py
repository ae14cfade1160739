"""
Composition Root

Architectural Intent:
- Dependency injection composition root for the tidemark application
- Single place where adapters and use cases are wired together
- No adapter instantiation should occur outside this module

Design Decisions:
- Uses a simple dataclass container instead of a DI framework
- The deployments adapter doubles as the script metadata side-channel
- Rollback events are routed to the audit log subscriber
"""

from dataclasses import dataclass
from typing import Optional

from tidemark.application.services.detail_fetcher import DetailFetcher
from tidemark.application.services.history_fetcher import HistoryFetcher
from tidemark.application.use_cases.list_deployments import ListDeployments
from tidemark.application.use_cases.rollback_deployment import RollbackDeployment
from tidemark.application.use_cases.show_deployment import ShowDeployment
from tidemark.domain.events.event_base import DomainEvent
from tidemark.domain.ports.deployments_port import DeploymentsPort
from tidemark.infrastructure.adapters.http_deployments_adapter import HttpDeploymentsAdapter
from tidemark.infrastructure.audit_log import AuditLogSubscriber
from tidemark.infrastructure.config import TidemarkConfig
from tidemark.infrastructure.event_bus import EventBus


@dataclass
class TidemarkContainer:
    """DI container holding all wired dependencies."""

    config: TidemarkConfig
    deployments: DeploymentsPort
    event_bus: EventBus
    audit_log: AuditLogSubscriber
    history_fetcher: HistoryFetcher
    detail_fetcher: DetailFetcher
    list_deployments: ListDeployments
    show_deployment: ShowDeployment
    rollback: RollbackDeployment

    async def close(self) -> None:
        close = getattr(self.deployments, "close", None)
        if close is not None:
            await close()


def create_container(
    config: Optional[TidemarkConfig] = None,
    deployments: Optional[DeploymentsPort] = None,
) -> TidemarkContainer:
    """Create and wire all dependencies."""
    config = config or TidemarkConfig()
    if deployments is None:
        deployments = HttpDeploymentsAdapter(
            account_id=config.api.account_id,
            token=config.api.token,
            base_url=config.api.base_url,
            timeout_seconds=config.api.timeout_seconds,
        )

    event_bus = EventBus()
    audit_log = AuditLogSubscriber()
    event_bus.subscribe(DomainEvent, audit_log)

    history_fetcher = HistoryFetcher(deployments)
    detail_fetcher = DetailFetcher(deployments)
    script_metadata = deployments if hasattr(deployments, "fetch_active_deployment_id") else None

    return TidemarkContainer(
        config=config,
        deployments=deployments,
        event_bus=event_bus,
        audit_log=audit_log,
        history_fetcher=history_fetcher,
        detail_fetcher=detail_fetcher,
        list_deployments=ListDeployments(history_fetcher, script_metadata),
        show_deployment=ShowDeployment(detail_fetcher),
        rollback=RollbackDeployment(deployments, event_bus),
    )
