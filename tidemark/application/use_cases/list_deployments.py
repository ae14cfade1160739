"""
List Deployments Use Case

Architectural Intent:
- Fetches the full history, resolves the active deployment, and hands a
  DeploymentListing to the presentation layer
- The active record is resolved over the full history before the listing is
  truncated for display
"""

import logging
from typing import Optional

from tidemark.application.dtos.deployment_dtos import DEFAULT_HISTORY_LIMIT, DeploymentListing
from tidemark.application.services.history_fetcher import HistoryFetcher
from tidemark.application.services.fetch_errors import translate_fetch_error
from tidemark.domain.exceptions import TransportError
from tidemark.domain.ports.script_metadata_port import ScriptMetadataPort
from tidemark.domain.services.active_resolver import resolve_active

logger = logging.getLogger(__name__)


class ListDeployments:
    def __init__(
        self,
        history_fetcher: HistoryFetcher,
        script_metadata: Optional[ScriptMetadataPort] = None,
    ):
        self.history_fetcher = history_fetcher
        self.script_metadata = script_metadata

    async def execute(
        self, service_name: str, limit: int = DEFAULT_HISTORY_LIMIT
    ) -> DeploymentListing:
        history = await self.history_fetcher.fetch_history(service_name)
        if history.is_empty:
            logger.info("Service %s has no deployments yet", service_name)
            return DeploymentListing(service_name=service_name, history=history, limit=limit)

        active_id = await self._active_hint(service_name)
        active = resolve_active(history, active_id=active_id, service_name=service_name)
        return DeploymentListing(
            service_name=service_name, history=history, active=active, limit=limit
        )

    async def _active_hint(self, service_name: str) -> Optional[str]:
        if self.script_metadata is None:
            return None
        try:
            return await self.script_metadata.fetch_active_deployment_id(service_name)
        except TransportError as e:
            raise translate_fetch_error(e, service_name) from e
