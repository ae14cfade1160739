"""
History Fetcher

Architectural Intent:
- Retrieves the complete deployment history of one service
- Walks every page the remote service offers and returns a single
  DeploymentHistory ordered oldest-first
- Duplicate ids across pages keep their first occurrence

Error mapping:
- RemoteNotFoundError -> ServiceNotFoundError
- RemoteUnavailableError -> TransientFetchError (not retried)
- RemoteRejectedError -> FetchRejectedError with the remote's reason
- An empty history is returned as a value, never raised

Pagination:
- Page numbers are counted locally; the echoed page number is not trusted.
  The walk stops at the total page count reported on the first page.
"""

import logging

from tidemark.application.payloads import record_from_payload
from tidemark.application.services.fetch_errors import translate_fetch_error
from tidemark.domain.entities.deployment import DeploymentHistory, DeploymentRecord
from tidemark.domain.exceptions import TransportError
from tidemark.domain.ports.deployments_port import DeploymentsPort

logger = logging.getLogger(__name__)


class HistoryFetcher:
    def __init__(self, deployments: DeploymentsPort):
        self.deployments = deployments

    async def fetch_history(self, service_name: str) -> DeploymentHistory:
        if not service_name:
            raise ValueError("service_name cannot be empty")

        seen: dict[str, DeploymentRecord] = {}
        page_number = 1
        total_pages = 1
        while page_number <= total_pages:
            try:
                page = await self.deployments.fetch_history_page(service_name, page_number)
            except TransportError as e:
                raise translate_fetch_error(e, service_name) from e

            if page_number == 1:
                total_pages = page.total_pages

            for item in page.items:
                record = record_from_payload(item)
                if record.id in seen:
                    logger.debug(
                        "Skipping duplicate deployment %s on page %d of %s",
                        record.id,
                        page_number,
                        service_name,
                    )
                    continue
                seen[record.id] = record
            page_number += 1

        history = DeploymentHistory(seen.values())
        logger.info("Fetched %d deployments for %s", len(history), service_name)
        return history
