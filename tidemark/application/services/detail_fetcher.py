"""
Detail Fetcher

Architectural Intent:
- Retrieves one deployment with its full resources payload
- Also fetches the script source uploaded with that deployment
"""

import logging
from dataclasses import replace

from tidemark.application.payloads import record_from_payload, resources_from_payload
from tidemark.application.services.fetch_errors import translate_fetch_error
from tidemark.domain.entities.deployment import DeploymentRecord
from tidemark.domain.exceptions import TransportError
from tidemark.domain.ports.deployments_port import DeploymentsPort
from tidemark.domain.value_objects.deployment_id import DeploymentId

logger = logging.getLogger(__name__)


class DetailFetcher:
    def __init__(self, deployments: DeploymentsPort):
        self.deployments = deployments

    async def fetch_detail(self, service_name: str, deployment_id: str) -> DeploymentRecord:
        target = str(DeploymentId(deployment_id))
        try:
            payload = await self.deployments.fetch_detail(service_name, target)
        except TransportError as e:
            raise translate_fetch_error(e, service_name, target) from e

        record = record_from_payload(payload)
        if record.resources is None:
            # Detail always carries resources; an absent block means none are bound.
            record = replace(record, resources=resources_from_payload({}))
        return record

    async def fetch_script_content(self, service_name: str, deployment_id: str) -> str:
        target = str(DeploymentId(deployment_id))
        try:
            return await self.deployments.fetch_script_content(service_name, target)
        except TransportError as e:
            raise translate_fetch_error(e, service_name, target) from e
