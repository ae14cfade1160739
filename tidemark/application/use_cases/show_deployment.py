"""
Show Deployment Use Case

Architectural Intent:
- Returns one deployment with full resources and, optionally, its script source
- A missing deployment surfaces as DeploymentNotFoundError, never as an empty value
"""

from tidemark.application.dtos.deployment_dtos import DeploymentDetail
from tidemark.application.services.detail_fetcher import DetailFetcher


class ShowDeployment:
    def __init__(self, detail_fetcher: DetailFetcher):
        self.detail_fetcher = detail_fetcher

    async def execute(
        self, service_name: str, deployment_id: str, include_script: bool = True
    ) -> DeploymentDetail:
        record = await self.detail_fetcher.fetch_detail(service_name, deployment_id)
        script_content = None
        if include_script:
            script_content = await self.detail_fetcher.fetch_script_content(
                service_name, record.id
            )
        return DeploymentDetail(
            service_name=service_name, record=record, script_content=script_content
        )
