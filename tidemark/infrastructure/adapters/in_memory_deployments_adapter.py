"""
In-Memory Deployments Adapter

Architectural Intent:
- Implements DeploymentsPort and ScriptMetadataPort without a network
- Behaves like the remote service: paginates listings, assigns new ids on
  rollback, appends the rollback to history and moves the active pointer
- Used by the test suite and the end-to-end flow tests

Design Decisions:
- Stores payloads in the same shapes the HTTP API returns so the application
  layer's conversions are exercised unchanged
- Generates stub deployment ids with uuid4, like the notification stubs
"""

import copy
import logging
import uuid
from datetime import datetime, UTC
from typing import Any, Optional

from tidemark.domain.exceptions import RemoteNotFoundError, RemoteServiceNotFoundError
from tidemark.domain.ports.deployments_port import DeploymentsPort, HistoryPage

logger = logging.getLogger(__name__)


class InMemoryDeploymentsAdapter(DeploymentsPort):
    def __init__(self, page_size: int = 10, author: str = "tidemark@localhost") -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._page_size = page_size
        self._author = author
        self._services: dict[str, list[dict[str, Any]]] = {}
        self._scripts: dict[tuple[str, str], str] = {}
        self._active: dict[str, Optional[str]] = {}
        self.rollback_requests: list[tuple[str, str, Optional[str]]] = []

    def add_service(self, service_name: str) -> None:
        self._services.setdefault(service_name, [])
        self._active.setdefault(service_name, None)

    def add_deployment(
        self,
        service_name: str,
        payload: dict[str, Any],
        script: str = "",
        active: bool = True,
    ) -> None:
        """Seed a deployment in the listing/detail payload shape."""
        self.add_service(service_name)
        self._services[service_name].append(copy.deepcopy(payload))
        self._scripts[(service_name, payload["id"])] = script
        if active:
            self._active[service_name] = payload["id"]

    def _history(self, service_name: str) -> list[dict[str, Any]]:
        if service_name not in self._services:
            raise RemoteServiceNotFoundError(f"service {service_name} not found", status_code=404)
        return self._services[service_name]

    def _find(self, service_name: str, deployment_id: str) -> dict[str, Any]:
        for payload in self._history(service_name):
            if payload["id"] == deployment_id:
                return payload
        raise RemoteNotFoundError(
            f"deployment {deployment_id} not found for {service_name}", status_code=404
        )

    async def fetch_active_deployment_id(self, service_name: str) -> Optional[str]:
        self._history(service_name)
        return self._active.get(service_name)

    async def fetch_history_page(self, service_name: str, page: int = 1) -> HistoryPage:
        history = self._history(service_name)
        total_pages = max(1, -(-len(history) // self._page_size))
        start = (page - 1) * self._page_size
        items = []
        for payload in history[start:start + self._page_size]:
            summary = copy.deepcopy(payload)
            summary.pop("resources", None)
            items.append(summary)
        return HistoryPage(items=tuple(items), page=page, total_pages=total_pages)

    async def fetch_detail(self, service_name: str, deployment_id: str) -> dict[str, Any]:
        return copy.deepcopy(self._find(service_name, deployment_id))

    async def fetch_script_content(self, service_name: str, deployment_id: str) -> str:
        self._find(service_name, deployment_id)
        return self._scripts.get((service_name, deployment_id), "")

    async def submit_rollback(
        self, service_name: str, target_id: str, message: Optional[str] = None
    ) -> dict[str, Any]:
        self.rollback_requests.append((service_name, target_id, message))
        target = self._find(service_name, target_id)
        history = self._history(service_name)

        new_id = str(uuid.uuid4())
        now = datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
        number = max((p.get("number") or 0 for p in history), default=0) + 1
        resources = copy.deepcopy(target.get("resources") or {})
        script = resources.get("script") or {}

        history.append(
            {
                "id": new_id,
                "number": number,
                "metadata": {
                    "author_email": self._author,
                    "source": "api",
                    "created_on": now,
                    "modified_on": now,
                },
                "resources": resources,
                "rollback": {"rollback_to": target_id},
            }
        )
        self._scripts[(service_name, new_id)] = self._scripts.get((service_name, target_id), "")
        self._active[service_name] = new_id
        logger.info("In-memory rollback of %s to %s created %s", service_name, target_id, new_id)

        return {
            "deployment_id": new_id,
            "created_on": now,
            "modified_on": now,
            "author_email": self._author,
            "last_deployed_from": "api",
            "number": number,
            "rollback_to": target_id,
            "etag": script.get("etag"),
            "handlers": list(script.get("handlers") or []),
            "bindings": list(resources.get("bindings") or []),
        }
