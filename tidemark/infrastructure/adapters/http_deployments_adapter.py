"""
HTTP Deployments Adapter

Architectural Intent:
- Implements DeploymentsPort and ScriptMetadataPort against the remote
  deployments REST API using httpx
- Translates HTTP failures into transport errors; never retries (a rollback
  PUT must not be resubmitted blindly)

Design Decisions:
- Responses use the {"success", "errors", "result", "result_info"} envelope
- Deployment endpoints are addressed by script tag, resolved per call from the
  service endpoint, which also reports the active deployment id
- A rollback is a PUT on the script endpoint with ?rollback_to=<id> and no
  script payload
"""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from tidemark.domain.exceptions import (
    RemoteNotFoundError,
    RemoteRejectedError,
    RemoteServiceNotFoundError,
    RemoteUnavailableError,
)
from tidemark.domain.ports.deployments_port import DeploymentsPort, HistoryPage

logger = logging.getLogger(__name__)


def _segment(value: str) -> str:
    return quote(value, safe="")


def _error_reason(envelope: Any, default: str) -> str:
    if isinstance(envelope, dict):
        errors = envelope.get("errors") or []
        messages = [
            f"{e.get('message')} [code: {e.get('code')}]" if e.get("code") else str(e.get("message"))
            for e in errors
            if isinstance(e, dict) and e.get("message")
        ]
        if messages:
            return "; ".join(messages)
    return default


class HttpDeploymentsAdapter(DeploymentsPort):
    def __init__(
        self,
        account_id: str,
        token: str = "",
        base_url: str = "https://api.cloudflare.com/client/v4",
        timeout_seconds: float = 30,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not account_id:
            raise ValueError("account_id cannot be empty")
        self._account_id = account_id
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = client or httpx.AsyncClient(
            base_url=base_url, headers=headers, timeout=timeout_seconds
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpDeploymentsAdapter":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @property
    def _account_path(self) -> str:
        return f"/accounts/{_segment(self._account_id)}"

    async def _send(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> httpx.Response:
        logger.debug("%s %s params=%s", method, path, params)
        try:
            response = await self._client.request(method, path, params=params, json=json)
        except httpx.TimeoutException as e:
            raise RemoteUnavailableError(f"request timed out: {method} {path}") from e
        except httpx.TransportError as e:
            raise RemoteUnavailableError(f"connection failed: {e}") from e

        if response.status_code == 404:
            raise RemoteNotFoundError(
                _error_reason(_safe_json(response), f"not found: {path}"), status_code=404
            )
        if response.status_code >= 500:
            raise RemoteUnavailableError(
                _error_reason(_safe_json(response), f"server error {response.status_code}"),
                status_code=response.status_code,
            )
        if response.status_code >= 400:
            raise RemoteRejectedError(
                _error_reason(_safe_json(response), f"request rejected with {response.status_code}"),
                status_code=response.status_code,
            )
        return response

    async def _envelope(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        response = await self._send(method, path, params=params, json=json)
        envelope = _safe_json(response)
        if not isinstance(envelope, dict):
            raise RemoteRejectedError(
                f"unexpected response body from {path}", status_code=response.status_code
            )
        if envelope.get("success") is False:
            raise RemoteRejectedError(
                _error_reason(envelope, "request was not successful"),
                status_code=response.status_code,
            )
        return envelope

    async def _script(self, service_name: str) -> dict[str, Any]:
        try:
            envelope = await self._envelope(
                "GET", f"{self._account_path}/workers/services/{_segment(service_name)}"
            )
        except RemoteNotFoundError as e:
            raise RemoteServiceNotFoundError(e.reason, status_code=e.status_code) from e
        result = envelope.get("result")
        environment = result.get("default_environment") if isinstance(result, dict) else None
        script = environment.get("script") if isinstance(environment, dict) else None
        if not isinstance(script, dict):
            raise RemoteRejectedError(f"service {service_name} has no script metadata")
        return script

    async def _script_tag(self, service_name: str) -> str:
        tag = (await self._script(service_name)).get("tag")
        if not tag:
            raise RemoteRejectedError(f"service {service_name} has no script tag")
        return tag

    async def fetch_active_deployment_id(self, service_name: str) -> Optional[str]:
        deployment_id = (await self._script(service_name)).get("deployment_id")
        return deployment_id or None

    async def fetch_history_page(self, service_name: str, page: int = 1) -> HistoryPage:
        tag = await self._script_tag(service_name)
        envelope = await self._envelope(
            "GET",
            f"{self._account_path}/workers/deployments/by-script/{_segment(tag)}",
            params={"page": page},
        )
        result = envelope.get("result") or {}
        items = (result.get("items") if isinstance(result, dict) else None) or []
        info = envelope.get("result_info") or {}
        return HistoryPage(
            items=tuple(items),
            page=int(info.get("page", page)),
            total_pages=int(info.get("total_pages", 1)),
        )

    async def fetch_detail(self, service_name: str, deployment_id: str) -> dict[str, Any]:
        tag = await self._script_tag(service_name)
        envelope = await self._envelope(
            "GET",
            f"{self._account_path}/workers/deployments/by-script/{_segment(tag)}"
            f"/detail/{_segment(deployment_id)}",
        )
        return envelope.get("result")

    async def fetch_script_content(self, service_name: str, deployment_id: str) -> str:
        response = await self._send(
            "GET",
            f"{self._account_path}/workers/scripts/{_segment(service_name)}",
            params={"deployment": deployment_id},
        )
        return response.text

    async def submit_rollback(
        self, service_name: str, target_id: str, message: Optional[str] = None
    ) -> dict[str, Any]:
        envelope = await self._envelope(
            "PUT",
            f"{self._account_path}/workers/scripts/{_segment(service_name)}",
            params={"rollback_to": target_id},
            json={"message": message} if message else None,
        )
        result = envelope.get("result")
        return result if isinstance(result, dict) else {}


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
