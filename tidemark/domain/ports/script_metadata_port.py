"""
Script Metadata Port

Architectural Intent:
- Side-channel reporting which deployment currently receives traffic
- Optional signal: None means the remote service did not say, and the
  active resolver falls back to the latest deployment
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class ScriptMetadataPort(Protocol):
    """Port for reading the active deployment pointer of a service."""

    async def fetch_active_deployment_id(self, service_name: str) -> Optional[str]:
        """Return the id of the deployment serving traffic, or None if unknown."""
        ...
