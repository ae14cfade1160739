"""
Domain Ports Package

Architectural Intent:
- Contains port interfaces (abstract contracts) for external dependencies
- Ports define what the domain needs, adapters implement how
- Follows Hexagonal Architecture principles
"""

from tidemark.domain.ports.deployments_port import DeploymentsPort, HistoryPage
from tidemark.domain.ports.script_metadata_port import ScriptMetadataPort
from tidemark.domain.ports.event_bus_port import EventBusPort

__all__ = [
    "DeploymentsPort",
    "HistoryPage",
    "ScriptMetadataPort",
    "EventBusPort",
]
