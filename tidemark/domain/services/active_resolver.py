"""
Active Resolver

Architectural Intent:
- Derives the deployment currently receiving traffic from an ordered history
- Pure function over the history; no cursor or stored pointer exists anywhere

Resolution policy:
1. If the script metadata side-channel names an active deployment id and that
   id is present in the history, that record is active.
2. Otherwise the latest record by (number, created_at) is active. This is the
   documented fallback whenever the remote service does not flag one.

A hint naming an id outside the history is ignored (with a warning) so the
result is always a member of the input.
"""

import logging
from typing import Iterable, Optional, Union

from tidemark.domain.entities.deployment import (
    DeploymentHistory,
    DeploymentRecord,
    history_order_key,
)
from tidemark.domain.exceptions import NoActiveDeploymentError

logger = logging.getLogger(__name__)


def resolve_active(
    history: Union[DeploymentHistory, Iterable[DeploymentRecord]],
    active_id: Optional[str] = None,
    service_name: Optional[str] = None,
) -> DeploymentRecord:
    records = tuple(history)
    if not records:
        raise NoActiveDeploymentError(service_name)

    if active_id:
        for record in records:
            if record.id == active_id:
                return record
        logger.warning(
            "Active deployment %s reported for %s is not in the fetched history; "
            "falling back to the latest deployment",
            active_id,
            service_name or "service",
        )

    return max(records, key=history_order_key)
