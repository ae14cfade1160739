"""
Payload Conversions

Architectural Intent:
- Maps the remote service's JSON-like payloads onto domain records
- Keeps field-name variance between endpoints in one place: listing and
  detail responses nest authorship under "metadata", rollback confirmations
  are flat and carry the new id as "deployment_id"
- Any missing or mistyped required field raises MalformedRecordError
"""

from typing import Any, Optional

from tidemark.domain.entities.deployment import (
    Binding,
    DeploymentRecord,
    DeploymentResources,
    RollbackMetadata,
    ScriptResource,
    parse_timestamp,
)
from tidemark.domain.exceptions import MalformedRecordError

UNKNOWN = "unknown"

ROLLBACK_METADATA_KEYS = (
    "rollback_to",
    "tag",
    "tags",
    "usage_model",
    "logpush",
    "etag",
    "handlers",
)


def _require_mapping(value: Any, field_name: str, deployment_id: Optional[str] = None) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedRecordError(field_name, "must be an object", deployment_id)
    return value


def _optional_str(value: Any, field_name: str, deployment_id: Optional[str] = None) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise MalformedRecordError(field_name, "must be a string", deployment_id)
    return value


def _str_tuple(value: Any, field_name: str, deployment_id: Optional[str] = None) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise MalformedRecordError(field_name, "must be a list of strings", deployment_id)
    return tuple(value)


def _optional_timestamp(value: Any, field_name: str, deployment_id: Optional[str]):
    if value is None:
        return None
    return parse_timestamp(value, field_name, deployment_id)


def _bindings_from_payload(value: Any, deployment_id: Optional[str]) -> tuple[Binding, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise MalformedRecordError("resources.bindings", "must be a list", deployment_id)
    bindings = []
    for raw in value:
        raw = _require_mapping(raw, "resources.bindings", deployment_id)
        extra = {k: v for k, v in raw.items() if k not in ("type", "name")}
        bindings.append(Binding(type=raw.get("type"), name=raw.get("name"), extra=extra))
    return tuple(bindings)


def resources_from_payload(value: Any, deployment_id: Optional[str] = None) -> Optional[DeploymentResources]:
    if value is None:
        return None
    value = _require_mapping(value, "resources", deployment_id)
    script = _require_mapping(value.get("script") or {}, "resources.script", deployment_id)
    return DeploymentResources(
        script=ScriptResource(
            etag=_optional_str(script.get("etag"), "resources.script.etag", deployment_id),
            handlers=_str_tuple(script.get("handlers"), "resources.script.handlers", deployment_id),
            last_deployed_from=_optional_str(
                script.get("last_deployed_from"), "resources.script.last_deployed_from", deployment_id
            ),
        ),
        bindings=_bindings_from_payload(value.get("bindings"), deployment_id),
    )


def rollback_metadata_from_payload(payload: Any) -> Optional[RollbackMetadata]:
    """Build rollback metadata from the fields the remote service returned.

    Returns None when none of the rollback fields are present; nothing is
    filled in locally.
    """
    if not isinstance(payload, dict) or not any(k in payload for k in ROLLBACK_METADATA_KEYS):
        return None
    logpush = payload.get("logpush")
    if logpush is not None and not isinstance(logpush, bool):
        raise MalformedRecordError("logpush", "must be a boolean")
    return RollbackMetadata(
        rolled_back_to=_optional_str(payload.get("rollback_to"), "rollback_to"),
        tag=_optional_str(payload.get("tag"), "tag"),
        tags=_str_tuple(payload.get("tags"), "tags"),
        usage_model=_optional_str(payload.get("usage_model"), "usage_model"),
        logpush=logpush,
        etag=_optional_str(payload.get("etag"), "etag"),
        handlers=_str_tuple(payload.get("handlers"), "handlers"),
    )


def record_from_payload(payload: Any) -> DeploymentRecord:
    """Convert a history listing item or a detail response into a record."""
    payload = _require_mapping(payload, "deployment")
    deployment_id = payload.get("id")
    if not isinstance(deployment_id, str) or not deployment_id:
        raise MalformedRecordError("id", "must be a non-empty string")
    metadata = _require_mapping(payload.get("metadata"), "metadata", deployment_id)

    rollback = payload.get("rollback")
    return DeploymentRecord(
        id=deployment_id,
        number=payload.get("number"),
        tag=_optional_str(payload.get("tag"), "tag", deployment_id) or None,
        created_at=parse_timestamp(metadata.get("created_on"), "metadata.created_on", deployment_id),
        modified_at=_optional_timestamp(metadata.get("modified_on"), "metadata.modified_on", deployment_id),
        author=metadata.get("author_email"),
        author_id=_optional_str(metadata.get("author_id"), "metadata.author_id", deployment_id),
        source=metadata.get("source"),
        resources=resources_from_payload(payload.get("resources"), deployment_id),
        rollback_metadata=rollback_metadata_from_payload(rollback) if rollback is not None else None,
    )


def record_from_rollback_confirmation(payload: Any) -> DeploymentRecord:
    """Convert the flat payload returned by a rollback request into the new record."""
    payload = _require_mapping(payload, "rollback confirmation")
    if not payload:
        raise MalformedRecordError("deployment_id", "is missing: rollback confirmation was empty")
    deployment_id = payload.get("deployment_id")
    if not isinstance(deployment_id, str) or not deployment_id:
        raise MalformedRecordError("deployment_id", "must be a non-empty string")

    source = payload.get("last_deployed_from") or UNKNOWN
    script = ScriptResource(
        etag=_optional_str(payload.get("etag"), "etag", deployment_id),
        handlers=_str_tuple(payload.get("handlers"), "handlers", deployment_id),
        last_deployed_from=_optional_str(payload.get("last_deployed_from"), "last_deployed_from", deployment_id),
    )
    return DeploymentRecord(
        id=deployment_id,
        number=payload.get("number"),
        tag=_optional_str(payload.get("tag"), "tag", deployment_id),
        created_at=parse_timestamp(payload.get("created_on"), "created_on", deployment_id),
        modified_at=_optional_timestamp(payload.get("modified_on"), "modified_on", deployment_id),
        author=payload.get("author_email") or UNKNOWN,
        source=source,
        resources=DeploymentResources(
            script=script,
            bindings=_bindings_from_payload(payload.get("bindings"), deployment_id),
        ),
        rollback_metadata=rollback_metadata_from_payload(payload),
    )
