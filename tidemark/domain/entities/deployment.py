"""
Deployment Module

Architectural Intent:
- DeploymentRecord is an immutable snapshot of one deployment as reported by
  the remote service; it is never edited in place
- DeploymentHistory is an append-only ordered collection; "going back" is a
  new record appended to it, never a cursor move
- Records are constructed only from remote payloads; the client never invents
  deployment identity

Design Decisions:
- Frozen dataclasses with validation in __post_init__ (MalformedRecordError)
- Histories are tuple-backed and ordered by (number, created_at)
- resources is None for the summarized projection returned by history listings
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, UTC
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional
import re

from tidemark.domain.exceptions import MalformedRecordError

_FRACTION_RE = re.compile(r"\.(\d+)")


def parse_timestamp(value: Any, field_name: str = "created_at", deployment_id: Optional[str] = None) -> datetime:
    """Parse an ISO-8601 timestamp ('Z' suffix, any fraction length) into an aware datetime."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if not isinstance(value, str) or not value:
        raise MalformedRecordError(field_name, "must be an ISO-8601 timestamp", deployment_id)

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise MalformedRecordError(
            field_name, f"is not a valid ISO-8601 timestamp: {value!r}", deployment_id
        ) from None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def format_timestamp(value: datetime) -> str:
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


@dataclass(frozen=True)
class ScriptResource:
    etag: Optional[str] = None
    handlers: tuple[str, ...] = ()
    last_deployed_from: Optional[str] = None


@dataclass(frozen=True)
class Binding:
    """A named resource reference. Names are not required to be unique."""
    type: str
    name: str
    # Compared but not hashed: the raw values may be unhashable.
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}), hash=False)

    def __post_init__(self) -> None:
        if not isinstance(self.type, str) or not self.type:
            raise MalformedRecordError("resources.bindings.type", "must be a non-empty string")
        if not isinstance(self.name, str) or not self.name:
            raise MalformedRecordError("resources.bindings.name", "must be a non-empty string")
        if not isinstance(self.extra, MappingProxyType):
            object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))


@dataclass(frozen=True)
class DeploymentResources:
    script: ScriptResource = field(default_factory=ScriptResource)
    bindings: tuple[Binding, ...] = ()


@dataclass(frozen=True)
class RollbackMetadata:
    """Metadata echoed by the remote service when a record was created by rollback."""
    rolled_back_to: Optional[str] = None
    tag: Optional[str] = None
    tags: tuple[str, ...] = ()
    usage_model: Optional[str] = None
    logpush: Optional[bool] = None
    etag: Optional[str] = None
    handlers: tuple[str, ...] = ()


@dataclass(frozen=True)
class DeploymentRecord:
    id: str
    created_at: datetime
    author: str
    source: str
    number: Optional[int] = None
    author_id: Optional[str] = None
    modified_at: Optional[datetime] = None
    tag: Optional[str] = None
    resources: Optional[DeploymentResources] = None
    rollback_metadata: Optional[RollbackMetadata] = None

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise MalformedRecordError("id", "must be a non-empty string")
        if not isinstance(self.created_at, datetime):
            raise MalformedRecordError("created_at", "must be a timestamp", self.id)
        if not isinstance(self.author, str) or not self.author:
            raise MalformedRecordError("author", "must be a non-empty string", self.id)
        if not isinstance(self.source, str) or not self.source:
            raise MalformedRecordError("source", "must be a non-empty string", self.id)
        if self.number is not None and (
            isinstance(self.number, bool) or not isinstance(self.number, int) or self.number < 0
        ):
            raise MalformedRecordError("number", "must be a non-negative integer", self.id)

    @property
    def is_rollback(self) -> bool:
        return self.rollback_metadata is not None

    @property
    def has_full_resources(self) -> bool:
        return self.resources is not None


def history_order_key(record: DeploymentRecord) -> tuple[int, datetime]:
    """Ordering used for history and for the latest-by-number fallback."""
    return (record.number if record.number is not None else -1, record.created_at)


class DeploymentHistory:
    """Immutable, append-only, ordered view over a service's deployments."""

    __slots__ = ("_records", "_index")

    def __init__(self, records: Iterable[DeploymentRecord] = ()) -> None:
        ordered = tuple(sorted(records, key=history_order_key))
        index: dict[str, DeploymentRecord] = {}
        for record in ordered:
            if record.id in index:
                raise ValueError(f"Deployment ID reused in history: {record.id}")
            index[record.id] = record
        self._records = ordered
        self._index = MappingProxyType(index)

    @property
    def records(self) -> tuple[DeploymentRecord, ...]:
        return self._records

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(r.id for r in self._records)

    @property
    def is_empty(self) -> bool:
        return not self._records

    @property
    def latest(self) -> Optional[DeploymentRecord]:
        return self._records[-1] if self._records else None

    def get(self, deployment_id: str) -> Optional[DeploymentRecord]:
        return self._index.get(deployment_id)

    def appended(self, record: DeploymentRecord) -> "DeploymentHistory":
        if record.id in self._index:
            raise ValueError(f"Deployment ID reused in history: {record.id}")
        return DeploymentHistory(self._records + (record,))

    def tail(self, limit: int) -> tuple[DeploymentRecord, ...]:
        if limit <= 0:
            return ()
        return self._records[-limit:]

    def __contains__(self, deployment_id: object) -> bool:
        return deployment_id in self._index

    def __iter__(self) -> Iterator[DeploymentRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DeploymentHistory):
            return NotImplemented
        return self._records == other._records

    def __repr__(self) -> str:
        return f"DeploymentHistory(ids={list(self.ids)})"
