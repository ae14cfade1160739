"""
Presenter

Architectural Intent:
- Pure formatting of deployment listings, details and rollback results
- Returns strings only: no printing, no I/O, inputs are never modified
- "No deployments yet" is rendered as a normal result, never as an error
"""

from typing import Optional

from tidemark.application.dtos.deployment_dtos import (
    DeploymentDetail,
    DeploymentListing,
    RollbackResult,
)
from tidemark.domain.entities.deployment import (
    DeploymentRecord,
    RollbackMetadata,
    format_timestamp,
)

BETA_BANNER = (
    "🚧`tidemark deployments` is a beta command. Please report any issues to "
    "the project issue tracker"
)
ACTIVE_MARKER = "🟩 Active"

SOURCE_LABELS = {
    "wrangler": "🤠 Wrangler",
    "api": "🖥️ API",
    "dashboard": "🖥️ Dashboard",
    "terraform": "🏗️ Terraform",
}


def source_label(source: str) -> str:
    return SOURCE_LABELS.get(source.lower(), source)


def format_record_summary(record: DeploymentRecord, active: bool = False) -> str:
    lines = [
        f"Deployment ID: {record.id}",
        f"Created on: {format_timestamp(record.created_at)}",
        f"Author: {record.author}",
        f"Source: {source_label(record.source)}",
    ]
    if record.rollback_metadata and record.rollback_metadata.rolled_back_to:
        lines.append(f"Rolled back from: {record.rollback_metadata.rolled_back_to}")
    if active:
        lines.append(ACTIVE_MARKER)
    return "\n".join(lines)


def format_history(listing: DeploymentListing) -> str:
    if listing.is_empty:
        return f"No deployments yet for {listing.service_name}."
    active_id = listing.active.id if listing.active else None
    return "\n\n".join(
        format_record_summary(record, active=record.id == active_id)
        for record in listing.visible
    )


def _or_dash(value: Optional[object]) -> str:
    return "-" if value in (None, "") else str(value)


def format_rollback_metadata(metadata: Optional[RollbackMetadata]) -> str:
    if metadata is None:
        return "none"
    parts = []
    if metadata.rolled_back_to:
        parts.append(f"rolled back to {metadata.rolled_back_to}")
    if metadata.tag:
        parts.append(f"tag={metadata.tag}")
    if metadata.tags:
        parts.append(f"tags={', '.join(metadata.tags)}")
    if metadata.usage_model:
        parts.append(f"usage_model={metadata.usage_model}")
    if metadata.logpush is not None:
        parts.append(f"logpush={'on' if metadata.logpush else 'off'}")
    if metadata.handlers:
        parts.append(f"handlers={', '.join(metadata.handlers)}")
    if metadata.etag:
        parts.append(f"etag={metadata.etag}")
    return "; ".join(parts) or "none"


def format_detail(detail: DeploymentDetail) -> str:
    record = detail.record
    author = record.author if not record.author_id else f"{record.author} ({record.author_id})"
    lines = [
        f"Deployment ID: {record.id}",
        f"Number: {_or_dash(record.number)}",
        f"Tag: {_or_dash(record.tag)}",
        f"Author: {author}",
        f"Source: {source_label(record.source)}",
        f"Created on: {format_timestamp(record.created_at)}",
        f"Modified on: {format_timestamp(record.modified_at) if record.modified_at else '-'}",
    ]
    if record.rollback_metadata is not None:
        lines.append(f"Rollback metadata: {format_rollback_metadata(record.rollback_metadata)}")

    resources = record.resources
    if resources is not None:
        script = resources.script
        lines += [
            "Script:",
            f"  etag: {_or_dash(script.etag)}",
            f"  handlers: {', '.join(script.handlers) or '-'}",
            f"  last deployed from: {_or_dash(script.last_deployed_from)}",
            "Bindings:",
        ]
        if resources.bindings:
            lines += [f"  - {b.type}: {b.name}" for b in resources.bindings]
        else:
            lines.append("  (none)")

    text = "\n".join(lines)
    if detail.script_content:
        text += "\n\n" + detail.script_content.rstrip("\n")
    return text


def format_rollback(result: RollbackResult) -> str:
    return "\n".join(
        [
            f"Successfully rolled back to deployment ID: {result.target_id}",
            f"New deployment ID: {result.record.id}",
            f"Rollbacks metadata: {format_rollback_metadata(result.record.rollback_metadata)}",
        ]
    )


def format_error(error: BaseException) -> str:
    return f"[-] {error}"
