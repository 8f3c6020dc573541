"""Markdown rendering for the pull-request comment."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..changelog.entries import REQUEST_FIELD_ADDED, RESPONSE_FIELD_ADDED, ChangeEntry, Changelog

TITLE = "# API Changelog"
FOOTER = "#### Generated by apilog from the spec event log."

CATEGORY_LABELS = {
    REQUEST_FIELD_ADDED: ("🟢", "Request fields added", "request field(s) added"),
    RESPONSE_FIELD_ADDED: ("🟢", "Response fields added", "response field(s) added"),
}


@dataclass(frozen=True)
class CommentContext:
    """Everything the comment needs besides the changelog."""

    spec_path: str
    subscribers: list[str] = field(default_factory=list)
    spec_id: str | None = None
    viewer_url: str | None = None
    project_name: str = "API"


def timestamp(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def documentation_link(ctx: CommentContext, base_batch_commit: str | None) -> str | None:
    """Viewer link for the uploaded spec, or None when nothing was uploaded."""
    if not ctx.spec_id or not ctx.viewer_url:
        return None
    base = ctx.viewer_url.rstrip("/")
    if base_batch_commit:
        return f"{base}/{ctx.spec_id}/changes-since/{base_batch_commit}"
    return f"{base}/{ctx.spec_id}/documentation"


def summary_title(changelog: Changelog) -> str:
    counts = changelog.counts()
    if not counts:
        return "No API changes detected"
    parts = [f"{n} {CATEGORY_LABELS[category][2]}" for category, n in counts.items()]
    return "Detected " + ", ".join(parts)


def change_row(entry: ChangeEntry) -> str:
    route = entry.info.route or "/"
    type_name = entry.type_name or "unknown"
    if entry.is_request:
        return f"| **{entry.info.http_method}** {route} | `{entry.name}` | {type_name} |"
    status = entry.info.http_status_code if entry.info.http_status_code is not None else ""
    return f"| **{entry.info.http_method}** {route} | {status} | `{entry.name}` | {type_name} |"


def change_table(category: str, entries: list[ChangeEntry]) -> str:
    icon, label, _ = CATEGORY_LABELS[category]
    if category == REQUEST_FIELD_ADDED:
        header = ["| Endpoint | Field | Type |", "| -------- | ----- | ---- |"]
    else:
        header = ["| Endpoint | Status | Field | Type |", "| -------- | -----: | ----- | ---- |"]
    lines = [f"###### {icon} {label} ({len(entries)})", "", *header]
    lines.extend(change_row(entry) for entry in entries)
    return "\n".join(lines)


def subscribers_ping(subscribers: list[str]) -> str:
    names = [s.strip().lstrip("@") for s in subscribers if s and s.strip()]
    if not names:
        return ""
    lines = ["---", "Pinging subscribers:"]
    lines.extend(f"* @{name}" for name in names)
    return "\n".join(lines)


def render_comment(changelog: Changelog, ctx: CommentContext, now: datetime | None = None) -> str:
    """Render the full comment body (without the metadata marker)."""
    lines = [
        TITLE,
        f"_Last updated @ {timestamp(now)} UTC_",
        "",
        f"## {ctx.project_name} @ `/{ctx.spec_path.lstrip('/')}`",
        f"### {summary_title(changelog)}",
        "",
    ]

    link = documentation_link(ctx, changelog.base_batch_commit)
    if link:
        lines.extend([f"[Click Here to See the Documentation]({link})", ""])

    for category, entries in changelog.by_category().items():
        lines.extend([change_table(category, entries), ""])

    ping = subscribers_ping(ctx.subscribers)
    if ping:
        lines.extend([ping, ""])

    lines.append(FOOTER)
    return "\n".join(lines) + "\n"
