"""
Idempotent create-or-update of the bot comment on a pull request.

Policy:
- latest bot comment carries the same content hash -> unchanged (no call)
- latest bot comment differs -> update it in place
- no bot comment and changes to report -> create one
- no bot comment and nothing to report -> skipped
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol

from ..changelog.entries import Changelog
from .marker import get_metadata, is_bot_comment, set_metadata
from .templates import CommentContext, render_comment


@dataclass(frozen=True)
class PrComment:
    id: int
    body: str
    user_login: str = ""


class CommentProvider(Protocol):
    """The subset of a git host client the publisher needs."""

    def get_pr_comments(self, pr_number: int) -> list[PrComment]:
        ...

    def create_comment(self, pr_number: int, body: str) -> None:
        ...

    def update_comment(self, comment_id: int, body: str) -> None:
        ...


class PublishAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class PublishResult:
    action: PublishAction
    content_hash: str
    comment_id: int | None = None
    body: str = ""


def build_body(changelog: Changelog, ctx: CommentContext, now: datetime | None = None) -> str:
    """Rendered comment with the metadata marker appended."""
    return set_metadata(
        render_comment(changelog, ctx, now=now),
        {"hash": changelog.content_hash(ctx.spec_id), "specPath": ctx.spec_path},
    )


class CommentPublisher:
    def __init__(self, provider: CommentProvider):
        self.provider = provider

    def bot_comments(self, pr_number: int) -> list[PrComment]:
        return [c for c in self.provider.get_pr_comments(pr_number) if is_bot_comment(c.body)]

    def publish(
        self,
        pr_number: int,
        changelog: Changelog,
        ctx: CommentContext,
        now: datetime | None = None,
    ) -> PublishResult:
        content_hash = changelog.content_hash(ctx.spec_id)
        existing = self.bot_comments(pr_number)
        latest = existing[-1] if existing else None

        if latest is not None and get_metadata(latest.body).get("hash") == content_hash:
            return PublishResult(PublishAction.UNCHANGED, content_hash, comment_id=latest.id, body=latest.body)

        if latest is None and changelog.is_empty:
            return PublishResult(PublishAction.SKIPPED, content_hash)

        body = build_body(changelog, ctx, now=now)
        if latest is not None:
            self.provider.update_comment(latest.id, body)
            return PublishResult(PublishAction.UPDATED, content_hash, comment_id=latest.id, body=body)

        self.provider.create_comment(pr_number, body)
        return PublishResult(PublishAction.CREATED, content_hash, body=body)
