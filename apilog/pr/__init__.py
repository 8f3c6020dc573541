"""
Pull-request comment support.

- marker: metadata block embedded in the comment body
- templates: Markdown rendering of a changelog
- publisher: idempotent create-or-update of the bot comment
"""

from .marker import get_metadata, is_bot_comment, set_metadata
from .publisher import (
    CommentProvider,
    CommentPublisher,
    PrComment,
    PublishAction,
    PublishResult,
    build_body,
)
from .templates import CommentContext, render_comment

__all__ = [
    "CommentContext",
    "CommentProvider",
    "CommentPublisher",
    "PrComment",
    "PublishAction",
    "PublishResult",
    "build_body",
    "get_metadata",
    "is_bot_comment",
    "render_comment",
    "set_metadata",
]
