"""Error taxonomy for apilog.

Structural errors (MalformedEvent, MalformedLog) abort processing of one log.
UnresolvedReference is raised by graph lookups and recovered by the change
detector, which keeps it as a warning value instead of failing the run.
"""

from __future__ import annotations


class ApilogError(Exception):
    """Base class for all apilog errors."""


class MalformedEvent(ApilogError):
    """A log record that is not a single-key ``{Kind: payload}`` object."""

    def __init__(self, message: str, index: int | None = None):
        self.index = index
        if index is not None:
            message = f"record {index}: {message}"
        super().__init__(message)


class MalformedLog(ApilogError):
    """Batch boundaries are unterminated or nested, or the document is not a log."""


class UnresolvedReference(ApilogError):
    """A field or body references an id absent from the projected graph."""

    def __init__(self, kind: str, ref_id: str | None, context: str = ""):
        self.kind = kind
        self.ref_id = ref_id
        self.context = context
        super().__init__(kind, ref_id)

    def __str__(self) -> str:
        # context may be filled in after construction by the detector
        message = f"unresolved {self.kind} reference: {self.ref_id!r}"
        if self.context:
            message = f"{message} ({self.context})"
        return message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "refId": self.ref_id, "context": self.context}


class ConfigError(ApilogError):
    """Missing or invalid configuration."""


class GitHubError(ApilogError):
    """GitHub API request failed."""

    def __init__(self, message: str, status: int | None = None):
        self.status = status
        super().__init__(message)


class UploadError(ApilogError):
    """Spec service upload failed."""
