"""Repository and pull-request coordinates from the GitHub Actions environment."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from ..errors import ConfigError


@dataclass(frozen=True)
class RepoInfo:
    owner: str
    repo: str
    head_sha: str
    pr_number: int | None = None
    base_sha: str | None = None
    base_branch: str | None = None


def _load_event(environ: Mapping[str, str]) -> dict[str, Any]:
    event_path = environ.get("GITHUB_EVENT_PATH")
    if not event_path:
        return {}
    path = Path(event_path)
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid event payload in {path}: {e.msg}") from e
    return data if isinstance(data, dict) else {}


def get_repo_info(environ: Mapping[str, str] | None = None) -> RepoInfo:
    """Read GITHUB_REPOSITORY, GITHUB_SHA and the event payload.

    For pull_request events the head sha is the PR head, not the merge commit.
    """
    environ = os.environ if environ is None else environ
    full_name = environ.get("GITHUB_REPOSITORY", "")
    event = _load_event(environ)
    if not full_name:
        full_name = (event.get("repository") or {}).get("full_name", "")
    if "/" not in full_name:
        raise ConfigError("Unable to determine repository (set GITHUB_REPOSITORY=owner/repo)")
    owner, repo = full_name.split("/", 1)

    pull_request = event.get("pull_request") or {}
    base = pull_request.get("base") or {}
    head = pull_request.get("head") or {}

    return RepoInfo(
        owner=owner,
        repo=repo,
        head_sha=head.get("sha") or environ.get("GITHUB_SHA", ""),
        pr_number=pull_request.get("number"),
        base_sha=base.get("sha"),
        base_branch=base.get("ref"),
    )
