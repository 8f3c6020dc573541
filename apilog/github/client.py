"""GitHub REST client (small, dependency-free).

Covers the handful of endpoints the bot uses:
  - GET   /repos/{owner}/{repo}/contents/{path}?ref=...
  - GET   /repos/{owner}/{repo}/pulls/{number}
  - GET   /repos/{owner}/{repo}/issues/{number}/comments
  - POST  /repos/{owner}/{repo}/issues/{number}/comments
  - PATCH /repos/{owner}/{repo}/issues/comments/{id}
"""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from ..errors import GitHubError
from ..pr.publisher import PrComment

PER_PAGE = 100


@dataclass(frozen=True)
class GitHubConfig:
    owner: str
    repo: str
    token: str
    api_url: str = "https://api.github.com"
    bot_login: str = "github-actions[bot]"
    timeout_s: float = 10.0


@dataclass(frozen=True)
class PrInfo:
    base_sha: str
    base_branch: str
    head_sha: str = ""


class GitHubRepository:
    """Minimal GitHub repository client."""

    def __init__(self, cfg: GitHubConfig) -> None:
        self._cfg = cfg
        self._base = f"{cfg.api_url.rstrip('/')}/repos/{quote(cfg.owner)}/{quote(cfg.repo)}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self._base}{path}"
        if params:
            url = f"{url}?{urlencode(params)}"
        body = json.dumps(payload).encode("utf-8") if payload is not None else None

        req = Request(
            url,
            data=body,
            method=method,
            headers={
                "Authorization": f"Bearer {self._cfg.token}",
                "Accept": "application/vnd.github+json",
                "Content-Type": "application/json",
                "User-Agent": "apilog",
            },
        )
        status: int | None = None
        try:
            with urlopen(req, timeout=self._cfg.timeout_s) as resp:
                status = getattr(resp, "status", None)
                raw = resp.read().decode("utf-8")
        except HTTPError as e:
            raise GitHubError(f"GitHub HTTP error {e.code} on {method} {path}: {e.reason}", status=e.code) from e
        except URLError as e:
            raise GitHubError(f"GitHub connection error: {e.reason}") from e
        except UnicodeDecodeError as e:
            raise GitHubError(f"GitHub returned undecodable body on {method} {path}", status=status) from e

        if not raw.strip():
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise GitHubError(f"GitHub returned invalid JSON on {method} {path}: {e.msg}", status=status) from e

    def get_file_content(self, ref: str, path: str) -> str:
        """File content at ``ref``. Directories and symlinks yield ""."""
        data = self._request("GET", f"/contents/{quote(path.lstrip('/'))}", params={"ref": ref})
        if not isinstance(data, dict) or "content" not in data:
            return ""
        return base64.b64decode(data["content"]).decode("utf-8")

    def get_pr_info(self, pr_number: int) -> PrInfo:
        data = self._request("GET", f"/pulls/{pr_number}")
        return PrInfo(
            base_sha=data["base"]["sha"],
            base_branch=data["base"]["ref"],
            head_sha=data.get("head", {}).get("sha", ""),
        )

    def get_pr_comments(self, pr_number: int) -> list[PrComment]:
        """Comments on the PR written by the bot account, oldest first."""
        comments: list[PrComment] = []
        page = 1
        while True:
            data = self._request(
                "GET",
                f"/issues/{pr_number}/comments",
                params={"per_page": PER_PAGE, "page": page},
            ) or []
            for item in data:
                login = (item.get("user") or {}).get("login", "")
                if login == self._cfg.bot_login:
                    comments.append(PrComment(id=item["id"], body=item.get("body") or "", user_login=login))
            if len(data) < PER_PAGE:
                return comments
            page += 1

    def create_comment(self, pr_number: int, body: str) -> None:
        self._request("POST", f"/issues/{pr_number}/comments", payload={"body": body})

    def update_comment(self, comment_id: int, body: str) -> None:
        self._request("PATCH", f"/issues/comments/{comment_id}", payload={"body": body})
