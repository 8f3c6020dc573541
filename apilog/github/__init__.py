"""GitHub collaborators: REST client and Actions context."""

from .client import GitHubConfig, GitHubRepository, PrInfo
from .context import RepoInfo, get_repo_info

__all__ = [
    "GitHubConfig",
    "GitHubRepository",
    "PrInfo",
    "RepoInfo",
    "get_repo_info",
]
