"""PR command implementation - run the changelog bot in GitHub Actions."""

from pathlib import Path

from ..config import ApilogConfig, load_config, resolve_secret
from ..errors import ApilogError
from ..github.client import GitHubConfig, GitHubRepository
from ..github.context import get_repo_info
from ..reporting import ConsoleReporter, Reporter
from ..runner import RunParams, run_changelog
from ..upload import HttpSpecUploader, SpecUploader


def _uploader(config: ApilogConfig, reporter: Reporter) -> SpecUploader | None:
    if not config.spec_service_url:
        return None
    api_key = resolve_secret(config.api_key)
    if not api_key:
        reporter.warning(f"spec_service_url is set but {config.api_key} is empty; skipping upload.")
        return None
    return HttpSpecUploader(config.spec_service_url, api_key, timeout_s=config.timeout_s)


def run_pr(
    config_path: Path | None = None,
    pr_number: int | None = None,
    spec_path: str | None = None,
    dry_run: bool = False,
    verbose: bool = False,
    reporter: Reporter | None = None,
) -> int:
    """Compute the changelog for a PR and publish (or print) the comment.

    Returns:
        Exit code (0 = success or nothing to do, 1 = failure)
    """
    reporter = reporter or ConsoleReporter(verbose=verbose)

    try:
        config = load_config(config_path, spec_path=spec_path)
        repo_info = get_repo_info()
    except ApilogError as e:
        reporter.set_failed(str(e))
        return 1

    token = resolve_secret(config.github_token)
    if not token:
        reporter.set_failed(
            "Please provide a GitHub token. Set one with the GITHUB_TOKEN input or environment variable."
        )
        return 1

    pr_number = pr_number or repo_info.pr_number
    if pr_number is None:
        reporter.info("Not running for a pull request; nothing to do.")
        return 0

    client = GitHubRepository(
        GitHubConfig(
            owner=repo_info.owner,
            repo=repo_info.repo,
            token=token,
            api_url=config.api_url,
            bot_login=config.bot_login,
            timeout_s=config.timeout_s,
        )
    )

    head_sha, base_sha, base_branch = repo_info.head_sha, repo_info.base_sha, repo_info.base_branch
    if not base_sha or pr_number != repo_info.pr_number:
        try:
            info = client.get_pr_info(pr_number)
        except ApilogError as e:
            reporter.set_failed(f"Could not read pull request #{pr_number}: {e}")
            return 1
        base_sha, base_branch = info.base_sha, info.base_branch
        head_sha = info.head_sha or head_sha

    reporter.debug(f"PR #{pr_number}: base {base_sha} ({base_branch}), head {head_sha}")

    result = run_changelog(
        RunParams(
            provider=client,
            reporter=reporter,
            pr_number=pr_number,
            head_sha=head_sha,
            base_sha=base_sha,
            base_branch=base_branch or "",
            spec_path=config.spec_path,
            subscribers=list(config.subscribers),
            uploader=None if dry_run else _uploader(config, reporter),
            viewer_url=config.viewer_url,
            project_name=config.project_name,
            dry_run=dry_run,
        )
    )

    if dry_run and result.body:
        print(result.body)

    return 1 if getattr(reporter, "failed", False) else 0
