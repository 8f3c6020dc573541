"""
One bot run: fetch base/head logs, diff, optionally upload, publish.

Every collaborator failure becomes reporter output; nothing raises out of
run_changelog. Fallbacks:
- head log unavailable: report and stop (there is no spec in this branch)
- base log unavailable or malformed: diff against the empty log
- upload failure: warn and publish without a documentation link
- publish failure: set_failed
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from .changelog import Changelog, generate_changelog
from .errors import ApilogError
from .log.reader import parse_records
from .pr.publisher import CommentProvider, CommentPublisher, PublishAction, build_body
from .pr.templates import CommentContext
from .reporting import Reporter
from .upload import SpecUploader

SPEC_ID_VARIABLE = "APILOG_SPEC_ID"


class GitProvider(CommentProvider, Protocol):
    def get_file_content(self, ref: str, path: str) -> str:
        ...


@dataclass
class RunParams:
    provider: GitProvider
    reporter: Reporter
    pr_number: int
    head_sha: str
    base_sha: str | None
    spec_path: str
    base_branch: str = ""
    subscribers: list[str] = field(default_factory=list)
    uploader: SpecUploader | None = None
    viewer_url: str | None = None
    project_name: str = "API"
    dry_run: bool = False
    now: datetime | None = None


@dataclass
class RunResult:
    changelog: Changelog | None = None
    action: PublishAction | None = None
    body: str = ""
    spec_id: str | None = None

    @property
    def has_spec(self) -> bool:
        return self.changelog is not None


def _fetch(params: RunParams, ref: str) -> str:
    return params.provider.get_file_content(ref, params.spec_path)


def _upload(params: RunParams, head_text: str) -> str | None:
    if params.uploader is None:
        return None
    try:
        records = parse_records(head_text)
        result = params.uploader.upload(records)
    except ApilogError as e:
        params.reporter.warning(f"Spec upload skipped: {e}")
        return None
    params.reporter.export_variable(SPEC_ID_VARIABLE, result.spec_id)
    params.reporter.debug(f"Uploaded spec {result.spec_id}")
    return result.spec_id


def run_changelog(params: RunParams) -> RunResult:
    reporter = params.reporter

    try:
        head_text = _fetch(params, params.head_sha)
    except (ApilogError, ValueError) as e:
        reporter.info(f"Could not find the spec in the current branch. Looking in {params.spec_path}.")
        reporter.debug(str(e))
        return RunResult()

    base_text: str | None = None
    if params.base_sha:
        try:
            base_text = _fetch(params, params.base_sha)
        except (ApilogError, ValueError) as e:
            reporter.info(
                f"Could not find the spec in the base branch {params.base_branch or params.base_sha}. "
                f"Looking in {params.spec_path}. Treating the base as empty."
            )
            reporter.debug(str(e))

    changelog = generate_changelog(base_text, head_text)
    for warning in changelog.warnings:
        reporter.warning(str(warning))
    reporter.debug(f"Changes by category: {changelog.counts()}")

    spec_id = _upload(params, head_text)
    ctx = CommentContext(
        spec_path=params.spec_path,
        subscribers=list(params.subscribers),
        spec_id=spec_id,
        viewer_url=params.viewer_url,
        project_name=params.project_name,
    )

    if params.dry_run:
        return RunResult(changelog=changelog, body=build_body(changelog, ctx, now=params.now), spec_id=spec_id)

    publisher = CommentPublisher(params.provider)
    try:
        published = publisher.publish(params.pr_number, changelog, ctx, now=params.now)
    except ApilogError as e:
        reporter.set_failed(f"There was an error creating a PR comment. Error message: {e}")
        return RunResult(changelog=changelog, spec_id=spec_id)

    if published.action is PublishAction.SKIPPED:
        reporter.info("No API changes in this PR.")
    elif published.action is PublishAction.UNCHANGED:
        reporter.info("API changelog comment is already up to date.")
    else:
        reporter.info(f"API changelog comment {published.action.value}.")

    return RunResult(changelog=changelog, action=published.action, body=published.body, spec_id=spec_id)
