"""Tests for one end-to-end bot run against fake collaborators."""

from __future__ import annotations

from datetime import datetime, timezone
from io import StringIO
from typing import Any

import pytest
from rich.console import Console

from apilog.errors import GitHubError, UploadError
from apilog.pr import PrComment, PublishAction, get_metadata
from apilog.reporting import ConsoleReporter, RecordingReporter
from apilog.runner import SPEC_ID_VARIABLE, RunParams, run_changelog
from apilog.upload import UploadResult

NOW = datetime(2021, 4, 7, 19, 42, 18, tzinfo=timezone.utc)
SPEC_PATH = ".optic/api/specification.json"


class FakeGit:
    """In-memory repository: {sha: spec text} plus a comment thread."""

    def __init__(self, files: dict[str, str], comments: list[PrComment] | None = None, fail_writes: bool = False):
        self.files = files
        self.comments = list(comments or [])
        self.fail_writes = fail_writes
        self.created: list[str] = []
        self.updated: list[tuple[int, str]] = []

    def get_file_content(self, ref: str, path: str) -> str:
        if ref not in self.files:
            raise GitHubError(f"GitHub HTTP error 404 on GET /contents/{path}", status=404)
        return self.files[ref]

    def get_pr_comments(self, pr_number: int) -> list[PrComment]:
        return list(self.comments)

    def create_comment(self, pr_number: int, body: str) -> None:
        if self.fail_writes:
            raise GitHubError("GitHub HTTP error 403 on POST: Forbidden", status=403)
        self.created.append(body)
        self.comments.append(PrComment(id=len(self.comments) + 1, body=body, user_login="github-actions[bot]"))

    def update_comment(self, comment_id: int, body: str) -> None:
        self.updated.append((comment_id, body))
        self.comments = [PrComment(c.id, body, c.user_login) if c.id == comment_id else c for c in self.comments]


class FakeUploader:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.uploads: list[list[Any]] = []

    def upload(self, events: list[Any]) -> UploadResult:
        if self.fail:
            raise UploadError("Spec upload HTTP error 500: Server Error")
        self.uploads.append(events)
        return UploadResult(spec_id="spec-42")


@pytest.fixture
def git(users_base_text: str, users_head_text: str) -> FakeGit:
    return FakeGit({"base-sha": users_base_text, "head-sha": users_head_text})


def _params(git: FakeGit, reporter: RecordingReporter, **kwargs: Any) -> RunParams:
    defaults: dict[str, Any] = {
        "provider": git,
        "reporter": reporter,
        "pr_number": 7,
        "head_sha": "head-sha",
        "base_sha": "base-sha",
        "base_branch": "main",
        "spec_path": SPEC_PATH,
        "now": NOW,
    }
    defaults.update(kwargs)
    return RunParams(**defaults)


def test_run_creates_comment(git: FakeGit) -> None:
    reporter = RecordingReporter()
    result = run_changelog(_params(git, reporter, subscribers=["alice"]))

    assert result.has_spec
    assert result.action is PublishAction.CREATED
    assert len(result.changelog.changes) == 2
    assert git.created == [result.body]
    assert "* @alice" in result.body
    assert get_metadata(result.body)["specPath"] == SPEC_PATH
    assert reporter.infos == ["API changelog comment created."]
    assert not reporter.failed


def test_rerun_is_unchanged(git: FakeGit) -> None:
    run_changelog(_params(git, RecordingReporter()))
    reporter = RecordingReporter()
    result = run_changelog(_params(git, reporter))

    assert result.action is PublishAction.UNCHANGED
    assert len(git.created) == 1
    assert git.updated == []
    assert reporter.infos == ["API changelog comment is already up to date."]


def test_new_head_updates_comment(git: FakeGit, users_base_text: str) -> None:
    run_changelog(_params(git, RecordingReporter()))
    git.files["head-2"] = users_base_text

    result = run_changelog(_params(git, RecordingReporter(), head_sha="head-2"))
    assert result.action is PublishAction.UPDATED
    assert [comment_id for comment_id, _ in git.updated] == [1]


def test_head_missing_stops_quietly(git: FakeGit) -> None:
    reporter = RecordingReporter()
    result = run_changelog(_params(git, reporter, head_sha="nope"))

    assert not result.has_spec
    assert result.action is None
    assert reporter.infos == [f"Could not find the spec in the current branch. Looking in {SPEC_PATH}."]
    assert git.created == []
    assert not reporter.failed


def test_base_missing_diffs_against_empty(git: FakeGit) -> None:
    reporter = RecordingReporter()
    result = run_changelog(_params(git, reporter, base_sha="gone"))

    assert [c.name for c in result.changelog.changes] == ["id", "email", "nickname"]
    assert "Could not find the spec in the base branch main" in reporter.infos[0]
    assert result.action is PublishAction.CREATED


def test_no_base_sha_diffs_against_empty(git: FakeGit) -> None:
    result = run_changelog(_params(git, RecordingReporter(), base_sha=None))
    assert len(result.changelog.changes) == 3


def test_no_changes_and_no_comment_is_skipped(git: FakeGit) -> None:
    reporter = RecordingReporter()
    result = run_changelog(_params(git, reporter, base_sha="head-sha"))

    assert result.action is PublishAction.SKIPPED
    assert reporter.infos == ["No API changes in this PR."]
    assert git.created == []


def test_warnings_are_reported(git: FakeGit) -> None:
    git.files["base-sha"] = "{not json"
    reporter = RecordingReporter()
    run_changelog(_params(git, reporter))

    assert len(reporter.warnings) == 1
    assert reporter.warnings[0].startswith("base log treated as empty")


def test_publish_failure_sets_failed(users_base_text: str, users_head_text: str) -> None:
    git = FakeGit({"base-sha": users_base_text, "head-sha": users_head_text}, fail_writes=True)
    reporter = RecordingReporter()
    result = run_changelog(_params(git, reporter))

    assert result.action is None
    assert reporter.failed
    assert reporter.failures[0].startswith("There was an error creating a PR comment. Error message: ")
    assert "403" in reporter.failures[0]


def test_upload_exports_spec_id_and_links(git: FakeGit) -> None:
    uploader = FakeUploader()
    reporter = RecordingReporter()
    result = run_changelog(_params(git, reporter, uploader=uploader, viewer_url="https://viewer.example"))

    assert result.spec_id == "spec-42"
    assert reporter.exported == {SPEC_ID_VARIABLE: "spec-42"}
    assert uploader.uploads[0][0] == {
        "BatchCommitStarted": {"batchId": "b-1", "commitMessage": "Document GET and PATCH /users/{userId}"}
    }
    assert "https://viewer.example/spec-42/changes-since/b-1" in result.body


def test_upload_failure_is_a_warning(git: FakeGit) -> None:
    reporter = RecordingReporter()
    result = run_changelog(_params(git, reporter, uploader=FakeUploader(fail=True), viewer_url="https://viewer.example"))

    assert result.spec_id is None
    assert result.action is PublishAction.CREATED
    assert reporter.warnings == ["Spec upload skipped: Spec upload HTTP error 500: Server Error"]
    assert reporter.exported == {}
    assert "Click Here" not in result.body


def test_dry_run_does_not_publish(git: FakeGit) -> None:
    result = run_changelog(_params(git, RecordingReporter(), dry_run=True))

    assert result.action is None
    assert git.created == []
    assert result.body.startswith("# API Changelog")


# -----------------------------------------------------------------------------
# ConsoleReporter
# -----------------------------------------------------------------------------


def _console() -> Console:
    return Console(file=StringIO(), width=200)


def test_console_reporter_workflow_commands(tmp_path) -> None:
    env_file = tmp_path / "github_env"
    console = _console()
    reporter = ConsoleReporter(console, environ={"GITHUB_ACTIONS": "true", "GITHUB_ENV": str(env_file)})

    reporter.warning("base log treated as empty: [bad]")
    reporter.set_failed("boom")
    reporter.export_variable(SPEC_ID_VARIABLE, "spec-42")

    out = console.file.getvalue()
    assert "::warning::base log treated as empty: [bad]" in out
    assert "::error::boom" in out
    assert reporter.failed
    assert env_file.read_text(encoding="utf-8") == f"{SPEC_ID_VARIABLE}=spec-42\n"


def test_console_reporter_debug_needs_verbose() -> None:
    console = _console()
    ConsoleReporter(console, environ={}).debug("hidden")
    ConsoleReporter(console, verbose=True, environ={}).debug("shown [x]")

    out = console.file.getvalue()
    assert "hidden" not in out
    assert "shown [x]" in out
