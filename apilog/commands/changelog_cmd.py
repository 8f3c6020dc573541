"""Changelog command implementation - diff two local log files."""

import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..changelog import generate_changelog
from ..config import load_config
from ..errors import ConfigError
from ..pr.templates import CommentContext, render_comment


def run_changelog_cmd(
    base: Path | None,
    head: Path,
    output_format: str = "json",
    spec_path: str | None = None,
    config_path: Path | None = None,
) -> int:
    """Diff ``base`` against ``head`` and print the changelog.

    Malformed logs do not fail the command: the offending side is treated as
    empty and the problem is printed as a warning.

    Returns:
        Exit code (0 = success, 1 = configuration error)
    """
    console = Console(stderr=True)

    try:
        config = load_config(config_path, spec_path=spec_path)
    except ConfigError as e:
        console.print(escape(str(e)), style="bold red")
        return 1

    base_text = base.read_text(encoding="utf-8") if base is not None else None
    head_text = head.read_text(encoding="utf-8")

    changelog = generate_changelog(base_text, head_text)
    for warning in changelog.warnings:
        console.print(f"[yellow]⚠[/] {escape(str(warning))}", highlight=False)

    if output_format == "md":
        ctx = CommentContext(
            spec_path=config.spec_path,
            subscribers=list(config.subscribers),
            project_name=config.project_name,
        )
        print(render_comment(changelog, ctx), end="")
    else:
        print(json.dumps(changelog.to_dict(), indent=2))

    console.print(f"{len(changelog.changes)} change(s)", style="dim")
    return 0
