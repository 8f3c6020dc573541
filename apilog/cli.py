"""CLI entrypoint for apilog."""

import sys
from pathlib import Path

import click

from . import __version__


@click.group()
@click.version_option(__version__, prog_name="apilog")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help="Path to config file (defaults to ./.apilog.yml if present)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None) -> None:
    """apilog - Semantic changelogs for event-sourced API specs.

    Replay a spec event log, inspect its batches and projected graph, and
    report fields added between two revisions.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.argument("log", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
def batches(log: Path, output_json: bool) -> None:
    """List the commit batches of a spec log."""
    from .commands.log_cmd import run_batches

    sys.exit(run_batches(log, output_json))


@cli.command()
@click.argument("log", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "output_json", is_flag=True, help="Output the full projected graph as JSON")
def graph(log: Path, output_json: bool) -> None:
    """Project a spec log and show its entity tables."""
    from .commands.log_cmd import run_graph

    sys.exit(run_graph(log, output_json))


@cli.command()
@click.option(
    "--base",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Base revision of the log (omit to diff against the empty log)",
)
@click.option(
    "--head",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Head revision of the log",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "md"]),
    default="json",
    help="Output format",
)
@click.option("--spec-path", default=None, help="Spec path shown in Markdown output")
@click.pass_context
def changelog(
    ctx: click.Context,
    base: Path | None,
    head: Path,
    output_format: str,
    spec_path: str | None,
) -> None:
    """Report fields added between two revisions of a spec log.

    Examples:

        apilog changelog --base old.json --head specification.json

        apilog changelog --head specification.json --format md
    """
    from .commands.changelog_cmd import run_changelog_cmd

    sys.exit(run_changelog_cmd(base, head, output_format, spec_path, ctx.obj["config_path"]))


@cli.command()
@click.option("--pr", "pr_number", type=int, default=None, help="Pull request number (defaults to the event payload)")
@click.option("--spec-path", default=None, help="Spec log path in the repository")
@click.option("--dry-run", is_flag=True, help="Print the comment instead of publishing it")
@click.option("--verbose", is_flag=True, help="Show debug output")
@click.pass_context
def pr(
    ctx: click.Context,
    pr_number: int | None,
    spec_path: str | None,
    dry_run: bool,
    verbose: bool,
) -> None:
    """Post or update the changelog comment on a pull request.

    Reads the repository and pull request from the GitHub Actions
    environment (GITHUB_REPOSITORY, GITHUB_EVENT_PATH) and the token from
    GITHUB_TOKEN.
    """
    from .commands.pr_cmd import run_pr

    sys.exit(run_pr(ctx.obj["config_path"], pr_number, spec_path, dry_run, verbose))


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
