"""Log inspection commands: batches and graph."""

import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..errors import MalformedEvent, MalformedLog
from ..graph import Graph
from ..log.batches import Batch
from ..log.reader import read_batches_file


def _load(log: Path, console: Console) -> list[Batch] | None:
    try:
        return read_batches_file(log)
    except (MalformedEvent, MalformedLog) as e:
        console.print(f"{log}: {escape(str(e))}", style="bold red")
        return None


def run_batches(log: Path, output_json: bool = False) -> int:
    """List batches with their commit message and event count.

    Returns:
        Exit code (0 = success, 1 = malformed log)
    """
    console = Console(stderr=True)
    batches = _load(log, console)
    if batches is None:
        return 1

    if output_json:
        print(json.dumps([b.to_dict() for b in batches], indent=2))
        return 0

    table = Table(title=f"Batches in {log.name}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Batch")
    table.add_column("Message")
    table.add_column("Events", justify="right")
    for i, batch in enumerate(batches, 1):
        table.add_row(str(i), batch.batch_id, batch.commit_message, str(len(batch)))
    Console().print(table)
    console.print(f"{len(batches)} batch(es), {sum(len(b) for b in batches)} event(s)", style="dim")
    return 0


def run_graph(log: Path, output_json: bool = False) -> int:
    """Project the log and print table sizes (or the whole graph as JSON)."""
    console = Console(stderr=True)
    batches = _load(log, console)
    if batches is None:
        return 1

    try:
        graph = Graph.from_batches(batches)
    except MalformedEvent as e:
        console.print(f"{log}: {escape(str(e))}", style="bold red")
        return 1

    if output_json:
        print(json.dumps(graph.to_dict(), indent=2))
        return 0

    table = Table(title=f"Graph of {log.name}")
    table.add_column("Table")
    table.add_column("Entities", justify="right")
    for name, count in graph.stats().items():
        table.add_row(name, str(count))
    Console().print(table)
    return 0
