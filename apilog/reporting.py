"""
Job reporting.

The runner talks to a Reporter instead of printing. ConsoleReporter renders
through rich on stderr; under GitHub Actions it also emits workflow commands
so warnings and failures show up as annotations.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Protocol

from rich.console import Console
from rich.markup import escape


class Reporter(Protocol):
    def debug(self, message: str) -> None:
        ...

    def info(self, message: str) -> None:
        ...

    def warning(self, message: str) -> None:
        ...

    def set_failed(self, message: str) -> None:
        ...

    def export_variable(self, name: str, value: str) -> None:
        ...


class ConsoleReporter:
    def __init__(
        self,
        console: Console | None = None,
        verbose: bool = False,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.console = console or Console(stderr=True)
        self.verbose = verbose
        self.failed = False
        self._environ = os.environ if environ is None else environ
        self._actions = self._environ.get("GITHUB_ACTIONS") == "true"

    def debug(self, message: str) -> None:
        if self.verbose:
            self.console.print(escape(message), style="dim")

    def info(self, message: str) -> None:
        self.console.print(escape(message))

    def warning(self, message: str) -> None:
        if self._actions:
            self.console.print(f"::warning::{message}", markup=False, highlight=False)
        else:
            self.console.print(f"[yellow]⚠[/] {escape(message)}")

    def set_failed(self, message: str) -> None:
        self.failed = True
        if self._actions:
            self.console.print(f"::error::{message}", markup=False, highlight=False)
        else:
            self.console.print(escape(message), style="bold red")

    def export_variable(self, name: str, value: str) -> None:
        env_file = self._environ.get("GITHUB_ENV")
        if env_file:
            with Path(env_file).open("a", encoding="utf-8") as f:
                f.write(f"{name}={value}\n")
        self.debug(f"exported {name}")


@dataclass
class RecordingReporter:
    """Reporter that keeps every call, for tests and dry runs."""

    debugs: list[str] = field(default_factory=list)
    infos: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)
    exported: dict[str, str] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return bool(self.failures)

    def debug(self, message: str) -> None:
        self.debugs.append(message)

    def info(self, message: str) -> None:
        self.infos.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def set_failed(self, message: str) -> None:
        self.failures.append(message)

    def export_variable(self, name: str, value: str) -> None:
        self.exported[name] = value
