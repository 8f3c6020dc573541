"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from apilog.graph import Graph
from apilog.log.batches import Batch
from apilog.log.reader import read_batches


@pytest.fixture
def fixtures_path() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def email_log_text(fixtures_path: Path) -> str:
    """The single-batch GET /users email scenario."""
    return (fixtures_path / "email_scenario.json").read_text(encoding="utf-8")


@pytest.fixture
def email_batches(email_log_text: str) -> list[Batch]:
    return read_batches(email_log_text)


@pytest.fixture
def email_graph(email_batches: list[Batch]) -> Graph:
    return Graph.from_batches(email_batches)


@pytest.fixture
def users_base_text(fixtures_path: Path) -> str:
    return (fixtures_path / "users" / "base.json").read_text(encoding="utf-8")


@pytest.fixture
def users_head_text(fixtures_path: Path) -> str:
    """Base plus one batch adding a response field and a request field."""
    return (fixtures_path / "users" / "head.json").read_text(encoding="utf-8")
