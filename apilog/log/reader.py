"""Read a raw event log document into batches."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..errors import MalformedLog
from .batches import Batch, group_batches
from .events import decode_events


def parse_records(text: str) -> list[Any]:
    """Parse log text into raw records. Blank text is the empty log."""
    if not text.strip():
        return []
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedLog(f"log is not valid JSON: {e.msg} (line {e.lineno})") from e
    except RecursionError as e:
        raise MalformedLog("log is nested too deeply to parse") from e
    if not isinstance(data, list):
        raise MalformedLog(f"log must be a JSON array, got {type(data).__name__}")
    return data


def read_batches(text: str) -> list[Batch]:
    """Decode and group a log document.

    Raises:
        MalformedLog: invalid JSON, non-array document, or bad batch boundaries.
        MalformedEvent: a record without exactly one event kind.
    """
    return group_batches(decode_events(parse_records(text)))


def read_batches_file(path: Path) -> list[Batch]:
    return read_batches(path.read_text(encoding="utf-8"))
