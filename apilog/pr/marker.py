"""
Comment metadata marker.

Bot comments end with an HTML comment carrying JSON metadata:

    <!-- apilog = {"hash": "...", "specPath": "..."} -->

The marker identifies the bot's own comments and carries the content hash
used to skip redundant updates.
"""

from __future__ import annotations

import json
import re
from typing import Any

MARKER_RE = re.compile(r"\n\n<!-- apilog = (.*) -->")


def is_bot_comment(body: str | None) -> bool:
    return bool(body) and MARKER_RE.search(body) is not None


def get_metadata(body: str | None) -> dict[str, Any]:
    """Metadata embedded in ``body``, or {} when absent or unreadable."""
    if not body:
        return {}
    match = MARKER_RE.search(body)
    if not match:
        return {}
    try:
        data = json.loads(match.group(1))
    except json.JSONDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def set_metadata(body: str, data: dict[str, Any]) -> str:
    """Return ``body`` with its marker replaced by existing metadata merged with ``data``."""
    current = get_metadata(body)
    text = MARKER_RE.sub("", body)
    merged = {**current, **data}
    return f"{text}\n\n<!-- apilog = {json.dumps(merged, separators=(',', ':'))} -->"
