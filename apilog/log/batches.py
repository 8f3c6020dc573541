"""
Batch grouping.

A batch is the run of events between a BatchCommitStarted and its matching
BatchCommitEnded. Events outside any batch are ignored. Batches never nest.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from ..errors import MalformedLog
from .events import Event, EventKind


class GrouperState(str, Enum):
    SEEKING = "seeking"
    IN_BATCH = "in_batch"
    DONE = "done"


@dataclass(frozen=True)
class Batch:
    """A sealed commit batch.

    The delimiter events are not included in ``events``.
    """

    batch_id: str
    commit_message: str = ""
    events: tuple[Event, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.events)

    def to_dict(self) -> dict:
        return {
            "batchId": self.batch_id,
            "commitMessage": self.commit_message,
            "events": len(self.events),
        }


class BatchGrouper:
    """Three-state scanner: SEEKING -> IN_BATCH -> SEEKING ... -> DONE."""

    def __init__(self) -> None:
        self.state = GrouperState.SEEKING
        self.batches: list[Batch] = []
        self._open_id = ""
        self._open_message = ""
        self._pending: list[Event] = []

    def feed(self, event: Event) -> None:
        if self.state is GrouperState.DONE:
            raise MalformedLog("grouper already finished")

        if self.state is GrouperState.SEEKING:
            if event.kind is EventKind.BATCH_COMMIT_STARTED:
                self._open_id = str(event.get("batchId") or "")
                self._open_message = str(event.get("commitMessage") or "")
                self._pending = []
                self.state = GrouperState.IN_BATCH
            return

        if event.kind is EventKind.BATCH_COMMIT_STARTED:
            raise MalformedLog(
                f"batch {event.get('batchId')!r} started while batch {self._open_id!r} is still open"
            )
        if event.kind is EventKind.BATCH_COMMIT_ENDED:
            self.batches.append(
                Batch(
                    batch_id=self._open_id,
                    commit_message=self._open_message,
                    events=tuple(self._pending),
                )
            )
            self._pending = []
            self.state = GrouperState.SEEKING
            return

        self._pending.append(event)

    def finish(self) -> list[Batch]:
        """End of input. Returns the sealed batches."""
        if self.state is GrouperState.IN_BATCH:
            raise MalformedLog(f"batch {self._open_id!r} has no BatchCommitEnded")
        self.state = GrouperState.DONE
        return self.batches


def group_batches(events: Iterable[Event]) -> list[Batch]:
    """Partition decoded events into sealed batches, in log order.

    Raises:
        MalformedLog: on a BatchCommitStarted inside an open batch, or when
            the input ends before the open batch is terminated.
    """
    grouper = BatchGrouper()
    for event in events:
        grouper.feed(event)
    return grouper.finish()


def flatten(batches: Iterable[Batch]) -> list[Event]:
    """All events of all batches, in order."""
    return [event for batch in batches for event in batch.events]
