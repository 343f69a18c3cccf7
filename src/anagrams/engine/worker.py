"""Main module for worker tasks in the parallel enumerator."""

from array import array
from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import Any, Literal, Protocol

from anagrams.engine.checkpoint import CheckpointRecord, CheckpointStore
from anagrams.engine.odometer import Odometer
from anagrams.engine.task_args import TaskArgs
from anagrams.engine.utils import int_comma, is_valid_anagram, percent


class CancelEvent(Protocol):
    """The part of threading.Event (or a manager proxy for one) used by the engine."""

    def is_set(self) -> bool: ...

    def set(self) -> None: ...


@dataclass
class SharedState:
    """State shared between the coordinator, the collector and all workers.

    `queue` is the only object written by several workers; it must serialize concurrent
    `put` and `get_nowait` calls (queue.Queue, or a manager proxy for one).  `cancel` is
    only ever set, never cleared, during a run.  `positions` maps each partition to its
    last reported position counter and may lag behind the workers.
    """

    queue: Any
    """Result queue of accepted candidates."""

    cancel: CancelEvent
    """Cooperative cancellation flag, checked once per loop iteration."""

    positions: MutableMapping[int, int]
    """Last reported position counter, by partition index."""


@dataclass
class WorkerOutcome:
    """How a worker stopped."""

    partition: int
    status: Literal["completed", "cancelled"]
    position: int
    checkpoint: CheckpointRecord | None = None


def worker_task(
    partition: int,
    task_args: TaskArgs,
    *,
    shared: SharedState,
    store: CheckpointStore,
    record: CheckpointRecord | None = None,
    report_interval: int,
    publish_interval: int = 1_000_000,
) -> WorkerOutcome:
    """Enumerate one partition of the search space.

    Each iteration checks for cancellation, materializes the candidate selected by the
    odometer, publishes it if it is an anagram of the input, then advances the odometer.
    A checkpoint therefore always holds the next position to visit, and resuming from it
    neither repeats nor skips a candidate.

    Args:
        partition (int): Partition index, i.e. the alphabet index pinned as the first symbol.
        task_args (TaskArgs): The input token and its derived search space.
        shared (SharedState): Result queue, cancellation flag and progress map.
        store (CheckpointStore): Where to save the checkpoint on cancellation.
        record (CheckpointRecord | None): Checkpoint to resume from, if any.
        report_interval (int): Print progress every this many visited positions.
        publish_interval (int): Update `shared.positions` every this many visited positions
            (and at least as often as progress is printed).

    Returns:
        A WorkerOutcome.

    Raises:
        PartitionError: If `record` does not belong to `partition`.
    """
    word = task_args.word
    alphabet = task_args.alphabet
    name = f"Worker {partition + 1}"

    if record is None:
        odometer = Odometer(partition, len(alphabet), len(word))
    else:
        odometer = Odometer.resume(partition, len(alphabet), record.digits, record.position)
        print(f"{name}: resuming at {int_comma(odometer.position)}", flush=True)

    digits = odometer.digits
    buffer = array("w", word)  # Overwritten with each candidate
    queue = shared.queue
    cancel = shared.cancel
    publish_interval = min(publish_interval, report_interval)
    exhausted = False

    while not cancel.is_set():
        for j, d in enumerate(digits):
            buffer[j] = alphabet[d]
        candidate = buffer.tounicode()
        if is_valid_anagram(candidate, word):
            queue.put(candidate)

        exhausted = odometer.advance()
        if odometer.position % publish_interval == 0:
            shared.positions[partition] = odometer.position
        if odometer.position % report_interval == 0:
            print(
                f"{name}: {int_comma(odometer.position)} / {int_comma(task_args.per_worker)} "
                f"({percent(odometer.position, task_args.per_worker)})",
                flush=True,
            )
        if exhausted:
            break

    shared.positions[partition] = odometer.position

    if exhausted:
        store.mark_completed(partition)
        print(f"{name}: done", flush=True)
        return WorkerOutcome(partition=partition, status="completed", position=odometer.position)

    # Cancelled: the current digits have not been visited yet
    checkpoint = CheckpointRecord(position=odometer.position, digits=list(digits))
    store.save(partition, checkpoint)
    print(f"Saved {name.lower()} at {int_comma(odometer.position)}", flush=True)
    return WorkerOutcome(
        partition=partition,
        status="cancelled",
        position=odometer.position,
        checkpoint=checkpoint,
    )
