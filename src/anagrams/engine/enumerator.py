"""Main enumerator module: run setup, resume handling and cancellation."""

import os
import signal
import threading
from collections.abc import Iterator
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from multiprocessing.managers import SyncManager
from pathlib import Path
from queue import Queue
from time import time
from typing import Literal, TextIO

from anagrams.engine.checkpoint import CheckpointRecord, FileCheckpointStore
from anagrams.engine.config import EngineConfig
from anagrams.engine.config import config as default_config
from anagrams.engine.parallel import Result, enumerate_with_partitions
from anagrams.engine.sink import FileSink, count_lines
from anagrams.engine.task_args import TaskArgs
from anagrams.engine.utils import TIMESTAMP_FMT, int_comma, percent, time_str
from anagrams.engine.worker import SharedState


@dataclass
class EnumerationReport:
    """Final status of a run."""

    status: Literal["completed", "cancelled", "error"]
    found: int
    """Found-count, including lines already in the sink when resuming."""
    total_anagrams: int
    elapsed: float
    """Wall-clock duration of the run, in seconds."""
    results: list[Result] = field(default_factory=list)
    """Results of the workers started in this run, by partition."""

    @property
    def failed_partitions(self) -> list[int]:
        return [r.partition for r in self.results if r.status == "error"]

    @property
    def percent_found(self) -> str:
        return percent(self.found, self.total_anagrams)


def init_worker_process() -> None:
    """Ignore SIGINT in child processes; only the coordinator reacts to it."""
    signal.signal(signal.SIGINT, signal.SIG_IGN)


@contextmanager
def shared_state(kind: Literal["process", "thread"]) -> Iterator[SharedState]:
    """Create the queue, cancellation flag and progress map shared with the workers.

    For process pools these live in a manager process, whose `put` calls return only
    once the item is stored, so the collector can never miss an item that a finished
    worker enqueued.
    """
    if kind == "thread":
        yield SharedState(queue=Queue(), cancel=threading.Event(), positions={})
        return

    manager = SyncManager()
    manager.start(initializer=init_worker_process)
    try:
        yield SharedState(queue=manager.Queue(), cancel=manager.Event(), positions=manager.dict())
    finally:
        manager.shutdown()


def get_executor(
    kind: Literal["process", "thread"],
    *,
    n_partitions: int,
    n_workers: int | None = None,
) -> Executor:
    """Get an executor for the worker tasks.

    Args:
        kind: "process" for a ProcessPoolExecutor, "thread" for a ThreadPoolExecutor.
        n_partitions (int): Number of worker tasks that will be submitted.
        n_workers (int | None): Number of workers to run at once.  If None, one per
            partition (capped at the number of CPU cores for processes).

    Returns:
        An Executor instance.  Tasks beyond `n_workers` wait for a free worker.
    """
    n_partitions = max(1, n_partitions)
    if kind == "thread":
        return ThreadPoolExecutor(
            max_workers=n_workers or n_partitions,
            thread_name_prefix="anagram-worker",
        )

    cpus = os.cpu_count() or 1  # Fallback to 1 if os.cpu_count() is None
    if n_workers is None:
        n_workers = min(n_partitions, cpus)
    if n_workers > cpus:
        raise ValueError(
            f"Requested number of workers ({n_workers}) exceeds CPU count ({cpus})",
        )
    return ProcessPoolExecutor(max_workers=n_workers, initializer=init_worker_process)


def get_store(engine_config: EngineConfig) -> FileCheckpointStore:
    """Checkpoint store described by the engine settings."""
    return FileCheckpointStore(
        directory=engine_config.state_dir,
        prefix=engine_config.state_prefix,
        suffix=engine_config.state_suffix,
    )


def load_resume_state(
    task_args: TaskArgs,
    store: FileCheckpointStore,
    output_path: str | Path,
) -> tuple[int, dict[int, CheckpointRecord | None]]:
    """Read everything needed to resume a cancelled run.

    Partitions with a completion marker are not resumed; every other partition must
    have a checkpoint record.

    Returns:
        The found-count (lines already in the sink) and the records to resume from.

    Raises:
        ResumeStateError: If the sink is unreadable or a record is missing or malformed.
    """
    found = count_lines(output_path)
    records: dict[int, CheckpointRecord | None] = {}
    for partition in range(task_args.n_partitions):
        if store.is_completed(partition):
            continue
        records[partition] = store.load(partition, length=task_args.length)
    return found, records


def run(word: str, *, resume: bool = False, engine_config: EngineConfig | None = None) -> EnumerationReport:
    """Run the enumerator on the given word, logging to a file under the log directory.

    Args:
        word (str): The input token.
        resume (bool): Resume from the checkpoints of a cancelled run.
        engine_config (EngineConfig | None): Engine settings; defaults to the global config.
    """
    engine_config = engine_config or default_config
    task_args = TaskArgs(word)

    print(f"Searching for all {int_comma(task_args.total_anagrams)} possible anagrams in '{word}'...")

    logfile = Path(engine_config.log_dir) / f"{word}.log"
    print(f"Log file: {logfile}")
    logfile.parent.mkdir(parents=True, exist_ok=True)

    with open(logfile, "a", encoding="utf-8") as logf:
        report = enumerate_one(task_args, resume=resume, engine_config=engine_config, logf=logf)

    if report.status == "cancelled":
        print("Canceled successfully")
        print(
            f"Current progress: {int_comma(report.found)} / {int_comma(report.total_anagrams)} "
            f"({report.percent_found}) anagrams found"
        )
    elif report.status == "error":
        print(f"Failed partitions: {', '.join(str(p + 1) for p in report.failed_partitions)}")
    else:
        print(f"Done! {int_comma(report.found)} anagrams found in {time_str(report.elapsed)}.")
    return report


def enumerate_one(
    task_args: TaskArgs,
    *,
    resume: bool = False,
    engine_config: EngineConfig | None = None,
    logf: TextIO,
    cancel_after: int | None = None,
    handle_sigint: bool = True,
) -> EnumerationReport:
    """Enumerate the anagrams of one input token.

    A fresh run truncates the sink and discards old checkpoints; a resumed run appends to
    the sink and restarts each unfinished partition from its checkpoint.  A run that ends
    without cancellation discards all checkpoints.

    Args:
        task_args (TaskArgs): The input token and its derived search space.
        resume (bool): Resume from the checkpoints of a cancelled run.
        engine_config (EngineConfig | None): Engine settings; defaults to the global config.
        logf: File object to log the run.
        cancel_after (int | None): Cancel once this many candidates have been written.
        handle_sigint (bool): Turn SIGINT into a cancellation request while running.  Only
            effective on the main thread.

    Raises:
        ResumeStateError: If `resume` is set and the saved state is unusable.
    """
    engine_config = engine_config or default_config
    store = get_store(engine_config)
    partitions = range(task_args.n_partitions)

    print(
        f"Word: {task_args.word!r}, start time: "
        f"{datetime.fromtimestamp(task_args.start_time).astimezone().strftime(TIMESTAMP_FMT)}",
        file=logf,
        flush=True,
    )

    if resume:
        found, records = load_resume_state(task_args, store, engine_config.output_path)
        print(f"Resuming at {int_comma(found)} anagrams...")
        print(f"Resuming at {found} anagrams, partitions {sorted(records)}", file=logf, flush=True)
    else:
        for partition in partitions:
            store.clear(partition)
        found = 0
        records = dict.fromkeys(partitions)

    print(f"Starting {len(records)} workers...")
    start = time()
    interrupt = threading.Event()

    def on_sigint(signum, frame) -> None:
        # Handled: no default termination; the collector forwards the request
        print("Canceling...", flush=True)
        interrupt.set()

    install = handle_sigint and threading.current_thread() is threading.main_thread()

    with (
        shared_state(engine_config.executor) as shared,
        FileSink(engine_config.output_path, truncate=not resume) as sink,
    ):
        previous = signal.signal(signal.SIGINT, on_sigint) if install else None
        try:
            with get_executor(
                engine_config.executor,
                n_partitions=len(records),
                n_workers=engine_config.max_workers,
            ) as executor:
                found, results = enumerate_with_partitions(
                    executor,
                    task_args,
                    shared=shared,
                    store=store,
                    sink=sink,
                    records=records,
                    found=found,
                    engine_config=engine_config,
                    logf=logf,
                    cancel_after=cancel_after,
                    interrupt=interrupt,
                )
        finally:
            if install and previous is not None:
                signal.signal(signal.SIGINT, previous)

    if any(r.status == "error" for r in results):
        status = "error"
    elif any(r.status == "cancelled" for r in results):
        status = "cancelled"
    else:
        status = "completed"
        for partition in partitions:
            store.clear(partition)

    report = EnumerationReport(
        status=status,
        found=found,
        total_anagrams=task_args.total_anagrams,
        elapsed=time() - start,
        results=results,
    )
    print(
        f"Run {status}: {int_comma(found)} / {int_comma(task_args.total_anagrams)} "
        f"({report.percent_found}) anagrams in {time_str(report.elapsed)}",
        file=logf,
        flush=True,
    )
    return report
