"""Implementation of the parallel enumerator: task distribution and worker management."""

import traceback
from concurrent.futures import Executor, wait
from dataclasses import dataclass
from pprint import pprint
from threading import Event
from typing import Literal, TextIO, TypedDict

from sortedcontainers import SortedDict

from anagrams.engine.checkpoint import CheckpointRecord, CheckpointStore
from anagrams.engine.collector import Collector
from anagrams.engine.config import EngineConfig
from anagrams.engine.sink import FileSink
from anagrams.engine.task_args import TaskArgs
from anagrams.engine.utils import int_comma, percent
from anagrams.engine.worker import SharedState, worker_task


class WorkerTaskPayload(TypedDict):
    """Payload submitted to workers."""

    partition: int
    """Partition index (first alphabet symbol) of the worker."""
    task_args: TaskArgs
    shared: SharedState
    store: CheckpointStore
    record: CheckpointRecord | None
    """Checkpoint to resume from, or None for a fresh start."""
    report_interval: int
    publish_interval: int


@dataclass
class Result:
    """Wrapper for worker task results."""

    partition: int
    status: Literal["completed", "cancelled", "error"]
    position: int = 0
    err_msg: str | None = None


@dataclass
class ProgressSnapshot:
    """Point-in-time view of a run's progress; may lag behind the workers."""

    found: int
    total_anagrams: int
    per_worker: int
    positions: SortedDict
    """Last reported position counter, keyed by partition index."""

    def lines(self) -> list[str]:
        """Human-readable progress, one line for the run and one per worker."""
        ret = [
            f"Found {int_comma(self.found)} / {int_comma(self.total_anagrams)} "
            f"({percent(self.found, self.total_anagrams)}) anagrams"
        ]
        for partition, position in self.positions.items():
            ret.append(
                f"  Worker {partition + 1}: {int_comma(position)} / {int_comma(self.per_worker)} "
                f"({percent(position, self.per_worker)})"
            )
        return ret


def take_snapshot(collector: Collector, task_args: TaskArgs, shared: SharedState) -> ProgressSnapshot:
    """Build a ProgressSnapshot from the collector and the shared position map."""
    return ProgressSnapshot(
        found=collector.found,
        total_anagrams=task_args.total_anagrams,
        per_worker=task_args.per_worker,
        positions=SortedDict(shared.positions.copy()),
    )


def enumerate_with_partitions(
    executor: Executor,
    task_args: TaskArgs,
    *,
    shared: SharedState,
    store: CheckpointStore,
    sink: FileSink,
    records: dict[int, CheckpointRecord | None],
    found: int,
    engine_config: EngineConfig,
    logf: TextIO,
    cancel_after: int | None = None,
    interrupt: Event | None = None,
) -> tuple[int, list[Result]]:
    """Enumerate all anagrams using one worker per partition.

    Workers are submitted to `executor`, and the calling thread drains their results into
    `sink` until every worker has completed or checkpointed.

    Args:
        executor (Executor): Executor for running the workers.
        task_args (TaskArgs): The input token and its derived search space.
        shared (SharedState): Result queue, cancellation flag and progress map.
        store (CheckpointStore): Checkpoint store handed to the workers.
        sink (FileSink): Output sink; owned by the collector for the duration of the call.
        records (dict[int, CheckpointRecord | None]): Partitions to run, each mapped to the
            checkpoint it resumes from (None for a fresh start).  Partitions missing from
            the mapping are not started.
        found (int): Found-count at the start of the run.
        engine_config (EngineConfig): Engine settings.
        logf: File object to log the run.
        cancel_after (int | None): Request cancellation after this many new candidates.
        interrupt (Event | None): Set by the SIGINT handler to request cancellation.

    Returns:
        The final found-count and the results of all started workers, by partition.
    """
    print("Engine config:", file=logf, flush=True)
    pprint(engine_config.model_dump(), stream=logf, width=120)
    print("Enumerator initialized with:", file=logf, flush=True)
    pprint(task_args.summary(), stream=logf, width=120)
    print("", file=logf, flush=True)
    print("#" * 80, file=logf, flush=True)
    print("", file=logf, flush=True)

    tasks: list[WorkerTaskPayload] = [
        {
            "partition": partition,
            "task_args": task_args,
            "shared": shared,
            "store": store,
            "record": record,
            "report_interval": engine_config.report_interval,
            "publish_interval": engine_config.publish_interval,
        }
        for partition, record in sorted(records.items())
    ]
    print(f"Starting {len(tasks)} workers...", file=logf, flush=True)
    futures = [executor.submit(_worker_task, task) for task in tasks]

    def log_progress(collector: Collector) -> None:
        for line in take_snapshot(collector, task_args, shared).lines():
            print(line, file=logf, flush=True)

    collector = Collector(
        shared.queue,
        sink,
        found=found,
        idle_sleep=engine_config.idle_sleep,
        cancel_after=cancel_after,
        on_progress=log_progress,
        progress_interval=engine_config.progress_interval,
        logf=logf,
        interrupt=interrupt,
    )
    try:
        found = collector.run(futures, shared.cancel)
    except BaseException:
        # Accepted candidates still queued are lost, so the saved state can no longer
        # resume without omissions: stop the workers, then discard it
        shared.cancel.set()
        wait(futures)
        for partition in records:
            store.clear(partition)
        print("Collector failed; workers stopped and resume state discarded.", file=logf, flush=True)
        raise

    results: list[Result] = []
    for task, future in zip(tasks, futures):
        try:
            results.append(future.result())
        except Exception as e:
            # The wrapper catches task errors, so this is a broken pool or similar
            print(f"Error retrieving worker result: {str(e)}", flush=True)
            print(traceback.format_exc(), file=logf, flush=True)
            results.append(Result(partition=task["partition"], status="error", err_msg=str(e)))

    for result in results:
        if result.status == "error":
            print(f"Worker {result.partition + 1} encountered an error:", flush=True)
            print(result.err_msg, file=logf, flush=True)
        else:
            print(
                f"Worker {result.partition + 1}: {result.status} at "
                f"{int_comma(result.position)}",
                file=logf,
                flush=True,
            )
    log_progress(collector)
    return found, results


def _worker_task(args: WorkerTaskPayload) -> Result:
    """Worker task enumerating one partition.

    Args:
        args (dict): Dictionary received from `executor.submit`; see WorkerTaskPayload.

    Returns:
        A Result wrapper.
    """
    try:
        outcome = worker_task(
            args["partition"],
            args["task_args"],
            shared=args["shared"],
            store=args["store"],
            record=args["record"],
            report_interval=args["report_interval"],
            publish_interval=args["publish_interval"],
        )
        return Result(partition=outcome.partition, status=outcome.status, position=outcome.position)
    except Exception as e:
        return Result(
            partition=args.get("partition", -1),
            status="error",
            err_msg=f"Worker encountered an error: {str(e)}\n{traceback.format_exc()}",
        )
