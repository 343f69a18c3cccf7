"""Single consumer draining the result queue into the sink."""

from collections.abc import Callable, Sequence
from concurrent.futures import Future, wait
from queue import Empty
from threading import Event
from time import monotonic, sleep
from typing import Any, TextIO

from anagrams.engine.sink import FileSink
from anagrams.engine.worker import CancelEvent


class Collector:
    """Drain accepted candidates from the result queue into a sink.

    The collector owns the sink and the found-count.  It polls the queue without
    blocking, sleeping briefly whenever the queue is empty.
    """

    def __init__(
        self,
        queue: Any,
        sink: FileSink,
        *,
        found: int = 0,
        idle_sleep: float = 0.001,
        cancel_after: int | None = None,
        on_progress: Callable[["Collector"], None] | None = None,
        progress_interval: float = 10.0,
        logf: TextIO | None = None,
        interrupt: Event | None = None,
    ) -> None:
        """Initialize the collector.

        Args:
            queue: Result queue shared with the workers.
            sink (FileSink): Where to append accepted candidates.
            found (int): Found-count at the start of the run (lines already in the sink).
            idle_sleep (float): Seconds to sleep when the queue is empty.
            cancel_after (int | None): Request cancellation once this many candidates have
                been written during this run.
            on_progress: Called with the collector every `progress_interval` seconds.
            progress_interval (float): Seconds between `on_progress` calls.
            logf: Stream for log messages.
            interrupt (Event | None): Local flag set by a signal handler; forwarded to the
                shared cancellation flag by the collector thread.
        """
        self.queue = queue
        self.sink = sink
        self.found = found
        self.written = 0
        self.idle_sleep = idle_sleep
        self.cancel_after = cancel_after
        self.on_progress = on_progress
        self.progress_interval = progress_interval
        self.logf = logf
        self.interrupt = interrupt
        self._forwarded = False

    def _write(self, candidate: str, cancel: CancelEvent) -> None:
        self.sink.write_line(candidate)
        self.found += 1
        self.written += 1
        if self.cancel_after is not None and self.written == self.cancel_after:
            cancel.set()

    def _forward_interrupt(self, cancel: CancelEvent) -> None:
        if not self._forwarded and self.interrupt is not None and self.interrupt.is_set():
            cancel.set()
            self._forwarded = True

    def drain_available(self, cancel: CancelEvent) -> int:
        """Write every item currently in the queue. Returns the number written."""
        n = 0
        while True:
            try:
                candidate = self.queue.get_nowait()
            except Empty:
                return n
            self._write(candidate, cancel)
            n += 1

    def run(self, futures: Sequence[Future], cancel: CancelEvent) -> int:
        """Drain the queue until every worker has stopped and the queue is empty.

        Workers may still enqueue after the queue is seen empty, so termination is only
        decided after waiting for every future, followed by a final drain.

        Args:
            futures: Futures of all worker tasks.
            cancel: Cancellation flag; once set, the workers checkpoint and stop.

        Returns:
            The found-count.
        """
        next_progress = monotonic() + self.progress_interval
        while True:
            self._forward_interrupt(cancel)
            try:
                candidate = self.queue.get_nowait()
            except Empty:
                if cancel.is_set() or all(f.done() for f in futures):
                    # Wait for the workers to finish (or checkpoint) before the last drain
                    wait(futures)
                    remaining = self.drain_available(cancel)
                    if remaining and self.logf is not None:
                        print(
                            f"Processed {remaining} queued candidates after the workers stopped.",
                            file=self.logf,
                            flush=True,
                        )
                    break
                sleep(self.idle_sleep)
            else:
                self._write(candidate, cancel)

            if self.on_progress is not None and monotonic() >= next_progress:
                self.on_progress(self)
                next_progress = monotonic() + self.progress_interval

        self.sink.flush()
        return self.found
