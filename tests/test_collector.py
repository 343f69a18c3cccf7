"""Tests for the collector draining the result queue."""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from queue import Queue

import pytest

from anagrams.engine.collector import Collector
from anagrams.engine.sink import FileSink


def done_future() -> Future:
    future: Future = Future()
    future.set_result(None)
    return future


@pytest.fixture
def sink(tmp_path):
    with FileSink(tmp_path / "output.txt") as sink:
        yield sink


def test_drains_everything_after_workers_finish(sink):
    queue: Queue = Queue()
    for word in ["abc", "acb", "bac"]:
        queue.put(word)
    collector = Collector(queue, sink, found=10)
    found = collector.run([done_future()], threading.Event())
    assert found == 13
    assert collector.written == 3
    assert sink.path.read_text() == "abc\nacb\nbac\n"


def test_no_workers(sink):
    collector = Collector(Queue(), sink)
    assert collector.run([], threading.Event()) == 0


def test_items_enqueued_by_a_late_worker_are_not_lost(sink):
    queue: Queue = Queue()
    release = threading.Event()

    def slow_worker() -> None:
        release.wait()
        for i in range(50):
            queue.put(f"w{i}")

    with ThreadPoolExecutor(max_workers=1) as executor:
        future = executor.submit(slow_worker)
        cancel = threading.Event()
        cancel.set()  # The collector must still wait for the worker
        release.set()
        found = Collector(queue, sink, idle_sleep=0.0001).run([future], cancel)
    assert found == 50
    assert sink.path.read_text().splitlines() == [f"w{i}" for i in range(50)]


def test_cancel_after(sink):
    queue: Queue = Queue()
    for i in range(5):
        queue.put(str(i))
    cancel = threading.Event()
    collector = Collector(queue, sink, cancel_after=2)
    collector.run([done_future()], cancel)
    assert cancel.is_set()
    # Everything already queued is still written
    assert collector.written == 5


def test_interrupt_is_forwarded(sink):
    interrupt = threading.Event()
    interrupt.set()
    cancel = threading.Event()
    Collector(Queue(), sink, interrupt=interrupt).run([done_future()], cancel)
    assert cancel.is_set()


def test_progress_callback(sink):
    calls = []
    queue: Queue = Queue()
    queue.put("x")
    collector = Collector(queue, sink, on_progress=calls.append, progress_interval=0.0)
    collector.run([done_future()], threading.Event())
    assert calls and calls[0] is collector
