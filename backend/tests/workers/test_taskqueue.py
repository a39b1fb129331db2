"""Tests for the background task channel."""
import logging
import threading
from dataclasses import dataclass, field
from typing import List

import pytest

from pathmark.core.errors import ChannelClosed
from pathmark.workers.taskqueue import WorkerPool, channel
from pathmark.workers.tasks import EmptyTask, Task


@dataclass
class RecordingTask(Task):
    """Appends its number to a shared list."""

    number: int
    seen: List[int]

    def run(self, state) -> None:
        self.seen.append(self.number)


@dataclass
class FailingTask(Task):
    message: str = "boom"

    def run(self, state) -> None:
        raise RuntimeError(self.message)


@dataclass
class ThreadTask(Task):
    """Records which thread ran it."""

    names: List[str] = field(default_factory=list)

    def run(self, state) -> None:
        self.names.append(threading.current_thread().name)


def test_worker_drains_then_stops() -> None:
    """Test that tasks sent before close are still delivered in order."""
    dispatcher, worker = channel()
    seen: List[int] = []
    for number in range(3):
        dispatcher.dispatch(RecordingTask(number, seen))
    dispatcher.channel.close()

    worker.work(state=None)

    assert seen == [0, 1, 2]


def test_dispatch_after_close_raises() -> None:
    """Test that a closed channel refuses new tasks."""
    dispatcher, _ = channel()
    dispatcher.channel.close()

    with pytest.raises(ChannelClosed):
        dispatcher.dispatch(EmptyTask())


def test_close_is_idempotent() -> None:
    """Test closing twice."""
    dispatcher, worker = channel()
    dispatcher.channel.close()
    dispatcher.channel.close()

    assert dispatcher.channel.closed
    worker.work(state=None)


def test_failing_task_does_not_stop_worker(caplog) -> None:
    """Test that a failure is logged and the next task still runs."""
    dispatcher, worker = channel()
    seen: List[int] = []
    dispatcher.dispatch(FailingTask("broken task"))
    dispatcher.dispatch(RecordingTask(1, seen))
    dispatcher.channel.close()

    with caplog.at_level(logging.ERROR, logger="pathmark.workers.taskqueue"):
        worker.work(state=None)

    assert seen == [1]
    assert any("failed" in record.getMessage() for record in caplog.records)
    assert any(record.exc_info for record in caplog.records)


def test_empty_task_is_noop() -> None:
    """Test that EmptyTask runs without touching state."""
    dispatcher, worker = channel()
    dispatcher.dispatch(EmptyTask())
    dispatcher.channel.close()

    worker.work(state=None)

    assert dispatcher.channel.qsize() == 1  # only the close marker is left


def test_pool_delivers_each_task_once() -> None:
    """Test that every task is run by exactly one of several workers."""
    dispatcher, worker = channel()
    seen: List[int] = []
    pool = WorkerPool(worker, state=None, size=4)
    pool.start()

    for number in range(50):
        dispatcher.dispatch(RecordingTask(number, seen))
    pool.stop()

    assert sorted(seen) == list(range(50))


def test_pool_threads_are_named() -> None:
    """Test that tasks run on the pool's worker threads."""
    dispatcher, worker = channel()
    task = ThreadTask()
    pool = WorkerPool(worker, state=None, size=2)
    pool.start()

    dispatcher.dispatch(task)
    pool.stop()

    assert len(task.names) == 1
    assert task.names[0].startswith("tag-worker-")
