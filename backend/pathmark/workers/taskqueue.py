"""
Background task channel.

A `Dispatcher` and any number of `Worker`s share one unbounded FIFO.
Dispatching never blocks and never reports how the task went; each task
is received by exactly one worker, which runs it to completion and logs
the outcome before taking the next one.
"""

import logging
import queue
import threading
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

from pathmark.core.errors import ChannelClosed

if TYPE_CHECKING:
    from pathmark.core.state import AppState
    from pathmark.workers.tasks import Task

logger = logging.getLogger(__name__)

_CLOSED = object()


class TaskChannel:
    """Thread-safe unbounded queue that can be closed exactly once.

    Tasks sent before `close()` are still delivered; once the queue is
    drained every receiver gets `ChannelClosed`.
    """

    def __init__(self):
        self._queue: "queue.Queue[Any]" = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, task: "Task") -> None:
        with self._lock:
            if self._closed:
                raise ChannelClosed()
            self._queue.put(task)

    def receive(self) -> "Task":
        """Block until a task is available.

        Raises:
            ChannelClosed: If the channel was closed and is drained
        """
        item = self._queue.get()
        if item is _CLOSED:
            # Leave the marker for the other receivers
            self._queue.put(_CLOSED)
            raise ChannelClosed()
        return item

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_CLOSED)

    def qsize(self) -> int:
        return self._queue.qsize()


class Dispatcher:
    """Producer half of the channel, shared by request handlers."""

    def __init__(self, channel: TaskChannel):
        self.channel = channel

    def dispatch(self, task: "Task") -> None:
        """Enqueue `task` and return immediately.

        Raises:
            ChannelClosed: If no worker will ever receive it
        """
        self.channel.send(task)
        logger.debug(f"Dispatched {task!r}")


class Worker:
    """Consumer half of the channel."""

    def __init__(self, channel: TaskChannel):
        self.channel = channel

    def work(self, state: "AppState") -> None:
        """Run tasks until the channel is closed.

        Task failures are logged and dropped; they never stop the loop.
        """
        name = threading.current_thread().name
        logger.info(f"Worker {name} started")
        while True:
            try:
                task = self.channel.receive()
            except ChannelClosed:
                logger.info(f"Worker {name} stopped, channel closed")
                return

            try:
                task.run(state)
            except Exception:
                logger.exception(f"Task {task!r} failed")
            else:
                logger.debug(f"Task {task!r} done")


def channel() -> Tuple[Dispatcher, Worker]:
    """Create a dispatcher and a worker sharing one new channel."""
    task_channel = TaskChannel()
    return Dispatcher(task_channel), Worker(task_channel)


class WorkerPool:
    """Fixed number of daemon threads, each running `Worker.work`."""

    def __init__(self, worker: Worker, state: "AppState", size: int = 4):
        """Initialize the pool.

        Args:
            worker: Consumer half shared by every thread
            state: Application state passed to each task
            size: Number of threads
        """
        self.worker = worker
        self.state = state
        self.size = size
        self._threads: List[threading.Thread] = []

    def start(self) -> None:
        for index in range(self.size):
            thread = threading.Thread(
                target=self.worker.work,
                args=(self.state,),
                name=f"tag-worker-{index}",
                daemon=True,
            )
            thread.start()
            self._threads.append(thread)
        logger.info(f"Started {self.size} background workers")

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """Close the channel and wait for the threads to drain it."""
        self.worker.channel.close()
        for thread in self._threads:
            thread.join(timeout=timeout)
        self._threads = []
        logger.info("Background workers stopped")
