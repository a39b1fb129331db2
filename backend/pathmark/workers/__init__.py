"""Background task channel, tasks and worker pool."""
from pathmark.workers.taskqueue import Dispatcher, TaskChannel, Worker, WorkerPool, channel
from pathmark.workers.tasks import EmptyTask, TagUpdated, Task

__all__ = [
    "Dispatcher",
    "EmptyTask",
    "TagUpdated",
    "Task",
    "TaskChannel",
    "Worker",
    "WorkerPool",
    "channel",
]
