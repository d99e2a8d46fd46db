"""Task tracker that announces task lifecycle changes."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from eventcore.domain.emitter import EventEmitter
from eventcore.domain.events import AllTasksDone, TaskAdded, TaskCompleted, TaskEvent
from eventcore.domain.models import Task, TaskStatus
from eventcore.repos.memory import TaskRepository

logger = logging.getLogger(__name__)


class TaskTracker(EventEmitter):
    """Emits ``task_added``, ``task_completed`` and, when nothing is left
    open, ``all_done``."""

    def __init__(self, task_repo: TaskRepository, **kwargs) -> None:
        super().__init__(**kwargs)
        self.task_repo = task_repo

    def add(self, title: str) -> Task:
        task = Task(title=title)
        self.task_repo.add(task)
        self.emit(TaskEvent.ADDED, TaskAdded(task_id=task.id, title=task.title))
        return task

    def complete(self, task_id: str, now: datetime | None = None) -> Task:
        """Mark a task done.

        Raises ``KeyError`` for an unknown id.  Completing a task twice is a
        no-op and emits nothing the second time.
        """
        task = self.task_repo.get(task_id)
        if task is None:
            raise KeyError(task_id)
        if task.status == TaskStatus.DONE:
            return task

        self.task_repo.mark_done(task_id, now or datetime.now(timezone.utc))
        remaining = len(self.task_repo.list_open())
        logger.info("task completed", extra={"task_id": task_id, "remaining": remaining})

        self.emit(
            TaskEvent.COMPLETED,
            TaskCompleted(task_id=task.id, title=task.title, remaining=remaining),
        )
        if remaining == 0:
            done = len(self.task_repo.list_all())
            self.emit(TaskEvent.ALL_DONE, AllTasksDone(completed=done))
        return task
