"""In-memory repositories for orders, drinks, tasks and activity."""

from __future__ import annotations

from datetime import datetime

from eventcore.domain.models import (
    ActivityEntry,
    ActivityType,
    Drink,
    Order,
    Task,
    TaskStatus,
)


class OrderRepository:
    """Dict-backed store for Order instances, keyed by order number."""

    def __init__(self) -> None:
        self._store: dict[int, Order] = {}

    def add(self, order: Order) -> None:
        self._store[order.order_number] = order

    def get(self, order_number: int) -> Order | None:
        return self._store.get(order_number)

    def list_all(self) -> list[Order]:
        return list(self._store.values())


class DrinkRepository:
    """List-backed store for Drink instances."""

    def __init__(self) -> None:
        self._items: list[Drink] = []

    def add(self, drink: Drink) -> None:
        self._items.append(drink)

    def list_all(self) -> list[Drink]:
        return list(self._items)


class TaskRepository:
    """Dict-backed store for Task instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Task] = {}

    def add(self, task: Task) -> None:
        self._store[task.id] = task

    def get(self, task_id: str) -> Task | None:
        return self._store.get(task_id)

    def list_all(self) -> list[Task]:
        return list(self._store.values())

    def list_open(self) -> list[Task]:
        return [t for t in self._store.values() if t.status == TaskStatus.OPEN]

    def mark_done(self, task_id: str, completed_at: datetime) -> None:
        task = self._store.get(task_id)
        if task is not None:
            task.status = TaskStatus.DONE
            task.completed_at = completed_at


class ActivityRepository:
    """List-backed store for ActivityEntry instances."""

    def __init__(self) -> None:
        self._entries: list[ActivityEntry] = []

    def add(self, entry: ActivityEntry) -> None:
        self._entries.append(entry)

    def list_all(self) -> list[ActivityEntry]:
        return sorted(self._entries, key=lambda e: e.timestamp)

    def list_by_type(self, type: ActivityType) -> list[ActivityEntry]:
        return [e for e in self.list_all() if e.type == type]
