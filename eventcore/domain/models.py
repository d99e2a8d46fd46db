"""Domain models for the example emitter consumers."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, Field


class PizzaSize(StrEnum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class TaskStatus(StrEnum):
    OPEN = "open"
    DONE = "done"


class ActivityType(StrEnum):
    ORDER_PLACED = "order_placed"
    FIRST_ORDER = "first_order"
    TASK_ADDED = "task_added"
    TASK_COMPLETED = "task_completed"
    ALL_TASKS_DONE = "all_tasks_done"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class Order(BaseModel):
    order_number: int
    size: PizzaSize
    topping: str
    created_at: datetime = Field(default_factory=_utcnow)


class Drink(BaseModel):
    order_number: int
    name: str
    served_at: datetime = Field(default_factory=_utcnow)


class Task(BaseModel):
    id: str = Field(default_factory=_new_id)
    title: str
    status: TaskStatus = TaskStatus.OPEN
    created_at: datetime = Field(default_factory=_utcnow)
    completed_at: datetime | None = None


class ActivityEntry(BaseModel):
    id: str = Field(default_factory=_new_id)
    timestamp: datetime = Field(default_factory=_utcnow)
    type: ActivityType
    payload: dict = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class OrderRequest(BaseModel):
    size: PizzaSize
    topping: str = Field(min_length=1)


class TaskRequest(BaseModel):
    title: str = Field(min_length=1)
