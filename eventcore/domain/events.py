"""Event names and payloads announced by the shop and tracker emitters."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel

from eventcore.domain.models import PizzaSize


class ShopEvent(StrEnum):
    ORDER = "order"


class TaskEvent(StrEnum):
    ADDED = "task_added"
    COMPLETED = "task_completed"
    ALL_DONE = "all_done"


class OrderPlaced(BaseModel):
    """Fired by the pizza shop for every new order."""

    order_number: int
    size: PizzaSize
    topping: str


class TaskAdded(BaseModel):
    task_id: str
    title: str


class TaskCompleted(BaseModel):
    task_id: str
    title: str
    remaining: int


class AllTasksDone(BaseModel):
    """Fired when the last open task is completed."""

    completed: int
