"""FastAPI application that drives the example emitters over HTTP."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException

from eventcore.domain.handlers import ActivityRegistry
from eventcore.domain.models import (
    ActivityEntry,
    Drink,
    Order,
    OrderRequest,
    Task,
    TaskRequest,
)
from eventcore.logging import configure_logging
from eventcore.repos.memory import (
    ActivityRepository,
    DrinkRepository,
    OrderRepository,
    TaskRepository,
)
from eventcore.services.pizza_shop import DrinkMachine, PizzaShop
from eventcore.services.task_tracker import TaskTracker


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield


app = FastAPI(title="Event Emitter Demo", lifespan=lifespan)

# ── Singletons (created at import time for simplicity) ────────────────
order_repo = OrderRepository()
drink_repo = DrinkRepository()
task_repo = TaskRepository()
activity_repo = ActivityRepository()

shop = PizzaShop(order_repo)
tracker = TaskTracker(task_repo)
drink_machine = DrinkMachine(drink_repo)
drink_machine.attach(shop)

activity_registry = ActivityRegistry(shop=shop, tracker=tracker, activity_repo=activity_repo)


# ── Routes ────────────────────────────────────────────────────────────


@app.post("/orders", response_model=Order)
def place_order(body: OrderRequest) -> Order:
    """Place an order; listeners are notified before the response is built."""
    return shop.order(body.size, body.topping)


@app.get("/orders", response_model=list[Order])
def list_orders() -> list[Order]:
    return order_repo.list_all()


@app.get("/orders/{order_number}", response_model=Order)
def get_order(order_number: int) -> Order:
    order = order_repo.get(order_number)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@app.get("/drinks", response_model=list[Drink])
def list_drinks() -> list[Drink]:
    return drink_repo.list_all()


@app.post("/tasks", response_model=Task)
def add_task(body: TaskRequest) -> Task:
    return tracker.add(body.title)


@app.get("/tasks", response_model=list[Task])
def list_tasks() -> list[Task]:
    return task_repo.list_all()


@app.post("/tasks/{task_id}/complete", response_model=Task)
def complete_task(task_id: str) -> Task:
    try:
        return tracker.complete(task_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Task not found")


@app.get("/activity", response_model=list[ActivityEntry])
def list_activity() -> list[ActivityEntry]:
    return activity_repo.list_all()


@app.get("/listeners")
def list_listeners() -> dict:
    """Return the listener count per event for each emitter."""
    return {
        name: {str(event): emitter.listener_count(event) for event in emitter.event_names()}
        for name, emitter in (("shop", shop), ("tracker", tracker))
    }
