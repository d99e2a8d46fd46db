"""Tests for the pizza shop, drink machine, task tracker and activity log."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from eventcore.domain.events import OrderPlaced, ShopEvent, TaskEvent
from eventcore.domain.handlers import ActivityRegistry
from eventcore.domain.models import ActivityType, PizzaSize, TaskStatus
from eventcore.repos.memory import (
    ActivityRepository,
    DrinkRepository,
    OrderRepository,
    TaskRepository,
)
from eventcore.services.pizza_shop import DrinkMachine, PizzaShop
from eventcore.services.task_tracker import TaskTracker


@pytest.fixture()
def env():
    """Fresh emitters + repos + registry for each test."""

    class Env:
        pass

    e = Env()
    e.order_repo = OrderRepository()
    e.drink_repo = DrinkRepository()
    e.task_repo = TaskRepository()
    e.activity_repo = ActivityRepository()
    e.shop = PizzaShop(e.order_repo, error_policy="propagate", max_listeners=10)
    e.tracker = TaskTracker(e.task_repo, error_policy="propagate", max_listeners=10)
    e.drink_machine = DrinkMachine(e.drink_repo)
    e.drink_machine.attach(e.shop)
    e.registry = ActivityRegistry(
        shop=e.shop, tracker=e.tracker, activity_repo=e.activity_repo
    )
    return e


# ---------------------------------------------------------------------------
# Pizza shop
# ---------------------------------------------------------------------------


def test_order_numbers_increment(env):
    env.shop.order("small", "mushroom")
    env.shop.order(PizzaSize.MEDIUM, "olive")

    assert env.shop.display_order_number() == 2
    assert [o.order_number for o in env.order_repo.list_all()] == [1, 2]


def test_order_emits_payload_to_listeners(env):
    received: list[OrderPlaced] = []
    env.shop.on(ShopEvent.ORDER, received.append)

    env.shop.order("large", "pepperoni")

    assert received == [
        OrderPlaced(order_number=1, size=PizzaSize.LARGE, topping="pepperoni")
    ]


def test_plain_string_event_name_reaches_enum_subscribers(env):
    received: list = []
    env.shop.on("order", received.append)

    env.shop.order("small", "cheese")

    assert len(received) == 1


def test_drink_served_only_for_large_orders(env):
    env.shop.order("small", "cheese")
    env.shop.order("large", "pepperoni")

    drinks = env.drink_repo.list_all()
    assert len(drinks) == 1
    assert drinks[0].order_number == 2


def test_detached_drink_machine_stops_serving(env):
    env.drink_machine.detach(env.shop)

    env.shop.order("large", "pepperoni")

    assert env.drink_repo.list_all() == []


def test_invalid_size_rejected_before_emitting(env):
    received: list = []
    env.shop.on(ShopEvent.ORDER, received.append)

    with pytest.raises(ValueError):
        env.shop.order("huge", "cheese")

    assert received == []


# ---------------------------------------------------------------------------
# Task tracker
# ---------------------------------------------------------------------------


def test_complete_emits_completed_then_all_done(env):
    seen: list[str] = []
    env.tracker.on(TaskEvent.COMPLETED, lambda e: seen.append(f"completed:{e.remaining}"))
    env.tracker.on(TaskEvent.ALL_DONE, lambda e: seen.append(f"all_done:{e.completed}"))

    first = env.tracker.add("write tests")
    second = env.tracker.add("ship it")
    env.tracker.complete(first.id)
    env.tracker.complete(second.id)

    assert seen == ["completed:1", "completed:0", "all_done:2"]


def test_complete_sets_status_and_timestamp(env):
    task = env.tracker.add("review")
    now = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)

    env.tracker.complete(task.id, now=now)

    assert task.status == TaskStatus.DONE
    assert task.completed_at == now


def test_completing_twice_emits_once(env):
    seen: list = []
    env.tracker.on(TaskEvent.COMPLETED, seen.append)
    task = env.tracker.add("review")

    env.tracker.complete(task.id)
    env.tracker.complete(task.id)

    assert len(seen) == 1


def test_complete_unknown_task_raises(env):
    with pytest.raises(KeyError):
        env.tracker.complete("missing")


# ---------------------------------------------------------------------------
# Activity log
# ---------------------------------------------------------------------------


def test_first_order_recorded_once(env):
    env.shop.order("small", "cheese")
    env.shop.order("large", "ham")

    types = [e.type for e in env.activity_repo.list_all()]
    assert types == [
        ActivityType.ORDER_PLACED,
        ActivityType.FIRST_ORDER,
        ActivityType.ORDER_PLACED,
    ]
    first = env.activity_repo.list_by_type(ActivityType.FIRST_ORDER)
    assert first[0].payload == {"order_number": 1}


def test_task_activity_recorded(env):
    task = env.tracker.add("deploy")
    env.tracker.complete(task.id)

    types = [e.type for e in env.activity_repo.list_all()]
    assert types == [
        ActivityType.TASK_ADDED,
        ActivityType.TASK_COMPLETED,
        ActivityType.ALL_TASKS_DONE,
    ]


def test_unregister_removes_pending_first_order_hook(env):
    env.registry.unregister()

    assert env.shop.listener_count(ShopEvent.ORDER) == 1
    assert env.tracker.event_names() == []

    env.shop.order("small", "cheese")
    assert env.activity_repo.list_all() == []


def test_listener_failure_propagates_from_order(env):
    def broken(event):
        raise RuntimeError("printer jammed")

    env.shop.on(ShopEvent.ORDER, broken)

    with pytest.raises(RuntimeError, match="printer jammed"):
        env.shop.order("small", "cheese")

    # The order itself was stored before listeners ran.
    assert env.shop.display_order_number() == 1
    assert len(env.order_repo.list_all()) == 1
