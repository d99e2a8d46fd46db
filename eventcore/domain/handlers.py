"""Activity listeners, wired to the shop and tracker emitters at startup."""

from __future__ import annotations

from eventcore.domain.events import (
    AllTasksDone,
    OrderPlaced,
    ShopEvent,
    TaskAdded,
    TaskCompleted,
    TaskEvent,
)
from eventcore.domain.models import ActivityEntry, ActivityType
from eventcore.repos.memory import ActivityRepository
from eventcore.services.pizza_shop import PizzaShop
from eventcore.services.task_tracker import TaskTracker


class ActivityRegistry:
    """Records what the shop and the tracker announce in the activity log."""

    def __init__(
        self,
        shop: PizzaShop,
        tracker: TaskTracker,
        activity_repo: ActivityRepository,
    ) -> None:
        self.shop = shop
        self.tracker = tracker
        self.activity_repo = activity_repo
        self._register()

    def _register(self) -> None:
        self.shop.on(ShopEvent.ORDER, self.on_order)
        self.shop.once(ShopEvent.ORDER, self.on_first_order)
        self.tracker.on(TaskEvent.ADDED, self.on_task_added)
        self.tracker.on(TaskEvent.COMPLETED, self.on_task_completed)
        self.tracker.on(TaskEvent.ALL_DONE, self.on_all_done)

    def unregister(self) -> None:
        """Detach every listener, including a still-pending first-order hook."""
        self.shop.off(ShopEvent.ORDER, self.on_order)
        self.shop.off(ShopEvent.ORDER, self.on_first_order)
        self.tracker.off(TaskEvent.ADDED, self.on_task_added)
        self.tracker.off(TaskEvent.COMPLETED, self.on_task_completed)
        self.tracker.off(TaskEvent.ALL_DONE, self.on_all_done)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_order(self, event: OrderPlaced) -> None:
        self.activity_repo.add(
            ActivityEntry(type=ActivityType.ORDER_PLACED, payload=event.model_dump())
        )

    def on_first_order(self, event: OrderPlaced) -> None:
        self.activity_repo.add(
            ActivityEntry(
                type=ActivityType.FIRST_ORDER,
                payload={"order_number": event.order_number},
            )
        )

    def on_task_added(self, event: TaskAdded) -> None:
        self.activity_repo.add(
            ActivityEntry(type=ActivityType.TASK_ADDED, payload=event.model_dump())
        )

    def on_task_completed(self, event: TaskCompleted) -> None:
        self.activity_repo.add(
            ActivityEntry(type=ActivityType.TASK_COMPLETED, payload=event.model_dump())
        )

    def on_all_done(self, event: AllTasksDone) -> None:
        self.activity_repo.add(
            ActivityEntry(type=ActivityType.ALL_TASKS_DONE, payload=event.model_dump())
        )
