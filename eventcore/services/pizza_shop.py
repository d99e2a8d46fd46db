"""Pizza shop that announces orders, and a drink machine listening to it."""

from __future__ import annotations

import logging

from eventcore.domain.emitter import EventEmitter
from eventcore.domain.events import OrderPlaced, ShopEvent
from eventcore.domain.models import Drink, Order, PizzaSize
from eventcore.repos.memory import DrinkRepository, OrderRepository

logger = logging.getLogger(__name__)


class PizzaShop(EventEmitter):
    """Takes orders and emits ``"order"`` with an ``OrderPlaced`` payload."""

    def __init__(self, order_repo: OrderRepository, **kwargs) -> None:
        super().__init__(**kwargs)
        self.order_repo = order_repo
        self._order_number = 0

    def order(self, size: PizzaSize | str, topping: str) -> Order:
        order = Order(order_number=self._order_number + 1, size=size, topping=topping)
        self._order_number = order.order_number
        self.order_repo.add(order)
        logger.info(
            "order placed",
            extra={"order_number": order.order_number, "size": str(order.size)},
        )
        self.emit(
            ShopEvent.ORDER,
            OrderPlaced(
                order_number=order.order_number,
                size=order.size,
                topping=order.topping,
            ),
        )
        return order

    def display_order_number(self) -> int:
        return self._order_number


class DrinkMachine:
    """Serves a complimentary drink with every large pizza."""

    def __init__(self, drink_repo: DrinkRepository, drink_name: str = "soda") -> None:
        self.drink_repo = drink_repo
        self.drink_name = drink_name

    def serve_drink(self, order: OrderPlaced) -> Drink | None:
        if order.size != PizzaSize.LARGE:
            return None
        drink = Drink(order_number=order.order_number, name=self.drink_name)
        self.drink_repo.add(drink)
        return drink

    def attach(self, shop: PizzaShop) -> None:
        shop.on(ShopEvent.ORDER, self.serve_drink)

    def detach(self, shop: PizzaShop) -> None:
        shop.off(ShopEvent.ORDER, self.serve_drink)
