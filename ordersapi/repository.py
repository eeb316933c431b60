"""Redis-backed storage for orders."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .model import Order

ORDERS_SET = "orders"


class OrderNotFoundError(LookupError):
    """Raised when an order does not exist."""

    def __init__(self, order_id: int | None = None) -> None:
        message = "order does not exist"
        if order_id is not None:
            message = f"{message}: {order_id}"
        super().__init__(message)
        self.order_id = order_id


def order_key(order_id: int) -> str:
    """Return the Redis key under which an order is stored."""
    return f"order:{order_id}"


@dataclass(frozen=True)
class FindAllPage:
    """A page request: how many keys to scan and the cursor to start from."""

    size: int
    offset: int = 0


@dataclass
class FindResult:
    """A page of orders and the cursor to continue from (0 when done)."""

    orders: list[Order] = field(default_factory=list)
    cursor: int = 0


@dataclass
class RedisRepo:
    """Stores orders as JSON strings and keeps their keys in a set."""

    client: Any

    def insert(self, order: Order) -> None:
        key = order_key(order.order_id)
        with self.client.pipeline(transaction=True) as pipe:
            pipe.set(key, order.to_json(), nx=True)
            pipe.sadd(ORDERS_SET, key)
            pipe.execute()

    def find_by_id(self, order_id: int) -> Order:
        value = self.client.get(order_key(order_id))
        if value is None:
            raise OrderNotFoundError(order_id)
        return Order.from_json(value)

    def delete_by_id(self, order_id: int) -> None:
        key = order_key(order_id)
        with self.client.pipeline(transaction=True) as pipe:
            pipe.delete(key)
            pipe.srem(ORDERS_SET, key)
            deleted, _ = pipe.execute()
        if not deleted:
            raise OrderNotFoundError(order_id)

    def update_by_id(self, order: Order) -> None:
        key = order_key(order.order_id)
        if not self.client.set(key, order.to_json(), xx=True):
            raise OrderNotFoundError(order.order_id)

    def find_all(self, page: FindAllPage) -> FindResult:
        cursor, keys = self.client.sscan(
            ORDERS_SET, cursor=page.offset, match="*", count=page.size
        )
        if not keys:
            return FindResult(orders=[])

        values = self.client.mget(keys)
        orders = []
        for key, value in zip(keys, values):
            if value is None:
                raise ValueError(f"order listed in set but missing: {key!r}")
            orders.append(Order.from_json(value))
        return FindResult(orders=orders, cursor=int(cursor))