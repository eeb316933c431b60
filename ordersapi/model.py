"""Order and line-item records with their JSON representation."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

NIL_UUID = UUID(int=0)

_TIME_RE = re.compile(r"(\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d)(?:\.(\d+))?(Z|[+-]\d\d:\d\d)")
_TIME_FIELDS = ("created_at", "updated_at", "shipped_at", "completed_at")


def _format_time(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.isoformat(timespec="microseconds")
    stamp, zone = text[:26], text[26:]
    stamp = stamp.rstrip("0").rstrip(".")
    return stamp + ("Z" if zone == "+00:00" else zone)


def _parse_time(value: Any, name: str) -> datetime | None:
    if value is None:
        return None
    match = _TIME_RE.fullmatch(value) if isinstance(value, str) else None
    try:
        if match is None:
            raise ValueError
        base, fraction, zone = match.groups()
        fraction = (fraction or "")[:6].ljust(6, "0")
        zone = "+00:00" if zone == "Z" else zone
        return datetime.fromisoformat(f"{base}.{fraction}{zone}")
    except ValueError as exc:
        raise ValueError(f"{name}: invalid timestamp {value!r}") from exc


def _parse_uuid(value: Any, name: str) -> UUID:
    if value is None:
        return NIL_UUID
    try:
        return UUID(value)
    except (TypeError, ValueError, AttributeError) as exc:
        raise ValueError(f"{name}: invalid UUID {value!r}") from exc


def _parse_uint(value: Any, name: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{name}: expected a non-negative integer, got {value!r}")
    return value


def _mapping(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise ValueError(f"{what}: expected a JSON object, got {data!r}")
    return data


@dataclass
class LineItem:
    """One product line of an order."""

    item_id: UUID = NIL_UUID
    order_id: UUID = NIL_UUID
    quantity: int = 0
    price: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "item_id": str(self.item_id),
            "order_id": str(self.order_id),
            "quantity": self.quantity,
            "price": self.price,
        }

    @classmethod
    def from_dict(cls, data: Any) -> LineItem:
        data = _mapping(data, "line item")
        return cls(
            item_id=_parse_uuid(data.get("item_id"), "item_id"),
            order_id=_parse_uuid(data.get("order_id"), "order_id"),
            quantity=_parse_uint(data.get("quantity"), "quantity"),
            price=_parse_uint(data.get("price"), "price"),
        )


@dataclass
class Order:
    """A customer order and its lifecycle timestamps."""

    order_id: int = 0
    customer_id: UUID = NIL_UUID
    line_items: list[LineItem] = field(default_factory=list)
    order_status: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    shipped_at: datetime | None = None
    completed_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        result = {
            "order_id": self.order_id,
            "customer_id": str(self.customer_id),
            "line_items": [item.to_dict() for item in self.line_items],
            "order_status": self.order_status,
        }
        for name in _TIME_FIELDS:
            result[name] = _format_time(getattr(self, name))
        return result

    @classmethod
    def from_dict(cls, data: Any) -> Order:
        data = _mapping(data, "order")
        items = data.get("line_items") or []
        if not isinstance(items, list):
            raise ValueError(f"line_items: expected a list, got {items!r}")
        status = data.get("order_status") or ""
        if not isinstance(status, str):
            raise ValueError(f"order_status: expected a string, got {status!r}")
        return cls(
            order_id=_parse_uint(data.get("order_id"), "order_id"),
            customer_id=_parse_uuid(data.get("customer_id"), "customer_id"),
            line_items=[LineItem.from_dict(item) for item in items],
            order_status=status,
            **{name: _parse_time(data.get(name), name) for name in _TIME_FIELDS},
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json(cls, text: str | bytes) -> Order:
        return cls.from_dict(json.loads(text))