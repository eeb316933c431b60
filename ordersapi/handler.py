"""HTTP handlers for the order resource."""

from __future__ import annotations

import json
import random
import re
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

from flask import Response, request

from .model import Order
from .repository import FindAllPage, OrderNotFoundError

PAGE_SIZE = 50
STATUS_PENDING = "pending"
STATUS_SHIPPED = "shipped"
STATUS_COMPLETED = "completed"

_UINT64_MAX = 2**64 - 1
_DIGITS = re.compile(r"[0-9]+")


def _parse_uint64(text: str) -> int:
    if not _DIGITS.fullmatch(text):
        raise ValueError(f"invalid unsigned integer: {text!r}")
    value = int(text)
    if value > _UINT64_MAX:
        raise ValueError(f"value out of range: {text!r}")
    return value


def _empty(status: HTTPStatus) -> Response:
    return Response(status=status)


def _json(body: str, status: HTTPStatus = HTTPStatus.OK) -> Response:
    return Response(body, status=status, mimetype="application/json")


def _decode_object() -> dict[str, Any]:
    """Decode the request body as a JSON object; null counts as an empty one."""
    try:
        data = json.loads(request.get_data())
    except ValueError as exc:
        raise ValueError("invalid JSON body") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("request body must be a JSON object")
    return data


class OrderHandler:
    """Create, list, fetch, update and delete orders over HTTP."""

    def __init__(self, repo: Any) -> None:
        self.repo = repo

    def create(self) -> Response:
        try:
            body = _decode_object()
            fields = Order.from_dict(
                {
                    "customer_id": body.get("customer_id"),
                    "line_items": body.get("line_items"),
                }
            )
        except ValueError:
            return _empty(HTTPStatus.BAD_REQUEST)

        order = Order(
            order_id=random.getrandbits(64),
            customer_id=fields.customer_id,
            line_items=fields.line_items,
            order_status=STATUS_PENDING,
            created_at=datetime.now(timezone.utc),
        )

        try:
            self.repo.insert(order)
        except Exception as exc:
            print(exc)
            return _empty(HTTPStatus.INTERNAL_SERVER_ERROR)

        return _json(order.to_json(), HTTPStatus.CREATED)

    def list(self) -> Response:
        cursor_text = request.args.get("cursor", "") or "0"
        try:
            cursor = _parse_uint64(cursor_text)
        except ValueError:
            return _empty(HTTPStatus.BAD_REQUEST)

        try:
            result = self.repo.find_all(FindAllPage(size=PAGE_SIZE, offset=cursor))
        except Exception as exc:
            print("failed to find all", exc)
            return _empty(HTTPStatus.INTERNAL_SERVER_ERROR)

        payload: dict[str, Any] = {"items": [o.to_dict() for o in result.orders]}
        if result.cursor:
            payload["next"] = result.cursor
        return _json(json.dumps(payload, separators=(",", ":")))

    def get_by_id(self, order_id: str) -> Response:
        try:
            parsed_id = _parse_uint64(order_id)
        except ValueError:
            return _empty(HTTPStatus.BAD_REQUEST)

        try:
            order = self.repo.find_by_id(parsed_id)
        except OrderNotFoundError:
            return _empty(HTTPStatus.NOT_FOUND)
        except Exception:
            return _empty(HTTPStatus.INTERNAL_SERVER_ERROR)

        return _json(order.to_json())

    def update_by_id(self, order_id: str) -> Response:
        try:
            body = _decode_object()
        except ValueError:
            return _empty(HTTPStatus.BAD_REQUEST)
        status = body.get("status")
        if status is None:
            status = ""
        if not isinstance(status, str):
            return _empty(HTTPStatus.BAD_REQUEST)

        try:
            parsed_id = _parse_uint64(order_id)
        except ValueError as exc:
            print("failed to parse order id:", exc)
            return _empty(HTTPStatus.BAD_REQUEST)

        try:
            order = self.repo.find_by_id(parsed_id)
        except OrderNotFoundError:
            return _empty(HTTPStatus.NOT_FOUND)
        except Exception:
            # A lookup failure leaves nothing to transition; no status change applies.
            order = Order()

        now = datetime.now(timezone.utc)
        if status == STATUS_SHIPPED:
            if order.order_status != STATUS_PENDING:
                return _empty(HTTPStatus.BAD_REQUEST)
            order.shipped_at = now
        elif status == STATUS_COMPLETED:
            if order.completed_at is not None or order.shipped_at is None:
                return _empty(HTTPStatus.BAD_REQUEST)
            order.completed_at = now
        else:
            return _empty(HTTPStatus.BAD_REQUEST)

        try:
            self.repo.update_by_id(order)
        except Exception as exc:
            print("failed to update order", exc)
            return _empty(HTTPStatus.INTERNAL_SERVER_ERROR)

        return _json(order.to_json() + "\n")

    def delete_by_id(self, order_id: str) -> Response:
        try:
            parsed_id = _parse_uint64(order_id)
        except ValueError as exc:
            print("failed to parse order id:", exc)
            return _empty(HTTPStatus.BAD_REQUEST)

        try:
            self.repo.delete_by_id(parsed_id)
        except OrderNotFoundError:
            return _empty(HTTPStatus.NOT_FOUND)
        except Exception as exc:
            print("failed to find id", exc)
            return _empty(HTTPStatus.INTERNAL_SERVER_ERROR)

        return _empty(HTTPStatus.OK)