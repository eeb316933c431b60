# ordersapi

`ordersapi` is a small HTTP service for managing orders. Orders are stored in Redis as JSON.
Each order is stored under the key `order:<id>`, and that key is also added to the Redis set `orders`.

## Installing

```
pip install .
```

To run the tests, install the `test` extra and run pytest:

```
pip install .[test]
pytest
```

## Running

```
ordersapi
```

The service reads its settings from the environment:

| Variable        | Default          | Notes                                               |
|-----------------|------------------|-----------------------------------------------------|
| `REDIS_ADDRESS` | `localhost:6379` | `host:port`; the port is 6379 if none is given      |
| `SERVER_PORT`   | `3000`           | the default is used if the value is not a number from 0 to 65535 |

At startup the service pings Redis. If the ping fails, it prints
`Error starting application: ...` and exits. Otherwise it serves HTTP on all
interfaces through Werkzeug's server, until you press Ctrl+C. It then stops the
server and closes the Redis connection.

## Endpoints

| Method   | Path            | Response                                                   |
|----------|-----------------|------------------------------------------------------------|
| `GET`    | `/`             | `200` with an empty body                                   |
| `POST`   | `/orders`       | `201` with the new order                                   |
| `GET`    | `/orders`       | a page of orders; `?cursor=N` continues a scan             |
| `GET`    | `/orders/{id}`  | the order, or `404` if it does not exist                   |
| `PUT`    | `/orders/{id}`  | the updated order, for a status change                     |
| `DELETE` | `/orders/{id}`  | `200`, or `404` if it does not exist                       |

Order ids in paths and cursors must be unsigned 64-bit decimal integers. Any other
value gets `400`. Request bodies must be JSON objects, or `400` is returned. If
storage fails, the response is `500`.

### Creating an order

Example request body:

```json
{
  "customer_id": "00000000-0000-0000-0000-000000000001",
  "line_items": [
    {"item_id": "00000000-0000-0000-0000-0000000000aa",
     "order_id": "00000000-0000-0000-0000-000000000000",
     "quantity": 2, "price": 150}
  ]
}
```

The new order gets a random 64-bit `order_id`, the `order_status` `"pending"`,
and a `created_at` time in UTC. The response holds the whole order:

```json
{"order_id": 123, "customer_id": "...", "line_items": [...],
 "order_status": "pending", "created_at": "2024-01-01T12:00:00.5Z",
 "updated_at": null, "shipped_at": null, "completed_at": null}
```

### Listing orders

The service scans the `orders` set and asks Redis for about 50 keys per request.
The response is `{"items": [...], "next": <cursor>}`. `next` is left out when the
scan has finished. To get the next page, pass the cursor back as `?cursor=<next>`.

### Updating status

Send `{"status": "shipped"}` or `{"status": "completed"}`. Any other value gets `400`.

- `shipped` sets `shipped_at`, but only while `order_status` is `"pending"`.
  `order_status` itself is left unchanged.
- `completed` sets `completed_at`, but only once `shipped_at` is set and only if
  `completed_at` is not already set.

## Using it as a library

```python
import threading

import redis
from ordersapi.app import App, create_router
from ordersapi.config import load_config
from ordersapi.model import Order
from ordersapi.repository import FindAllPage, OrderNotFoundError, RedisRepo

repo = RedisRepo(redis.Redis(host="localhost", port=6379))
flask_app = create_router(repo)          # a Flask application

page = repo.find_all(FindAllPage(size=50, offset=0))
for order in page.orders:
    print(order.order_id, order.order_status)

try:
    repo.find_by_id(42)
except OrderNotFoundError:
    pass

# Run the server until the event is set.
App(load_config()).start(threading.Event())
```

- `ordersapi.model`: `Order` and `LineItem` dataclasses. They have `to_dict` and
  `from_dict`, and `Order` also has `to_json` and `from_json`.
- `ordersapi.repository`: `RedisRepo` with `insert`, `find_by_id`, `update_by_id`,
  `delete_by_id` and `find_all`. Also `FindAllPage`, `FindResult`, `order_key`,
  and `OrderNotFoundError`, which is raised for missing orders.
- `ordersapi.config`: `Config` and `load_config(environ=None)`.
- `ordersapi.handler`: `OrderHandler`, the Flask view functions for `/orders`.
- `ordersapi.app`: `create_router`, `App` and the `main` entry point.

## Limitations

- There is no authentication.
- Orders are stored only in Redis, so a running Redis server is required.
- The HTTP server is Werkzeug's built-in server, not a production WSGI server.