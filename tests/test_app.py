import json
import socket
import threading
import uuid
from http import HTTPStatus

import pytest

from ordersapi.app import App, create_router, main
from ordersapi.config import Config
from ordersapi.repository import RedisRepo


class FakePipeline:
    def __init__(self, client):
        self.client = client
        self.calls = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def set(self, *args, **kwargs):
        self.calls.append(lambda: self.client.set(*args, **kwargs))

    def sadd(self, *args):
        self.calls.append(lambda: self.client.sadd(*args))

    def delete(self, *args):
        self.calls.append(lambda: self.client.delete(*args))

    def srem(self, *args):
        self.calls.append(lambda: self.client.srem(*args))

    def execute(self):
        return [call() for call in self.calls]


class FakeRedis:
    def __init__(self, ping_error=None):
        self.strings = {}
        self.sets = {}
        self.ping_error = ping_error
        self.closed = False

    def ping(self):
        if self.ping_error is not None:
            raise self.ping_error
        return True

    def close(self):
        self.closed = True

    def pipeline(self, transaction=True):
        return FakePipeline(self)

    def get(self, key):
        return self.strings.get(key)

    def set(self, key, value, nx=False, xx=False):
        if nx and key in self.strings:
            return None
        if xx and key not in self.strings:
            return None
        self.strings[key] = value
        return True

    def sadd(self, name, *values):
        self.sets.setdefault(name, set()).update(values)
        return len(values)

    def srem(self, name, *values):
        self.sets.setdefault(name, set()).difference_update(values)
        return len(values)

    def delete(self, *keys):
        return sum(1 for key in keys if self.strings.pop(key, None) is not None)

    def sscan(self, name, cursor=0, match=None, count=None):
        return 0, sorted(self.sets.get(name, set()))

    def mget(self, keys):
        return [self.strings.get(key) for key in keys]


@pytest.fixture
def client():
    return create_router(RedisRepo(FakeRedis())).test_client()


def test_root_returns_ok_with_empty_body(client):
    response = client.get("/")
    assert response.status_code == HTTPStatus.OK
    assert response.get_data() == b""


def test_order_routes_full_lifecycle(client):
    customer = str(uuid.uuid4())
    created = client.post("/orders/", data=json.dumps({"customer_id": customer}))
    assert created.status_code == HTTPStatus.CREATED
    order = created.get_json()
    path = f"/orders/{order['order_id']}"

    assert client.get(path).get_json() == order
    assert client.get("/orders").get_json()["items"] == [order]
    assert client.get("/orders/").get_json()["items"] == [order]

    shipped = client.put(path, data=json.dumps({"status": "shipped"}))
    assert shipped.status_code == HTTPStatus.OK
    assert shipped.get_json()["customer_id"] == customer

    assert client.delete(path).status_code == HTTPStatus.OK
    assert client.get(path).status_code == HTTPStatus.NOT_FOUND


def test_post_without_trailing_slash(client):
    response = client.post("/orders", data=json.dumps({"line_items": []}))
    assert response.status_code == HTTPStatus.CREATED
    assert response.get_json()["order_status"] == "pending"


def test_invalid_id_routes_to_bad_request(client):
    assert client.get("/orders/abc").status_code == HTTPStatus.BAD_REQUEST


def test_app_uses_injected_client():
    fake = FakeRedis()
    app = App(Config(), client=fake)
    app.router.test_client().post("/orders", data=json.dumps({"line_items": []}))
    assert len(fake.sets["orders"]) == 1


def test_start_fails_when_redis_unreachable():
    fake = FakeRedis(ping_error=ConnectionError("refused"))
    app = App(Config(server_port=0), client=fake)
    with pytest.raises(RuntimeError, match="failed to ping redis"):
        app.start(threading.Event())
    assert fake.closed is False


def test_start_returns_after_stop_and_closes_client(capsys):
    fake = FakeRedis()
    app = App(Config(server_port=0), client=fake)
    stop = threading.Event()
    stop.set()
    assert app.start(stop) is None
    assert fake.closed is True
    assert "Starting server on port" in capsys.readouterr().out


def test_start_fails_when_port_taken():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
        busy.bind(("0.0.0.0", 0))
        busy.listen()
        port = busy.getsockname()[1]
        fake = FakeRedis()
        app = App(Config(server_port=port), client=fake)
        with pytest.raises(RuntimeError, match="failed to start server"):
            app.start(threading.Event())
    assert fake.closed is True


def test_main_reports_unreachable_redis(monkeypatch, capsys):
    monkeypatch.setenv("REDIS_ADDRESS", "127.0.0.1:1")
    monkeypatch.setenv("SERVER_PORT", "0")
    main([])
    out = capsys.readouterr().out
    assert "Error starting application: failed to ping redis" in out