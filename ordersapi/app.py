"""The HTTP application: routing, server lifecycle and the command entry point."""

from __future__ import annotations

import signal
import threading
from typing import Any

import redis
from flask import Flask, Response
from werkzeug.serving import make_server

from .config import Config, load_config
from .handler import OrderHandler
from .repository import RedisRepo

SHUTDOWN_TIMEOUT = 10.0


def create_router(repo: Any) -> Flask:
    """Build the Flask application serving the root and the /orders routes."""
    router = Flask("ordersapi")
    handler = OrderHandler(repo)
    router.add_url_rule("/", "root", lambda: Response(status=200), methods=["GET"])
    router.add_url_rule("/orders/", "create_order", handler.create,
                        methods=["POST"], strict_slashes=False)
    router.add_url_rule("/orders/", "list_orders", handler.list,
                        methods=["GET"], strict_slashes=False)
    router.add_url_rule("/orders/<order_id>", "get_order", handler.get_by_id, methods=["GET"])
    router.add_url_rule("/orders/<order_id>", "update_order", handler.update_by_id, methods=["PUT"])
    router.add_url_rule("/orders/<order_id>", "delete_order", handler.delete_by_id,
                        methods=["DELETE"])
    return router


def _redis_client(address: str) -> redis.Redis:
    host, sep, port = address.rpartition(":")
    if not sep:
        host, port = address, "6379"
    return redis.Redis(host=host or "localhost", port=int(port))


class App:
    """Holds the Redis client and the router, and runs the HTTP server."""

    def __init__(self, config: Config, client: Any = None) -> None:
        self.config = config
        self.client = client if client is not None else _redis_client(config.redis_address)
        self.router = create_router(RedisRepo(self.client))

    def start(self, stop_event: threading.Event) -> None:
        """Serve until stop_event is set; raise RuntimeError if startup fails."""
        try:
            self.client.ping()
        except Exception as exc:
            raise RuntimeError(f"failed to ping redis: {exc}") from exc
        try:
            self._serve(stop_event)
        finally:
            try:
                self.client.close()
            except Exception as exc:
                print("failed to close redis connection: ", exc)

    def _serve(self, stop_event: threading.Event) -> None:
        try:
            server = make_server("0.0.0.0", self.config.server_port, self.router, threaded=True)
        except OSError as exc:
            raise RuntimeError(f"failed to start server: {exc}") from exc
        print(f"Starting server on port {server.server_port}")

        failures: list[BaseException] = []

        def run() -> None:
            try:
                server.serve_forever()
            except BaseException as exc:
                failures.append(exc)

        thread = threading.Thread(target=run, daemon=True)
        thread.start()
        try:
            while thread.is_alive() and not stop_event.wait(0.1):
                pass
            if failures:
                raise RuntimeError(f"failed to start server: {failures[0]}") from failures[0]
            server.shutdown()
            thread.join(SHUTDOWN_TIMEOUT)
        finally:
            server.server_close()


def main(argv: list[str] | None = None) -> None:
    """Run the orders API until interrupted."""
    app = App(load_config())
    stop_event = threading.Event()
    previous = signal.signal(signal.SIGINT, lambda signum, frame: stop_event.set())
    try:
        app.start(stop_event)
    except Exception as exc:
        print(f"Error starting application: {exc}")
    finally:
        signal.signal(signal.SIGINT, previous)