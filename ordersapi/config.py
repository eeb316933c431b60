"""Server configuration read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class Config:
    """Where Redis lives and which port the HTTP server listens on."""

    redis_address: str = "localhost:6379"
    server_port: int = 3000


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Build a Config from REDIS_ADDRESS and SERVER_PORT, falling back to defaults."""
    env = os.environ if environ is None else environ
    config = Config(redis_address=env.get("REDIS_ADDRESS", Config.redis_address))
    raw_port = env.get("SERVER_PORT", "")
    if raw_port.isascii() and raw_port.isdigit() and int(raw_port) <= 0xFFFF:
        config = Config(config.redis_address, int(raw_port))
    return config