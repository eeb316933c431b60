import pytest

from ordersapi.config import Config, load_config


def test_defaults():
    config = load_config({})
    assert config == Config()
    assert config.redis_address == "localhost:6379"
    assert config.server_port == 3000


def test_redis_address_from_environment():
    config = load_config({"REDIS_ADDRESS": "redis.internal:6380"})
    assert config.redis_address == "redis.internal:6380"
    assert config.server_port == Config().server_port


def test_valid_port_from_environment():
    assert load_config({"SERVER_PORT": "8080"}).server_port == 8080


def test_max_port_accepted():
    assert load_config({"SERVER_PORT": "65535"}).server_port == 65535


@pytest.mark.parametrize("value", ["", "abc", "-1", "+80", " 80", "65536", "8.0"])
def test_invalid_port_keeps_default(value):
    assert load_config({"SERVER_PORT": value}).server_port == Config().server_port


def test_reads_os_environ(monkeypatch):
    monkeypatch.setenv("REDIS_ADDRESS", "cache:7000")
    monkeypatch.setenv("SERVER_PORT", "9001")
    config = load_config()
    assert config == Config(redis_address="cache:7000", server_port=9001)