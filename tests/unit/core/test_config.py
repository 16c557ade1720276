"""Тесты для системы конфигурации."""

import pytest

from http_adapter.core.config import AdapterConfig, ClientDefaults
from http_adapter.core.logging.config import LoggingConfig

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ClientDefaults
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def test_client_defaults():
    """Тест дефолтных значений."""
    defaults = ClientDefaults()
    assert defaults.connect == 60
    assert defaults.send == 120
    assert defaults.receive == 60

@pytest.mark.parametrize("field, message", [
    ("connect", "connect timeout must be positive"),
    ("send", "send timeout must be positive"),
    ("receive", "receive timeout must be positive"),
])
def test_client_defaults_validation(field, message):
    """Тест валидации - неположительные таймауты."""
    with pytest.raises(ValueError, match=message):
        ClientDefaults(**{field: 0})

def test_client_defaults_immutable():
    """Тест immutability."""
    defaults = ClientDefaults()
    with pytest.raises(Exception):  # frozen dataclass
        defaults.connect = 10

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# AdapterConfig
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def test_adapter_config_defaults():
    """Тест дефолтных значений."""
    config = AdapterConfig()
    assert config.defaults == ClientDefaults()
    assert config.keep_alive_timeout == 15
    assert config.ssl_timeout is None
    assert config.transparent_gzip_decompression is True
    assert config.pool_connections == 10
    assert config.pool_maxsize == 10
    assert config.logging is None

def test_adapter_config_create():
    """Тест create() с частичными дефолтами."""
    config = AdapterConfig.create(connect_timeout=5, pool_maxsize=20, ssl_timeout=25)
    assert config.defaults.connect == 5
    assert config.defaults.send == 120
    assert config.defaults.receive == 60
    assert config.pool_maxsize == 20
    assert config.pool_connections == 10
    assert config.ssl_timeout == 25

def test_adapter_config_create_with_logging():
    """Тест create() с логированием."""
    logging_config = LoggingConfig.create(level="DEBUG")
    config = AdapterConfig.create(logging=logging_config)
    assert config.logging is logging_config

@pytest.mark.parametrize("kwargs", [
    {"keep_alive_timeout": 0},
    {"ssl_timeout": -1},
    {"pool_connections": 0},
    {"pool_maxsize": 0},
])
def test_adapter_config_validation(kwargs):
    """Тест валидации."""
    with pytest.raises(ValueError):
        AdapterConfig(**kwargs)

def test_adapter_config_with_defaults():
    """Тест with_defaults() - новый объект, остальное без изменений."""
    config = AdapterConfig(keep_alive_timeout=20)
    new_config = config.with_defaults(ClientDefaults(connect=5))

    assert new_config is not config
    assert new_config.defaults.connect == 5
    assert new_config.keep_alive_timeout == 20
    assert config.defaults.connect == 60

def test_adapter_config_immutable():
    """Тест immutability."""
    config = AdapterConfig()
    with pytest.raises(Exception):
        config.keep_alive_timeout = 1
