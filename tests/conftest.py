import os
import sys
from pathlib import Path

import pytest

# Ensure project root on sys.path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from boilerplate.config import ENV_PREFIX, get_config

FULL_ENV = {
    "BOILERPLATE_SERVER_HOST": "0.0.0.0",
    "BOILERPLATE_SERVER_PORT": "8080",
    "BOILERPLATE_SERVER_READ_TIMEOUT": "5s",
    "BOILERPLATE_SERVER_WRITE_TIMEOUT": "10s",
    "BOILERPLATE_SERVER_IDLE_TIMEOUT": "1m",
    "BOILERPLATE_SERVER_SHUTDOWN_TIMEOUT": "15s",
    "BOILERPLATE_LOGGING_LEVEL": "info",
    "BOILERPLATE_LOGGING_OUTPUTS": "stderr,stdout",
    "BOILERPLATE_DB_HOST": "db.internal",
    "BOILERPLATE_DB_PORT": "5432",
    "BOILERPLATE_DB_USER": "app",
    "BOILERPLATE_DB_PASSWORD": "s3cret",
    "BOILERPLATE_DB_NAME": "appdb",
    "BOILERPLATE_DB_SSL_MODE": "disable",
    "BOILERPLATE_DB_MAX_OPEN_CONNS": "25",
    "BOILERPLATE_DB_MAX_IDLE_CONNS": "5",
    "BOILERPLATE_DB_CONN_MAX_LIFETIME": "300",
    "BOILERPLATE_DB_CONN_MAX_IDLE_TIME": "60",
    "BOILERPLATE_SERVICE_NAME": "orders",
    "BOILERPLATE_SERVICE_VERSION": "1.2.3",
    "BOILERPLATE_SERVICE_ENVIRONMENT": "prod",
    "BOILERPLATE_HEALTH_CHECKS_ENABLED": "true",
    "BOILERPLATE_HEALTH_CHECKS_CHECKS": "database,cache",
    "BOILERPLATE_HEALTH_CHECKS_TIMEOUT": "1s",
    "BOILERPLATE_HEALTH_CHECKS_INTERVAL": "30s",
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Drop any prefixed variables leaking in from the caller's environment."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture()
def full_env(monkeypatch):
    """Populate every supported variable and return the mapping."""
    for key, value in FULL_ENV.items():
        monkeypatch.setenv(key, value)
    return dict(FULL_ENV)
