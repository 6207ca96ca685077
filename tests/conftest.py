import json
import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from litestar.testing import TestClient


@pytest.fixture(scope="session", autouse=True)
def baseline_settings_env():
    """Provide baseline env vars so tests are not affected by local .env.

    Pydantic-settings precedence: init args > env vars > .env > defaults.
    Setting these ensures stable defaults regardless of any .env present.
    """
    os.environ.update({
        # App
        "APP_NAME": "JUnit Dashboard API",
        "APP_VERSION": "0.1.0",
        "APP_DEBUG": "false",
        "APP_ENVIRONMENT": "development",
        # API
        "API_HOST": "0.0.0.0",
        "API_PORT": "5000",
        "API_WORKERS": "1",
        "API_RELOAD": "false",
        "API_LOG_LEVEL": "info",
        # Logs
        "LOG_DIR": "./logs",
        "LOG_WRITE_APP_LOGS": "false",
        "LOG_CREATE_DIR": "true",
        # Rate limiting
        "RATELIMIT_ENABLED": "true",
        "RATELIMIT_LOGS_PER_MINUTE": "1000",
        "RATELIMIT_API_PER_MINUTE": "1000",
    })


@pytest.fixture(autouse=True)
def refresh_settings_cache():
    """Clear settings cache so env changes take effect per test.

    Ensures tests using monkeypatch.setenv() get a fresh Settings instance.
    """
    from junitdash.config.settings import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    """An empty log directory."""
    directory = tmp_path / "logs"
    directory.mkdir()
    return directory


@pytest.fixture
def write_log(log_dir: Path) -> Callable[..., Path]:
    """Write raw lines or entry dicts to ``<level>.log`` in the log directory."""
    def _write(level: str, *lines: str | dict) -> Path:
        path = log_dir / f"{level}.log"
        with path.open("a", encoding="utf-8") as f:
            for line in lines:
                f.write((json.dumps(line) if isinstance(line, dict) else line) + "\n")
        return path
    return _write


@pytest.fixture
def client(log_dir: Path, monkeypatch) -> Iterator[TestClient]:
    """A test client for an app reading from ``log_dir``."""
    monkeypatch.setenv("LOG_DIR", str(log_dir))

    from junitdash.server.core import create_app

    with TestClient(app=create_app()) as test_client:
        yield test_client
