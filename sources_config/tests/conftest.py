"""
sources_config test configuration.

Every test starts from a clean environment: the variables the resolver
reads are removed and the cached settings, provider and endpoints are
dropped, so nothing leaks from the developer's shell or between tests.
"""
from __future__ import annotations

import json

import pytest
import structlog
from structlog.testing import LogCapture

from sources_config.core.settings import EnvSettings

CONSUMED_ENV_VARS = (
    "ACG_CONFIG",
    "SOURCES_API_HOST",
    "SOURCES_API_PORT",
    "QUEUE_HOST",
    "QUEUE_PORT",
    "PORT",
)


# ── Fixtures ───────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove consumed env vars and reset all cached singletons."""
    import sources_config.core.settings as _settings
    import sources_config.platform.clowder as _clowder
    import sources_config.resolver as _resolver

    for name in CONSUMED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    _settings._reset_settings()
    _clowder._reset_provider()
    _resolver._reset_endpoints()

    yield

    _settings._reset_settings()
    _clowder._reset_provider()
    _resolver._reset_endpoints()


@pytest.fixture
def make_settings():
    """Build an EnvSettings from keyword env values, ignoring any .env file."""
    def _make(**env: str) -> EnvSettings:
        return EnvSettings(_env_file=None, **env)
    return _make


@pytest.fixture
def env_mode_settings(make_settings):
    """A complete environment-mode configuration."""
    return make_settings(
        SOURCES_API_HOST="api",
        SOURCES_API_PORT="8080",
        QUEUE_HOST="mq",
        QUEUE_PORT="9092",
    )


@pytest.fixture
def clowder_document():
    """A Clowder app config document with a sources-api dependency and one broker."""
    return {
        "webPort": 8000,
        "metricsPort": 9000,
        "endpoints": [
            {"app": "rbac", "name": "service", "hostname": "rbac-svc", "port": 8080},
            {"app": "sources-api", "name": "svc", "hostname": "svc", "port": 443},
        ],
        "kafka": {
            "brokers": [
                {"hostname": "kafka1", "port": 9092},
                {"hostname": "kafka2", "port": 9093},
            ],
            "topics": [{"requestedName": "platform.sources.event-stream", "name": "sources-events"}],
        },
    }


@pytest.fixture
def clowder_file(tmp_path, clowder_document):
    """Write the Clowder document to disk and return its path."""
    path = tmp_path / "cdappconfig.json"
    path.write_text(json.dumps(clowder_document), encoding="utf-8")
    return path


@pytest.fixture
def log_events():
    """Capture structlog events, context vars included, for one test."""
    from sources_config.core.logging import get_logger

    get_logger()
    saved = structlog.get_config()
    capture = LogCapture()
    structlog.configure(processors=[structlog.contextvars.merge_contextvars, capture])
    yield capture.entries
    structlog.configure(**saved)
