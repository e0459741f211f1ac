"""
sources_config.resolver
─────────────────────────
Resolves the Sources API and Kafka endpoints for this service.

Two mutually exclusive sources of truth:
  - Clowder: the platform's app config document (dependencies + brokers)
  - Environment: SOURCES_API_HOST/PORT and QUEUE_HOST/PORT

PORT is read from the environment in both cases and falls back to 8000.

Usage:
    endpoints = load_endpoints()      # at startup; raises ConfigError
    ...
    get_endpoints().kafka_url         # anywhere afterwards
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from sources_config.core.errors import ConfigError, DependencyNotFound, MissingField
from sources_config.core.logging import get_logger, startup_context
from sources_config.core.settings import EnvSettings, get_settings
from sources_config.platform.clowder import PlatformConfigProvider, get_provider

DEFAULT_PORT = "8000"
# Name of the Sources back end in the platform's dependency list.
SOURCES_APP_NAME = "sources-api"
SOURCES_V31_PATH = "api/sources/v3.1"


class ResolvedEndpoints(BaseModel):
    """Endpoints the rest of the service connects to. Immutable."""

    model_config = ConfigDict(frozen=True)

    sources_api_health_url: str
    sources_api_url: str
    kafka_url: str
    kafka_host: str
    kafka_port: int
    listen_port: str


def _is_unset_port(value: str) -> bool:
    return value == "" or value == "0"


class ConfigResolver:
    """
    Builds a ResolvedEndpoints from a platform provider and an environment
    snapshot. Resolution is all-or-nothing: the first missing value raises.
    """

    def __init__(
        self,
        provider: PlatformConfigProvider,
        settings: EnvSettings,
    ) -> None:
        self._provider = provider
        self._settings = settings

    @property
    def mode(self) -> str:
        return "clowder" if self._provider.is_enabled() else "environment"

    def resolve(self) -> ResolvedEndpoints:
        if self._provider.is_enabled():
            fields = self._from_platform()
        else:
            fields = self._from_environment()
        return ResolvedEndpoints(listen_port=self._listen_port(), **fields)

    def _from_platform(self) -> dict:
        source_dep = next(
            (dep for dep in self._provider.dependency_endpoints() if dep.app == SOURCES_APP_NAME),
            None,
        )
        # Either the app was renamed or clowdapp.yaml does not list it.
        if source_dep is None:
            raise DependencyNotFound(SOURCES_APP_NAME)
        if source_dep.hostname == "":
            raise MissingField("Sources API hostname")
        if source_dep.port == 0:
            raise MissingField("Sources API port")

        base = f"http://{source_dep.hostname}:{source_dep.port}"

        brokers = self._provider.kafka_brokers()
        if not brokers:
            raise MissingField("Kafka broker")
        broker = brokers[0]

        if broker.hostname == "":
            raise MissingField("Kafka hostname")
        if broker.port is None or broker.port == 0:
            raise MissingField("Kafka port")

        return {
            "sources_api_health_url": f"{base}/health",
            "sources_api_url": f"{base}/{SOURCES_V31_PATH}",
            "kafka_url": f"{broker.hostname}:{broker.port}",
            "kafka_host": broker.hostname,
            "kafka_port": broker.port,
        }

    def _from_environment(self) -> dict:
        settings = self._settings

        sources_host = settings.sources_api_host
        if sources_host == "":
            raise MissingField("Sources API host")

        sources_port = settings.sources_api_port
        if _is_unset_port(sources_port):
            raise MissingField("Sources API port")

        # No scheme here, unlike the platform branch: SOURCES_API_HOST is
        # expected to carry it.
        base = f"{sources_host}:{sources_port}"

        hostname = settings.queue_host
        if hostname == "":
            raise MissingField("Kafka host")

        port = settings.queue_port
        if _is_unset_port(port):
            raise MissingField("Kafka port")
        try:
            kafka_port = int(port)
        except ValueError as exc:
            raise MissingField("Kafka port", detail=f"QUEUE_PORT is not a number: {port!r}") from exc
        if kafka_port <= 0:
            raise MissingField("Kafka port", detail=f"QUEUE_PORT is not a positive port: {port!r}")

        return {
            "sources_api_health_url": f"{base}/health",
            "sources_api_url": f"{base}/{SOURCES_V31_PATH}",
            "kafka_url": f"{hostname}:{port}",
            "kafka_host": hostname,
            "kafka_port": kafka_port,
        }

    def _listen_port(self) -> str:
        port = self._settings.port
        if _is_unset_port(port):
            return DEFAULT_PORT
        return port


def resolve_endpoints(
    provider: PlatformConfigProvider | None = None,
    settings: EnvSettings | None = None,
) -> ResolvedEndpoints:
    """Resolve once with the given inputs, defaulting to the process ones."""
    return ConfigResolver(
        provider if provider is not None else get_provider(),
        settings if settings is not None else get_settings(),
    ).resolve()


# ── Process-wide value ────────────────────────────────────────────────────────

_endpoints: ResolvedEndpoints | None = None


def load_endpoints(
    provider: PlatformConfigProvider | None = None,
    settings: EnvSettings | None = None,
) -> ResolvedEndpoints:
    """
    Resolve the endpoints at startup and keep them for get_endpoints().
    Failures are logged and re-raised; the caller should abort startup.
    """
    global _endpoints
    log = get_logger(__name__)
    resolver = ConfigResolver(
        provider if provider is not None else get_provider(),
        settings if settings is not None else get_settings(),
    )
    with startup_context(mode=resolver.mode):
        try:
            endpoints = resolver.resolve()
        except ConfigError as exc:
            log.error("endpoints.resolution_failed", code=exc.code, reason=str(exc))
            raise

        log.info(
            "endpoints.resolved",
            sources_api_url=endpoints.sources_api_url,
            kafka_url=endpoints.kafka_url,
            listen_port=endpoints.listen_port,
        )
    _endpoints = endpoints
    return endpoints


def get_endpoints() -> ResolvedEndpoints:
    """Return the endpoints resolved at startup, resolving them if needed."""
    if _endpoints is None:
        return load_endpoints()
    return _endpoints


def _reset_endpoints() -> None:
    """For tests — forget the resolved endpoints."""
    global _endpoints
    _endpoints = None


__all__ = [
    "ConfigResolver",
    "DEFAULT_PORT",
    "ResolvedEndpoints",
    "SOURCES_APP_NAME",
    "get_endpoints",
    "load_endpoints",
    "resolve_endpoints",
]
