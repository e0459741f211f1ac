"""
sources_config.platform.clowder
─────────────────────────────────
Platform-managed configuration. When the service runs under Clowder the
operator mounts a JSON document describing the app's dependencies and
Kafka brokers, and announces its path in ACG_CONFIG.

The resolver only talks to the PlatformConfigProvider protocol, so it can
be exercised without a mounted document (see StaticPlatformConfigProvider).
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from sources_config.core.errors import PlatformConfigUnreadable
from sources_config.core.settings import get_settings


# ── Descriptors ───────────────────────────────────────────────────────────────

class DependencyEndpoint(BaseModel):
    """A named application dependency as published by the platform."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    app: str
    name: str = ""
    hostname: str = ""
    port: int = 0


class BrokerConfig(BaseModel):
    """A Kafka broker endpoint. The platform may omit the port."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    hostname: str = ""
    port: int | None = None


class KafkaConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    brokers: list[BrokerConfig] = Field(default_factory=list)


class AppConfig(BaseModel):
    """The subset of the Clowder app config document this package reads."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    endpoints: list[DependencyEndpoint] = Field(default_factory=list)
    kafka: KafkaConfig | None = None


# ── Provider protocol ─────────────────────────────────────────────────────────

@runtime_checkable
class PlatformConfigProvider(Protocol):
    def is_enabled(self) -> bool: ...
    def dependency_endpoints(self) -> list[DependencyEndpoint]: ...
    def kafka_brokers(self) -> list[BrokerConfig]: ...


# ── Clowder provider ──────────────────────────────────────────────────────────

class ClowderConfigProvider:
    """
    Reads the app config document named by ACG_CONFIG (environment or .env).
    Platform mode is active iff the path is non-empty; the document is only
    read on first access to the descriptors.
    """

    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        if path is None:
            path = get_settings().acg_config
        self._path = str(path)
        self._config: AppConfig | None = None

    def is_enabled(self) -> bool:
        return self._path != ""

    def load(self) -> AppConfig:
        if self._config is not None:
            return self._config
        if not self.is_enabled():
            raise PlatformConfigUnreadable(
                user_message="platform configuration requested but ACG_CONFIG is not set",
            )
        try:
            raw = Path(self._path).read_text(encoding="utf-8")
        except OSError as exc:
            raise PlatformConfigUnreadable(
                user_message=f"could not read Clowder config at {self._path}",
                detail=str(exc),
                path=self._path,
            ) from exc
        try:
            self._config = AppConfig.model_validate_json(raw)
        except PydanticValidationError as exc:
            raise PlatformConfigUnreadable(
                user_message=f"invalid Clowder config at {self._path}",
                detail=str(exc),
                path=self._path,
            ) from exc
        return self._config

    def dependency_endpoints(self) -> list[DependencyEndpoint]:
        return list(self.load().endpoints)

    def kafka_brokers(self) -> list[BrokerConfig]:
        kafka = self.load().kafka
        return list(kafka.brokers) if kafka else []


# ── Static provider (tests / embedding) ───────────────────────────────────────

class StaticPlatformConfigProvider:
    """In-memory platform config for tests."""

    def __init__(
        self,
        endpoints: list[DependencyEndpoint] | None = None,
        brokers: list[BrokerConfig] | None = None,
        enabled: bool = True,
    ) -> None:
        self._endpoints = list(endpoints or [])
        self._brokers = list(brokers or [])
        self._enabled = enabled

    def is_enabled(self) -> bool:
        return self._enabled

    def dependency_endpoints(self) -> list[DependencyEndpoint]:
        return list(self._endpoints)

    def kafka_brokers(self) -> list[BrokerConfig]:
        return list(self._brokers)


# ── Provider registry ─────────────────────────────────────────────────────────

_provider: PlatformConfigProvider | None = None


def get_provider() -> PlatformConfigProvider:
    global _provider
    if _provider is None:
        _provider = ClowderConfigProvider()
    return _provider


def set_provider(provider: PlatformConfigProvider) -> None:
    global _provider
    _provider = provider


def _reset_provider() -> None:
    global _provider
    _provider = None


__all__ = [
    "AppConfig",
    "BrokerConfig",
    "ClowderConfigProvider",
    "DependencyEndpoint",
    "KafkaConfig",
    "PlatformConfigProvider",
    "StaticPlatformConfigProvider",
    "get_provider",
    "set_provider",
]
