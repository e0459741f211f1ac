"""
sources_config.core.errors
────────────────────────────
Error taxonomy for endpoint resolution. Every failure is terminal: the
caller (service startup) is expected to abort rather than run with a
partial configuration.
"""
from __future__ import annotations

from typing import Any


# ── Base error ────────────────────────────────────────────────────────────────

class ConfigError(Exception):
    """
    Base class for all resolution errors. Every error has:
    - code: stable machine-readable string (snake_case)
    - user_message: what went wrong, safe to print at startup
    - detail: internal context
    """

    code: str = "configuration_error"

    def __init__(
        self,
        code: str | None = None,
        user_message: str = "Invalid configuration.",
        detail: str | None = None,
        **metadata: Any,
    ) -> None:
        self.code = code or self.__class__.code
        self.user_message = user_message
        self.detail = detail or user_message
        self.metadata = metadata
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.user_message,
            }
        }


# ── Typed error classes ───────────────────────────────────────────────────────

class DependencyNotFound(ConfigError):
    """A named dependency is absent from the platform configuration."""
    code = "dependency_not_found"

    def __init__(self, app: str, **metadata: Any) -> None:
        self.app = app
        metadata["app"] = app
        super().__init__(
            user_message=f'could not find "{app}" on Clowder\'s config',
            **metadata,
        )


class MissingField(ConfigError):
    """A required hostname, port or environment variable is empty or zero."""
    code = "configuration_missing"

    def __init__(self, field: str, detail: str | None = None, **metadata: Any) -> None:
        self.field = field
        metadata["field"] = field
        super().__init__(
            user_message=f"configuration missing: {field}",
            detail=detail,
            **metadata,
        )


class PlatformConfigUnreadable(ConfigError):
    """The platform config file is announced but cannot be loaded."""
    code = "platform_config_unreadable"
