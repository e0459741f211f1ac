"""
sources_config
──────────────
Stable top-level exports. Import from here, not from sub-modules directly.
"""
from sources_config.core.errors import (
    ConfigError,
    DependencyNotFound,
    MissingField,
    PlatformConfigUnreadable,
)
from sources_config.core.logging import get_logger
from sources_config.core.settings import EnvSettings, get_settings
from sources_config.platform.clowder import (
    BrokerConfig,
    ClowderConfigProvider,
    DependencyEndpoint,
    PlatformConfigProvider,
    StaticPlatformConfigProvider,
)
from sources_config.resolver import (
    ConfigResolver,
    ResolvedEndpoints,
    get_endpoints,
    load_endpoints,
    resolve_endpoints,
)

__version__ = "0.1.0"
__all__ = [
    # errors
    "ConfigError", "DependencyNotFound", "MissingField", "PlatformConfigUnreadable",
    # logging
    "get_logger",
    # settings
    "EnvSettings", "get_settings",
    # platform
    "BrokerConfig", "ClowderConfigProvider", "DependencyEndpoint",
    "PlatformConfigProvider", "StaticPlatformConfigProvider",
    # resolver
    "ConfigResolver", "ResolvedEndpoints",
    "get_endpoints", "load_endpoints", "resolve_endpoints",
]
