"""
Extension system for assetkit.

Discovers extension scripts, keeps their enabled state across restarts, and
delivers lifecycle hooks to each one inside its own sandbox.
"""

from assetkit.extensions.bridge import HostBridge
from assetkit.extensions.discovery import discover_extensions
from assetkit.extensions.dispatcher import HookDispatcher
from assetkit.extensions.errors import (
    AlreadyLoadedError,
    ExtensionError,
    HookError,
    LoadError,
    NotLoadedError,
    PersistenceError,
    UnknownExtensionError,
)
from assetkit.extensions.models import (
    KNOWN_HOOKS,
    ON_APP_CLOSING,
    ON_APP_STARTED,
    ON_ASSET_CREATED,
    ON_ASSET_DELETED,
    ON_ASSET_UPDATED,
    ON_LOAD,
    ON_UNLOAD,
    DiscoveryWarning,
    DispatchReport,
    ExtensionDescriptor,
    ExtensionStatus,
)
from assetkit.extensions.registry import ExtensionRegistry
from assetkit.extensions.sandbox import ScriptSandbox
from assetkit.extensions.state import StateStore

__all__ = [
    "ExtensionRegistry",
    "HookDispatcher",
    "ScriptSandbox",
    "HostBridge",
    "StateStore",
    "discover_extensions",
    "ExtensionDescriptor",
    "ExtensionStatus",
    "DiscoveryWarning",
    "DispatchReport",
    "ExtensionError",
    "UnknownExtensionError",
    "LoadError",
    "AlreadyLoadedError",
    "NotLoadedError",
    "HookError",
    "PersistenceError",
    "KNOWN_HOOKS",
    "ON_LOAD",
    "ON_UNLOAD",
    "ON_APP_STARTED",
    "ON_APP_CLOSING",
    "ON_ASSET_CREATED",
    "ON_ASSET_UPDATED",
    "ON_ASSET_DELETED",
]
