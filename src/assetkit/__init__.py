"""
assetkit - extension runtime for a personal asset tracker.

Third-party scripts observe application and record lifecycle events
(startup, shutdown, record created/updated/deleted). Each script runs in its
own sandbox, so a broken extension never stops the others or the host.

Example:
    from assetkit import PluginHost, RuntimeConfig
    from assetkit.events import RecordDeleted

    host = PluginHost(RuntimeConfig(extensions_dir=Path("plugins")))
    host.start()

    host.notify(RecordDeleted(record_id))
    for ext in host.list_extensions():
        print(ext["id"], ext["enabled"])

    host.close()
"""

from assetkit.config import RuntimeConfig
from assetkit.events import (
    Custom,
    LifecycleEvent,
    RecordCreated,
    RecordDeleted,
    RecordUpdated,
    Shutdown,
    Startup,
    serialize_record,
)
from assetkit.extensions import (
    AlreadyLoadedError,
    DispatchReport,
    ExtensionDescriptor,
    ExtensionError,
    ExtensionRegistry,
    ExtensionStatus,
    HookDispatcher,
    HookError,
    LoadError,
    NotLoadedError,
    PersistenceError,
    ScriptSandbox,
    StateStore,
    UnknownExtensionError,
)
from assetkit.host import PluginHost
from assetkit.logging import get_logger, setup_logging

__all__ = [
    # Runtime
    "PluginHost",
    "RuntimeConfig",
    "ExtensionRegistry",
    "HookDispatcher",
    "ScriptSandbox",
    "StateStore",
    # Models
    "ExtensionDescriptor",
    "ExtensionStatus",
    "DispatchReport",
    # Events
    "LifecycleEvent",
    "Startup",
    "Shutdown",
    "RecordCreated",
    "RecordUpdated",
    "RecordDeleted",
    "Custom",
    "serialize_record",
    # Errors
    "ExtensionError",
    "UnknownExtensionError",
    "LoadError",
    "AlreadyLoadedError",
    "NotLoadedError",
    "HookError",
    "PersistenceError",
    # Logging
    "setup_logging",
    "get_logger",
]

__version__ = "0.1.0"
