"""
Plugin host - the runtime facade used by the storage and presentation layers.

Example:
    from assetkit import PluginHost, RuntimeConfig
    from assetkit.events import RecordCreated, serialize_record

    with PluginHost(RuntimeConfig.load()) as host:
        host.notify(RecordCreated(serialize_record(asset)))
        host.set_extension_enabled("stats_helper", False)
"""

from __future__ import annotations

import atexit
from typing import Any

from assetkit.config import RuntimeConfig
from assetkit.events import LifecycleEvent, Shutdown, Startup
from assetkit.extensions.dispatcher import HookDispatcher
from assetkit.extensions.models import DispatchReport
from assetkit.extensions.registry import ExtensionRegistry
from assetkit.extensions.state import StateStore
from assetkit.logging import get_logger

logger = get_logger("host")


class PluginHost:
    """
    Wires the state store, registry and dispatcher together.

    ``start()`` discovers extensions, loads the enabled ones and fires
    ``Startup``; ``close()`` fires ``Shutdown`` and unloads everything.
    ``close()`` is also registered with ``atexit`` so teardown runs when
    the process exits without an explicit close.
    """

    def __init__(self, config: RuntimeConfig | None = None) -> None:
        self.config = config or RuntimeConfig()
        self.state_store = StateStore(self.config.resolved_state_file)
        self.registry = ExtensionRegistry(
            self.config.extensions_dir,
            self.state_store,
            entry_point=self.config.entry_point,
            allowed_modules=self.config.allowed_modules,
            enable_new=self.config.enable_new,
        )
        self.dispatcher = HookDispatcher(self.registry)
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> None:
        """Discover and load extensions, then fire ``Startup``."""
        if self._started:
            return
        self.registry.discover()
        self.registry.load_enabled()
        self._started = True
        atexit.register(self.close)
        self.dispatcher.dispatch(Startup())
        logger.info("Plugin host started with %d extensions", len(self.registry))

    def close(self) -> None:
        """Fire ``Shutdown`` on every loaded extension and unload them."""
        if not self._started:
            return
        self._started = False
        atexit.unregister(self.close)
        self.dispatcher.dispatch(Shutdown())
        self.registry.close()
        logger.info("Plugin host stopped")

    # ------------------------------------------------------------------
    # Storage-facing interface
    # ------------------------------------------------------------------

    def notify(self, event: LifecycleEvent) -> DispatchReport:
        """Deliver a committed record event to all loaded extensions."""
        return self.dispatcher.dispatch(event)

    # ------------------------------------------------------------------
    # Presentation-facing interface
    # ------------------------------------------------------------------

    def list_extensions(self) -> list[dict[str, Any]]:
        """Descriptor mappings in registry order."""
        return [
            {**d.to_dict(), "status": self.registry.status(d.id).value}
            for d in self.registry.list()
        ]

    def set_extension_enabled(self, ext_id: str, enabled: bool) -> None:
        """Toggle one extension; errors propagate to the caller."""
        self.registry.set_enabled(ext_id, enabled)

    def reload_extensions(self) -> list[dict[str, Any]]:
        """Unload, rescan and reload; returns the new listing."""
        self.registry.reload()
        return self.list_extensions()

    def __enter__(self) -> PluginHost:
        self.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
