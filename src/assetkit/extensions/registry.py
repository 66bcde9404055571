"""
Extension registry - discovery, loading, lifecycle, and persisted enabled state.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from pathlib import Path

from assetkit.extensions.bridge import HostBridge
from assetkit.extensions.discovery import discover_extensions
from assetkit.extensions.errors import (
    AlreadyLoadedError,
    HookError,
    LoadError,
    NotLoadedError,
    PersistenceError,
    UnknownExtensionError,
)
from assetkit.extensions.models import (
    ON_LOAD,
    ON_UNLOAD,
    DiscoveryWarning,
    ExtensionDescriptor,
    ExtensionStatus,
)
from assetkit.extensions.sandbox import ScriptSandbox
from assetkit.extensions.state import StateStore
from assetkit.logging import get_logger

logger = get_logger("extensions")


class ExtensionRegistry:
    """
    Owns the descriptor table and the live sandboxes.

    Extensions are discovered from one directory: each subdirectory holding
    an ``init.py`` (or the configured entry point) and each top-level
    ``*.py`` file. The descriptor table is the source of truth; sandboxes are
    derived from it and can be rebuilt at any time. Registry order is
    discovery order and is what the dispatcher fans events out in.

    All methods must be called from the thread that owns the registry.
    """

    def __init__(
        self,
        extensions_dir: Path,
        state_store: StateStore,
        *,
        entry_point: str = "init.py",
        allowed_modules: list[str] | None = None,
        enable_new: bool = True,
    ) -> None:
        self.extensions_dir = Path(extensions_dir)
        self.state_store = state_store
        self.entry_point = entry_point
        self.allowed_modules = allowed_modules
        self.enable_new = enable_new

        self._descriptors: dict[str, ExtensionDescriptor] = {}
        self._sandboxes: dict[str, ScriptSandbox] = {}
        self._status: dict[str, ExtensionStatus] = {}
        self._persisted: dict[str, bool] = {}
        self._warnings: list[DiscoveryWarning] = []

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def discover(self) -> list[ExtensionDescriptor]:
        """
        Scan the extensions directory and merge persisted enabled flags.

        Extensions that are already loaded keep their sandbox; loaded
        extensions whose script disappeared are unloaded.

        Returns:
            Snapshot of the descriptor table in registry order.
        """
        found, warnings = discover_extensions(self.extensions_dir, self.entry_point)
        self._warnings = warnings
        self._persisted = self.state_store.load()

        found_ids = {d.id for d in found}
        for ext_id in [i for i in self._sandboxes if i not in found_ids]:
            logger.info("Extension %s is gone, unloading", ext_id)
            self.unload(ext_id)

        table: dict[str, ExtensionDescriptor] = {}
        for descriptor in found:
            current = self._descriptors.get(descriptor.id)
            if current is not None and descriptor.id in self._sandboxes:
                table[descriptor.id] = current
                continue
            descriptor.enabled = self._wanted(descriptor.id)
            table[descriptor.id] = descriptor
            self._status[descriptor.id] = ExtensionStatus.DISCOVERED

        self._descriptors = table
        self._status = {i: s for i, s in self._status.items() if i in table}
        logger.info("Discovered %d extensions in %s", len(table), self.extensions_dir)
        return self.list()

    def load_enabled(self) -> int:
        """
        Load every extension whose enabled flag is set.

        A load failure leaves that extension disabled and is only logged; the
        persisted flag is kept so a fixed script loads on the next start.

        Returns:
            Number of extensions loaded
        """
        wanted = [d.id for d in self._descriptors.values() if d.enabled]
        loaded = 0
        for ext_id in wanted:
            if ext_id in self._sandboxes:
                continue
            try:
                self.load(ext_id)
                loaded += 1
            except LoadError as e:
                logger.warning("%s", e)
        logger.info("Loaded %d/%d enabled extensions", loaded, len(wanted))
        return loaded

    # ------------------------------------------------------------------
    # Load / unload
    # ------------------------------------------------------------------

    def load(self, ext_id: str) -> None:
        """
        Create the sandbox for ``ext_id``, run its script and fire ``on_load``.

        Raises:
            UnknownExtensionError: No such extension.
            AlreadyLoadedError: The extension already has a sandbox.
            LoadError: The script could not be executed.
        """
        descriptor = self._require(ext_id)
        if ext_id in self._sandboxes:
            raise AlreadyLoadedError(ext_id)

        self._status[ext_id] = ExtensionStatus.LOADING
        sandbox = ScriptSandbox(
            ext_id,
            descriptor.source_path,
            bridge=HostBridge(ext_id),
            allowed_modules=self.allowed_modules,
        )
        try:
            sandbox.execute()
        except LoadError:
            sandbox.close()
            descriptor.enabled = False
            self._status[ext_id] = ExtensionStatus.FAILED
            raise

        descriptor.fill_metadata(sandbox.metadata)
        descriptor.enabled = True
        self._sandboxes[ext_id] = sandbox
        self._status[ext_id] = ExtensionStatus.LOADED

        try:
            sandbox.invoke_hook(ON_LOAD)
        except HookError as e:
            logger.error("%s", e)

        logger.info("Loaded extension: %s v%s", descriptor.name or ext_id, descriptor.version or "?")

    def unload(self, ext_id: str) -> None:
        """
        Fire ``on_unload`` and release the sandbox of ``ext_id``.

        Raises:
            UnknownExtensionError: No such extension.
            NotLoadedError: The extension has no sandbox.
        """
        descriptor = self._require(ext_id)
        sandbox = self._sandboxes.pop(ext_id, None)
        if sandbox is None:
            raise NotLoadedError(ext_id)

        try:
            sandbox.invoke_hook(ON_UNLOAD)
        except HookError as e:
            logger.error("%s", e)
        finally:
            sandbox.close()
            descriptor.enabled = False
            self._status[ext_id] = ExtensionStatus.UNLOADED

        logger.info("Unloaded extension: %s", ext_id)

    def set_enabled(self, ext_id: str, enabled: bool) -> None:
        """
        Enable or disable ``ext_id`` and persist the flag.

        Setting the current state again succeeds without side effects. When
        the flag cannot be written the in-memory state is rolled back and
        ``PersistenceError`` is raised.

        Raises:
            UnknownExtensionError: No such extension.
            LoadError: Enabling failed; the extension stays disabled.
            PersistenceError: The flag could not be written.
        """
        self._require(ext_id)
        loaded = ext_id in self._sandboxes

        if loaded == enabled:
            if self._wanted(ext_id) != enabled:
                self._persist(ext_id, enabled)
            self._descriptors[ext_id].enabled = enabled
            logger.debug("Extension %s already %s", ext_id, _word(enabled))
            return

        if enabled:
            self.load(ext_id)
            try:
                self._persist(ext_id, True)
            except PersistenceError:
                self.unload(ext_id)
                raise
        else:
            self._persist(ext_id, False)
            self.unload(ext_id)

        logger.info("Extension %s %s", ext_id, _word(enabled))

    def reload(self) -> list[ExtensionDescriptor]:
        """Unload everything, rescan the directory and load enabled extensions."""
        self.close()
        self.discover()
        self.load_enabled()
        return self.list()

    def close(self) -> None:
        """Unload every loaded extension in registry order."""
        for ext_id in list(self._descriptors):
            if ext_id in self._sandboxes:
                self.unload(ext_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list(self) -> list[ExtensionDescriptor]:
        """Snapshot of all descriptors in registry order."""
        return [dataclasses.replace(d) for d in self._descriptors.values()]

    def get(self, ext_id: str) -> ExtensionDescriptor | None:
        descriptor = self._descriptors.get(ext_id)
        return dataclasses.replace(descriptor) if descriptor is not None else None

    def status(self, ext_id: str) -> ExtensionStatus:
        self._require(ext_id)
        return self._status.get(ext_id, ExtensionStatus.DISCOVERED)

    def sandbox(self, ext_id: str) -> ScriptSandbox | None:
        return self._sandboxes.get(ext_id)

    def is_loaded(self, ext_id: str) -> bool:
        return ext_id in self._sandboxes

    def loaded(self) -> Iterator[tuple[ExtensionDescriptor, ScriptSandbox]]:
        """Loaded extensions with their sandboxes, in registry order."""
        for ext_id, descriptor in list(self._descriptors.items()):
            sandbox = self._sandboxes.get(ext_id)
            if sandbox is not None:
                yield descriptor, sandbox

    @property
    def warnings(self) -> list[DiscoveryWarning]:
        return list(self._warnings)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, ext_id: object) -> bool:
        return ext_id in self._descriptors

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require(self, ext_id: str) -> ExtensionDescriptor:
        descriptor = self._descriptors.get(ext_id)
        if descriptor is None:
            raise UnknownExtensionError(ext_id)
        return descriptor

    def _wanted(self, ext_id: str) -> bool:
        return self._persisted.get(ext_id, self.enable_new)

    def _persist(self, ext_id: str, enabled: bool) -> None:
        state = dict(self._persisted)
        state[ext_id] = enabled
        self.state_store.save(state)
        self._persisted = state


def _word(enabled: bool) -> str:
    return "enabled" if enabled else "disabled"
