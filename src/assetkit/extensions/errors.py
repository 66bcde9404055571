"""
Errors raised by the extension runtime.

Faults inside extension code surface as ``HookError`` or ``LoadError`` and
never cross into another extension. Bookkeeping failures of the registry
itself (persisted state, the extensions root) reach the caller.
"""

from __future__ import annotations


class ExtensionError(Exception):
    """Base class for extension runtime errors."""


class UnknownExtensionError(ExtensionError):
    """No extension with this id was discovered."""

    def __init__(self, extension_id: str) -> None:
        super().__init__(f"Extension not found: {extension_id}")
        self.extension_id = extension_id


class LoadError(ExtensionError):
    """The extension script could not be read, compiled, or executed."""

    def __init__(self, extension_id: str, message: str) -> None:
        super().__init__(f"Failed to load extension {extension_id}: {message}")
        self.extension_id = extension_id
        self.message = message


class AlreadyLoadedError(ExtensionError):
    def __init__(self, extension_id: str) -> None:
        super().__init__(f"Extension already loaded: {extension_id}")
        self.extension_id = extension_id


class NotLoadedError(ExtensionError):
    def __init__(self, extension_id: str) -> None:
        super().__init__(f"Extension not loaded: {extension_id}")
        self.extension_id = extension_id


class HookError(ExtensionError):
    """A hook raised while running inside its sandbox."""

    def __init__(self, extension_id: str, hook_name: str, message: str) -> None:
        super().__init__(f"Extension {extension_id} hook {hook_name} failed: {message}")
        self.extension_id = extension_id
        self.hook_name = hook_name
        self.message = message


class PersistenceError(ExtensionError):
    """The enabled-state file could not be written."""
