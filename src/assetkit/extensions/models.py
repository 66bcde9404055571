"""
Data models for the extension system.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from assetkit.extensions.errors import HookError

# Hook name constants
ON_LOAD = "on_load"
ON_UNLOAD = "on_unload"
ON_APP_STARTED = "on_app_started"
ON_APP_CLOSING = "on_app_closing"
ON_ASSET_CREATED = "on_asset_created"
ON_ASSET_UPDATED = "on_asset_updated"
ON_ASSET_DELETED = "on_asset_deleted"

KNOWN_HOOKS = (
    ON_LOAD,
    ON_UNLOAD,
    ON_APP_STARTED,
    ON_APP_CLOSING,
    ON_ASSET_CREATED,
    ON_ASSET_UPDATED,
    ON_ASSET_DELETED,
)

METADATA_FIELDS = ("name", "version", "author", "description")


class ExtensionStatus(str, Enum):
    """Where an extension sits in its load/unload lifecycle."""

    DISCOVERED = "discovered"
    LOADING = "loading"
    LOADED = "loaded"
    UNLOADED = "unloaded"
    FAILED = "failed"  # last load attempt raised LoadError


@dataclass
class ExtensionDescriptor:
    """Metadata about a discovered extension."""

    id: str
    source_path: Path
    name: str = ""
    version: str = ""
    author: str = ""
    description: str = ""
    enabled: bool = False

    def fill_metadata(self, metadata: dict[str, str]) -> None:
        """Copy declared metadata into fields that are still empty."""
        for key in METADATA_FIELDS:
            value = metadata.get(key)
            if value and not getattr(self, key):
                setattr(self, key, value)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "author": self.author,
            "description": self.description,
            "enabled": self.enabled,
        }


@dataclass
class DiscoveryWarning:
    """A candidate extension that was skipped during discovery."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass
class DispatchReport:
    """Outcome of fanning one lifecycle event out to the loaded sandboxes."""

    hook_name: str
    delivered: list[str] = field(default_factory=list)  # hook ran cleanly
    skipped: list[str] = field(default_factory=list)  # hook not defined
    failures: list[HookError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def visited(self) -> int:
        return len(self.delivered) + len(self.skipped) + len(self.failures)
