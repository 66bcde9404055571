"""
Lifecycle events delivered to extensions.

The storage layer builds one of these after committing a mutation and hands
it to ``PluginHost.notify``; the host fires ``Startup`` and ``Shutdown``
itself. Every event knows which extension hook it maps to and which
arguments that hook receives.

Example:
    from assetkit.events import RecordCreated, serialize_record

    host.notify(RecordCreated(serialize_record(asset)))
"""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from typing import Any, Union

from assetkit.extensions.models import (
    KNOWN_HOOKS,
    ON_APP_CLOSING,
    ON_APP_STARTED,
    ON_ASSET_CREATED,
    ON_ASSET_DELETED,
    ON_ASSET_UPDATED,
)


@dataclass(frozen=True)
class Startup:
    """Emitted once per process after enabled extensions are loaded."""

    hook_name = ON_APP_STARTED

    def hook_args(self) -> tuple[Any, ...]:
        return ()


@dataclass(frozen=True)
class Shutdown:
    """Emitted once per process before loaded extensions are torn down."""

    hook_name = ON_APP_CLOSING

    def hook_args(self) -> tuple[Any, ...]:
        return ()


@dataclass(frozen=True)
class RecordCreated:
    """A record was committed. ``payload`` is the serialized snapshot."""

    payload: str

    hook_name = ON_ASSET_CREATED

    def hook_args(self) -> tuple[Any, ...]:
        return (self.payload,)


@dataclass(frozen=True)
class RecordUpdated:
    payload: str

    hook_name = ON_ASSET_UPDATED

    def hook_args(self) -> tuple[Any, ...]:
        return (self.payload,)


@dataclass(frozen=True)
class RecordDeleted:
    record_id: Any

    hook_name = ON_ASSET_DELETED

    def hook_args(self) -> tuple[Any, ...]:
        return (str(self.record_id),)


@dataclass(frozen=True)
class Custom:
    """An application-defined event, routed to the ``on_<name>`` hook."""

    name: str
    payload: str = "null"

    def __post_init__(self) -> None:
        if not self.name.isidentifier():
            raise ValueError(f"Invalid custom event name: {self.name!r}")
        if f"on_{self.name}" in KNOWN_HOOKS:
            raise ValueError(f"Custom event name collides with a built-in hook: {self.name!r}")

    @property
    def hook_name(self) -> str:
        return f"on_{self.name}"

    def hook_args(self) -> tuple[Any, ...]:
        return (self.payload,)


LifecycleEvent = Union[Startup, Shutdown, RecordCreated, RecordUpdated, RecordDeleted, Custom]


def serialize_record(record: Any) -> str:
    """Serialize a record snapshot into the JSON payload hooks receive."""
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        record = dataclasses.asdict(record)
    return json.dumps(record, default=str, ensure_ascii=False)
