"""
Host bridge - the fixed set of names injected into every extension sandbox.
"""

from __future__ import annotations

import json
from typing import Any

from assetkit.logging import get_plugin_logger


class HostBridge:
    """
    Functions an extension script can call back into the host.

    The bridge only observes: there is no handle to the registry, the
    dispatcher, or the record store.

    Example extension:
        def on_asset_created(payload):
            asset = json_decode(payload)
            log("created " + asset.get("name", "?"))
    """

    def __init__(self, extension_id: str) -> None:
        self.extension_id = extension_id
        self._logger = get_plugin_logger(extension_id)

    def log(self, message: Any) -> None:
        """Write ``message`` to the process log at INFO."""
        # Formatting is deferred to logging, which reports its own errors.
        self._logger.info("%s", message)

    def print(self, *args: Any) -> None:
        """Replacement for the builtin print; goes to the log at DEBUG."""
        self._logger.debug("%s", "\t".join(repr(a) if not isinstance(a, str) else a for a in args))

    def json_decode(self, text: str | bytes) -> Any:
        """Parse a serialized record payload."""
        return json.loads(text)

    def globals(self) -> dict[str, Any]:
        """Names bound in the sandbox namespace."""
        return {
            "log": self.log,
            "json_decode": self.json_decode,
        }

    def builtins(self) -> dict[str, Any]:
        """Names overriding entries of the restricted builtins."""
        return {"print": self.print}
