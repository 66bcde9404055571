"""
Persisted enabled flags, keyed by extension id.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from assetkit.extensions.errors import PersistenceError
from assetkit.logging import get_logger

logger = get_logger("state")


class StateStore:
    """JSON file holding ``{extension_id: enabled}``."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> dict[str, bool]:
        """Read the persisted flags. A missing or malformed file reads as empty."""
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable extension state %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring extension state %s: expected a JSON object", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, bool)}

    def save(self, state: dict[str, bool]) -> None:
        """
        Write the flags atomically.

        Raises:
            PersistenceError: The file could not be written.
        """
        payload = json.dumps(dict(sorted(state.items())), indent=2) + "\n"
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise PersistenceError(f"Cannot write extension state {self.path}: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
        logger.debug("Saved extension state to %s", self.path)

