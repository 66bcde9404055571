"""
Configuration for the extension runtime.

Configuration can be loaded from YAML files or dictionaries, or constructed
programmatically. A couple of environment variables override file values so
that packaged builds can relocate the extensions directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

ENV_EXTENSIONS_DIR = "ASSETKIT_EXTENSIONS_DIR"
ENV_LOG_LEVEL = "ASSETKIT_LOG_LEVEL"

DEFAULT_ALLOWED_MODULES = [
    "json",
    "re",
    "math",
    "datetime",
    "decimal",
    "collections",
    "itertools",
    "functools",
    "statistics",
]

DEFAULT_CONFIG_PATHS = [
    Path("assetkit.yaml"),
    Path.home() / ".config" / "assetkit" / "config.yaml",
]


@dataclass
class RuntimeConfig:
    """
    Configuration for the extension runtime.

    Example YAML:
        extensions_dir: ./plugins
        state_file: ./data/extensions.json
        entry_point: init.py
        enable_new: true
        allowed_modules:
          - json
          - math
        log_level: INFO
    """

    extensions_dir: Path = field(default_factory=lambda: Path("plugins"))
    state_file: Path | None = None  # None = <extensions_dir>/state.json
    entry_point: str = "init.py"  # Script looked up inside extension directories
    enable_new: bool = True  # Enable extensions that have no persisted flag yet
    allowed_modules: list[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_MODULES))
    log_level: str = "INFO"

    @property
    def resolved_state_file(self) -> Path:
        """Path of the persisted enabled-state file."""
        if self.state_file is not None:
            return self.state_file
        return self.extensions_dir / "state.json"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RuntimeConfig:
        """Create config from a dictionary."""
        allowed_modules = data.get("allowed_modules")
        if allowed_modules is None:
            allowed_modules = DEFAULT_ALLOWED_MODULES
        return cls(
            extensions_dir=Path(data.get("extensions_dir", "plugins")).expanduser(),
            state_file=(
                Path(data["state_file"]).expanduser() if data.get("state_file") else None
            ),
            entry_point=data.get("entry_point", "init.py"),
            enable_new=bool(data.get("enable_new", True)),
            allowed_modules=list(allowed_modules),
            log_level=str(data.get("log_level", "INFO")).upper(),
        )

    @classmethod
    def from_yaml(cls, path: Path) -> RuntimeConfig:
        """Load config from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_yaml_string(cls, content: str) -> RuntimeConfig:
        """Load config from a YAML string."""
        data = yaml.safe_load(content)
        return cls.from_dict(data or {})

    @classmethod
    def load(cls, path: Path | None = None) -> RuntimeConfig:
        """
        Load config from ``path`` (or the first default location that exists)
        and apply environment overrides.
        """
        config: RuntimeConfig | None = None
        if path is not None:
            config = cls.from_yaml(path)
        else:
            for candidate in DEFAULT_CONFIG_PATHS:
                if candidate.is_file():
                    config = cls.from_yaml(candidate)
                    break
        if config is None:
            config = cls()

        env_dir = os.environ.get(ENV_EXTENSIONS_DIR)
        if env_dir:
            config.extensions_dir = Path(env_dir).expanduser()
        env_level = os.environ.get(ENV_LOG_LEVEL)
        if env_level:
            config.log_level = env_level.upper()
        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert config to a dictionary."""
        return {
            "extensions_dir": str(self.extensions_dir),
            "state_file": str(self.state_file) if self.state_file else None,
            "entry_point": self.entry_point,
            "enable_new": self.enable_new,
            "allowed_modules": list(self.allowed_modules),
            "log_level": self.log_level,
        }
