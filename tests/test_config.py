"""Tests for runtime configuration."""

from pathlib import Path
from textwrap import dedent

import pytest

from assetkit.config import (
    DEFAULT_ALLOWED_MODULES,
    ENV_EXTENSIONS_DIR,
    ENV_LOG_LEVEL,
    RuntimeConfig,
)


class TestRuntimeConfig:
    """Tests for RuntimeConfig."""

    def test_default_values(self) -> None:
        """Should have sensible defaults."""
        config = RuntimeConfig()

        assert config.extensions_dir == Path("plugins")
        assert config.state_file is None
        assert config.resolved_state_file == Path("plugins") / "state.json"
        assert config.entry_point == "init.py"
        assert config.enable_new is True
        assert config.allowed_modules == DEFAULT_ALLOWED_MODULES
        assert config.log_level == "INFO"

    def test_allowed_modules_not_shared(self) -> None:
        first = RuntimeConfig()
        first.allowed_modules.append("os")
        assert "os" not in RuntimeConfig().allowed_modules

    def test_from_dict(self) -> None:
        """Should create config from a dictionary."""
        config = RuntimeConfig.from_dict(
            {
                "extensions_dir": "./ext",
                "state_file": "./data/state.json",
                "entry_point": "main.py",
                "enable_new": False,
                "allowed_modules": ["json"],
                "log_level": "debug",
            }
        )

        assert config.extensions_dir == Path("./ext")
        assert config.resolved_state_file == Path("./data/state.json")
        assert config.entry_point == "main.py"
        assert config.enable_new is False
        assert config.allowed_modules == ["json"]
        assert config.log_level == "DEBUG"

    def test_from_yaml_string(self) -> None:
        """Should parse YAML content."""
        config = RuntimeConfig.from_yaml_string(
            dedent("""
            extensions_dir: /opt/assets/plugins
            enable_new: false
            """)
        )
        assert config.extensions_dir == Path("/opt/assets/plugins")
        assert config.enable_new is False

    def test_null_allowed_modules_uses_defaults(self) -> None:
        config = RuntimeConfig.from_yaml_string("allowed_modules:\n")
        assert config.allowed_modules == DEFAULT_ALLOWED_MODULES

    def test_empty_allowed_modules_is_kept(self) -> None:
        config = RuntimeConfig.from_yaml_string("allowed_modules: []\n")
        assert config.allowed_modules == []

    def test_from_empty_yaml(self) -> None:
        assert RuntimeConfig.from_yaml_string("") == RuntimeConfig()

    def test_from_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "assetkit.yaml"
        path.write_text("extensions_dir: ./mine\n")
        assert RuntimeConfig.from_yaml(path).extensions_dir == Path("./mine")

    def test_to_dict_round_trip(self) -> None:
        config = RuntimeConfig(extensions_dir=Path("x"), state_file=Path("y.json"), enable_new=False)
        assert RuntimeConfig.from_dict(config.to_dict()) == config


class TestLoad:
    def test_load_explicit_path_with_env_overrides(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("extensions_dir: ./from-file\nlog_level: INFO\n")
        monkeypatch.setenv(ENV_EXTENSIONS_DIR, str(tmp_path / "from-env"))
        monkeypatch.setenv(ENV_LOG_LEVEL, "warning")

        config = RuntimeConfig.load(path)

        assert config.extensions_dir == tmp_path / "from-env"
        assert config.log_level == "WARNING"

    def test_load_defaults_without_files(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("assetkit.config.DEFAULT_CONFIG_PATHS", [tmp_path / "none.yaml"])
        monkeypatch.delenv(ENV_EXTENSIONS_DIR, raising=False)
        monkeypatch.delenv(ENV_LOG_LEVEL, raising=False)

        assert RuntimeConfig.load() == RuntimeConfig()

    def test_load_first_default_path(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        found = tmp_path / "found.yaml"
        found.write_text("entry_point: plugin.py\n")
        monkeypatch.setattr(
            "assetkit.config.DEFAULT_CONFIG_PATHS", [tmp_path / "missing.yaml", found]
        )
        monkeypatch.delenv(ENV_EXTENSIONS_DIR, raising=False)

        assert RuntimeConfig.load().entry_point == "plugin.py"
