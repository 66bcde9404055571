"""Shared pytest fixtures for assetkit tests."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from textwrap import dedent

import pytest

from assetkit.extensions.registry import ExtensionRegistry
from assetkit.extensions.state import StateStore

WriteExtension = Callable[..., Path]

# Counts created/deleted records in module-level variables.
COUNTER_SCRIPT = dedent("""
    name = "Counter"
    version = "1.0.0"
    author = "Tests"
    description = "Counts record events"

    created = 0
    updated = 0
    deleted = 0
    last_payload = None
    last_deleted = None

    def on_load():
        log("counter loaded")

    def on_unload():
        log("counter unloaded")

    def on_asset_created(payload):
        global created, last_payload
        created += 1
        last_payload = payload
        log("counter created")

    def on_asset_updated(payload):
        global updated
        updated += 1

    def on_asset_deleted(record_id):
        global deleted, last_deleted
        deleted += 1
        last_deleted = record_id
        log("counter deleted")
""").strip()

# Declares metadata but subscribes to nothing.
SILENT_SCRIPT = dedent("""
    name = "Silent"
    version = "0.1.0"
""").strip()

# Raises on every record creation.
BROKEN_SCRIPT = dedent("""
    name = "Broken"
    calls = 0

    def on_asset_created(payload):
        global calls
        calls += 1
        raise RuntimeError("boom")
""").strip()


@pytest.fixture(autouse=True)
def _reset_assetkit_logger():
    """Undo handlers/levels installed by setup_logging() during a test."""
    logger = logging.getLogger("assetkit")
    level = logger.level
    yield
    logger.handlers.clear()
    logger.setLevel(level)


@pytest.fixture
def ext_dir(tmp_path: Path) -> Path:
    """An empty extensions directory."""
    directory = tmp_path / "plugins"
    directory.mkdir()
    return directory


@pytest.fixture
def write_extension(ext_dir: Path) -> WriteExtension:
    """Write an extension script; returns the script path."""

    def _write(ext_id: str, source: str, *, as_file: bool = False) -> Path:
        if as_file:
            path = ext_dir / f"{ext_id}.py"
        else:
            (ext_dir / ext_id).mkdir(exist_ok=True)
            path = ext_dir / ext_id / "init.py"
        path.write_text(source, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    return tmp_path / "state" / "extensions.json"


@pytest.fixture
def state_store(state_path: Path) -> StateStore:
    return StateStore(state_path)


@pytest.fixture
def make_registry(ext_dir: Path, state_path: Path) -> Callable[..., ExtensionRegistry]:
    """Build a registry over ``ext_dir``, discovered and with enabled ones loaded."""

    def _make(*, load: bool = True, **kwargs) -> ExtensionRegistry:
        registry = ExtensionRegistry(ext_dir, StateStore(state_path), **kwargs)
        registry.discover()
        if load:
            registry.load_enabled()
        return registry

    return _make


@pytest.fixture
def scenario_extensions(write_extension: WriteExtension) -> None:
    """Extensions a (counts), b (no hooks), c (raises), in that registry order."""
    write_extension("a", COUNTER_SCRIPT)
    write_extension("b", SILENT_SCRIPT)
    write_extension("c", BROKEN_SCRIPT)


@pytest.fixture
def counter_script() -> str:
    return COUNTER_SCRIPT
