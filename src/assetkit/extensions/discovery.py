"""
Extension discovery - scan the extensions directory without running code.
"""

from __future__ import annotations

import ast
from pathlib import Path

from assetkit.extensions.errors import ExtensionError
from assetkit.extensions.models import METADATA_FIELDS, DiscoveryWarning, ExtensionDescriptor
from assetkit.logging import get_logger

logger = get_logger("discovery")


def discover_extensions(
    directory: Path,
    entry_point: str = "init.py",
) -> tuple[list[ExtensionDescriptor], list[DiscoveryWarning]]:
    """
    Find extensions one level below ``directory``.

    A subdirectory containing ``entry_point`` is an extension whose id is the
    directory name; a ``*.py`` file directly in ``directory`` is an extension
    whose id is the file stem. Entries starting with ``_`` or ``.`` are
    ignored. Entries are visited in lexicographic order, so when a directory
    and a file map to the same id the one sorting first wins.

    Returns:
        (descriptors in discovery order, warnings for skipped candidates)

    Raises:
        ExtensionError: ``directory`` exists but is not a directory.
    """
    descriptors: list[ExtensionDescriptor] = []
    warnings: list[DiscoveryWarning] = []

    if not directory.exists():
        logger.info("Creating extensions directory: %s", directory)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExtensionError(f"Cannot create extensions directory {directory}: {e}") from e
        return descriptors, warnings
    if not directory.is_dir():
        raise ExtensionError(f"Extensions path is not a directory: {directory}")

    seen: dict[str, Path] = {}
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.name.startswith(("_", ".")):
            continue

        try:
            candidate = _classify(entry, entry_point)
        except OSError as e:
            warnings.append(DiscoveryWarning(entry, f"{type(e).__name__}: {e}"))
            continue
        if candidate is None:
            continue
        ext_id, script = candidate

        if ext_id in seen:
            warnings.append(
                DiscoveryWarning(script, f"duplicate extension id '{ext_id}' (using {seen[ext_id]})")
            )
            continue

        try:
            metadata = read_metadata(script)
        except (OSError, UnicodeDecodeError, SyntaxError, ValueError) as e:
            warnings.append(DiscoveryWarning(script, f"{type(e).__name__}: {e}"))
            continue

        seen[ext_id] = script
        descriptor = ExtensionDescriptor(id=ext_id, source_path=script)
        descriptor.fill_metadata(metadata)
        descriptors.append(descriptor)
        logger.debug("Discovered extension: %s (%s)", ext_id, script)

    for warning in warnings:
        logger.warning("Skipped extension candidate %s", warning)
    return descriptors, warnings


def _classify(entry: Path, entry_point: str) -> tuple[str, Path] | None:
    """Map a directory entry to ``(id, script)``, or None if it is not a candidate."""
    if entry.is_dir():
        script = entry / entry_point
        if not script.is_file():
            logger.debug("Skipping %s: no %s", entry, entry_point)
            return None
        return entry.name, script
    if entry.is_file() and entry.suffix == ".py":
        return entry.stem, entry
    return None


def read_metadata(script: Path) -> dict[str, str]:
    """
    Read module-level string assignments to the metadata fields.

    Only literal assignments such as ``version = "1.0.0"`` are recognized;
    anything computed is left for the sandbox to report at load time.
    """
    source = script.read_text(encoding="utf-8")
    tree = ast.parse(source, filename=str(script))

    metadata: dict[str, str] = {}
    for node in tree.body:
        if isinstance(node, ast.Assign):
            targets = node.targets
            value = node.value
        elif isinstance(node, ast.AnnAssign) and node.value is not None:
            targets = [node.target]
            value = node.value
        else:
            continue
        if not (isinstance(value, ast.Constant) and isinstance(value.value, str)):
            continue
        for target in targets:
            if isinstance(target, ast.Name) and target.id in METADATA_FIELDS:
                metadata[target.id] = value.value
    return metadata
