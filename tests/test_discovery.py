"""Tests for extension discovery."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from assetkit.extensions.discovery import discover_extensions, read_metadata
from assetkit.extensions.errors import ExtensionError


class TestDiscoverExtensions:
    def test_finds_directories_and_files_in_order(self, ext_dir: Path, write_extension) -> None:
        write_extension("zeta", "name = 'Zeta'")
        write_extension("alpha", "name = 'Alpha'", as_file=True)
        write_extension("mid", "name = 'Mid'")

        descriptors, warnings = discover_extensions(ext_dir)

        assert [d.id for d in descriptors] == ["alpha", "mid", "zeta"]
        assert warnings == []
        assert descriptors[0].source_path == ext_dir / "alpha.py"
        assert descriptors[1].source_path == ext_dir / "mid" / "init.py"

    def test_descriptors_start_disabled(self, ext_dir: Path, write_extension) -> None:
        write_extension("one", "x = 1")
        descriptors, _ = discover_extensions(ext_dir)
        assert descriptors[0].enabled is False

    def test_ignores_private_and_non_candidates(self, ext_dir: Path, write_extension) -> None:
        write_extension("_private", "x = 1", as_file=True)
        write_extension(".hidden", "x = 1")
        (ext_dir / "empty_dir").mkdir()
        (ext_dir / "notes.txt").write_text("not an extension")
        write_extension("real", "x = 1")

        descriptors, warnings = discover_extensions(ext_dir)

        assert [d.id for d in descriptors] == ["real"]
        assert warnings == []

    def test_malformed_entry_is_warning(self, ext_dir: Path, write_extension, caplog) -> None:
        caplog.set_level(logging.WARNING, logger="assetkit")
        write_extension("broken", "def nope(:")
        write_extension("fine", "name = 'Fine'")

        descriptors, warnings = discover_extensions(ext_dir)

        assert [d.id for d in descriptors] == ["fine"]
        assert len(warnings) == 1
        assert warnings[0].path == ext_dir / "broken" / "init.py"
        assert "SyntaxError" in warnings[0].message
        assert "Skipped extension candidate" in caplog.text

    def test_undecodable_entry_is_warning(self, ext_dir: Path) -> None:
        (ext_dir / "binary.py").write_bytes(b"\xff\xfe\x00garbage")

        descriptors, warnings = discover_extensions(ext_dir)

        assert descriptors == []
        assert len(warnings) == 1

    def test_duplicate_id_first_wins(self, ext_dir: Path, write_extension) -> None:
        write_extension("stats", "name = 'Directory'")
        write_extension("stats", "name = 'File'", as_file=True)

        descriptors, warnings = discover_extensions(ext_dir)

        assert len(descriptors) == 1
        assert descriptors[0].name == "Directory"
        assert len(warnings) == 1
        assert "duplicate" in warnings[0].message

    def test_custom_entry_point(self, ext_dir: Path) -> None:
        (ext_dir / "custom").mkdir()
        (ext_dir / "custom" / "plugin.py").write_text("name = 'Custom'")

        assert discover_extensions(ext_dir)[0] == []
        descriptors, _ = discover_extensions(ext_dir, entry_point="plugin.py")
        assert [d.id for d in descriptors] == ["custom"]

    def test_missing_root_is_created(self, tmp_path: Path) -> None:
        root = tmp_path / "not" / "yet"
        descriptors, warnings = discover_extensions(root)

        assert root.is_dir()
        assert descriptors == []
        assert warnings == []

    def test_root_that_is_a_file_raises(self, tmp_path: Path) -> None:
        root = tmp_path / "plugins"
        root.write_text("oops")
        with pytest.raises(ExtensionError):
            discover_extensions(root)

    def test_order_is_stable_across_scans(self, ext_dir: Path, write_extension) -> None:
        for ext_id in ["c", "a", "b"]:
            write_extension(ext_id, "x = 1")

        first = [d.id for d in discover_extensions(ext_dir)[0]]
        second = [d.id for d in discover_extensions(ext_dir)[0]]
        assert first == second == ["a", "b", "c"]

    def test_unreadable_entry_does_not_abort_scan(
        self, ext_dir: Path, write_extension, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        write_extension("a_locked", "x = 1")
        write_extension("b_good", "x = 1")
        original_is_file = Path.is_file

        def is_file(self: Path) -> bool:
            if "a_locked" in self.parts:
                raise PermissionError(13, "Permission denied", str(self))
            return original_is_file(self)

        monkeypatch.setattr(Path, "is_file", is_file)

        descriptors, warnings = discover_extensions(ext_dir)

        assert [d.id for d in descriptors] == ["b_good"]
        assert len(warnings) == 1
        assert warnings[0].path == ext_dir / "a_locked"
        assert "PermissionError" in warnings[0].message


class TestReadMetadata:
    def test_reads_literal_strings(self, tmp_path: Path) -> None:
        script = tmp_path / "meta.py"
        script.write_text(
            "name = 'Stats'\n"
            "version: str = '2.0'\n"
            "author = 'Me'\n"
            "description = 'Counts things'\n"
            "other = 'ignored'\n"
        )
        assert read_metadata(script) == {
            "name": "Stats",
            "version": "2.0",
            "author": "Me",
            "description": "Counts things",
        }

    def test_skips_computed_and_non_string_values(self, tmp_path: Path) -> None:
        script = tmp_path / "meta.py"
        script.write_text("name = 'A' + 'B'\nversion = 3\n")
        assert read_metadata(script) == {}

    def test_does_not_execute_the_script(self, tmp_path: Path) -> None:
        script = tmp_path / "meta.py"
        script.write_text("raise SystemExit(1)\nname = 'Safe'\n")
        assert read_metadata(script) == {"name": "Safe"}
