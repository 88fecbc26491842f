"""Tests for loading universe files from YAML and JSON."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from packsolve.core.dependency import PackageId
from packsolve.core.versioning import Version, VersionRange
from packsolve.exceptions import UniverseFileError
from packsolve.universe import load_universe

_YAML_UNIVERSE = """\
packages:
  - id: App
    version: "1.0.0"
    dependencies:
      - id: lib
        range: "[1.0.0, 2.0.0)"
      - util
  - id: lib
    version: "1.2.0"
    listed: false
preferred:
  lib: "1.2.0"
installed:
  - id: lib
    allowed: "[1.0.0, )"
  - util
"""


class TestLoadYaml:
    """Tests for YAML universe files."""

    def test_full_document(self, tmp_path: Path) -> None:
        path = tmp_path / "feed.yaml"
        path.write_text(_YAML_UNIVERSE)
        universe = load_universe(path)

        assert [str(c) for c in universe.candidates] == ["App 1.0.0", "lib 1.2.0"]
        app = universe.candidates[0]
        assert app.dependencies[0].version_range == VersionRange.parse("[1.0.0, 2.0.0)")
        assert app.dependencies[1].id == PackageId("util")
        assert app.dependencies[1].version_range is None
        assert universe.candidates[1].listed is False
        assert universe.preferred == {PackageId("lib"): Version.parse("1.2.0")}
        assert [str(pin.id) for pin in universe.installed] == ["lib", "util"]
        assert universe.installed[1].allowed_range is None

    def test_yml_suffix(self, tmp_path: Path) -> None:
        path = tmp_path / "feed.yml"
        path.write_text("packages:\n  - id: a\n    version: '1.0'\n")
        assert len(load_universe(str(path)).candidates) == 1

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        universe = load_universe(path)
        assert universe.candidates == []
        assert universe.preferred == {}

    def test_as_source_named_after_file(self, tmp_path: Path) -> None:
        path = tmp_path / "nightly.yaml"
        path.write_text("packages: []\n")
        assert load_universe(path).as_source().name == "nightly.yaml"


class TestLoadJson:
    """Tests for JSON universe files."""

    def test_packages(self, tmp_path: Path) -> None:
        path = tmp_path / "feed.json"
        path.write_text(json.dumps({
            "packages": [
                {"id": "a", "version": "2.0", "dependencies": [{"id": "b", "range": "[1.0]"}]},
                {"id": "b", "version": "1.0"},
            ]
        }))
        universe = load_universe(path)
        assert [str(c) for c in universe.candidates] == ["a 2.0.0", "b 1.0.0"]
        assert universe.candidates[0].dependencies[0].version_range.is_exact


class TestLoadErrors:
    """Tests for malformed universe files."""

    @pytest.mark.parametrize(
        ("name", "content", "fragment"),
        [
            ("feed.txt", "packages: []", "unsupported file type"),
            ("feed.yaml", "packages: [", "invalid YAML"),
            ("feed.json", "{not json", "invalid JSON"),
            ("feed.yaml", "- just\n- a list\n", "top level must be a mapping"),
            ("feed.yaml", "packages: {a: 1}\n", "'packages' must be a list"),
            ("feed.yaml", "preferred: [a]\n", "'preferred' must be a mapping"),
            ("feed.yaml", "installed: a\n", "'installed' must be a list"),
            ("feed.yaml", "packages:\n  - id: a\n", "packages[0] is missing 'version'"),
            ("feed.yaml", "packages:\n  - version: '1.0'\n", "packages[0] is missing 'id'"),
            ("feed.yaml", "packages:\n  - just-a-string\n", "packages[0] must be a mapping"),
            (
                "feed.yaml",
                "packages:\n  - id: a\n    version: '1.0'\n    dependencies: b\n",
                "packages[0].dependencies must be a list",
            ),
            (
                "feed.yaml",
                "packages:\n  - id: a\n    version: '1.0'\n    dependencies:\n      - [b]\n",
                "packages[0].dependencies[0] must be a mapping or a package id",
            ),
            ("feed.yaml", "packages:\n  - id: a\n    version: 'one'\n", "Invalid version"),
            ("feed.yaml", "preferred:\n  a: 'x.y'\n", "Invalid version"),
            ("feed.yaml", "installed:\n  - 42\n", "installed[0] must be a mapping"),
        ],
    )
    def test_malformed(self, tmp_path: Path, name: str, content: str, fragment: str) -> None:
        path = tmp_path / name
        path.write_text(content)
        with pytest.raises(UniverseFileError) as excinfo:
            load_universe(path)
        assert fragment in str(excinfo.value)
        assert str(path) in str(excinfo.value)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(UniverseFileError, match="cannot read file"):
            load_universe(tmp_path / "nope.yaml")
