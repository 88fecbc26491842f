"""Shared fixtures for CLI tests.

Each fixture writes a small universe file into a temporary directory and
returns its path.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def feed_file(tmp_path: Path) -> Path:
    """app 1.0.0 depending on lib (>= 1.0.0), with three lib versions."""
    path = tmp_path / "feed.yaml"
    path.write_text(
        "packages:\n"
        "  - id: app\n"
        "    version: '1.0.0'\n"
        "    dependencies:\n"
        "      - id: lib\n"
        "        range: '[1.0.0, )'\n"
        "  - id: lib\n"
        "    version: '1.0.0'\n"
        "  - id: lib\n"
        "    version: '1.2.0'\n"
        "  - id: lib\n"
        "    version: '2.0.0'\n"
    )
    return path


@pytest.fixture
def conflict_file(tmp_path: Path) -> Path:
    """a 1.0.0 needs b 1.0.0 exactly, but only b 2.0.0 exists."""
    path = tmp_path / "conflict.json"
    path.write_text(json.dumps({
        "packages": [
            {"id": "a", "version": "1.0.0", "dependencies": [{"id": "b", "range": "[1.0.0]"}]},
            {"id": "b", "version": "2.0.0"},
        ]
    }))
    return path


@pytest.fixture
def cycle_file(tmp_path: Path) -> Path:
    """a and b depend on each other."""
    path = tmp_path / "cycle.yaml"
    path.write_text(
        "packages:\n"
        "  - id: a\n"
        "    version: '1.0.0'\n"
        "    dependencies: [b]\n"
        "  - id: b\n"
        "    version: '1.0.0'\n"
        "    dependencies: [a]\n"
    )
    return path


@pytest.fixture
def missing_dep_file(tmp_path: Path) -> Path:
    """a depends on a package no file offers."""
    path = tmp_path / "missing.yaml"
    path.write_text(
        "packages:\n"
        "  - id: a\n"
        "    version: '1.0.0'\n"
        "    dependencies: [ghost]\n"
    )
    return path


@pytest.fixture
def broken_file(tmp_path: Path) -> Path:
    """A universe file with a package missing its version."""
    path = tmp_path / "broken.yaml"
    path.write_text("packages:\n  - id: a\n")
    return path
