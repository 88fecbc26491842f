"""Universe files: package candidates, preferences and pins on disk.

A universe file describes what one package feed offers, optionally along
with preferred versions and installed packages::

    packages:
      - id: A
        version: 1.0.0
        listed: true
        dependencies:
          - id: B
            range: "[1.0.0, )"
    preferred:
      A: 1.0.0
    installed:
      - id: B
        allowed: "[2.0.0]"

``.yaml`` / ``.yml`` files are read with PyYAML's ``safe_load``; ``.json``
files with the standard ``json`` module. Any structural problem raises
``UniverseFileError`` naming the file.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from packsolve.core.dependency.models import (
    InstalledPin,
    PackageCandidate,
    PackageDependency,
    PackageId,
)
from packsolve.core.versioning import Version
from packsolve.exceptions import UniverseFileError
from packsolve.remote.sources import LocalPackageSource

YAML_SUFFIXES = (".yaml", ".yml")
JSON_SUFFIXES = (".json",)


@dataclass
class UniverseFile:
    """The parsed contents of one universe file.

    Attributes:
        path: Where it was loaded from.
        candidates: Offered packages, in file order.
        preferred: Identity to preferred version.
        installed: Installed package pins.
    """

    path: Path
    candidates: list[PackageCandidate] = field(default_factory=list)
    preferred: dict[PackageId, Version] = field(default_factory=dict)
    installed: list[InstalledPin] = field(default_factory=list)

    def as_source(self) -> LocalPackageSource:
        """Expose the candidates as a package source named after the file."""
        return LocalPackageSource(self.path.name, self.candidates)


def _read_document(path: Path) -> Any:
    suffix = path.suffix.lower()
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise UniverseFileError(f"{path}: cannot read file ({exc})") from exc

    if suffix in YAML_SUFFIXES:
        try:
            return yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise UniverseFileError(f"{path}: invalid YAML ({exc})") from exc
    if suffix in JSON_SUFFIXES:
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise UniverseFileError(f"{path}: invalid JSON ({exc})") from exc
    raise UniverseFileError(
        f"{path}: unsupported file type {suffix!r} (expected .yaml, .yml or .json)"
    )


def _require(entry: dict[str, Any], key: str, path: Path, where: str) -> str:
    value = entry.get(key)
    if value is None or str(value).strip() == "":
        raise UniverseFileError(f"{path}: {where} is missing {key!r}")
    return str(value)


def _parse_dependency(entry: Any, path: Path, where: str) -> PackageDependency:
    if isinstance(entry, str):
        return PackageDependency(id=PackageId(entry))
    if not isinstance(entry, dict):
        raise UniverseFileError(f"{path}: {where} must be a mapping or a package id")
    version_range = entry.get("range")
    return PackageDependency(
        id=PackageId(_require(entry, "id", path, where)),
        version_range=str(version_range) if version_range is not None else None,
    )


def _parse_package(entry: Any, path: Path, index: int) -> PackageCandidate:
    where = f"packages[{index}]"
    if not isinstance(entry, dict):
        raise UniverseFileError(f"{path}: {where} must be a mapping")
    dependencies = entry.get("dependencies") or []
    if not isinstance(dependencies, list):
        raise UniverseFileError(f"{path}: {where}.dependencies must be a list")
    return PackageCandidate(
        id=PackageId(_require(entry, "id", path, where)),
        version=_require(entry, "version", path, where),
        dependencies=tuple(
            _parse_dependency(dep, path, f"{where}.dependencies[{i}]")
            for i, dep in enumerate(dependencies)
        ),
        listed=bool(entry.get("listed", True)),
    )


def _parse_pin(entry: Any, path: Path, index: int) -> InstalledPin:
    where = f"installed[{index}]"
    if isinstance(entry, str):
        return InstalledPin(id=PackageId(entry))
    if not isinstance(entry, dict):
        raise UniverseFileError(f"{path}: {where} must be a mapping or a package id")
    allowed = entry.get("allowed")
    return InstalledPin(
        id=PackageId(_require(entry, "id", path, where)),
        allowed_range=str(allowed) if allowed is not None else None,
    )


def load_universe(path: Path | str) -> UniverseFile:
    """Load and validate a universe file.

    Args:
        path: Path to a ``.yaml``, ``.yml`` or ``.json`` file.

    Returns:
        The parsed ``UniverseFile``.

    Raises:
        UniverseFileError: If the file cannot be read or is malformed.
    """
    path = Path(path)
    data = _read_document(path)
    if data is None:
        return UniverseFile(path=path)
    if not isinstance(data, dict):
        raise UniverseFileError(f"{path}: top level must be a mapping")

    packages = data.get("packages") or []
    preferred = data.get("preferred") or {}
    installed = data.get("installed") or []
    if not isinstance(packages, list):
        raise UniverseFileError(f"{path}: 'packages' must be a list")
    if not isinstance(preferred, dict):
        raise UniverseFileError(f"{path}: 'preferred' must be a mapping")
    if not isinstance(installed, list):
        raise UniverseFileError(f"{path}: 'installed' must be a list")

    try:
        return UniverseFile(
            path=path,
            candidates=[_parse_package(e, path, i) for i, e in enumerate(packages)],
            preferred={
                PackageId(str(k)): Version.parse(str(v)) for k, v in preferred.items()
            },
            installed=[_parse_pin(e, path, i) for i, e in enumerate(installed)],
        )
    except ValueError as exc:
        # VersionParseError and invalid package ids both land here.
        raise UniverseFileError(f"{path}: {exc}") from exc
