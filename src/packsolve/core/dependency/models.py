"""Data records consumed and produced by the package resolver.

The caller describes the candidate universe with ``PackageCandidate``
records and wraps everything it knows in a ``ResolverContext``. The
resolver converts candidates into ``ResolverPackage`` records, adding an
"absent" placeholder per optional identity, and hands those to the
combination solver.

Package identities are case-insensitive. ``PackageId`` makes that explicit:
equality, hashing and ordering go through the folded key while the
original spelling is kept for display.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Iterable, Mapping

from packsolve.core.versioning import Version, VersionRange


# ---------------------------------------------------------------------------
# PackageId: case-insensitive identity key
# ---------------------------------------------------------------------------


@total_ordering
@dataclass(frozen=True, eq=False)
class PackageId:
    """A case-insensitive package identity.

    Attributes:
        name: The identity as spelled by whoever introduced it.
    """

    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError(f"Invalid package id: {self.name!r}")
        object.__setattr__(self, "name", self.name.strip())

    @classmethod
    def of(cls, value: PackageId | str) -> PackageId:
        """Coerce a string or ``PackageId`` into a ``PackageId``."""
        return value if isinstance(value, PackageId) else cls(value)

    @property
    def key(self) -> str:
        """The folded comparison key."""
        return self.name.casefold()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackageId):
            return NotImplemented
        return self.key == other.key

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PackageId):
            return NotImplemented
        return self.key < other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"PackageId({self.name!r})"


def _coerce_version(value: Version | str) -> Version:
    return value if isinstance(value, Version) else Version.parse(value)


def _coerce_range(value: VersionRange | str | None) -> VersionRange | None:
    if value is None or isinstance(value, VersionRange):
        return value
    return VersionRange.parse(value)


# ---------------------------------------------------------------------------
# Dependencies and candidates
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PackageDependency:
    """A declared dependency on another package.

    Attributes:
        id: The identity depended upon.
        version_range: Acceptable versions, or None for any version.
    """

    id: PackageId
    version_range: VersionRange | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", PackageId.of(self.id))
        object.__setattr__(self, "version_range", _coerce_range(self.version_range))

    def accepts(self, version: Version) -> bool:
        """True if *version* satisfies this dependency."""
        return self.version_range is None or self.version_range.satisfies(version)


@dataclass(frozen=True)
class PackageCandidate:
    """One concrete package version offered to the resolver.

    Attributes:
        id: Package identity.
        version: Concrete version.
        dependencies: Declared dependencies, in manifest order.
        listed: False for packages hidden from search (deprecated or
            withdrawn); unlisted versions are only chosen when nothing
            listed fits.
    """

    id: PackageId
    version: Version
    dependencies: tuple[PackageDependency, ...] = ()
    listed: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", PackageId.of(self.id))
        object.__setattr__(self, "version", _coerce_version(self.version))
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    def __str__(self) -> str:
        return f"{self.id} {self.version}"


@dataclass(frozen=True)
class ResolverPackage:
    """A solver-side candidate: a concrete version or an absent placeholder.

    An absent package means "this identity is not installed". It has no
    version and no dependencies, and a package with no version is always
    absent.

    Attributes:
        id: Package identity.
        version: Concrete version, or None when absent.
        dependencies: Declared dependencies, empty when absent.
        listed: Listed flag of the underlying candidate.
        absent: True for the placeholder.
    """

    id: PackageId
    version: Version | None = None
    dependencies: tuple[PackageDependency, ...] = ()
    listed: bool = True
    absent: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", PackageId.of(self.id))
        object.__setattr__(self, "dependencies", tuple(self.dependencies))
        if self.version is not None:
            object.__setattr__(self, "version", _coerce_version(self.version))
        if self.absent and (self.version is not None or self.dependencies):
            raise ValueError(f"Absent package {self.id} cannot carry a version or dependencies")
        if not self.absent and self.version is None:
            raise ValueError(f"Package {self.id} has no version and is not absent")

    @classmethod
    def absent_for(cls, package_id: PackageId | str) -> ResolverPackage:
        """Build the "not installed" placeholder for *package_id*."""
        return cls(id=PackageId.of(package_id), absent=True)

    @classmethod
    def from_candidate(
        cls, candidate: PackageCandidate, *, ignore_dependencies: bool = False
    ) -> ResolverPackage:
        """Convert a caller candidate, optionally dropping its dependencies."""
        return cls(
            id=candidate.id,
            version=candidate.version,
            dependencies=() if ignore_dependencies else candidate.dependencies,
            listed=candidate.listed,
        )

    def find_dependency(self, package_id: PackageId) -> PackageDependency | None:
        """Return the declared dependency on *package_id*, if any."""
        for dependency in self.dependencies:
            if dependency.id == package_id:
                return dependency
        return None

    def __str__(self) -> str:
        if self.absent:
            return f"{self.id} (absent)"
        return f"{self.id} {self.version}"


# ---------------------------------------------------------------------------
# Resolution policy and context
# ---------------------------------------------------------------------------


class DependencyBehavior(Enum):
    """Which version of each dependency the resolver tries first."""

    LOWEST = "lowest"
    HIGHEST = "highest"
    HIGHEST_MINOR = "highest-minor"
    HIGHEST_PATCH = "highest-patch"
    IGNORE = "ignore"

    @classmethod
    def parse(cls, text: str) -> DependencyBehavior:
        """Parse ``"HighestMinor"``, ``"highest_minor"`` or ``"highest-minor"``."""
        folded = "".join(ch for ch in text.lower() if ch.isalnum())
        for member in cls:
            if member.value.replace("-", "") == folded:
                return member
        choices = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown dependency behavior {text!r} (expected one of: {choices})")


@dataclass(frozen=True)
class InstalledPin:
    """A package already installed in the target project.

    Attributes:
        id: Installed identity.
        allowed_range: Versions the project explicitly allows for it, or
            None when the project did not restrict it.
    """

    id: PackageId
    allowed_range: VersionRange | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", PackageId.of(self.id))
        object.__setattr__(self, "allowed_range", _coerce_range(self.allowed_range))


def _id_set(values: Iterable[PackageId | str]) -> frozenset[PackageId]:
    return frozenset(PackageId.of(value) for value in values)


@dataclass(frozen=True, eq=False)
class ResolverContext:
    """Everything one resolve call needs.

    Attributes:
        required_ids: Identities that must be installed.
        target_ids: Identities the user acted on; used to rank diagnostic
            messages. Defaults to ``required_ids`` when empty.
        behavior: Version preference policy.
        preferred_versions: Identity to version; an exact match is tried
            before any other candidate of that identity.
        installed: Currently installed packages, used only to explain
            failures.
        available: The candidate universe.
    """

    required_ids: frozenset[PackageId] = frozenset()
    target_ids: frozenset[PackageId] = frozenset()
    behavior: DependencyBehavior = DependencyBehavior.LOWEST
    preferred_versions: Mapping[PackageId, Version] = field(default_factory=dict)
    installed: tuple[InstalledPin, ...] = ()
    available: tuple[PackageCandidate, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "required_ids", _id_set(self.required_ids))
        object.__setattr__(self, "target_ids", _id_set(self.target_ids))
        object.__setattr__(
            self,
            "preferred_versions",
            {
                PackageId.of(key): _coerce_version(value)
                for key, value in dict(self.preferred_versions).items()
            },
        )
        object.__setattr__(self, "installed", tuple(self.installed))
        object.__setattr__(self, "available", tuple(self.available))

    @property
    def targets(self) -> frozenset[PackageId]:
        """Identities anchoring diagnostic distance, falling back to required."""
        return self.target_ids or self.required_ids
