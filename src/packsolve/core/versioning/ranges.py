"""Version ranges: interval bounds, floating ranges, and best-match selection.

A ``VersionRange`` is an interval over ``Version`` with an optional lower and
upper bound, each inclusive or exclusive. Supported syntax:

- ``1.0``            -- minimum inclusive, unbounded above (``[1.0, )``)
- ``[1.0]``          -- exactly ``1.0``
- ``[1.0, 2.0)``     -- interval notation, either side may be empty
- ``1.*``, ``1.0.*`` -- floating: the lowest matching version is the
  inclusive minimum, and the highest version matching the pattern is the
  best match
- ``1.0.0-beta*``    -- floating prerelease
- ``*``              -- any version, best match is the highest

Rendering follows a symbolic convention for human-readable messages:
``(= 1.0.0)``, ``(≥ 1.0.0)``, ``(> 1.0.0 && < 2.0.0)``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterable

from packsolve.core.versioning.version import Version
from packsolve.exceptions import VersionParseError


class FloatBehavior(Enum):
    """Which part of a version floats to the highest available value."""

    NONE = "none"
    PRERELEASE = "prerelease"
    REVISION = "revision"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"


_FLOAT_NUMERIC_RE = re.compile(r"^(?P<fixed>(?:\d+\.){0,3})\*$")
_FLOAT_PRERELEASE_RE = re.compile(
    r"^(?P<numbers>\d+(?:\.\d+){0,3})-(?P<prefix>[0-9A-Za-z\-.]*)\*$"
)

_FLOAT_BY_FIXED_PARTS = {
    0: FloatBehavior.MAJOR,
    1: FloatBehavior.MINOR,
    2: FloatBehavior.PATCH,
    3: FloatBehavior.REVISION,
}


@dataclass(frozen=True)
class FloatRange:
    """The floating part of a range such as ``1.0.*`` or ``2.0.0-rc*``.

    Attributes:
        behavior: The part of the version that floats.
        min_version: Lowest version matching the pattern.
        release_prefix: Prerelease label prefix for ``PRERELEASE`` floats.
        original: The pattern as written.
    """

    behavior: FloatBehavior
    min_version: Version
    release_prefix: str = ""
    original: str = ""

    @classmethod
    def parse(cls, text: str) -> FloatRange:
        """Parse a floating pattern, raising ``VersionParseError`` if invalid."""
        s = text.strip()
        m = _FLOAT_NUMERIC_RE.match(s)
        if m:
            fixed = [part for part in m.group("fixed").split(".") if part]
            numbers = [int(part) for part in fixed] + [0] * (4 - len(fixed))
            return cls(
                behavior=_FLOAT_BY_FIXED_PARTS[len(fixed)],
                min_version=Version(*numbers),
                original=s,
            )
        m = _FLOAT_PRERELEASE_RE.match(s)
        if m:
            prefix = m.group("prefix")
            min_label = prefix if prefix and not prefix.endswith(".") else prefix + "0"
            return cls(
                behavior=FloatBehavior.PRERELEASE,
                min_version=Version.parse(f"{m.group('numbers')}-{min_label}"),
                release_prefix=prefix,
                original=s,
            )
        raise VersionParseError(f"Invalid floating version range: {text!r}")

    def satisfies(self, version: Version) -> bool:
        """True if *version* matches the floating pattern itself."""
        low = self.min_version
        if self.behavior is FloatBehavior.MAJOR:
            return True
        if self.behavior is FloatBehavior.MINOR:
            return version.major == low.major
        if self.behavior is FloatBehavior.PATCH:
            return (version.major, version.minor) == (low.major, low.minor)
        if self.behavior is FloatBehavior.REVISION:
            return (version.major, version.minor, version.patch) == (
                low.major,
                low.minor,
                low.patch,
            )
        if self.behavior is FloatBehavior.PRERELEASE:
            same_numbers = (
                version.major,
                version.minor,
                version.patch,
                version.revision,
            ) == (low.major, low.minor, low.patch, low.revision)
            return same_numbers and version.release.lower().startswith(
                self.release_prefix.lower()
            )
        return False


def _parse_bound(text: str) -> Version | None:
    text = text.strip()
    return Version.parse(text) if text else None


@dataclass(frozen=True)
class VersionRange:
    """An interval of acceptable versions.

    A bound that is ``None`` is open on that side. The inclusive flag of a
    missing bound is always ``False``.

    Attributes:
        min_version: Lower bound, or None.
        max_version: Upper bound, or None.
        include_min: Whether ``min_version`` itself satisfies the range.
        include_max: Whether ``max_version`` itself satisfies the range.
        float_range: Floating pattern, or None for a fixed range.
        original: The string this range was parsed from, if any.
    """

    min_version: Version | None = None
    max_version: Version | None = None
    include_min: bool = False
    include_max: bool = False
    float_range: FloatRange | None = None
    original: str = field(default="", compare=False)

    ALL: ClassVar[VersionRange]

    def __post_init__(self) -> None:
        if self.min_version is None and self.include_min:
            object.__setattr__(self, "include_min", False)
        if self.max_version is None and self.include_max:
            object.__setattr__(self, "include_max", False)

    # -- Construction -------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> VersionRange:
        """Parse a range string.

        Args:
            text: Range such as ``"1.0"``, ``"[1.0]"``, ``"[1.0, 2.0)"``, or
                ``"1.0.*"``.

        Returns:
            The parsed ``VersionRange``.

        Raises:
            VersionParseError: If *text* is not a valid range.
        """
        if not isinstance(text, str) or not text.strip():
            raise VersionParseError(f"Invalid version range: {text!r}")
        s = text.strip()

        if "*" in s:
            floating = FloatRange.parse(s)
            return cls(
                min_version=floating.min_version,
                include_min=True,
                float_range=floating,
                original=s,
            )

        if s[0] not in "[(":
            return cls(min_version=Version.parse(s), include_min=True, original=s)

        if len(s) < 3 or s[-1] not in "])":
            raise VersionParseError(f"Invalid version range: {text!r}")

        include_min = s[0] == "["
        include_max = s[-1] == "]"
        parts = s[1:-1].split(",")

        if len(parts) == 1:
            if not (include_min and include_max):
                raise VersionParseError(f"Exact version range must use [ ]: {text!r}")
            exact = _parse_bound(parts[0])
            if exact is None:
                raise VersionParseError(f"Invalid version range: {text!r}")
            return cls(exact, exact, True, True, original=s)

        if len(parts) != 2:
            raise VersionParseError(f"Invalid version range: {text!r}")

        low = _parse_bound(parts[0])
        high = _parse_bound(parts[1])
        if low is None and high is None:
            raise VersionParseError(f"Version range has no bounds: {text!r}")
        if low is not None and high is not None:
            if high < low or (high == low and not (include_min and include_max)):
                raise VersionParseError(f"Version range is empty: {text!r}")
        return cls(low, high, include_min, include_max, original=s)

    @classmethod
    def exact(cls, version: Version) -> VersionRange:
        """Range satisfied by *version* only."""
        return cls(version, version, True, True)

    @classmethod
    def at_least(cls, version: Version) -> VersionRange:
        """Range satisfied by *version* and anything above it."""
        return cls(min_version=version, include_min=True)

    # -- Queries --------------------------------------------------------------

    @property
    def has_lower_bound(self) -> bool:
        return self.min_version is not None

    @property
    def has_upper_bound(self) -> bool:
        return self.max_version is not None

    @property
    def is_floating(self) -> bool:
        return self.float_range is not None

    @property
    def is_exact(self) -> bool:
        """True if exactly one version satisfies the range."""
        return (
            self.min_version is not None
            and self.min_version == self.max_version
            and self.include_min
            and self.include_max
        )

    def satisfies(self, version: Version) -> bool:
        """Check whether *version* lies inside the range bounds.

        Floating ranges are satisfied by anything at or above their
        minimum; the floating pattern only affects best-match selection.
        """
        if self.min_version is not None:
            if self.include_min:
                if version < self.min_version:
                    return False
            elif version <= self.min_version:
                return False
        if self.max_version is not None:
            if self.include_max:
                if version > self.max_version:
                    return False
            elif version >= self.max_version:
                return False
        return True

    def intersect(self, other: VersionRange) -> VersionRange | None:
        """Return the tightest range satisfied by both, or None if disjoint.

        The result is never floating.
        """
        low, include_low = self.min_version, self.include_min
        if other.min_version is not None:
            if low is None or other.min_version > low:
                low, include_low = other.min_version, other.include_min
            elif other.min_version == low:
                include_low = include_low and other.include_min

        high, include_high = self.max_version, self.include_max
        if other.max_version is not None:
            if high is None or other.max_version < high:
                high, include_high = other.max_version, other.include_max
            elif other.max_version == high:
                include_high = include_high and other.include_max

        if low is not None and high is not None:
            if high < low or (high == low and not (include_low and include_high)):
                return None
        return VersionRange(low, high, include_low, include_high)

    def is_better(self, current: Version | None, considering: Version | None) -> bool:
        """Decide whether *considering* is a better match than *current*.

        Only versions inside the range can be better. For a fixed range the
        version closest to the lower bound wins. For a floating range a
        version matching the pattern beats one that does not, and among
        pattern matches the highest wins.
        """
        if considering is None or not self.satisfies(considering):
            return False
        if current is None:
            return True
        if considering == current:
            return False

        if self.float_range is not None:
            current_floats = self.float_range.satisfies(current)
            considering_floats = self.float_range.satisfies(considering)
            if considering_floats != current_floats:
                return considering_floats
            if considering_floats:
                return considering > current

        return considering < current

    def find_best_match(self, versions: Iterable[Version]) -> Version | None:
        """Pick the best version from *versions*, or None if none satisfies."""
        best: Version | None = None
        for version in versions:
            if self.is_better(best, version):
                best = version
        return best

    # -- Rendering ------------------------------------------------------------

    def pretty(self) -> str:
        """Render with comparison symbols, e.g. ``(≥ 1.0.0 && < 2.0.0)``.

        A range with no bounds renders as the empty string.
        """
        if self.is_exact:
            return f"(= {self.min_version})"
        parts = []
        if self.min_version is not None:
            parts.append(f"{'≥' if self.include_min else '>'} {self.min_version}")
        if self.max_version is not None:
            parts.append(f"{'≤' if self.include_max else '<'} {self.max_version}")
        if not parts:
            return ""
        return "(" + " && ".join(parts) + ")"

    def to_normalized(self) -> str:
        """Render in interval notation, or as the floating pattern."""
        if self.float_range is not None:
            return self.float_range.original
        if self.is_exact:
            return f"[{self.min_version}]"
        low = str(self.min_version) if self.min_version is not None else ""
        high = str(self.max_version) if self.max_version is not None else ""
        return (
            f"{'[' if self.include_min else '('}{low}, "
            f"{high}{']' if self.include_max else ')'}"
        )

    def __str__(self) -> str:
        return self.to_normalized()


VersionRange.ALL = VersionRange()
