"""Package versions: parsing, normalization, and precedence.

A version is one to four dot-separated numeric parts, optionally followed by
dot-separated prerelease labels (``-beta.2``) and build metadata
(``+sha.5114f85``). Missing numeric parts are zero, so ``1.0`` and
``1.0.0.0`` denote the same version.

Precedence follows SemVer 2.0.0 section 11, extended to a fourth
"revision" part:

- numeric parts are compared left to right;
- a prerelease sorts before the release with the same numeric parts;
- prerelease labels are compared one at a time, numeric labels
  numerically and ahead of alphanumeric labels, alphanumeric labels
  ordinally without regard to case;
- build metadata never affects ordering or equality.

References
----------
.. [SemVer] Preston-Werner, T. (2013). "Semantic Versioning 2.0.0."
   https://semver.org/
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import total_ordering

from packsolve.exceptions import VersionParseError

_VERSION_RE = re.compile(
    r"^(?P<numbers>\d+(?:\.\d+){0,3})"
    r"(?:-(?P<pre>[0-9A-Za-z\-.]+))?"
    r"(?:\+(?P<meta>[0-9A-Za-z\-.]+))?$"
)

_LABEL_RE = re.compile(r"^[0-9A-Za-z\-]+$")


def _label_key(label: str) -> tuple[int, int | str]:
    """Sort key for one prerelease label -- numeric labels first."""
    if label.isdigit():
        return 0, int(label)
    return 1, label.lower()


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """A parsed package version.

    Attributes:
        major: First numeric part.
        minor: Second numeric part (0 if omitted).
        patch: Third numeric part (0 if omitted).
        revision: Fourth numeric part (0 if omitted).
        release_labels: Prerelease labels, empty for a release.
        metadata: Build metadata, ignored for comparisons.
    """

    major: int
    minor: int = 0
    patch: int = 0
    revision: int = 0
    release_labels: tuple[str, ...] = ()
    metadata: str = field(default="", compare=False)

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a version string.

        Args:
            text: Version string such as ``"1.2"``, ``"1.0.0-beta.1"``, or
                ``"2.0.0.1+build"``.

        Returns:
            The parsed ``Version``.

        Raises:
            VersionParseError: If *text* is not a valid version.
        """
        if not isinstance(text, str):
            raise VersionParseError(f"Invalid version: {text!r}")
        m = _VERSION_RE.match(text.strip())
        if not m:
            raise VersionParseError(f"Invalid version: {text!r}")

        numbers = [int(part) for part in m.group("numbers").split(".")]
        numbers.extend([0] * (4 - len(numbers)))

        labels: tuple[str, ...] = ()
        if m.group("pre"):
            labels = tuple(m.group("pre").split("."))
            if any(not _LABEL_RE.match(label) for label in labels):
                raise VersionParseError(f"Invalid prerelease label in version: {text!r}")

        return cls(
            major=numbers[0],
            minor=numbers[1],
            patch=numbers[2],
            revision=numbers[3],
            release_labels=labels,
            metadata=m.group("meta") or "",
        )

    @property
    def is_prerelease(self) -> bool:
        """True if the version carries prerelease labels."""
        return bool(self.release_labels)

    @property
    def release(self) -> str:
        """The prerelease label string without the leading dash."""
        return ".".join(self.release_labels)

    def _key(self) -> tuple:
        return (
            self.major,
            self.minor,
            self.patch,
            self.revision,
            0 if self.release_labels else 1,
            tuple(_label_key(label) for label in self.release_labels),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def to_normalized(self) -> str:
        """Render as ``major.minor.patch[.revision][-labels]``.

        The revision is only shown when non-zero. Metadata is dropped.
        """
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.revision:
            text += f".{self.revision}"
        if self.release_labels:
            text += f"-{self.release}"
        return text

    def __str__(self) -> str:
        return self.to_normalized()

    def __repr__(self) -> str:
        return f"Version({self.to_normalized()!r})"
