"""Version and version-range primitives used by the resolver.

Public API::

    from packsolve.core.versioning import Version, VersionRange, FloatBehavior
"""

from __future__ import annotations

from packsolve.core.versioning.ranges import FloatBehavior, FloatRange, VersionRange
from packsolve.core.versioning.version import Version

__all__ = [
    "FloatBehavior",
    "FloatRange",
    "Version",
    "VersionRange",
]
