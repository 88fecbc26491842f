"""Try-first ordering of candidates within a group.

Rules, applied in order until one discriminates:

1. the absent placeholder always comes last;
2. the preferred version of the identity, if any, comes first;
3. listed versions come before unlisted ones;
4. versions are ordered by the dependency behavior;
5. ordinal identity, then version, for determinism.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Iterable, Mapping

from packsolve.core.dependency.models import (
    DependencyBehavior,
    PackageId,
    ResolverPackage,
)
from packsolve.core.versioning import Version


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


class ResolverComparer:
    """Total order over the candidates of one group.

    Lower sorts first, and first is tried first by the solver.

    Args:
        behavior: The dependency version policy.
        preferred_versions: Identity to version pins that win ties.
    """

    def __init__(
        self,
        behavior: DependencyBehavior,
        preferred_versions: Mapping[PackageId, Version] | None = None,
    ) -> None:
        self._behavior = behavior
        self._preferred = dict(preferred_versions or {})

    def compare(self, x: ResolverPackage, y: ResolverPackage) -> int:
        """Return negative if *x* should be tried before *y*."""
        if x is y:
            return 0

        if x.absent or y.absent:
            return _cmp(x.absent, y.absent)

        preferred = self._preferred.get(x.id)
        if preferred is not None and x.id == y.id:
            x_preferred = x.version == preferred
            y_preferred = y.version == preferred
            if x_preferred != y_preferred:
                return -1 if x_preferred else 1

        if x.listed != y.listed:
            return -1 if x.listed else 1

        result = self._compare_versions(x.version, y.version)
        if result:
            return result

        return _cmp(
            (x.id.name, x.version.metadata),
            (y.id.name, y.version.metadata),
        )

    def _compare_versions(self, x: Version, y: Version) -> int:
        behavior = self._behavior
        if behavior is DependencyBehavior.LOWEST:
            return _cmp(x, y)
        if behavior is DependencyBehavior.HIGHEST_MINOR:
            # Lowest major, then the highest version inside it.
            if x.major != y.major:
                return _cmp(x.major, y.major)
            return -_cmp(x, y)
        if behavior is DependencyBehavior.HIGHEST_PATCH:
            # Lowest major.minor, then the highest patch inside it.
            if (x.major, x.minor) != (y.major, y.minor):
                return _cmp((x.major, x.minor), (y.major, y.minor))
            return -_cmp(x, y)
        # HIGHEST and IGNORE
        return -_cmp(x, y)

    def sort(self, group: Iterable[ResolverPackage]) -> list[ResolverPackage]:
        """Return *group* in try-first order."""
        return sorted(group, key=cmp_to_key(self.compare))
