"""Candidate grouping and pairwise compatibility.

The solver picks exactly one entry per group. Grouping decides what those
groups are: one per identity, sorted for determinism, with an absent
placeholder wherever leaving the identity out is legal.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from packsolve.core.dependency.models import PackageCandidate, PackageId, ResolverPackage

logger = logging.getLogger(__name__)


def find_missing_required(
    required_ids: Iterable[PackageId], available: Iterable[PackageCandidate]
) -> PackageId | None:
    """Return the first required identity (ordinal order) with no candidate.

    Args:
        required_ids: Identities that must be installed.
        available: The candidate universe.

    Returns:
        The missing identity, or None when every required identity has at
        least one candidate.
    """
    present = {candidate.id for candidate in available}
    for package_id in sorted(required_ids):
        if package_id not in present:
            return package_id
    return None


def group_candidates(
    packages: Sequence[ResolverPackage], required_ids: Iterable[PackageId]
) -> list[list[ResolverPackage]]:
    """Partition packages into one group per identity.

    Packages are sorted by (identity, version) first, so both the group
    order and the order inside each group are independent of input order.
    Every group whose identity is not required gets an absent placeholder
    appended. Identities that appear only as a dependency target get a
    group holding nothing but the placeholder.

    Args:
        packages: Non-absent solver packages.
        required_ids: Identities that must resolve to a real version.

    Returns:
        The groups, real-package groups first in identity order, then
        dependency-only groups in order of first mention.
    """
    required = set(required_ids)
    ordered = sorted(packages, key=lambda p: (p.id, p.version))

    groups: dict[PackageId, list[ResolverPackage]] = {}
    for package in ordered:
        groups.setdefault(package.id, []).append(package)

    for package_id, group in groups.items():
        if package_id not in required:
            group.append(ResolverPackage.absent_for(package_id))

    for package in ordered:
        for dependency in package.dependencies:
            if dependency.id not in groups:
                # Not offered by any source: the only legal choice is to omit it.
                groups[dependency.id] = [ResolverPackage.absent_for(dependency.id)]

    logger.debug(
        "Grouped %d packages into %d groups", len(ordered), len(groups)
    )
    return list(groups.values())


def _violates(package: ResolverPackage, other: ResolverPackage) -> bool:
    """True if *package* declares a dependency that *other* fails."""
    if package.absent:
        return False
    dependency = package.find_dependency(other.id)
    if dependency is None:
        return False
    if other.absent:
        return True
    return not dependency.accepts(other.version)


def should_reject_pair(a: ResolverPackage, b: ResolverPackage) -> bool:
    """Decide whether two chosen packages cannot be installed together.

    The pair is rejected when either one depends on the other's identity
    and the other is absent or has a version outside the declared range.
    Both directions are checked, so the result is symmetric.
    """
    return _violates(a, b) or _violates(b, a)
