"""Package dependency resolution.

Given a universe of candidate package versions and the identities a user
wants, pick one version per identity such that every declared dependency
range is met, or explain why that is impossible.

Pipeline
--------
1. **Grouping** -- one group per case-insensitive identity, with an absent
   placeholder where omitting the identity is legal.
2. **Ordering** -- ``ResolverComparer`` sorts each group by preferred
   version, listed flag and the dependency behavior.
3. **Search** -- ``CombinationSolver`` backtracks over the groups, pruning
   with ``should_reject_pair``.
4. **Checks** -- cycles in the chosen set are rejected; the rest is
   topologically ordered.
5. **Diagnostics** -- on failure, the best attempt is explained relative
   to the target identities.

All public names are re-exported here so callers can write
``from packsolve.core.dependency import X``.
"""

from packsolve.core.dependency.comparer import ResolverComparer
from packsolve.core.dependency.diagnostics import (
    NO_SOLUTION,
    build_diagnostic_message,
    describe_constraint,
)
from packsolve.core.dependency.graph import (
    MAX_DISTANCE,
    distances_from_targets,
    find_circular_dependency,
    lowest_distance_from_target,
    topological_sort,
)
from packsolve.core.dependency.grouping import (
    find_missing_required,
    group_candidates,
    should_reject_pair,
)
from packsolve.core.dependency.models import (
    DependencyBehavior,
    InstalledPin,
    PackageCandidate,
    PackageDependency,
    PackageId,
    ResolverContext,
    ResolverPackage,
)
from packsolve.core.dependency.resolver import (
    FailureKind,
    PackageResolver,
    Resolution,
    resolve,
)
from packsolve.core.dependency.solver import CombinationSolver

__all__ = [
    "CombinationSolver",
    "DependencyBehavior",
    "FailureKind",
    "InstalledPin",
    "MAX_DISTANCE",
    "NO_SOLUTION",
    "PackageCandidate",
    "PackageDependency",
    "PackageId",
    "PackageResolver",
    "Resolution",
    "ResolverComparer",
    "ResolverContext",
    "ResolverPackage",
    "build_diagnostic_message",
    "describe_constraint",
    "distances_from_targets",
    "find_circular_dependency",
    "find_missing_required",
    "group_candidates",
    "lowest_distance_from_target",
    "resolve",
    "should_reject_pair",
    "topological_sort",
]
