"""Package resolution: from a candidate universe to an ordered install set.

``PackageResolver.resolve`` validates the request, groups the candidates,
runs the combination solver, rejects cyclic results, and orders the
chosen packages so dependencies come before their dependents.

The three ways a resolution can fail are reported as values rather than
raised, so callers can branch on ``Resolution.failure`` without parsing
messages:

- ``FailureKind.INPUT``: a required package has no candidate at all;
- ``FailureKind.CONSTRAINT``: no compatible combination exists;
- ``FailureKind.CIRCULAR``: the combination found contains a cycle.

Cancellation is the exception: it raises ``ResolutionCancelled``.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum

from packsolve.core.dependency.comparer import ResolverComparer
from packsolve.core.dependency.diagnostics import build_diagnostic_message
from packsolve.core.dependency.graph import find_circular_dependency, topological_sort
from packsolve.core.dependency.grouping import (
    find_missing_required,
    group_candidates,
    should_reject_pair,
)
from packsolve.core.dependency.models import (
    DependencyBehavior,
    ResolverContext,
    ResolverPackage,
)
from packsolve.core.dependency.solver import CombinationSolver
from packsolve.exceptions import (
    CircularDependencyError,
    ResolutionCancelled,
    ResolverConstraintError,
    ResolverInputError,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Resolution: The output of dependency resolution
# ---------------------------------------------------------------------------


class FailureKind(Enum):
    """Why a resolution failed."""

    INPUT = "input"
    CONSTRAINT = "constraint"
    CIRCULAR = "circular"


@dataclass
class Resolution:
    """Result of resolving one ``ResolverContext``.

    Attributes:
        success: True if an install set was found.
        packages: The install set, dependencies before dependents. Empty
            if resolution failed.
        failure: What went wrong, or None on success.
        message: Human-readable failure explanation. Empty on success.
        cycle: For ``FailureKind.CIRCULAR``, the closed cycle path as
            ``"id version"`` strings.
    """

    success: bool
    packages: list[ResolverPackage] = field(default_factory=list)
    failure: FailureKind | None = None
    message: str = ""
    cycle: list[str] = field(default_factory=list)

    @property
    def identities(self) -> list[tuple[str, str]]:
        """The install set as ``(id, normalized version)`` pairs."""
        return [(str(p.id), str(p.version)) for p in self.packages]

    def raise_for_failure(self) -> None:
        """Raise the exception matching ``failure``; do nothing on success."""
        if self.failure is FailureKind.INPUT:
            raise ResolverInputError(self.message)
        if self.failure is FailureKind.CIRCULAR:
            raise CircularDependencyError(self.message, self.cycle)
        if self.failure is FailureKind.CONSTRAINT:
            raise ResolverConstraintError(self.message)


def _check_cancelled(cancel_event: threading.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise ResolutionCancelled()


# ---------------------------------------------------------------------------
# PackageResolver: the public entry point
# ---------------------------------------------------------------------------


class PackageResolver:
    """Resolves a package closure.

    Holds no state between calls. A single ``ResolverContext`` must not be
    resolved from several threads at once.
    """

    def resolve(
        self,
        context: ResolverContext,
        cancel_event: threading.Event | None = None,
    ) -> Resolution:
        """Resolve *context* into an ordered install set.

        Args:
            context: The request and the candidate universe.
            cancel_event: Cooperative cancel signal, checked at the start,
                after validation, and after grouping.

        Returns:
            A ``Resolution``; check ``success`` or ``failure``.

        Raises:
            ResolutionCancelled: If *cancel_event* is set at a checkpoint.
        """
        _check_cancelled(cancel_event)

        missing = find_missing_required(context.required_ids, context.available)
        if missing is not None:
            logger.debug("Required package %s has no candidates", missing)
            return Resolution(
                success=False,
                failure=FailureKind.INPUT,
                message=f"Unable to find package '{missing}'.",
            )

        _check_cancelled(cancel_event)

        ignore = context.behavior is DependencyBehavior.IGNORE
        packages = [
            ResolverPackage.from_candidate(candidate, ignore_dependencies=ignore)
            for candidate in context.available
        ]
        groups = group_candidates(packages, context.required_ids)
        logger.debug(
            "Resolving %d required packages over %d groups (%s)",
            len(context.required_ids),
            len(groups),
            context.behavior.value,
        )

        _check_cancelled(cancel_event)

        best_attempt: list[ResolverPackage] = []

        def _record(partial: list[ResolverPackage]) -> None:
            nonlocal best_attempt
            best_attempt = partial

        comparer = ResolverComparer(context.behavior, context.preferred_versions)
        solver: CombinationSolver[ResolverPackage] = CombinationSolver(
            compare=comparer.compare,
            should_reject_pair=should_reject_pair,
            diagnostic_output=_record,
        )
        solution = solver.find_solution(groups, cancel_event)

        if solution is not None:
            chosen = [package for package in solution if not package.absent]
            if chosen:
                cycle = find_circular_dependency(chosen)
                if cycle:
                    path = [str(package) for package in cycle]
                    return Resolution(
                        success=False,
                        failure=FailureKind.CIRCULAR,
                        message=f"Circular dependency detected '{' => '.join(path)}'.",
                        cycle=path,
                    )
                ordered = topological_sort(chosen)
                logger.debug("Resolved %d packages", len(ordered))
                return Resolution(success=True, packages=ordered)

        message = build_diagnostic_message(
            best_attempt, packages, context.installed, context.targets
        )
        return Resolution(
            success=False,
            failure=FailureKind.CONSTRAINT,
            message=message,
        )


def resolve(
    context: ResolverContext, cancel_event: threading.Event | None = None
) -> Resolution:
    """Convenience wrapper around ``PackageResolver().resolve``."""
    return PackageResolver().resolve(context, cancel_event)
