"""Human-readable explanations for failed resolutions.

When the solver finds no complete assignment, the best attempt it saw is
examined package by package, closest to the user's targets first, and the
first broken dependency becomes the message. Packages far from what the
user asked for are usually not what they can act on, so distance decides
which of several problems gets reported.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from packsolve.core.dependency.graph import MAX_DISTANCE, distances_from_targets
from packsolve.core.dependency.models import (
    InstalledPin,
    PackageDependency,
    PackageId,
    ResolverPackage,
)

NO_SOLUTION = "Unable to resolve dependencies."


def describe_constraint(package: ResolverPackage, dependency: PackageDependency) -> str:
    """Render ``"a 1.0.0 constraint: b (≥ 1.0.0)"``."""
    text = f"{package.id} {package.version} constraint: {dependency.id}"
    if dependency.version_range is not None:
        pretty = dependency.version_range.pretty()
        if pretty:
            text += f" {pretty}"
    return text


def _unsatisfiable(
    package_id: PackageId,
    packages: Sequence[ResolverPackage],
    pins: dict[PackageId, InstalledPin],
) -> str:
    dependents = []
    for package in packages:
        dependency = package.find_dependency(package_id)
        if dependency is not None:
            dependents.append((package, dependency))
    dependents.sort(key=lambda pair: (pair[0].id, pair[0].version))

    listing = ", ".join(f"'{describe_constraint(p, d)}'" for p, d in dependents)
    message = f"Unable to find a version of '{package_id}' that is compatible with {listing}."

    pin = pins.get(package_id)
    if pin is not None and pin.allowed_range is not None:
        message += (
            f" '{package_id}' has an additional constraint "
            f"{pin.allowed_range.pretty()} defined by an installed package."
        )
    return message


def build_diagnostic_message(
    solution: Iterable[ResolverPackage | None],
    available: Iterable[ResolverPackage],
    installed: Iterable[InstalledPin],
    target_ids: Iterable[PackageId],
) -> str:
    """Explain why *solution*, the solver's best attempt, cannot work.

    Args:
        solution: The best partial or rejected assignment observed.
        available: Every package known to the resolver. Absent entries
            count as "known" identities.
        installed: Installed package pins.
        target_ids: Identities the user acted on.

    Returns:
        A single-sentence explanation; the generic ``NO_SOLUTION`` when
        nothing more specific can be said.
    """
    available = list(available)
    if all(package.absent for package in available):
        return NO_SOLUTION

    packages = [p for p in solution if p is not None and not p.absent]
    known_ids = {package.id for package in available}
    pins = {pin.id: pin for pin in installed}

    chosen: dict[PackageId, ResolverPackage] = {}
    for package in packages:
        chosen.setdefault(package.id, package)

    distances = distances_from_targets(target_ids, packages)
    ordered = sorted(packages, key=lambda p: distances.get(p.id, MAX_DISTANCE))

    for package in ordered:
        for dependency in package.dependencies:
            target = chosen.get(dependency.id)
            if target is None:
                if dependency.id not in known_ids:
                    return f"Unable to resolve dependency '{dependency.id}'."
                return _unsatisfiable(dependency.id, packages, pins)

            if not dependency.accepts(target.version):
                pin = pins.get(dependency.id)
                if pin is not None and pin.allowed_range is not None:
                    return _unsatisfiable(dependency.id, packages, pins)
                return (
                    f"{NO_SOLUTION} '{target}' is not compatible with "
                    f"'{describe_constraint(package, dependency)}'."
                )

    return NO_SOLUTION
