"""``packsolve check <source>...`` -- Sanity-check universe files.

Takes the highest version of every package across the given files and
reports dependency cycles among them, plus dependencies that no file
offers at all.

Exit Codes:
    0 -- No problems found.
    1 -- At least one cycle or missing dependency.
    2 -- A universe file is invalid.
"""

from __future__ import annotations

import sys

import click

from packsolve.cli.output import configure_logging, print_check_report
from packsolve.core.dependency import (
    PackageCandidate,
    PackageId,
    ResolverPackage,
    find_circular_dependency,
)
from packsolve.exceptions import UniverseFileError
from packsolve.universe import load_universe


def _highest_versions(candidates: list[PackageCandidate]) -> list[ResolverPackage]:
    highest: dict[PackageId, PackageCandidate] = {}
    for candidate in candidates:
        current = highest.get(candidate.id)
        if current is None or candidate.version > current.version:
            highest[candidate.id] = candidate
    return [ResolverPackage.from_candidate(c) for c in highest.values()]


def _missing_dependencies(candidates: list[PackageCandidate]) -> list[str]:
    offered = {candidate.id for candidate in candidates}
    missing: dict[PackageId, list[str]] = {}
    for candidate in candidates:
        for dependency in candidate.dependencies:
            if dependency.id not in offered:
                missing.setdefault(dependency.id, []).append(str(candidate))
    return [
        f"{package_id} (required by {', '.join(sorted(dependents))})"
        for package_id, dependents in sorted(missing.items())
    ]


@click.command("check")
@click.argument(
    "sources", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False)
)
@click.option("--verbose", "-v", is_flag=True, help="Log progress.")
def check_command(sources: tuple[str, ...], verbose: bool) -> None:
    """Report dependency cycles and unknown dependencies in SOURCE files."""
    configure_logging(verbose)

    try:
        candidates = [c for path in sources for c in load_universe(path).candidates]
    except UniverseFileError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    cycles = []
    cycle = find_circular_dependency(_highest_versions(candidates))
    if cycle:
        cycles.append(" => ".join(str(package) for package in cycle))
    missing = _missing_dependencies(candidates)

    print_check_report(cycles, missing)
    sys.exit(1 if cycles or missing else 0)
