"""``packsolve resolve <source>...`` -- Compute an install set.

Loads each universe file as a package source, walks the dependencies of the
required packages across all sources, and resolves the collected
candidates into an ordered install set.

Exit Codes:
    0 -- Resolution succeeded.
    1 -- No compatible combination exists, or the result is cyclic.
    2 -- A required package is unknown, or a universe file is invalid.
"""

from __future__ import annotations

import asyncio
import sys

import click

from packsolve.cli.output import (
    configure_logging,
    print_resolution_json,
    print_resolution_summary,
)
from packsolve.core.dependency import (
    DependencyBehavior,
    FailureKind,
    InstalledPin,
    PackageId,
    PackageResolver,
    ResolverContext,
)
from packsolve.core.versioning import Version, VersionRange
from packsolve.exceptions import UniverseFileError, VersionParseError
from packsolve.remote import DependencyWalker
from packsolve.universe import load_universe

_EXIT_CODES = {
    None: 0,
    FailureKind.CONSTRAINT: 1,
    FailureKind.CIRCULAR: 1,
    FailureKind.INPUT: 2,
}


def _parse_ids(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> tuple[str, ...]:
    """Reject blank package ids."""
    for value in values:
        if not value.strip():
            raise click.BadParameter(f"package id must not be blank, got {value!r}")
    return values


def _parse_preferences(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[PackageId, Version]:
    """Parse repeated ``ID=VERSION`` options."""
    preferred: dict[PackageId, Version] = {}
    for value in values:
        package_id, sep, version = value.partition("=")
        if not sep or not package_id.strip():
            raise click.BadParameter(f"expected ID=VERSION, got {value!r}")
        try:
            preferred[PackageId(package_id)] = Version.parse(version)
        except VersionParseError as exc:
            raise click.BadParameter(str(exc)) from exc
    return preferred


def _parse_installed(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> list[InstalledPin]:
    """Parse repeated ``ID`` or ``ID=RANGE`` options."""
    pins: list[InstalledPin] = []
    for value in values:
        package_id, sep, allowed = value.partition("=")
        if not package_id.strip():
            raise click.BadParameter(f"expected ID or ID=RANGE, got {value!r}")
        try:
            allowed_range = VersionRange.parse(allowed) if sep else None
        except VersionParseError as exc:
            raise click.BadParameter(str(exc)) from exc
        pins.append(InstalledPin(id=PackageId(package_id), allowed_range=allowed_range))
    return pins


@click.command("resolve")
@click.argument(
    "sources", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False)
)
@click.option(
    "--require", "-r", "required", multiple=True, required=True,
    callback=_parse_ids,
    help="Package that must be installed (repeatable).",
)
@click.option(
    "--target", "-t", "targets", multiple=True,
    callback=_parse_ids,
    help="Package the user acted on, for diagnostics (default: required).",
)
@click.option(
    "--policy",
    type=click.Choice([b.value for b in DependencyBehavior], case_sensitive=False),
    default=DependencyBehavior.LOWEST.value,
    envvar="PACKSOLVE_POLICY",
    show_default=True,
    help="Which dependency version to try first.",
)
@click.option(
    "--prefer", "preferred", multiple=True, metavar="ID=VERSION",
    callback=_parse_preferences,
    help="Try this exact version of a package first (repeatable).",
)
@click.option(
    "--installed", "installed", multiple=True, metavar="ID[=RANGE]",
    callback=_parse_installed,
    help="Package already installed, optionally with its allowed range (repeatable).",
)
@click.option("--json", "as_json", is_flag=True, help="Output results as JSON.")
@click.option("--verbose", "-v", is_flag=True, help="Log resolver progress.")
def resolve_command(
    sources: tuple[str, ...],
    required: tuple[str, ...],
    targets: tuple[str, ...],
    policy: str,
    preferred: dict[PackageId, Version],
    installed: list[InstalledPin],
    as_json: bool,
    verbose: bool,
) -> None:
    """Resolve REQUIRED packages against one or more universe files.

    Each SOURCE is a YAML or JSON universe file; all are queried together.
    Preferences and installed pins found in the files apply too, with
    command-line values taking precedence.
    """
    configure_logging(verbose)

    try:
        universes = [load_universe(path) for path in sources]
    except UniverseFileError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    merged_preferred: dict[PackageId, Version] = {}
    merged_installed: dict[PackageId, InstalledPin] = {}
    for universe in universes:
        merged_preferred.update(universe.preferred)
        merged_installed.update((pin.id, pin) for pin in universe.installed)
    merged_preferred.update(preferred)
    merged_installed.update((pin.id, pin) for pin in installed)

    walker = DependencyWalker([universe.as_source() for universe in universes])
    available = asyncio.run(walker.collect(required))

    context = ResolverContext(
        required_ids=required,
        target_ids=targets,
        behavior=DependencyBehavior.parse(policy),
        preferred_versions=merged_preferred,
        installed=tuple(merged_installed.values()),
        available=tuple(available),
    )
    resolution = PackageResolver().resolve(context)

    if as_json:
        print_resolution_json(resolution)
    else:
        print_resolution_summary(resolution)
    sys.exit(_EXIT_CODES[resolution.failure])
