"""packsolve CLI -- Deterministic package dependency resolution.

Entry point for the ``packsolve`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    resolve -- Resolve required packages into an ordered install set.
    check   -- Report cycles and unknown dependencies in universe files.

Usage::

    packsolve resolve feed.yaml -r MyApp
    packsolve resolve feed.yaml extra.json -r MyApp --policy highest --json
    packsolve resolve feed.yaml -r MyApp --prefer Json=12.0.1 --installed "Json=[12.0.1]"
    packsolve check feed.yaml
"""

from __future__ import annotations

import click

from packsolve import __version__
from packsolve.cli.check_cmd import check_command
from packsolve.cli.resolve_cmd import resolve_command


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """packsolve: Deterministic package dependency resolution.

    Picks one version of every needed package so that all declared
    dependency ranges hold, or explains precisely why that is impossible.
    """


# Register all subcommands
cli.add_command(resolve_command)
cli.add_command(check_command)
