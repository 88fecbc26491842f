"""Rich output formatting helpers for the packsolve CLI."""

from __future__ import annotations

import json
import logging
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from packsolve.core.dependency import FailureKind, Resolution

_FAILURE_TITLES: dict[FailureKind, str] = {
    FailureKind.INPUT: "Missing package",
    FailureKind.CONSTRAINT: "Resolution failed",
    FailureKind.CIRCULAR: "Circular dependency",
}

console = Console()


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich; debug level when *verbose*."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def resolution_to_dict(resolution: Resolution) -> dict[str, Any]:
    """Convert a resolution to a JSON-serializable dict."""
    return {
        "success": resolution.success,
        "packages": [
            {"id": package_id, "version": version}
            for package_id, version in resolution.identities
        ],
        "failure": resolution.failure.value if resolution.failure else None,
        "message": resolution.message,
        "cycle": list(resolution.cycle),
    }


def print_resolution_json(resolution: Resolution) -> None:
    """Print a resolution as indented JSON on stdout."""
    click.echo(json.dumps(resolution_to_dict(resolution), indent=2))


def print_resolution_summary(resolution: Resolution) -> None:
    """Print the install order, or the failure explanation.

    Args:
        resolution: Result of ``PackageResolver.resolve``.
    """
    if resolution.success:
        console.print(
            Panel("[bold green]Resolution successful[/bold green]",
                  title="Dependency Resolution")
        )
        if not resolution.packages:
            console.print("[dim]Nothing to install.[/dim]")
            return
        table = Table(show_header=True)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Package", style="bold")
        table.add_column("Version")
        for position, (package_id, version) in enumerate(resolution.identities, 1):
            table.add_row(str(position), package_id, version)
        console.print(table)
        return

    title = _FAILURE_TITLES.get(resolution.failure, "Resolution failed")
    console.print(Panel(f"[bold red]{title}[/bold red]", title="Dependency Resolution"))
    console.print(f"  [red]{escape(resolution.message)}[/red]", highlight=False, soft_wrap=True)


def print_check_report(cycles: list[str], missing: list[str]) -> None:
    """Print the findings of ``packsolve check``."""
    if not cycles and not missing:
        console.print("[bold green]No problems found.[/bold green]")
        return
    table = Table(title="Universe Check", show_header=True, header_style="bold")
    table.add_column("Problem", style="bold")
    table.add_column("Details")
    for cycle in cycles:
        table.add_row("[red]cycle[/red]", escape(cycle))
    for description in missing:
        table.add_row("[yellow]missing[/yellow]", escape(description))
    console.print(table)
