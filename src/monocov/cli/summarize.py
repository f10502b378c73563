"""monocov summarize command - print one aggregated snapshot."""

import json
from pathlib import Path

import click

from monocov.core.console import get_console, pluralize, status
from monocov.core.errors import MonoCovError
from monocov.coverage import NamingPolicy, aggregate, snapshot_to_dict
from monocov.report.terminal import snapshot_table


@click.command()
@click.argument("root", type=click.Path(path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--depth", type=click.IntRange(min=1), help="Path segments kept in project ids")
@click.option("--details", is_flag=True, help="Include per-file LCOV records in JSON output")
def summarize_command(root: Path, as_json: bool, depth: int | None, details: bool) -> None:
    """Aggregate the coverage artifacts under ROOT and print per-project figures."""
    try:
        snapshot = aggregate(root, naming=NamingPolicy(depth=depth))
    except MonoCovError as e:
        raise click.ClickException(e.message) from e

    if as_json:
        click.echo(json.dumps(snapshot_to_dict(snapshot, include_detail=details), indent=2))
        return

    if not snapshot:
        status(f"No coverage data found in {root}", style="warning")
        return

    get_console().print(snapshot_table(snapshot))
    status(f"Found {pluralize(len(snapshot), 'project')}", style="success")
