"""monocov diff command - compare two coverage roots."""

import json
from pathlib import Path

import click

from monocov.core.console import get_console, status
from monocov.core.errors import MonoCovError
from monocov.coverage import (
    NamingPolicy,
    RemovedPolicy,
    aggregate,
    diff_snapshots,
    diff_to_dict,
    total_line_coverage,
)
from monocov.report.markdown import format_signed
from monocov.report.terminal import diff_table


@click.command()
@click.argument("current", type=click.Path(path_type=Path))
@click.argument("base", type=click.Path(path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--show-removed", is_flag=True, help="Report projects missing from CURRENT")
@click.option("--depth", type=click.IntRange(min=1), help="Path segments kept in project ids")
@click.option(
    "--threshold",
    type=click.FloatRange(min=0),
    default=0.01,
    show_default=True,
    help="Smallest change (percentage points) highlighted",
)
def diff_command(
    current: Path,
    base: Path,
    as_json: bool,
    show_removed: bool,
    depth: int | None,
    threshold: float,
) -> None:
    """Compare coverage under CURRENT against the baseline under BASE."""
    naming = NamingPolicy(depth=depth)
    try:
        current_snapshot = aggregate(current, naming=naming)
        base_snapshot = aggregate(base, naming=naming)
    except MonoCovError as e:
        raise click.ClickException(e.message) from e

    policy = RemovedPolicy.REPORT if show_removed else RemovedPolicy.OMIT
    diffs = diff_snapshots(current_snapshot, base_snapshot, removed=policy)

    if as_json:
        click.echo(json.dumps(diff_to_dict(diffs), indent=2))
        return

    if not diffs:
        status("No projects to compare", style="warning")
        return

    get_console().print(diff_table(diffs, threshold=threshold))
    change = total_line_coverage(current_snapshot) - total_line_coverage(base_snapshot)
    status(f"Overall line coverage change: {format_signed(change)}%", style="info")
