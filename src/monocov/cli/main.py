"""MonoCov CLI - monocov command."""

import click

from monocov import __version__
from monocov.cli.diff import diff_command
from monocov.cli.report import report_command
from monocov.cli.summarize import summarize_command
from monocov.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="monocov")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """MonoCov - coverage aggregation and PR reports for monorepos."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "INFO")


cli.add_command(report_command, name="report")
cli.add_command(summarize_command, name="summarize")
cli.add_command(diff_command, name="diff")


if __name__ == "__main__":
    cli()
