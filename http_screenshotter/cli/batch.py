import asyncio
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table
import typer

from http_screenshotter.batch import OUTCOMES, run_batch
from http_screenshotter.cli.common import verbose_callback
from http_screenshotter.config import get_config


def summary_table(stats) -> Table:
    table = Table(title="batch summary")
    for outcome in OUTCOMES:
        table.add_column(outcome.title(), justify="right")
    table.add_row(*(str(stats[outcome]) for outcome in OUTCOMES))
    return table


def batch(
    targets: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="file with one target per line: protocol host and an optional port",
    ),
    directory: str = typer.Argument(..., help="directory to store <hash>.png in"),
    timeout: Optional[float] = typer.Option(
        None,
        help="seconds before a stalled capture is killed",
    ),
    verbose: bool = typer.Option(
        False,
        callback=verbose_callback,
        help="show the log messages",
    ),
):
    """
    Capture every target in a file, one at a time.
    Each successful capture prints its JSON line, a summary goes to stderr.
    """
    if timeout is None:
        timeout = get_config().batch_timeout_s

    def echo_report(report):
        typer.echo(report.model_dump_json())

    stats = asyncio.run(run_batch(targets, directory, timeout, on_report=echo_report))
    Console(stderr=True).print(summary_table(stats))
