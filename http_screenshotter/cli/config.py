from rich.console import Console
import typer

from http_screenshotter.cli.common import verbose_callback
from http_screenshotter.config import get_config

config_app = typer.Typer()


@config_app.callback()
def config(
    verbose: bool = typer.Option(
        False,
        callback=verbose_callback,
        help="show the log messages",
    ),
):
    "configuration cli"


@config_app.command()
def show(
    verbose: bool = typer.Option(
        False,
        callback=verbose_callback,
        help="show the log messages",
    ),
):
    Console(stderr=True).print(get_config())
