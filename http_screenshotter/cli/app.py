import typer

from http_screenshotter.cli.batch import batch
from http_screenshotter.cli.capture import CAPTURE_CONTEXT, capture
from http_screenshotter.cli.common import verbose_callback
from http_screenshotter.cli.config import config_app

app = typer.Typer(
    name="screenshotter",
    help="Content-addressed full-page screenshots of web origins.",
)
app.add_typer(config_app)
app.command(context_settings=CAPTURE_CONTEXT)(capture)
app.command()(batch)


def version_callback(value: bool) -> None:
    """Callback function to print the version of the http-screenshotter package.

    Args:
        value (bool): Boolean value to determine if the version should be printed.

    Raises:
        typer.Exit: If the value is True, the version will be printed and the program will exit.

    Example:
        version_callback(True)
    """
    if value:
        from http_screenshotter.__about__ import __version__

        typer.echo(f"{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        callback=verbose_callback,
        help="show the log messages",
    ),
) -> None:
    return


if __name__ == "__main__":
    app()
