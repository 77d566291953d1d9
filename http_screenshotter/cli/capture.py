import asyncio
from typing import Optional

from pydantic import ValidationError
import typer

from http_screenshotter.capture import EXIT_CAPTURE_FAILED, EXIT_USAGE, run_capture
from http_screenshotter.cli.common import verbose_callback
from http_screenshotter.config import get_config
from http_screenshotter.console import console
from http_screenshotter.models import CaptureConfig

USAGE = "Usage: http-screenshotter <directory> <protocol> <host> [port]"

# extra positionals are ignored and dash-prefixed hosts stay positional, so
# click never rejects an invocation with its own exit status
CAPTURE_CONTEXT = {"allow_extra_args": True, "ignore_unknown_options": True}

capture_app = typer.Typer(add_completion=False)


@capture_app.command(context_settings=CAPTURE_CONTEXT)
def capture(
    ctx: typer.Context,
    directory: Optional[str] = typer.Argument(
        None, help="directory to store <hash>.png in"
    ),
    protocol: Optional[str] = typer.Argument(
        None, help="protocol hint, anything starting with ssl or containing https is https"
    ),
    host: Optional[str] = typer.Argument(None, help="hostname or IP to capture"),
    port: Optional[str] = typer.Argument(None, help="port, omitted for the default"),
    verbose: bool = typer.Option(
        False,
        callback=verbose_callback,
        help="show the log messages",
    ),
):
    """
    Capture a full-page screenshot of one origin and store it by content hash.
    Prints {"url", "hash", "file"} as JSON on success.
    """
    if directory is None or protocol is None or host is None:
        typer.echo(USAGE, err=True)
        raise typer.Exit(EXIT_USAGE)

    if ctx.args:
        console.log(f"Ignoring extra arguments: {' '.join(ctx.args)}")

    try:
        request = CaptureConfig.from_args(directory, protocol, host, port)
    except ValidationError as e:
        typer.echo(f"{USAGE}\n{e}", err=True)
        raise typer.Exit(EXIT_USAGE)

    try:
        config = get_config()
    except ValidationError as e:
        typer.echo(f"Invalid configuration\n{e}", err=True)
        raise typer.Exit(EXIT_CAPTURE_FAILED)

    outcome = asyncio.run(run_capture(request, config))
    if outcome.report is not None:
        typer.echo(outcome.report.model_dump_json())
    elif outcome.diagnostic:
        typer.echo(outcome.diagnostic)
    raise typer.Exit(outcome.status)


def main():
    capture_app()


if __name__ == "__main__":
    main()
