"""Capture one target: navigate, verify the origin, screenshot, store.

``run_capture`` returns a ``CaptureOutcome`` carrying the exit status; the CLI
owns printing the report and exiting.
"""
import tempfile
from pathlib import Path
from typing import Callable, Optional

from pydantic import BaseModel

from http_screenshotter.config import Config, get_config
from http_screenshotter.console import console
from http_screenshotter.models import CaptureConfig, CaptureReport, ResolvedLocation
from http_screenshotter.renderer import PageRenderer
from http_screenshotter.store import publish

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_MISMATCH = 1
EXIT_CAPTURE_FAILED = 2


class CaptureOutcome(BaseModel):
    status: int
    report: Optional[CaptureReport] = None
    diagnostic: Optional[str] = None


async def screenshot_and_store(
    renderer, location: ResolvedLocation, directory: str, config: Config
) -> CaptureReport:
    with tempfile.TemporaryDirectory(prefix="http-screenshot") as tmp:
        shot = Path(tmp) / "capture.png"
        await renderer.screenshot(shot)
        artifact = publish(shot, directory)

    if config.mirror_enabled:
        await config.s3_client.mirror(artifact)

    return CaptureReport(url=location.href, hash=artifact.hash, file=artifact.path)


async def run_capture(
    request: CaptureConfig,
    config: Optional[Config] = None,
    renderer_factory: Optional[Callable] = None,
) -> CaptureOutcome:
    config = config or get_config()
    renderer_factory = renderer_factory or PageRenderer
    target = request.target

    try:
        async with renderer_factory(config) as renderer:
            await renderer.navigate(target.url)

            try:
                location = await renderer.location()
                if not target.matches(location):
                    console.log(f"Refusing to capture {location.href}")
                    return CaptureOutcome(
                        status=EXIT_MISMATCH,
                        diagnostic=location.describe_mismatch(target),
                    )
                report = await screenshot_and_store(
                    renderer, location, request.directory, config
                )
            except Exception as e:
                console.log(f"Capture of {target.url} failed: {e!r}")
                return CaptureOutcome(status=EXIT_CAPTURE_FAILED)
    except Exception as e:
        console.log(f"Browser session for {target.url} failed: {e!r}")
        return CaptureOutcome(status=EXIT_CAPTURE_FAILED)

    return CaptureOutcome(status=EXIT_OK, report=report)
