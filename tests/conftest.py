"""Shared fixtures: a fake page renderer standing in for Playwright."""
from pathlib import Path

import pytest

from http_screenshotter.config import Config
from http_screenshotter.models import ResolvedLocation

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"not really a png, but bytes are bytes"


class FakeRenderer:
    """Records what the capture flow asks of it.

    The instance doubles as the renderer factory, so it can be passed as
    ``renderer_factory`` or patched in place of ``PageRenderer``.
    """

    def __init__(
        self,
        location: ResolvedLocation,
        image: bytes = PNG_BYTES,
        navigation_ok: bool = True,
        screenshot_error: Exception | None = None,
        enter_error: Exception | None = None,
    ):
        self.resolved = location
        self.image = image
        self.navigation_ok = navigation_ok
        self.screenshot_error = screenshot_error
        self.enter_error = enter_error
        self.config = None
        self.created = 0
        self.entered = False
        self.closed = False
        self.navigated: list[str] = []
        self.shots: list[Path] = []

    def __call__(self, config):
        self.config = config
        self.created += 1
        return self

    async def __aenter__(self):
        if self.enter_error is not None:
            raise self.enter_error
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True

    async def navigate(self, url: str) -> bool:
        self.navigated.append(url)
        return self.navigation_ok

    async def location(self) -> ResolvedLocation:
        return self.resolved

    async def screenshot(self, path: Path) -> None:
        self.shots.append(Path(path))
        if self.screenshot_error is not None:
            raise self.screenshot_error
        Path(path).write_bytes(self.image)


def location(url_protocol: str, hostname: str, port: str = "", path: str = "/"):
    port_part = f":{port}" if port else ""
    return ResolvedLocation(
        protocol=f"{url_protocol}:",
        hostname=hostname,
        port=port,
        href=f"{url_protocol}://{hostname}{port_part}{path}",
    )


@pytest.fixture
def config():
    return Config(_env_file=None, aws_bucket_name=None)


@pytest.fixture
def shots_dir(tmp_path):
    directory = tmp_path / "shots"
    directory.mkdir()
    return directory


@pytest.fixture
def make_renderer():
    return FakeRenderer


@pytest.fixture
def make_location():
    return location


@pytest.fixture
def patch_capture(monkeypatch, config):
    """Route the CLI's capture flow through a fake renderer and test config."""

    def _patch(renderer: FakeRenderer) -> FakeRenderer:
        monkeypatch.setattr("http_screenshotter.capture.PageRenderer", renderer)
        monkeypatch.setattr("http_screenshotter.capture.get_config", lambda: config)
        monkeypatch.setattr(
            "http_screenshotter.cli.capture.get_config", lambda: config
        )
        return renderer

    return _patch
