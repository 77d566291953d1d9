import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError

from http_screenshotter.renderer import PageRenderer


@pytest.fixture
def playwright(monkeypatch):
    """A stand-in for the object ``async_playwright().start()`` returns."""
    pw = MagicMock()
    pw.stop = AsyncMock()
    browser = MagicMock()
    browser.close = AsyncMock()
    context = MagicMock()
    context.close = AsyncMock()
    page = MagicMock()
    page.goto = AsyncMock(return_value=MagicMock(status=200))
    page.evaluate = AsyncMock()
    page.screenshot = AsyncMock()

    pw.chromium.launch = AsyncMock(return_value=browser)
    browser.new_context = AsyncMock(return_value=context)
    context.new_page = AsyncMock(return_value=page)

    starter = MagicMock()
    starter.start = AsyncMock(return_value=pw)
    monkeypatch.setattr(
        "http_screenshotter.renderer.async_playwright", MagicMock(return_value=starter)
    )
    pw.browser, pw.context, pw.page = browser, context, page
    return pw


def session(config, body):
    async def run():
        async with PageRenderer(config) as renderer:
            return await body(renderer)

    return asyncio.run(run())


def test_session_ignores_tls_errors_and_closes(config, playwright):
    session(config, lambda renderer: asyncio.sleep(0))

    playwright.chromium.launch.assert_awaited_once_with(headless=True)
    kwargs = playwright.browser.new_context.await_args.kwargs
    assert kwargs["ignore_https_errors"] is True
    playwright.context.close.assert_awaited_once()
    playwright.browser.close.assert_awaited_once()
    playwright.stop.assert_awaited_once()


def test_session_closes_on_error(config, playwright):
    async def boom(renderer):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        session(config, boom)

    playwright.browser.close.assert_awaited_once()
    playwright.stop.assert_awaited_once()


def test_failed_launch_stops_driver(config, playwright):
    playwright.chromium.launch.side_effect = PlaywrightError("Executable doesn't exist")

    with pytest.raises(PlaywrightError):
        session(config, lambda renderer: asyncio.sleep(0))

    playwright.stop.assert_awaited_once()


def test_navigate_waits_for_network_idle(config, playwright):
    assert session(config, lambda renderer: renderer.navigate("http://example.test"))
    playwright.page.goto.assert_awaited_once_with(
        "http://example.test", wait_until="networkidle", timeout=30000
    )


def test_navigate_swallows_errors(config, playwright):
    playwright.page.goto.side_effect = PlaywrightError(
        "net::ERR_CONNECTION_REFUSED at http://example.test/"
    )
    assert not session(config, lambda renderer: renderer.navigate("http://example.test"))


def test_location(config, playwright):
    playwright.page.evaluate.return_value = {
        "protocol": "https:",
        "hostname": "example.test",
        "port": "8443",
        "href": "https://example.test:8443/",
    }

    location = session(config, lambda renderer: renderer.location())

    assert location.origin == ("https", "example.test", "8443")
    assert location.href == "https://example.test:8443/"


def test_screenshot_is_full_page(config, playwright, tmp_path):
    session(config, lambda renderer: renderer.screenshot(tmp_path / "shot.png"))
    playwright.page.screenshot.assert_awaited_once_with(
        path=str(tmp_path / "shot.png"), full_page=True, type="png"
    )
