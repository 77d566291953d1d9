from pathlib import Path

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from http_screenshotter.config import Config
from http_screenshotter.console import console
from http_screenshotter.models import ResolvedLocation

READ_LOCATION_JS = """() => ({
    protocol: document.location.protocol,
    hostname: document.location.hostname,
    port: document.location.port,
    href: document.location.href,
})"""


class PageRenderer:
    """One isolated browser session, used as an async context manager.

    The browser is launched on enter and always torn down on exit, whatever
    happened inside the block.
    """

    def __init__(self, config: Config):
        self.config = config
        self._playwright = None
        self._browser = None
        self._context = None
        self.page = None

    async def __aenter__(self):
        try:
            self._playwright = await async_playwright().start()
            browser_type = getattr(self._playwright, self.config.browser_name)
            self._browser = await browser_type.launch(headless=self.config.headless)
            self._context = await self._browser.new_context(
                ignore_https_errors=True,
                viewport={
                    "width": self.config.viewport_width,
                    "height": self.config.viewport_height,
                },
            )
            self.page = await self._context.new_page()
        except BaseException:
            await self.close()
            raise
        console.log(f"{self.config.browser_name} session started")
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self):
        if self._context is not None:
            try:
                await self._context.close()
            except PlaywrightError as e:
                console.log(f"Failed to close browser context: {e}")
            self._context = None
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError as e:
                console.log(f"Failed to close browser: {e}")
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
        self.page = None

    async def navigate(self, url: str) -> bool:
        """Load ``url``, swallowing navigation failures.

        Returns whether navigation reported success. Callers should inspect
        :meth:`location` rather than trust this.
        """
        try:
            response = await self.page.goto(
                url,
                wait_until=self.config.wait_until,
                timeout=self.config.navigation_timeout_ms,
            )
        except PlaywrightError as e:
            console.log(f"Navigation to {url} failed: {e}")
            return False

        if response is not None:
            console.log(f"Navigated to {url} ({response.status})")
        return True

    async def location(self) -> ResolvedLocation:
        data = await self.page.evaluate(READ_LOCATION_JS)
        return ResolvedLocation.model_validate(data)

    async def screenshot(self, path: Path) -> None:
        await self.page.screenshot(path=str(path), full_page=True, type="png")
