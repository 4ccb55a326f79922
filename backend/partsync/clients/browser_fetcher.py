"""
Browser fetcher — retrieves image bytes through a headless Chromium page.

Some catalog image hosts only answer real browsers, so downloads go
through Playwright rather than a plain HTTP client. One browser is
launched lazily and shared; every fetch gets its own page, closed on
exit whatever the outcome.
Version: 1.0.0
"""
import asyncio
import logging
from typing import Optional

from playwright.async_api import Browser, Error as PlaywrightError, Playwright, async_playwright

from partsync.core.config import Settings
from partsync.core.constants.catalog import BROWSER_USER_AGENT
from partsync.core.exceptions import MediaFetchError

logger = logging.getLogger("browser_fetcher")


class BrowserFetcher:
    def __init__(self, settings: Settings) -> None:
        self._timeout_ms = settings.browser_navigation_timeout_ms
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    async def _get_browser(self) -> Browser:
        async with self._lock:
            if self._browser is None:
                self._playwright = await async_playwright().start()
                self._browser = await self._playwright.chromium.launch(headless=True)
                logger.info("browser fetcher launched chromium")
            return self._browser

    async def fetch_remote_bytes(self, url: str) -> bytes:
        """Navigate to url and return the response body; non-200 raises MediaFetchError."""
        browser = await self._get_browser()
        context = await browser.new_context(user_agent=BROWSER_USER_AGENT)
        try:
            page = await context.new_page()
            try:
                response = await page.goto(url, timeout=self._timeout_ms)
            except PlaywrightError as exc:
                raise MediaFetchError(url, f"navigation failed: {exc}") from exc

            if response is None:
                raise MediaFetchError(url, "no response")
            if response.status != 200:
                raise MediaFetchError(url, f"status {response.status}")
            return await response.body()
        finally:
            await context.close()

    async def aclose(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
