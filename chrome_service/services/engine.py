"""
Chrome Engine Service.

Owns the process-wide connection to the Chromium rendering engine. The
engine is either launched locally through Playwright or attached to an
already-running instance over the DevTools protocol. Sessions get a fresh
browser context from it; a dropped connection is re-established on the
next request.
"""

import asyncio
import logging
from typing import List, Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, Playwright

from ..config import settings

logger = logging.getLogger("chrome_service.engine")


class ChromeEngine:
    """
    Supervised handle on one Chromium process.

    The handle is shared by every render session; each session receives its
    own isolated browser context and never touches another's.
    """

    def __init__(
        self,
        cdp_url: Optional[str] = None,
        headless: bool = True,
        launch_args: Optional[List[str]] = None,
    ):
        self.cdp_url = cdp_url
        self.headless = headless
        self.launch_args = list(launch_args or [])
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()
        self._initialized = False

    async def initialize(self) -> None:
        """Start Playwright and connect to (or launch) the browser."""
        async with self._lock:
            if self._initialized and self.is_connected:
                return
            await self._close_browser()

            self._playwright = await async_playwright().start()
            try:
                if self.cdp_url:
                    logger.info(f"Attaching to Chromium at {self.cdp_url}")
                    self._browser = await self._playwright.chromium.connect_over_cdp(self.cdp_url)
                else:
                    logger.info(f"Launching Chromium (headless={self.headless})")
                    self._browser = await self._playwright.chromium.launch(
                        headless=self.headless,
                        args=self.launch_args,
                    )
            except Exception:
                await self._playwright.stop()
                self._playwright = None
                raise

            self._browser.on("disconnected", self._on_disconnected)
            self._initialized = True
            logger.info(f"Chromium {self._browser.version} ready")

    async def shutdown(self) -> None:
        """Close the browser and stop Playwright."""
        async with self._lock:
            if not self._initialized:
                return
            logger.info("Shutting down Chromium engine")
            await self._close_browser()
            self._initialized = False
            logger.info("Chromium engine shut down")

    async def new_context(self) -> BrowserContext:
        """
        Create an isolated browser context for one render session.

        Reconnects first when the engine has never been reached or has gone
        away since the last request.
        """
        if not (self._initialized and self.is_connected):
            if self._initialized:
                logger.warning("Chromium connection lost, reconnecting")
            await self.initialize()

        # Viewport metrics are set per session over CDP.
        return await self._browser.new_context(no_viewport=True, java_script_enabled=True)

    async def _close_browser(self) -> None:
        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
            self._browser = None
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Error stopping Playwright: {e}")
            self._playwright = None

    def _on_disconnected(self, browser: Browser) -> None:
        logger.warning("Chromium engine disconnected")

    @property
    def is_connected(self) -> bool:
        """Whether the browser connection is currently alive."""
        return self._browser is not None and self._browser.is_connected()

    @property
    def is_initialized(self) -> bool:
        return self._initialized


# Singleton instance
chrome_engine = ChromeEngine(
    cdp_url=settings.browser_cdp_url,
    headless=settings.browser_headless,
    launch_args=settings.browser_launch_args,
)
