"""
Browser manager - Playwright browser automation

Handles browser lifecycle, viewport setup and the page operations the
capture session needs (init scripts, navigation, evaluation, screenshots).
"""

import logging
from pathlib import Path
from typing import Any

from playwright.async_api import Browser, BrowserContext, ConsoleMessage, Page, async_playwright
from playwright.async_api import Error as PlaywrightError

from frameclock.core.exceptions import BrowserError, NavigationError

logger = logging.getLogger(__name__)

HIDE_SCROLLBARS_SCRIPT = "() => { document.documentElement.style.overflow = 'hidden'; }"


class BrowserManager:
    """
    Manage a Playwright Chromium instance with a fixed viewport

    Example:
        async with BrowserManager(width=720, height=720) as manager:
            await manager.install_init_script(script)
            await manager.navigate("https://example.com")
            await manager.screenshot(Path("frame.png"))
    """

    def __init__(
        self,
        headless: bool = False,
        width: int = 720,
        height: int = 720,
        scale: float = 1.0,
    ):
        """
        Initialize browser manager

        Args:
            headless: Run browser in headless mode
            width: Viewport width in CSS pixels
            height: Viewport height in CSS pixels
            scale: Device scale factor (screenshots are width*scale wide)
        """
        self.headless = headless
        self.width = width
        self.height = height
        self.scale = scale

        self._playwright = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    async def __aenter__(self):
        """Async context manager entry"""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.stop()

    async def start(self) -> None:
        """
        Start browser instance

        Raises:
            BrowserError: If Chromium cannot be launched
        """
        if self._browser is not None:
            logger.warning("Browser already started")
            return

        logger.info("[BROWSER] Starting Playwright browser...")
        self._playwright = await async_playwright().start()
        logger.debug("Playwright started")

        try:
            self._browser = await self._playwright.chromium.launch(headless=self.headless)
        except PlaywrightError as e:
            logger.error(f"[BROWSER] Chromium launch failed: {e.message}")
            await self._playwright.stop()
            self._playwright = None
            raise BrowserError(
                f"Failed to launch Chromium: {e.message}",
                recovery_hint="Run 'frameclock verify --install' to install Playwright Chromium",
            ) from e
        logger.debug("Browser launched")

        # device_scale_factor can only be chosen when the context is created
        self._context = await self._browser.new_context(
            viewport={"width": self.width, "height": self.height},
            device_scale_factor=self.scale,
        )
        logger.debug("Context created")

        self._page = await self._context.new_page()
        self._page.on("console", self._on_console)
        self._page.on("pageerror", self._on_page_error)

        logger.info(
            f"[BROWSER] Browser started ({self.width}x{self.height} @ {self.scale}x, "
            f"headless={self.headless})"
        )

    async def stop(self) -> None:
        """Stop browser instance"""
        try:
            if self._page:
                await self._page.close()

            if self._context:
                await self._context.close()

            if self._browser:
                await self._browser.close()
        except PlaywrightError as e:
            # a crashed browser is already gone
            logger.warning(f"[BROWSER] Error while closing browser: {e.message}")
        finally:
            self._page = None
            self._context = None
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.info("Browser stopped")

    async def get_page(self) -> Page:
        """
        Get current page

        Returns:
            Playwright Page object

        Raises:
            RuntimeError: If browser not started
        """
        if self._page is None:
            raise RuntimeError("Browser not started. Call start() first.")
        return self._page

    async def install_init_script(self, script: str) -> None:
        """
        Run script in every new document before the page's own scripts

        Args:
            script: JavaScript source
        """
        page = await self.get_page()
        await page.add_init_script(script=script)
        logger.debug(f"Installed init script ({len(script)} chars)")

    async def navigate(self, url: str, wait_until: str = "load") -> None:
        """
        Navigate to URL and wait for it to finish loading

        Args:
            url: URL to navigate to
            wait_until: When to consider navigation successful
                       (load, domcontentloaded, networkidle)

        Raises:
            NavigationError: If the page cannot be loaded
        """
        page = await self.get_page()
        logger.info(f"Navigating to: {url}")
        try:
            # slow pages are waited for indefinitely
            await page.goto(url, wait_until=wait_until, timeout=0)
        except PlaywrightError as e:
            raise NavigationError(url, reason=e.message) from e

    async def hide_scrollbars(self) -> None:
        await self.evaluate(HIDE_SCROLLBARS_SCRIPT)

    async def screenshot(self, path: Path) -> Path:
        """
        Capture the viewport

        Args:
            path: Destination PNG file

        Returns:
            Path to screenshot file
        """
        page = await self.get_page()
        await page.screenshot(path=str(path), type="png")
        return path

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        """
        Execute JavaScript

        Args:
            expression: JavaScript expression or function source
            arg: Optional argument passed to a function expression

        Returns:
            Script result
        """
        page = await self.get_page()
        if arg is None:
            return await page.evaluate(expression)
        return await page.evaluate(expression, arg)

    def _on_console(self, message: ConsoleMessage) -> None:
        logger.debug(f"[PAGE] {message.type}: {message.text}")

    def _on_page_error(self, error) -> None:
        logger.warning(f"[PAGE] Uncaught error: {error}")
