"""
Headless browser collaborator built on Playwright.

A launcher starts one Chromium instance per workflow run; the session closes
the browser and stops the Playwright driver exactly once.
"""

from typing import Optional

import structlog
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, async_playwright

from email_automation.verification.exceptions import BrowserAutomationError


logger = structlog.get_logger(__name__)

CHROMIUM_ARGS = [
    "--disable-gpu",
    "--disable-dev-shm-usage",
    "--no-sandbox",
    "--disable-setuid-sandbox",
]


class PlaywrightBrowserSession:
    """A running Chromium browser with its Playwright driver."""

    def __init__(self, playwright, browser, navigation_timeout: float, success_selector: str):
        self._playwright = playwright
        self._browser = browser
        self.navigation_timeout = navigation_timeout
        self.success_selector = success_selector
        self._closed = False

    async def navigate(self, url: str) -> Page:
        """
        Open `url` in a new page and wait for the network to settle.

        Raises:
            BrowserAutomationError: navigation failed or timed out
        """
        try:
            page = await self._browser.new_page()
            await page.goto(
                url,
                wait_until="networkidle",
                timeout=self.navigation_timeout * 1000,
            )
        except PlaywrightError as e:
            raise BrowserAutomationError(
                f"Navigation failed: {e.message}",
                details={"url": url},
            ) from e

        logger.info("Verification page loaded", url=url)
        return page

    async def wait_for_completion_signal(self, page: Page, timeout: float) -> str:
        """
        Wait for the success element and return its text.

        Args:
            page: Page returned by navigate()
            timeout: Seconds to wait for the element

        Raises:
            BrowserAutomationError: the element did not appear in time
        """
        try:
            element = await page.wait_for_selector(self.success_selector, timeout=timeout * 1000)
            text = await element.text_content() if element is not None else None
        except PlaywrightError as e:
            raise BrowserAutomationError(
                f"Completion signal not observed: {e.message}",
                details={"selector": self.success_selector, "timeout_seconds": timeout},
            ) from e

        return (text or "").strip()

    async def close(self) -> None:
        """Close browser and playwright. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        try:
            await self._browser.close()
        except PlaywrightError as e:
            logger.warning("Browser close failed", error=e.message)
        finally:
            await self._playwright.stop()
        logger.info("Playwright browser closed")


class PlaywrightBrowserLauncher:
    """Launches headless Chromium sessions."""

    def __init__(
        self,
        headless: bool = True,
        executable_path: Optional[str] = None,
        navigation_timeout: float = 30.0,
        success_selector: str = ".verification-success",
    ):
        self.headless = headless
        self.executable_path = executable_path
        self.navigation_timeout = navigation_timeout
        self.success_selector = success_selector

    @classmethod
    def from_settings(cls, settings) -> "PlaywrightBrowserLauncher":
        return cls(
            headless=settings.BROWSER_HEADLESS,
            executable_path=settings.BROWSER_EXECUTABLE_PATH,
            navigation_timeout=settings.BROWSER_NAVIGATION_TIMEOUT_SECONDS,
            success_selector=settings.BROWSER_SUCCESS_SELECTOR,
        )

    async def launch(self) -> PlaywrightBrowserSession:
        """
        Start Playwright and launch Chromium.

        Raises:
            BrowserAutomationError: the browser could not be started
        """
        playwright = await async_playwright().start()
        try:
            browser = await playwright.chromium.launch(
                headless=self.headless,
                executable_path=self.executable_path,
                args=CHROMIUM_ARGS,
            )
        except PlaywrightError as e:
            await playwright.stop()
            raise BrowserAutomationError(
                f"Failed to launch browser: {e.message}",
                details={"executable_path": self.executable_path},
            ) from e

        logger.info("Playwright browser launched", headless=self.headless)
        return PlaywrightBrowserSession(
            playwright,
            browser,
            navigation_timeout=self.navigation_timeout,
            success_selector=self.success_selector,
        )
