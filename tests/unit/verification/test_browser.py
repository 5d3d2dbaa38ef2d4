"""Unit tests for the Playwright browser collaborator (Playwright mocked)."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError

from email_automation.verification.browser import (
    CHROMIUM_ARGS,
    PlaywrightBrowserLauncher,
    PlaywrightBrowserSession,
)
from email_automation.verification.exceptions import BrowserAutomationError


def make_session(page=None, selector: str = ".verification-success"):
    playwright = MagicMock()
    playwright.stop = AsyncMock()
    browser = MagicMock()
    browser.new_page = AsyncMock(return_value=page or MagicMock())
    browser.close = AsyncMock()
    session = PlaywrightBrowserSession(playwright, browser, navigation_timeout=15.0, success_selector=selector)
    return session, playwright, browser


class TestPlaywrightBrowserSession:
    @pytest.mark.asyncio
    async def test_navigate(self):
        page = MagicMock()
        page.goto = AsyncMock()
        session, _, _ = make_session(page)

        assert await session.navigate("https://app.example.com/verify") is page
        page.goto.assert_awaited_once_with(
            "https://app.example.com/verify", wait_until="networkidle", timeout=15000.0
        )

    @pytest.mark.asyncio
    async def test_navigation_error(self):
        page = MagicMock()
        page.goto = AsyncMock(side_effect=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))
        session, _, _ = make_session(page)

        with pytest.raises(BrowserAutomationError, match="ERR_NAME_NOT_RESOLVED"):
            await session.navigate("https://nowhere.example/verify")

    @pytest.mark.asyncio
    async def test_completion_signal_text(self):
        element = MagicMock()
        element.text_content = AsyncMock(return_value="  Email verified!  ")
        page = MagicMock()
        page.wait_for_selector = AsyncMock(return_value=element)
        session, _, _ = make_session(selector="#done")

        assert await session.wait_for_completion_signal(page, timeout=5.0) == "Email verified!"
        page.wait_for_selector.assert_awaited_once_with("#done", timeout=5000.0)

    @pytest.mark.asyncio
    async def test_completion_signal_missing(self):
        page = MagicMock()
        page.wait_for_selector = AsyncMock(side_effect=PlaywrightError("Timeout 5000ms exceeded"))
        session, _, _ = make_session()

        with pytest.raises(BrowserAutomationError) as exc_info:
            await session.wait_for_completion_signal(page, timeout=5.0)
        assert exc_info.value.details["selector"] == ".verification-success"

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        session, playwright, browser = make_session()

        await session.close()
        await session.close()

        browser.close.assert_awaited_once()
        playwright.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_driver_stopped_when_browser_close_fails(self):
        session, playwright, browser = make_session()
        browser.close.side_effect = PlaywrightError("Target closed")

        await session.close()

        playwright.stop.assert_awaited_once()


class TestPlaywrightBrowserLauncher:
    @staticmethod
    def patch_playwright(monkeypatch, launch: AsyncMock) -> MagicMock:
        playwright = MagicMock()
        playwright.chromium.launch = launch
        playwright.stop = AsyncMock()
        context_manager = MagicMock()
        context_manager.start = AsyncMock(return_value=playwright)
        monkeypatch.setattr(
            "email_automation.verification.browser.async_playwright",
            MagicMock(return_value=context_manager),
        )
        return playwright

    @pytest.mark.asyncio
    async def test_launch(self, monkeypatch):
        playwright = self.patch_playwright(monkeypatch, AsyncMock(return_value=MagicMock()))
        launcher = PlaywrightBrowserLauncher(headless=True, navigation_timeout=20.0, success_selector="#ok")

        session = await launcher.launch()

        playwright.chromium.launch.assert_awaited_once_with(
            headless=True, executable_path=None, args=CHROMIUM_ARGS
        )
        assert session.navigation_timeout == 20.0
        assert session.success_selector == "#ok"

    @pytest.mark.asyncio
    async def test_launch_failure_stops_driver(self, monkeypatch):
        launch = AsyncMock(side_effect=PlaywrightError("Executable doesn't exist"))
        playwright = self.patch_playwright(monkeypatch, launch)

        with pytest.raises(BrowserAutomationError, match="Failed to launch browser"):
            await PlaywrightBrowserLauncher().launch()

        playwright.stop.assert_awaited_once()

    def test_from_settings(self, test_settings):
        launcher = PlaywrightBrowserLauncher.from_settings(test_settings)
        assert launcher.headless == test_settings.BROWSER_HEADLESS
        assert launcher.success_selector == test_settings.BROWSER_SUCCESS_SELECTOR
