"""Tests for browser session management."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from storefront_e2e.browser import BrowserConfig, BrowserManager, browser_session
from storefront_e2e.config import ConfigManager


def make_playwright():
    """Mock playwright with a chromium launcher, browser, context and page."""
    playwright = MagicMock()
    browser = MagicMock()
    context = MagicMock()
    page = MagicMock()

    playwright.chromium.launch = AsyncMock(return_value=browser)
    playwright.firefox.launch = AsyncMock(return_value=browser)
    playwright.stop = AsyncMock()
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()
    context.set_default_timeout = MagicMock()
    context.new_page = AsyncMock(return_value=page)
    context.close = AsyncMock()

    async_playwright = MagicMock()
    async_playwright.return_value.start = AsyncMock(return_value=playwright)
    return async_playwright, playwright, browser, context, page


class TestBrowserConfig:
    """Tests for BrowserConfig dataclass."""

    def test_default_values(self):
        config = BrowserConfig()
        assert config.browser_type == "chromium"
        assert config.headless is True
        assert config.viewport_width == 1280
        assert config.viewport_height == 720
        assert config.timeout_ms == 30000
        assert config.viewport == {"width": 1280, "height": 720}

    def test_unsupported_browser(self):
        with pytest.raises(ValueError, match="Unsupported browser type"):
            BrowserConfig(browser_type="netscape")

    def test_from_config(self, clean_env, tmp_path):
        """Test values are read from the harness configuration."""
        config = ConfigManager(
            base={"browser": {"type": "firefox", "headless": False, "slow_mo": 50}, "timeouts": {"default_timeout": 45000}},
            config_dir=tmp_path,
            env_file=None,
        )

        browser_config = BrowserConfig.from_config(config)

        assert browser_config.browser_type == "firefox"
        assert browser_config.headless is False
        assert browser_config.slow_mo == 50
        assert browser_config.viewport_width == 1280
        assert browser_config.timeout_ms == 45000


class TestBrowserManager:
    """Tests for BrowserManager class."""

    def test_init_default_config(self):
        manager = BrowserManager()
        assert manager.config.headless is True
        assert manager.page is None
        assert manager.context is None

    @pytest.mark.asyncio
    async def test_start_creates_browser(self):
        """Test that start launches the configured browser and opens a page."""
        async_playwright, playwright, browser, context, page = make_playwright()
        manager = BrowserManager(BrowserConfig(browser_type="firefox", slow_mo=25))

        with patch("playwright.async_api.async_playwright", async_playwright):
            await manager.start()

        playwright.firefox.launch.assert_awaited_once_with(headless=True, slow_mo=25)
        playwright.chromium.launch.assert_not_called()
        context.set_default_timeout.assert_called_once_with(30000)
        assert browser.new_context.call_args.kwargs["viewport"] == {"width": 1280, "height": 720}
        assert manager.page is page
        assert manager.context is context

    @pytest.mark.asyncio
    async def test_stop_closes_everything(self):
        async_playwright, playwright, browser, context, _ = make_playwright()
        manager = BrowserManager()

        with patch("playwright.async_api.async_playwright", async_playwright):
            await manager.start()
        await manager.stop()

        context.close.assert_awaited_once()
        browser.close.assert_awaited_once()
        playwright.stop.assert_awaited_once()
        assert manager.page is None
        assert manager.context is None

    @pytest.mark.asyncio
    async def test_stop_no_browser(self):
        """Test stop when no browser is running."""
        manager = BrowserManager()
        await manager.stop()

    @pytest.mark.asyncio
    async def test_start_twice_raises(self):
        async_playwright, playwright, _, _, _ = make_playwright()
        manager = BrowserManager()

        with patch("playwright.async_api.async_playwright", async_playwright):
            await manager.start()
            with pytest.raises(RuntimeError, match="already started"):
                await manager.start()

        assert playwright.chromium.launch.await_count == 1

    @pytest.mark.asyncio
    async def test_stop_after_failed_launch(self):
        """A launch failure leaves only the driver to stop."""
        async_playwright, playwright, _, _, _ = make_playwright()
        playwright.chromium.launch = AsyncMock(side_effect=RuntimeError("Executable doesn't exist"))
        manager = BrowserManager()

        with patch("playwright.async_api.async_playwright", async_playwright):
            with pytest.raises(RuntimeError, match="Executable"):
                await manager.start()
        await manager.stop()

        playwright.stop.assert_awaited_once()
        assert not manager.started

    @pytest.mark.asyncio
    async def test_context_manager(self):
        manager = BrowserManager()
        manager.start = AsyncMock()
        manager.stop = AsyncMock()

        async with manager as m:
            assert m is manager
            manager.start.assert_called_once()

        manager.stop.assert_called_once()


@pytest.mark.asyncio
async def test_browser_session_stops_on_error():
    async_playwright, playwright, browser, _, _ = make_playwright()

    with patch("playwright.async_api.async_playwright", async_playwright):
        with pytest.raises(RuntimeError, match="test body failed"):
            async with browser_session() as manager:
                assert manager.page is not None
                raise RuntimeError("test body failed")

    browser.close.assert_awaited_once()
    playwright.stop.assert_awaited_once()
