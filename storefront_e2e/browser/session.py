"""Playwright browser sessions for the harness.

Each test gets its own session: a Playwright driver, one browser, one
context and one page. Nothing is shared between sessions, so cookies and
storage never leak from one test into another.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional

import structlog

logger = structlog.get_logger()

SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")


@dataclass
class BrowserConfig:
    """Launch and context options for one browser session."""
    browser_type: str = "chromium"
    headless: bool = True
    slow_mo: int = 0  # Milliseconds between actions
    viewport_width: int = 1280
    viewport_height: int = 720
    timeout_ms: int = 30000
    ignore_https_errors: bool = True

    def __post_init__(self):
        if self.browser_type not in SUPPORTED_BROWSERS:
            raise ValueError(
                f"Unsupported browser type {self.browser_type!r}, expected one of {SUPPORTED_BROWSERS}"
            )

    @property
    def viewport(self) -> dict[str, int]:
        return {"width": self.viewport_width, "height": self.viewport_height}

    @classmethod
    def from_config(cls, config) -> "BrowserConfig":
        """Build from the ``browser.*`` and ``timeouts.*`` configuration keys."""
        return cls(
            browser_type=config.get("browser.type", "chromium"),
            headless=config.get("browser.headless", True),
            slow_mo=config.get("browser.slow_mo", 0),
            viewport_width=config.get("browser.viewport_width", 1280),
            viewport_height=config.get("browser.viewport_height", 720),
            timeout_ms=config.get("timeouts.default_timeout", 30000),
        )


class BrowserManager:
    """Owns the Playwright resources of one session and closes them in reverse order."""

    def __init__(self, config: Optional[BrowserConfig] = None):
        self.config = config or BrowserConfig()
        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None
        self.log = logger.bind(component="browser", browser=self.config.browser_type)

    @property
    def page(self):
        return self._page

    @property
    def context(self):
        return self._context

    @property
    def started(self) -> bool:
        return self._page is not None

    async def start(self) -> None:
        """Launch the configured browser and open the session's page.

        Raises:
            RuntimeError: If the session is already started
        """
        if self.started:
            raise RuntimeError("Browser session already started")

        from playwright.async_api import async_playwright

        self._playwright = await async_playwright().start()
        launcher = getattr(self._playwright, self.config.browser_type)
        self._browser = await launcher.launch(headless=self.config.headless, slow_mo=self.config.slow_mo)
        self._context = await self._browser.new_context(
            viewport=self.config.viewport,
            ignore_https_errors=self.config.ignore_https_errors,
        )
        self._context.set_default_timeout(self.config.timeout_ms)
        self._page = await self._context.new_page()

        self.log.info("Browser session started", headless=self.config.headless, viewport=self.config.viewport)

    async def stop(self) -> None:
        """Close whatever was opened. Safe on a partially started or stopped session."""
        self._page = None
        if self._context is not None:
            await self._context.close()
            self._context = None
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
            self.log.info("Browser session stopped")

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()


@asynccontextmanager
async def browser_session(config: Optional[BrowserConfig] = None):
    """
    Run a block inside a fresh browser session, closing it even if the block fails.

    Usage:
        async with browser_session(BrowserConfig.from_config(config)) as session:
            await session.page.goto("https://www.automationexercise.com")
    """
    manager = BrowserManager(config)
    try:
        await manager.start()
        yield manager
    finally:
        await manager.stop()
