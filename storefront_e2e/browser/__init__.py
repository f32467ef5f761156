"""Browser session management built on Playwright."""

from .session import SUPPORTED_BROWSERS, BrowserConfig, BrowserManager, browser_session

__all__ = [
    "BrowserConfig",
    "BrowserManager",
    "browser_session",
    "SUPPORTED_BROWSERS",
]
