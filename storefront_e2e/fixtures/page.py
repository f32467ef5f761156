"""Page decoration applied before a page reaches a test body."""

from pathlib import Path
from typing import Any

import structlog

from ..utils.naming import slugify, timestamp_for_path

logger = structlog.get_logger()


class EnhancedPage:
    """
    Playwright page with configured timeouts and convenience helpers.

    Attribute access not defined here is delegated to the wrapped page, so
    an EnhancedPage can be used wherever a page is expected.
    """

    def __init__(self, page, config):
        """
        Args:
            page: Playwright page object
            config: ConfigManager supplying timeouts and the screenshot directory
        """
        self._page = page
        self._config = config
        self._screenshot_dir = Path(config.get("paths.screenshot_dir", "screenshots"))

        self.default_timeout = config.get("timeouts.default_timeout", 30000)
        self.navigation_timeout = config.get("timeouts.navigation_timeout", 45000)
        page.set_default_timeout(self.default_timeout)
        page.set_default_navigation_timeout(self.navigation_timeout)

        logger.bind(component="page").debug(
            "Page timeouts applied",
            default_timeout=self.default_timeout,
            navigation_timeout=self.navigation_timeout,
        )

    @property
    def raw(self):
        """The undecorated Playwright page."""
        return self._page

    def __getattr__(self, name: str) -> Any:
        if name == "_page":
            raise AttributeError(name)
        return getattr(self._page, name)

    async def capture_screenshot(self, name: str) -> Path:
        """Full-page screenshot saved as ``<screenshot_dir>/<name>-<timestamp>.png``."""
        self._screenshot_dir.mkdir(parents=True, exist_ok=True)
        path = self._screenshot_dir / f"{slugify(name)}-{timestamp_for_path(keep_fraction=True)}.png"
        await self._page.screenshot(path=str(path), full_page=True)
        return path

    async def get_all_cookies(self) -> list[dict]:
        return await self._page.context.cookies()

    async def clear_cookies(self) -> None:
        await self._page.context.clear_cookies()

    def __repr__(self) -> str:
        return f"EnhancedPage({self._page!r})"
