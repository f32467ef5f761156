"""Base page object that all page objects extend."""

from typing import Any, Optional

import structlog

from ..resilience import RetryHelper

logger = structlog.get_logger()


class BasePage:
    """
    Thin business-level wrapper around a Playwright page.

    Every interaction waits for its element and runs under the shared
    RetryHelper, so transient DOM failures are retried with backoff.
    """

    header = "header"
    footer = "footer"
    logo = ".logo"
    navigation_menu = ".navbar-nav"
    loading_spinner = ".spinner"

    def __init__(self, page, retry_helper: Optional[RetryHelper] = None, base_url: str = ""):
        """
        Args:
            page: Playwright page object
            retry_helper: Shared helper, a default one is created when omitted
            base_url: Prefix for relative paths passed to navigate()
        """
        self.page = page
        self.retry_helper = retry_helper or RetryHelper()
        self.base_url = base_url.rstrip("/")
        self.log = logger.bind(component="page_object", page=type(self).__name__)

    def _absolute(self, url: str) -> str:
        if url.startswith(("http://", "https://")) or not self.base_url:
            return url
        return f"{self.base_url}/{url.lstrip('/')}"

    async def navigate(self, url: str = "/") -> None:
        target = self._absolute(url)
        await self.retry_helper.retry(lambda: self.page.goto(target), f"Navigate to {target}")

    async def wait_for_page_load(self) -> None:
        """Wait for DOM content, network idle and any loading spinner to go away."""
        await self.page.wait_for_load_state("domcontentloaded")
        await self.page.wait_for_load_state("networkidle")

        if await self.page.is_visible(self.loading_spinner):
            await self.page.wait_for_selector(self.loading_spinner, state="hidden")

    async def click(self, selector: str, **options: Any) -> None:
        async def _click():
            await self.page.wait_for_selector(selector, state="visible")
            await self.page.click(selector, **options)

        await self.retry_helper.retry(_click, f"Click on {selector}")

    async def fill(self, selector: str, value: str, **options: Any) -> None:
        async def _fill():
            await self.page.wait_for_selector(selector, state="visible")
            await self.page.fill(selector, value, **options)

        await self.retry_helper.retry(_fill, f"Fill {selector}")

    async def get_text(self, selector: str) -> Optional[str]:
        async def _text():
            await self.page.wait_for_selector(selector, state="visible")
            return await self.page.text_content(selector)

        return await self.retry_helper.retry(_text, f"Get text from {selector}")

    async def is_visible(self, selector: str) -> bool:
        """Visibility check that reports False instead of raising."""
        try:
            return await self.page.is_visible(selector)
        except Exception as e:
            self.log.debug("Visibility check failed", selector=selector, error=str(e))
            return False

    async def wait_for_element(self, selector: str, **options: Any) -> None:
        await self.retry_helper.retry(
            lambda: self.page.wait_for_selector(selector, **{"state": "visible", **options}),
            f"Wait for {selector}",
        )

    async def select_option(self, selector: str, value: str) -> None:
        async def _select():
            await self.page.wait_for_selector(selector, state="visible")
            await self.page.select_option(selector, value)

        await self.retry_helper.retry(_select, f"Select {value} from {selector}")

    def current_url(self) -> str:
        return self.page.url

    async def title(self) -> str:
        return await self.page.title()
