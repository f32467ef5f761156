"""Custom assertions for e-commerce specific validations.

Failures raise ``AssertionError`` so pytest reports them as ordinary test
failures. Assertions are never retried.
"""

import re
from collections.abc import Mapping, Sequence
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import structlog
from playwright.async_api import expect

logger = structlog.get_logger()

LOGGED_IN_SELECTOR = 'a:has-text("Logged in as")'

_AMOUNT = re.compile(r"-?\d+(?:\.\d+)?")


def parse_amount(value: Any) -> Decimal:
    """Parse a displayed price such as ``"Rs. 1,200"`` into a Decimal.

    Raises:
        ValueError: If no number can be found in ``value``
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))

    text = str(value).replace(",", "")
    match = _AMOUNT.search(text)
    if not match:
        raise ValueError(f"No amount found in {value!r}")
    try:
        return Decimal(match.group())
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount {value!r}") from e


def _field(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, Mapping):
        return item.get(name, default)
    return getattr(item, name, default)


class CustomAssertions:
    """Domain assertions for login state, products, cart and orders."""

    def __init__(self, page):
        """
        Args:
            page: Playwright page object
        """
        self.page = page
        self.log = logger.bind(component="assertions")

    async def assert_user_logged_in(self, username: Optional[str] = None) -> None:
        """Assert the header shows ``Logged in as <username>``."""
        logged_in_text = await self.page.text_content(LOGGED_IN_SELECTOR)
        if not logged_in_text:
            raise AssertionError("User should be logged in")

        if username and username not in logged_in_text:
            raise AssertionError(f"Expected logged in user {username!r}, header shows {logged_in_text.strip()!r}")

        self.log.debug("Login state verified", username=username)

    def assert_product_matches_criteria(self, product: Any, criteria: Mapping[str, Any]) -> None:
        """Assert a product matches the configured type list and price range."""
        name = str(_field(product, "name", ""))
        product_types = criteria.get("product_types") or []

        if product_types:
            category = str(_field(product, "category") or "")
            matches_type = any(
                product_type.lower() in name.lower() or product_type.lower() in category.lower()
                for product_type in product_types
            )
            if not matches_type:
                raise AssertionError(
                    f"Product {name!r} should match one of types: {', '.join(product_types)}"
                )

        min_price = criteria.get("min_price")
        max_price = criteria.get("max_price")
        if min_price is not None and max_price is not None:
            price = parse_amount(_field(product, "price"))
            if not parse_amount(min_price) <= price <= parse_amount(max_price):
                raise AssertionError(f"Price {price} of {name!r} outside range [{min_price}, {max_price}]")

    def assert_cart_contents(self, cart_items: Sequence[Any], expected_products: Sequence[Any]) -> None:
        """Assert the cart holds the expected products in order."""
        if len(cart_items) != len(expected_products):
            raise AssertionError(
                f"Cart has {len(cart_items)} items, expected {len(expected_products)}"
            )

        for index, (item, expected) in enumerate(zip(cart_items, expected_products), start=1):
            item_name = str(_field(item, "name", ""))
            expected_name = str(_field(expected, "name", ""))
            if expected_name not in item_name:
                raise AssertionError(f"Cart item {index} is {item_name!r}, expected {expected_name!r}")

            item_price = parse_amount(_field(item, "price"))
            expected_price = parse_amount(_field(expected, "price"))
            if item_price != expected_price:
                raise AssertionError(
                    f"Cart item {index} ({item_name!r}) costs {item_price}, expected {expected_price}"
                )

    def assert_cart_total_correct(self, cart_total: Any, cart_items: Sequence[Any]) -> None:
        """Assert ``cart_total`` equals the sum of price x quantity over ``cart_items``."""
        expected_total = sum(
            (parse_amount(_field(item, "price")) * int(_field(item, "quantity") or 1) for item in cart_items),
            Decimal("0"),
        )
        actual_total = parse_amount(cart_total)
        if actual_total != expected_total:
            raise AssertionError(f"Cart total is {actual_total}, expected {expected_total}")

    def assert_order_confirmed(self, confirmation: Mapping[str, Any]) -> None:
        """Assert an order confirmation reports success with a message."""
        if not confirmation.get("success"):
            raise AssertionError(f"Order should be confirmed, got {dict(confirmation)!r}")
        if not confirmation.get("message"):
            raise AssertionError("Order confirmation should carry a message")
        if "order_details" in confirmation and not confirmation["order_details"]:
            raise AssertionError("Order confirmation details should not be empty")

    async def assert_page_has_elements(self, selectors: Sequence[str]) -> None:
        """Assert every selector resolves to a visible element."""
        for selector in selectors:
            await expect(self.page.locator(selector)).to_be_visible()

    def assert_api_response(
        self,
        response: Any,
        expected_status: int,
        expected_headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Assert a captured response's status and, optionally, a subset of its headers."""
        status = _field(response, "status")
        url = _field(response, "url", "")
        if status != expected_status:
            raise AssertionError(f"Response {url} has status {status}, expected {expected_status}")

        if expected_headers:
            headers = {k.lower(): v for k, v in (_field(response, "headers") or {}).items()}
            for name, value in expected_headers.items():
                actual = headers.get(name.lower())
                if actual is None or value not in actual:
                    raise AssertionError(f"Response {url} header {name!r} is {actual!r}, expected {value!r}")
