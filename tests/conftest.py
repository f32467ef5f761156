"""Shared fixtures for harness tests.

No browser is launched: pages are MagicMock objects whose event
subscriptions are recorded so tests can emit traffic by hand.
"""

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from storefront_e2e.config import ConfigManager

pytest_plugins = ["pytester"]


def make_request(url, method="GET", resource_type="xhr", headers=None):
    """Stand-in for a Playwright Request."""
    return SimpleNamespace(
        url=url,
        method=method,
        headers=headers or {"accept": "*/*"},
        resource_type=resource_type,
    )


def make_response(url, status=200, method="GET", resource_type="xhr", status_text="OK", headers=None):
    """Stand-in for a Playwright Response."""
    return SimpleNamespace(
        url=url,
        status=status,
        status_text=status_text,
        headers=headers or {"content-type": "application/json"},
        request=SimpleNamespace(method=method, resource_type=resource_type),
    )


@pytest.fixture
def mock_page():
    """Mock Playwright page recording listeners and writing fake screenshots."""
    page = MagicMock()
    listeners = {"request": [], "response": []}

    def on(event, handler):
        listeners.setdefault(event, []).append(handler)

    def remove_listener(event, handler):
        listeners[event].remove(handler)

    def emit(event, payload):
        for handler in list(listeners.get(event, [])):
            handler(payload)

    async def screenshot(path=None, full_page=False):
        if path:
            Path(path).write_bytes(b"\x89PNG\r\n\x1a\n")
        return b"\x89PNG\r\n\x1a\n"

    page.on = MagicMock(side_effect=on)
    page.remove_listener = MagicMock(side_effect=remove_listener)
    page.listeners = listeners
    page.emit = emit
    page.screenshot = AsyncMock(side_effect=screenshot)
    page.evaluate = AsyncMock(return_value=None)
    page.text_content = AsyncMock(return_value=None)
    page.context.cookies = AsyncMock(return_value=[{"name": "sessionid", "value": "abc"}])
    page.context.clear_cookies = AsyncMock()
    page.url = "https://www.automationexercise.com/"
    return page


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every recognized TEST_* variable from the environment."""
    for name in ("TEST_ENV", "TEST_BASEURL", "TEST_TIMEOUT", "TEST_CONFIG_DIR"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def config(clean_env, tmp_path):
    """Fresh configuration with no overlay and no .env file."""
    return ConfigManager(config_dir=tmp_path / "no-overlay", env_file=None)


@pytest.fixture
def results_dir(tmp_path):
    return tmp_path / "test-results"


@pytest.fixture
def request_factory():
    return make_request


@pytest.fixture
def response_factory():
    return make_response
