"""pytest plugin exposing the harness as fixtures.

Registered through the ``pytest11`` entry point. Test modules request the
fixtures by name:

    @pytest.mark.asyncio
    async def test_home_page(page, test_reporter, assertions, config):
        await page.goto(config.get("base_url"))
        await test_reporter.log_step("Home page loaded", take_screenshot=True)
        await assertions.assert_page_has_elements([".logo"])

Lifecycle hooks are registered from a conftest:

    from storefront_e2e.fixtures.plugin import global_setup, test_teardown

    @test_teardown
    async def log_teardown(page, reporter):
        await reporter.log_step("Test teardown", take_screenshot=True)
"""

import pytest
import pytest_asyncio

from ..browser import BrowserConfig, browser_session
from ..config import get_config
from ..utils.logging import LogContext, configure_logging
from .context import TestContext
from .hooks import LifecycleHooks
from .page import EnhancedPage

hooks = LifecycleHooks()

global_setup = hooks.global_setup
global_teardown = hooks.global_teardown
test_setup = hooks.test_setup
test_teardown = hooks.test_teardown


def pytest_addoption(parser):
    group = parser.getgroup("storefront-e2e")
    group.addoption(
        "--harness-log-level",
        action="store",
        default=None,
        help="Log level for the E2E harness (defaults to logging.level from config)",
    )


def pytest_configure(config):
    """Register markers and configure structured logging."""
    config.addinivalue_line("markers", "e2e: mark test as end-to-end test driving a real browser")

    configure_logging(get_config(), level=config.getoption("--harness-log-level"))


@pytest.fixture(scope="session")
def harness_config():
    """Process-wide configuration, built once per session."""
    return get_config()


@pytest.fixture(name="config")
def config_fixture(harness_config):
    """The harness configuration under its short name."""
    return harness_config


@pytest_asyncio.fixture(scope="session", loop_scope="session", autouse=True)
async def harness_lifecycle(harness_config):
    """Run registered global setup and teardown hooks on the session event loop.

    Objects created by an async global setup hook belong to that loop; tests
    using them should run with ``@pytest.mark.asyncio(loop_scope="session")``.
    """
    await hooks.run_global_setup(harness_config)
    yield
    await hooks.run_global_teardown(harness_config)


@pytest_asyncio.fixture(name="browser_session")
async def browser_session_fixture(harness_config):
    """Isolated browser, context and page for one test."""
    async with browser_session(BrowserConfig.from_config(harness_config)) as session:
        yield session


@pytest_asyncio.fixture(name="page")
async def page_fixture(browser_session, harness_config):
    """Browser page with configured timeouts and helper methods."""
    return EnhancedPage(browser_session.page, harness_config)


@pytest_asyncio.fixture(name="test_context")
async def test_context_fixture(page, harness_config, request):
    """Per-test context; runs test hooks and finalizes the report at teardown.

    The context is named after the node id, which is unique within a run.
    """
    test_name = request.node.nodeid
    context = TestContext(page, test_name, harness_config)

    with LogContext(test_name):
        await hooks.run_test_setup(context)

    try:
        yield context
    finally:
        with LogContext(test_name):
            try:
                await hooks.run_test_teardown(context)
            finally:
                await context.finalize()


@pytest.fixture
def test_reporter(test_context):
    return test_context.reporter


@pytest.fixture
def network_logger(test_context):
    return test_context.network_logger


@pytest.fixture
def retry_helper(test_context):
    return test_context.retry_helper


@pytest.fixture
def assertions(test_context):
    return test_context.assertions
