"""Suite-level and test-level lifecycle hooks."""

import inspect
from typing import Any, Callable

import structlog

logger = structlog.get_logger()

Hook = Callable[..., Any]


async def _invoke(hook: Hook, **kwargs: Any) -> None:
    result = hook(**kwargs)
    if inspect.isawaitable(result):
        await result


class LifecycleHooks:
    """
    Registry of setup/teardown callbacks.

    Callbacks may be plain functions or coroutine functions and run in
    registration order. Global hooks receive ``config``; test hooks receive
    ``page`` and ``reporter``. Exceptions raised by a callback propagate.

    Usage:
        hooks = LifecycleHooks()

        @hooks.test_setup
        async def set_viewport(page, reporter):
            await page.set_viewport_size({"width": 1280, "height": 720})
            await reporter.log_step("Test setup", take_screenshot=True)
    """

    def __init__(self):
        self._global_setup: list[Hook] = []
        self._global_teardown: list[Hook] = []
        self._test_setup: list[Hook] = []
        self._test_teardown: list[Hook] = []
        self.log = logger.bind(component="lifecycle_hooks")

    def global_setup(self, hook: Hook) -> Hook:
        self._global_setup.append(hook)
        return hook

    def global_teardown(self, hook: Hook) -> Hook:
        self._global_teardown.append(hook)
        return hook

    def test_setup(self, hook: Hook) -> Hook:
        self._test_setup.append(hook)
        return hook

    def test_teardown(self, hook: Hook) -> Hook:
        self._test_teardown.append(hook)
        return hook

    @property
    def has_global_hooks(self) -> bool:
        return bool(self._global_setup or self._global_teardown)

    @property
    def has_test_hooks(self) -> bool:
        return bool(self._test_setup or self._test_teardown)

    async def run_global_setup(self, config) -> None:
        for hook in self._global_setup:
            self.log.debug("Running global setup hook", hook=hook.__name__)
            await _invoke(hook, config=config)

    async def run_global_teardown(self, config) -> None:
        for hook in self._global_teardown:
            self.log.debug("Running global teardown hook", hook=hook.__name__)
            await _invoke(hook, config=config)

    async def run_test_setup(self, context) -> None:
        for hook in self._test_setup:
            await _invoke(hook, page=context.page, reporter=context.reporter)

    async def run_test_teardown(self, context) -> None:
        for hook in self._test_teardown:
            await _invoke(hook, page=context.page, reporter=context.reporter)

    def clear(self) -> None:
        """Forget every registered callback."""
        self._global_setup.clear()
        self._global_teardown.clear()
        self._test_setup.clear()
        self._test_teardown.clear()
