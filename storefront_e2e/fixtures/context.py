"""Per-test execution context.

A TestContext owns everything a single test needs. Its components are built
lazily, at most once, on first access, and are never shared between tests.
"""

from functools import cached_property
from pathlib import Path
from typing import Optional

import structlog

from ..assertions import CustomAssertions
from ..config import ConfigManager
from ..network import NetworkLogger
from ..reporting import ReportArtifacts, TestReporter
from ..resilience import RetryHelper
from ..utils.logging import log_operation

logger = structlog.get_logger()

COMPONENTS = ("reporter", "network_logger", "retry_helper", "assertions")


class TestContext:
    """
    Composes the harness components for one test.

    Example:
        context = TestContext(page, "checkout flow", config)
        await context.reporter.log_step("Opened cart", take_screenshot=True)
        response = await context.network_logger.wait_for_response("/view_cart")
        await context.finalize()
    """

    __test__ = False

    def __init__(
        self,
        page,
        test_name: str,
        config: ConfigManager,
        output_root: Optional[str | Path] = None,
    ):
        self.page = page
        self.test_name = test_name
        self.config = config
        self.output_root = Path(output_root or config.get("paths.results_dir", "test-results"))
        self._finalized = False
        self.log = logger.bind(component="test_context", test_name=test_name)

    @cached_property
    def reporter(self) -> TestReporter:
        return TestReporter(self.page, self.test_name, output_root=self.output_root)

    @cached_property
    def network_logger(self) -> NetworkLogger:
        return NetworkLogger(self.page)

    @cached_property
    def retry_helper(self) -> RetryHelper:
        return RetryHelper.from_config(self.config)

    @cached_property
    def assertions(self) -> CustomAssertions:
        return CustomAssertions(self.page)

    def is_built(self, component: str) -> bool:
        """Whether ``component`` has been instantiated in this context."""
        if component not in COMPONENTS:
            raise ValueError(f"Unknown component {component!r}, expected one of {COMPONENTS}")
        return component in self.__dict__

    async def finalize(self) -> Optional[ReportArtifacts]:
        """Release the network logger and write the report if one was used.

        Returns the report artifacts, or None when no report was generated.
        Only the first call has an effect.
        """
        if self._finalized:
            return None
        self._finalized = True

        if self.is_built("network_logger"):
            if self.is_built("reporter") and self.config.get("reporting.include_network_logs", True):
                await self.reporter.log_step("Network summary", data=self.network_logger.summary())
            self.network_logger.detach()

        if not self.is_built("reporter"):
            return None
        if not self.config.get("reporting.generate_on_teardown", True):
            self.log.debug("Report generation on teardown disabled")
            return None

        with log_operation(self.log, "generate_report") as fields:
            artifacts = self.reporter.generate_report()
            fields["report_path"] = str(artifacts.report_path)
        return artifacts
