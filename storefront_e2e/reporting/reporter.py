"""Step reporter for a single test.

Accumulates a chronological narrative of a test's execution with optional
screenshots, then writes it out as ``report.json`` and ``report.html``.
"""

import html
import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import structlog

from ..utils.naming import slugify, timestamp_for_path, utc_now_iso
from .models import Report, ReportArtifacts, Step

logger = structlog.get_logger()

PERFORMANCE_STEP = "Performance Metrics"

NAVIGATION_TIMING_SCRIPT = """() => {
    const entries = performance.getEntriesByType('navigation');
    if (entries.length === 0) {
        return null;
    }
    const nav = entries[0];
    return {
        dom_content_loaded: nav.domContentLoadedEventEnd - nav.domContentLoadedEventStart,
        load: nav.loadEventEnd - nav.loadEventStart,
        dom_interactive: nav.domInteractive - nav.startTime,
        response_time: nav.responseEnd - nav.requestStart,
        total_duration: nav.duration
    };
}"""


class TestReporter:
    """
    Captures screenshots and logs test steps for one test.

    Usage:
        reporter = TestReporter(page, "Complete user journey")
        await reporter.log_step("Navigating to home page", take_screenshot=True)
        await reporter.log_step("Added products", data={"count": 2})
        artifacts = reporter.generate_report()
    """

    # Not a pytest test class despite the name
    __test__ = False

    def __init__(self, page, test_name: str, output_root: str | Path = "test-results"):
        """
        Initialize the reporter and create its output directories.

        Args:
            page: Playwright page used for screenshots and metrics
            test_name: Human-readable test name
            output_root: Directory under which the per-run directory is created
        """
        self.page = page
        self.test_name = test_name
        self._steps: list[Step] = []
        self._screenshot_count = 0
        self._started_at = datetime.now(timezone.utc)
        self.log = logger.bind(component="test_reporter", test_name=test_name)

        run_name = f"{slugify(test_name)}-{timestamp_for_path(self._started_at, keep_fraction=True)}"
        self.report_dir = self._claim_directory(Path(output_root), run_name)
        self.screenshot_dir = self.report_dir / "screenshots"
        self.screenshot_dir.mkdir()

    @staticmethod
    def _claim_directory(root: Path, run_name: str) -> Path:
        # Reporters never share a directory, a numeric suffix breaks ties
        root.mkdir(parents=True, exist_ok=True)
        suffix = 0
        while True:
            candidate = root / (run_name if suffix == 0 else f"{run_name}-{suffix}")
            try:
                candidate.mkdir()
                return candidate
            except FileExistsError:
                suffix += 1

    @property
    def steps(self) -> list[Step]:
        return list(self._steps)

    @property
    def screenshot_count(self) -> int:
        return self._screenshot_count

    @property
    def start_time(self) -> str:
        return utc_now_iso(self._started_at)

    async def log_step(
        self,
        description: str,
        take_screenshot: bool = False,
        data: Optional[dict[str, Any]] = None,
    ) -> Step:
        """
        Log a test step with an optional full-page screenshot.

        Args:
            description: Step description
            take_screenshot: Capture a screenshot before recording the step
            data: Additional structured data to store with the step

        Returns:
            The recorded step
        """
        screenshot_path = None
        if take_screenshot:
            screenshot_path = str(await self.capture_screenshot(description))

        step = Step(
            ordinal=len(self._steps) + 1,
            description=description,
            timestamp=utc_now_iso(),
            data=dict(data or {}),
            screenshot_path=screenshot_path,
        )
        self._steps.append(step)
        self.log.info("Step logged", ordinal=step.ordinal, description=description, screenshot=screenshot_path)
        return step

    async def capture_screenshot(self, name: str) -> Path:
        """Capture a full-page screenshot named ``<counter>-<slug>.png``."""
        self._screenshot_count += 1
        file_path = self.screenshot_dir / f"{self._screenshot_count}-{slugify(name)}.png"
        await self.page.screenshot(path=str(file_path), full_page=True)
        self.log.debug("Screenshot taken", path=str(file_path))
        return file_path

    async def log_performance_metrics(self) -> Optional[Step]:
        """Record navigation-timing figures as a step. Failures are logged, never raised."""
        try:
            metrics = await self.page.evaluate(NAVIGATION_TIMING_SCRIPT)
        except Exception as e:
            self.log.error("Error capturing performance metrics", error=str(e))
            return None

        step = Step(
            ordinal=len(self._steps) + 1,
            description=PERFORMANCE_STEP,
            timestamp=utc_now_iso(),
            data=metrics or {"note": "Performance metrics not available"},
        )
        self._steps.append(step)
        self.log.info("Performance metrics captured", metrics=step.data)
        return step

    def build_report(self) -> Report:
        """Derive a report from the steps recorded so far."""
        ended_at = datetime.now(timezone.utc)
        duration = (ended_at - self._started_at).total_seconds()
        return Report(
            test_name=self.test_name,
            start_time=utc_now_iso(self._started_at),
            end_time=utc_now_iso(ended_at),
            duration_seconds=round(duration, 2),
            steps=list(self._steps),
            screenshot_count=self._screenshot_count,
        )

    def generate_report(self) -> ReportArtifacts:
        """Write ``report.json`` and ``report.html``. Safe to call more than once."""
        report = self.build_report()

        report_path = self.report_dir / "report.json"
        report_path.write_text(json.dumps(report.to_dict(), indent=2, default=str), encoding="utf-8")

        html_report_path = self.report_dir / "report.html"
        html_report_path.write_text(self.render_html(report), encoding="utf-8")

        self.log.info(
            "Test report generated",
            report_path=str(report_path),
            html_report_path=str(html_report_path),
            steps=len(report.steps),
            duration_seconds=report.duration_seconds,
        )
        return ReportArtifacts(report_path=report_path, html_report_path=html_report_path, report=report)

    def _relative_screenshot(self, screenshot_path: str) -> str:
        return Path(os.path.relpath(screenshot_path, self.report_dir)).as_posix()

    @staticmethod
    def _data_block(data: dict[str, Any]) -> str:
        if not data:
            return ""
        return f"<pre>{html.escape(json.dumps(data, indent=2, default=str))}</pre>"

    def render_html(self, report: Report) -> str:
        """Render the HTML companion document for ``report``."""
        title = html.escape(report.test_name)

        step_blocks = ""
        for step in report.steps:
            step_blocks += f"""
            <div class="step">
                <p><strong>Step {step.ordinal}:</strong> {html.escape(step.description)}</p>
                <p><small>Timestamp: {step.timestamp}</small></p>
                {self._data_block(step.data)}
            </div>
            """

        screenshot_blocks = ""
        for step in report.steps:
            if not step.screenshot_path:
                continue
            screenshot_blocks += f"""
            <div class="screenshot-container">
                <h3>Step {step.ordinal}: {html.escape(step.description)}</h3>
                <p>Timestamp: {step.timestamp}</p>
                <img src="{html.escape(self._relative_screenshot(step.screenshot_path))}" alt="Step {step.ordinal}" />
                {self._data_block(step.data)}
            </div>
            """

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{title} - Test Report</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 0; padding: 20px; }}
        h1 {{ color: #333; }}
        .summary {{ background: #f5f5f5; padding: 15px; border-radius: 5px; margin-bottom: 20px; }}
        .summary p {{ margin: 5px 0; }}
        .steps {{ margin-bottom: 30px; }}
        .step {{ margin-bottom: 10px; padding: 10px; background: #f9f9f9; border-left: 4px solid #ddd; }}
        .screenshot-container {{ margin: 20px 0; border: 1px solid #ddd; padding: 15px; border-radius: 5px; }}
        .screenshot-container img {{ max-width: 100%; border: 1px solid #eee; }}
        pre {{ background: #f0f0f0; padding: 10px; border-radius: 3px; overflow-x: auto; }}
    </style>
</head>
<body>
    <h1>{title} - Test Report</h1>

    <div class="summary">
        <p><strong>Start Time:</strong> {report.start_time}</p>
        <p><strong>End Time:</strong> {report.end_time}</p>
        <p><strong>Duration:</strong> {report.duration_text}</p>
        <p><strong>Total Steps:</strong> {len(report.steps)}</p>
        <p><strong>Screenshots:</strong> {report.screenshot_count}</p>
    </div>

    <h2>Test Steps</h2>
    <div class="steps">
        {step_blocks}
    </div>

    <h2>Screenshots</h2>
    {screenshot_blocks}
</body>
</html>
"""
