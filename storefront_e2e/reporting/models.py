"""Data models for step reporting."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional


@dataclass(frozen=True)
class Step:
    """A single milestone in a test's narrative."""

    ordinal: int
    description: str
    timestamp: str
    data: dict[str, Any] = field(default_factory=dict)
    screenshot_path: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "ordinal": self.ordinal,
            "description": self.description,
            "timestamp": self.timestamp,
            "data": self.data,
            "screenshot_path": self.screenshot_path,
        }


@dataclass
class Report:
    """Summary of one test run, derived from a reporter's steps."""

    test_name: str
    start_time: str
    end_time: str
    duration_seconds: float
    steps: list[Step]
    screenshot_count: int

    @property
    def duration_text(self) -> str:
        return f"{self.duration_seconds:.2f} seconds"

    def to_dict(self) -> dict[str, Any]:
        """The exact payload written to ``report.json``."""
        return {
            "test_name": self.test_name,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration_seconds": self.duration_seconds,
            "steps": [step.to_dict() for step in self.steps],
            "screenshot_count": self.screenshot_count,
        }


@dataclass
class ReportArtifacts:
    """Paths of the written artifacts plus the in-memory report."""

    report_path: Path
    html_report_path: Path
    report: Report
