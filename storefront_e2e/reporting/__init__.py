"""Step-based reporting with JSON and HTML artifacts."""

from .models import Report, ReportArtifacts, Step
from .reporter import PERFORMANCE_STEP, TestReporter

__all__ = [
    "TestReporter",
    "Step",
    "Report",
    "ReportArtifacts",
    "PERFORMANCE_STEP",
]
