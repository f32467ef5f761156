"""Utility modules for the storefront E2E harness.

Provides:
- Structured logging configuration
- Filename slug helpers shared by reporting and fixtures
"""

from .logging import configure_logging, LogContext, log_operation
from .naming import slugify, timestamp_for_path, utc_now_iso

__all__ = [
    # Logging
    "configure_logging",
    "LogContext",
    "log_operation",
    # Naming
    "slugify",
    "timestamp_for_path",
    "utc_now_iso",
]
