"""Browser-based E2E test harness for the AutomationExercise storefront.

Components:
- RetryHelper: retry with backoff, condition polling, fallback strategies
- NetworkLogger: request/response capture with filtered queries and waits
- TestReporter: step narrative with screenshots, JSON and HTML reports
- ConfigManager: layered configuration with dotted-key lookup
- CustomAssertions: login, cart and order assertions
- TestContext / pytest plugin: per-test fixture composition
"""

from .assertions import CustomAssertions
from .config import ConfigManager, deep_merge, get_config
from .fixtures import EnhancedPage, LifecycleHooks, TestContext
from .network import NetworkLogger, NetworkWaitTimeout
from .reporting import TestReporter
from .resilience import (
    AllStrategiesFailed,
    ConditionTimeout,
    ResilienceError,
    RetryExhausted,
    RetryHelper,
    RetryPolicy,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigManager",
    "deep_merge",
    "get_config",
    "RetryHelper",
    "RetryPolicy",
    "ResilienceError",
    "RetryExhausted",
    "ConditionTimeout",
    "AllStrategiesFailed",
    "NetworkLogger",
    "NetworkWaitTimeout",
    "TestReporter",
    "CustomAssertions",
    "TestContext",
    "EnhancedPage",
    "LifecycleHooks",
]
