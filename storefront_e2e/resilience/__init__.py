"""Resilience primitives: retry with backoff, condition polling, fallback strategies."""

from .models import RetryPolicy
from .retry_helper import (
    AllStrategiesFailed,
    ConditionTimeout,
    ResilienceError,
    RetryExhausted,
    RetryHelper,
)

__all__ = [
    "RetryPolicy",
    "RetryHelper",
    "ResilienceError",
    "RetryExhausted",
    "ConditionTimeout",
    "AllStrategiesFailed",
]
