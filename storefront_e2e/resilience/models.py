"""Data models for the resilience layer."""

from dataclasses import dataclass


@dataclass
class RetryPolicy:
    """Bounded-attempt backoff policy.

    Example:
        policy = RetryPolicy(max_attempts=5, initial_interval_ms=250, backoff_multiplier=2.0)
    """

    max_attempts: int = 3
    initial_interval_ms: int = 1000
    backoff_multiplier: float = 1.5

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.initial_interval_ms < 0:
            raise ValueError(f"initial_interval_ms must be >= 0, got {self.initial_interval_ms}")
        if self.backoff_multiplier < 1:
            raise ValueError(f"backoff_multiplier must be >= 1, got {self.backoff_multiplier}")

    def intervals(self) -> list[float]:
        """Sleep intervals (ms) between consecutive attempts, ``max_attempts - 1`` entries."""
        delays = []
        current = float(self.initial_interval_ms)
        for _ in range(self.max_attempts - 1):
            delays.append(current)
            current *= self.backoff_multiplier
        return delays
