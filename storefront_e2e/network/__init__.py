"""Network observation for a single page session."""

from .logger import DEFAULT_WAIT_TIMEOUT_MS, NetworkLogger, NetworkWait, NetworkWaitTimeout
from .models import NetworkEvent, NetworkFilter, RequestEvent, ResponseEvent

__all__ = [
    "NetworkLogger",
    "NetworkWait",
    "NetworkWaitTimeout",
    "DEFAULT_WAIT_TIMEOUT_MS",
    "NetworkEvent",
    "NetworkFilter",
    "RequestEvent",
    "ResponseEvent",
]
