"""Network logger for tracking requests and responses of a single page.

Every request and response the page emits is captured in arrival order.
Captured traffic can be queried with conjunctive filters, and callers can
wait for traffic that has not happened yet:

    wait = network_logger.wait_for_response("/api/productsList", status=200)
    await page.click("a[href='/products']")
    response = await wait
"""

import asyncio
from typing import Any, Callable, Generic, Optional, TypeVar

import structlog

from .models import NetworkEvent, NetworkFilter, RequestEvent, ResponseEvent

logger = structlog.get_logger()

DEFAULT_WAIT_TIMEOUT_MS = 30000

E = TypeVar("E", RequestEvent, ResponseEvent)


class NetworkWaitTimeout(TimeoutError):
    """Raised when awaited traffic was not observed in time."""

    def __init__(self, kind: str, network_filter: NetworkFilter, timeout_ms: int):
        self.kind = kind
        self.filter = network_filter
        self.timeout_ms = timeout_ms
        super().__init__(f"No {kind} matching {network_filter} within {timeout_ms}ms")


class NetworkWait(Generic[E]):
    """One-shot handle resolving with the first event that matches a filter.

    The handle is awaitable. It deregisters itself from the logger once it
    resolves, times out or is cancelled.
    """

    def __init__(
        self,
        kind: str,
        network_filter: NetworkFilter,
        timeout_ms: Optional[int],
        on_release: Callable[["NetworkWait"], None],
    ):
        self.kind = kind
        self.filter = network_filter
        self.timeout_ms = timeout_ms
        self._on_release = on_release
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()

    def offer(self, event: E) -> bool:
        """Resolve with ``event`` if it matches. Returns True when resolved."""
        if self._future.done() or not self.filter.matches(event):
            return False
        self._future.set_result(event)
        return True

    def done(self) -> bool:
        return self._future.done()

    def cancelled(self) -> bool:
        return self._future.cancelled()

    def result(self) -> E:
        """The matched event; raises ``asyncio.InvalidStateError`` if still pending
        and ``NetworkWaitTimeout`` if the wait timed out."""
        return self._future.result()

    def cancel(self) -> bool:
        """Abandon the wait. The page subscription is left untouched."""
        cancelled = self._future.cancel()
        self._on_release(self)
        return cancelled

    async def wait(self) -> E:
        """The matched event. A timeout is final: every later await raises it again.

        Raises:
            NetworkWaitTimeout: If nothing matched within ``timeout_ms``
        """
        if not self._future.done():
            try:
                if self.timeout_ms is None:
                    await asyncio.shield(self._future)
                else:
                    await asyncio.wait_for(asyncio.shield(self._future), self.timeout_ms / 1000)
            except asyncio.TimeoutError:
                if not self._future.done():
                    self._future.set_exception(NetworkWaitTimeout(self.kind, self.filter, self.timeout_ms))
                self._on_release(self)
        return self._future.result()

    def __await__(self):
        return self.wait().__await__()

    def __repr__(self) -> str:
        state = "done" if self.done() else "pending"
        return f"NetworkWait(kind={self.kind!r}, filter={self.filter!r}, {state})"


class NetworkLogger:
    """Captures and indexes the traffic of one page.

    Subscription starts at construction and cannot be paused; ``clear()``
    only empties the buffers.
    """

    def __init__(self, page):
        """
        Initialize with a Playwright page.

        Args:
            page: Playwright page object
        """
        self.page = page
        self._requests: list[RequestEvent] = []
        self._responses: list[ResponseEvent] = []
        self._request_waits: list[NetworkWait] = []
        self._response_waits: list[NetworkWait] = []
        self._attached = False
        self.log = logger.bind(component="network_logger")
        self._setup_listeners()

    def _setup_listeners(self) -> None:
        self.page.on("request", self._on_request)
        self.page.on("response", self._on_response)
        self._attached = True

    def _on_request(self, request) -> None:
        event = RequestEvent.from_request(request)
        self._requests.append(event)
        self._dispatch(event, self._request_waits)

    def _on_response(self, response) -> None:
        event = ResponseEvent.from_response(response)
        self._responses.append(event)
        if event.status >= 400:
            self.log.debug("Failed response captured", url=event.url, status=event.status)
        self._dispatch(event, self._response_waits)

    @staticmethod
    def _dispatch(event: NetworkEvent, waits: list[NetworkWait]) -> None:
        for wait in list(waits):
            if wait.offer(event):
                waits.remove(wait)

    @property
    def requests(self) -> list[RequestEvent]:
        return list(self._requests)

    @property
    def responses(self) -> list[ResponseEvent]:
        return list(self._responses)

    @property
    def pending_waits(self) -> int:
        return len(self._request_waits) + len(self._response_waits)

    def get_requests(
        self,
        *,
        url: Optional[str] = None,
        method: Optional[str] = None,
        resource_type: Optional[str] = None,
    ) -> list[RequestEvent]:
        """Captured requests matching every given field, in arrival order."""
        network_filter = NetworkFilter(url=url, method=method, resource_type=resource_type)
        return [event for event in self._requests if network_filter.matches(event)]

    def get_responses(
        self,
        *,
        url: Optional[str] = None,
        method: Optional[str] = None,
        status: Optional[int] = None,
        resource_type: Optional[str] = None,
    ) -> list[ResponseEvent]:
        """Captured responses matching every given field, in arrival order."""
        network_filter = NetworkFilter(url=url, method=method, status=status, resource_type=resource_type)
        return [event for event in self._responses if network_filter.matches(event)]

    def wait_for_request(
        self,
        url: str,
        *,
        method: Optional[str] = None,
        resource_type: Optional[str] = None,
        timeout_ms: Optional[int] = DEFAULT_WAIT_TIMEOUT_MS,
    ) -> NetworkWait[RequestEvent]:
        """Handle resolving with the first request whose URL contains ``url``.

        Resolves immediately when a matching request was already captured.
        ``timeout_ms=None`` waits indefinitely.
        """
        network_filter = NetworkFilter(url=url, method=method, resource_type=resource_type)
        return self._register("request", network_filter, timeout_ms, self._requests, self._request_waits)

    def wait_for_response(
        self,
        url: str,
        *,
        method: Optional[str] = None,
        status: Optional[int] = None,
        resource_type: Optional[str] = None,
        timeout_ms: Optional[int] = DEFAULT_WAIT_TIMEOUT_MS,
    ) -> NetworkWait[ResponseEvent]:
        """Handle resolving with the first response whose URL contains ``url``.

        Resolves immediately when a matching response was already captured.
        ``timeout_ms=None`` waits indefinitely.
        """
        network_filter = NetworkFilter(url=url, method=method, status=status, resource_type=resource_type)
        return self._register("response", network_filter, timeout_ms, self._responses, self._response_waits)

    def _register(
        self,
        kind: str,
        network_filter: NetworkFilter,
        timeout_ms: Optional[int],
        captured: list,
        waits: list[NetworkWait],
    ) -> NetworkWait:
        def release(wait: NetworkWait) -> None:
            if wait in waits:
                waits.remove(wait)

        wait = NetworkWait(kind, network_filter, timeout_ms, release)

        for event in captured:
            if wait.offer(event):
                return wait

        waits.append(wait)
        self.log.debug("Waiting for traffic", kind=kind, filter=str(network_filter), timeout_ms=timeout_ms)
        return wait

    def clear(self) -> None:
        """Empty both buffers. Subscriptions and pending waits are kept."""
        self._requests = []
        self._responses = []

    def detach(self) -> None:
        """Stop listening to the page and cancel every pending wait."""
        for wait in list(self._request_waits) + list(self._response_waits):
            wait.cancel()

        if self._attached:
            self.page.remove_listener("request", self._on_request)
            self.page.remove_listener("response", self._on_response)
            self._attached = False

    def summary(self) -> dict[str, Any]:
        """Traffic counts suitable for a report step."""
        failed = [event for event in self._responses if event.status >= 400]
        return {
            "requests": len(self._requests),
            "responses": len(self._responses),
            "failed_responses": len(failed),
            "failed_urls": [event.url for event in failed],
        }
