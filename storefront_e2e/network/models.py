"""Data models for captured network traffic.

- RequestEvent: an outbound request seen on the page
- ResponseEvent: an inbound response seen on the page
- NetworkFilter: conjunctive filter used by queries and waits
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional, Union

from ..utils.naming import utc_now_iso


@dataclass(frozen=True)
class RequestEvent:
    """An outbound request, immutable once recorded."""

    url: str
    method: str
    headers: dict[str, str] = field(default_factory=dict)
    timestamp: str = ""
    resource_type: str = "other"

    @classmethod
    def from_request(cls, request) -> "RequestEvent":
        """Build from a Playwright ``Request``."""
        return cls(
            url=request.url,
            method=request.method,
            headers=dict(request.headers),
            timestamp=utc_now_iso(),
            resource_type=request.resource_type,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ResponseEvent:
    """An inbound response, immutable once recorded."""

    url: str
    method: str
    status: int
    status_text: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    timestamp: str = ""
    resource_type: str = "other"

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 400

    @classmethod
    def from_response(cls, response) -> "ResponseEvent":
        """Build from a Playwright ``Response``."""
        request = response.request
        return cls(
            url=response.url,
            method=request.method,
            status=response.status,
            status_text=response.status_text,
            headers=dict(response.headers),
            timestamp=utc_now_iso(),
            resource_type=request.resource_type,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


NetworkEvent = Union[RequestEvent, ResponseEvent]


@dataclass(frozen=True)
class NetworkFilter:
    """Conjunctive match on captured events.

    ``url`` is a substring match; the other fields are exact. ``None`` fields
    impose no constraint. ``status`` never matches a request.
    """

    url: Optional[str] = None
    method: Optional[str] = None
    status: Optional[int] = None
    resource_type: Optional[str] = None

    def matches(self, event: NetworkEvent) -> bool:
        if self.url is not None and self.url not in event.url:
            return False
        if self.method is not None and event.method != self.method:
            return False
        if self.resource_type is not None and event.resource_type != self.resource_type:
            return False
        if self.status is not None and getattr(event, "status", None) != self.status:
            return False
        return True
