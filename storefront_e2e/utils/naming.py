"""Helpers for timestamps and filesystem-safe names."""

import re
from datetime import datetime, timezone
from typing import Optional

_NON_ALNUM = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def slugify(value: str) -> str:
    """Lowercase ``value`` and replace every non-alphanumeric character with ``_``.

    >>> slugify("Add to Cart!")
    'add_to_cart_'
    """
    return _NON_ALNUM.sub("_", value).lower()


def utc_now_iso(moment: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def timestamp_for_path(moment: Optional[datetime] = None, keep_fraction: bool = False) -> str:
    """Timestamp usable in file and directory names (colons replaced by dashes).

    Without ``keep_fraction`` the sub-second part is dropped, e.g.
    ``2024-05-01T10-15-30``.
    """
    stamp = utc_now_iso(moment).replace(":", "-")
    if not keep_fraction:
        stamp = stamp.split(".")[0]
    return stamp
