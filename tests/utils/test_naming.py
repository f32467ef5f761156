"""Tests for naming and timestamp helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from storefront_e2e.utils.naming import slugify, timestamp_for_path, utc_now_iso

MOMENT = datetime(2024, 5, 1, 10, 15, 30, 123456, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("Add to Cart!", "add_to_cart_"),
        ("Navigating to Home Page", "navigating_to_home_page"),
        ("test_login[chromium]", "test_login_chromium_"),
        ("Crème", "cr_me"),
    ],
)
def test_slugify(value, expected):
    assert slugify(value) == expected


def test_utc_now_iso_millisecond_precision():
    assert utc_now_iso(MOMENT) == "2024-05-01T10:15:30.123Z"


def test_utc_now_iso_converts_offsets():
    moment = MOMENT.astimezone(timezone(timedelta(hours=5, minutes=30)))
    assert utc_now_iso(moment) == "2024-05-01T10:15:30.123Z"


def test_utc_now_iso_defaults_to_now():
    stamp = utc_now_iso()
    assert stamp.endswith("Z")
    assert datetime.fromisoformat(stamp.replace("Z", "+00:00")).tzinfo is not None


def test_timestamp_for_path():
    assert timestamp_for_path(MOMENT) == "2024-05-01T10-15-30"
    assert timestamp_for_path(MOMENT, keep_fraction=True) == "2024-05-01T10-15-30.123Z"
