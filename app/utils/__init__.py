"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_app_timezone,
    ensure_utc,
    ensure_utc_naive_datetime,
    from_utc_naive_datetime,
    get_app_timezone,
    isoformat_or_none,
    now_in_app_timezone,
    now_utc_naive_datetime,
)

__all__ = [
    "ensure_app_timezone",
    "ensure_utc",
    "ensure_utc_naive_datetime",
    "from_utc_naive_datetime",
    "get_app_timezone",
    "isoformat_or_none",
    "now_in_app_timezone",
    "now_utc_naive_datetime",
]
