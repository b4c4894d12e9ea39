"""Common time utilities."""

from __future__ import annotations

import datetime as dt


def utcnow() -> dt.datetime:
    """Return an aware UTC timestamp suitable for DB defaults."""
    return dt.datetime.now(dt.UTC)


def from_block_timestamp(seconds: int) -> dt.datetime:
    """Convert a chain-reported epoch timestamp into an aware UTC datetime."""
    return dt.datetime.fromtimestamp(seconds, tz=dt.UTC)
