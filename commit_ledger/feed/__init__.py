"""Decoded-log feeds and the sequential runner that maps them."""

from __future__ import annotations

from .decoding import DecodedLog, FeedLine, decode_feed_lines, iter_feed_lines, read_feed
from .errors import FeedDecodeError
from .observability import ErrorCategory, FeedEventLogger, FeedEventType, categorize_error
from .runner import ErrorPolicy, FeedRunner, FeedRunResult

__all__ = [
    "DecodedLog",
    "ErrorCategory",
    "ErrorPolicy",
    "FeedDecodeError",
    "FeedEventLogger",
    "FeedEventType",
    "FeedLine",
    "FeedRunResult",
    "FeedRunner",
    "categorize_error",
    "decode_feed_lines",
    "iter_feed_lines",
    "read_feed",
]
