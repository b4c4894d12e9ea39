"""Error types raised while reading decoded-log feeds."""

from __future__ import annotations


class FeedDecodeError(ValueError):
    """Raised when a feed line is not a valid decoded-log document."""

    def __init__(self, line_number: int, detail: str) -> None:
        """Keep the 1-based line number for operator-facing reports."""
        super().__init__(f"feed line {line_number}: {detail}")
        self.line_number = line_number
