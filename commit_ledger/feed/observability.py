"""Structured log events and error categories for feed runs.

All events are emitted as single-line messages tagged with a
:class:`FeedEventType`, so log aggregators can alert on halted runs and
count skipped events without parsing free text.
"""

from __future__ import annotations

import enum
import typing as typ

from sqlalchemy.exc import (
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)

from commit_ledger.events.errors import MalformedEventError
from commit_ledger.feed.errors import FeedDecodeError
from commit_ledger.logging import get_logger, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    import datetime as dt

    from commit_ledger.feed.runner import FeedRunResult

logger = get_logger(__name__)


class FeedEventType(enum.StrEnum):
    """Structured log event types for feed runs."""

    RUN_STARTED = "feed.run.started"
    RUN_COMPLETED = "feed.run.completed"
    RUN_HALTED = "feed.run.halted"
    EVENT_SKIPPED = "feed.event.skipped"


class ErrorCategory(enum.StrEnum):
    """Categories for error classification in alerts."""

    MALFORMED_EVENT = "malformed_event"
    DATABASE_CONNECTIVITY = "database_connectivity"
    DATA_INTEGRITY = "data_integrity"
    DATABASE_ERROR = "database_error"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (MalformedEventError, ErrorCategory.MALFORMED_EVENT),
    (FeedDecodeError, ErrorCategory.MALFORMED_EVENT),
    (OperationalError, ErrorCategory.DATABASE_CONNECTIVITY),
    (InterfaceError, ErrorCategory.DATABASE_CONNECTIVITY),
    (IntegrityError, ErrorCategory.DATA_INTEGRITY),
    (SQLAlchemyError, ErrorCategory.DATABASE_ERROR),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize an exception for alert routing.

    Persistence errors are classified by their chained SQLAlchemy cause.
    """
    target = exc
    if not isinstance(exc, MalformedEventError | FeedDecodeError | SQLAlchemyError):
        target = exc.__cause__ or exc

    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(target, exc_type):
            return category
    return ErrorCategory.UNKNOWN


class FeedEventLogger:
    """Emit structured feed-run events through femtologging."""

    def log_run_started(self, source: str, started_at: dt.datetime) -> None:
        """Log the start of a feed run."""
        log_info(
            logger,
            "[%s] source=%s started_at=%s",
            FeedEventType.RUN_STARTED,
            source,
            started_at.isoformat(),
        )

    def log_run_completed(self, source: str, result: FeedRunResult) -> None:
        """Log a feed run that reached the end of its input."""
        log_info(
            logger,
            "[%s] source=%s created=%d duplicates=%d skipped=%d",
            FeedEventType.RUN_COMPLETED,
            source,
            result.created,
            result.duplicates,
            result.skipped,
        )

    def log_event_skipped(self, source: str, position: int, exc: Exception) -> None:
        """Log an occurrence dropped under the skip policy."""
        log_warning(
            logger,
            "[%s] source=%s position=%d error_category=%s error=%s",
            FeedEventType.EVENT_SKIPPED,
            source,
            position,
            categorize_error(exc),
            exc,
        )

    def log_run_halted(
        self, source: str, position: int, result: FeedRunResult, exc: Exception
    ) -> None:
        """Log a feed run stopped by an error."""
        log_error(
            logger,
            "[%s] source=%s position=%d created=%d error_category=%s "
            "error_type=%s error=%s",
            FeedEventType.RUN_HALTED,
            source,
            position,
            result.created,
            categorize_error(exc),
            type(exc).__name__,
            exc,
            exc_info=exc,
        )
