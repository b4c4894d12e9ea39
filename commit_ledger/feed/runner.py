"""Sequential delivery of event occurrences to the ledger mapper.

The runner stands in for the indexing runtime: it hands occurrences to
:class:`~commit_ledger.ledger.mapper.EventLedgerMapper` one at a time in
delivery order, awaiting each write before the next, and decides what a
failure means for the rest of the feed. The mapper itself never retries or
skips anything.
"""

from __future__ import annotations

import collections
import collections.abc as cabc
import dataclasses as dc
import enum
import typing as typ

from commit_ledger.common.time import utcnow
from commit_ledger.events.errors import MalformedEventError
from commit_ledger.feed.decoding import FeedLine
from commit_ledger.feed.errors import FeedDecodeError
from commit_ledger.feed.observability import FeedEventLogger

if typ.TYPE_CHECKING:
    from commit_ledger.events.kinds import EventKind
    from commit_ledger.events.occurrence import EventOccurrence
    from commit_ledger.ledger.mapper import EventLedgerMapper

type FeedItem = EventOccurrence | FeedLine
type FeedSource = cabc.Iterable[FeedItem] | cabc.AsyncIterable[FeedItem]


class ErrorPolicy(enum.StrEnum):
    """What the runner does with an occurrence that cannot be mapped."""

    HALT = "halt"
    SKIP = "skip"


@dc.dataclass(slots=True)
class FeedRunResult:
    """Counters for a single feed run."""

    created: int = 0
    duplicates: int = 0
    skipped: int = 0
    created_by_kind: collections.Counter[EventKind] = dc.field(
        default_factory=collections.Counter
    )


async def _iterate(source: FeedSource) -> cabc.AsyncIterator[FeedItem]:
    if isinstance(source, cabc.AsyncIterable):
        async for item in source:
            yield item
    else:
        for item in source:
            yield item


class FeedRunner:
    """Drive a mapper over a feed with a configurable error policy.

    Malformed occurrences (including undecodable feed lines) follow
    ``on_error``. Persistence failures always halt the run because skipping
    them would silently lose records.
    """

    def __init__(
        self,
        mapper: EventLedgerMapper,
        *,
        on_error: ErrorPolicy = ErrorPolicy.HALT,
        event_logger: FeedEventLogger | None = None,
    ) -> None:
        """Store the mapper, error policy and event logger."""
        self._mapper = mapper
        self._on_error = on_error
        self._events = event_logger or FeedEventLogger()

    async def run(self, source: FeedSource, *, label: str = "feed") -> FeedRunResult:
        """Map every item of ``source`` in order.

        Items may be :class:`EventOccurrence` values or undecoded
        :class:`FeedLine` values from :func:`commit_ledger.feed.read_feed`.

        Raises
        ------
        MalformedEventError, FeedDecodeError
            When an item is malformed and the policy is ``HALT``.
        RecordPersistError
            When the store fails a write.

        """
        result = FeedRunResult()
        self._events.log_run_started(label, utcnow())

        position = 0
        async for item in _iterate(source):
            position = item.line_number if isinstance(item, FeedLine) else position + 1
            try:
                occurrence = item.decode() if isinstance(item, FeedLine) else item
                outcome = await self._mapper.handle(occurrence)
            except (MalformedEventError, FeedDecodeError) as exc:
                if self._on_error is ErrorPolicy.HALT:
                    self._events.log_run_halted(label, position, result, exc)
                    raise
                result.skipped += 1
                self._events.log_event_skipped(label, position, exc)
                continue
            except Exception as exc:
                self._events.log_run_halted(label, position, result, exc)
                raise

            if outcome.created:
                result.created += 1
                result.created_by_kind[outcome.kind] += 1
            else:
                result.duplicates += 1

        self._events.log_run_completed(label, result)
        return result
