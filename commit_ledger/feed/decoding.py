"""Decode JSON Lines feeds of decoded Commit Protocol logs.

Each line is one log already decoded against the contract ABI::

    {"event": "CommitmentJoined", "params": {"id": "7", "participant": "0x.."},
     "transactionHash": "0x..", "logIndex": 2, "blockNumber": 1000000,
     "blockTimestamp": 1700000000}

uint256 parameters may be JSON numbers or decimal strings; strings are the
safe choice for values wider than 64 bits.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import msgspec

from commit_ledger.events.occurrence import EventOccurrence
from commit_ledger.feed.errors import FeedDecodeError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


class DecodedLog(msgspec.Struct, frozen=True, rename="camel"):
    """Wire shape of a single decoded log."""

    event: str
    params: dict[str, typ.Any]
    transaction_hash: str
    log_index: int | str
    block_number: int | str
    block_timestamp: int | str

    def to_occurrence(self) -> EventOccurrence:
        """Validate provenance and return the corresponding occurrence."""
        return EventOccurrence.build(
            self.event,
            self.params,
            transaction_hash=self.transaction_hash,
            log_index=self.log_index,
            block_number=self.block_number,
            block_timestamp=self.block_timestamp,
        )


_decoder = msgspec.json.Decoder(DecodedLog)


@dc.dataclass(frozen=True, slots=True)
class FeedLine:
    """A non-blank feed line awaiting decoding."""

    line_number: int
    text: str | bytes

    def decode(self) -> EventOccurrence:
        """Decode the line into an occurrence.

        Raises
        ------
        FeedDecodeError
            If the line is not UTF-8 JSON or does not match :class:`DecodedLog`.
        MalformedEventError
            If the event name or provenance is invalid.

        """
        try:
            log = _decoder.decode(self.text)
        except (msgspec.DecodeError, UnicodeDecodeError) as exc:
            raise FeedDecodeError(self.line_number, str(exc)) from exc
        return log.to_occurrence()


def iter_feed_lines(lines: cabc.Iterable[str | bytes]) -> cabc.Iterator[FeedLine]:
    """Yield numbered feed lines, skipping blank ones."""
    for line_number, text in enumerate(lines, start=1):
        if text.strip():
            yield FeedLine(line_number, text)


def decode_feed_lines(
    lines: cabc.Iterable[str | bytes],
) -> cabc.Iterator[EventOccurrence]:
    """Decode every line eagerly, raising on the first bad one."""
    for line in iter_feed_lines(lines):
        yield line.decode()


def read_feed(path: Path) -> cabc.Iterator[FeedLine]:
    """Yield the numbered lines of the feed file at ``path``."""
    with path.open("rb") as handle:
        yield from iter_feed_lines(handle)
