"""Append-only indexer for Commit Protocol contract events."""

from __future__ import annotations

from .events import EventKind, EventOccurrence, MalformedEventError, make_record_id
from .ledger import EventLedgerMapper, LedgerReader, MappingOutcome, RecordPersistError

__all__ = [
    "EventKind",
    "EventLedgerMapper",
    "EventOccurrence",
    "LedgerReader",
    "MalformedEventError",
    "MappingOutcome",
    "RecordPersistError",
    "make_record_id",
]
