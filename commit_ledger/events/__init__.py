"""Commit Protocol event catalogue and decoded event occurrences."""

from __future__ import annotations

from .coercion import coerce_params
from .errors import MalformedEventError, MalformedEventReason
from .kinds import (
    EVENT_SPECS,
    EventKind,
    EventSpec,
    ParamSpec,
    ParamType,
    get_event_spec,
    parse_event_kind,
)
from .occurrence import (
    EventOccurrence,
    check_provenance,
    format_record_id,
    make_record_id,
    split_record_id,
)

__all__ = [
    "EVENT_SPECS",
    "EventKind",
    "EventOccurrence",
    "EventSpec",
    "MalformedEventError",
    "MalformedEventReason",
    "ParamSpec",
    "ParamType",
    "check_provenance",
    "coerce_params",
    "format_record_id",
    "get_event_spec",
    "make_record_id",
    "parse_event_kind",
    "split_record_id",
]
