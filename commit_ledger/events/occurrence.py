"""Event occurrences and the record identifiers derived from them."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from commit_ledger.common.hexbytes import HASH_LENGTH, parse_hex, to_hex
from commit_ledger.common.time import from_block_timestamp
from commit_ledger.events.coercion import coerce_uint
from commit_ledger.events.errors import MalformedEventError
from commit_ledger.events.kinds import EventKind, parse_event_kind

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

_I32_MIN = -(1 << 31)
_I32_MAX = (1 << 31) - 1
_PROVENANCE_WIDTHS = (
    ("log_index", 31),
    ("block_number", 63),
    ("block_timestamp", 63),
)


def make_record_id(transaction_hash: bytes, log_index: int) -> bytes:
    """Derive the record id for the log at ``log_index`` in a transaction.

    The id is the 32-byte transaction hash followed by the log index encoded
    as a signed 32-bit little-endian integer, matching graph-ts
    ``Bytes.concatI32``. Two logs share an id only if they share both the
    transaction and the log position.
    """
    if len(transaction_hash) != HASH_LENGTH:
        raise MalformedEventError.invalid_provenance(
            "transaction_hash",
            f"must be {HASH_LENGTH} bytes, got {len(transaction_hash)}",
        )
    if isinstance(log_index, bool) or not _I32_MIN <= log_index <= _I32_MAX:
        raise MalformedEventError.invalid_provenance(
            "log_index", f"must fit in a signed 32-bit integer, got {log_index!r}"
        )
    return transaction_hash + log_index.to_bytes(4, "little", signed=True)


def split_record_id(record_id: bytes) -> tuple[bytes, int]:
    """Recover ``(transaction_hash, log_index)`` from a record id."""
    if len(record_id) != HASH_LENGTH + 4:
        msg = f"record id must be {HASH_LENGTH + 4} bytes, got {len(record_id)}"
        raise ValueError(msg)
    return (
        record_id[:HASH_LENGTH],
        int.from_bytes(record_id[HASH_LENGTH:], "little", signed=True),
    )


def format_record_id(record_id: bytes) -> str:
    """Render a record id as ``0x`` hex for logs and CLI output."""
    return to_hex(record_id)


@dc.dataclass(frozen=True, slots=True)
class EventOccurrence:
    """A decoded log delivered by the indexing runtime.

    ``params`` holds the decoded ABI parameters keyed by their ABI names.
    Provenance fields are copied verbatim into the resulting record.
    """

    kind: EventKind
    params: cabc.Mapping[str, object]
    transaction_hash: bytes
    log_index: int
    block_number: int
    block_timestamp: int

    @classmethod
    def build(  # noqa: PLR0913
        cls,
        event: EventKind | str,
        params: cabc.Mapping[str, object],
        *,
        transaction_hash: bytes | str,
        log_index: int | str,
        block_number: int | str,
        block_timestamp: int | str,
    ) -> EventOccurrence:
        """Construct an occurrence from loosely typed values.

        Hex strings are accepted for the transaction hash and decimal or hex
        strings for the numeric provenance fields.

        Raises
        ------
        MalformedEventError
            If the event name is unknown or provenance fails validation.

        """
        kind = event if isinstance(event, EventKind) else parse_event_kind(event)
        try:
            tx_hash = parse_hex(transaction_hash, HASH_LENGTH)
        except ValueError as exc:
            raise MalformedEventError.invalid_provenance(
                "transaction_hash", str(exc)
            ) from exc
        return cls(
            kind=kind,
            params=dict(params),
            transaction_hash=tx_hash,
            log_index=_provenance_uint("log_index", log_index, bits=31),
            block_number=_provenance_uint("block_number", block_number, bits=63),
            block_timestamp=_provenance_uint(
                "block_timestamp", block_timestamp, bits=63
            ),
        )

    @property
    def record_id(self) -> bytes:
        """Deterministic record id for this occurrence."""
        return make_record_id(self.transaction_hash, self.log_index)

    @property
    def block_time(self) -> dt.datetime:
        """Chain-reported block time as an aware UTC datetime."""
        return from_block_timestamp(self.block_timestamp)


def check_provenance(occurrence: EventOccurrence) -> None:
    """Check the provenance of an occurrence built without :meth:`build`.

    The log index must fit the record id's signed 32-bit slot without going
    negative, and block number and timestamp must fit the ledger's signed
    64-bit columns.

    Raises
    ------
    MalformedEventError
        If the transaction hash is not bytes or another provenance field
        is not an int of the allowed width.

    """
    if not isinstance(occurrence.transaction_hash, bytes):
        raise MalformedEventError.invalid_provenance(
            "transaction_hash",
            f"expected bytes, got {type(occurrence.transaction_hash).__name__}",
        )
    for field, bits in _PROVENANCE_WIDTHS:
        value = getattr(occurrence, field)
        if isinstance(value, bool) or not isinstance(value, int):
            raise MalformedEventError.invalid_provenance(
                field, f"expected an int, got {type(value).__name__}"
            )
        if not 0 <= value < 1 << bits:
            raise MalformedEventError.invalid_provenance(
                field, f"{value} does not fit in uint{bits}"
            )


def _provenance_uint(field: str, value: object, bits: int) -> int:
    try:
        return coerce_uint(value, bits)
    except ValueError as exc:
        raise MalformedEventError.invalid_provenance(field, str(exc)) from exc
