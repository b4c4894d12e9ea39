"""Read access to persisted ledger records for downstream consumers."""

from __future__ import annotations

import typing as typ

from sqlalchemy import func, select

from commit_ledger.common.hexbytes import to_hex
from commit_ledger.events.kinds import (
    COMMITMENT_ID_ATTRIBUTE,
    EVENT_SPECS,
    EventKind,
    get_event_spec,
)
from commit_ledger.events.occurrence import split_record_id
from commit_ledger.ledger.storage import LedgerRecord, get_record_model

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# Field names exposed by the original subgraph schema.
_PROVENANCE_FIELDS = (
    ("record_id", "id"),
    ("block_number", "blockNumber"),
    ("block_timestamp", "blockTimestamp"),
    ("transaction_hash", "transactionHash"),
)
_COMMITMENT_ID_FIELD = "CommitProtocol_id"

COMMITMENT_SCOPED_KINDS: tuple[EventKind, ...] = tuple(
    kind for kind, spec in EVENT_SPECS.items() if spec.is_commitment_scoped
)


def _field_value(value: object) -> object:
    match value:
        case bytes():
            return to_hex(value)
        case int() if not isinstance(value, bool):
            # uint256 amounts exceed what JSON consumers can hold as numbers.
            return str(value)
        case _:
            return value


def _chain_position(record: LedgerRecord) -> tuple[int, bytes, int]:
    transaction_hash, log_index = split_record_id(record.record_id)
    return (record.block_number, transaction_hash, log_index)


def record_as_dict(record: LedgerRecord) -> dict[str, object]:
    """Render a record with the subgraph's field names.

    Byte fields become ``0x`` hex and integers become decimal strings, the
    same representation GraphQL clients receive for ``Bytes`` and ``BigInt``.
    """
    rendered: dict[str, object] = {
        name: _field_value(getattr(record, attribute))
        for attribute, name in _PROVENANCE_FIELDS
    }
    for param in get_event_spec(record.event_kind).params:
        name = (
            _COMMITMENT_ID_FIELD
            if param.attribute == COMMITMENT_ID_ATTRIBUTE
            else param.name
        )
        rendered[name] = _field_value(getattr(record, param.attribute))
    return rendered


class LedgerReader:
    """Query helper over the ledger tables.

    Records of different kinds are never linked in storage; anything that
    spans kinds (such as a commitment's history) is assembled here at query
    time.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Store the session factory used by queries."""
        self._session_factory = session_factory

    async def get(self, kind: EventKind, record_id: bytes) -> LedgerRecord | None:
        """Return the record of ``kind`` with ``record_id`` if present."""
        async with self._session_factory() as session:
            return await session.get(get_record_model(kind), record_id)

    async def count(self, kind: EventKind) -> int:
        """Return how many records of ``kind`` are stored."""
        model = get_record_model(kind)
        async with self._session_factory() as session:
            total = await session.scalar(select(func.count()).select_from(model))
            return int(total or 0)

    async def list_records(
        self, kind: EventKind, limit: int | None = None
    ) -> list[LedgerRecord]:
        """Return records of ``kind`` ordered by block number, then record id."""
        model = get_record_model(kind)
        stmt = select(model).order_by(model.block_number, model.record_id)
        if limit is not None:
            stmt = stmt.limit(limit)
        async with self._session_factory() as session:
            return list((await session.scalars(stmt)).all())

    async def for_commitment(self, commitment_id: int) -> list[LedgerRecord]:
        """Return every commitment-scoped record for ``commitment_id``.

        Results span kinds and are ordered by block number, transaction hash
        and log index.
        """
        records: list[LedgerRecord] = []
        async with self._session_factory() as session:
            for kind in COMMITMENT_SCOPED_KINDS:
                model = get_record_model(kind)
                column = getattr(model, COMMITMENT_ID_ATTRIBUTE)
                stmt = select(model).where(column == commitment_id)
                records.extend((await session.scalars(stmt)).all())
        return sorted(records, key=_chain_position)
