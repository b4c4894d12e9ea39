"""Map decoded Commit Protocol events onto append-only ledger records."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from commit_ledger.events.coercion import coerce_params
from commit_ledger.events.errors import MalformedEventError
from commit_ledger.events.kinds import EventKind, get_event_spec, parse_event_kind
from commit_ledger.events.occurrence import check_provenance, format_record_id
from commit_ledger.ledger.errors import RecordPersistError
from commit_ledger.ledger.storage import LedgerRecord, get_record_model
from commit_ledger.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from commit_ledger.events.occurrence import EventOccurrence

logger = get_logger(__name__)


@dc.dataclass(frozen=True, slots=True)
class MappingOutcome:
    """Result of mapping a single occurrence.

    ``created`` is False when the store already held a record with the same
    id, in which case ``record`` is the existing row.
    """

    kind: EventKind
    record_id: bytes
    created: bool
    record: LedgerRecord


type EventHandler = typ.Callable[[EventOccurrence], typ.Awaitable[MappingOutcome]]


def build_record(occurrence: EventOccurrence) -> LedgerRecord:
    """Construct the unsaved record for ``occurrence``.

    Raises
    ------
    MalformedEventError
        If the event kind is unknown, provenance is out of range or the
        parameters do not match the event declaration.

    """
    kind = parse_event_kind(occurrence.kind)
    check_provenance(occurrence)
    fields = coerce_params(get_event_spec(kind), occurrence.params)
    model = get_record_model(kind)
    return model(
        record_id=occurrence.record_id,
        block_number=occurrence.block_number,
        block_timestamp=occurrence.block_timestamp,
        transaction_hash=occurrence.transaction_hash,
        **fields,
    )


class EventLedgerMapper:
    """Stateless writer producing one ledger record per event occurrence.

    The store must enforce uniqueness of ``record_id`` per record table (the
    models in :mod:`commit_ledger.ledger.storage` declare it as the primary
    key). The mapper never checks for an existing row before writing, so a
    replayed occurrence is only collapsed into the existing record because
    the store rejects the second insert.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Store the session factory used for each write."""
        self._session_factory = session_factory

    async def handle(self, occurrence: EventOccurrence) -> MappingOutcome:
        """Persist the record for ``occurrence`` in a single transaction.

        Raises
        ------
        MalformedEventError
            If parameters are missing or malformed; nothing is written.
        RecordPersistError
            If the store fails the write for any reason other than a
            duplicate record id.

        """
        record = build_record(occurrence)
        model = type(record)
        kind = model.event_kind
        record_id = record.record_id

        async with self._session_factory() as session:
            session.add(record)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                existing = await self._load_existing(session, model, record_id)
                if existing is None:
                    raise RecordPersistError.missing_after_conflict(
                        kind, record_id
                    ) from exc
                log_info(
                    logger,
                    "Skipped duplicate %s record %s",
                    kind,
                    format_record_id(record_id),
                )
                return MappingOutcome(kind, record_id, False, existing)  # noqa: FBT003
            except SQLAlchemyError as exc:
                await session.rollback()
                raise RecordPersistError.write_failed(kind, record_id) from exc

            await session.refresh(record)
            return MappingOutcome(kind, record_id, True, record)  # noqa: FBT003

    def handler_for(self, kind: EventKind) -> EventHandler:
        """Return the handling operation dedicated to ``kind``."""

        async def _handle(occurrence: EventOccurrence) -> MappingOutcome:
            if occurrence.kind != kind:
                raise MalformedEventError.kind_mismatch(kind, occurrence.kind)
            return await self.handle(occurrence)

        _handle.__name__ = f"handle_{kind}"
        return _handle

    @staticmethod
    async def _load_existing(
        session: AsyncSession, model: type[LedgerRecord], record_id: bytes
    ) -> LedgerRecord | None:
        return await session.get(model, record_id)
