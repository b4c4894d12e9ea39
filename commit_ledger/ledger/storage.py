"""Persistence models for the append-only Commit Protocol event ledger.

Every event kind has its own table. Rows are keyed by ``record_id`` (see
:func:`commit_ledger.events.make_record_id`), and the primary key is the
uniqueness guarantee :class:`~commit_ledger.ledger.mapper.EventLedgerMapper`
relies on to turn replays into duplicate-key rejections.
"""

from __future__ import annotations

import decimal
import typing as typ

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    LargeBinary,
    Numeric,
    SmallInteger,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from commit_ledger.common.hexbytes import ADDRESS_LENGTH, HASH_LENGTH
from commit_ledger.events.kinds import EventKind

if typ.TYPE_CHECKING:
    from sqlalchemy.engine import Dialect
    from sqlalchemy.ext.asyncio import AsyncEngine
    from sqlalchemy.types import TypeEngine

RECORD_ID_LENGTH = HASH_LENGTH + 4
_UINT256_DIGITS = 78


class Base(DeclarativeBase):
    """Base declarative class for ledger models."""


class Uint256(TypeDecorator[int]):
    """Exact unsigned 256-bit integers on every backend.

    SQLite cannot hold integers wider than 64 bits without falling back to
    REAL, so values are stored there as decimal text. Other dialects use
    ``NUMERIC(78, 0)``.
    """

    impl = Numeric(_UINT256_DIGITS, 0)
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine[typ.Any]:
        """Choose a lossless column type for the active dialect."""
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(_UINT256_DIGITS))
        return dialect.type_descriptor(Numeric(_UINT256_DIGITS, 0))

    def process_bind_param(
        self, value: int | None, dialect: Dialect
    ) -> str | decimal.Decimal | None:
        """Render integers as text on SQLite and Decimal elsewhere."""
        if value is None:
            return None
        if dialect.name == "sqlite":
            return str(value)
        return decimal.Decimal(value)

    def process_result_value(
        self, value: str | decimal.Decimal | None, dialect: Dialect
    ) -> int | None:
        """Return stored amounts as Python ints."""
        if value is None:
            return None
        return int(value)


class LedgerRecord:
    """Columns shared by every event record."""

    event_kind: typ.ClassVar[EventKind]

    record_id: Mapped[bytes] = mapped_column(
        LargeBinary(RECORD_ID_LENGTH), primary_key=True
    )
    block_number: Mapped[int] = mapped_column(BigInteger, index=True)
    block_timestamp: Mapped[int] = mapped_column(BigInteger)
    transaction_hash: Mapped[bytes] = mapped_column(LargeBinary(HASH_LENGTH))


type RecordModel = type[LedgerRecord]
_registry: dict[EventKind, RecordModel] = {}


def register_record[ModelT: LedgerRecord](
    kind: EventKind,
) -> typ.Callable[[type[ModelT]], type[ModelT]]:
    """Register the record model persisted for ``kind``."""

    def _inner(model: type[ModelT]) -> type[ModelT]:
        model.event_kind = kind
        _registry[kind] = model
        return model

    return _inner


def get_record_model(kind: EventKind) -> RecordModel:
    """Return the record model for ``kind``."""
    return _registry[kind]


def _address() -> Mapped[bytes]:
    return mapped_column(LargeBinary(ADDRESS_LENGTH))


def _commitment_id() -> Mapped[int]:
    return mapped_column(Uint256(), index=True)


@register_record(EventKind.CLIENT_DEACTIVATED)
class ClientDeactivated(LedgerRecord, Base):
    """A client integration was deactivated."""

    __tablename__ = "client_deactivated"

    client_address: Mapped[bytes] = _address()


@register_record(EventKind.CLIENT_REGISTERED)
class ClientRegistered(LedgerRecord, Base):
    """A client integration was registered with its fee routing."""

    __tablename__ = "client_registered"

    client_address: Mapped[bytes] = _address()
    fee_address: Mapped[bytes] = _address()
    fee_share: Mapped[int] = mapped_column(SmallInteger)


@register_record(EventKind.COMMITMENT_CANCELLED)
class CommitmentCancelled(LedgerRecord, Base):
    """A commitment was cancelled by its creator."""

    __tablename__ = "commitment_cancelled"

    commit_protocol_id: Mapped[int] = _commitment_id()


@register_record(EventKind.COMMITMENT_CREATED)
class CommitmentCreated(LedgerRecord, Base):
    """A staked commitment was created."""

    __tablename__ = "commitment_created"

    commit_protocol_id: Mapped[int] = _commitment_id()
    creator: Mapped[bytes] = _address()
    client: Mapped[bytes] = _address()
    token_address: Mapped[bytes] = _address()
    stake_amount: Mapped[int] = mapped_column(Uint256())
    join_fee: Mapped[int] = mapped_column(Uint256())
    creator_share: Mapped[int] = mapped_column(SmallInteger)
    description: Mapped[str] = mapped_column(Text())


@register_record(EventKind.COMMITMENT_EMERGENCY_PAUSED)
class CommitmentEmergencyPaused(LedgerRecord, Base):
    """A commitment was frozen by the emergency pause."""

    __tablename__ = "commitment_emergency_paused"

    commit_protocol_id: Mapped[int] = _commitment_id()


@register_record(EventKind.COMMITMENT_EMERGENCY_RESOLVED)
class CommitmentEmergencyResolved(LedgerRecord, Base):
    """A paused commitment was resolved by the owner."""

    __tablename__ = "commitment_emergency_resolved"

    commit_protocol_id: Mapped[int] = _commitment_id()


@register_record(EventKind.COMMITMENT_JOINED)
class CommitmentJoined(LedgerRecord, Base):
    """A participant staked into a commitment."""

    __tablename__ = "commitment_joined"

    commit_protocol_id: Mapped[int] = _commitment_id()
    participant: Mapped[bytes] = _address()


@register_record(EventKind.COMMITMENT_RESOLVED)
class CommitmentResolved(LedgerRecord, Base):
    """A commitment was resolved; ``winners`` keeps emission order."""

    __tablename__ = "commitment_resolved"

    commit_protocol_id: Mapped[int] = _commitment_id()
    winners: Mapped[list[str]] = mapped_column(JSON)


@register_record(EventKind.EMERGENCY_WITHDRAWAL)
class EmergencyWithdrawal(LedgerRecord, Base):
    """Tokens were withdrawn through the emergency path."""

    __tablename__ = "emergency_withdrawal"

    token: Mapped[bytes] = _address()
    amount: Mapped[int] = mapped_column(Uint256())


@register_record(EventKind.FEES_CLAIMED)
class FeesClaimed(LedgerRecord, Base):
    """Accrued fees were claimed."""

    __tablename__ = "fees_claimed"

    recipient: Mapped[bytes] = _address()
    token: Mapped[bytes] = _address()
    amount: Mapped[int] = mapped_column(Uint256())


@register_record(EventKind.INITIALIZED)
class Initialized(LedgerRecord, Base):
    """The proxy was initialised at ``version``."""

    __tablename__ = "initialized"

    version: Mapped[int] = mapped_column(Uint256())


@register_record(EventKind.OWNERSHIP_TRANSFERRED)
class OwnershipTransferred(LedgerRecord, Base):
    """Contract ownership moved to a new account."""

    __tablename__ = "ownership_transferred"

    previous_owner: Mapped[bytes] = _address()
    new_owner: Mapped[bytes] = _address()


@register_record(EventKind.PAUSED)
class Paused(LedgerRecord, Base):
    """The contract was paused."""

    __tablename__ = "paused"

    account: Mapped[bytes] = _address()


@register_record(EventKind.PROTOCOL_FEE_ADDRESS_UPDATED)
class ProtocolFeeAddressUpdated(LedgerRecord, Base):
    """The protocol fee recipient changed."""

    __tablename__ = "protocol_fee_address_updated"

    old_address: Mapped[bytes] = _address()
    new_address: Mapped[bytes] = _address()


@register_record(EventKind.REWARDS_CLAIMED)
class RewardsClaimed(LedgerRecord, Base):
    """A winner claimed rewards from a commitment."""

    __tablename__ = "rewards_claimed"

    commit_protocol_id: Mapped[int] = _commitment_id()
    user: Mapped[bytes] = _address()
    token: Mapped[bytes] = _address()
    amount: Mapped[int] = mapped_column(Uint256())


@register_record(EventKind.TOKEN_ALLOWANCE_UPDATED)
class TokenAllowanceUpdated(LedgerRecord, Base):
    """A staking token was allowed or disallowed."""

    __tablename__ = "token_allowance_updated"

    token: Mapped[bytes] = _address()
    allowed: Mapped[bool] = mapped_column(Boolean)


@register_record(EventKind.UNPAUSED)
class Unpaused(LedgerRecord, Base):
    """The contract was unpaused."""

    __tablename__ = "unpaused"

    account: Mapped[bytes] = _address()


@register_record(EventKind.UPGRADED)
class Upgraded(LedgerRecord, Base):
    """The proxy implementation was upgraded."""

    __tablename__ = "upgraded"

    implementation: Mapped[bytes] = _address()


async def init_ledger_storage(engine: AsyncEngine) -> None:
    """Create all ledger tables if they are absent."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
