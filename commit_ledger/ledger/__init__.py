"""Append-only ledger of Commit Protocol event records."""

from __future__ import annotations

from .errors import RecordPersistError
from .mapper import EventHandler, EventLedgerMapper, MappingOutcome, build_record
from .queries import COMMITMENT_SCOPED_KINDS, LedgerReader, record_as_dict
from .storage import (
    Base,
    ClientDeactivated,
    ClientRegistered,
    CommitmentCancelled,
    CommitmentCreated,
    CommitmentEmergencyPaused,
    CommitmentEmergencyResolved,
    CommitmentJoined,
    CommitmentResolved,
    EmergencyWithdrawal,
    FeesClaimed,
    Initialized,
    LedgerRecord,
    OwnershipTransferred,
    Paused,
    ProtocolFeeAddressUpdated,
    RewardsClaimed,
    TokenAllowanceUpdated,
    Uint256,
    Unpaused,
    Upgraded,
    get_record_model,
    init_ledger_storage,
)

__all__ = [
    "COMMITMENT_SCOPED_KINDS",
    "Base",
    "ClientDeactivated",
    "ClientRegistered",
    "CommitmentCancelled",
    "CommitmentCreated",
    "CommitmentEmergencyPaused",
    "CommitmentEmergencyResolved",
    "CommitmentJoined",
    "CommitmentResolved",
    "EmergencyWithdrawal",
    "EventHandler",
    "EventLedgerMapper",
    "FeesClaimed",
    "Initialized",
    "LedgerReader",
    "LedgerRecord",
    "MappingOutcome",
    "OwnershipTransferred",
    "Paused",
    "ProtocolFeeAddressUpdated",
    "RecordPersistError",
    "RewardsClaimed",
    "TokenAllowanceUpdated",
    "Uint256",
    "Unpaused",
    "Upgraded",
    "build_record",
    "get_record_model",
    "init_ledger_storage",
    "record_as_dict",
]
