"""Declarations for every event emitted by the Commit Protocol contract.

Each :class:`EventKind` has exactly one :class:`EventSpec` describing its
parameters in ABI order. The mapper, the feed decoder and the query layer are
all driven from :data:`EVENT_SPECS`, so adding an event to the contract means
adding one entry here and one record model in ``commit_ledger.ledger.storage``.
"""

from __future__ import annotations

import dataclasses as dc
import enum

from commit_ledger.events.errors import MalformedEventError


class EventKind(enum.StrEnum):
    """Events emitted by the Commit Protocol contract, by ABI name."""

    CLIENT_DEACTIVATED = "ClientDeactivated"
    CLIENT_REGISTERED = "ClientRegistered"
    COMMITMENT_CANCELLED = "CommitmentCancelled"
    COMMITMENT_CREATED = "CommitmentCreated"
    COMMITMENT_EMERGENCY_PAUSED = "CommitmentEmergencyPaused"
    COMMITMENT_EMERGENCY_RESOLVED = "CommitmentEmergencyResolved"
    COMMITMENT_JOINED = "CommitmentJoined"
    COMMITMENT_RESOLVED = "CommitmentResolved"
    EMERGENCY_WITHDRAWAL = "EmergencyWithdrawal"
    FEES_CLAIMED = "FeesClaimed"
    INITIALIZED = "Initialized"
    OWNERSHIP_TRANSFERRED = "OwnershipTransferred"
    PAUSED = "Paused"
    PROTOCOL_FEE_ADDRESS_UPDATED = "ProtocolFeeAddressUpdated"
    REWARDS_CLAIMED = "RewardsClaimed"
    TOKEN_ALLOWANCE_UPDATED = "TokenAllowanceUpdated"
    UNPAUSED = "Unpaused"
    UPGRADED = "Upgraded"


class ParamType(enum.StrEnum):
    """Solidity parameter shapes used by the contract's events."""

    ADDRESS = "address"
    ADDRESS_LIST = "address[]"
    UINT = "uint"
    BOOL = "bool"
    STRING = "string"


@dc.dataclass(frozen=True, slots=True)
class ParamSpec:
    """A single event parameter and the record attribute it is copied into."""

    name: str
    type: ParamType
    attribute: str
    bits: int = 256


@dc.dataclass(frozen=True, slots=True)
class EventSpec:
    """Parameter declaration for one event kind."""

    kind: EventKind
    params: tuple[ParamSpec, ...]

    @property
    def param_names(self) -> frozenset[str]:
        """Names of the declared ABI parameters."""
        return frozenset(param.name for param in self.params)

    @property
    def is_commitment_scoped(self) -> bool:
        """Return True when the event carries a commitment id."""
        return any(param.attribute == COMMITMENT_ID_ATTRIBUTE for param in self.params)


COMMITMENT_ID_ATTRIBUTE = "commit_protocol_id"


def _address(name: str, attribute: str) -> ParamSpec:
    return ParamSpec(name, ParamType.ADDRESS, attribute)


def _uint(name: str, attribute: str, bits: int = 256) -> ParamSpec:
    return ParamSpec(name, ParamType.UINT, attribute, bits)


# The contract's generic ``id`` parameter would collide with the store's own
# identity column, so it lands in ``commit_protocol_id``.
_COMMITMENT_ID = _uint("id", COMMITMENT_ID_ATTRIBUTE)

EVENT_SPECS: dict[EventKind, EventSpec] = {
    spec.kind: spec
    for spec in (
        EventSpec(
            EventKind.CLIENT_DEACTIVATED,
            (_address("clientAddress", "client_address"),),
        ),
        EventSpec(
            EventKind.CLIENT_REGISTERED,
            (
                _address("clientAddress", "client_address"),
                _address("feeAddress", "fee_address"),
                _uint("feeShare", "fee_share", bits=8),
            ),
        ),
        EventSpec(EventKind.COMMITMENT_CANCELLED, (_COMMITMENT_ID,)),
        EventSpec(
            EventKind.COMMITMENT_CREATED,
            (
                _COMMITMENT_ID,
                _address("creator", "creator"),
                _address("client", "client"),
                _address("tokenAddress", "token_address"),
                _uint("stakeAmount", "stake_amount"),
                _uint("joinFee", "join_fee"),
                _uint("creatorShare", "creator_share", bits=8),
                ParamSpec("description", ParamType.STRING, "description"),
            ),
        ),
        EventSpec(EventKind.COMMITMENT_EMERGENCY_PAUSED, (_COMMITMENT_ID,)),
        EventSpec(EventKind.COMMITMENT_EMERGENCY_RESOLVED, (_COMMITMENT_ID,)),
        EventSpec(
            EventKind.COMMITMENT_JOINED,
            (_COMMITMENT_ID, _address("participant", "participant")),
        ),
        EventSpec(
            EventKind.COMMITMENT_RESOLVED,
            (
                _COMMITMENT_ID,
                ParamSpec("winners", ParamType.ADDRESS_LIST, "winners"),
            ),
        ),
        EventSpec(
            EventKind.EMERGENCY_WITHDRAWAL,
            (_address("token", "token"), _uint("amount", "amount")),
        ),
        EventSpec(
            EventKind.FEES_CLAIMED,
            (
                _address("recipient", "recipient"),
                _address("token", "token"),
                _uint("amount", "amount"),
            ),
        ),
        EventSpec(EventKind.INITIALIZED, (_uint("version", "version", bits=64),)),
        EventSpec(
            EventKind.OWNERSHIP_TRANSFERRED,
            (
                _address("previousOwner", "previous_owner"),
                _address("newOwner", "new_owner"),
            ),
        ),
        EventSpec(EventKind.PAUSED, (_address("account", "account"),)),
        EventSpec(
            EventKind.PROTOCOL_FEE_ADDRESS_UPDATED,
            (
                _address("oldAddress", "old_address"),
                _address("newAddress", "new_address"),
            ),
        ),
        EventSpec(
            EventKind.REWARDS_CLAIMED,
            (
                _COMMITMENT_ID,
                _address("user", "user"),
                _address("token", "token"),
                _uint("amount", "amount"),
            ),
        ),
        EventSpec(
            EventKind.TOKEN_ALLOWANCE_UPDATED,
            (
                _address("token", "token"),
                ParamSpec("allowed", ParamType.BOOL, "allowed"),
            ),
        ),
        EventSpec(EventKind.UNPAUSED, (_address("account", "account"),)),
        EventSpec(
            EventKind.UPGRADED, (_address("implementation", "implementation"),)
        ),
    )
}


def parse_event_kind(name: str) -> EventKind:
    """Resolve an ABI event name into an :class:`EventKind`.

    Raises
    ------
    MalformedEventError
        If the contract does not emit an event with that name.

    """
    try:
        return EventKind(name)
    except ValueError as exc:
        raise MalformedEventError.unknown_event(name) from exc


def get_event_spec(kind: EventKind) -> EventSpec:
    """Return the parameter declaration for ``kind``."""
    return EVENT_SPECS[kind]
