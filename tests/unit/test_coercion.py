"""Unit tests for event parameter coercion."""

from __future__ import annotations

import pytest

from commit_ledger.events import (
    EventKind,
    MalformedEventError,
    MalformedEventReason,
    coerce_params,
    get_event_spec,
)
from commit_ledger.events.coercion import (
    coerce_address,
    coerce_address_list,
    coerce_uint,
)
from tests.helpers.ledger_events import (
    MAX_UINT256,
    SAMPLE_PARAMS,
    WINNER_A,
    WINNER_B,
)


class TestCoerceUint:
    """Tests for unsigned integer coercion."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, 0),
            ("1000000", 1_000_000),
            ("0xff", 255),
            (str(MAX_UINT256), MAX_UINT256),
        ],
    )
    def test_accepts_ints_and_numeric_strings(
        self, value: object, expected: int
    ) -> None:
        """Ints, decimal strings and hex strings are accepted exactly."""
        assert coerce_uint(value) == expected

    @pytest.mark.parametrize(
        "value",
        [True, -1, 1 << 256, "12.5", "", 1.0, None, "\u0663", "\uff11\uff12"],
        ids=[
            "bool",
            "negative",
            "overflow",
            "fraction",
            "empty",
            "float",
            "none",
            "arabic-indic-digit",
            "fullwidth-digits",
        ],
    )
    def test_rejects_non_uint256(self, value: object) -> None:
        """Values that are not uint256 raise ValueError."""
        with pytest.raises(ValueError):  # noqa: PT011 - message varies per value
            coerce_uint(value)

    def test_respects_narrow_width(self) -> None:
        """uint8 parameters reject values above 255."""
        assert coerce_uint(255, bits=8) == 255
        with pytest.raises(ValueError, match="uint8"):
            coerce_uint(256, bits=8)


class TestCoerceAddress:
    """Tests for address coercion."""

    def test_hex_and_bytes_are_equivalent(self) -> None:
        """Checksummed hex, lowercase hex and raw bytes agree."""
        raw = bytes.fromhex("ab" * 20)
        assert coerce_address("0x" + "AB" * 20) == raw
        assert coerce_address(raw) == raw

    @pytest.mark.parametrize("value", ["0x1234", "ab" * 20, 42, ["0x" + "ab" * 20]])
    def test_rejects_wrong_shapes(self, value: object) -> None:
        """Short, unprefixed and non-string values are rejected."""
        with pytest.raises(ValueError):  # noqa: PT011 - message varies per value
            coerce_address(value)

    def test_address_list_keeps_order_and_duplicates(self) -> None:
        """Winner lists are neither reordered nor deduplicated."""
        winners = [WINNER_B, WINNER_A, WINNER_B]
        assert coerce_address_list(winners) == winners

    def test_address_list_rejects_single_address(self) -> None:
        """A lone address where a list is expected is malformed."""
        with pytest.raises(ValueError, match="list of addresses"):
            coerce_address_list(WINNER_A)


class TestCoerceParams:
    """Tests for whole-event parameter mapping."""

    def test_maps_abi_names_onto_record_attributes(self) -> None:
        """CommitmentCreated parameters land on snake_case attributes."""
        spec = get_event_spec(EventKind.COMMITMENT_CREATED)
        fields = coerce_params(spec, SAMPLE_PARAMS[EventKind.COMMITMENT_CREATED])

        assert fields["commit_protocol_id"] == 1
        assert fields["token_address"] == bytes.fromhex("cc" * 20)
        assert fields["stake_amount"] == 1_000_000
        assert fields["join_fee"] == 50_000
        assert fields["creator_share"] == 10
        assert fields["description"] == "Run 5km daily"

    def test_missing_parameter(self) -> None:
        """Dropping a declared parameter is reported by name."""
        params = dict(SAMPLE_PARAMS[EventKind.COMMITMENT_JOINED])
        del params["participant"]

        with pytest.raises(MalformedEventError) as excinfo:
            coerce_params(get_event_spec(EventKind.COMMITMENT_JOINED), params)
        assert excinfo.value.reason == MalformedEventReason.MISSING_PARAMETER
        assert "participant" in str(excinfo.value)

    def test_unexpected_parameter(self) -> None:
        """Undeclared parameters are rejected rather than dropped."""
        params = {**SAMPLE_PARAMS[EventKind.PAUSED], "extra": 1}

        with pytest.raises(MalformedEventError) as excinfo:
            coerce_params(get_event_spec(EventKind.PAUSED), params)
        assert excinfo.value.reason == MalformedEventReason.UNEXPECTED_PARAMETER

    def test_invalid_parameter_names_event_and_field(self) -> None:
        """Mis-shaped values identify the event and parameter."""
        params = {**SAMPLE_PARAMS[EventKind.TOKEN_ALLOWANCE_UPDATED], "allowed": "yes"}

        with pytest.raises(MalformedEventError) as excinfo:
            coerce_params(get_event_spec(EventKind.TOKEN_ALLOWANCE_UPDATED), params)
        assert excinfo.value.reason == MalformedEventReason.INVALID_PARAMETER
        assert "TokenAllowanceUpdated.allowed" in str(excinfo.value)
