"""Coerce decoded event parameters into record field values."""

from __future__ import annotations

import collections.abc as cabc

from commit_ledger.common.hexbytes import ADDRESS_LENGTH, parse_hex, to_hex
from commit_ledger.events.errors import MalformedEventError
from commit_ledger.events.kinds import EventSpec, ParamSpec, ParamType

type FieldValue = bytes | int | bool | str | list[str]


def coerce_uint(value: object, bits: int = 256) -> int:
    """Return ``value`` as an unsigned integer that fits in ``bits``.

    Accepts Python ints, decimal strings and ``0x`` hex strings so uint256
    amounts survive JSON transports that cannot carry big numbers.

    Raises
    ------
    ValueError
        If the value is not an unsigned integer of the requested width.

    """
    match value:
        case bool():
            msg = "expected an unsigned integer, got a bool"
            raise ValueError(msg)
        case int():
            number = value
        case str() if value.isascii() and value.strip().lower().startswith("0x"):
            number = int(value.strip(), 16)
        case str() if value.isascii() and value.strip().isdigit():
            number = int(value.strip())
        case _:
            msg = f"expected an unsigned integer, got {value!r}"
            raise ValueError(msg)

    if number < 0 or number >= 1 << bits:
        msg = f"{number} does not fit in uint{bits}"
        raise ValueError(msg)
    return number


def coerce_address(value: object) -> bytes:
    """Return a 20-byte address from raw bytes or ``0x`` hex."""
    if not isinstance(value, str | bytes | bytearray):
        msg = f"expected an address, got {type(value).__name__}"
        raise ValueError(msg)  # noqa: TRY004
    return parse_hex(value, ADDRESS_LENGTH)


def coerce_address_list(value: object) -> list[str]:
    """Return an ordered list of lowercase hex addresses.

    Order and duplicates are preserved exactly as emitted.
    """
    if isinstance(value, str | bytes | bytearray) or not isinstance(
        value, cabc.Sequence
    ):
        msg = f"expected a list of addresses, got {type(value).__name__}"
        raise ValueError(msg)  # noqa: TRY004
    return [to_hex(coerce_address(item)) for item in value]


def _coerce_bool(value: object) -> bool:
    if not isinstance(value, bool):
        msg = f"expected a bool, got {value!r}"
        raise ValueError(msg)  # noqa: TRY004
    return value


def _coerce_string(value: object) -> str:
    if not isinstance(value, str):
        msg = f"expected a string, got {type(value).__name__}"
        raise ValueError(msg)  # noqa: TRY004
    return value


def coerce_param(param: ParamSpec, value: object) -> FieldValue:
    """Coerce one parameter according to its declared type."""
    match param.type:
        case ParamType.ADDRESS:
            return coerce_address(value)
        case ParamType.ADDRESS_LIST:
            return coerce_address_list(value)
        case ParamType.UINT:
            return coerce_uint(value, param.bits)
        case ParamType.BOOL:
            return _coerce_bool(value)
        case ParamType.STRING:
            return _coerce_string(value)


def coerce_params(
    spec: EventSpec, params: cabc.Mapping[str, object]
) -> dict[str, FieldValue]:
    """Map decoded ABI parameters onto record attribute values.

    Every declared parameter must be present and well formed; parameters the
    event does not declare are rejected rather than silently dropped.

    Raises
    ------
    MalformedEventError
        If a parameter is missing, undeclared or of the wrong shape.

    """
    unexpected = [name for name in params if name not in spec.param_names]
    if unexpected:
        raise MalformedEventError.unexpected_parameters(spec.kind, unexpected)

    fields: dict[str, FieldValue] = {}
    for param in spec.params:
        if param.name not in params:
            raise MalformedEventError.missing_parameter(spec.kind, param.name)
        try:
            fields[param.attribute] = coerce_param(param, params[param.name])
        except ValueError as exc:
            raise MalformedEventError.invalid_parameter(
                spec.kind, param.name, str(exc)
            ) from exc
    return fields
