"""Helpers for the ``0x``-prefixed hex strings used by EVM tooling."""

from __future__ import annotations

import re

_HEX_RE = re.compile(r"^0[xX]([0-9a-fA-F]*)$")

ADDRESS_LENGTH = 20
HASH_LENGTH = 32


def to_hex(value: bytes) -> str:
    """Render bytes as a lowercase ``0x``-prefixed hex string."""
    return "0x" + value.hex()


def parse_hex(value: str | bytes, length: int | None = None) -> bytes:
    """Parse ``0x`` hex (or pass through raw bytes), enforcing ``length``.

    Raises
    ------
    ValueError
        If the text is not ``0x`` hex or the decoded length differs.

    """
    if isinstance(value, bytes | bytearray):
        raw = bytes(value)
    else:
        match = _HEX_RE.match(value.strip())
        if match is None or len(match.group(1)) % 2:
            msg = f"expected 0x-prefixed hex, got {value!r}"
            raise ValueError(msg)
        raw = bytes.fromhex(match.group(1))

    if length is not None and len(raw) != length:
        msg = f"expected {length} bytes, got {len(raw)}"
        raise ValueError(msg)
    return raw
