"""Error types raised while interpreting decoded event occurrences."""

from __future__ import annotations

import enum


class MalformedEventReason(enum.StrEnum):
    """Machine-readable reasons for rejecting an event occurrence."""

    UNKNOWN_EVENT = "unknown_event"
    MISSING_PARAMETER = "missing_parameter"
    UNEXPECTED_PARAMETER = "unexpected_parameter"
    INVALID_PARAMETER = "invalid_parameter"
    INVALID_PROVENANCE = "invalid_provenance"
    KIND_MISMATCH = "kind_mismatch"


class MalformedEventError(ValueError):
    """Raised when an occurrence is missing data or carries the wrong shape."""

    def __init__(
        self,
        message: str,
        reason: MalformedEventReason | str | None = None,
    ) -> None:
        """Store a machine-readable reason for programmatic handling."""
        super().__init__(message)
        self.reason = reason

    @classmethod
    def unknown_event(cls, name: str) -> MalformedEventError:
        """Create an error for an event name the contract does not emit."""
        return cls(
            f"unknown Commit Protocol event {name!r}",
            reason=MalformedEventReason.UNKNOWN_EVENT,
        )

    @classmethod
    def missing_parameter(cls, event: str, param: str) -> MalformedEventError:
        """Create an error for an absent event parameter."""
        return cls(
            f"{event} is missing parameter {param!r}",
            reason=MalformedEventReason.MISSING_PARAMETER,
        )

    @classmethod
    def unexpected_parameters(
        cls, event: str, params: list[str]
    ) -> MalformedEventError:
        """Create an error for parameters the event does not declare."""
        names = ", ".join(repr(name) for name in sorted(params))
        return cls(
            f"{event} received undeclared parameters {names}",
            reason=MalformedEventReason.UNEXPECTED_PARAMETER,
        )

    @classmethod
    def invalid_parameter(
        cls, event: str, param: str, detail: str
    ) -> MalformedEventError:
        """Create an error for a parameter of the wrong shape."""
        return cls(
            f"{event}.{param} {detail}",
            reason=MalformedEventReason.INVALID_PARAMETER,
        )

    @classmethod
    def invalid_provenance(cls, field: str, detail: str) -> MalformedEventError:
        """Create an error for bad block or transaction metadata."""
        return cls(
            f"{field} {detail}",
            reason=MalformedEventReason.INVALID_PROVENANCE,
        )

    @classmethod
    def kind_mismatch(cls, expected: str, actual: str) -> MalformedEventError:
        """Create an error when a per-kind handler receives another kind."""
        return cls(
            f"handler for {expected} received a {actual} occurrence",
            reason=MalformedEventReason.KIND_MISMATCH,
        )
