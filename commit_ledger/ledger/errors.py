"""Error types raised while persisting ledger records."""

from __future__ import annotations

from commit_ledger.events.occurrence import format_record_id


class RecordPersistError(RuntimeError):
    """Raised when the store cannot complete a record write."""

    def __init__(self, message: str, record_id: bytes | None = None) -> None:
        """Keep the record id so the host runtime can report it."""
        super().__init__(message)
        self.record_id = record_id

    @classmethod
    def write_failed(cls, kind: str, record_id: bytes) -> RecordPersistError:
        """Create an error for a rejected or interrupted write."""
        return cls(
            f"failed to persist {kind} record {format_record_id(record_id)}",
            record_id=record_id,
        )

    @classmethod
    def missing_after_conflict(
        cls, kind: str, record_id: bytes
    ) -> RecordPersistError:
        """Create an error when a unique violation has no matching row."""
        return cls(
            f"{kind} record {format_record_id(record_id)} conflicted on insert "
            "but could not be reloaded",
            record_id=record_id,
        )
