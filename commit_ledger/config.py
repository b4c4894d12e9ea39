"""Runtime configuration for the Commit Protocol ledger.

Usage
-----
Create a configuration with defaults:

>>> config = LedgerConfig()
>>> config.on_error
<ErrorPolicy.HALT: 'halt'>

Or load from environment variables:

>>> import os
>>> os.environ["COMMIT_LEDGER_ON_ERROR"] = "skip"
>>> LedgerConfig.from_env().on_error
<ErrorPolicy.SKIP: 'skip'>

"""

from __future__ import annotations

import dataclasses as dc
import os

from commit_ledger.feed.runner import ErrorPolicy

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///commit_ledger.db"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


@dc.dataclass(frozen=True, slots=True)
class LedgerConfig:
    """Configuration for ledger ingestion.

    Attributes
    ----------
    database_url
        SQLAlchemy async URL of the ledger store.
    log_level
        femtologging level name; invalid names fall back to ``INFO`` with a
        warning when logging is configured.
    on_error
        Whether a malformed occurrence halts the feed or is skipped.
    echo_sql
        Echo SQL statements through SQLAlchemy's engine logger.

    """

    database_url: str = DEFAULT_DATABASE_URL
    log_level: str = "INFO"
    on_error: ErrorPolicy = ErrorPolicy.HALT
    echo_sql: bool = False

    @staticmethod
    def _parse_bool(env_var: str) -> bool:
        raw = os.environ.get(env_var, "").strip().lower()
        if raw in _TRUE_VALUES:
            return True
        if raw in _FALSE_VALUES:
            return False
        msg = f"{env_var} must be a boolean, got: {raw!r}"
        raise ValueError(msg)

    @staticmethod
    def _parse_policy(env_var: str) -> ErrorPolicy:
        raw = os.environ.get(env_var, "").strip().lower()
        if not raw:
            return ErrorPolicy.HALT
        try:
            return ErrorPolicy(raw)
        except ValueError as exc:
            choices = ", ".join(policy.value for policy in ErrorPolicy)
            msg = f"{env_var} must be one of {choices}, got: {raw!r}"
            raise ValueError(msg) from exc

    @classmethod
    def from_env(cls) -> LedgerConfig:
        """Create configuration from environment variables.

        Reads ``COMMIT_LEDGER_DATABASE_URL``, ``COMMIT_LEDGER_LOG_LEVEL``,
        ``COMMIT_LEDGER_ON_ERROR`` (``halt`` or ``skip``) and
        ``COMMIT_LEDGER_ECHO_SQL``.

        Raises
        ------
        ValueError
            If the error policy or the echo flag cannot be parsed.

        """
        database_url = (
            os.environ.get("COMMIT_LEDGER_DATABASE_URL", "").strip()
            or DEFAULT_DATABASE_URL
        )
        return cls(
            database_url=database_url,
            log_level=os.environ.get("COMMIT_LEDGER_LOG_LEVEL", "INFO"),
            on_error=cls._parse_policy("COMMIT_LEDGER_ON_ERROR"),
            echo_sql=cls._parse_bool("COMMIT_LEDGER_ECHO_SQL"),
        )
