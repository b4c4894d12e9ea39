"""Unit tests for LedgerConfig."""

from __future__ import annotations

import pytest

from commit_ledger.config import DEFAULT_DATABASE_URL, LedgerConfig
from commit_ledger.feed import ErrorPolicy

_ENV_VARS = (
    "COMMIT_LEDGER_DATABASE_URL",
    "COMMIT_LEDGER_LOG_LEVEL",
    "COMMIT_LEDGER_ON_ERROR",
    "COMMIT_LEDGER_ECHO_SQL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_environment() -> None:
    """An empty environment yields the documented defaults."""
    config = LedgerConfig.from_env()

    assert config == LedgerConfig()
    assert config.database_url == DEFAULT_DATABASE_URL
    assert config.on_error is ErrorPolicy.HALT
    assert config.echo_sql is False


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Every setting can be supplied through the environment."""
    monkeypatch.setenv("COMMIT_LEDGER_DATABASE_URL", "postgresql+asyncpg://db/ledger")
    monkeypatch.setenv("COMMIT_LEDGER_LOG_LEVEL", "debug")
    monkeypatch.setenv("COMMIT_LEDGER_ON_ERROR", " SKIP ")
    monkeypatch.setenv("COMMIT_LEDGER_ECHO_SQL", "yes")

    config = LedgerConfig.from_env()

    assert config.database_url == "postgresql+asyncpg://db/ledger"
    assert config.log_level == "debug"
    assert config.on_error is ErrorPolicy.SKIP
    assert config.echo_sql is True


@pytest.mark.parametrize(
    ("name", "value"),
    [("COMMIT_LEDGER_ON_ERROR", "retry"), ("COMMIT_LEDGER_ECHO_SQL", "maybe")],
)
def test_invalid_values_name_the_variable(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    """Unparseable settings raise ValueError naming the variable."""
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError, match=name):
        LedgerConfig.from_env()
