"""Unit tests for the commit-ledger command line."""

from __future__ import annotations

import json
import typing as typ

import pytest

from commit_ledger.cli import main
from tests.helpers.ledger_events import CREATOR, WINNER_A

if typ.TYPE_CHECKING:
    from pathlib import Path


def _line(event: str, params: dict[str, object], log_index: int) -> str:
    return json.dumps(
        {
            "event": event,
            "params": params,
            "transactionHash": "0x" + "ab" * 32,
            "logIndex": log_index,
            "blockNumber": 1_000_000,
            "blockTimestamp": 1_700_000_000,
        }
    )


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "COMMIT_LEDGER_DATABASE_URL",
        "COMMIT_LEDGER_LOG_LEVEL",
        "COMMIT_LEDGER_ON_ERROR",
        "COMMIT_LEDGER_ECHO_SQL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def db_args(tmp_path: Path) -> list[str]:
    """Return global options pointing at a throwaway database."""
    return ["--database-url", f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"]


@pytest.fixture
def feed_path(tmp_path: Path) -> Path:
    """Write a small feed containing a replayed occurrence."""
    path = tmp_path / "events.jsonl"
    lines = [
        _line("Paused", {"account": CREATOR}, 0),
        _line("CommitmentJoined", {"id": "7", "participant": WINNER_A}, 1),
        _line("Paused", {"account": CREATOR}, 0),
    ]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_init_db_creates_tables(
    db_args: list[str], capsys: pytest.CaptureFixture[str]
) -> None:
    """init-db reports the ready store."""
    assert main([*db_args, "init-db"]) == 0
    assert "ledger tables ready" in capsys.readouterr().out


def test_ingest_then_show(
    db_args: list[str], feed_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Ingested records are printed with subgraph field names."""
    assert main([*db_args, "ingest", str(feed_path)]) == 0
    assert "2 created, 1 duplicates, 0 skipped" in capsys.readouterr().out

    assert main([*db_args, "show", "CommitmentJoined"]) == 0
    (record,) = json.loads(capsys.readouterr().out)
    assert record["CommitProtocol_id"] == "7"
    assert record["participant"] == WINNER_A
    assert record["id"] == "0x" + "ab" * 32 + "01000000"


def test_malformed_feed_halts_with_exit_code(
    db_args: list[str], tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """A malformed event stops the default run."""
    feed = tmp_path / "bad.jsonl"
    feed.write_text(_line("Transfer", {}, 0) + "\n", encoding="utf-8")

    assert main([*db_args, "ingest", str(feed)]) == 1
    assert "ingest halted" in capsys.readouterr().err


def test_skip_malformed_flag_continues(
    db_args: list[str], tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """--skip-malformed counts the bad event and keeps going."""
    feed = tmp_path / "mixed.jsonl"
    feed.write_text(
        _line("Transfer", {}, 0) + "\n" + _line("Paused", {"account": CREATOR}, 1),
        encoding="utf-8",
    )

    assert main([*db_args, "ingest", "--skip-malformed", str(feed)]) == 0
    assert "1 created, 0 duplicates, 1 skipped" in capsys.readouterr().out


def test_missing_feed_file(
    db_args: list[str], tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """A missing feed is reported rather than raised."""
    assert main([*db_args, "ingest", str(tmp_path / "absent.jsonl")]) == 1
    assert "feed not found" in capsys.readouterr().err


def test_invalid_environment_is_reported(
    db_args: list[str],
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Bad environment settings exit with a message."""
    monkeypatch.setenv("COMMIT_LEDGER_ON_ERROR", "retry")

    assert main([*db_args, "init-db"]) == 1
    assert "COMMIT_LEDGER_ON_ERROR" in capsys.readouterr().err


def test_feed_with_invalid_utf8_halts_with_exit_code(
    db_args: list[str], tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Undecodable bytes are reported as a halted run, not a traceback."""
    feed = tmp_path / "binary.jsonl"
    feed.write_bytes(b'{"event": "Paused\xff"}\n')

    assert main([*db_args, "ingest", str(feed)]) == 1
    assert "feed line 1" in capsys.readouterr().err
