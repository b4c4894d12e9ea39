"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import contextlib
import logging
import os
import socket
import typing as typ

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from commit_ledger.events import EventKind, EventOccurrence
from commit_ledger.ledger import init_ledger_storage

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_TX_HASH = bytes.fromhex("de" * 32)


def _should_use_pglite() -> bool:
    """Return True when tests should run against py-pglite Postgres."""
    return os.getenv("COMMIT_LEDGER_TEST_DB", "sqlite").lower() == "pglite"


def _find_free_port() -> int:
    """Find an available TCP port for a temporary Postgres instance."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@contextlib.asynccontextmanager
async def _pglite_engine(tmp_path: Path) -> typ.AsyncIterator[AsyncEngine]:
    """Start a py-pglite Postgres and yield an async engine bound to it."""
    from py_pglite import PGliteConfig, PGliteManager

    port = _find_free_port()
    config = PGliteConfig(
        use_tcp=True,
        tcp_host="127.0.0.1",
        tcp_port=port,
        work_dir=tmp_path / "pglite",
    )
    with PGliteManager(config):
        engine = create_async_engine(
            f"postgresql+asyncpg://postgres:postgres@{config.tcp_host}:"
            f"{config.tcp_port}/postgres"
        )
        try:
            yield engine
        finally:
            await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(
    tmp_path: Path,
) -> typ.AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Yield a fresh async session factory over an initialised ledger."""
    async with contextlib.AsyncExitStack() as stack:
        if _should_use_pglite():
            engine = await stack.enter_async_context(_pglite_engine(tmp_path))
        else:
            engine = create_async_engine(
                f"sqlite+aiosqlite:///{tmp_path / 'ledger_test.db'}"
            )
            stack.push_async_callback(engine.dispose)
        await init_ledger_storage(engine)
        yield async_sessionmaker(engine, expire_on_commit=False)


class OccurrenceFactory(typ.Protocol):
    """Callable fixture building event occurrences with default provenance."""

    def __call__(
        self,
        kind: EventKind,
        params: dict[str, object],
        *,
        transaction_hash: bytes = ...,
        log_index: int = ...,
        block_number: int = ...,
        block_timestamp: int = ...,
    ) -> EventOccurrence:
        """Build an occurrence."""
        ...


@pytest.fixture
def make_occurrence() -> OccurrenceFactory:
    """Return a factory for occurrences in a fixed transaction."""

    def _make(
        kind: EventKind,
        params: dict[str, object],
        *,
        transaction_hash: bytes = DEFAULT_TX_HASH,
        log_index: int = 0,
        block_number: int = 1_000_000,
        block_timestamp: int = 1_700_000_000,
    ) -> EventOccurrence:
        return EventOccurrence(
            kind=kind,
            params=params,
            transaction_hash=transaction_hash,
            log_index=log_index,
            block_number=block_number,
            block_timestamp=block_timestamp,
        )

    return _make
