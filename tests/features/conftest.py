"""Shared fixtures for BDD feature tests."""

from __future__ import annotations

import asyncio
import typing as typ

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from commit_ledger.ledger import init_ledger_storage

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncSession


@pytest.fixture
def ledger_session_factory(
    tmp_path: Path,
) -> cabc.Iterator[async_sessionmaker[AsyncSession]]:
    """Provision a ledger that synchronous steps can drive with asyncio.run."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'ledger_bdd.db'}", poolclass=NullPool
    )
    asyncio.run(init_ledger_storage(engine))
    try:
        yield async_sessionmaker(engine, expire_on_commit=False)
    finally:
        asyncio.run(engine.dispose())
