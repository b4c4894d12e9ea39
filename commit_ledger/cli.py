"""Command-line entry point for loading and inspecting the event ledger."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses as dc
import sys
from pathlib import Path

import msgspec
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from commit_ledger.config import LedgerConfig
from commit_ledger.events.errors import MalformedEventError
from commit_ledger.events.kinds import EventKind
from commit_ledger.feed.decoding import read_feed
from commit_ledger.feed.errors import FeedDecodeError
from commit_ledger.feed.runner import ErrorPolicy, FeedRunner
from commit_ledger.ledger.errors import RecordPersistError
from commit_ledger.ledger.mapper import EventLedgerMapper
from commit_ledger.ledger.queries import LedgerReader, record_as_dict
from commit_ledger.ledger.storage import init_ledger_storage
from commit_ledger.logging import configure_logging, get_logger, log_warning

logger = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="commit-ledger",
        description="Index Commit Protocol events into an append-only ledger.",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy async URL (overrides COMMIT_LEDGER_DATABASE_URL)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (overrides COMMIT_LEDGER_LOG_LEVEL)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init-db", help="Create the ledger tables")

    ingest = commands.add_parser("ingest", help="Map a JSON Lines feed of events")
    ingest.add_argument("feed", type=Path, help="Decoded-log feed to ingest")
    ingest.add_argument(
        "--skip-malformed",
        action="store_true",
        help="Skip malformed events instead of halting",
    )

    show = commands.add_parser("show", help="Print stored records as JSON")
    show.add_argument("kind", choices=[kind.value for kind in EventKind])
    show.add_argument("--limit", type=int, default=None)
    return parser


def _resolve_config(args: argparse.Namespace) -> LedgerConfig:
    config = LedgerConfig.from_env()
    overrides: dict[str, object] = {}
    if args.database_url:
        overrides["database_url"] = args.database_url
    if args.log_level:
        overrides["log_level"] = args.log_level
    if getattr(args, "skip_malformed", False):
        overrides["on_error"] = ErrorPolicy.SKIP
    return dc.replace(config, **overrides)


async def _run(args: argparse.Namespace, config: LedgerConfig) -> int:
    engine = create_async_engine(config.database_url, echo=config.echo_sql)
    try:
        await init_ledger_storage(engine)
        session_factory = async_sessionmaker(engine, expire_on_commit=False)

        if args.command == "ingest":
            runner = FeedRunner(
                EventLedgerMapper(session_factory), on_error=config.on_error
            )
            result = await runner.run(read_feed(args.feed), label=str(args.feed))
            print(
                f"ingested {args.feed}: {result.created} created, "
                f"{result.duplicates} duplicates, {result.skipped} skipped"
            )
        elif args.command == "show":
            reader = LedgerReader(session_factory)
            records = await reader.list_records(EventKind(args.kind), args.limit)
            payload = [record_as_dict(record) for record in records]
            sys.stdout.write(msgspec.json.encode(payload).decode() + "\n")
        else:
            print(f"ledger tables ready at {engine.url.render_as_string()}")
    finally:
        await engine.dispose()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the ``commit-ledger`` command.

    Returns
    -------
    int
        Exit code: 0 on success, 1 when configuration is invalid or a feed
        run halts.

    """
    args = _build_parser().parse_args(argv)
    try:
        config = _resolve_config(args)
    except ValueError as exc:
        print(f"invalid configuration: {exc}", file=sys.stderr)
        return 1

    level, invalid = configure_logging(config.log_level, force=True)
    if invalid:
        log_warning(
            logger,
            "Invalid log level %r, falling back to %s",
            config.log_level,
            level,
        )

    try:
        return asyncio.run(_run(args, config))
    except (MalformedEventError, FeedDecodeError, RecordPersistError) as exc:
        print(f"ingest halted: {exc}", file=sys.stderr)
        return 1
    except FileNotFoundError as exc:
        print(f"feed not found: {exc.filename}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
