"""CLI entry point: python -m event_ingest.cli {ingest,init-db}"""

import argparse
import asyncio
import sys

import structlog

from event_ingest.classification.config import load_classifier_config
from event_ingest.config.settings import MAX_PAGE_SIZE, Settings, get_settings
from event_ingest.db.session import dispose_engine, get_engine, get_session_factory
from event_ingest.errors import IngestError
from event_ingest.ingestion.pipeline import IngestionSummary, run_ingestion
from event_ingest.logging_config import configure_logging
from event_ingest.models import Base
from event_ingest.upstream.ticketmaster import TicketmasterClient


async def run_ingest(settings: Settings, max_pages: int | None, page_size: int | None) -> IngestionSummary:
    """Run a full ingestion pass against the configured database."""
    classifier_config = load_classifier_config(settings.classifier_config_path)
    source = TicketmasterClient(settings)
    try:
        return await run_ingestion(
            source,
            get_session_factory(),
            settings,
            max_pages=max_pages,
            page_size=page_size,
            classifier_config=classifier_config,
        )
    finally:
        await dispose_engine()


async def init_db() -> None:
    """Create all tables (development convenience; use Alembic in production)."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await dispose_engine()


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return number


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="event_ingest.cli",
        description="Ticketmaster event ingestion CLI",
    )
    subparsers = parser.add_subparsers(dest="command")

    ingest_parser = subparsers.add_parser("ingest", help="Ingest upstream events into the database")
    ingest_parser.add_argument(
        "--max-pages",
        type=_positive_int,
        default=None,
        help="Stop after this many pages (default: all pages reported upstream)",
    )
    ingest_parser.add_argument(
        "--page-size",
        type=_positive_int,
        default=None,
        help=f"Events per page, up to {MAX_PAGE_SIZE} (default: from settings)",
    )

    subparsers.add_parser("init-db", help="Create database tables")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    settings = get_settings()
    configure_logging(json_output=settings.log_json, log_level=settings.log_level)
    log = structlog.get_logger()

    if args.command == "init-db":
        asyncio.run(init_db())
        log.info("database_initialized", database=settings.database_url.split("@")[-1])
        return

    log.info(
        "env_check",
        has_database_url=bool(settings.database_url),
        has_ticketmaster_key=bool(settings.ticketmaster_api_key),
    )
    try:
        summary = asyncio.run(run_ingest(settings, args.max_pages, args.page_size))
    except IngestError as e:
        log.error("ingest_command_failed", error=str(e))
        sys.exit(1)

    log.info(
        "ingest_command_done",
        ingested=summary.ingested,
        venues_upserted=summary.venues_upserted,
        pages_processed=summary.pages_processed,
    )


if __name__ == "__main__":
    main()
