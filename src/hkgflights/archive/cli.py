"""Command-line entry points for archiving and reindexing."""

import argparse
import logging
import os
import re
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from hkgflights.archive.archiver import ROLLING_DAYS, Archiver, ArchiveSummary, archive_rolling
from hkgflights.archive.errors import ArchiveError, ConfigError, InvalidInput
from hkgflights.archive.reindexer import Reindexer
from hkgflights.archive.sinks import D1Sink, FlightSink, SQLiteSink
from hkgflights.archive.sources import HKAirportFeed
from hkgflights.archive.stats import stats_for_store
from hkgflights.archive.store import ShardStore, SnapshotStore
from hkgflights.config import SINK_D1, Settings

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_date(value: str) -> str:
    """Return value if it is a real YYYY-MM-DD date. Raises InvalidInput."""
    if not _DATE_RE.match(value):
        raise InvalidInput(f"Invalid date format: {value}. Use YYYY-MM-DD.")
    try:
        date.fromisoformat(value)
    except ValueError:
        raise InvalidInput(f"Invalid date: {value}") from None
    return value


def _common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--data-dir",
        help="Directory holding daily/ and indexes/ (default: HKG_DATA_DIR or ./data)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Debug logging",
    )


def _setup(args: argparse.Namespace) -> Settings:
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if args.data_dir:
        settings.data_dir = Path(args.data_dir)
        if not os.environ.get("HKG_SQLITE_PATH"):
            settings.sqlite_path = settings.data_dir / "flights.db"
    return settings


def build_sink(settings: Settings) -> FlightSink:
    if settings.sink == SINK_D1:
        return D1Sink(
            account_id=settings.cloudflare_account_id,
            api_token=settings.cloudflare_api_token,
            database_id=settings.d1_database_id,
            timeout=settings.sink_timeout,
        )
    sink = SQLiteSink(settings.sqlite_path)
    sink.ensure_schema()
    return sink


def build_archiver(settings: Settings) -> Archiver:
    return Archiver(
        source=HKAirportFeed(
            base_url=settings.feed_url, lang=settings.feed_lang, timeout=settings.feed_timeout
        ),
        sink=build_sink(settings),
        snapshots=SnapshotStore(settings.data_dir),
        batch_size=settings.batch_size,
        fetch_delay=settings.fetch_delay,
    )


def print_archive_summary(summary: ArchiveSummary) -> None:
    print(f"\nArchived {summary.date}")
    print(f"  Fetched:  {summary.fetched}")
    print(f"  Skipped:  {summary.skipped}")
    print(f"  Deleted:  {summary.deleted}")
    print(f"  Inserted: {summary.inserted}")
    print(f"  Errors:   {summary.errors}")
    print(f"  Airlines mapped: {summary.airline_mapping_count}")
    if summary.failed_categories:
        print(f"  Failed categories: {', '.join(summary.failed_categories)}")
    print()


def archive_main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Archive one day of HKIA flights")
    parser.add_argument(
        "date",
        nargs="?",
        default=None,
        help="Date to archive (YYYY-MM-DD). Default: today",
    )
    _common_args(parser)
    args = parser.parse_args(argv)

    target = args.date or date.today().isoformat()
    try:
        validate_date(target)
    except InvalidInput as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    settings = _setup(args)
    try:
        summary = build_archiver(settings).archive(target)
    except ArchiveError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print_archive_summary(summary)


def rolling_main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description="Re-archive the past N days to capture final statuses of delayed flights"
    )
    parser.add_argument(
        "days",
        nargs="?",
        type=int,
        default=ROLLING_DAYS,
        help=f"Number of days before today (default: {ROLLING_DAYS})",
    )
    _common_args(parser)
    args = parser.parse_args(argv)
    if args.days < 1:
        print("Error: days must be at least 1", file=sys.stderr)
        sys.exit(1)

    settings = _setup(args)
    try:
        archiver = build_archiver(settings)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    result = archive_rolling(archiver, days=args.days)

    print(f"\nRolling archive complete: {len(result.succeeded)}/{len(result.dates)} days")
    print(f"  Inserted: {result.inserted}")
    if result.failed:
        print(f"  Failed: {', '.join(result.failed)}", file=sys.stderr)
        sys.exit(1)


def reindex_main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Rebuild flight and gate index shards")
    parser.add_argument(
        "--clean",
        action="store_true",
        help="Remove all existing index files before rebuilding",
    )
    parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=1,
        help="Threads used to read snapshots (default: 1)",
    )
    _common_args(parser)
    args = parser.parse_args(argv)

    settings = _setup(args)
    reindexer = Reindexer(
        snapshots=SnapshotStore(settings.data_dir),
        shards=ShardStore(settings.data_dir),
        workers=args.workers,
        progress=sys.stderr.isatty(),
    )
    summary = reindexer.rebuild(clean_first=args.clean)

    print("\nRe-indexing complete!")
    print(f"  Snapshots read: {summary.snapshots_read}")
    if summary.snapshots_skipped:
        print(f"  Snapshots skipped: {summary.snapshots_skipped}")
    print(f"  Flight shards: {summary.flight_shard_count}")
    print(f"  Gate shards: {summary.gate_shard_count}")


def stats_main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Summarize archived snapshots")
    _common_args(parser)
    args = parser.parse_args(argv)

    settings = _setup(args)
    stats = stats_for_store(SnapshotStore(settings.data_dir))
    if not stats.total_flights:
        print("No flights found.", file=sys.stderr)
        return

    print(f"\nDays: {stats.days}")
    print(f"Total flights: {stats.total_flights}")
    print(f"  Arrivals: {stats.arrivals}  Departures: {stats.departures}")
    print(f"  Passenger: {stats.passenger}  Cargo: {stats.cargo}")
    print("\nStatus summary:")
    print(stats.status_dataframe().to_string(index=False))
    offsets = stats.day_offset_dataframe()
    if not offsets.empty:
        print("\nDay offsets:")
        print(offsets.to_string(index=False))
    if stats.by_airline:
        print("\nTop airlines:")
        for airline, count in sorted(stats.by_airline.items(), key=lambda x: -x[1])[:10]:
            print(f"  {airline}: {count}")
    print()


if __name__ == "__main__":
    archive_main()
