"""Archive one day of HKIA flights into the sink and the snapshot store."""

import logging
import time
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Callable, List, Optional, Sequence

from hkgflights.archive.errors import (
    ArchiveError,
    FetchFailure,
    NoFlightsCollected,
    SinkBatchFailure,
    SinkUnavailable,
)
from hkgflights.archive.models import DailySnapshot, FlightRecord
from hkgflights.archive.normalizer import normalize_response
from hkgflights.archive.sinks.base import (
    SINK_BATCH_SIZE,
    FlightSink,
    Statement,
    chunked,
    delete_flights_for_date,
    insert_flight,
    upsert_airline,
)
from hkgflights.archive.sources.base import FLIGHT_CATEGORIES, FeedSource
from hkgflights.archive.store import SnapshotStore
from hkgflights.reference.airlines import AirlineMapping

logger = logging.getLogger(__name__)

# Seconds between feed requests
FETCH_DELAY_SECONDS = 1.0
# Seconds between dates in a rolling archive
ROLLING_DELAY_SECONDS = 2.0
# Covers the longest multi-day delays seen in the feed (+5 days)
ROLLING_DAYS = 6


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class ArchiveSummary:
    """Counts for one archive run."""

    date: str
    fetched: int = 0
    skipped: int = 0
    deleted: int = 0
    inserted: int = 0
    errors: int = 0
    failed_batches: int = 0
    failed_categories: List[str] = field(default_factory=list)
    airline_mapping_count: int = 0
    airlines_updated: int = 0
    snapshot_written: bool = False


class Archiver:
    """
    Fetches the four feed categories for a date, normalizes them, and replaces the
    date's rows in the sink.

    Do not run two archivers for the same date at the same time: the
    delete-then-insert for a date is not locked.
    """

    def __init__(
        self,
        source: FeedSource,
        sink: FlightSink,
        snapshots: Optional[SnapshotStore] = None,
        batch_size: int = SINK_BATCH_SIZE,
        fetch_delay: float = FETCH_DELAY_SECONDS,
        batch_retries: int = 1,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], str] = _utc_now,
    ):
        self.source = source
        self.sink = sink
        self.snapshots = snapshots
        self.batch_size = batch_size
        self.fetch_delay = fetch_delay
        self.batch_retries = batch_retries
        self.sleep = sleep
        self._clock = clock

    def collect(
        self, flight_date: str, summary: ArchiveSummary, airline_map: AirlineMapping
    ) -> List[FlightRecord]:
        """Fetch and normalize every category. Failed categories contribute nothing."""
        records: List[FlightRecord] = []
        for i, category in enumerate(FLIGHT_CATEGORIES):
            if i > 0 and self.fetch_delay > 0:
                self.sleep(self.fetch_delay)
            logger.info("Fetching %s...", category.label)
            try:
                response = self.source.fetch(
                    flight_date, arrival=category.arrival, cargo=category.cargo
                )
            except FetchFailure as e:
                logger.error("%s: %s", category.label, e)
                summary.failed_categories.append(category.label)
                continue
            flights, skipped = normalize_response(
                response,
                is_arrival=category.arrival,
                is_cargo=category.cargo,
                airline_map=airline_map,
                fallback_date=flight_date,
            )
            logger.info("  - Found %d flights (%d skipped)", len(flights), skipped)
            summary.skipped += skipped
            records.extend(flights)
        summary.fetched = len(records) + summary.skipped
        return records

    def archive(self, flight_date: str) -> ArchiveSummary:
        """
        Replace everything stored for flight_date with a fresh fetch.

        Raises NoFlightsCollected before touching the sink when nothing came back,
        and SinkUnavailable when every insert batch failed. A failed delete is
        raised as SinkBatchFailure.
        """
        summary = ArchiveSummary(date=flight_date)
        airline_map = AirlineMapping()

        records = self.collect(flight_date, summary, airline_map)
        summary.airline_mapping_count = len(airline_map)
        logger.info("Total flights collected: %d", len(records))
        logger.info("Unique airlines found: %d", len(airline_map))

        if not records:
            raise NoFlightsCollected(flight_date)

        archived_at = self._clock()

        logger.info("Deleting existing records for %s...", flight_date)
        counts = self.sink.execute_batch([delete_flights_for_date(flight_date)])
        summary.deleted = sum(counts)
        logger.info("  - Deleted %d existing records", summary.deleted)

        self._insert(records, archived_at, summary)
        if summary.errors == len(records):
            raise SinkUnavailable(summary)

        summary.airlines_updated = self._update_airlines(airline_map, archived_at)

        if self.snapshots is not None:
            snapshot = DailySnapshot(date=flight_date, generated_at=archived_at, flights=records)
            path = self.snapshots.write(snapshot)
            summary.snapshot_written = True
            logger.info("Daily snapshot saved: %s", path)

        return summary

    def _execute_with_retry(self, statements: Sequence[Statement]) -> List[int]:
        attempt = 0
        while True:
            try:
                return self.sink.execute_batch(statements)
            except SinkBatchFailure as e:
                if attempt >= self.batch_retries:
                    raise
                attempt += 1
                logger.warning(
                    "Batch failed (%s), retrying (%d/%d)", e, attempt, self.batch_retries
                )

    def _insert(
        self, records: List[FlightRecord], archived_at: str, summary: ArchiveSummary
    ) -> None:
        logger.info("Inserting %d flights in batches of %d...", len(records), self.batch_size)
        for n, batch in enumerate(chunked(records, self.batch_size), start=1):
            statements = [insert_flight(r, archived_at) for r in batch]
            try:
                counts = self._execute_with_retry(statements)
            except SinkBatchFailure as e:
                summary.errors += len(batch)
                summary.failed_batches += 1
                logger.error("  - Batch %d failed: %s", n, e)
                continue
            summary.inserted += sum(counts)
            logger.debug("  - Batch %d: %d rows", n, sum(counts))
        logger.info("  - Total: %d inserted, %d errors", summary.inserted, summary.errors)

    def _update_airlines(self, airline_map: AirlineMapping, updated_at: str) -> int:
        if not len(airline_map):
            logger.info("No airline mappings to update.")
            return 0
        statements = [
            upsert_airline(icao, code.iata, code.sample_flight, updated_at)
            for icao, code in airline_map.items()
        ]
        updated = 0
        for batch in chunked(statements, self.batch_size):
            try:
                updated += sum(self._execute_with_retry(batch))
            except SinkBatchFailure as e:
                logger.error("  - Airline batch failed: %s", e)
        logger.info("Updated %d airline mappings", updated)
        return updated


@dataclass
class RollingSummary:
    dates: List[str] = field(default_factory=list)
    succeeded: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    inserted: int = 0


def rolling_dates(days: int, today: Optional[date] = None) -> List[str]:
    """D-1 back to D-days, newest first."""
    today = today or date.today()
    return [(today - timedelta(days=i)).isoformat() for i in range(1, days + 1)]


def archive_rolling(
    archiver: Archiver,
    days: int = ROLLING_DAYS,
    today: Optional[date] = None,
    delay: float = ROLLING_DELAY_SECONDS,
) -> RollingSummary:
    """
    Re-archive the past few days so flights delayed across midnight end up with
    their final status. One failed date does not stop the others.
    """
    summary = RollingSummary(dates=rolling_dates(days, today))
    for i, d in enumerate(summary.dates):
        if i > 0 and delay > 0:
            archiver.sleep(delay)
        logger.info("Archiving %s...", d)
        try:
            result = archiver.archive(d)
        except ArchiveError as e:
            logger.error("Failed to archive %s: %s", d, e)
            summary.failed.append(d)
            continue
        summary.succeeded.append(d)
        summary.inserted += result.inserted
    return summary
