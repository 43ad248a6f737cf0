"""Rebuild per-flight-number and per-gate index shards from daily snapshots."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from tqdm import tqdm

from hkgflights.archive.errors import SnapshotParseFailure
from hkgflights.archive.models import DailySnapshot, FlightRecord
from hkgflights.archive.store import FLIGHTS, GATES, ShardStore, SnapshotStore
from hkgflights.reference.flight_ids import normalize_key

logger = logging.getLogger(__name__)

MAX_SHARD_ENTRIES = 50


class ShardAccumulator:
    """Records per shard key, deduplicated by record id (last write wins)."""

    def __init__(self) -> None:
        self._entries: Dict[str, Dict[str, FlightRecord]] = {}

    def add(self, key: str, record: FlightRecord) -> None:
        self._entries.setdefault(key, {})[record.id] = record

    def __len__(self) -> int:
        return len(self._entries)

    def shards(
        self, max_entries: int = MAX_SHARD_ENTRIES
    ) -> Iterator[Tuple[str, List[FlightRecord]]]:
        """Yield (key, records) sorted by date and time, most recent max_entries kept."""
        for key, entries in self._entries.items():
            ordered = sorted(entries.values(), key=lambda r: r.sort_key)
            yield key, ordered[-max_entries:]


def flight_keys(record: FlightRecord) -> List[str]:
    """Shard keys for every leg, codeshares included."""
    keys = []
    for ident in record.flights:
        key = normalize_key(ident.no)
        if key and key not in keys:
            keys.append(key)
    return keys


def gate_key(record: FlightRecord) -> Optional[str]:
    """Departures with a gate only."""
    if record.is_arrival or not record.gate:
        return None
    return normalize_key(record.gate) or None


def accumulate(
    records: Iterable[FlightRecord],
    flights: ShardAccumulator,
    gates: ShardAccumulator,
) -> None:
    for record in records:
        for key in flight_keys(record):
            flights.add(key, record)
        gk = gate_key(record)
        if gk:
            gates.add(gk, record)


def build_shards(
    records: Iterable[FlightRecord], max_entries: int = MAX_SHARD_ENTRIES
) -> Tuple[Dict[str, List[FlightRecord]], Dict[str, List[FlightRecord]]]:
    """Build (flight shards, gate shards) in memory."""
    flights, gates = ShardAccumulator(), ShardAccumulator()
    accumulate(records, flights, gates)
    return dict(flights.shards(max_entries)), dict(gates.shards(max_entries))


@dataclass
class ReindexSummary:
    snapshots_read: int = 0
    snapshots_skipped: int = 0
    flight_shard_count: int = 0
    gate_shard_count: int = 0


class Reindexer:
    """
    Rebuilds every shard from the full snapshot corpus.

    Snapshots can be parsed by a thread pool (workers > 1); results are merged in
    date order by this thread alone, and sorting and truncation happen only once
    every snapshot has been merged.
    """

    def __init__(
        self,
        snapshots: SnapshotStore,
        shards: ShardStore,
        max_entries: int = MAX_SHARD_ENTRIES,
        workers: int = 1,
        progress: bool = False,
    ):
        self.snapshots = snapshots
        self.shards = shards
        self.max_entries = max_entries
        self.workers = max(1, workers)
        self.progress = progress

    def _load(self, date: str) -> Optional[DailySnapshot]:
        try:
            return self.snapshots.read(date)
        except SnapshotParseFailure as e:
            logger.warning("Skipping %s: %s", date, e.reason)
            return None

    def _iter_snapshots(self, dates: List[str]) -> Iterator[Optional[DailySnapshot]]:
        if self.workers == 1:
            for d in dates:
                yield self._load(d)
            return
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            # map() keeps input order, so merging stays in date order
            yield from executor.map(self._load, dates)

    def rebuild(self, clean_first: bool = False) -> ReindexSummary:
        summary = ReindexSummary()

        if clean_first:
            logger.info("Cleaning existing indexes...")
            self.shards.clean()

        dates = self.snapshots.dates()
        logger.info("Found %d daily snapshot files.", len(dates))

        flights, gates = ShardAccumulator(), ShardAccumulator()
        for snapshot in tqdm(
            self._iter_snapshots(dates),
            total=len(dates),
            desc="Reading snapshots",
            unit="day",
            disable=not self.progress,
        ):
            if snapshot is None:
                summary.snapshots_skipped += 1
                continue
            summary.snapshots_read += 1
            accumulate(snapshot.flights, flights, gates)

        logger.info("Writing %d flight index files...", len(flights))
        for key, records in flights.shards(self.max_entries):
            self.shards.write(FLIGHTS, key, records)
            summary.flight_shard_count += 1

        logger.info("Writing %d gate index files...", len(gates))
        for key, records in gates.shards(self.max_entries):
            self.shards.write(GATES, key, records)
            summary.gate_shard_count += 1

        return summary
