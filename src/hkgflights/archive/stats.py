"""Statistics over archived flights."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

import pandas as pd

from hkgflights.archive.errors import SnapshotParseFailure
from hkgflights.archive.models import FlightRecord
from hkgflights.archive.store import SnapshotStore

logger = logging.getLogger(__name__)


@dataclass
class ArchiveStats:
    """Container for archive statistics."""

    total_flights: int = 0
    arrivals: int = 0
    departures: int = 0
    cargo: int = 0
    passenger: int = 0
    days: int = 0
    by_status: Dict[str, int] = field(default_factory=dict)
    by_airline: Dict[str, int] = field(default_factory=dict)
    by_day_offset: Dict[int, int] = field(default_factory=dict)
    max_codeshare: Optional[FlightRecord] = None
    max_via: Optional[FlightRecord] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_flights": self.total_flights,
            "arrivals": self.arrivals,
            "departures": self.departures,
            "cargo": self.cargo,
            "passenger": self.passenger,
            "days": self.days,
            "by_status": self.by_status,
            "by_airline": self.by_airline,
            "by_day_offset": self.by_day_offset,
        }

    def status_dataframe(self) -> pd.DataFrame:
        """Return by_status as DataFrame, most frequent first."""
        if not self.by_status:
            return pd.DataFrame(columns=["status", "count"])
        rows = sorted(self.by_status.items(), key=lambda x: (-x[1], x[0]))
        return pd.DataFrame([{"status": k, "count": v} for k, v in rows])

    def day_offset_dataframe(self) -> pd.DataFrame:
        """Return by_day_offset as DataFrame with the share of dated statuses."""
        if not self.by_day_offset:
            return pd.DataFrame(columns=["day_offset", "count", "share"])
        df = pd.DataFrame(
            [{"day_offset": k, "count": v} for k, v in sorted(self.by_day_offset.items())]
        )
        df["share"] = df["count"] / df["count"].sum()
        return df


def compute_stats(
    flights: Iterable[FlightRecord], stats: Optional[ArchiveStats] = None
) -> ArchiveStats:
    """Compute statistics from flights, adding to stats when given."""
    if stats is None:
        stats = ArchiveStats()

    for f in flights:
        stats.total_flights += 1
        if f.is_arrival:
            stats.arrivals += 1
        else:
            stats.departures += 1
        if f.is_cargo:
            stats.cargo += 1
        else:
            stats.passenger += 1

        kind = f.status.kind.value
        stats.by_status[kind] = stats.by_status.get(kind, 0) + 1

        airline = f.operating_carrier.airline
        if airline:
            stats.by_airline[airline] = stats.by_airline.get(airline, 0) + 1

        # Flights whose status carries no date have no offset
        offset = f.day_offset
        if offset is not None:
            stats.by_day_offset[offset] = stats.by_day_offset.get(offset, 0) + 1

        if stats.max_codeshare is None or f.codeshare_count > stats.max_codeshare.codeshare_count:
            stats.max_codeshare = f
        if stats.max_via is None or f.via_stop_count > stats.max_via.via_stop_count:
            stats.max_via = f

    return stats


def stats_for_store(snapshots: SnapshotStore) -> ArchiveStats:
    """Aggregate every readable snapshot; corrupt days are logged and skipped."""
    stats = ArchiveStats()
    for d in snapshots.dates():
        try:
            snapshot = snapshots.read(d)
        except SnapshotParseFailure as e:
            logger.warning("Skipping %s: %s", d, e.reason)
            continue
        stats.days += 1
        compute_stats(snapshot.flights, stats)
    return stats
