"""Flight archive package: fetch, normalize, store and index HKIA flights."""

from hkgflights.archive.archiver import (
    ArchiveSummary,
    Archiver,
    RollingSummary,
    archive_rolling,
)
from hkgflights.archive.models import DailySnapshot, FlightRecord, RawFeedRecord
from hkgflights.archive.normalizer import normalize, normalize_response
from hkgflights.archive.reindexer import ReindexSummary, Reindexer
from hkgflights.archive.store import ShardStore, SnapshotStore

__all__ = [
    "ArchiveSummary",
    "Archiver",
    "DailySnapshot",
    "FlightRecord",
    "RawFeedRecord",
    "ReindexSummary",
    "Reindexer",
    "RollingSummary",
    "ShardStore",
    "SnapshotStore",
    "archive_rolling",
    "normalize",
    "normalize_response",
]
