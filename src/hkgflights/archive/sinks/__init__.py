"""Batch-write sinks for archived flights."""

from hkgflights.archive.sinks.base import (
    SINK_BATCH_SIZE,
    FlightSink,
    Statement,
    chunked,
    delete_flights_for_date,
    insert_flight,
    upsert_airline,
)
from hkgflights.archive.sinks.d1 import D1Sink
from hkgflights.archive.sinks.sqlite import SQLiteSink

__all__ = [
    "D1Sink",
    "FlightSink",
    "SINK_BATCH_SIZE",
    "SQLiteSink",
    "Statement",
    "chunked",
    "delete_flights_for_date",
    "insert_flight",
    "upsert_airline",
]
