"""Batch-write sink interface and the statements the archiver sends to it."""

import json
from dataclasses import dataclass, field
from typing import Any, List, Protocol, Sequence, runtime_checkable

from hkgflights.archive.models import FlightRecord

# Statements per request accepted by the remote sink
SINK_BATCH_SIZE = 50

INSERT_FLIGHT_SQL = (
    "INSERT OR REPLACE INTO flights "
    "(date, time, flight_no, airline, origin_dest, status, "
    "gate_baggage, terminal, is_arrival, is_cargo, codeshares, archived_at) "
    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)"
)

DELETE_FLIGHTS_SQL = "DELETE FROM flights WHERE date = ?"

UPSERT_AIRLINE_SQL = (
    "INSERT INTO airlines (icao_code, iata_code, sample_flight, updated_at) "
    "VALUES (?, ?, ?, ?) "
    "ON CONFLICT(icao_code) DO UPDATE SET "
    "iata_code = excluded.iata_code, "
    "sample_flight = excluded.sample_flight, "
    "updated_at = excluded.updated_at"
)


@dataclass(frozen=True)
class Statement:
    """One parameterized SQL statement."""

    sql: str
    params: List[Any] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"sql": self.sql, "params": list(self.params)}


@runtime_checkable
class FlightSink(Protocol):
    """Protocol for batch-write targets."""

    def execute_batch(self, statements: Sequence[Statement]) -> List[int]:
        """Run statements as one request; return affected rows. Raises SinkBatchFailure."""
        ...


def delete_flights_for_date(date: str) -> Statement:
    return Statement(DELETE_FLIGHTS_SQL, [date])


def insert_flight(record: FlightRecord, archived_at: str) -> Statement:
    """Row keyed by (date, time, flight_no, is_arrival), the same identity as record.id."""
    codeshares = [f.no for f in record.flights[1:]]
    gate_baggage = record.baggage_claim if record.is_arrival else record.gate
    return Statement(
        INSERT_FLIGHT_SQL,
        [
            record.date,
            record.time,
            record.operating_carrier.no,
            record.operating_carrier.airline,
            ",".join(record.route),
            record.status.raw,
            gate_baggage or "",
            record.terminal or "",
            1 if record.is_arrival else 0,
            1 if record.is_cargo else 0,
            json.dumps(codeshares) if codeshares else None,
            archived_at,
        ],
    )


def upsert_airline(icao: str, iata: str, sample_flight: str, updated_at: str) -> Statement:
    return Statement(UPSERT_AIRLINE_SQL, [icao, iata, sample_flight, updated_at])


def chunked(items: Sequence[Any], size: int) -> List[Sequence[Any]]:
    if size < 1:
        raise ValueError(f"Batch size must be positive, got {size}")
    return [items[i : i + size] for i in range(0, len(items), size)]
