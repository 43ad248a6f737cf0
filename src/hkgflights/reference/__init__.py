"""Status parsing, flight number parsing and airline code mapping."""

from hkgflights.reference.airlines import AirlineCode, AirlineMapping
from hkgflights.reference.flight_ids import (
    FlightIdentifier,
    generate_flight_id,
    normalize_key,
    parse_flight_identifier,
)
from hkgflights.reference.status import ParsedStatus, StatusKind, day_offset, parse_status

__all__ = [
    "AirlineCode",
    "AirlineMapping",
    "FlightIdentifier",
    "ParsedStatus",
    "StatusKind",
    "day_offset",
    "generate_flight_id",
    "normalize_key",
    "parse_flight_identifier",
    "parse_status",
]
