"""Turn raw feed items into FlightRecords."""

import logging
from typing import Any, Iterable, List, Optional, Tuple, Union

from hkgflights.archive.errors import MalformedRecord
from hkgflights.archive.models import Category, Direction, FlightRecord, RawFeedRecord
from hkgflights.reference.airlines import AirlineMapping
from hkgflights.reference.flight_ids import generate_flight_id, parse_flight_identifier
from hkgflights.reference.status import parse_status

logger = logging.getLogger(__name__)


def normalize(
    item: Union[dict, RawFeedRecord],
    date: str,
    is_arrival: bool,
    is_cargo: bool,
) -> FlightRecord:
    """
    Normalize one feed item.

    Arrivals take their route from the origin list and use its first airport as
    the primary airport; departures use the destination list and its last
    airport. Raises MalformedRecord when the item has no usable flight list.
    """
    raw = item if isinstance(item, RawFeedRecord) else RawFeedRecord.from_dict(item)

    flights = tuple(parse_flight_identifier(leg.no, leg.airline) for leg in raw.legs)
    operating = flights[0]

    route = raw.origin if is_arrival else raw.destination
    if route:
        primary_airport = route[0] if is_arrival else route[-1]
    else:
        primary_airport = ""

    status = parse_status(raw.status)
    record_id = generate_flight_id(date, raw.time, operating.no, is_arrival)

    return FlightRecord(
        id=record_id,
        date=date,
        time=raw.time,
        flights=flights,
        route=route,
        primary_airport=primary_airport,
        status=status,
        direction=Direction.ARRIVAL if is_arrival else Direction.DEPARTURE,
        category=Category.CARGO if is_cargo else Category.PASSENGER,
        gate=None if is_arrival else raw.gate,
        baggage_claim=raw.baggage if is_arrival else None,
        terminal=raw.terminal,
        hall=raw.hall if is_arrival else None,
        aisle=None if is_arrival else raw.aisle,
        stand=raw.stand,
    )


def iter_date_groups(response: Any) -> Iterable[Tuple[Optional[str], List[Any]]]:
    """Yield (date, items) for each date group of a feed response."""
    if not isinstance(response, list):
        return
    for group in response:
        if not isinstance(group, dict):
            logger.warning("Skipping feed group that is not an object: %r", group)
            continue
        items = group.get("list") or group.get("List") or []
        if not isinstance(items, list):
            logger.warning("Skipping feed group whose list is not an array: %r", items)
            continue
        yield group.get("date") or group.get("Date"), items


def normalize_response(
    response: Any,
    is_arrival: bool,
    is_cargo: bool,
    airline_map: Optional[AirlineMapping] = None,
    fallback_date: Optional[str] = None,
) -> Tuple[List[FlightRecord], int]:
    """
    Normalize a whole feed response.

    Malformed items are logged and skipped. Every leg of every good item is fed to
    airline_map when one is given. Returns (records, skipped count).
    """
    records: List[FlightRecord] = []
    skipped = 0

    for group_date, items in iter_date_groups(response):
        date = group_date or fallback_date
        if not date:
            logger.warning("Skipping %d items in a date group without a date", len(items))
            skipped += len(items)
            continue
        for item in items:
            try:
                record = normalize(item, date, is_arrival, is_cargo)
            except MalformedRecord as e:
                logger.warning("Skipping malformed flight item on %s: %s", date, e)
                skipped += 1
                continue
            if airline_map is not None:
                for ident in record.flights:
                    airline_map.observe(ident)
            records.append(record)

    return records, skipped
