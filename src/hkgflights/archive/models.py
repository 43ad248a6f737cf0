"""Data models for the flight archive."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple

from hkgflights.archive.errors import MalformedRecord
from hkgflights.reference.flight_ids import FlightIdentifier
from hkgflights.reference.status import ParsedStatus


class Direction(str, Enum):
    ARRIVAL = "arrival"
    DEPARTURE = "departure"


class Category(str, Enum):
    PASSENGER = "passenger"
    CARGO = "cargo"


def _opt_str(item: dict, key: str) -> Optional[str]:
    v = item.get(key)
    if v is None:
        return None
    if isinstance(v, (dict, list)):
        raise MalformedRecord(f"Field {key!r} is not a scalar: {v!r}")
    s = str(v).strip()
    return s or None


def _route(value: Any) -> Tuple[str, ...]:
    """Route fields arrive as a list of airport codes, occasionally a bare string."""
    if value is None:
        return ()
    if isinstance(value, str):
        return (value.strip(),) if value.strip() else ()
    if isinstance(value, list):
        if not all(isinstance(v, str) for v in value):
            raise MalformedRecord(f"Route contains non-string entries: {value!r}")
        return tuple(v.strip() for v in value)
    raise MalformedRecord(f"Unexpected route value: {value!r}")


def _artifact_str(data: dict, key: str, optional: bool = False) -> Optional[str]:
    """String field of a stored record. Raises ValueError on any other type."""
    value = data.get(key) if optional else data[key]
    if value is None and optional:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Field {key!r} must be a string, got {value!r}")
    return value


@dataclass(frozen=True)
class RawLeg:
    """One entry of the feed's flight number list."""

    no: str
    airline: str


@dataclass(frozen=True)
class RawFeedRecord:
    """One item of a feed date group, validated at the ingestion boundary."""

    time: str
    legs: Tuple[RawLeg, ...]
    status: str = ""
    origin: Tuple[str, ...] = ()
    destination: Tuple[str, ...] = ()
    terminal: Optional[str] = None
    gate: Optional[str] = None
    baggage: Optional[str] = None
    hall: Optional[str] = None
    aisle: Optional[str] = None
    stand: Optional[str] = None

    @classmethod
    def from_dict(cls, item: Any) -> "RawFeedRecord":
        """Validate a raw feed item. Raises MalformedRecord."""
        if not isinstance(item, dict):
            raise MalformedRecord(f"Feed item is not an object: {item!r}")

        flights = item.get("flight")
        if not isinstance(flights, list) or not flights:
            raise MalformedRecord("Feed item has no flight list")
        legs = []
        for fn in flights:
            if not isinstance(fn, dict) or not isinstance(fn.get("no"), str):
                raise MalformedRecord(f"Flight leg without a flight number: {fn!r}")
            airline = fn.get("airline") or ""
            if not isinstance(airline, str):
                raise MalformedRecord(f"Flight leg with a non-string airline: {fn!r}")
            legs.append(RawLeg(no=fn["no"], airline=airline))

        time_str = item.get("time") or ""
        if not isinstance(time_str, str):
            raise MalformedRecord(f"Scheduled time is not a string: {time_str!r}")
        status = item.get("status") or ""
        if not isinstance(status, str):
            raise MalformedRecord(f"Status is not a string: {status!r}")

        return cls(
            time=time_str.strip(),
            legs=tuple(legs),
            status=status,
            origin=_route(item.get("origin")),
            destination=_route(item.get("destination")),
            terminal=_opt_str(item, "terminal"),
            gate=_opt_str(item, "gate"),
            baggage=_opt_str(item, "baggage"),
            hall=_opt_str(item, "hall"),
            aisle=_opt_str(item, "aisle"),
            stand=_opt_str(item, "stand"),
        )


@dataclass(frozen=True)
class FlightRecord:
    """Normalized flight record."""

    id: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    flights: Tuple[FlightIdentifier, ...]
    route: Tuple[str, ...]
    primary_airport: str
    status: ParsedStatus
    direction: Direction
    category: Category
    # Gate is set for departures only, baggage claim for arrivals only
    gate: Optional[str] = None
    baggage_claim: Optional[str] = None
    terminal: Optional[str] = None
    hall: Optional[str] = None
    aisle: Optional[str] = None
    stand: Optional[str] = None

    @property
    def operating_carrier(self) -> FlightIdentifier:
        return self.flights[0]

    @property
    def codeshare_count(self) -> int:
        return len(self.flights) - 1

    @property
    def has_via_stops(self) -> bool:
        return len(self.route) > 1

    @property
    def via_stop_count(self) -> int:
        return max(0, len(self.route) - 1)

    @property
    def is_arrival(self) -> bool:
        return self.direction == Direction.ARRIVAL

    @property
    def is_cargo(self) -> bool:
        return self.category == Category.CARGO

    @property
    def sort_key(self) -> str:
        """Lexicographic ordering key; date and time are zero-padded."""
        return f"{self.date} {self.time}"

    @property
    def day_offset(self) -> Optional[int]:
        return self.status.day_offset(self.date)

    def to_dict(self) -> dict:
        out: dict = {
            "id": self.id,
            "date": self.date,
            "time": self.time,
            "flights": [f.to_dict() for f in self.flights],
            "operatingCarrier": self.operating_carrier.to_dict(),
            "codeshareCount": self.codeshare_count,
            "route": list(self.route),
            "primaryAirport": self.primary_airport,
            "hasViaStops": self.has_via_stops,
            "viaStopCount": self.via_stop_count,
            "status": self.status.to_dict(),
        }
        for key, value in (
            ("gate", self.gate),
            ("baggageClaim", self.baggage_claim),
            ("terminal", self.terminal),
            ("hall", self.hall),
            ("aisle", self.aisle),
            ("stand", self.stand),
        ):
            if value is not None:
                out[key] = value
        out["direction"] = self.direction.value
        out["category"] = self.category.value
        out["isArrival"] = self.is_arrival
        out["isCargo"] = self.is_cargo
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "FlightRecord":
        """Rebuild a record from its artifact shape. Raises ValueError."""
        try:
            legs = data["flights"]
            if not isinstance(legs, list) or not legs:
                raise ValueError("record has no flights")
            for leg in legs:
                _artifact_str(leg, "no")
                for key in ("airline", "iataCode", "flightNumber"):
                    _artifact_str(leg, key, optional=True)
            route = data.get("route") or []
            if not isinstance(route, list) or not all(isinstance(r, str) for r in route):
                raise ValueError(f"route must be a list of strings: {route!r}")
            status = data["status"]
            _artifact_str(status, "raw", optional=True)
            _artifact_str(status, "time", optional=True)
            _artifact_str(status, "date", optional=True)
            return cls(
                id=_artifact_str(data, "id"),
                date=_artifact_str(data, "date"),
                time=_artifact_str(data, "time"),
                flights=tuple(FlightIdentifier.from_dict(f) for f in legs),
                route=tuple(route),
                primary_airport=_artifact_str(data, "primaryAirport", optional=True) or "",
                status=ParsedStatus.from_dict(status),
                direction=Direction(data["direction"]),
                category=Category(data["category"]),
                gate=_artifact_str(data, "gate", optional=True),
                baggage_claim=_artifact_str(data, "baggageClaim", optional=True),
                terminal=_artifact_str(data, "terminal", optional=True),
                hall=_artifact_str(data, "hall", optional=True),
                aisle=_artifact_str(data, "aisle", optional=True),
                stand=_artifact_str(data, "stand", optional=True),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Invalid flight record: {e!r}") from e


@dataclass
class DailySnapshot:
    """All normalized flights for one calendar date."""

    date: str
    generated_at: str
    flights: List[FlightRecord] = field(default_factory=list)

    @property
    def arrivals(self) -> int:
        return sum(1 for f in self.flights if f.is_arrival)

    @property
    def departures(self) -> int:
        return sum(1 for f in self.flights if not f.is_arrival)

    @property
    def cargo(self) -> int:
        return sum(1 for f in self.flights if f.is_cargo)

    @property
    def passenger(self) -> int:
        return sum(1 for f in self.flights if not f.is_cargo)

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "generatedAt": self.generated_at,
            "totalFlights": len(self.flights),
            "arrivals": self.arrivals,
            "departures": self.departures,
            "cargo": self.cargo,
            "passenger": self.passenger,
            "flights": [f.to_dict() for f in self.flights],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "DailySnapshot":
        """Raises ValueError when the snapshot shape is wrong."""
        if not isinstance(data, dict):
            raise ValueError("snapshot is not an object")
        if not isinstance(data.get("date"), str):
            raise ValueError("snapshot has no date")
        flights = data.get("flights") or []
        if not isinstance(flights, list):
            raise ValueError("snapshot flights is not a list")
        return cls(
            date=data["date"],
            generated_at=data.get("generatedAt", ""),
            flights=[FlightRecord.from_dict(f) for f in flights],
        )

    def to_dataframe(self):
        """Convert to pandas DataFrame, one row per record."""
        import pandas as pd

        columns = [
            "id",
            "date",
            "time",
            "flight_no",
            "airline",
            "primary_airport",
            "status",
            "status_type",
            "day_offset",
            "gate",
            "baggage_claim",
            "terminal",
            "direction",
            "category",
            "codeshares",
        ]
        if not self.flights:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame(
            [
                {
                    "id": f.id,
                    "date": f.date,
                    "time": f.time,
                    "flight_no": f.operating_carrier.no,
                    "airline": f.operating_carrier.airline,
                    "primary_airport": f.primary_airport,
                    "status": f.status.raw,
                    "status_type": f.status.kind.value,
                    "day_offset": f.day_offset,
                    "gate": f.gate,
                    "baggage_claim": f.baggage_claim,
                    "terminal": f.terminal,
                    "direction": f.direction.value,
                    "category": f.category.value,
                    "codeshares": f.codeshare_count,
                }
                for f in self.flights
            ],
            columns=columns,
        )
