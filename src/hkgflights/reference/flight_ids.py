"""Flight number parsing and record identity."""

import re
from dataclasses import dataclass

_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class FlightIdentifier:
    """One leg of a (possibly codeshared) flight, e.g. "CX 888" flown by CPA."""

    no: str
    airline: str
    iata_code: str
    flight_number: str

    def to_dict(self) -> dict:
        return {
            "no": self.no,
            "airline": self.airline,
            "iataCode": self.iata_code,
            "flightNumber": self.flight_number,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FlightIdentifier":
        return cls(
            no=data["no"],
            airline=data.get("airline", ""),
            iata_code=data.get("iataCode", ""),
            flight_number=data.get("flightNumber", ""),
        )


def parse_flight_identifier(no: str, airline: str) -> FlightIdentifier:
    """Split "CX 888" into IATA code "CX" and flight number "888"."""
    full = no.strip()
    parts = full.split()
    return FlightIdentifier(
        no=full,
        airline=airline,
        iata_code=parts[0] if parts else "",
        flight_number="".join(parts[1:]),
    )


def generate_flight_id(date: str, time: str, flight_no: str, is_arrival: bool) -> str:
    """Deterministic record id, e.g. 2026-01-15_0830_CX888_D."""
    direction = "A" if is_arrival else "D"
    sanitized = _WHITESPACE_RE.sub("", flight_no)
    return f"{date}_{time.replace(':', '', 1)}_{sanitized}_{direction}"


def normalize_key(value: str) -> str:
    """Strip everything but letters and digits ("CX 888" -> "CX888")."""
    return _NON_ALNUM_RE.sub("", str(value))
