"""Airline ICAO to IATA code mapping, learned from feed data."""

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from hkgflights.reference.flight_ids import FlightIdentifier


@dataclass(frozen=True)
class AirlineCode:
    """IATA code seen for an ICAO carrier, with a flight number as evidence."""

    icao: str
    iata: str
    sample_flight: str


class AirlineMapping:
    """
    Accumulates ICAO -> IATA mappings while flights are normalized.

    The feed gives the carrier as ICAO ("CPA") and the flight number with the
    IATA prefix ("CX 888"). A carrier is recorded the first time it is seen, and
    overwritten whenever a prefix of two characters or fewer shows up.
    """

    def __init__(self) -> None:
        self._codes: Dict[str, AirlineCode] = {}

    def observe(self, ident: FlightIdentifier) -> bool:
        """Record one leg. Returns True when the mapping changed."""
        # flight_number is empty only when the flight no has no whitespace
        if not ident.airline or not ident.flight_number:
            return False
        if ident.airline in self._codes and len(ident.iata_code) > 2:
            return False
        self._codes[ident.airline] = AirlineCode(
            icao=ident.airline, iata=ident.iata_code, sample_flight=ident.no
        )
        return True

    def get(self, icao: str) -> Optional[AirlineCode]:
        return self._codes.get(icao)

    def iata_for(self, icao: str) -> Optional[str]:
        code = self._codes.get(icao)
        return code.iata if code else None

    def items(self) -> Iterator[Tuple[str, AirlineCode]]:
        return iter(self._codes.items())

    def __len__(self) -> int:
        return len(self._codes)

    def __contains__(self, icao: object) -> bool:
        return icao in self._codes
