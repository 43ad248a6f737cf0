"""Abstract interface for flight feed sources."""

from dataclasses import dataclass
from datetime import date
from typing import Any, List, Protocol, Tuple, Union, runtime_checkable


@dataclass(frozen=True)
class FeedCategory:
    """One of the four feed queries for a date."""

    arrival: bool
    cargo: bool
    label: str


FLIGHT_CATEGORIES: Tuple[FeedCategory, ...] = (
    FeedCategory(arrival=True, cargo=False, label="Arrival-Passenger"),
    FeedCategory(arrival=True, cargo=True, label="Arrival-Cargo"),
    FeedCategory(arrival=False, cargo=False, label="Departure-Passenger"),
    FeedCategory(arrival=False, cargo=True, label="Departure-Cargo"),
)


@runtime_checkable
class FeedSource(Protocol):
    """Protocol for flight feeds."""

    def fetch(self, flight_date: Union[str, date], arrival: bool, cargo: bool) -> List[Any]:
        """Return the raw date groups ({date, list}) for one category. Raises FetchFailure."""
        ...
