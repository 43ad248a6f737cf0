"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import pytest

# Ensure src is on path when running tests without installed package
src = Path(__file__).resolve().parent.parent / "src"
if src.exists() and str(src) not in sys.path:
    sys.path.insert(0, str(src))

from hkgflights.archive.errors import FetchFailure  # noqa: E402
from hkgflights.archive.sinks import SQLiteSink  # noqa: E402


def departure_item(
    time: str = "08:30",
    flights: Optional[List[Dict[str, str]]] = None,
    status: str = "Dep 08:45",
    destination: Optional[List[str]] = None,
    gate: Optional[str] = "23",
) -> Dict[str, Any]:
    item: Dict[str, Any] = {
        "time": time,
        "flight": flights or [{"no": "CX 888", "airline": "CPA"}],
        "status": status,
        "destination": destination if destination is not None else ["YVR"],
        "terminal": "T1",
    }
    if gate is not None:
        item["gate"] = gate
    return item


def arrival_item(
    time: str = "14:45",
    flights: Optional[List[Dict[str, str]]] = None,
    status: str = "At gate 14:40",
    origin: Optional[List[str]] = None,
    baggage: str = "12",
) -> Dict[str, Any]:
    return {
        "time": time,
        "flight": flights or [{"no": "BR 891", "airline": "EVA"}],
        "status": status,
        "origin": origin if origin is not None else ["TPE"],
        "terminal": "T1",
        "baggage": baggage,
        "hall": "B",
    }


class FakeFeed:
    """In-memory FeedSource keyed by (arrival, cargo)."""

    def __init__(
        self,
        items: Optional[Dict[Tuple[bool, bool], List[Any]]] = None,
        failing: Optional[Set[Tuple[bool, bool]]] = None,
    ) -> None:
        self.items = items or {}
        self.failing = failing or set()
        self.calls: List[Tuple[str, bool, bool]] = []

    def fetch(self, flight_date: Any, arrival: bool, cargo: bool) -> List[Any]:
        self.calls.append((str(flight_date), arrival, cargo))
        if (arrival, cargo) in self.failing:
            raise FetchFailure(arrival, cargo, "HTTP 503")
        return [{"date": str(flight_date), "list": list(self.items.get((arrival, cargo), []))}]


@pytest.fixture
def sink():
    s = SQLiteSink(":memory:")
    s.ensure_schema()
    yield s
    s.close()


@pytest.fixture
def feed() -> FakeFeed:
    return FakeFeed(
        {
            (True, False): [arrival_item()],
            (True, True): [
                arrival_item(time="03:10", flights=[{"no": "CX 2083", "airline": "CPA"}])
            ],
            (False, False): [
                departure_item(
                    flights=[
                        {"no": "CX 888", "airline": "CPA"},
                        {"no": "AA 8920", "airline": "AAL"},
                    ]
                )
            ],
            (False, True): [
                departure_item(
                    time="22:05", flights=[{"no": "KZ 201", "airline": "NCA"}], gate=None
                )
            ],
        }
    )
