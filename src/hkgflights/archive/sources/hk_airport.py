"""Hong Kong International Airport flight information API client."""

from datetime import date
from typing import Any, List, Union

import requests

from hkgflights.archive.errors import FetchFailure

BASE_URL = "https://www.hongkongairport.com/flightinfo-rest/rest/flights/past"

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Accept": "application/json",
}


class HKAirportFeed:
    """Raw feed from the HK Airport open API, one query per (arrival, cargo) pair."""

    def __init__(self, base_url: str = BASE_URL, lang: str = "en", timeout: int = 30):
        self.base_url = base_url
        self.lang = lang
        self.timeout = timeout

    def fetch(self, flight_date: Union[str, date], arrival: bool, cargo: bool) -> List[Any]:
        """Fetch the date groups for one category. Raises FetchFailure."""
        date_str = flight_date if isinstance(flight_date, str) else flight_date.strftime("%Y-%m-%d")
        params = {
            "date": date_str,
            "lang": self.lang,
            "arrival": str(arrival).lower(),
            "cargo": str(cargo).lower(),
        }
        try:
            resp = requests.get(
                self.base_url, params=params, headers=HEADERS, timeout=self.timeout
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as e:
            raise FetchFailure(arrival, cargo, str(e)) from e
        except ValueError as e:
            raise FetchFailure(arrival, cargo, f"invalid JSON: {e}") from e

        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            # Error shape: {"problemNo": ..., "message": ...}
            if "problemNo" in data:
                raise FetchFailure(
                    arrival, cargo, f"API error {data.get('problemNo')}: {data.get('message', '')}"
                )
            if "list" in data or "List" in data:
                return [
                    {
                        "date": data.get("date") or data.get("Date") or date_str,
                        "list": data.get("list") or data.get("List") or [],
                    }
                ]
        raise FetchFailure(arrival, cargo, f"unexpected response type {type(data).__name__}")
