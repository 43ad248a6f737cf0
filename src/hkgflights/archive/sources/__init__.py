"""Flight feed sources."""

from hkgflights.archive.sources.base import FLIGHT_CATEGORIES, FeedCategory, FeedSource
from hkgflights.archive.sources.hk_airport import HKAirportFeed

__all__ = ["FLIGHT_CATEGORIES", "FeedCategory", "FeedSource", "HKAirportFeed"]
