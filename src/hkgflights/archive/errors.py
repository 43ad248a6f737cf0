"""Exceptions raised by the archive pipeline."""

from typing import Any, Optional


class ArchiveError(Exception):
    """Base class for pipeline errors."""


class ConfigError(ArchiveError):
    """Missing or invalid configuration."""


class InvalidInput(ArchiveError, ValueError):
    """Bad command-line argument, e.g. a date not in YYYY-MM-DD form."""


class FetchFailure(ArchiveError):
    """One feed category request failed."""

    def __init__(self, arrival: bool, cargo: bool, reason: str):
        self.arrival = arrival
        self.cargo = cargo
        self.reason = reason
        super().__init__(f"Fetch failed (arrival={arrival}, cargo={cargo}): {reason}")


class MalformedRecord(ArchiveError):
    """A raw feed item does not have the shape of a flight."""


class SinkBatchFailure(ArchiveError):
    """The sink rejected a batch of statements."""


class SnapshotParseFailure(ArchiveError):
    """A stored daily snapshot could not be read."""

    def __init__(self, path: Any, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read snapshot {path}: {reason}")


class NoFlightsCollected(ArchiveError):
    """Every feed category came back empty or failed."""

    def __init__(self, date: str):
        self.date = date
        super().__init__(f"No flights collected for {date}")


class SinkUnavailable(ArchiveError):
    """Every insert batch failed."""

    def __init__(self, summary: Optional[Any] = None, reason: str = "all insert batches failed"):
        self.summary = summary
        super().__init__(reason)
