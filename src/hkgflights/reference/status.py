"""Parse flight status strings."""

import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Pattern, Tuple, Union


class StatusKind(str, Enum):
    """Normalized status type."""

    DEPARTED = "departed"
    AT_GATE = "at_gate"
    LANDED = "landed"
    BOARDING = "boarding"
    BOARDING_SOON = "boarding_soon"
    FINAL_CALL = "final_call"
    GATE_CLOSED = "gate_closed"
    ESTIMATED = "estimated"
    DELAYED = "delayed"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ParsedStatus:
    """Parsed flight status."""

    raw: str
    kind: StatusKind
    time: Optional[str] = None  # "HH:MM"
    date: Optional[str] = None  # "DD/MM/YYYY"
    is_different_date: bool = False

    def day_offset(self, scheduled_date: Union[str, date]) -> Optional[int]:
        """Days between the scheduled date and the date in the status text."""
        return day_offset(scheduled_date, self.date)

    def to_dict(self) -> dict:
        out: dict = {"raw": self.raw, "type": self.kind.value}
        if self.time is not None:
            out["time"] = self.time
        if self.date is not None:
            out["date"] = self.date
        out["isDifferentDate"] = self.is_different_date
        return out

    @classmethod
    def from_dict(cls, data: dict) -> "ParsedStatus":
        """Rebuild from the artifact shape. Raises ValueError on an unknown type."""
        return cls(
            raw=data.get("raw", ""),
            kind=StatusKind(data.get("type", StatusKind.UNKNOWN.value)),
            time=data.get("time"),
            date=data.get("date"),
            is_different_date=bool(data.get("isDifferentDate", False)),
        )


# Exact, case-sensitive matches that carry no time
_SIMPLE_STATUSES = {
    "Cancelled": StatusKind.CANCELLED,
    "Delayed": StatusKind.DELAYED,
    "Boarding": StatusKind.BOARDING,
    "Boarding Soon": StatusKind.BOARDING_SOON,
    "Final Call": StatusKind.FINAL_CALL,
    "Gate Closed": StatusKind.GATE_CLOSED,
}

_DATE_SUFFIX = r"(?:\s+\(([0-9]{2}/[0-9]{2}/[0-9]{4})\))?"

# Evaluated in order, first match wins. Landed never carries a date.
_STATUS_PATTERNS: Tuple[Tuple[Pattern, StatusKind], ...] = (
    (re.compile(r"^Dep ([0-9]{2}:[0-9]{2})" + _DATE_SUFFIX + "$"), StatusKind.DEPARTED),
    (re.compile(r"^At gate ([0-9]{2}:[0-9]{2})" + _DATE_SUFFIX + "$"), StatusKind.AT_GATE),
    (re.compile(r"^Landed ([0-9]{2}:[0-9]{2})$"), StatusKind.LANDED),
    (re.compile(r"^Est at ([0-9]{2}:[0-9]{2})" + _DATE_SUFFIX + "$"), StatusKind.ESTIMATED),
)


def parse_status(status: Any) -> ParsedStatus:
    """Parse a raw status string into structured fields. Never raises."""
    if not isinstance(status, str):
        return ParsedStatus(raw="", kind=StatusKind.UNKNOWN)

    s = status.strip()
    if not s:
        return ParsedStatus(raw=s, kind=StatusKind.UNKNOWN)

    if s in _SIMPLE_STATUSES:
        return ParsedStatus(raw=s, kind=_SIMPLE_STATUSES[s])

    for pattern, kind in _STATUS_PATTERNS:
        m = pattern.match(s)
        if m:
            time_str = m.group(1)
            date_str = m.group(2) if pattern.groups > 1 else None
            return ParsedStatus(
                raw=s,
                kind=kind,
                time=time_str,
                date=date_str,
                is_different_date=date_str is not None,
            )

    # Unrecognized text keeps its raw value only
    return ParsedStatus(raw=s, kind=StatusKind.UNKNOWN)


_STATUS_DATE_RE = re.compile(r"^([0-9]{1,2})/([0-9]{1,2})(?:/([0-9]{4}))?$")


def day_offset(
    scheduled_date: Union[str, date], status_date: Optional[str]
) -> Optional[int]:
    """
    Signed days from the scheduled date to the status date.

    status_date is "DD/MM/YYYY" or "DD/MM". When the year is missing it is taken
    from the scheduled date, moved across the December/January boundary when the
    months say so. Returns None when there is no usable status date.
    """
    if not status_date:
        return None
    m = _STATUS_DATE_RE.match(status_date.strip())
    if not m:
        return None

    if isinstance(scheduled_date, str):
        try:
            scheduled = datetime.strptime(scheduled_date, "%Y-%m-%d").date()
        except ValueError:
            return None
    else:
        scheduled = scheduled_date

    dd, mm, yyyy = m.groups()
    day, month = int(dd), int(mm)
    if yyyy:
        year = int(yyyy)
    else:
        year = scheduled.year
        if scheduled.month == 12 and month == 1:
            year += 1
        elif scheduled.month == 1 and month == 12:
            year -= 1

    try:
        actual = date(year, month, day)
    except ValueError:
        return None
    return (actual - scheduled).days
