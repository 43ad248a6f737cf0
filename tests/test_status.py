"""Unit tests for status parsing."""

from datetime import date

import pytest

from hkgflights.reference import ParsedStatus, StatusKind, day_offset, parse_status


class TestParseStatus:
    """Tests for parse_status."""

    def test_dep_time_only(self) -> None:
        p = parse_status("Dep 01:21")
        assert p.kind == StatusKind.DEPARTED
        assert p.time == "01:21"
        assert p.date is None
        assert p.is_different_date is False

    def test_dep_with_date(self) -> None:
        p = parse_status("Dep 00:15 (17/01/2026)")
        assert p.kind == StatusKind.DEPARTED
        assert p.time == "00:15"
        assert p.date == "17/01/2026"
        assert p.is_different_date is True

    def test_at_gate_with_date(self) -> None:
        p = parse_status("At gate 02:30 (16/01/2026)")
        assert p == ParsedStatus(
            raw="At gate 02:30 (16/01/2026)",
            kind=StatusKind.AT_GATE,
            time="02:30",
            date="16/01/2026",
            is_different_date=True,
        )

    def test_at_gate_without_time_is_unknown(self) -> None:
        p = parse_status("At gate")
        assert p.kind == StatusKind.UNKNOWN
        assert p.raw == "At gate"

    def test_landed(self) -> None:
        p = parse_status("Landed 23:58")
        assert p.kind == StatusKind.LANDED
        assert p.time == "23:58"

    def test_landed_with_date_is_unknown(self) -> None:
        """Landed statuses never carry a date."""
        p = parse_status("Landed 00:10 (17/01/2026)")
        assert p.kind == StatusKind.UNKNOWN
        assert p.time is None

    def test_estimated(self) -> None:
        p = parse_status("Est at 18:05 (02/03/2026)")
        assert p.kind == StatusKind.ESTIMATED
        assert p.time == "18:05"
        assert p.date == "02/03/2026"

    @pytest.mark.parametrize(
        "raw,kind",
        [
            ("Cancelled", StatusKind.CANCELLED),
            ("Delayed", StatusKind.DELAYED),
            ("Boarding", StatusKind.BOARDING),
            ("Boarding Soon", StatusKind.BOARDING_SOON),
            ("Final Call", StatusKind.FINAL_CALL),
            ("Gate Closed", StatusKind.GATE_CLOSED),
        ],
    )
    def test_simple_statuses(self, raw: str, kind: StatusKind) -> None:
        p = parse_status(raw)
        assert p.kind == kind
        assert p.time is None
        assert p.date is None

    def test_simple_status_is_case_sensitive(self) -> None:
        assert parse_status("cancelled").kind == StatusKind.UNKNOWN

    def test_surrounding_whitespace_is_trimmed(self) -> None:
        p = parse_status("  Dep 08:45  ")
        assert p.raw == "Dep 08:45"
        assert p.kind == StatusKind.DEPARTED

    def test_single_digit_hour_is_unknown(self) -> None:
        assert parse_status("Dep 8:45").kind == StatusKind.UNKNOWN

    def test_non_ascii_digits_are_unknown(self) -> None:
        """Only ASCII digits count as a time or date."""
        p = parse_status("Dep ١٢:٣٠")
        assert p.kind == StatusKind.UNKNOWN
        assert p.time is None
        assert parse_status("Dep 08:45 (١٦/01/2026)").kind == StatusKind.UNKNOWN

    def test_empty_and_unrecognized(self) -> None:
        assert parse_status("").kind == StatusKind.UNKNOWN
        p = parse_status("Diverted to Macau")
        assert p.kind == StatusKind.UNKNOWN
        assert p.raw == "Diverted to Macau"

    @pytest.mark.parametrize("value", [None, 42, ["Dep 08:45"], {"status": "Landed"}])
    def test_non_string_never_raises(self, value: object) -> None:
        p = parse_status(value)
        assert p.kind == StatusKind.UNKNOWN
        assert p.raw == ""

    def test_to_dict_shape(self) -> None:
        assert parse_status("Dep 01:21").to_dict() == {
            "raw": "Dep 01:21",
            "type": "departed",
            "time": "01:21",
            "isDifferentDate": False,
        }
        assert parse_status("Cancelled").to_dict() == {
            "raw": "Cancelled",
            "type": "cancelled",
            "isDifferentDate": False,
        }

    def test_from_dict_restores(self) -> None:
        p = parse_status("At gate 02:30 (16/01/2026)")
        assert ParsedStatus.from_dict(p.to_dict()) == p


class TestDayOffset:
    """Tests for day_offset."""

    def test_next_day(self) -> None:
        assert day_offset("2026-01-15", "16/01/2026") == 1

    def test_same_day(self) -> None:
        assert day_offset("2026-01-15", "15/01/2026") == 0

    def test_previous_day(self) -> None:
        assert day_offset("2026-03-01", "28/02/2026") == -1

    def test_year_rollover_without_year(self) -> None:
        assert day_offset("2025-12-31", "01/01") == 1

    def test_year_rollback_without_year(self) -> None:
        assert day_offset("2026-01-01", "31/12") == -1

    def test_accepts_date_objects(self) -> None:
        assert day_offset(date(2025, 12, 31), "01/01/2026") == 1

    def test_missing_or_invalid(self) -> None:
        assert day_offset("2026-01-15", None) is None
        assert day_offset("2026-01-15", "") is None
        assert day_offset("2026-01-15", "soon") is None
        assert day_offset("2026-01-15", "31/02/2026") is None
        assert day_offset("not-a-date", "16/01/2026") is None
        assert day_offset("2026-01-15", "١٦/01/2026") is None

    def test_parsed_status_offset(self) -> None:
        p = parse_status("Dep 00:15 (17/01/2026)")
        assert p.day_offset("2026-01-16") == 1
        assert parse_status("Dep 23:50").day_offset("2026-01-16") is None
