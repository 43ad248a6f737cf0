"""Unit tests for feed normalization and the record models."""

import pytest

from conftest import arrival_item, departure_item
from hkgflights.archive.errors import MalformedRecord
from hkgflights.archive.models import Category, DailySnapshot, Direction, FlightRecord
from hkgflights.archive.normalizer import iter_date_groups, normalize, normalize_response
from hkgflights.reference import AirlineMapping, StatusKind


class TestNormalize:
    """Tests for normalize."""

    def test_departure_with_via_stop(self) -> None:
        item = departure_item(
            time="23:20",
            flights=[
                {"no": "CX 271", "airline": "CPA"},
                {"no": "QR 5801", "airline": "QTR"},
            ],
            status="Dep 00:15 (17/01/2026)",
            destination=["BKK", "AMS"],
            gate="29",
        )
        r = normalize(item, "2026-01-16", is_arrival=False, is_cargo=False)

        assert r.id == "2026-01-16_2320_CX271_D"
        assert r.route == ("BKK", "AMS")
        assert r.primary_airport == "AMS"
        assert r.has_via_stops is True
        assert r.via_stop_count == 1
        assert r.codeshare_count == 1
        assert r.operating_carrier.no == "CX 271"
        assert r.gate == "29"
        assert r.baggage_claim is None
        assert r.direction == Direction.DEPARTURE
        assert r.category == Category.PASSENGER
        assert r.status.kind == StatusKind.DEPARTED
        assert r.day_offset == 1

    def test_arrival_primary_is_first_origin(self) -> None:
        item = arrival_item(origin=["SIN", "CGK"], status="At gate 02:30 (16/01/2026)")
        r = normalize(item, "2026-01-15", is_arrival=True, is_cargo=True)

        assert r.primary_airport == "SIN"
        assert r.baggage_claim == "12"
        assert r.hall == "B"
        assert r.gate is None
        assert r.is_arrival and r.is_cargo
        assert r.id.endswith("_A")
        assert r.status.date == "16/01/2026"

    def test_arrival_ignores_gate(self) -> None:
        item = arrival_item()
        item["gate"] = "N5"
        assert normalize(item, "2026-01-15", True, False).gate is None

    def test_empty_route(self) -> None:
        r = normalize(departure_item(destination=[]), "2026-01-15", False, False)
        assert r.route == ()
        assert r.primary_airport == ""
        assert r.via_stop_count == 0
        assert r.has_via_stops is False

    def test_string_route_accepted(self) -> None:
        item = departure_item()
        item["destination"] = "NRT"
        assert normalize(item, "2026-01-15", False, False).route == ("NRT",)

    @pytest.mark.parametrize(
        "item",
        [
            "not a dict",
            {"time": "08:30"},
            {"time": "08:30", "flight": []},
            {"time": "08:30", "flight": [{"airline": "CPA"}]},
            {"time": 830, "flight": [{"no": "CX 1", "airline": "CPA"}]},
            {"time": "08:30", "flight": [{"no": "CX 1"}], "destination": {"code": "NRT"}},
        ],
    )
    def test_malformed_items_raise(self, item: object) -> None:
        with pytest.raises(MalformedRecord):
            normalize(item, "2026-01-15", False, False)


class TestNormalizeResponse:
    """Tests for normalize_response."""

    def test_skips_malformed_and_counts(self) -> None:
        response = [
            {
                "date": "2026-01-15",
                "list": [departure_item(), {"time": "09:00"}, departure_item(time="10:00")],
            }
        ]
        records, skipped = normalize_response(response, is_arrival=False, is_cargo=False)
        assert [r.time for r in records] == ["08:30", "10:00"]
        assert skipped == 1

    def test_multiple_date_groups_keep_their_dates(self) -> None:
        response = [
            {"date": "2026-01-14", "list": [departure_item(time="23:50")]},
            {"date": "2026-01-15", "list": [departure_item(time="00:10")]},
        ]
        records, _ = normalize_response(response, False, False)
        assert [r.date for r in records] == ["2026-01-14", "2026-01-15"]

    def test_capitalized_keys_and_fallback_date(self) -> None:
        response = [{"List": [arrival_item()]}]
        records, skipped = normalize_response(response, True, False, fallback_date="2026-01-15")
        assert skipped == 0
        assert records[0].date == "2026-01-15"

    def test_group_without_date_is_skipped(self) -> None:
        records, skipped = normalize_response([{"list": [arrival_item()]}], True, False)
        assert records == []
        assert skipped == 1

    def test_observes_every_leg(self) -> None:
        response = [
            {
                "date": "2026-01-15",
                "list": [
                    departure_item(
                        flights=[
                            {"no": "CX 888", "airline": "CPA"},
                            {"no": "AA 8920", "airline": "AAL"},
                        ]
                    )
                ],
            }
        ]
        mapping = AirlineMapping()
        normalize_response(response, False, False, airline_map=mapping)
        assert mapping.iata_for("CPA") == "CX"
        assert mapping.iata_for("AAL") == "AA"

    def test_non_list_response(self) -> None:
        assert list(iter_date_groups({"list": []})) == []
        assert normalize_response(None, False, False) == ([], 0)


class TestFlightRecordSerialization:
    """Tests for FlightRecord and DailySnapshot dict forms."""

    def test_record_dict_keys(self) -> None:
        r = normalize(departure_item(), "2026-01-15", False, False)
        d = r.to_dict()
        assert d["id"] == "2026-01-15_0830_CX888_D"
        assert d["operatingCarrier"]["iataCode"] == "CX"
        assert d["primaryAirport"] == "YVR"
        assert d["gate"] == "23"
        assert "baggageClaim" not in d
        assert d["direction"] == "departure"
        assert d["isArrival"] is False
        assert FlightRecord.from_dict(d) == r

    def test_record_from_bad_dict(self) -> None:
        with pytest.raises(ValueError):
            FlightRecord.from_dict({"id": "x"})

    @pytest.mark.parametrize(
        "field,value",
        [("id", ["a", "b"]), ("time", 830), ("terminal", {"t": 1}), ("route", "YVR")],
    )
    def test_record_with_wrong_types_rejected(self, field: str, value: object) -> None:
        d = normalize(departure_item(), "2026-01-15", False, False).to_dict()
        d[field] = value
        with pytest.raises(ValueError):
            FlightRecord.from_dict(d)

    def test_record_with_null_flight_number_rejected(self) -> None:
        d = normalize(departure_item(), "2026-01-15", False, False).to_dict()
        d["flights"][0]["no"] = None
        with pytest.raises(ValueError):
            FlightRecord.from_dict(d)

    def test_snapshot_counts(self) -> None:
        flights = [
            normalize(arrival_item(), "2026-01-15", True, False),
            normalize(departure_item(), "2026-01-15", False, True),
            normalize(departure_item(time="11:00"), "2026-01-15", False, False),
        ]
        snap = DailySnapshot(date="2026-01-15", generated_at="2026-01-16T00:00:00Z", flights=flights)
        d = snap.to_dict()
        assert d["totalFlights"] == 3
        assert d["arrivals"] == 1
        assert d["departures"] == 2
        assert d["cargo"] == 1
        assert d["passenger"] == 2
        assert DailySnapshot.from_dict(d).flights == flights

    def test_snapshot_dataframe(self) -> None:
        flights = [normalize(departure_item(), "2026-01-15", False, False)]
        df = DailySnapshot("2026-01-15", "", flights).to_dataframe()
        assert len(df) == 1
        assert df.iloc[0]["flight_no"] == "CX 888"
        assert df.iloc[0]["status_type"] == "departed"
        assert DailySnapshot("2026-01-15", "").to_dataframe().empty
