"""Tests for NexTrip response model parsing."""

from __future__ import annotations

import pytest

from pynextrip.exceptions import IncompleteStopDataError, MalformedVehicleCoordinateError
from pynextrip.models.route import Direction, Route
from pynextrip.models.stop import Departure, StopDetail, StopRef
from pynextrip.models.vehicle import Vehicle

# ------------------------------------------------------------------
# Routes and directions
# ------------------------------------------------------------------


class TestRoute:
    def test_parses_route_payload(self) -> None:
        route = Route.model_validate({"route_id": "901", "agency_id": 0, "route_label": "METRO Blue Line"})
        assert route.route_id == "901"
        assert route.route_label == "METRO Blue Line"
        assert route.agency_id == 0
        assert route.raw["route_label"] == "METRO Blue Line"

    def test_numeric_direction_id_is_coerced_to_string(self) -> None:
        direction = Direction.model_validate({"direction_id": 0, "direction_name": "Northbound", "route_id": 5})
        assert direction.direction_id == "0"
        assert direction.route_id == "5"


# ------------------------------------------------------------------
# Stops
# ------------------------------------------------------------------


class TestStopDetail:
    def test_to_stop_keeps_departure_order(self) -> None:
        detail = StopDetail.model_validate(
            {
                "stops": [{"stop_id": 17890, "latitude": 44.97, "longitude": -93.27, "description": "Nicollet Mall"}],
                "departures": [
                    {"departure_text": "3 Min", "description": "Downtown"},
                    {"departure_text": "12:45", "description": "Downtown"},
                ],
            }
        )
        stop = detail.to_stop("NIMA")
        assert stop.place_code == "NIMA"
        assert stop.lat == pytest.approx(44.97)
        assert stop.description == "Nicollet Mall"
        assert [d.departure_text for d in stop.departures] == ["3 Min", "12:45"]

    def test_string_coordinates_are_accepted(self) -> None:
        detail = StopDetail.model_validate({"stops": [{"latitude": "44.9", "longitude": "-93.2"}]})
        assert detail.to_stop("X").lon == pytest.approx(-93.2)

    @pytest.mark.parametrize(
        "stops",
        [
            [],
            [{"description": "no coords"}],
            [{"latitude": "", "longitude": "-93.2"}],
            [{"latitude": "north", "longitude": "-93.2"}],
        ],
    )
    def test_missing_coordinates_raise(self, stops: list[dict]) -> None:
        detail = StopDetail.model_validate({"stops": stops, "departures": []})
        with pytest.raises(IncompleteStopDataError) as excinfo:
            detail.to_stop("P1")
        assert excinfo.value.place_code == "P1"

    def test_non_list_sections_become_empty(self) -> None:
        detail = StopDetail.model_validate({"stops": None, "departures": "n/a"})
        assert detail.stops == []
        assert detail.departures == []

    def test_stop_ref_numeric_place_code(self) -> None:
        assert StopRef.model_validate({"place_code": 42}).place_code == "42"


def test_departure_realtime_flag() -> None:
    assert Departure(departure_text="5 Min").is_realtime is True
    assert Departure(departure_text="10:15").is_realtime is False


# ------------------------------------------------------------------
# Vehicles
# ------------------------------------------------------------------


class TestVehicle:
    def test_string_coordinates_are_parsed(self) -> None:
        vehicle = Vehicle.model_validate(
            {"trip_id": "A1", "route_id": "5", "direction_id": 1, "direction": "NB", "latitude": "44.9", "longitude": "-93.2"}
        )
        assert vehicle.direction_id == "1"
        assert vehicle.position() == (pytest.approx(44.9), pytest.approx(-93.2))

    @pytest.mark.parametrize("lat", ["", "abc", None, "91.0"])
    def test_malformed_coordinates_raise(self, lat: str | None) -> None:
        vehicle = Vehicle.model_validate({"trip_id": "A1", "direction_id": "1", "latitude": lat, "longitude": "-93.2"})
        with pytest.raises(MalformedVehicleCoordinateError) as excinfo:
            vehicle.position()
        assert excinfo.value.trip_id == "A1"
