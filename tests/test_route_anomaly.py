"""
Tests for RouteAnomalyDetector.
"""

import json

import pytest

from analytics import AnalyticsEngine
from analytics.route_anomaly import RouteAnomalyDetector, RouteDataError, parse_route_points
from api.analytics_models import AnomalyType, DriverInfo, RoutePoint, Severity
from conftest import moving_route, route_with_stops


@pytest.fixture
def detector():
    return RouteAnomalyDetector()


def _points(coords):
    return [RoutePoint(lat=lat, lon=lon) for lat, lon in coords]


def test_four_stops_emit_irregular_stops_anomaly(detector, make_trip):
    trip = make_trip(route_points=route_with_stops(4))

    anomalies = detector.detect(trip)

    assert len(anomalies) == 1
    anomaly = anomalies[0]
    assert anomaly.type == AnomalyType.IRREGULAR_STOPS
    assert anomaly.severity == Severity.MEDIUM
    assert "4" in anomaly.details
    assert anomaly.timestamp == trip.start_time
    assert anomaly.location.latitude == trip.start_lat
    assert anomaly.location.longitude == trip.start_lon


def test_three_stops_are_tolerated(detector, make_trip):
    trip = make_trip(route_points=route_with_stops(3))
    assert detector.detect(trip) == []


def test_short_routes_never_produce_anomalies(detector, make_trip):
    # Wildly inefficient and stationary, but only 10 samples
    points = [{"lat": 25.0, "lon": 51.0}] * 10
    trip = make_trip(route_points=points, distance_km=1000, end_lat=25.0, end_lon=51.0)
    assert detector.detect(trip) == []


def test_missing_route_points_skip_detection(detector, make_trip):
    trip = make_trip(route_points=None, distance_km=1000, end_lat=25.0, end_lon=51.0)
    assert detector.detect(trip) == []


@pytest.mark.parametrize("raw", ["not json", {"lat": 1}, 42, [{"foo": "bar"}] * 20])
def test_malformed_route_points_are_treated_as_no_data(detector, make_trip, raw):
    trip = make_trip(route_points=raw, distance_km=1000, end_lat=25.0, end_lon=51.0)
    assert detector.detect(trip) == []


def test_route_points_as_json_string_with_latitude_keys(detector, make_trip):
    points = [
        {"latitude": p["lat"], "longitude": p["lon"]} for p in route_with_stops(5)
    ]
    trip = make_trip(route_points=json.dumps(points))

    anomalies = detector.detect(trip)

    assert [a.type for a in anomalies] == [AnomalyType.IRREGULAR_STOPS]
    assert "5" in anomalies[0].details


def test_inefficient_route_detected(detector, make_trip):
    # Direct distance ~10 km, driven 100 km
    trip = make_trip(route_points=moving_route(), end_lat=25.0, end_lon=51.1, distance_km=100)

    anomalies = detector.detect(trip)

    assert len(anomalies) == 1
    assert anomalies[0].type == AnomalyType.INEFFICIENT_ROUTE
    assert anomalies[0].severity == Severity.MEDIUM
    assert anomalies[0].location is None
    assert "Route efficiency is 10.1%" in anomalies[0].details


def test_zero_distance_never_inefficient(detector, make_trip):
    trip = make_trip(route_points=moving_route(), distance_km=0, end_lat=-30.0, end_lon=10.0)
    assert detector.detect(trip) == []


def test_missing_end_coordinates_default_to_zero(detector, make_trip):
    # End falls back to (0, 0), thousands of km away, so the ratio is large
    trip = make_trip(route_points=moving_route(), end_lat=None, end_lon=None, distance_km=100)
    assert detector.detect(trip) == []


def test_both_anomalies_ordered(detector, make_trip):
    trip = make_trip(route_points=route_with_stops(6), end_lat=25.0, end_lon=51.05)

    anomalies = detector.detect(trip)

    assert [a.type for a in anomalies] == [
        AnomalyType.IRREGULAR_STOPS,
        AnomalyType.INEFFICIENT_ROUTE,
    ]


class TestCountPotentialStops:
    def test_long_run_counts_once(self, detector):
        points = _points([(0, 0)] + [(1, 1)] * 30 + [(2, 2)])
        assert detector.count_potential_stops(points) == 1

    def test_run_of_exactly_five_does_not_count(self, detector):
        # Six identical samples -> five stationary transitions
        points = _points([(1, 1)] * 6 + [(2, 2)])
        assert detector.count_potential_stops(points) == 0

    def test_run_of_six_counts(self, detector):
        points = _points([(1, 1)] * 7 + [(2, 2)])
        assert detector.count_potential_stops(points) == 1

    def test_trailing_run_not_counted(self, detector):
        points = _points([(0, 0)] + [(1, 1)] * 20)
        assert detector.count_potential_stops(points) == 0

    def test_sub_threshold_jitter_is_stationary(self, detector):
        points = _points([(1 + i * 0.00005, 1) for i in range(8)] + [(2, 2)])
        assert detector.count_potential_stops(points) == 1


def test_parse_route_points_rejects_none():
    with pytest.raises(RouteDataError):
        parse_route_points(None)


def test_parse_route_points_accepts_lat_lon_aliases():
    points = parse_route_points([{"latitude": 1.5, "longitude": 2.5}, {"lat": 3, "lon": 4}])
    assert [(p.lat, p.lon) for p in points] == [(1.5, 2.5), (3, 4)]


def test_deeply_nested_json_is_treated_as_no_data(detector, make_trip):
    nested = "[" * 100000 + "]" * 100000
    trip = make_trip(route_points=nested, distance_km=1000, end_lat=25.0, end_lon=51.0)

    assert detector.detect(trip) == []
    with pytest.raises(RouteDataError):
        parse_route_points(nested)


def test_bad_route_on_one_trip_keeps_the_drivers_other_trips(make_trip):
    good = make_trip(route_points=route_with_stops(4))
    bad = make_trip(route_points="[" * 100000 + "]" * 100000)

    result = AnalyticsEngine().analyze_driver(DriverInfo(id="driver-1"), [good, bad])

    assert result.total_trips == 2
    assert result.total_distance == 200
    assert result.irregular_stops == 1
    assert [a.trip_id for a in result.anomalies] == [good.id]


def test_unparseable_timestamps_do_not_hide_stops(detector, make_trip):
    points = [
        {**p, "timestamp": "Mon Mar 10 2025 08:00:00 GMT+0000"} for p in route_with_stops(4)
    ]
    trip = make_trip(route_points=points)

    anomalies = detector.detect(trip)

    assert [a.type for a in anomalies] == [AnomalyType.IRREGULAR_STOPS]
    assert "4" in anomalies[0].details


def test_timestamps_of_any_shape_are_accepted():
    points = parse_route_points([
        {"lat": 1, "lon": 2, "timestamp": 1741593600000},
        {"lat": 1, "lon": 2, "timestamp": "yesterday"},
        {"lat": 1, "lon": 2},
    ])
    assert [p.timestamp for p in points] == [1741593600000, "yesterday", None]


def test_skipped_route_is_logged_with_context(detector, make_trip, caplog):
    trip = make_trip(id="trip-bad", route_points="not json")

    with caplog.at_level("WARNING", logger="analytics.route_anomaly"):
        detector.detect(trip)

    [record] = [r for r in caplog.records if r.name == "analytics.route_anomaly"]
    assert record.context == {"trip_id": "trip-bad", "driver_id": "driver-1"}
