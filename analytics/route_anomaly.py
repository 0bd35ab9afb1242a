"""
Route Anomaly Detector for completed trips.

Looks at the GPS samples of one trip and flags:
- Irregular stops (too many stationary runs along the route)
- Inefficient routes (driven distance much longer than the direct distance)

Stop detection is a plain run-length count over consecutive samples, not a
spatial clustering. It is kept that way so results stay comparable with the
scores already stored by the dashboard.
"""

import json
import math
from typing import Any, List

from pydantic import TypeAdapter, ValidationError

from api.analytics_models import (
    Anomaly,
    AnomalyLocation,
    AnomalyType,
    RoutePoint,
    Severity,
    TripRecord,
)
from core.structured_logging import get_logger
from .geo import haversine_km

logger = get_logger(__name__)

_route_adapter = TypeAdapter(List[RoutePoint])


class RouteDataError(ValueError):
    """Raised when a trip's route points cannot be parsed."""


def parse_route_points(raw: Any) -> List[RoutePoint]:
    """
    Parse raw route data (list of dicts or a JSON string) into RoutePoints.

    Raises:
        RouteDataError: If the data is absent or not a list of lat/lon samples.
    """
    if raw is None:
        raise RouteDataError("route points are missing")

    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except (ValueError, RecursionError) as e:
            raise RouteDataError(f"route points are not valid JSON: {type(e).__name__}") from e

    if not isinstance(raw, list):
        raise RouteDataError(f"route points must be a list, got {type(raw).__name__}")

    try:
        return _route_adapter.validate_python(raw)
    except ValidationError as e:
        raise RouteDataError(f"route points are malformed: {e.error_count()} errors") from e


class RouteAnomalyDetector:
    """Detects stop clusters and route inefficiency for a single trip."""

    # Samples required before a route is analyzed at all
    MIN_ROUTE_POINTS = 10
    # Coordinate delta (degrees) under which two samples are "the same place" (~11 m)
    STATIONARY_DELTA_DEG = 0.0001
    # Consecutive stationary samples that make a stop
    STOP_MIN_RUN = 5
    # Stops per trip above which the trip is flagged
    MAX_STOPS_PER_TRIP = 3
    # Direct / driven distance under which a route is flagged
    MIN_EFFICIENCY_RATIO = 0.7

    def detect(self, trip: TripRecord) -> list[Anomaly]:
        """Return the anomalies found in ``trip``, never raising on bad route data."""
        try:
            points = parse_route_points(trip.route_points)
        except RouteDataError as e:
            if trip.route_points is not None:
                logger.warning(
                    f"Skipping route analysis for trip {trip.id}: {e}",
                    context={"trip_id": trip.id, "driver_id": trip.driver_id},
                )
            return []

        if len(points) <= self.MIN_ROUTE_POINTS:
            return []

        anomalies: list[Anomaly] = []

        # 1. Irregular stops
        potential_stops = self.count_potential_stops(points)
        if potential_stops > self.MAX_STOPS_PER_TRIP:
            anomalies.append(
                Anomaly(
                    trip_id=trip.id,
                    type=AnomalyType.IRREGULAR_STOPS,
                    severity=Severity.MEDIUM,
                    details=f"Trip has {potential_stops} potential unscheduled stops",
                    timestamp=trip.start_time,
                    location=AnomalyLocation(
                        latitude=trip.start_lat,
                        longitude=trip.start_lon,
                    ),
                )
            )

        # 2. Route efficiency
        efficiency_ratio = self.efficiency_ratio(trip)
        if efficiency_ratio < self.MIN_EFFICIENCY_RATIO:
            anomalies.append(
                Anomaly(
                    trip_id=trip.id,
                    type=AnomalyType.INEFFICIENT_ROUTE,
                    severity=Severity.MEDIUM,
                    details=(
                        f"Route efficiency is {efficiency_ratio * 100:.1f}%. "
                        "Consider more direct routes."
                    ),
                    timestamp=trip.start_time,
                )
            )

        return anomalies

    def count_potential_stops(self, points: list[RoutePoint]) -> int:
        """
        Count stationary runs longer than STOP_MIN_RUN that end in movement.

        A run still open at the last sample is not counted, and a long run
        counts once.
        """
        potential_stops = 0
        stationary_points = 0
        last_point = None

        for point in points:
            if (
                last_point is not None
                and abs(point.lat - last_point.lat) < self.STATIONARY_DELTA_DEG
                and abs(point.lon - last_point.lon) < self.STATIONARY_DELTA_DEG
            ):
                stationary_points += 1
            elif stationary_points > self.STOP_MIN_RUN:
                potential_stops += 1
                stationary_points = 0
            else:
                stationary_points = 0

            last_point = point

        return potential_stops

    def efficiency_ratio(self, trip: TripRecord) -> float:
        """Direct distance over driven distance; 1.0 when it can't be computed."""
        if trip.distance_km == 0:
            return 1.0

        direct_distance = haversine_km(
            trip.start_lat,
            trip.start_lon,
            trip.end_lat or 0,
            trip.end_lon or 0,
        )
        if not math.isfinite(direct_distance):
            return 1.0

        return direct_distance / trip.distance_km
