"""
Driver Scorer for route analysis.

Turns a driver's accumulated trip statistics into integer scores (0-100):
- Safety: average speed and irregular stops per trip
- Efficiency: fuel per 100 km and inefficient routes per trip
- Consistency: anomalies per trip and high-severity anomalies
- Overall: weighted blend of the three

Every score starts at 100 and loses points in tiers. It also produces the
textual recommendations shown next to the scores.
"""

from typing import Optional

from api.analytics_models import (
    Anomaly,
    DriverPerformance,
    Recommendation,
    RecommendationType,
    Severity,
    TripStatistics,
)
from config import FleetConfig


def _deduction(value: float, tiers: tuple[tuple[float, int], ...]) -> int:
    """Points lost by the first tier whose threshold ``value`` exceeds."""
    for threshold, penalty in tiers:
        if value > threshold:
            return penalty
    return 0


def _clamp_score(score: float) -> int:
    return max(0, min(100, round(score)))


class DriverScorer:
    """Scores drivers and builds recommendations from trip statistics."""

    # (threshold, penalty) tiers, most severe first
    SPEED_TIERS = ((90, 30), (80, 20), (70, 10))
    STOPS_PER_TRIP_TIERS = ((2, 30), (1, 15), (0.5, 5))
    FUEL_PER_100KM_TIERS = ((15, 30), (12, 20), (10, 10))
    INEFFICIENT_PER_TRIP_TIERS = ((0.5, 30), (0.3, 15), (0.1, 5))
    ANOMALIES_PER_TRIP_TIERS = ((0.5, 30), (0.3, 15), (0.1, 5))
    HIGH_SEVERITY_TIERS = ((3, 20), (1, 10), (0, 5))

    # Overall weighting: safety / efficiency / consistency
    WEIGHTS = {
        "safety": 0.4,
        "efficiency": 0.4,
        "consistency": 0.2,
    }

    # Estimated savings per incident (in FleetConfig.CURRENCY)
    INEFFICIENT_ROUTE_COST = 50
    IRREGULAR_STOP_COST = 30

    HIGH_SPEED_KMH = 80
    LOW_SPEED_KMH = 20

    def __init__(self, currency: Optional[str] = None):
        self.currency = currency or FleetConfig.CURRENCY

    def evaluate(
        self, stats: TripStatistics, anomalies: list[Anomaly]
    ) -> tuple[DriverPerformance, list[Recommendation]]:
        """Scores and recommendations in one call."""
        return self.score(stats, anomalies), self.recommend(stats)

    def score(self, stats: TripStatistics, anomalies: list[Anomaly]) -> DriverPerformance:
        """Calculate the four performance scores."""
        if stats.trips_count == 0:
            return DriverPerformance()

        safety = self.safety_score(stats)
        efficiency = self.efficiency_score(stats)
        consistency = self.consistency_score(stats, anomalies)
        overall = round(
            safety * self.WEIGHTS["safety"]
            + efficiency * self.WEIGHTS["efficiency"]
            + consistency * self.WEIGHTS["consistency"]
        )

        return DriverPerformance(
            safety_score=safety,
            efficiency_score=efficiency,
            consistency_score=consistency,
            overall_score=_clamp_score(overall),
        )

    def safety_score(self, stats: TripStatistics) -> int:
        score = 100
        score -= _deduction(stats.average_speed_kmh, self.SPEED_TIERS)

        if stats.trips_count > 0:
            stops_per_trip = stats.irregular_stops / stats.trips_count
            score -= _deduction(stops_per_trip, self.STOPS_PER_TRIP_TIERS)

        return _clamp_score(score)

    def efficiency_score(self, stats: TripStatistics) -> int:
        score = 100

        if stats.total_distance_km > 0:
            fuel_per_100km = (stats.fuel_estimate_l / stats.total_distance_km) * 100
            score -= _deduction(fuel_per_100km, self.FUEL_PER_100KM_TIERS)

        if stats.trips_count > 0:
            inefficient_per_trip = stats.inefficient_routes / stats.trips_count
            score -= _deduction(inefficient_per_trip, self.INEFFICIENT_PER_TRIP_TIERS)

        return _clamp_score(score)

    def consistency_score(self, stats: TripStatistics, anomalies: list[Anomaly]) -> int:
        score = 100

        if stats.trips_count > 0:
            anomalies_per_trip = len(anomalies) / stats.trips_count
            score -= _deduction(anomalies_per_trip, self.ANOMALIES_PER_TRIP_TIERS)

        high_severity = sum(1 for a in anomalies if a.severity == Severity.HIGH)
        score -= _deduction(high_severity, self.HIGH_SEVERITY_TIERS)

        return _clamp_score(score)

    def cost_saving_opportunities(self, stats: TripStatistics) -> float:
        """Flat per-incident estimate of what better routing would save."""
        return (
            stats.inefficient_routes * self.INEFFICIENT_ROUTE_COST
            + stats.irregular_stops * self.IRREGULAR_STOP_COST
        )

    def recommend(self, stats: TripStatistics) -> list[Recommendation]:
        """Generate recommendations from the driver's statistics."""
        if stats.trips_count == 0:
            return [
                Recommendation(
                    type=RecommendationType.NO_DATA,
                    severity=Severity.INFO,
                    message="No trip data available for analysis.",
                )
            ]

        recommendations: list[Recommendation] = []

        if stats.inefficient_routes > 0:
            savings = stats.inefficient_routes * self.INEFFICIENT_ROUTE_COST
            recommendations.append(
                Recommendation(
                    type=RecommendationType.ROUTE_OPTIMIZATION,
                    severity=Severity.HIGH if stats.inefficient_routes > 3 else Severity.MEDIUM,
                    message=(
                        f"{stats.inefficient_routes} trips show inefficient routes. "
                        f"Optimizing these routes could save approximately "
                        f"{savings:.2f} {self.currency} in fuel costs."
                    ),
                )
            )

        if stats.irregular_stops > 0:
            savings = stats.irregular_stops * self.IRREGULAR_STOP_COST
            recommendations.append(
                Recommendation(
                    type=RecommendationType.STOP_REDUCTION,
                    severity=Severity.HIGH if stats.irregular_stops > 3 else Severity.MEDIUM,
                    message=(
                        f"{stats.irregular_stops} trips have irregular or unscheduled stops. "
                        f"Reducing these could improve efficiency and save approximately "
                        f"{savings:.2f} {self.currency}."
                    ),
                )
            )

        speed = stats.average_speed_kmh
        if speed > self.HIGH_SPEED_KMH:
            recommendations.append(
                Recommendation(
                    type=RecommendationType.SPEED_MANAGEMENT,
                    severity=Severity.HIGH,
                    message=(
                        f"Average speed of {speed:.1f} km/h is high. "
                        "Reducing speed can improve fuel efficiency and safety."
                    ),
                )
            )
        elif speed < self.LOW_SPEED_KMH:
            recommendations.append(
                Recommendation(
                    type=RecommendationType.TRAFFIC_MANAGEMENT,
                    severity=Severity.MEDIUM,
                    message=(
                        f"Average speed of {speed:.1f} km/h is low. "
                        "Consider route planning to avoid traffic congestion."
                    ),
                )
            )

        if not recommendations:
            recommendations.append(
                Recommendation(
                    type=RecommendationType.GENERAL,
                    severity=Severity.INFO,
                    message="No significant issues detected. Continue monitoring for optimal performance.",
                )
            )

        return recommendations
