"""
Analytics Engine - Main orchestrator for fleet and budget analytics.

Coordinates the pure components:
- Route anomaly detection and driver scoring per driver
- Budget forecast densification and category split
- Waste chart aggregation

Everything here works on data already fetched; I/O lives in services/.
"""

from datetime import date
from typing import Iterable, Optional

from api.analytics_models import (
    Anomaly,
    AnomalyType,
    BudgetPrediction,
    CategoryForecast,
    DriverInfo,
    ForecastPoint,
    MonthlyConsumption,
    RouteAnalysisResult,
    TripRecord,
    TripStatistics,
    ViewMode,
    WasteChartView,
    WasteDisposal,
)
from .budget_forecast import BudgetForecastTransformer
from .category_forecast import CategoryForecastSplitter
from .driver_scorer import DriverScorer
from .route_anomaly import RouteAnomalyDetector
from .waste import WasteCategoryAggregator


class AnalyticsEngine:
    """Main analytics engine that orchestrates all components."""

    # Constant burn-rate model used for fuel estimates
    FUEL_LITERS_PER_100KM = 10

    def __init__(self):
        self.route_detector = RouteAnomalyDetector()
        self.scorer = DriverScorer()
        self.forecast_transformer = BudgetForecastTransformer()
        self.category_splitter = CategoryForecastSplitter()
        self.waste_aggregator = WasteCategoryAggregator()

    def analyze_driver(
        self, driver: DriverInfo, trips: Iterable[TripRecord]
    ) -> RouteAnalysisResult:
        """
        Analyze all completed trips of one driver.

        In-progress trips (no end_time) are ignored. A driver without
        completed trips gets zeroed totals and a single no-data recommendation.
        """
        completed = [t for t in trips if t.is_completed]

        total_distance = 0.0
        total_hours = 0.0
        total_fuel = 0.0
        irregular_stops = 0
        inefficient_routes = 0
        anomalies: list[Anomaly] = []

        for trip in completed:
            total_distance += trip.distance_km
            total_hours += trip.duration_hours
            total_fuel += self.estimate_fuel(trip.distance_km)

            trip_anomalies = self.route_detector.detect(trip)
            irregular_stops += sum(
                1 for a in trip_anomalies if a.type == AnomalyType.IRREGULAR_STOPS
            )
            inefficient_routes += sum(
                1 for a in trip_anomalies if a.type == AnomalyType.INEFFICIENT_ROUTE
            )
            anomalies.extend(trip_anomalies)

        stats = TripStatistics(
            trips_count=len(completed),
            total_distance_km=total_distance,
            total_hours=total_hours,
            average_speed_kmh=total_distance / total_hours if total_hours > 0 else 0.0,
            irregular_stops=irregular_stops,
            inefficient_routes=inefficient_routes,
            fuel_estimate_l=total_fuel,
        )
        performance, recommendations = self.scorer.evaluate(stats, anomalies)

        return RouteAnalysisResult(
            driver_id=driver.id,
            driver_email=driver.email,
            total_trips=stats.trips_count,
            total_distance=stats.total_distance_km,
            total_hours=stats.total_hours,
            average_speed=stats.average_speed_kmh,
            irregular_stops=stats.irregular_stops,
            inefficient_routes=stats.inefficient_routes,
            fuel_consumption_estimate=stats.fuel_estimate_l,
            cost_saving_opportunities=self.scorer.cost_saving_opportunities(stats),
            driver_performance=performance,
            recommendations=recommendations,
            anomalies=anomalies,
        )

    def estimate_fuel(self, distance_km: float) -> float:
        return distance_km / 100 * self.FUEL_LITERS_PER_100KM

    def forecast_points(
        self,
        predictions: list[BudgetPrediction],
        historical: list[MonthlyConsumption],
        reference_date: Optional[date] = None,
    ) -> list[ForecastPoint]:
        return self.forecast_transformer.transform(predictions, historical, reference_date)

    def build_forecast(
        self,
        predictions: list[BudgetPrediction],
        historical: list[MonthlyConsumption],
        reference_date: Optional[date] = None,
    ) -> list[CategoryForecast]:
        """Six monthly category forecasts, or an empty list if either input is empty."""
        points = self.forecast_points(predictions, historical, reference_date)
        return self.split_forecast(points, historical)

    def split_forecast(
        self,
        points: list[ForecastPoint],
        historical: list[MonthlyConsumption],
    ) -> list[CategoryForecast]:
        return self.category_splitter.split(points, historical)

    def build_waste_view(
        self,
        view_mode: ViewMode,
        disposals: list[WasteDisposal],
        forecast_months: int = 3,
        reference_date: Optional[date] = None,
    ) -> WasteChartView:
        return self.waste_aggregator.build_view(
            view_mode, disposals, forecast_months, reference_date
        )
