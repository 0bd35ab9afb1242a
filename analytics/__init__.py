"""
Analytics Engine for fleet routes and budgets.

This module provides the pure analytics components:
- Geodesic distance
- Route anomaly detection
- Driver performance scoring
- Budget forecast densification and category split
- Waste cost aggregation
"""

from .geo import haversine_km
from .route_anomaly import RouteAnomalyDetector, RouteDataError
from .driver_scorer import DriverScorer
from .budget_forecast import BudgetForecastTransformer
from .category_forecast import CategoryForecastSplitter
from .waste import WasteCategoryAggregator
from .engine import AnalyticsEngine

__all__ = [
    "haversine_km",
    "RouteAnomalyDetector",
    "RouteDataError",
    "DriverScorer",
    "BudgetForecastTransformer",
    "CategoryForecastSplitter",
    "WasteCategoryAggregator",
    "AnalyticsEngine",
]
