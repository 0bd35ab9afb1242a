"""
Waste Category Aggregator.

Builds the per-category waste cost series used by the waste chart:
- Buckets disposal records into categories by reason keywords
- Aggregates them per month or per day
- Forecasts the next months from the recent monthly average
- Aligns historical and forecast series on a shared set of labels
"""

from datetime import date
from typing import Iterable, Optional

from api.analytics_models import (
    ViewMode,
    WasteCategory,
    WasteChartView,
    WasteCostPoint,
    WasteDisposal,
)
from .budget_forecast import add_months

WasteSeries = dict[WasteCategory, list[WasteCostPoint]]

# Reason substrings (lower case) that place a disposal in each category
CATEGORY_KEYWORDS: dict[WasteCategory, tuple[str, ...]] = {
    WasteCategory.INGREDIENT: ("ingredient_waste", "waste_percentage", "ingredient_loss"),
    WasteCategory.SERVING: ("serving_waste", "overproduction", "leftover"),
    WasteCategory.EXPIRATION: ("expired", "expiration", "expiry"),
}


def month_key(value: date) -> str:
    return f"{value.year}-{value.month:02d}"


def day_key(value: date) -> str:
    return f"{value.year}-{value.month:02d}-{value.day:02d}"


def categorize_reason(reason: Optional[str]) -> list[WasteCategory]:
    """Categories whose keywords appear in ``reason``; may be more than one."""
    if not reason:
        return []
    lowered = reason.lower()
    return [
        category
        for category, keywords in CATEGORY_KEYWORDS.items()
        if any(keyword in lowered for keyword in keywords)
    ]


class WasteCategoryAggregator:
    """Aggregates and aligns waste cost series per category."""

    # Months averaged to forecast the next ones
    FORECAST_WINDOW = 3

    def bucket_disposals(
        self, disposals: Iterable[WasteDisposal], view_mode: ViewMode
    ) -> WasteSeries:
        """Sum cost and quantity per category and month (or day), sorted by key."""
        key_fn = month_key if view_mode == ViewMode.MONTHLY else day_key
        buckets: dict[WasteCategory, dict[str, WasteCostPoint]] = {
            category: {} for category in WasteCategory
        }

        for disposal in disposals:
            key = key_fn(disposal.created_at)
            for category in categorize_reason(disposal.reason):
                point = buckets[category].get(key)
                if point is None:
                    point = buckets[category][key] = WasteCostPoint(key=key)
                point.cost += disposal.cost
                point.quantity += disposal.quantity

        return {
            category: sorted(points.values(), key=lambda p: p.key)
            for category, points in buckets.items()
        }

    def forecast_next_months(
        self,
        monthly: list[WasteCostPoint],
        months: int = 3,
        reference_date: Optional[date] = None,
        after: Optional[str] = None,
    ) -> list[WasteCostPoint]:
        """
        Flat forecast: the average cost of the last FORECAST_WINDOW months.

        Forecast months follow ``after`` (a YYYY-MM key) when given, otherwise
        the last observed month, or the reference month when there is no
        history (in which case the forecast is zero).
        """
        window = monthly[-self.FORECAST_WINDOW:]
        average = sum(p.cost for p in window) / len(window) if window else 0.0

        anchor = after or (monthly[-1].key if monthly else None)
        if anchor:
            year, month = (int(part) for part in anchor.split("-")[:2])
            start = date(year, month, 1)
        else:
            start = reference_date or date.today()

        forecast: list[WasteCostPoint] = []
        for i in range(1, months + 1):
            year, month = add_months(start, i)
            forecast.append(
                WasteCostPoint(key=f"{year}-{month:02d}", cost=round(average, 2))
            )
        return forecast

    def monthly_view(self, historical: WasteSeries, forecast: WasteSeries) -> WasteChartView:
        """
        Align monthly history and forecast on the union of their months.

        A forecast month contributes only to the forecast series and any other
        month only to the historical one, so nothing is counted twice.
        """
        labels: set[str] = set()
        forecast_months: set[str] = set()
        for category in WasteCategory:
            labels.update(p.key for p in historical.get(category, []))
            forecast_keys = [p.key for p in forecast.get(category, [])]
            labels.update(forecast_keys)
            forecast_months.update(forecast_keys)

        ordered = sorted(labels)
        hist_series: dict[WasteCategory, list[float]] = {}
        forecast_series: dict[WasteCategory, list[float]] = {}

        for category in WasteCategory:
            hist_costs = self._first_cost_by_key(historical.get(category, []))
            forecast_costs = self._first_cost_by_key(forecast.get(category, []))
            hist_series[category] = [
                0.0 if m in forecast_months else hist_costs.get(m, 0.0) for m in ordered
            ]
            forecast_series[category] = [
                forecast_costs.get(m, 0.0) if m in forecast_months else 0.0 for m in ordered
            ]

        return WasteChartView(
            view_mode=ViewMode.MONTHLY,
            labels=ordered,
            historical=hist_series,
            forecast=forecast_series,
            forecast_months=[m for m in ordered if m in forecast_months],
        )

    def daily_view(self, historical: WasteSeries) -> WasteChartView:
        """Align daily history on the union of its days; daily has no forecast."""
        days = sorted({p.key for points in historical.values() for p in points})

        series: dict[WasteCategory, list[float]] = {}
        for category in WasteCategory:
            costs = self._first_cost_by_key(historical.get(category, []))
            series[category] = [costs.get(d, 0.0) for d in days]

        return WasteChartView(view_mode=ViewMode.DAILY, labels=days, historical=series)

    def build_view(
        self,
        view_mode: ViewMode,
        disposals: list[WasteDisposal],
        forecast_months: int = 3,
        reference_date: Optional[date] = None,
    ) -> WasteChartView:
        """Bucket raw disposals and build the view for ``view_mode``."""
        historical = self.bucket_disposals(disposals, view_mode)
        if view_mode == ViewMode.DAILY:
            return self.daily_view(historical)

        # All categories forecast the same months, after the latest observed one
        last_keys = [points[-1].key for points in historical.values() if points]
        after = max(last_keys) if last_keys else None
        forecast = {
            category: self.forecast_next_months(
                points, forecast_months, reference_date, after=after
            )
            for category, points in historical.items()
        }
        return self.monthly_view(historical, forecast)

    @staticmethod
    def _first_cost_by_key(points: list[WasteCostPoint]) -> dict[str, float]:
        costs: dict[str, float] = {}
        for point in points:
            costs.setdefault(point.key, point.cost)
        return costs
