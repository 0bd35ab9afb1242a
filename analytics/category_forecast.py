"""
Category Forecast Splitter.

Breaks each monthly total forecast into food, assets and vehicle rental.
When the model supplied category predictions they are used directly;
otherwise the split follows historical spending proportions, with vehicle
rental carried forward from the last observed month.
"""

from dataclasses import dataclass

from api.analytics_models import (
    CategoryForecast,
    ForecastPoint,
    MonthlyConsumption,
)


@dataclass(frozen=True)
class HistoricalProportions:
    """Share of total historical spend per category."""

    food: float
    assets: float
    vehicle: float

    @classmethod
    def from_history(cls, historical: list[MonthlyConsumption]) -> "HistoricalProportions":
        total_food = sum(m.food_consumption for m in historical)
        total_assets = sum(m.assets_purchased for m in historical)
        total_vehicle = sum(m.vehicle_rental_costs for m in historical)
        total_spent = total_food + total_assets + total_vehicle

        if total_spent > 0:
            return cls(
                food=total_food / total_spent,
                assets=total_assets / total_spent,
                vehicle=total_vehicle / total_spent,
            )
        return cls(food=0.33, assets=0.33, vehicle=0.34)


class CategoryForecastSplitter:
    """Allocates total forecasts to spending categories."""

    # Split of the model's "food" bucket between literal food and assets
    FOOD_SHARE_OF_FOOD_BUCKET = 0.7
    ASSETS_SHARE_OF_FOOD_BUCKET = 0.3

    def split(
        self,
        forecasts: list[ForecastPoint],
        historical: list[MonthlyConsumption],
    ) -> list[CategoryForecast]:
        """One CategoryForecast per input point, same order."""
        if not forecasts or not historical:
            return []

        proportions = HistoricalProportions.from_history(historical)
        last_vehicle_cost = historical[-1].vehicle_rental_costs

        return [
            self._from_model(forecast)
            if forecast.category_predictions is not None
            else self._from_history(forecast, proportions, last_vehicle_cost)
            for forecast in forecasts
        ]

    def _from_model(self, forecast: ForecastPoint) -> CategoryForecast:
        food_bucket = forecast.category_predictions.food.predicted_amount
        return CategoryForecast(
            month=forecast.month,
            year=forecast.year,
            food_consumption=food_bucket * self.FOOD_SHARE_OF_FOOD_BUCKET,
            assets_purchased=food_bucket * self.ASSETS_SHARE_OF_FOOD_BUCKET,
            vehicle_rental_costs=forecast.category_predictions.vehicle_rental.predicted_amount,
            total=forecast.predicted_amount,
            confidence=forecast.confidence,
        )

    @staticmethod
    def _from_history(
        forecast: ForecastPoint,
        proportions: HistoricalProportions,
        last_vehicle_cost: float,
    ) -> CategoryForecast:
        # Vehicle rental is a step function: fixed payments until the fleet changes
        vehicle_rental_costs = last_vehicle_cost
        remaining_budget = forecast.predicted_amount - vehicle_rental_costs

        variable_share = proportions.food + proportions.assets
        if variable_share > 0:
            food_ratio = proportions.food / variable_share
        else:
            food_ratio = 0.5

        return CategoryForecast(
            month=forecast.month,
            year=forecast.year,
            food_consumption=remaining_budget * food_ratio,
            assets_purchased=remaining_budget * (1 - food_ratio),
            vehicle_rental_costs=vehicle_rental_costs,
            total=forecast.predicted_amount,
            confidence=forecast.confidence,
        )
