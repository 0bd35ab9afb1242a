"""
Budget Forecast Transformer.

The budget model only predicts a handful of horizons (1, 3 and 6 months).
This module densifies them into one point per month for the next six months:
each month borrows the prediction anchored closest to it and decays it
linearly with the distance between the two.
"""

import calendar
from datetime import date
from typing import Optional

from api.analytics_models import (
    BudgetPrediction,
    CategoryPredictions,
    ForecastPoint,
    MonthlyConsumption,
    PredictionBand,
)


def add_months(reference: date, months: int) -> tuple[int, int]:
    """(year, month) of the month ``months`` after ``reference``'s month."""
    index = reference.year * 12 + (reference.month - 1) + months
    year, month_zero = divmod(index, 12)
    return year, month_zero + 1


class BudgetForecastTransformer:
    """Expands sparse multi-horizon predictions into a monthly series."""

    HORIZON_MONTHS = 6
    # Decay per month of distance between a prediction's horizon and the target month
    DECAY_PER_MONTH = 0.05

    def transform(
        self,
        predictions: list[BudgetPrediction],
        historical: list[MonthlyConsumption],
        reference_date: Optional[date] = None,
    ) -> list[ForecastPoint]:
        """
        Build one ForecastPoint per month for the next HORIZON_MONTHS months.

        Returns an empty list when either input is empty. The adjustment
        factor is not clamped, so far-away anchors can push it below zero.
        """
        if not predictions or not historical:
            return []

        reference = reference_date or date.today()
        forecasts: list[ForecastPoint] = []

        for i in range(1, self.HORIZON_MONTHS + 1):
            year, month = add_months(reference, i)
            closest = self.closest_prediction(predictions, i)
            factor = self.adjustment_factor(closest.months, i)

            forecasts.append(
                ForecastPoint(
                    month=calendar.month_name[month],
                    year=year,
                    predicted_amount=closest.prediction.predicted_amount * factor,
                    upper_bound=closest.prediction.upper_bound * factor,
                    lower_bound=closest.prediction.lower_bound * factor,
                    confidence=closest.prediction.confidence,
                    category_predictions=self._scale_categories(
                        closest.category_predictions, factor
                    ),
                )
            )

        return forecasts

    @staticmethod
    def closest_prediction(predictions: list[BudgetPrediction], month_index: int) -> BudgetPrediction:
        """Prediction whose horizon is nearest ``month_index``; ties keep the earliest."""
        closest = predictions[0]
        for candidate in predictions[1:]:
            if abs(candidate.months - month_index) < abs(closest.months - month_index):
                closest = candidate
        return closest

    def adjustment_factor(self, horizon: int, month_index: int) -> float:
        return 1 - abs(horizon - month_index) * self.DECAY_PER_MONTH

    @staticmethod
    def _scale_categories(
        categories: Optional[CategoryPredictions], factor: float
    ) -> Optional[CategoryPredictions]:
        if categories is None:
            return None

        # Vehicle rental is a fixed recurring payment, so it is not decayed
        food = categories.food
        return CategoryPredictions(
            food=PredictionBand(
                predicted_amount=food.predicted_amount * factor,
                upper_bound=food.upper_bound * factor,
                lower_bound=food.lower_bound * factor,
                confidence=food.confidence,
            ),
            vehicle_rental=categories.vehicle_rental.model_copy(),
        )
