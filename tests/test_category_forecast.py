"""
Tests for CategoryForecastSplitter.
"""

import pytest

from analytics.category_forecast import CategoryForecastSplitter, HistoricalProportions
from api.analytics_models import (
    CategoryPredictions,
    ForecastPoint,
    MonthlyConsumption,
    PredictionBand,
)


@pytest.fixture
def splitter():
    return CategoryForecastSplitter()


def _band(amount: float) -> PredictionBand:
    return PredictionBand(predicted_amount=amount, upper_bound=amount, lower_bound=amount, confidence=0.7)


def _point(amount: float, categories: CategoryPredictions = None, month: str = "April") -> ForecastPoint:
    return ForecastPoint(
        month=month,
        year=2025,
        predicted_amount=amount,
        upper_bound=amount * 1.1,
        lower_bound=amount * 0.9,
        confidence=0.8,
        category_predictions=categories,
    )


def test_model_categories_split_food_bucket(splitter, historical_months):
    point = _point(400, CategoryPredictions(food=_band(200), vehicle_rental=_band(120)))

    [forecast] = splitter.split([point], historical_months)

    assert forecast.food_consumption == pytest.approx(140)
    assert forecast.assets_purchased == pytest.approx(60)
    assert forecast.vehicle_rental_costs == 120
    assert forecast.total == 400
    assert forecast.confidence == 0.8
    assert (forecast.month, forecast.year) == ("April", 2025)


def test_history_fallback_carries_vehicle_cost_forward(splitter, historical_months):
    [forecast] = splitter.split([_point(330)], historical_months)

    assert forecast.vehicle_rental_costs == 150
    # remaining 180 split 100:50
    assert forecast.food_consumption == pytest.approx(120)
    assert forecast.assets_purchased == pytest.approx(60)
    assert forecast.total == 330


def test_fallback_uses_last_month_vehicle_cost(splitter, historical_months):
    history = historical_months + [
        MonthlyConsumption(
            month="February", year=2025,
            food_consumption=100, assets_purchased=50, vehicle_rental_costs=200, total=350,
        )
    ]

    [forecast] = splitter.split([_point(500)], history)

    assert forecast.vehicle_rental_costs == 200


def test_fallback_categories_sum_to_total(splitter, historical_months):
    forecasts = splitter.split([_point(330), _point(1000), _point(75)], historical_months)

    for forecast in forecasts:
        parts = forecast.food_consumption + forecast.assets_purchased + forecast.vehicle_rental_costs
        assert parts == pytest.approx(forecast.total)


def test_fallback_can_go_negative_below_vehicle_cost(splitter, historical_months):
    [forecast] = splitter.split([_point(100)], historical_months)

    assert forecast.food_consumption < 0
    assert forecast.assets_purchased < 0


def test_mixed_points_keep_order(splitter, historical_months):
    points = [
        _point(330, month="April"),
        _point(400, CategoryPredictions(food=_band(100), vehicle_rental=_band(50)), month="May"),
    ]

    forecasts = splitter.split(points, historical_months)

    assert [f.month for f in forecasts] == ["April", "May"]
    assert forecasts[0].vehicle_rental_costs == 150
    assert forecasts[1].vehicle_rental_costs == 50


def test_empty_inputs_give_empty_output(splitter, historical_months):
    assert splitter.split([], historical_months) == []
    assert splitter.split([_point(100)], []) == []


def test_zero_history_uses_default_proportions():
    history = [MonthlyConsumption(month="January", year=2025)]

    proportions = HistoricalProportions.from_history(history)

    assert proportions == HistoricalProportions(food=0.33, assets=0.33, vehicle=0.34)


def test_zero_history_splits_remaining_evenly(splitter):
    history = [MonthlyConsumption(month="January", year=2025)]

    [forecast] = splitter.split([_point(200)], history)

    assert forecast.vehicle_rental_costs == 0
    assert forecast.food_consumption == pytest.approx(100)
    assert forecast.assets_purchased == pytest.approx(100)


def test_only_vehicle_history_splits_remaining_evenly(splitter):
    history = [MonthlyConsumption(month="January", year=2025, vehicle_rental_costs=80, total=80)]

    [forecast] = splitter.split([_point(180)], history)

    assert forecast.vehicle_rental_costs == 80
    assert forecast.food_consumption == pytest.approx(50)
    assert forecast.assets_purchased == pytest.approx(50)


def test_historical_proportions(historical_months):
    proportions = HistoricalProportions.from_history(historical_months)

    assert proportions.food == pytest.approx(1 / 3)
    assert proportions.assets == pytest.approx(1 / 6)
    assert proportions.vehicle == pytest.approx(1 / 2)
