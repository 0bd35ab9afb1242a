"""
BudgetForecaster: construye el forecast mensual por categoría.

Obtiene las predicciones y los totales históricos desde el contexto de la
petición y delega el cálculo al AnalyticsEngine.
"""

from datetime import date
from typing import List, Optional

from analytics import AnalyticsEngine
from api.analytics_models import CategoryForecast, ForecastResponse
from core.context import AnalysisContext
from core.structured_logging import get_logger

logger = get_logger(__name__)


class BudgetForecaster:
    """Orquestador del forecast de presupuesto."""

    def __init__(self, context: AnalysisContext, engine: Optional[AnalyticsEngine] = None):
        self.context = context
        self.engine = engine or AnalyticsEngine()

    async def build(self, reference_date: Optional[date] = None) -> ForecastResponse:
        """
        Forecast mensual total y su desglose por categoría.

        Los puntos se densifican una sola vez y el desglose se calcula sobre
        esos mismos puntos. Ambas listas quedan vacías si falta algún input.
        """
        predictions = await self.context.budget_predictions()
        historical = await self.context.monthly_consumption()

        if not predictions or not historical:
            logger.info("Forecast skipped: missing input", context={
                "predictions": len(predictions),
                "historical_months": len(historical),
            })
            return ForecastResponse()

        points = self.engine.forecast_points(predictions, historical, reference_date)
        forecasts = self.engine.split_forecast(points, historical)

        logger.info("Budget forecast built", context={
            "horizons": sorted({p.months for p in predictions}),
            "historical_months": len(historical),
            "forecast_months": len(forecasts),
        })
        return ForecastResponse(forecast_points=points, category_forecasts=forecasts)

    async def build_forecast(self, reference_date: Optional[date] = None) -> List[CategoryForecast]:
        result = await self.build(reference_date)
        return result.category_forecasts
