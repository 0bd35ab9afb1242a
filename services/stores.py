"""
Implementaciones en memoria de los colaboradores del análisis.

Se usan cuando el llamador envía los datos por valor (por ejemplo en el body
de la petición HTTP) y en los tests.
"""

from typing import Any, Dict, Iterable, List, Optional

from api.analytics_models import (
    BudgetPrediction,
    DriverInfo,
    MonthlyConsumption,
    TripRecord,
)
from core.structured_logging import get_logger

logger = get_logger(__name__)


class InMemoryTripStore:
    """TripStore sobre listas ya cargadas."""

    def __init__(self, drivers: Iterable[DriverInfo] = (), trips: Iterable[TripRecord] = ()):
        self._drivers: Dict[str, DriverInfo] = {d.id: d for d in drivers}
        self._trips: List[TripRecord] = list(trips)

        # Drivers that only appear through their trips
        for trip in self._trips:
            self._drivers.setdefault(trip.driver_id, DriverInfo(id=trip.driver_id))

    async def get_driver(self, driver_id: str) -> Optional[DriverInfo]:
        return self._drivers.get(driver_id)

    async def list_drivers_with_trips(self) -> List[DriverInfo]:
        with_trips = {t.driver_id for t in self._trips if t.is_completed}
        return [d for d_id, d in self._drivers.items() if d_id in with_trips]

    async def get_completed_trips(self, driver_id: str) -> List[TripRecord]:
        trips = [t for t in self._trips if t.driver_id == driver_id and t.is_completed]
        # Most recent first
        return sorted(trips, key=lambda t: t.start_time, reverse=True)


class InMemoryPredictionStore:
    def __init__(self, predictions: Iterable[BudgetPrediction] = ()):
        self._predictions = list(predictions)

    async def get_budget_predictions(self) -> List[BudgetPrediction]:
        return list(self._predictions)


class InMemoryHistoricalStore:
    def __init__(self, monthly: Iterable[MonthlyConsumption] = ()):
        self._monthly = list(monthly)

    async def get_monthly_consumption(self) -> List[MonthlyConsumption]:
        return list(self._monthly)


class LoggingAuditSink:
    """AuditSink que escribe los registros en el log estructurado."""

    async def record(self, action: str, actor_id: Optional[str], details: Dict[str, Any]) -> None:
        logger.info(f"Audit: {action}", context={
            "action": action,
            "actor_id": actor_id,
            **details,
        })
