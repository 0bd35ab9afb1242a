"""
Contexto por petición para los análisis.

Reúne los colaboradores externos (stores de viajes, predicciones e históricos,
y el sink de auditoría) y memoiza sus lecturas durante una sola petición.
No hay caché a nivel de proceso: cada petición crea su propio contexto.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from api.analytics_models import (
    BudgetPrediction,
    DriverInfo,
    MonthlyConsumption,
    TripRecord,
)


# ============================================================================
# PUERTOS (colaboradores externos)
# ============================================================================
class TripStore(Protocol):
    """Fuente de conductores y viajes."""

    async def get_driver(self, driver_id: str) -> Optional[DriverInfo]: ...

    async def list_drivers_with_trips(self) -> List[DriverInfo]: ...

    async def get_completed_trips(self, driver_id: str) -> List[TripRecord]: ...


class PredictionStore(Protocol):
    """Fuente de predicciones de presupuesto multi-horizonte."""

    async def get_budget_predictions(self) -> List[BudgetPrediction]: ...


class HistoricalStore(Protocol):
    """Fuente de totales mensuales históricos por categoría."""

    async def get_monthly_consumption(self) -> List[MonthlyConsumption]: ...


class AuditSink(Protocol):
    """Destino de registros de auditoría."""

    async def record(self, action: str, actor_id: Optional[str], details: Dict[str, Any]) -> None: ...


# ============================================================================
# CONTEXTO
# ============================================================================
@dataclass
class AnalysisContext:
    """Colaboradores y memoización de lecturas para una petición."""

    trip_store: Optional[TripStore] = None
    prediction_store: Optional[PredictionStore] = None
    historical_store: Optional[HistoricalStore] = None
    audit_sink: Optional[AuditSink] = None
    actor_id: Optional[str] = None

    _trips: Dict[str, List[TripRecord]] = field(default_factory=dict, repr=False)
    _predictions: Optional[List[BudgetPrediction]] = field(default=None, repr=False)
    _historical: Optional[List[MonthlyConsumption]] = field(default=None, repr=False)

    async def completed_trips(self, driver_id: str) -> List[TripRecord]:
        if driver_id not in self._trips:
            self._trips[driver_id] = await self._require(self.trip_store, "trip_store").get_completed_trips(driver_id)
        return self._trips[driver_id]

    async def budget_predictions(self) -> List[BudgetPrediction]:
        if self._predictions is None:
            self._predictions = await self._require(self.prediction_store, "prediction_store").get_budget_predictions()
        return self._predictions

    async def monthly_consumption(self) -> List[MonthlyConsumption]:
        if self._historical is None:
            self._historical = await self._require(self.historical_store, "historical_store").get_monthly_consumption()
        return self._historical

    @staticmethod
    def _require(store: Any, name: str) -> Any:
        if store is None:
            raise RuntimeError(f"AnalysisContext has no {name} configured")
        return store
