"""
FleetAnalyzer: Orquestador del análisis de rutas por conductor.

1. Resuelve los conductores a analizar (uno o todos los que tienen viajes)
2. Carga sus viajes completados a través del contexto de la petición
3. Ejecuta el análisis determinista de cada conductor en paralelo
4. Registra la auditoría sin que un fallo allí afecte al resultado
"""

import time
from typing import List, Optional

from analytics import AnalyticsEngine
from api.analytics_models import DriverInfo, RouteAnalysisResult
from core.concurrency import gather_bounded
from core.context import AnalysisContext
from core.structured_logging import get_logger

logger = get_logger(__name__)

AUDIT_ACTION = "DRIVER_ROUTES_ANALYSIS"


class FleetAnalyzer:
    """
    Orquestador de análisis de rutas.

    Los conductores se procesan de forma independiente: un error en uno se
    registra y ese conductor queda fuera del resultado, el resto continúa.
    """

    def __init__(self, context: AnalysisContext, engine: Optional[AnalyticsEngine] = None):
        self.context = context
        self.engine = engine or AnalyticsEngine()

    async def analyze_driver_routes(
        self, driver_id: Optional[str] = None
    ) -> List[RouteAnalysisResult]:
        """
        Analiza las rutas de un conductor o de todos los que tienen viajes.

        Args:
            driver_id: Conductor a analizar. Un ID desconocido produce una lista vacía.

        Returns:
            Un RouteAnalysisResult por conductor analizado con éxito.
        """
        start_time = time.time()
        trip_store = self.context.trip_store
        if trip_store is None:
            raise RuntimeError("FleetAnalyzer requires a trip_store in the context")

        if driver_id:
            driver = await trip_store.get_driver(driver_id)
            if driver is None:
                logger.warning("Driver not found", context={"driver_id": driver_id})
            drivers = [driver] if driver else []
        else:
            drivers = await trip_store.list_drivers_with_trips()

        results = await gather_bounded(self._analyze_one(d) for d in drivers)
        analysis_results = [r for r in results if r is not None]

        duration_ms = round((time.time() - start_time) * 1000, 2)
        logger.info("Driver route analysis completed", context={
            "requested_driver_id": driver_id,
            "drivers_requested": len(drivers),
            "drivers_analyzed": len(analysis_results),
            "duration_ms": duration_ms,
        })

        await self._audit(driver_id, len(analysis_results))
        return analysis_results

    async def _analyze_one(self, driver: DriverInfo) -> Optional[RouteAnalysisResult]:
        try:
            trips = await self.context.completed_trips(driver.id)
            return self.engine.analyze_driver(driver, trips)
        except Exception as e:
            logger.error("Driver route analysis failed", context={
                "driver_id": driver.id,
                "error": str(e),
                "error_type": type(e).__name__,
            }, exc_info=True)
            return None

    async def _audit(self, driver_id: Optional[str], analyzed: int) -> None:
        sink = self.context.audit_sink
        if sink is None:
            return

        suffix = f" for driver {driver_id}" if driver_id else ""
        try:
            await sink.record(
                AUDIT_ACTION,
                self.context.actor_id,
                {
                    "description": f"User accessed AI analysis for driver routes{suffix}",
                    "driver_id": driver_id,
                    "drivers_analyzed": analyzed,
                },
            )
        except Exception as e:
            logger.warning("Audit log failed", context={
                "action": AUDIT_ACTION,
                "error": str(e),
                "error_type": type(e).__name__,
            })
