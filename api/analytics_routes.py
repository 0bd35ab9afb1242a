"""
FastAPI routes for fleet and budget analytics.

Provides endpoints for:
- Driver route analysis (anomalies, scores, recommendations)
- Six-month budget forecast by category
- Waste cost chart series
"""

import time
from datetime import datetime

from fastapi import APIRouter, HTTPException

from analytics import AnalyticsEngine
from api.analytics_models import (
    DriverRoutesRequest,
    DriverRoutesResponse,
    ForecastRequest,
    ForecastResponse,
    WasteChartView,
    WasteViewRequest,
)
from core.context import AnalysisContext
from core.structured_logging import get_logger, get_trace_id, set_actor_id
from services import (
    BudgetForecaster,
    FleetAnalyzer,
    InMemoryHistoricalStore,
    InMemoryPredictionStore,
    InMemoryTripStore,
    LoggingAuditSink,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.post("/driver-routes", response_model=DriverRoutesResponse)
async def analyze_driver_routes(request: DriverRoutesRequest) -> DriverRoutesResponse:
    """
    Analyze the routes of one driver, or of every driver with completed trips.

    Trips are sent by value. In-progress trips are ignored, an unknown
    driver_id returns an empty list, and a driver whose analysis fails is
    left out of the results.
    """
    start_time = time.time()
    set_actor_id(request.actor_id)

    context = AnalysisContext(
        trip_store=InMemoryTripStore(request.drivers, request.trips),
        audit_sink=LoggingAuditSink(),
        actor_id=request.actor_id,
    )

    try:
        results = await FleetAnalyzer(context).analyze_driver_routes(request.driver_id)
    except Exception as e:
        logger.error("Driver routes analysis failed", context={
            "driver_id": request.driver_id,
            "error": str(e),
            "error_type": type(e).__name__,
            "trace_id": get_trace_id(),
        })
        raise HTTPException(
            status_code=500,
            detail={"error": "Internal server error", "details": str(e)},
        )

    logger.info("Driver routes request served", context={
        "driver_id": request.driver_id,
        "trips_received": len(request.trips),
        "results": len(results),
        "duration_ms": round((time.time() - start_time) * 1000, 2),
    })
    return DriverRoutesResponse(success=True, analysis_results=results)


@router.post("/forecast", response_model=ForecastResponse)
async def build_forecast(request: ForecastRequest) -> ForecastResponse:
    """
    Build the six-month forecast.

    Returns the densified total forecast and its split into food, assets
    and vehicle rental. Both lists are empty when predictions or history
    are missing.
    """
    context = AnalysisContext(
        prediction_store=InMemoryPredictionStore(request.budget_predictions),
        historical_store=InMemoryHistoricalStore(request.historical_monthly),
    )

    try:
        result = await BudgetForecaster(context).build(request.reference_date)
    except Exception as e:
        logger.error("Forecast build failed", context={
            "error": str(e),
            "error_type": type(e).__name__,
            "trace_id": get_trace_id(),
        })
        raise HTTPException(
            status_code=500,
            detail={"error": "Failed to build forecast", "details": str(e)},
        )

    return result


@router.post("/waste", response_model=WasteChartView)
async def waste_view(request: WasteViewRequest) -> WasteChartView:
    """
    Waste costs per category, aligned for charting.

    Monthly view includes a flat forecast for the next months; daily view
    only aggregates history.
    """
    engine = AnalyticsEngine()
    return engine.build_waste_view(
        request.view_mode,
        request.disposals,
        request.forecast_months,
        request.reference_date,
    )


@router.get("/health")
async def analytics_health():
    """Health check for analytics service."""
    return {
        "status": "ok",
        "service": "analytics",
        "timestamp": datetime.utcnow().isoformat() + "Z",
    }
