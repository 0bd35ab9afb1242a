"""
Rutas generales de la API FastAPI.
"""

from datetime import datetime

from fastapi import APIRouter

from config import ConcurrencyConfig, ServiceConfig
from .models import HealthResponse


# ============================================================================
# ROUTER
# ============================================================================
router = APIRouter()


# ============================================================================
# ENDPOINT: GET /health
# ============================================================================
@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Endpoint de salud del servicio."""
    return HealthResponse(
        status="healthy",
        service=ServiceConfig.APP_NAME,
        timestamp=datetime.utcnow().isoformat(),
        version=ServiceConfig.APP_VERSION,
        details={"max_concurrent_drivers": ConcurrencyConfig.MAX_CONCURRENT_DRIVERS},
    )
