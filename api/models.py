"""
Modelos de datos generales de la API.
"""

from typing import Any, Dict
from pydantic import BaseModel, Field


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class HealthResponse(BaseModel):
    """Response del health check."""

    status: str = Field(..., description="Estado del servicio")
    service: str = Field(..., description="Nombre del servicio")
    timestamp: str = Field(..., description="Timestamp UTC")
    version: str = Field(..., description="Versión desplegada")
    details: Dict[str, Any] = Field(default_factory=dict)
