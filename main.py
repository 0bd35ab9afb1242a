"""
Punto de entrada principal del servicio FastAPI.
Inicializa el logging, la aplicación y registra las rutas.
"""

from fastapi import FastAPI, Request

from config import LoggingConfig, ServiceConfig
from api.routes import router
from api.analytics_routes import router as analytics_router
from core.structured_logging import new_trace_id, set_request_context, setup_logging


# ============================================================================
# LOGGING
# ============================================================================
setup_logging(
    service=ServiceConfig.APP_NAME,
    environment=LoggingConfig.ENVIRONMENT,
    log_level=LoggingConfig.LOG_LEVEL,
    log_file=LoggingConfig.LOG_FILE,
)


# ============================================================================
# FASTAPI APP
# ============================================================================
app = FastAPI(
    title="Fleet & Budget Analytics Service",
    description="Análisis de rutas de conductores y forecast de presupuesto por categoría",
    version=ServiceConfig.APP_VERSION,
)


@app.middleware("http")
async def trace_context(request: Request, call_next):
    """Propaga X-Trace-Id (o genera uno) para todos los logs de la petición."""
    trace_id = request.headers.get("x-trace-id") or new_trace_id()
    set_request_context(trace_id)

    response = await call_next(request)
    response.headers["X-Trace-Id"] = trace_id
    return response


# Registrar rutas
app.include_router(router)
app.include_router(analytics_router)


# ============================================================================
# MAIN (para desarrollo local)
# ============================================================================
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=ServiceConfig.HOST,
        port=ServiceConfig.PORT,
        reload=True
    )
