"""
Configuración centralizada del servicio.
Todas las variables de entorno y constantes se definen aquí.
"""

import os
from dotenv import load_dotenv

# Cargar variables de entorno
load_dotenv()


# ============================================================================
# CONFIGURACIÓN DEL SERVICIO
# ============================================================================
class ServiceConfig:
    """Configuración general del servicio FastAPI."""

    HOST = os.getenv("SERVICE_HOST", "0.0.0.0")
    PORT = int(os.getenv("SERVICE_PORT", "8000"))

    APP_NAME = "fleet-analytics"

    APP_VERSION = "0.1.0"


# ============================================================================
# CONFIGURACIÓN DE LOGGING
# ============================================================================
class LoggingConfig:
    """Configuración del logging estructurado."""

    ENVIRONMENT = os.getenv("ENVIRONMENT", "production")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE", "") or None


# ============================================================================
# CONFIGURACIÓN DE CONCURRENCIA
# ============================================================================
class ConcurrencyConfig:
    """Límites para el análisis concurrente de conductores."""

    # Conductores analizados en paralelo dentro de una misma petición
    MAX_CONCURRENT_DRIVERS = int(os.getenv("MAX_CONCURRENT_DRIVERS", "8"))


# ============================================================================
# CONFIGURACIÓN DE FLOTA
# ============================================================================
class FleetConfig:
    """Constantes de presentación para los análisis de flota."""

    CURRENCY = os.getenv("FLEET_CURRENCY", "QAR")
