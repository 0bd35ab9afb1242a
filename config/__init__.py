"""
Módulo de configuración.
"""

from .settings import (
    ServiceConfig,
    LoggingConfig,
    ConcurrencyConfig,
    FleetConfig,
)

__all__ = [
    "ServiceConfig",
    "LoggingConfig",
    "ConcurrencyConfig",
    "FleetConfig",
]
