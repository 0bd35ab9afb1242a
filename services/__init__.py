"""
Servicios de negocio para el análisis de flota y presupuesto.
Encapsulan el acceso a los colaboradores externos y delegan el cálculo
al AnalyticsEngine.
"""

from .fleet_analyzer import FleetAnalyzer
from .budget_forecaster import BudgetForecaster
from .stores import (
    InMemoryTripStore,
    InMemoryPredictionStore,
    InMemoryHistoricalStore,
    LoggingAuditSink,
)

__all__ = [
    "FleetAnalyzer",
    "BudgetForecaster",
    "InMemoryTripStore",
    "InMemoryPredictionStore",
    "InMemoryHistoricalStore",
    "LoggingAuditSink",
]
