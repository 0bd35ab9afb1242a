"""
Módulo core del servicio.
Contiene el contexto por petición, la concurrencia y el logging estructurado.
"""

from .context import AnalysisContext
from .concurrency import gather_bounded

__all__ = [
    "AnalysisContext",
    "gather_bounded",
]
