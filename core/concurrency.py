"""
Control de concurrencia para el análisis de conductores.

Cada petición analiza a sus conductores en paralelo. El número de análisis
simultáneos se limita con un semáforo creado por llamada, de modo que no
existe estado compartido entre peticiones.
"""

import asyncio
import logging
from typing import Awaitable, Iterable, List, Optional, TypeVar

from config import ConcurrencyConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def gather_bounded(
    awaitables: Iterable[Awaitable[T]],
    limit: Optional[int] = None,
) -> List[T]:
    """
    Ejecuta los awaitables con un máximo de ``limit`` en vuelo.

    El orden del resultado coincide con el de la entrada. Las excepciones se
    propagan igual que en ``asyncio.gather``; quien llama decide cómo aislar
    los fallos individuales.

    Args:
        awaitables: Coroutines a ejecutar.
        limit: Máximo de ejecuciones simultáneas. Si es None, usa
               MAX_CONCURRENT_DRIVERS de la configuración.
    """
    if limit is None:
        limit = ConcurrencyConfig.MAX_CONCURRENT_DRIVERS
    if limit < 1:
        raise ValueError(f"Concurrency limit must be positive, got {limit}")

    semaphore = asyncio.Semaphore(limit)

    async def _run(awaitable: Awaitable[T]) -> T:
        async with semaphore:
            return await awaitable

    pending = [_run(a) for a in awaitables]
    logger.debug(f"Running {len(pending)} tasks with concurrency limit {limit}")
    return list(await asyncio.gather(*pending))
