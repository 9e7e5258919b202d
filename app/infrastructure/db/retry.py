"""
Reintentos ante fallas transitorias de la base de datos.

Un deadlock (MySQL 1213), un lock wait timeout (MySQL 1205) o un
"database is locked" de SQLite abortan la transacción completa; repetir la
unidad de trabajo suele bastar.
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_MARKERS = (
    "1213",  # MySQL deadlock
    "1205",  # MySQL lock wait timeout
    "database is locked",  # SQLite
)


def is_deadlock_error(error: Exception) -> bool:
    """True si la excepción es un bloqueo transitorio que vale la pena reintentar."""
    if isinstance(error, (OperationalError, DBAPIError)):
        error_str = str(error)
        return any(marker in error_str for marker in TRANSIENT_MARKERS)
    return False


async def retry_on_deadlock(
    func: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 0.1,
) -> T:
    """
    Ejecuta `func` y la repite si falla por un deadlock.

    Usa backoff exponencial: base_delay * (2 ** attempt). Cualquier otro error
    se propaga de inmediato.

    Example:
        reserva = await retry_on_deadlock(
            lambda: service.remove_with_cascade(reserva_id)
        )
    """
    for attempt in range(max_attempts):
        try:
            return await func()
        except Exception as e:
            if not is_deadlock_error(e) or attempt == max_attempts - 1:
                if is_deadlock_error(e):
                    logger.error(
                        "Database deadlock persists after max retries",
                        extra={"attempts": max_attempts, "error": str(e)},
                    )
                raise

            delay = base_delay * (2 ** attempt)
            logger.warning(
                "Database deadlock detected, retrying",
                extra={
                    "attempt": attempt + 1,
                    "max_attempts": max_attempts,
                    "retry_delay": delay,
                    "error": str(e),
                },
            )
            await asyncio.sleep(delay)

    raise RuntimeError("retry_on_deadlock called with max_attempts < 1")
