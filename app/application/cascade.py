"""Borrado ordenado y atómico de un agregado."""

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from app.application.interfaces.transaction_manager import TransactionManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteStep:
    """Un paso del borrado: nombre de la tabla y la función que borra por clave."""

    name: str
    delete: Callable[[int], Awaitable[int | None]]


async def atomic_ordered_delete(
    transaction_manager: TransactionManager,
    steps: Sequence[DeleteStep],
    key: int,
) -> dict[str, int]:
    """
    Ejecuta los pasos en el orden declarado dentro de una sola transacción.

    Los hijos deben aparecer antes que sus padres. Si un paso falla, la
    transacción completa se revierte y la excepción se propaga.

    Returns:
        Filas eliminadas por paso.
    """
    deleted: dict[str, int] = {}
    async with transaction_manager.start():
        for step in steps:
            count = await step.delete(key)
            deleted[step.name] = count if count is not None else 1
    logger.info("Ordered delete completed", extra={"key": key, "deleted": deleted})
    return deleted
