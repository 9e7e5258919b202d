from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Protocol


class TransactionManager(Protocol):
    """
    Unidad de trabajo atómica sobre el store.

    Todo lo ejecutado dentro de `start()` se confirma junto o se revierte junto.
    Un `start()` anidado se une a la transacción exterior.
    """

    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        yield
