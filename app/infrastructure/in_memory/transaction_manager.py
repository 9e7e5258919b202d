from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar

from app.application.interfaces.transaction_manager import TransactionManager
from app.infrastructure.in_memory.database import InMemoryDatabase


class InMemoryTransactionManager(TransactionManager):
    """Transacciones por snapshot: al fallar, el store vuelve al estado inicial."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self._database = database
        self._active: ContextVar[bool] = ContextVar(
            f"in_memory_tx_{id(self)}", default=False
        )

    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        if self._active.get():
            yield
            return

        snapshot = self._database.snapshot()
        token = self._active.set(True)
        try:
            yield
        except BaseException:
            self._database.restore(snapshot)
            raise
        finally:
            self._active.reset(token)
