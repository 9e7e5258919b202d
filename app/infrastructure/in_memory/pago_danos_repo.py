import copy
from datetime import datetime, timezone
from typing import Iterable, Sequence

from app.application.interfaces.pago_danos_repo import PagoDanosRepo
from app.domain.entities.pago_danos import EstadoPagoDanos, PagoDanos
from app.domain.errors import TransactionError
from app.infrastructure.in_memory.database import InMemoryDatabase

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _newest_first(pagos: Iterable[PagoDanos]) -> list[PagoDanos]:
    return sorted(
        (copy.deepcopy(p) for p in pagos),
        key=lambda p: (p.fecha_registro or _EPOCH, p.id),
        reverse=True,
    )


class InMemoryPagoDanosRepo(PagoDanosRepo):
    def __init__(self, database: InMemoryDatabase) -> None:
        self._db = database

    async def create(self, pago: PagoDanos) -> PagoDanos:
        if pago.reserva_id not in self._db.reservas:
            raise TransactionError("create pago_danos", "reserva inexistente")
        stored = copy.deepcopy(pago)
        stored.id = self._db.next_id("pagos_danos")
        self._db.pagos_danos[stored.id] = stored
        return copy.deepcopy(stored)

    async def get_by_id(self, pago_danos_id: int) -> PagoDanos | None:
        pago = self._db.pagos_danos.get(pago_danos_id)
        return copy.deepcopy(pago) if pago else None

    async def list_by_reserva(self, reserva_id: int) -> Sequence[PagoDanos]:
        return _newest_first(p for p in self._db.pagos_danos.values() if p.reserva_id == reserva_id)

    async def list_by_estado(self, estado: EstadoPagoDanos) -> Sequence[PagoDanos]:
        return _newest_first(p for p in self._db.pagos_danos.values() if p.estado_pago == estado)

    async def update(self, pago: PagoDanos) -> PagoDanos:
        if pago.id not in self._db.pagos_danos:
            raise TransactionError("update pago_danos", f"pago {pago.id} no existe")
        self._db.pagos_danos[pago.id] = copy.deepcopy(pago)
        return copy.deepcopy(pago)

    async def delete_by_reserva(self, reserva_id: int) -> int:
        ids = [p.id for p in self._db.pagos_danos.values() if p.reserva_id == reserva_id]
        for pago_id in ids:
            del self._db.pagos_danos[pago_id]
        return len(ids)
