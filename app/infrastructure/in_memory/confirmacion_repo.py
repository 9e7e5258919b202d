import copy

from app.application.interfaces.confirmacion_repo import ConfirmacionRepo
from app.domain.entities.confirmacion import Confirmacion
from app.domain.errors import TransactionError
from app.infrastructure.in_memory.database import InMemoryDatabase


class InMemoryConfirmacionRepo(ConfirmacionRepo):
    def __init__(self, database: InMemoryDatabase) -> None:
        self._db = database

    async def create(self, confirmacion: Confirmacion) -> Confirmacion:
        if confirmacion.reserva_id not in self._db.reservas:
            raise TransactionError("create confirmacion", "reserva inexistente")
        for existing in self._db.confirmaciones.values():
            if existing.reserva_id == confirmacion.reserva_id:
                raise TransactionError("create confirmacion", "la reserva ya tiene confirmación")
            if existing.codigo_qr == confirmacion.codigo_qr:
                raise TransactionError("create confirmacion", "codigo_qr duplicado")
        stored = copy.deepcopy(confirmacion)
        stored.id = self._db.next_id("confirmaciones")
        self._db.confirmaciones[stored.id] = stored
        return copy.deepcopy(stored)

    async def get_by_reserva(self, reserva_id: int) -> Confirmacion | None:
        for confirmacion in self._db.confirmaciones.values():
            if confirmacion.reserva_id == reserva_id:
                return copy.deepcopy(confirmacion)
        return None

    async def delete_by_reserva(self, reserva_id: int) -> int:
        ids = [c.id for c in self._db.confirmaciones.values() if c.reserva_id == reserva_id]
        for confirmacion_id in ids:
            del self._db.confirmaciones[confirmacion_id]
        return len(ids)
