import copy
from typing import Sequence

from app.application.interfaces.pago_reserva_repo import FacturaRepo, PagoReservaRepo
from app.domain.entities.pago_reserva import Factura, PagoReserva
from app.domain.errors import TransactionError
from app.infrastructure.in_memory.database import InMemoryDatabase


class InMemoryPagoReservaRepo(PagoReservaRepo):
    def __init__(self, database: InMemoryDatabase) -> None:
        self._db = database

    async def create(self, pago: PagoReserva) -> PagoReserva:
        if pago.reserva_id not in self._db.reservas:
            raise TransactionError("create pago_reserva", "reserva inexistente")
        if any(p.referencia_pago == pago.referencia_pago for p in self._db.pagos_reserva.values()):
            raise TransactionError("create pago_reserva", "referencia_pago duplicada")
        stored = copy.deepcopy(pago)
        stored.id = self._db.next_id("pagos_reserva")
        stored.factura = None
        self._db.pagos_reserva[stored.id] = stored
        return copy.deepcopy(stored)

    async def list_by_reserva(self, reserva_id: int) -> Sequence[PagoReserva]:
        facturas = {f.pago_reserva_id: f for f in self._db.facturas.values()}
        result = []
        for pago_id in sorted(self._db.pagos_reserva):
            pago = self._db.pagos_reserva[pago_id]
            if pago.reserva_id != reserva_id:
                continue
            item = copy.deepcopy(pago)
            factura = facturas.get(pago_id)
            item.factura = copy.deepcopy(factura) if factura else None
            result.append(item)
        return result

    async def delete_by_reserva(self, reserva_id: int) -> int:
        ids = [p.id for p in self._db.pagos_reserva.values() if p.reserva_id == reserva_id]
        if any(f.pago_reserva_id in ids for f in self._db.facturas.values()):
            raise TransactionError("delete pagos_reserva", "existen facturas asociadas")
        for pago_id in ids:
            del self._db.pagos_reserva[pago_id]
        return len(ids)


class InMemoryFacturaRepo(FacturaRepo):
    def __init__(self, database: InMemoryDatabase) -> None:
        self._db = database

    async def create(self, factura: Factura) -> Factura:
        if factura.pago_reserva_id not in self._db.pagos_reserva:
            raise TransactionError("create factura", "pago inexistente")
        if any(f.pago_reserva_id == factura.pago_reserva_id for f in self._db.facturas.values()):
            raise TransactionError("create factura", "el pago ya tiene factura")
        stored = copy.deepcopy(factura)
        stored.id = self._db.next_id("facturas")
        self._db.facturas[stored.id] = stored
        return copy.deepcopy(stored)

    async def get_by_pago(self, pago_reserva_id: int) -> Factura | None:
        for factura in self._db.facturas.values():
            if factura.pago_reserva_id == pago_reserva_id:
                return copy.deepcopy(factura)
        return None

    async def delete_by_reserva(self, reserva_id: int) -> int:
        pagos = {p.id for p in self._db.pagos_reserva.values() if p.reserva_id == reserva_id}
        ids = [f.id for f in self._db.facturas.values() if f.pago_reserva_id in pagos]
        for factura_id in ids:
            del self._db.facturas[factura_id]
        return len(ids)
