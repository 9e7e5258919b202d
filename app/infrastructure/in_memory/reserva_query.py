from datetime import datetime

from app.application.interfaces.reserva_query import ReservaDetalle, ReservaQuery
from app.domain.entities.reserva import Reserva
from app.infrastructure.in_memory.confirmacion_repo import InMemoryConfirmacionRepo
from app.infrastructure.in_memory.pago_danos_repo import InMemoryPagoDanosRepo
from app.infrastructure.in_memory.pago_reserva_repo import InMemoryPagoReservaRepo
from app.infrastructure.in_memory.reserva_repo import InMemoryAreaRepo, InMemoryReservaRepo


class InMemoryReservaQuery(ReservaQuery):
    def __init__(
        self,
        reserva_repo: InMemoryReservaRepo,
        area_repo: InMemoryAreaRepo,
        confirmacion_repo: InMemoryConfirmacionRepo,
        pago_reserva_repo: InMemoryPagoReservaRepo,
        pago_danos_repo: InMemoryPagoDanosRepo,
    ) -> None:
        self._reserva_repo = reserva_repo
        self._area_repo = area_repo
        self._confirmacion_repo = confirmacion_repo
        self._pago_reserva_repo = pago_reserva_repo
        self._pago_danos_repo = pago_danos_repo

    async def get_detalle(self, reserva_id: int) -> ReservaDetalle | None:
        reserva = await self._reserva_repo.get_by_id(reserva_id)
        if not reserva:
            return None
        return await self._detalle(reserva)

    async def list_detalles(
        self,
        usuario_id: str | None = None,
        inicio_desde: datetime | None = None,
        inicio_hasta: datetime | None = None,
    ) -> list[ReservaDetalle]:
        reservas = await self._reserva_repo.list(
            usuario_id=usuario_id, inicio_desde=inicio_desde, inicio_hasta=inicio_hasta
        )
        return [await self._detalle(reserva) for reserva in reservas]

    async def _detalle(self, reserva: Reserva) -> ReservaDetalle:
        return ReservaDetalle(
            reserva=reserva,
            area=await self._area_repo.get_by_id(reserva.area_id),
            confirmacion=await self._confirmacion_repo.get_by_reserva(reserva.id),
            pagos_reserva=list(await self._pago_reserva_repo.list_by_reserva(reserva.id)),
            pagos_danos=list(await self._pago_danos_repo.list_by_reserva(reserva.id)),
        )
