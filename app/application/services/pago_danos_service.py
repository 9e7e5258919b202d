import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Sequence

from app.application.interfaces.clock import Clock
from app.application.interfaces.pago_danos_repo import PagoDanosRepo
from app.application.interfaces.reserva_repo import AreaRepo, ReservaRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.domain.entities.actor import Actor
from app.domain.entities.pago_danos import EstadoPagoDanos, PagoDanos
from app.domain.entities.reserva import Area, EstadoEntrega, Reserva
from app.domain.errors import (
    PagoDanosNotFoundError,
    PermissionDeniedError,
    ReservaNotFoundError,
)


@dataclass
class PagoDanosDetalle:
    """Pago por daños con el contexto de su reserva y área."""

    pago: PagoDanos
    reserva: Reserva | None = None
    area: Area | None = None


def requiere_admin(actor: Actor, operation: str) -> None:
    if not actor.es_administrativo:
        raise PermissionDeniedError(operation, rol=actor.rol.value)


class PagoDanosService:
    """
    Ciclo de vida de los cobros por daños de una reserva.

    Mantiene consistente el estado de entrega de la reserva: mientras exista
    un cobro positivo sin pagar la entrega queda PENDIENTE; cuando no queda
    ninguno avanza a ENTREGADO.
    """

    def __init__(
        self,
        pago_danos_repo: PagoDanosRepo,
        reserva_repo: ReservaRepo,
        area_repo: AreaRepo,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._pago_danos_repo = pago_danos_repo
        self._reserva_repo = reserva_repo
        self._area_repo = area_repo
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def create(
        self,
        reserva_id: int,
        monto_danos: Decimal | None,
        descripcion_danos: str | None,
        actor: Actor,
    ) -> PagoDanos:
        requiere_admin(actor, "registrar pagos por daños")
        ahora = self._clock.now()
        pago = PagoDanos.registrar(
            reserva_id=reserva_id,
            monto_danos=monto_danos,
            descripcion_danos=descripcion_danos,
            usuario_registra=actor.nombre,
            ahora=ahora,
        )

        async with self._transaction_manager.start():
            reserva = await self._reserva_repo.get_by_id(reserva_id)
            if not reserva:
                raise ReservaNotFoundError(reserva_id)
            pago = await self._pago_danos_repo.create(pago)
            await self._sincronizar_entrega(reserva, ahora)

        self._logger.info(
            "Damages payment registered",
            extra={
                "pago_danos_id": pago.id,
                "reserva_id": reserva_id,
                "monto_danos": str(pago.monto_danos),
                "estado_pago": pago.estado_pago.value,
                "usuario": actor.nombre,
            },
        )
        return pago

    async def find_by_reserva(self, reserva_id: int) -> list[PagoDanosDetalle]:
        pagos = await self._pago_danos_repo.list_by_reserva(reserva_id)
        return await self._con_contexto(pagos)

    async def find_one(self, pago_danos_id: int) -> PagoDanosDetalle:
        pago = await self._get_or_raise(pago_danos_id)
        detalles = await self._con_contexto([pago])
        return detalles[0]

    async def find_pendientes(self, actor: Actor) -> list[PagoDanosDetalle]:
        requiere_admin(actor, "ver pagos pendientes")
        pagos = await self._pago_danos_repo.list_by_estado(EstadoPagoDanos.PENDIENTE)
        return await self._con_contexto(pagos)

    async def update(
        self,
        pago_danos_id: int,
        cambios: dict[str, Any],
        actor: Actor,
    ) -> PagoDanos:
        requiere_admin(actor, "actualizar pagos por daños")
        async with self._transaction_manager.start():
            pago = await self._get_or_raise(pago_danos_id)
            pago.aplicar_cambios(cambios, usuario=actor.nombre)
            pago = await self._pago_danos_repo.update(pago)
            if {"estado_pago", "monto_danos"} & set(cambios):
                reserva = await self._reserva_repo.get_by_id(pago.reserva_id)
                if reserva:
                    await self._sincronizar_entrega(reserva, self._clock.now())

        self._logger.info(
            "Damages payment updated",
            extra={
                "pago_danos_id": pago_danos_id,
                "campos": sorted(cambios),
                "usuario": actor.nombre,
            },
        )
        return pago

    async def marcar_como_pagado(
        self,
        pago_danos_id: int,
        stripe_session_id: str,
        stripe_payment_id: str,
        actor: Actor,
    ) -> PagoDanos:
        """
        Completa el checkout: PAGADO, identificadores externos y fecha_pago.

        No verifica el pago contra la pasarela; eso lo hace quien lo invoca
        (webhook firmado o un administrador).
        """
        requiere_admin(actor, "marcar pagos como pagados")
        ahora = self._clock.now()
        async with self._transaction_manager.start():
            pago = await self._get_or_raise(pago_danos_id)
            pago.marcar_pagado(
                stripe_session_id=stripe_session_id,
                stripe_payment_id=stripe_payment_id,
                usuario=actor.nombre,
                ahora=ahora,
            )
            pago = await self._pago_danos_repo.update(pago)
            reserva = await self._reserva_repo.get_by_id(pago.reserva_id)
            if reserva:
                await self._sincronizar_entrega(reserva, ahora)

        self._logger.info(
            "Damages payment marked as paid",
            extra={
                "pago_danos_id": pago_danos_id,
                "stripe_session_id": stripe_session_id,
                "stripe_payment_id": stripe_payment_id,
            },
        )
        return pago

    async def hay_danos_pendientes(self, reserva_id: int) -> bool:
        pagos = await self._pago_danos_repo.list_by_reserva(reserva_id)
        return any(p.bloquea_entrega for p in pagos)

    async def _sincronizar_entrega(self, reserva: Reserva, ahora: datetime) -> None:
        if await self.hay_danos_pendientes(reserva.id):
            if reserva.estado_entrega == EstadoEntrega.PENDIENTE and reserva.fecha_entrega is None:
                return
            reserva.marcar_entrega_pendiente()
        else:
            if reserva.esta_entregada:
                return
            reserva.marcar_entregada(ahora)
        await self._reserva_repo.update(reserva)
        self._logger.info(
            "Delivery state synchronized",
            extra={"reserva_id": reserva.id, "estado_entrega": reserva.estado_entrega.value},
        )

    async def _get_or_raise(self, pago_danos_id: int) -> PagoDanos:
        pago = await self._pago_danos_repo.get_by_id(pago_danos_id)
        if not pago:
            raise PagoDanosNotFoundError(pago_danos_id)
        return pago

    async def _con_contexto(self, pagos: Sequence[PagoDanos]) -> list[PagoDanosDetalle]:
        reservas: dict[int, Reserva | None] = {}
        for reserva_id in {p.reserva_id for p in pagos}:
            reservas[reserva_id] = await self._reserva_repo.get_by_id(reserva_id)
        areas = await self._area_repo.list_by_ids(
            sorted({r.area_id for r in reservas.values() if r})
        )
        detalles = []
        for pago in pagos:
            reserva = reservas.get(pago.reserva_id)
            area = areas.get(reserva.area_id) if reserva else None
            detalles.append(PagoDanosDetalle(pago=pago, reserva=reserva, area=area))
        return detalles
