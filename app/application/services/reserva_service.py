import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from app.application.cascade import DeleteStep, atomic_ordered_delete
from app.application.interfaces.clock import Clock
from app.application.interfaces.confirmacion_repo import ConfirmacionRepo
from app.application.interfaces.notification_gateway import (
    ConfirmacionReservaEmail,
    NotificationDispatcher,
)
from app.application.interfaces.pago_danos_repo import PagoDanosRepo
from app.application.interfaces.pago_reserva_repo import FacturaRepo, PagoReservaRepo
from app.application.interfaces.reserva_query import ReservaDetalle, ReservaQuery
from app.application.interfaces.reserva_repo import AreaRepo, ReservaRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.schemas import EntregaInput, ReservaCreate
from app.application.services.pago_danos_service import PagoDanosService, requiere_admin
from app.domain.constants import NOMBRE_USUARIO_DEFAULT
from app.domain.entities.actor import Actor
from app.domain.entities.confirmacion import Confirmacion
from app.domain.entities.pago_reserva import PagoReserva
from app.domain.entities.reserva import CAMPOS_ENTREGA, Area, EstadoEntrega, EstadoReserva, Reserva
from app.domain.errors import PermissionDeniedError, ReservaNotFoundError, ValidationError
from app.domain.value_objects.datetime_range import DatetimeRange


@dataclass
class ReservaCreada:
    reserva: Reserva
    confirmacion: Confirmacion
    pago_reserva: PagoReserva


@dataclass
class EntregaResultado:
    reserva: Reserva
    pago_danos_id: int | None = None


def build_confirmation_email(reserva: Reserva, area: Area | None) -> ConfirmacionReservaEmail:
    """Arma los datos del correo con fechas en formato dd/mm/aaaa y horas HH:MM."""
    inicio, fin = reserva.inicio, reserva.fin
    return ConfirmacionReservaEmail(
        email_destino=reserva.usuario_email,
        nombre_usuario=reserva.usuario_nombre or NOMBRE_USUARIO_DEFAULT,
        numero_reserva=str(reserva.id),
        nombre_area=area.nombre if area else f"Área {reserva.area_id}",
        fecha_reserva=f"{inicio.day}/{inicio.month}/{inicio.year}",
        hora_inicio=inicio.strftime("%H:%M"),
        hora_fin=fin.strftime("%H:%M"),
        precio=reserva.costo,
    )


class ReservaService:
    """
    Flujo de trabajo de reservas.

    Orquesta la creación atómica de la reserva con su confirmación y su pago,
    las transiciones de estado, la entrega con registro de daños y el borrado
    en cascada. Los correos se encolan en el dispatcher después del commit.
    """

    def __init__(
        self,
        reserva_repo: ReservaRepo,
        confirmacion_repo: ConfirmacionRepo,
        pago_reserva_repo: PagoReservaRepo,
        factura_repo: FacturaRepo,
        pago_danos_repo: PagoDanosRepo,
        area_repo: AreaRepo,
        reserva_query: ReservaQuery,
        pago_danos_service: PagoDanosService,
        notification_dispatcher: NotificationDispatcher,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._reserva_repo = reserva_repo
        self._confirmacion_repo = confirmacion_repo
        self._pago_reserva_repo = pago_reserva_repo
        self._factura_repo = factura_repo
        self._pago_danos_repo = pago_danos_repo
        self._area_repo = area_repo
        self._reserva_query = reserva_query
        self._pago_danos_service = pago_danos_service
        self._notification_dispatcher = notification_dispatcher
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

        # Hijos antes que padres; facturas antes que los pagos que referencian.
        self._cascade_steps = (
            DeleteStep("facturas", self._factura_repo.delete_by_reserva),
            DeleteStep("pagos_reserva", self._pago_reserva_repo.delete_by_reserva),
            DeleteStep("pagos_danos", self._pago_danos_repo.delete_by_reserva),
            DeleteStep("confirmacion", self._confirmacion_repo.delete_by_reserva),
            DeleteStep("reserva", self._reserva_repo.delete),
        )

    async def create(self, data: ReservaCreate) -> ReservaCreada:
        if not data.usuario_id:
            raise ValidationError("usuario_id", "usuario_id es requerido")
        if data.costo is None:
            raise ValidationError("costo", "costo es requerido")

        ahora = self._clock.now()
        reserva = Reserva(
            area_id=data.area_id,
            usuario_id=str(data.usuario_id),
            inicio=data.inicio,
            fin=data.fin,
            costo=data.costo,
            usuario_nombre=data.usuario_nombre,
            usuario_rol=data.usuario_rol,
            usuario_email=data.usuario_email,
            estado=data.estado or EstadoReserva.PENDING,
            fecha_creacion=ahora,
        )
        reserva.validar()

        async with self._transaction_manager.start():
            reserva = await self._reserva_repo.create(reserva)
            confirmacion = await self._confirmacion_repo.create(
                Confirmacion.emitir(reserva.id, ahora)
            )
            pago = await self._pago_reserva_repo.create(
                PagoReserva.create_pending(reserva.id, reserva.costo, ahora)
            )

        self._logger.info(
            "Reservation created",
            extra={
                "reserva_id": reserva.id,
                "area_id": reserva.area_id,
                "usuario_id": reserva.usuario_id,
                "codigo_qr": confirmacion.codigo_qr,
                "referencia_pago": pago.referencia_pago,
            },
        )
        await self._notificar_confirmacion(reserva)
        return ReservaCreada(reserva=reserva, confirmacion=confirmacion, pago_reserva=pago)

    async def find_all(self, actor: Actor) -> list[ReservaDetalle]:
        """Un usuario casual solo ve sus reservas; los administrativos ven todas."""
        if actor.es_casual:
            return await self._reserva_query.list_detalles(usuario_id=actor.id)
        return await self._reserva_query.list_detalles()

    async def find_all_for_calendar(self) -> list[ReservaDetalle]:
        return await self._reserva_query.list_detalles()

    async def find_one(self, reserva_id: int) -> ReservaDetalle:
        detalle = await self._reserva_query.get_detalle(reserva_id)
        if not detalle:
            raise ReservaNotFoundError(reserva_id)
        return detalle

    async def find_one_with_factura(self, reserva_id: int, actor: Actor) -> ReservaDetalle:
        """
        Reserva con su factura (detalle.factura), visible para el dueño o SUPER_USER.

        Raises:
            ReservaNotFoundError: si la reserva no existe.
            PermissionDeniedError: si el actor no es dueño ni SUPER_USER.
        """
        detalle = await self.find_one(reserva_id)
        if not (detalle.reserva.pertenece_a(actor.id) or actor.es_super_usuario):
            raise PermissionDeniedError("ver esta factura", rol=actor.rol.value)
        return detalle

    async def update(
        self,
        reserva_id: int,
        cambios: dict[str, Any],
        actor: Actor | None = None,
    ) -> ReservaDetalle:
        """
        Aplica un parche a la reserva.

        Un USER_CASUAL solo modifica sus propias reservas y nunca los datos de
        entrega. Un estado_entrega explícito respeta los daños pendientes:
        no se cierra la entrega mientras haya un cobro positivo sin pagar.

        Raises:
            ReservaNotFoundError: si la reserva no existe.
            PermissionDeniedError: si el actor no puede modificarla.
            ValidationError: si el parche deja la reserva inválida.
        """
        if actor is not None and CAMPOS_ENTREGA & set(cambios):
            requiere_admin(actor, "actualizar la entrega")
        ahora = self._clock.now()
        async with self._transaction_manager.start():
            reserva = await self._get_or_raise(reserva_id)
            if actor is not None and not (actor.es_administrativo or reserva.pertenece_a(actor.id)):
                raise PermissionDeniedError("actualizar esta reserva", rol=actor.rol.value)
            confirmada = reserva.aplicar_cambios(cambios)
            if "estado_entrega" in cambios:
                await self._ajustar_entrega(reserva, ahora)
            reserva = await self._reserva_repo.update(reserva)

        self._logger.info(
            "Reservation updated",
            extra={"reserva_id": reserva_id, "campos": sorted(cambios), "estado": reserva.estado.value},
        )
        if confirmada:
            await self._notificar_confirmacion(reserva)
        area = await self._area_repo.get_by_id(reserva.area_id)
        return ReservaDetalle(reserva=reserva, area=area)

    async def remove(self, reserva_id: int) -> Reserva:
        """
        Borra solo la fila de la reserva.

        Raises:
            TransactionError: si la reserva todavía tiene hijos.
        """
        reserva = await self._get_or_raise(reserva_id)
        async with self._transaction_manager.start():
            await self._reserva_repo.delete(reserva_id)
        self._logger.info("Reservation removed", extra={"reserva_id": reserva_id})
        return reserva

    async def remove_with_cascade(self, reserva_id: int) -> Reserva:
        async with self._transaction_manager.start():
            reserva = await self._get_or_raise(reserva_id)
            deleted = await atomic_ordered_delete(
                self._transaction_manager, self._cascade_steps, reserva_id
            )
        self._logger.info(
            "Reservation removed with cascade",
            extra={"reserva_id": reserva_id, "deleted": deleted},
        )
        return reserva

    async def find_all_for_reports(
        self,
        fecha_inicio: date | None = None,
        fecha_fin: date | None = None,
    ) -> list[ReservaDetalle]:
        """Sin filtro salvo que lleguen ambas fechas; el día final se incluye completo."""
        if fecha_inicio is None or fecha_fin is None:
            return await self._reserva_query.list_detalles()
        try:
            rango = DatetimeRange.whole_days(fecha_inicio, fecha_fin)
        except ValueError as exc:
            raise ValidationError("fecha_fin", "fecha_fin debe ser posterior o igual a fecha_inicio") from exc
        return await self._reserva_query.list_detalles(
            inicio_desde=rango.start, inicio_hasta=rango.end
        )

    async def gestionar_entrega(
        self,
        reserva_id: int,
        entrega: EntregaInput,
        actor: Actor,
    ) -> EntregaResultado:
        """
        Registra la entrega del área y, si se declaran daños, su cobro.

        El estado de entrega se deriva del monto de daños declarado y de los
        cobros positivos que sigan pendientes; el estado pedido en la entrada
        se ignora. Todo ocurre en una sola transacción.
        """
        if entrega.monto_danos is not None and entrega.monto_danos < 0:
            raise ValidationError("monto_danos", "monto_danos no puede ser negativo")

        ahora = self._clock.now()
        pago_danos_id = None
        async with self._transaction_manager.start():
            reserva = await self._get_or_raise(reserva_id)
            requiere_admin(actor, "gestionar entregas")

            pendientes = await self._pago_danos_service.hay_danos_pendientes(reserva_id)
            estado_entrega = EstadoEntrega.para_danos(entrega.monto_danos, pendientes)
            reserva.registrar_entrega(
                estado_entrega=estado_entrega,
                usuario=actor.nombre,
                ahora=ahora,
                costo_entrega=entrega.costo_entrega,
                pago_entrega=entrega.pago_entrega,
                observaciones=entrega.observaciones_entrega,
            )
            reserva = await self._reserva_repo.update(reserva)

            if entrega.registra_danos:
                pago = await self._pago_danos_service.create(
                    reserva_id=reserva_id,
                    monto_danos=entrega.monto_danos,
                    descripcion_danos=entrega.descripcion_danos,
                    actor=actor,
                )
                pago_danos_id = pago.id
                reserva = await self._get_or_raise(reserva_id)

        self._logger.info(
            "Delivery registered",
            extra={
                "reserva_id": reserva_id,
                "estado_entrega": reserva.estado_entrega.value,
                "pago_danos_id": pago_danos_id,
                "usuario": actor.nombre,
            },
        )
        return EntregaResultado(reserva=reserva, pago_danos_id=pago_danos_id)

    async def _get_or_raise(self, reserva_id: int) -> Reserva:
        reserva = await self._reserva_repo.get_by_id(reserva_id)
        if not reserva:
            raise ReservaNotFoundError(reserva_id)
        return reserva

    async def _ajustar_entrega(self, reserva: Reserva, ahora: datetime) -> None:
        if reserva.estado_entrega != EstadoEntrega.PENDIENTE and await (
            self._pago_danos_service.hay_danos_pendientes(reserva.id)
        ):
            raise ValidationError(
                "estado_entrega", "la entrega sigue PENDIENTE mientras haya daños sin pagar"
            )
        reserva.cambiar_estado_entrega(reserva.estado_entrega, ahora)

    async def _notificar_confirmacion(self, reserva: Reserva) -> None:
        """Encola el correo de confirmación; nunca falla la operación que lo origina."""
        if not reserva.usuario_email:
            self._logger.debug(
                "No email on file, skipping confirmation", extra={"reserva_id": reserva.id}
            )
            return
        try:
            area = await self._area_repo.get_by_id(reserva.area_id)
            encolado = self._notification_dispatcher.dispatch(
                build_confirmation_email(reserva, area)
            )
        except Exception:
            self._logger.exception(
                "Confirmation email could not be enqueued", extra={"reserva_id": reserva.id}
            )
            return
        if not encolado:
            self._logger.warning(
                "Confirmation email dropped", extra={"reserva_id": reserva.id}
            )
