"""
Tests del flujo de reservas sobre el store in-memory.

Cubren creación atómica, notificación en el flanco a CONFIRMED, visibilidad
por rol, reportes, borrado simple y en cascada, y la gestión de entrega.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from app.application.schemas import EntregaInput
from app.domain.entities.pago_danos import EstadoPagoDanos
from app.domain.entities.pago_reserva import Factura, MetodoPago, PagoStatus
from app.domain.entities.reserva import EstadoEntrega, EstadoReserva
from app.domain.errors import (
    PermissionDeniedError,
    ReservaNotFoundError,
    TransactionError,
    ValidationError,
)
from app.infrastructure.in_memory import InMemoryConfirmacionRepo, InMemoryPagoReservaRepo
from tests.helpers import FIXED_NOW, RecordingDispatcher


class FailingPagoReservaRepo(InMemoryPagoReservaRepo):
    async def create(self, pago):
        raise TransactionError("create pago_reserva", "falla inyectada")


class FailingConfirmacionDeleteRepo(InMemoryConfirmacionRepo):
    async def delete_by_reserva(self, reserva_id):
        raise TransactionError("delete confirmacion", "falla inyectada")


def _row_counts(database) -> dict[str, int]:
    return {
        "reservas": len(database.reservas),
        "confirmaciones": len(database.confirmaciones),
        "pagos_reserva": len(database.pagos_reserva),
        "facturas": len(database.facturas),
        "pagos_danos": len(database.pagos_danos),
    }


# ============================================================================
# CREATE
# ============================================================================

class TestCreate:
    async def test_create_persists_reserva_confirmacion_and_pago(
        self, reserva_service, reserva_payload, database
    ):
        creada = await reserva_service.create(reserva_payload)

        assert creada.reserva.id is not None
        assert creada.reserva.estado == EstadoReserva.PENDING
        assert creada.reserva.fecha_creacion == FIXED_NOW
        assert creada.confirmacion.reserva_id == creada.reserva.id
        assert creada.confirmacion.codigo_qr.startswith(f"QR-{creada.reserva.id}-")
        assert creada.pago_reserva.estado == PagoStatus.PENDING
        assert creada.pago_reserva.metodo_pago == MetodoPago.QR_CODE
        assert creada.pago_reserva.monto == reserva_payload.costo
        assert creada.pago_reserva.referencia_pago.startswith(
            f"PAGO-RESERVA-{creada.reserva.id}-"
        )
        assert _row_counts(database) == {
            "reservas": 1,
            "confirmaciones": 1,
            "pagos_reserva": 1,
            "facturas": 0,
            "pagos_danos": 0,
        }

    async def test_create_enqueues_confirmation_email(
        self, reserva_service, reserva_payload, dispatcher
    ):
        creada = await reserva_service.create(reserva_payload)

        assert len(dispatcher.emails) == 1
        email = dispatcher.emails[0]
        assert email.email_destino == "ana@example.com"
        assert email.nombre_usuario == "Ana López"
        assert email.numero_reserva == str(creada.reserva.id)
        assert email.nombre_area == "Salón de Eventos"
        assert email.fecha_reserva == "20/3/2025"
        assert email.hora_inicio == "18:00"
        assert email.hora_fin == "22:00"
        assert email.precio == Decimal("1500.00")

    async def test_create_without_email_skips_notification(
        self, reserva_service, reserva_payload, dispatcher
    ):
        await reserva_service.create(reserva_payload.model_copy(update={"usuario_email": None}))
        assert dispatcher.emails == []

    async def test_email_uses_fallbacks_for_unknown_area_and_name(
        self, reserva_service, reserva_payload, dispatcher
    ):
        await reserva_service.create(
            reserva_payload.model_copy(update={"area_id": 99, "usuario_nombre": None})
        )
        assert dispatcher.emails[0].nombre_area == "Área 99"
        assert dispatcher.emails[0].nombre_usuario == "Cliente"

    async def test_dispatch_failure_does_not_fail_create(
        self, service_factory, reserva_payload, database
    ):
        reserva_service, _ = service_factory(dispatcher=RecordingDispatcher(fail=True))

        creada = await reserva_service.create(reserva_payload)

        assert creada.reserva.id in database.reservas

    @pytest.mark.parametrize(
        "update, field",
        [
            ({"usuario_id": None}, "usuario_id"),
            ({"costo": None}, "costo"),
            ({"costo": Decimal("-1")}, "costo"),
            ({"fin": datetime(2025, 3, 20, 18, 0, tzinfo=timezone.utc)}, "fin"),
        ],
    )
    async def test_create_validation(self, reserva_service, reserva_payload, database, update, field):
        with pytest.raises(ValidationError) as exc:
            await reserva_service.create(reserva_payload.model_copy(update=update))
        assert exc.value.field == field
        assert database.reservas == {}

    async def test_create_is_atomic_when_payment_insert_fails(
        self, service_factory, repos, database, reserva_payload, dispatcher
    ):
        reserva_service, _ = service_factory(
            pago_reserva_repo=FailingPagoReservaRepo(database)
        )

        with pytest.raises(TransactionError):
            await reserva_service.create(reserva_payload)

        assert _row_counts(database) == {
            "reservas": 0,
            "confirmaciones": 0,
            "pagos_reserva": 0,
            "facturas": 0,
            "pagos_danos": 0,
        }
        assert dispatcher.emails == []


# ============================================================================
# READS
# ============================================================================

class TestReads:
    async def test_find_all_filters_casual_users(
        self, reserva_service, reserva_payload, casual, otro_casual, admin
    ):
        await reserva_service.create(reserva_payload)
        await reserva_service.create(reserva_payload.model_copy(update={"usuario_id": "u-200"}))

        propias = await reserva_service.find_all(casual)
        ajenas = await reserva_service.find_all(otro_casual)
        todas = await reserva_service.find_all(admin)

        assert [d.reserva.usuario_id for d in propias] == ["u-100"]
        assert [d.reserva.usuario_id for d in ajenas] == ["u-200"]
        assert len(todas) == 2

    async def test_find_all_includes_relations(self, reserva_service, reserva_payload, admin):
        creada = await reserva_service.create(reserva_payload)

        [detalle] = await reserva_service.find_all(admin)

        assert detalle.area.nombre == "Salón de Eventos"
        assert detalle.confirmacion.id == creada.confirmacion.id
        assert [p.id for p in detalle.pagos_reserva] == [creada.pago_reserva.id]
        assert detalle.pagos_danos == []

    async def test_calendar_lists_everything(self, reserva_service, reserva_payload):
        await reserva_service.create(reserva_payload)
        await reserva_service.create(reserva_payload.model_copy(update={"usuario_id": "u-200"}))
        assert len(await reserva_service.find_all_for_calendar()) == 2

    async def test_find_one_not_found(self, reserva_service):
        with pytest.raises(ReservaNotFoundError):
            await reserva_service.find_one(404)

    async def test_find_one_with_factura_owner_and_super_user(
        self, reserva_service, reserva_payload, repos, casual, super_user
    ):
        creada = await reserva_service.create(reserva_payload)
        factura = await repos["factura_repo"].create(
            Factura(
                pago_reserva_id=creada.pago_reserva.id,
                numero="F-0001",
                monto=Decimal("1500.00"),
                fecha_emision=FIXED_NOW,
            )
        )

        propio = await reserva_service.find_one_with_factura(creada.reserva.id, casual)
        global_ = await reserva_service.find_one_with_factura(creada.reserva.id, super_user)

        assert propio.factura.id == factura.id
        assert global_.factura.numero == "F-0001"

    async def test_find_one_with_factura_without_invoice(
        self, reserva_service, reserva_payload, casual
    ):
        creada = await reserva_service.create(reserva_payload)
        detalle = await reserva_service.find_one_with_factura(creada.reserva.id, casual)
        assert detalle.factura is None

    async def test_find_one_with_factura_denies_others(
        self, reserva_service, reserva_payload, otro_casual, admin
    ):
        creada = await reserva_service.create(reserva_payload)

        with pytest.raises(PermissionDeniedError):
            await reserva_service.find_one_with_factura(creada.reserva.id, otro_casual)
        with pytest.raises(PermissionDeniedError):
            await reserva_service.find_one_with_factura(creada.reserva.id, admin)

    async def test_find_one_with_factura_not_found(self, reserva_service, super_user):
        with pytest.raises(ReservaNotFoundError):
            await reserva_service.find_one_with_factura(404, super_user)


class TestReports:
    async def _seed(self, reserva_service, reserva_payload):
        for dia in (1, 15, 31):
            await reserva_service.create(
                reserva_payload.model_copy(
                    update={
                        "inicio": datetime(2025, 3, dia, 20, 0, tzinfo=timezone.utc),
                        "fin": datetime(2025, 3, dia, 23, 0, tzinfo=timezone.utc),
                    }
                )
            )

    async def test_reports_include_whole_last_day(self, reserva_service, reserva_payload):
        await self._seed(reserva_service, reserva_payload)

        detalles = await reserva_service.find_all_for_reports(date(2025, 3, 15), date(2025, 3, 31))

        assert [d.reserva.inicio.day for d in detalles] == [15, 31]

    async def test_reports_without_both_dates_are_unfiltered(
        self, reserva_service, reserva_payload
    ):
        await self._seed(reserva_service, reserva_payload)

        assert len(await reserva_service.find_all_for_reports()) == 3
        assert len(await reserva_service.find_all_for_reports(date(2025, 3, 15), None)) == 3

    async def test_reports_reject_inverted_range(self, reserva_service):
        with pytest.raises(ValidationError):
            await reserva_service.find_all_for_reports(date(2025, 3, 31), date(2025, 3, 1))


# ============================================================================
# UPDATE
# ============================================================================

class TestUpdate:
    async def test_pending_to_confirmed_sends_exactly_one_email(
        self, reserva_service, reserva_payload, dispatcher
    ):
        creada = await reserva_service.create(reserva_payload)
        dispatcher.emails.clear()

        detalle = await reserva_service.update(creada.reserva.id, {"estado": "CONFIRMED"})

        assert detalle.reserva.estado == EstadoReserva.CONFIRMED
        assert detalle.area.nombre == "Salón de Eventos"
        assert len(dispatcher.emails) == 1

    async def test_repeating_confirmed_sends_nothing(
        self, reserva_service, reserva_payload, dispatcher
    ):
        creada = await reserva_service.create(reserva_payload)
        await reserva_service.update(creada.reserva.id, {"estado": "CONFIRMED"})
        dispatcher.emails.clear()

        await reserva_service.update(creada.reserva.id, {"estado": "CONFIRMED"})

        assert dispatcher.emails == []

    async def test_same_state_sends_nothing(self, reserva_service, reserva_payload, dispatcher):
        creada = await reserva_service.create(reserva_payload)
        dispatcher.emails.clear()

        await reserva_service.update(creada.reserva.id, {"estado": "PENDING"})
        await reserva_service.update(creada.reserva.id, {"costo": Decimal("900")})

        assert dispatcher.emails == []

    async def test_confirmation_without_email_sends_nothing(
        self, reserva_service, reserva_payload, dispatcher
    ):
        creada = await reserva_service.create(
            reserva_payload.model_copy(update={"usuario_email": None})
        )
        await reserva_service.update(creada.reserva.id, {"estado": "CONFIRMED"})
        assert dispatcher.emails == []

    async def test_update_invalid_window_rolls_back(
        self, reserva_service, reserva_payload, database
    ):
        creada = await reserva_service.create(reserva_payload)

        with pytest.raises(ValidationError):
            await reserva_service.update(
                creada.reserva.id,
                {"fin": datetime(2025, 3, 20, 10, 0, tzinfo=timezone.utc)},
            )

        assert database.reservas[creada.reserva.id].fin == creada.reserva.fin

    async def test_update_not_found(self, reserva_service):
        with pytest.raises(ReservaNotFoundError):
            await reserva_service.update(404, {"estado": "CONFIRMED"})

    async def test_entregado_rejected_while_damages_unpaid(
        self, reserva_service, pago_danos_service, reserva_payload, admin, database
    ):
        creada = await reserva_service.create(reserva_payload)
        await pago_danos_service.create(creada.reserva.id, Decimal("50"), "Lámpara", admin)

        with pytest.raises(ValidationError):
            await reserva_service.update(
                creada.reserva.id, {"estado_entrega": "ENTREGADO"}, admin
            )

        stored = database.reservas[creada.reserva.id]
        assert stored.estado_entrega == EstadoEntrega.PENDIENTE
        assert stored.fecha_entrega is None

    async def test_entregado_without_pending_damages_stamps_fecha(
        self, reserva_service, reserva_payload, admin, database
    ):
        creada = await reserva_service.create(reserva_payload)

        detalle = await reserva_service.update(
            creada.reserva.id, {"estado_entrega": "ENTREGADO"}, admin
        )

        assert detalle.reserva.estado_entrega == EstadoEntrega.ENTREGADO
        assert detalle.reserva.fecha_entrega == FIXED_NOW
        assert database.reservas[creada.reserva.id].fecha_entrega == FIXED_NOW

    async def test_back_to_pendiente_clears_fecha(
        self, reserva_service, reserva_payload, admin
    ):
        creada = await reserva_service.create(reserva_payload)
        await reserva_service.update(creada.reserva.id, {"estado_entrega": "ENTREGADO"}, admin)

        detalle = await reserva_service.update(
            creada.reserva.id, {"estado_entrega": "PENDIENTE"}, admin
        )

        assert detalle.reserva.fecha_entrega is None

    async def test_casual_cannot_touch_delivery_fields(
        self, reserva_service, reserva_payload, casual
    ):
        creada = await reserva_service.create(reserva_payload)

        with pytest.raises(PermissionDeniedError):
            await reserva_service.update(
                creada.reserva.id, {"estado_entrega": "ENTREGADO"}, casual
            )

    async def test_casual_only_updates_own_reservations(
        self, reserva_service, reserva_payload, casual, otro_casual, database
    ):
        creada = await reserva_service.create(reserva_payload)

        with pytest.raises(PermissionDeniedError):
            await reserva_service.update(creada.reserva.id, {"costo": Decimal("1")}, otro_casual)
        detalle = await reserva_service.update(creada.reserva.id, {"costo": Decimal("900")}, casual)

        assert detalle.reserva.costo == Decimal("900")
        assert database.reservas[creada.reserva.id].costo == Decimal("900")


# ============================================================================
# DELETE
# ============================================================================

class TestRemove:
    async def test_remove_fails_when_children_exist(
        self, reserva_service, reserva_payload, database
    ):
        creada = await reserva_service.create(reserva_payload)

        with pytest.raises(TransactionError):
            await reserva_service.remove(creada.reserva.id)

        assert creada.reserva.id in database.reservas

    async def test_remove_deletes_bare_reserva(self, reserva_service, reserva_payload, database, repos):
        creada = await reserva_service.create(reserva_payload)
        await repos["confirmacion_repo"].delete_by_reserva(creada.reserva.id)
        await repos["pago_reserva_repo"].delete_by_reserva(creada.reserva.id)

        borrada = await reserva_service.remove(creada.reserva.id)

        assert borrada.id == creada.reserva.id
        assert database.reservas == {}

    async def test_remove_not_found(self, reserva_service):
        with pytest.raises(ReservaNotFoundError):
            await reserva_service.remove(404)

    async def test_cascade_removes_every_child(
        self, reserva_service, pago_danos_service, reserva_payload, database, repos, admin
    ):
        creada = await reserva_service.create(reserva_payload)
        otra = await reserva_service.create(reserva_payload.model_copy(update={"usuario_id": "u-200"}))
        await repos["factura_repo"].create(
            Factura(pago_reserva_id=creada.pago_reserva.id, numero="F-1", monto=Decimal("1500"))
        )
        await pago_danos_service.create(creada.reserva.id, Decimal("200"), "Mesa rota", admin)

        borrada = await reserva_service.remove_with_cascade(creada.reserva.id)

        assert borrada.id == creada.reserva.id
        assert list(database.reservas) == [otra.reserva.id]
        assert all(c.reserva_id == otra.reserva.id for c in database.confirmaciones.values())
        assert all(p.reserva_id == otra.reserva.id for p in database.pagos_reserva.values())
        assert database.facturas == {}
        assert database.pagos_danos == {}

    async def test_cascade_is_atomic_under_failure(
        self, service_factory, reserva_payload, database, admin
    ):
        reserva_service, pago_danos_service = service_factory(
            confirmacion_repo=FailingConfirmacionDeleteRepo(database)
        )
        creada = await reserva_service.create(reserva_payload)
        await pago_danos_service.create(creada.reserva.id, Decimal("200"), "Mesa rota", admin)
        antes = _row_counts(database)

        with pytest.raises(TransactionError):
            await reserva_service.remove_with_cascade(creada.reserva.id)

        assert _row_counts(database) == antes

    async def test_cascade_not_found(self, reserva_service):
        with pytest.raises(ReservaNotFoundError):
            await reserva_service.remove_with_cascade(404)


# ============================================================================
# ENTREGA
# ============================================================================

class TestGestionarEntrega:
    async def test_delivery_without_damages(self, reserva_service, reserva_payload, admin, database):
        creada = await reserva_service.create(reserva_payload)

        resultado = await reserva_service.gestionar_entrega(
            creada.reserva.id,
            EntregaInput(costo_entrega=Decimal("100"), pago_entrega=True, observaciones_entrega="OK"),
            admin,
        )

        reserva = resultado.reserva
        assert resultado.pago_danos_id is None
        assert reserva.estado_entrega == EstadoEntrega.ENTREGADO
        assert reserva.fecha_entrega == FIXED_NOW
        assert reserva.usuario_entrega == "Admin Torre"
        assert reserva.costo_entrega == Decimal("100")
        assert reserva.pago_entrega is True
        assert reserva.observaciones_entrega == "OK"
        assert database.pagos_danos == {}

    async def test_zero_damages_record_paid_and_delivered(
        self, reserva_service, reserva_payload, admin, database
    ):
        creada = await reserva_service.create(reserva_payload)

        resultado = await reserva_service.gestionar_entrega(
            creada.reserva.id,
            EntregaInput(monto_danos=Decimal("0"), descripcion_danos="Sin daños"),
            admin,
        )

        pago = database.pagos_danos[resultado.pago_danos_id]
        assert pago.estado_pago == EstadoPagoDanos.PAGADO
        assert pago.fecha_pago == FIXED_NOW
        assert resultado.reserva.estado_entrega == EstadoEntrega.ENTREGADO

    async def test_positive_damages_leave_delivery_pending(
        self, reserva_service, reserva_payload, admin, database
    ):
        creada = await reserva_service.create(reserva_payload)

        resultado = await reserva_service.gestionar_entrega(
            creada.reserva.id,
            EntregaInput(
                estado_entrega="ENTREGADO",
                monto_danos=Decimal("350"),
                descripcion_danos="Vidrio roto",
            ),
            admin,
        )

        pago = database.pagos_danos[resultado.pago_danos_id]
        assert pago.estado_pago == EstadoPagoDanos.PENDIENTE
        assert pago.fecha_pago is None
        assert resultado.reserva.estado_entrega == EstadoEntrega.PENDIENTE
        assert resultado.reserva.fecha_entrega is None

    async def test_amount_without_description_registers_no_damages(
        self, reserva_service, reserva_payload, admin, database
    ):
        creada = await reserva_service.create(reserva_payload)

        resultado = await reserva_service.gestionar_entrega(
            creada.reserva.id, EntregaInput(monto_danos=Decimal("350")), admin
        )

        assert resultado.pago_danos_id is None
        assert database.pagos_danos == {}
        assert resultado.reserva.estado_entrega == EstadoEntrega.PENDIENTE

    async def test_outstanding_damages_keep_delivery_pending(
        self, reserva_service, pago_danos_service, reserva_payload, admin
    ):
        creada = await reserva_service.create(reserva_payload)
        await pago_danos_service.create(creada.reserva.id, Decimal("120"), "Silla rota", admin)

        resultado = await reserva_service.gestionar_entrega(
            creada.reserva.id, EntregaInput(observaciones_entrega="Revisión final"), admin
        )

        assert resultado.reserva.estado_entrega == EstadoEntrega.PENDIENTE

    async def test_negative_damages_rejected(self, reserva_service, reserva_payload, admin):
        creada = await reserva_service.create(reserva_payload)
        with pytest.raises(ValidationError):
            await reserva_service.gestionar_entrega(
                creada.reserva.id,
                EntregaInput(monto_danos=Decimal("-1"), descripcion_danos="x"),
                admin,
            )

    async def test_casual_user_cannot_manage_delivery(
        self, reserva_service, reserva_payload, casual, database
    ):
        creada = await reserva_service.create(reserva_payload)

        with pytest.raises(PermissionDeniedError):
            await reserva_service.gestionar_entrega(creada.reserva.id, EntregaInput(), casual)

        assert database.reservas[creada.reserva.id].estado_entrega == EstadoEntrega.PENDIENTE

    async def test_not_found(self, reserva_service, admin):
        with pytest.raises(ReservaNotFoundError):
            await reserva_service.gestionar_entrega(404, EntregaInput(), admin)
