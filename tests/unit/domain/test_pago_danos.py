from datetime import datetime, timezone
from decimal import Decimal

import pytest

from app.domain.entities.confirmacion import Confirmacion
from app.domain.entities.pago_danos import EstadoPagoDanos, PagoDanos
from app.domain.entities.pago_reserva import MetodoPago, PagoReserva, PagoStatus
from app.domain.errors import ValidationError

AHORA = datetime(2025, 3, 10, 15, 30, tzinfo=timezone.utc)


def _registrar(monto, descripcion="Vidrio roto") -> PagoDanos:
    return PagoDanos.registrar(
        reserva_id=1,
        monto_danos=monto,
        descripcion_danos=descripcion,
        usuario_registra="Admin",
        ahora=AHORA,
    )


def test_zero_damages_are_born_paid():
    pago = _registrar(Decimal("0"), "Sin daños")
    assert pago.estado_pago == EstadoPagoDanos.PAGADO
    assert pago.fecha_pago == AHORA
    assert pago.fecha_registro == AHORA
    assert not pago.bloquea_entrega


def test_positive_damages_are_pending():
    pago = _registrar(Decimal("350.50"))
    assert pago.estado_pago == EstadoPagoDanos.PENDIENTE
    assert pago.fecha_pago is None
    assert pago.bloquea_entrega


@pytest.mark.parametrize(
    "monto, descripcion",
    [(None, "x"), (Decimal("-1"), "x"), (Decimal("10"), ""), (Decimal("10"), None)],
)
def test_registrar_rejects_invalid_input(monto, descripcion):
    with pytest.raises(ValidationError):
        _registrar(monto, descripcion)


def test_aplicar_cambios_stamps_usuario_actualiza():
    pago = _registrar(Decimal("100"))
    pago.aplicar_cambios({"descripcion_danos": "Silla rota"}, usuario="Otro Admin")
    assert pago.descripcion_danos == "Silla rota"
    assert pago.usuario_actualiza == "Otro Admin"


def test_aplicar_cambios_rejects_negative_amount():
    pago = _registrar(Decimal("100"))
    with pytest.raises(ValidationError):
        pago.aplicar_cambios({"monto_danos": Decimal("-5")}, usuario="Admin")


def test_aplicar_cambios_rejects_unknown_fields():
    pago = _registrar(Decimal("100"))
    with pytest.raises(ValidationError):
        pago.aplicar_cambios({"reserva_id": 9}, usuario="Admin")


@pytest.mark.parametrize("campo", ["monto_danos", "descripcion_danos", "estado_pago"])
def test_aplicar_cambios_rejects_null_on_required_fields(campo):
    pago = _registrar(Decimal("100"))
    anterior = getattr(pago, campo)

    with pytest.raises(ValidationError):
        pago.aplicar_cambios({campo: None}, usuario="Admin")

    assert getattr(pago, campo) == anterior
    assert pago.usuario_actualiza is None


@pytest.mark.parametrize("session_id, payment_id", [("", "pi_1"), ("cs_1", ""), ("cs_1", None)])
def test_marcar_pagado_requires_both_external_ids(session_id, payment_id):
    pago = _registrar(Decimal("100"))

    with pytest.raises(ValidationError):
        pago.marcar_pagado(session_id, payment_id, usuario="Admin", ahora=AHORA)

    assert pago.estado_pago == EstadoPagoDanos.PENDIENTE


def test_marcar_pagado():
    pago = _registrar(Decimal("100"))
    pago.marcar_pagado("cs_1", "pi_1", usuario="Stripe Webhook", ahora=AHORA)
    assert pago.estado_pago == EstadoPagoDanos.PAGADO
    assert pago.stripe_session_id == "cs_1"
    assert pago.stripe_payment_id == "pi_1"
    assert pago.fecha_pago == AHORA
    assert pago.usuario_actualiza == "Stripe Webhook"
    assert not pago.bloquea_entrega


def test_confirmacion_emitir_builds_unique_code():
    confirmacion = Confirmacion.emitir(5, AHORA)
    assert confirmacion.codigo_qr == f"QR-5-{int(AHORA.timestamp() * 1000)}"
    assert confirmacion.verificada == "PENDING"


def test_pago_reserva_create_pending():
    pago = PagoReserva.create_pending(5, Decimal("1500.00"), AHORA)
    assert pago.estado == PagoStatus.PENDING
    assert pago.metodo_pago == MetodoPago.QR_CODE
    assert pago.monto == Decimal("1500.00")
    assert pago.referencia_pago == f"PAGO-RESERVA-5-{int(AHORA.timestamp() * 1000)}"
