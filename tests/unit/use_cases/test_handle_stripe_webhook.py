import json
from decimal import Decimal

import pytest

from app.application.use_cases.handle_stripe_webhook import HandleStripeWebhookUseCase
from app.domain.entities.pago_danos import EstadoPagoDanos
from app.domain.entities.reserva import EstadoEntrega
from app.domain.errors import PagoDanosNotFoundError, ValidationError
from app.infrastructure.in_memory import StubCheckoutGateway


def _event(
    pago_danos_id,
    event_type="checkout.session.completed",
    tipo="pago_danos",
    payment_intent="pi_test_1",
):
    return json.dumps(
        {
            "id": "evt_test_1",
            "type": event_type,
            "data": {
                "object": {
                    "id": "cs_test_1",
                    "payment_intent": payment_intent,
                    "metadata": {"tipo": tipo, "pago_danos_id": str(pago_danos_id)},
                }
            },
        }
    ).encode()


@pytest.fixture
def use_case(repos, pago_danos_service):
    return HandleStripeWebhookUseCase(
        pago_danos_repo=repos["pago_danos_repo"],
        pago_danos_service=pago_danos_service,
        checkout_gateway=StubCheckoutGateway(),
        stripe_webhook_secret=None,
    )


@pytest.fixture
async def pago_pendiente(reserva_service, pago_danos_service, reserva_payload, admin):
    reserva = (await reserva_service.create(reserva_payload)).reserva
    return await pago_danos_service.create(reserva.id, Decimal("300"), "Puerta", admin)


async def test_completed_checkout_marks_paid_and_releases_delivery(
    use_case, pago_pendiente, database
):
    result = await use_case.execute(_event(pago_pendiente.id), signature=None)

    assert result == "processed"
    pago = database.pagos_danos[pago_pendiente.id]
    assert pago.estado_pago == EstadoPagoDanos.PAGADO
    assert pago.stripe_session_id == "cs_test_1"
    assert pago.stripe_payment_id == "pi_test_1"
    assert pago.usuario_actualiza == "Stripe Webhook"
    assert database.reservas[pago.reserva_id].estado_entrega == EstadoEntrega.ENTREGADO


async def test_replayed_event_is_ignored(use_case, pago_pendiente, database):
    await use_case.execute(_event(pago_pendiente.id), signature=None)
    fecha_pago = database.pagos_danos[pago_pendiente.id].fecha_pago

    result = await use_case.execute(_event(pago_pendiente.id), signature=None)

    assert result == "ignored"
    assert database.pagos_danos[pago_pendiente.id].fecha_pago == fecha_pago


async def test_other_event_types_are_ignored(use_case, pago_pendiente, database):
    result = await use_case.execute(
        _event(pago_pendiente.id, event_type="payment_intent.succeeded"), signature=None
    )

    assert result == "ignored"
    assert database.pagos_danos[pago_pendiente.id].estado_pago == EstadoPagoDanos.PENDIENTE


async def test_sessions_of_other_kinds_are_ignored(use_case, pago_pendiente, database):
    result = await use_case.execute(_event(pago_pendiente.id, tipo="suscripcion"), signature=None)

    assert result == "ignored"
    assert database.pagos_danos[pago_pendiente.id].estado_pago == EstadoPagoDanos.PENDIENTE


async def test_unknown_pago_danos(use_case):
    with pytest.raises(PagoDanosNotFoundError):
        await use_case.execute(_event(404), signature=None)


@pytest.mark.parametrize(
    "body",
    [
        b"",
        b"not-json",
        json.dumps({"data": {}}).encode(),
        _event("abc"),
    ],
)
async def test_malformed_payloads(use_case, body):
    with pytest.raises(ValidationError):
        await use_case.execute(body, signature=None)


async def test_completed_checkout_without_payment_intent_is_rejected(
    use_case, pago_pendiente, database
):
    with pytest.raises(ValidationError):
        await use_case.execute(_event(pago_pendiente.id, payment_intent=None), signature=None)

    pago = database.pagos_danos[pago_pendiente.id]
    assert pago.estado_pago == EstadoPagoDanos.PENDIENTE
    assert pago.stripe_payment_id is None
