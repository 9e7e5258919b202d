import asyncio
import json
import logging
from decimal import ROUND_HALF_UP, Decimal

import stripe

from app.application.interfaces.checkout_gateway import CheckoutGateway, CheckoutSession
from app.config import get_settings
from app.domain.constants import STRIPE_METADATA_TIPO_PAGO_DANOS
from app.domain.errors import ExternalServiceError
from app.infrastructure.circuit_breaker import CircuitBreakerError, stripe_breaker

logger = logging.getLogger(__name__)


def to_minor_units(amount: Decimal) -> int:
    """Convierte un monto a centavos (Stripe trabaja en la unidad menor)."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class StripeCheckoutGateway(CheckoutGateway):
    def __init__(
        self,
        api_key: str | None = None,
        currency: str | None = None,
        success_url: str | None = None,
        cancel_url: str | None = None,
    ) -> None:
        settings = get_settings()
        stripe.api_key = api_key or settings.stripe_api_key
        stripe.max_network_retries = 2  # Retry failed requests up to 2 times
        self._currency = (currency or settings.stripe_currency).lower()
        self._success_url = success_url or settings.checkout_success_url
        self._cancel_url = cancel_url or settings.checkout_cancel_url

    async def create_damages_checkout_session(
        self,
        pago_danos_id: int,
        reserva_id: int,
        monto: Decimal,
        descripcion: str,
        payer_email: str | None,
    ) -> CheckoutSession:
        """
        Create a Stripe Checkout session for a damages charge, protected by Circuit Breaker.

        Raises:
            ExternalServiceError: When the circuit is open or the Stripe API call fails.
        """
        metadata = {
            "tipo": STRIPE_METADATA_TIPO_PAGO_DANOS,
            "pago_danos_id": str(pago_danos_id),
            "reserva_id": str(reserva_id),
        }
        params = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": self._currency,
                        "unit_amount": to_minor_units(monto),
                        "product_data": {
                            "name": f"Pago por daños - Reserva #{reserva_id}",
                            "description": descripcion,
                        },
                    },
                    "quantity": 1,
                }
            ],
            "metadata": metadata,
            "payment_intent_data": {"metadata": metadata},
            "success_url": self._success_url,
            "cancel_url": self._cancel_url,
        }
        if payer_email:
            params["customer_email"] = payer_email

        try:
            # stripe does not have an async client; run the sync call in a thread
            session = await asyncio.to_thread(
                stripe_breaker.call, stripe.checkout.Session.create, **params
            )
        except CircuitBreakerError as e:
            logger.error(
                "Stripe circuit breaker is open - service unavailable",
                extra={"circuit_state": str(e), "pago_danos_id": pago_danos_id},
            )
            raise ExternalServiceError("stripe", "servicio no disponible") from e
        except stripe.StripeError as e:
            logger.error(
                "Stripe API error",
                exc_info=e,
                extra={"pago_danos_id": pago_danos_id},
            )
            raise ExternalServiceError("stripe", str(e)) from e

        return CheckoutSession(session_id=session.id, url=session.url)

    async def parse_webhook_event(
        self,
        payload: bytes,
        signature_header: str | None,
        webhook_secret: str | None,
    ) -> dict:
        if webhook_secret:
            if not signature_header:
                raise ValueError("Missing Stripe-Signature header")
            try:
                event = stripe.Webhook.construct_event(
                    payload=payload.decode(),
                    sig_header=signature_header,
                    secret=webhook_secret,
                )
            except stripe.SignatureVerificationError as exc:
                raise ValueError("Invalid Stripe signature") from exc
            except Exception as exc:  # noqa: BLE001
                raise ValueError("Invalid Stripe webhook payload") from exc
        else:
            try:
                event = stripe.Event.construct_from(
                    json.loads(payload.decode() or "{}"), stripe.api_key
                )
            except Exception as exc:  # noqa: BLE001
                raise ValueError("Invalid webhook payload") from exc

        return event.to_dict() if hasattr(event, "to_dict") else dict(event)
