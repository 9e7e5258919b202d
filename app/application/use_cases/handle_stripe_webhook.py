import logging
from typing import Any

from app.application.interfaces.checkout_gateway import CheckoutGateway
from app.application.interfaces.pago_danos_repo import PagoDanosRepo
from app.application.services.pago_danos_service import PagoDanosService
from app.domain.constants import STRIPE_METADATA_TIPO_PAGO_DANOS
from app.domain.entities.actor import Actor
from app.domain.entities.pago_danos import EstadoPagoDanos
from app.domain.errors import PagoDanosNotFoundError, ValidationError

CHECKOUT_COMPLETED = "checkout.session.completed"


class HandleStripeWebhookUseCase:
    def __init__(
        self,
        pago_danos_repo: PagoDanosRepo,
        pago_danos_service: PagoDanosService,
        checkout_gateway: CheckoutGateway,
        stripe_webhook_secret: str | None,
    ) -> None:
        self._pago_danos_repo = pago_danos_repo
        self._pago_danos_service = pago_danos_service
        self._checkout_gateway = checkout_gateway
        self._stripe_webhook_secret = stripe_webhook_secret
        self._logger = logging.getLogger(__name__)

    async def execute(self, raw_body: bytes, signature: str | None) -> str:
        """
        Procesa un evento de Stripe.

        Returns:
            "processed" si se marcó un pago, "ignored" en cualquier otro caso.
        """
        if not raw_body:
            raise ValidationError("body", "webhook vacío")
        try:
            event = await self._checkout_gateway.parse_webhook_event(
                payload=raw_body,
                signature_header=signature,
                webhook_secret=self._stripe_webhook_secret,
            )
        except ValueError as exc:
            raise ValidationError("body", str(exc)) from exc

        event_type = event.get("type")
        if not event_type:
            raise ValidationError("type", "evento sin tipo")
        if event_type != CHECKOUT_COMPLETED:
            self._logger.info("Stripe event ignored", extra={"event_type": event_type})
            return "ignored"

        session = self._extract_session(event)
        metadata = session.get("metadata") or {}
        if metadata.get("tipo") != STRIPE_METADATA_TIPO_PAGO_DANOS:
            self._logger.info(
                "Checkout session is not a damages payment",
                extra={"stripe_session_id": session.get("id")},
            )
            return "ignored"

        try:
            pago_danos_id = int(metadata["pago_danos_id"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ValidationError("metadata.pago_danos_id", "identificador inválido") from exc

        pago = await self._pago_danos_repo.get_by_id(pago_danos_id)
        if not pago:
            raise PagoDanosNotFoundError(pago_danos_id)
        if pago.estado_pago == EstadoPagoDanos.PAGADO:
            self._logger.info(
                "Damages payment already paid", extra={"pago_danos_id": pago_danos_id}
            )
            return "ignored"

        stripe_session_id = session.get("id")
        stripe_payment_id = session.get("payment_intent")
        if not stripe_session_id or not stripe_payment_id:
            self._logger.warning(
                "Stripe webhook without session or payment intent id",
                extra={"stripe_event_id": event.get("id"), "pago_danos_id": pago_danos_id},
            )
            raise ValidationError(
                "data.object", "la sesión debe traer id y payment_intent"
            )

        await self._pago_danos_service.marcar_como_pagado(
            pago_danos_id=pago_danos_id,
            stripe_session_id=stripe_session_id,
            stripe_payment_id=stripe_payment_id,
            actor=Actor.system(nombre="Stripe Webhook"),
        )
        self._logger.info(
            "Stripe webhook processed: damages paid",
            extra={
                "stripe_event_id": event.get("id"),
                "pago_danos_id": pago_danos_id,
                "stripe_session_id": stripe_session_id,
            },
        )
        return "processed"

    def _extract_session(self, event: dict[str, Any]) -> dict[str, Any]:
        data = event.get("data")
        data_obj = data.get("object", {}) if isinstance(data, dict) else {}
        return data_obj if isinstance(data_obj, dict) else {}
