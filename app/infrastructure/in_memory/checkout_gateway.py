import json
from decimal import Decimal
from uuid import uuid4

from app.application.interfaces.checkout_gateway import CheckoutGateway, CheckoutSession


class StubCheckoutGateway(CheckoutGateway):
    def __init__(self, base_url: str = "https://checkout.stripe.test/pay") -> None:
        self._base_url = base_url
        self.sessions: list[dict] = []

    async def create_damages_checkout_session(
        self,
        pago_danos_id: int,
        reserva_id: int,
        monto: Decimal,
        descripcion: str,
        payer_email: str | None,
    ) -> CheckoutSession:
        # Simulate a session without calling Stripe
        session_id = f"cs_test_{uuid4().hex[:24]}"
        self.sessions.append(
            {
                "session_id": session_id,
                "pago_danos_id": pago_danos_id,
                "reserva_id": reserva_id,
                "monto": monto,
            }
        )
        return CheckoutSession(session_id=session_id, url=f"{self._base_url}/{session_id}")

    async def parse_webhook_event(
        self,
        payload: bytes,
        signature_header: str | None,
        webhook_secret: str | None,
    ) -> dict:
        if not payload:
            raise ValueError("Empty webhook payload")
        try:
            return json.loads(payload.decode() or "{}")
        except json.JSONDecodeError as exc:
            raise ValueError("Invalid webhook payload") from exc
