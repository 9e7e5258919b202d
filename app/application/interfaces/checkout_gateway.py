from dataclasses import dataclass
from decimal import Decimal
from typing import Any


@dataclass
class CheckoutSession:
    session_id: str
    url: str


class CheckoutGateway:
    async def create_damages_checkout_session(
        self,
        pago_danos_id: int,
        reserva_id: int,
        monto: Decimal,
        descripcion: str,
        payer_email: str | None,
    ) -> CheckoutSession:
        """
        Crea una sesión de checkout redirigible para un pago por daños.

        Raises:
            ExternalServiceError: si la pasarela no pudo crear la sesión.
        """
        raise NotImplementedError

    async def parse_webhook_event(
        self,
        payload: bytes,
        signature_header: str | None,
        webhook_secret: str | None,
    ) -> dict[str, Any]:
        raise NotImplementedError
