import logging

from app.application.interfaces.notification_gateway import (
    ConfirmacionReservaEmail,
    NotificationGateway,
    NotificationResult,
)

logger = logging.getLogger(__name__)


class LoggingNotificationGateway(NotificationGateway):
    """Registra el correo en el log en vez de enviarlo (modo in-memory)."""

    def __init__(self) -> None:
        self.sent: list[ConfirmacionReservaEmail] = []

    async def send_reservation_confirmation(
        self, email: ConfirmacionReservaEmail
    ) -> NotificationResult:
        self.sent.append(email)
        logger.info(
            "Confirmation email (not sent)",
            extra={
                "email_destino": email.email_destino,
                "numero_reserva": email.numero_reserva,
                "nombre_area": email.nombre_area,
            },
        )
        return NotificationResult(success=True, message="Email registrado en log")
