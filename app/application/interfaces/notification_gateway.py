"""Interfaces de notificación - envío de correos transaccionales."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ConfirmacionReservaEmail:
    """Datos estructurados del correo de confirmación de reserva."""

    email_destino: str
    nombre_usuario: str
    numero_reserva: str
    nombre_area: str
    fecha_reserva: str
    hora_inicio: str
    hora_fin: str
    precio: Decimal | None = None


@dataclass
class NotificationResult:
    success: bool
    message: str
    error: str | None = None


class NotificationGateway(ABC):
    @abstractmethod
    async def send_reservation_confirmation(
        self, email: ConfirmacionReservaEmail
    ) -> NotificationResult:
        """
        Renderiza y envía el correo de confirmación.

        Nunca lanza excepciones: cualquier falla se reporta en el resultado.
        """
        raise NotImplementedError


class NotificationDispatcher(ABC):
    @abstractmethod
    def dispatch(self, email: ConfirmacionReservaEmail) -> bool:
        """
        Encola el correo para envío en segundo plano sin esperar el resultado.

        Returns:
            True si el correo quedó encolado.
        """
        raise NotImplementedError
