"""Interfaces (Puertos) de la capa de aplicación."""

from app.application.interfaces.checkout_gateway import CheckoutGateway, CheckoutSession
from app.application.interfaces.clock import Clock, FakeClock, SystemClock
from app.application.interfaces.confirmacion_repo import ConfirmacionRepo
from app.application.interfaces.notification_gateway import (
    ConfirmacionReservaEmail,
    NotificationDispatcher,
    NotificationGateway,
    NotificationResult,
)
from app.application.interfaces.pago_danos_repo import PagoDanosRepo
from app.application.interfaces.pago_reserva_repo import FacturaRepo, PagoReservaRepo
from app.application.interfaces.reserva_query import ReservaDetalle, ReservaQuery
from app.application.interfaces.reserva_repo import AreaRepo, ReservaRepo
from app.application.interfaces.transaction_manager import TransactionManager

__all__ = [
    # Repositories
    "ReservaRepo",
    "AreaRepo",
    "ConfirmacionRepo",
    "PagoReservaRepo",
    "FacturaRepo",
    "PagoDanosRepo",
    "ReservaQuery",
    "ReservaDetalle",
    # Gateways
    "CheckoutGateway",
    "CheckoutSession",
    "NotificationGateway",
    "NotificationDispatcher",
    "NotificationResult",
    "ConfirmacionReservaEmail",
    # Infrastructure
    "TransactionManager",
    # Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
]
