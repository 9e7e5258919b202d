"""Implementaciones in-memory para desarrollo y testing."""

from app.infrastructure.in_memory.checkout_gateway import StubCheckoutGateway
from app.infrastructure.in_memory.confirmacion_repo import InMemoryConfirmacionRepo
from app.infrastructure.in_memory.database import InMemoryDatabase
from app.infrastructure.in_memory.notification_gateway import LoggingNotificationGateway
from app.infrastructure.in_memory.pago_danos_repo import InMemoryPagoDanosRepo
from app.infrastructure.in_memory.pago_reserva_repo import (
    InMemoryFacturaRepo,
    InMemoryPagoReservaRepo,
)
from app.infrastructure.in_memory.reserva_query import InMemoryReservaQuery
from app.infrastructure.in_memory.reserva_repo import InMemoryAreaRepo, InMemoryReservaRepo
from app.infrastructure.in_memory.transaction_manager import InMemoryTransactionManager

__all__ = [
    # Store
    "InMemoryDatabase",
    # Repositories
    "InMemoryReservaRepo",
    "InMemoryAreaRepo",
    "InMemoryConfirmacionRepo",
    "InMemoryPagoReservaRepo",
    "InMemoryFacturaRepo",
    "InMemoryPagoDanosRepo",
    "InMemoryReservaQuery",
    # Gateways
    "StubCheckoutGateway",
    "LoggingNotificationGateway",
    # Infrastructure
    "InMemoryTransactionManager",
]
