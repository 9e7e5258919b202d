"""
Capa de Aplicación - Servicio de reservas de áreas comunes.

Esta capa contiene los servicios, casos de uso e interfaces (puertos).
Orquesta la lógica de negocio y define los contratos con la infraestructura.

Estructura:
- services/: Flujo de reservas y de pagos por daños
- use_cases/: Checkout de daños y webhook de Stripe
- interfaces/: Puertos (contratos para adaptadores)
- cascade.py: Borrado ordenado y atómico
- schemas.py: Comandos Pydantic de entrada
"""

from app.application.interfaces import (
    AreaRepo,
    CheckoutGateway,
    Clock,
    ConfirmacionRepo,
    FacturaRepo,
    FakeClock,
    NotificationDispatcher,
    NotificationGateway,
    PagoDanosRepo,
    PagoReservaRepo,
    ReservaQuery,
    ReservaRepo,
    SystemClock,
    TransactionManager,
)

__all__ = [
    # Interfaces - Repositories
    "ReservaRepo",
    "AreaRepo",
    "ConfirmacionRepo",
    "PagoReservaRepo",
    "FacturaRepo",
    "PagoDanosRepo",
    "ReservaQuery",
    # Interfaces - Gateways
    "CheckoutGateway",
    "NotificationGateway",
    "NotificationDispatcher",
    # Interfaces - Infrastructure
    "TransactionManager",
    # Interfaces - Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
]
