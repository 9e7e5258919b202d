"""
Capa de Infraestructura - Servicio de reservas de áreas comunes.

Esta capa contiene las implementaciones concretas de los puertos (interfaces).
Incluye adaptadores para bases de datos, gateways externos y mensajería.

Estructura:
- db/: Tablas, repositorios SQL, transacciones y reintentos
- gateways/: Adaptadores para servicios externos (Stripe, SendGrid)
- in_memory/: Implementaciones in-memory para desarrollo y testing
- messaging/: Envío de correos en segundo plano
"""

# Database
from app.infrastructure.db.queries.reserva_query_sql import ReservaQuerySQL
from app.infrastructure.db.repositories.confirmacion_repo_sql import ConfirmacionRepoSQL
from app.infrastructure.db.repositories.pago_danos_repo_sql import PagoDanosRepoSQL
from app.infrastructure.db.repositories.pago_reserva_repo_sql import (
    FacturaRepoSQL,
    PagoReservaRepoSQL,
)
from app.infrastructure.db.repositories.reserva_repo_sql import AreaRepoSQL, ReservaRepoSQL
from app.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager

# Gateways
from app.infrastructure.gateways.sendgrid_email_gateway import SendGridEmailGateway
from app.infrastructure.gateways.stripe_checkout_gateway import StripeCheckoutGateway

# In-Memory (for testing)
from app.infrastructure.in_memory import (
    InMemoryAreaRepo,
    InMemoryConfirmacionRepo,
    InMemoryDatabase,
    InMemoryFacturaRepo,
    InMemoryPagoDanosRepo,
    InMemoryPagoReservaRepo,
    InMemoryReservaQuery,
    InMemoryReservaRepo,
    InMemoryTransactionManager,
    LoggingNotificationGateway,
    StubCheckoutGateway,
)

# Messaging
from app.infrastructure.messaging.notification_dispatcher import QueuedNotificationDispatcher

__all__ = [
    # Database - Repositories SQL
    "ReservaRepoSQL",
    "AreaRepoSQL",
    "ConfirmacionRepoSQL",
    "PagoReservaRepoSQL",
    "FacturaRepoSQL",
    "PagoDanosRepoSQL",
    "ReservaQuerySQL",
    "SQLAlchemyTransactionManager",
    # Gateways
    "StripeCheckoutGateway",
    "SendGridEmailGateway",
    # In-Memory Implementations
    "InMemoryDatabase",
    "InMemoryReservaRepo",
    "InMemoryAreaRepo",
    "InMemoryConfirmacionRepo",
    "InMemoryPagoReservaRepo",
    "InMemoryFacturaRepo",
    "InMemoryPagoDanosRepo",
    "InMemoryReservaQuery",
    "InMemoryTransactionManager",
    "StubCheckoutGateway",
    "LoggingNotificationGateway",
    # Messaging
    "QueuedNotificationDispatcher",
]
