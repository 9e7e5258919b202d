"""
Capa de Dominio - Servicio de reservas de áreas comunes.

Esta capa contiene la lógica de negocio pura, sin dependencias de frameworks.
Incluye entidades, value objects y excepciones de dominio.

Estructura:
- entities/: Entidades del dominio (Reserva, PagoDanos, etc.)
- value_objects/: Objetos de valor inmutables (DatetimeRange)
- errors.py: Excepciones específicas del dominio
- constants.py: Constantes del dominio
"""

from app.domain.entities import (
    Actor,
    Area,
    Confirmacion,
    EstadoEntrega,
    EstadoPagoDanos,
    EstadoReserva,
    Factura,
    MetodoPago,
    PagoDanos,
    PagoReserva,
    PagoStatus,
    Reserva,
    RolUsuario,
)
from app.domain.errors import (
    DomainError,
    ExternalServiceError,
    NotFoundError,
    PagoDanosNotFoundError,
    PermissionDeniedError,
    ReservaNotFoundError,
    TransactionError,
    ValidationError,
)
from app.domain.value_objects import DatetimeRange

__all__ = [
    # Entities
    "Actor",
    "RolUsuario",
    "Area",
    "Reserva",
    "EstadoReserva",
    "EstadoEntrega",
    "Confirmacion",
    "PagoReserva",
    "PagoStatus",
    "MetodoPago",
    "Factura",
    "PagoDanos",
    "EstadoPagoDanos",
    # Value Objects
    "DatetimeRange",
    # Errors
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "ReservaNotFoundError",
    "PagoDanosNotFoundError",
    "PermissionDeniedError",
    "TransactionError",
    "ExternalServiceError",
]
