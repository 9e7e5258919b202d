"""Entidades del dominio de reservas."""

from app.domain.entities.actor import Actor, RolUsuario
from app.domain.entities.confirmacion import Confirmacion
from app.domain.entities.pago_danos import EstadoPagoDanos, PagoDanos
from app.domain.entities.pago_reserva import Factura, MetodoPago, PagoReserva, PagoStatus
from app.domain.entities.reserva import Area, EstadoEntrega, EstadoReserva, Reserva

__all__ = [
    # Actor
    "Actor",
    "RolUsuario",
    # Reserva
    "Area",
    "Reserva",
    "EstadoReserva",
    "EstadoEntrega",
    # Confirmacion
    "Confirmacion",
    # PagoReserva
    "PagoReserva",
    "PagoStatus",
    "MetodoPago",
    "Factura",
    # PagoDanos
    "PagoDanos",
    "EstadoPagoDanos",
]
