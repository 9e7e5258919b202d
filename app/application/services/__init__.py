from app.application.services.pago_danos_service import PagoDanosDetalle, PagoDanosService
from app.application.services.reserva_service import (
    EntregaResultado,
    ReservaCreada,
    ReservaService,
)

__all__ = [
    "EntregaResultado",
    "PagoDanosDetalle",
    "PagoDanosService",
    "ReservaCreada",
    "ReservaService",
]
