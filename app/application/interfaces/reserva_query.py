"""Interface ReservaQuery - lectura de reservas con sus relaciones cargadas."""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.entities.confirmacion import Confirmacion
from app.domain.entities.pago_danos import PagoDanos
from app.domain.entities.pago_reserva import Factura, PagoReserva
from app.domain.entities.reserva import Area, Reserva


@dataclass
class ReservaDetalle:
    """Reserva con area, confirmacion, pagos_reserva y pagos_danos."""

    reserva: Reserva
    area: Area | None = None
    confirmacion: Confirmacion | None = None
    pagos_reserva: list[PagoReserva] = field(default_factory=list)
    pagos_danos: list[PagoDanos] = field(default_factory=list)

    @property
    def factura(self) -> Factura | None:
        """Primera factura encontrada entre los pagos (se espera a lo sumo una)."""
        for pago in self.pagos_reserva:
            if pago.factura:
                return pago.factura
        return None


class ReservaQuery:
    async def get_detalle(self, reserva_id: int) -> ReservaDetalle | None:
        raise NotImplementedError

    async def list_detalles(
        self,
        usuario_id: str | None = None,
        inicio_desde: datetime | None = None,
        inicio_hasta: datetime | None = None,
    ) -> list[ReservaDetalle]:
        raise NotImplementedError
