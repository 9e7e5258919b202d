"""Entidad PagoReserva - cobro principal por ocupar la ventana reservada."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from app.domain.constants import REFERENCIA_PAGO_PREFIX


class PagoStatus(str, Enum):
    """Estados posibles del pago de una reserva."""

    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class MetodoPago(str, Enum):
    """Métodos de pago aceptados."""

    QR_CODE = "QR_CODE"
    CARD = "CARD"
    CASH = "CASH"
    TRANSFER = "TRANSFER"


@dataclass
class Factura:
    """Factura emitida sobre un pago de reserva (a lo sumo una por pago)."""

    pago_reserva_id: int
    numero: str
    monto: Decimal
    id: int | None = None
    fecha_emision: datetime | None = None


@dataclass
class PagoReserva:
    """
    Pago asociado a una reserva.

    Se crea una sola vez junto con la reserva, en estado PENDING y con el
    monto igual al costo de la reserva.
    """

    reserva_id: int
    monto: Decimal
    referencia_pago: str
    metodo_pago: MetodoPago = MetodoPago.QR_CODE
    estado: PagoStatus = PagoStatus.PENDING
    id: int | None = None
    fecha_creacion: datetime | None = None
    factura: Factura | None = None

    @classmethod
    def create_pending(
        cls,
        reserva_id: int,
        monto: Decimal,
        instante: datetime,
        metodo_pago: MetodoPago = MetodoPago.QR_CODE,
    ) -> "PagoReserva":
        """Factory para el pago inicial de la reserva."""
        return cls(
            reserva_id=reserva_id,
            monto=monto,
            referencia_pago=(
                f"{REFERENCIA_PAGO_PREFIX}-{reserva_id}-{int(instante.timestamp() * 1000)}"
            ),
            metodo_pago=metodo_pago,
            estado=PagoStatus.PENDING,
            fecha_creacion=instante,
        )
