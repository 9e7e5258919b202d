"""Entidad Confirmacion - token de verificación emitido con cada reserva."""

from dataclasses import dataclass
from datetime import datetime

from app.domain.constants import CODIGO_QR_PREFIX, CONFIRMACION_PENDIENTE


def codigo_qr_para(reserva_id: int, instante: datetime) -> str:
    """Código único derivado del id de la reserva y el instante de creación."""
    return f"{CODIGO_QR_PREFIX}-{reserva_id}-{int(instante.timestamp() * 1000)}"


@dataclass
class Confirmacion:
    """Confirmación (código QR) asociada uno a uno con una reserva."""

    reserva_id: int
    codigo_qr: str
    verificada: str = CONFIRMACION_PENDIENTE
    id: int | None = None
    fecha_creacion: datetime | None = None

    @classmethod
    def emitir(cls, reserva_id: int, instante: datetime) -> "Confirmacion":
        """Factory para la confirmación inicial, todavía sin verificar."""
        return cls(
            reserva_id=reserva_id,
            codigo_qr=codigo_qr_para(reserva_id, instante),
            verificada=CONFIRMACION_PENDIENTE,
            fecha_creacion=instante,
        )
