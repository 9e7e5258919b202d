from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from app.domain.entities.pago_danos import EstadoPagoDanos
from app.domain.entities.pago_reserva import MetodoPago, PagoStatus
from app.domain.entities.reserva import EstadoEntrega, EstadoReserva


class OrmModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class AreaResponse(OrmModel):
    id: int
    nombre: str


class ConfirmacionResponse(OrmModel):
    id: int
    reserva_id: int
    codigo_qr: str
    verificada: str
    fecha_creacion: datetime | None = None


class FacturaResponse(OrmModel):
    id: int
    pago_reserva_id: int
    numero: str
    monto: Decimal
    fecha_emision: datetime | None = None


class PagoReservaResponse(OrmModel):
    id: int
    reserva_id: int
    metodo_pago: MetodoPago
    monto: Decimal
    estado: PagoStatus
    referencia_pago: str
    fecha_creacion: datetime | None = None
    factura: FacturaResponse | None = None


class PagoDanosResponse(OrmModel):
    id: int
    reserva_id: int
    monto_danos: Decimal
    descripcion_danos: str
    usuario_registra: str
    usuario_actualiza: str | None = None
    estado_pago: EstadoPagoDanos
    stripe_session_id: str | None = None
    stripe_payment_id: str | None = None
    fecha_pago: datetime | None = None
    fecha_registro: datetime | None = None


class ReservaResponse(OrmModel):
    id: int
    area_id: int
    usuario_id: str
    usuario_nombre: str | None = None
    usuario_rol: str | None = None
    usuario_email: str | None = None
    inicio: datetime
    fin: datetime
    costo: Decimal
    estado: EstadoReserva
    estado_entrega: EstadoEntrega
    costo_entrega: Decimal | None = None
    pago_entrega: bool = False
    observaciones_entrega: str | None = None
    usuario_entrega: str | None = None
    fecha_entrega: datetime | None = None
    fecha_creacion: datetime | None = None


class ReservaDetalleResponse(OrmModel):
    reserva: ReservaResponse
    area: AreaResponse | None = None
    confirmacion: ConfirmacionResponse | None = None
    pagos_reserva: list[PagoReservaResponse] = []
    pagos_danos: list[PagoDanosResponse] = []


class ReservaConFacturaResponse(ReservaDetalleResponse):
    factura: FacturaResponse | None = None


class ReservaCreadaResponse(OrmModel):
    reserva: ReservaResponse
    confirmacion: ConfirmacionResponse
    pago_reserva: PagoReservaResponse


class ReservaActualizadaResponse(OrmModel):
    reserva: ReservaResponse
    area: AreaResponse | None = None


class EntregaResponse(OrmModel):
    reserva: ReservaResponse
    pago_danos_id: int | None = None
