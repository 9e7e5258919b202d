from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.domain.entities.pago_danos import EstadoPagoDanos
from app.domain.entities.reserva import EstadoEntrega, EstadoReserva


class ReservaCreate(BaseModel):
    # usuario_id y costo se validan en el servicio para responder con ValidationError
    area_id: int
    usuario_id: str | None = None
    inicio: datetime
    fin: datetime
    costo: Decimal | None = None
    usuario_nombre: str | None = None
    usuario_rol: str | None = None
    usuario_email: EmailStr | None = None
    estado: EstadoReserva | None = None


class ReservaUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    area_id: int | None = None
    usuario_id: str | None = None
    usuario_nombre: str | None = None
    usuario_rol: str | None = None
    usuario_email: EmailStr | None = None
    inicio: datetime | None = None
    fin: datetime | None = None
    costo: Decimal | None = None
    estado: EstadoReserva | None = None
    estado_entrega: EstadoEntrega | None = None
    costo_entrega: Decimal | None = None
    pago_entrega: bool | None = None
    observaciones_entrega: str | None = None


class EntregaInput(BaseModel):
    # estado_entrega se acepta pero se ignora: el estado se deriva de los daños
    estado_entrega: EstadoEntrega | None = None
    costo_entrega: Decimal | None = None
    pago_entrega: bool = False
    observaciones_entrega: str | None = None
    monto_danos: Decimal | None = None
    descripcion_danos: str | None = None

    @property
    def registra_danos(self) -> bool:
        """Monto (aunque sea 0) y descripción presentes."""
        return self.monto_danos is not None and bool(self.descripcion_danos)


class PagoDanosCreate(BaseModel):
    reserva_id: int
    monto_danos: Decimal | None = None
    descripcion_danos: str | None = None


class PagoDanosUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    monto_danos: Decimal | None = None
    descripcion_danos: str | None = None
    estado_pago: EstadoPagoDanos | None = None
    stripe_session_id: str | None = None
    stripe_payment_id: str | None = None
    fecha_pago: datetime | None = None


class MarcarPagadoInput(BaseModel):
    stripe_session_id: str = Field(..., min_length=1)
    stripe_payment_id: str = Field(..., min_length=1)
