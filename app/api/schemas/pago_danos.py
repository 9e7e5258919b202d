from pydantic import BaseModel, EmailStr

from app.api.schemas.reservas import AreaResponse, OrmModel, PagoDanosResponse, ReservaResponse


class PagoDanosDetalleResponse(OrmModel):
    pago: PagoDanosResponse
    reserva: ReservaResponse | None = None
    area: AreaResponse | None = None


class DamagesCheckoutRequest(BaseModel):
    payer_email: EmailStr | None = None


class DamagesCheckoutResponse(OrmModel):
    pago_danos_id: int
    session_id: str
    url: str


class WebhookAck(BaseModel):
    received: bool = True
    result: str
