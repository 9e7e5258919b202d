from datetime import date

from fastapi import APIRouter, Depends, Query, status

from app.api.auth import get_actor
from app.api.dependencies import get_services
from app.api.schemas.reservas import (
    EntregaResponse,
    ReservaActualizadaResponse,
    ReservaConFacturaResponse,
    ReservaCreadaResponse,
    ReservaDetalleResponse,
    ReservaResponse,
)
from app.application.schemas import EntregaInput, ReservaCreate, ReservaUpdate
from app.domain.entities.actor import Actor
from app.infrastructure.db.retry import retry_on_deadlock

router = APIRouter()


@router.post(
    "/reservas",
    response_model=ReservaCreadaResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_reserva(
    payload: ReservaCreate,
    actor: Actor = Depends(get_actor),
    services=Depends(get_services),
) -> ReservaCreadaResponse:
    # Sin usuario explícito la reserva queda a nombre de quien la pide
    if not payload.usuario_id:
        payload = payload.model_copy(
            update={
                "usuario_id": actor.id,
                "usuario_nombre": payload.usuario_nombre or actor.nombre,
                "usuario_rol": payload.usuario_rol or actor.rol.value,
                "usuario_email": payload.usuario_email or actor.email,
            }
        )
    creada = await services["reservas"].create(payload)
    return ReservaCreadaResponse.model_validate(creada)


@router.get("/reservas", response_model=list[ReservaDetalleResponse])
async def list_reservas(
    actor: Actor = Depends(get_actor),
    services=Depends(get_services),
) -> list[ReservaDetalleResponse]:
    detalles = await services["reservas"].find_all(actor)
    return [ReservaDetalleResponse.model_validate(d) for d in detalles]


@router.get("/reservas/calendario", response_model=list[ReservaDetalleResponse])
async def calendario(
    actor: Actor = Depends(get_actor),
    services=Depends(get_services),
) -> list[ReservaDetalleResponse]:
    detalles = await services["reservas"].find_all_for_calendar()
    return [ReservaDetalleResponse.model_validate(d) for d in detalles]


@router.get("/reservas/reportes", response_model=list[ReservaDetalleResponse])
async def reportes(
    fecha_inicio: date | None = Query(default=None),
    fecha_fin: date | None = Query(default=None),
    actor: Actor = Depends(get_actor),
    services=Depends(get_services),
) -> list[ReservaDetalleResponse]:
    detalles = await services["reservas"].find_all_for_reports(fecha_inicio, fecha_fin)
    return [ReservaDetalleResponse.model_validate(d) for d in detalles]


@router.get("/reservas/{reserva_id}", response_model=ReservaDetalleResponse)
async def get_reserva(
    reserva_id: int,
    actor: Actor = Depends(get_actor),
    services=Depends(get_services),
) -> ReservaDetalleResponse:
    detalle = await services["reservas"].find_one(reserva_id)
    return ReservaDetalleResponse.model_validate(detalle)


@router.get("/reservas/{reserva_id}/factura", response_model=ReservaConFacturaResponse)
async def get_reserva_con_factura(
    reserva_id: int,
    actor: Actor = Depends(get_actor),
    services=Depends(get_services),
) -> ReservaConFacturaResponse:
    detalle = await services["reservas"].find_one_with_factura(reserva_id, actor)
    return ReservaConFacturaResponse.model_validate(detalle)


@router.patch("/reservas/{reserva_id}", response_model=ReservaActualizadaResponse)
async def update_reserva(
    reserva_id: int,
    payload: ReservaUpdate,
    actor: Actor = Depends(get_actor),
    services=Depends(get_services),
) -> ReservaActualizadaResponse:
    detalle = await services["reservas"].update(
        reserva_id, payload.model_dump(exclude_unset=True), actor
    )
    return ReservaActualizadaResponse.model_validate(detalle)


@router.delete("/reservas/{reserva_id}", response_model=ReservaResponse)
async def delete_reserva(
    reserva_id: int,
    actor: Actor = Depends(get_actor),
    services=Depends(get_services),
) -> ReservaResponse:
    reserva = await services["reservas"].remove(reserva_id)
    return ReservaResponse.model_validate(reserva)


@router.delete("/reservas/{reserva_id}/cascade", response_model=ReservaResponse)
async def delete_reserva_cascade(
    reserva_id: int,
    actor: Actor = Depends(get_actor),
    services=Depends(get_services),
) -> ReservaResponse:
    reserva = await retry_on_deadlock(
        lambda: services["reservas"].remove_with_cascade(reserva_id)
    )
    return ReservaResponse.model_validate(reserva)


@router.patch("/reservas/{reserva_id}/entrega", response_model=EntregaResponse)
async def gestionar_entrega(
    reserva_id: int,
    payload: EntregaInput,
    actor: Actor = Depends(get_actor),
    services=Depends(get_services),
) -> EntregaResponse:
    resultado = await services["reservas"].gestionar_entrega(reserva_id, payload, actor)
    return EntregaResponse.model_validate(resultado)
