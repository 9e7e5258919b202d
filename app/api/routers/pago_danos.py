from fastapi import APIRouter, Depends, status

from app.api.auth import get_actor
from app.api.dependencies import get_services
from app.api.schemas.pago_danos import PagoDanosDetalleResponse
from app.api.schemas.reservas import PagoDanosResponse
from app.application.schemas import MarcarPagadoInput, PagoDanosCreate, PagoDanosUpdate
from app.domain.entities.actor import Actor

router = APIRouter()


@router.post(
    "/pago-danos",
    response_model=PagoDanosResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_pago_danos(
    payload: PagoDanosCreate,
    actor: Actor = Depends(get_actor),
    services=Depends(get_services),
) -> PagoDanosResponse:
    pago = await services["pago_danos"].create(
        reserva_id=payload.reserva_id,
        monto_danos=payload.monto_danos,
        descripcion_danos=payload.descripcion_danos,
        actor=actor,
    )
    return PagoDanosResponse.model_validate(pago)


@router.get("/pago-danos/pendientes", response_model=list[PagoDanosDetalleResponse])
async def list_pendientes(
    actor: Actor = Depends(get_actor),
    services=Depends(get_services),
) -> list[PagoDanosDetalleResponse]:
    detalles = await services["pago_danos"].find_pendientes(actor)
    return [PagoDanosDetalleResponse.model_validate(d) for d in detalles]


@router.get("/pago-danos/reserva/{reserva_id}", response_model=list[PagoDanosDetalleResponse])
async def list_by_reserva(
    reserva_id: int,
    actor: Actor = Depends(get_actor),
    services=Depends(get_services),
) -> list[PagoDanosDetalleResponse]:
    detalles = await services["pago_danos"].find_by_reserva(reserva_id)
    return [PagoDanosDetalleResponse.model_validate(d) for d in detalles]


@router.get("/pago-danos/{pago_danos_id}", response_model=PagoDanosDetalleResponse)
async def get_pago_danos(
    pago_danos_id: int,
    actor: Actor = Depends(get_actor),
    services=Depends(get_services),
) -> PagoDanosDetalleResponse:
    detalle = await services["pago_danos"].find_one(pago_danos_id)
    return PagoDanosDetalleResponse.model_validate(detalle)


@router.patch("/pago-danos/{pago_danos_id}", response_model=PagoDanosResponse)
async def update_pago_danos(
    pago_danos_id: int,
    payload: PagoDanosUpdate,
    actor: Actor = Depends(get_actor),
    services=Depends(get_services),
) -> PagoDanosResponse:
    pago = await services["pago_danos"].update(
        pago_danos_id, payload.model_dump(exclude_unset=True), actor
    )
    return PagoDanosResponse.model_validate(pago)


@router.patch("/pago-danos/{pago_danos_id}/marcar-pagado", response_model=PagoDanosResponse)
async def marcar_pagado(
    pago_danos_id: int,
    payload: MarcarPagadoInput,
    actor: Actor = Depends(get_actor),
    services=Depends(get_services),
) -> PagoDanosResponse:
    pago = await services["pago_danos"].marcar_como_pagado(
        pago_danos_id,
        stripe_session_id=payload.stripe_session_id,
        stripe_payment_id=payload.stripe_payment_id,
        actor=actor,
    )
    return PagoDanosResponse.model_validate(pago)
