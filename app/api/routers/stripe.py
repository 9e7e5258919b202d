from fastapi import APIRouter, Depends, Request, status

from app.api.auth import get_actor
from app.api.dependencies import get_services
from app.api.schemas.pago_danos import (
    DamagesCheckoutRequest,
    DamagesCheckoutResponse,
    WebhookAck,
)
from app.domain.entities.actor import Actor

router = APIRouter()


@router.post(
    "/stripe/pago-danos/{pago_danos_id}/checkout",
    response_model=DamagesCheckoutResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_damages_checkout(
    pago_danos_id: int,
    payload: DamagesCheckoutRequest | None = None,
    actor: Actor = Depends(get_actor),
    services=Depends(get_services),
) -> DamagesCheckoutResponse:
    payer_email = (payload.payer_email if payload else None) or actor.email
    result = await services["damages_checkout"].execute(
        pago_danos_id=pago_danos_id, payer_email=payer_email
    )
    return DamagesCheckoutResponse.model_validate(result)


@router.post("/stripe/webhook", response_model=WebhookAck, status_code=status.HTTP_200_OK)
async def stripe_webhook(
    request: Request,
    services=Depends(get_services),
) -> WebhookAck:
    raw_body = await request.body()
    signature = request.headers.get("Stripe-Signature")
    result = await services["stripe_webhook"].execute(raw_body=raw_body, signature=signature)
    return WebhookAck(result=result)
