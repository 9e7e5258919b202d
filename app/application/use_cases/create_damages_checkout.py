import logging
from dataclasses import dataclass

from app.application.interfaces.checkout_gateway import CheckoutGateway
from app.application.interfaces.pago_danos_repo import PagoDanosRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.domain.errors import PagoDanosNotFoundError, ValidationError


@dataclass
class DamagesCheckoutResult:
    pago_danos_id: int
    session_id: str
    url: str


class CreateDamagesCheckoutUseCase:
    def __init__(
        self,
        pago_danos_repo: PagoDanosRepo,
        checkout_gateway: CheckoutGateway,
        transaction_manager: TransactionManager,
    ) -> None:
        self._pago_danos_repo = pago_danos_repo
        self._checkout_gateway = checkout_gateway
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def execute(self, pago_danos_id: int, payer_email: str | None) -> DamagesCheckoutResult:
        pago = await self._pago_danos_repo.get_by_id(pago_danos_id)
        if not pago:
            raise PagoDanosNotFoundError(pago_danos_id)
        if not pago.bloquea_entrega:
            raise ValidationError(
                "estado_pago", "solo se cobra un pago por daños PENDIENTE con monto positivo"
            )

        # La sesión se crea fuera de cualquier transacción; si falla, se propaga.
        session = await self._checkout_gateway.create_damages_checkout_session(
            pago_danos_id=pago.id,
            reserva_id=pago.reserva_id,
            monto=pago.monto_danos,
            descripcion=pago.descripcion_danos,
            payer_email=payer_email,
        )

        # Relee dentro de la transacción para no pisar cambios hechos durante la llamada
        async with self._transaction_manager.start():
            actual = await self._pago_danos_repo.get_by_id(pago_danos_id)
            if not actual:
                raise PagoDanosNotFoundError(pago_danos_id)
            actual.stripe_session_id = session.session_id
            await self._pago_danos_repo.update(actual)
        self._logger.info(
            "Damages checkout session created",
            extra={
                "pago_danos_id": pago.id,
                "reserva_id": pago.reserva_id,
                "stripe_session_id": session.session_id,
            },
        )
        return DamagesCheckoutResult(
            pago_danos_id=pago.id, session_id=session.session_id, url=session.url
        )
