from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import AsyncSessionLocal
from app.application.interfaces.checkout_gateway import CheckoutGateway
from app.application.interfaces.clock import SystemClock
from app.application.services.pago_danos_service import PagoDanosService
from app.application.services.reserva_service import ReservaService
from app.application.use_cases.create_damages_checkout import CreateDamagesCheckoutUseCase
from app.application.use_cases.handle_stripe_webhook import HandleStripeWebhookUseCase
from app.config import Settings, get_settings
from app.infrastructure.db.queries.reserva_query_sql import ReservaQuerySQL
from app.infrastructure.db.repositories.confirmacion_repo_sql import ConfirmacionRepoSQL
from app.infrastructure.db.repositories.pago_danos_repo_sql import PagoDanosRepoSQL
from app.infrastructure.db.repositories.pago_reserva_repo_sql import (
    FacturaRepoSQL,
    PagoReservaRepoSQL,
)
from app.infrastructure.db.repositories.reserva_repo_sql import AreaRepoSQL, ReservaRepoSQL
from app.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from app.infrastructure.gateways.sendgrid_email_gateway import SendGridEmailGateway
from app.infrastructure.gateways.stripe_checkout_gateway import StripeCheckoutGateway
from app.infrastructure.in_memory.checkout_gateway import StubCheckoutGateway
from app.infrastructure.in_memory.confirmacion_repo import InMemoryConfirmacionRepo
from app.infrastructure.in_memory.database import InMemoryDatabase
from app.infrastructure.in_memory.notification_gateway import LoggingNotificationGateway
from app.infrastructure.in_memory.pago_danos_repo import InMemoryPagoDanosRepo
from app.infrastructure.in_memory.pago_reserva_repo import (
    InMemoryFacturaRepo,
    InMemoryPagoReservaRepo,
)
from app.infrastructure.in_memory.reserva_query import InMemoryReservaQuery
from app.infrastructure.in_memory.reserva_repo import InMemoryAreaRepo, InMemoryReservaRepo
from app.infrastructure.in_memory.transaction_manager import InMemoryTransactionManager
from app.infrastructure.messaging.notification_dispatcher import QueuedNotificationDispatcher


async def get_session(settings: Settings = Depends(get_settings)) -> AsyncSession | None:
    if settings.use_in_memory:
        yield None
        return
    async with AsyncSessionLocal() as session:
        yield session


@lru_cache(maxsize=1)
def get_notification_dispatcher() -> QueuedNotificationDispatcher:
    settings = get_settings()
    if settings.sendgrid_api_key:
        gateway = SendGridEmailGateway(
            api_key=settings.sendgrid_api_key,
            sender=settings.email_sender,
            timeout=settings.email_timeout_seconds,
        )
    else:
        gateway = LoggingNotificationGateway()
    return QueuedNotificationDispatcher(
        gateway=gateway, max_queue_size=settings.notification_queue_size
    )


@lru_cache(maxsize=1)
def get_checkout_gateway() -> CheckoutGateway:
    settings = get_settings()
    if settings.stripe_api_key:
        return StripeCheckoutGateway(api_key=settings.stripe_api_key)
    return StubCheckoutGateway()


@lru_cache(maxsize=1)
def _in_memory_bundle():
    database = InMemoryDatabase()
    reserva_repo = InMemoryReservaRepo(database)
    area_repo = InMemoryAreaRepo(database)
    confirmacion_repo = InMemoryConfirmacionRepo(database)
    pago_reserva_repo = InMemoryPagoReservaRepo(database)
    pago_danos_repo = InMemoryPagoDanosRepo(database)
    return {
        "database": database,
        "reserva_repo": reserva_repo,
        "area_repo": area_repo,
        "confirmacion_repo": confirmacion_repo,
        "pago_reserva_repo": pago_reserva_repo,
        "factura_repo": InMemoryFacturaRepo(database),
        "pago_danos_repo": pago_danos_repo,
        "reserva_query": InMemoryReservaQuery(
            reserva_repo=reserva_repo,
            area_repo=area_repo,
            confirmacion_repo=confirmacion_repo,
            pago_reserva_repo=pago_reserva_repo,
            pago_danos_repo=pago_danos_repo,
        ),
        "tx_manager": InMemoryTransactionManager(database),
    }


def _sql_bundle(session: AsyncSession):
    return {
        "reserva_repo": ReservaRepoSQL(session),
        "area_repo": AreaRepoSQL(session),
        "confirmacion_repo": ConfirmacionRepoSQL(session),
        "pago_reserva_repo": PagoReservaRepoSQL(session),
        "factura_repo": FacturaRepoSQL(session),
        "pago_danos_repo": PagoDanosRepoSQL(session),
        "reserva_query": ReservaQuerySQL(session),
        "tx_manager": SQLAlchemyTransactionManager(session),
    }


def get_services(
    settings: Settings = Depends(get_settings),
    session: AsyncSession | None = Depends(get_session),
):
    if settings.use_in_memory:
        bundle = _in_memory_bundle()
    else:
        if not session:
            raise RuntimeError("DB session not available")
        bundle = _sql_bundle(session)

    clock = SystemClock()
    checkout_gateway = get_checkout_gateway()
    pago_danos_service = PagoDanosService(
        pago_danos_repo=bundle["pago_danos_repo"],
        reserva_repo=bundle["reserva_repo"],
        area_repo=bundle["area_repo"],
        transaction_manager=bundle["tx_manager"],
        clock=clock,
    )
    return {
        "reservas": ReservaService(
            reserva_repo=bundle["reserva_repo"],
            confirmacion_repo=bundle["confirmacion_repo"],
            pago_reserva_repo=bundle["pago_reserva_repo"],
            factura_repo=bundle["factura_repo"],
            pago_danos_repo=bundle["pago_danos_repo"],
            area_repo=bundle["area_repo"],
            reserva_query=bundle["reserva_query"],
            pago_danos_service=pago_danos_service,
            notification_dispatcher=get_notification_dispatcher(),
            transaction_manager=bundle["tx_manager"],
            clock=clock,
        ),
        "pago_danos": pago_danos_service,
        "damages_checkout": CreateDamagesCheckoutUseCase(
            pago_danos_repo=bundle["pago_danos_repo"],
            checkout_gateway=checkout_gateway,
            transaction_manager=bundle["tx_manager"],
        ),
        "stripe_webhook": HandleStripeWebhookUseCase(
            pago_danos_repo=bundle["pago_danos_repo"],
            pago_danos_service=pago_danos_service,
            checkout_gateway=checkout_gateway,
            stripe_webhook_secret=settings.stripe_webhook_secret,
        ),
    }
