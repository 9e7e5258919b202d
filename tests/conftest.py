"""
Pytest configuration and shared fixtures.

Este módulo provee fixtures reutilizables para:
- Store in-memory con áreas precargadas y repositorios
- Servicios de reservas y pagos por daños con reloj fijo
- Actores con cada rol
- Cliente HTTP de prueba (FastAPI TestClient) en modo in-memory
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from app.application.interfaces.clock import FakeClock
from app.application.schemas import ReservaCreate
from app.application.services.pago_danos_service import PagoDanosService
from app.application.services.reserva_service import ReservaService
from app.domain.entities.actor import Actor, RolUsuario
from app.infrastructure.in_memory import (
    InMemoryAreaRepo,
    InMemoryConfirmacionRepo,
    InMemoryDatabase,
    InMemoryFacturaRepo,
    InMemoryPagoDanosRepo,
    InMemoryPagoReservaRepo,
    InMemoryReservaQuery,
    InMemoryReservaRepo,
    InMemoryTransactionManager,
)
from tests.helpers import FIXED_NOW, RecordingDispatcher


# ============================================================================
# STORE Y SERVICIOS
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(FIXED_NOW)


@pytest.fixture
def database() -> InMemoryDatabase:
    db = InMemoryDatabase()
    db.add_area(1, "Salón de Eventos")
    db.add_area(2, "Alberca")
    return db


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def repos(database):
    reserva_repo = InMemoryReservaRepo(database)
    area_repo = InMemoryAreaRepo(database)
    confirmacion_repo = InMemoryConfirmacionRepo(database)
    pago_reserva_repo = InMemoryPagoReservaRepo(database)
    pago_danos_repo = InMemoryPagoDanosRepo(database)
    return {
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


@pytest.fixture
def service_factory(repos, dispatcher, clock):
    """
    Construye (ReservaService, PagoDanosService) sobre el store in-memory.

    Los overrides reemplazan repositorios puntuales (p.ej. uno que falla).
    """

    def _build(**overrides):
        bundle = {**repos, **overrides}
        pago_danos_service = PagoDanosService(
            pago_danos_repo=bundle["pago_danos_repo"],
            reserva_repo=bundle["reserva_repo"],
            area_repo=bundle["area_repo"],
            transaction_manager=bundle["tx_manager"],
            clock=clock,
        )
        reserva_service = ReservaService(
            reserva_repo=bundle["reserva_repo"],
            confirmacion_repo=bundle["confirmacion_repo"],
            pago_reserva_repo=bundle["pago_reserva_repo"],
            factura_repo=bundle["factura_repo"],
            pago_danos_repo=bundle["pago_danos_repo"],
            area_repo=bundle["area_repo"],
            reserva_query=bundle["reserva_query"],
            pago_danos_service=pago_danos_service,
            notification_dispatcher=bundle.get("dispatcher", dispatcher),
            transaction_manager=bundle["tx_manager"],
            clock=clock,
        )
        return reserva_service, pago_danos_service

    return _build


@pytest.fixture
def reserva_service(service_factory) -> ReservaService:
    return service_factory()[0]


@pytest.fixture
def pago_danos_service(service_factory) -> PagoDanosService:
    return service_factory()[1]


@pytest.fixture
def reserva_payload():
    """Payload válido de creación; los tests lo ajustan con model_copy."""
    return ReservaCreate(
        area_id=1,
        usuario_id="u-100",
        inicio=datetime(2025, 3, 20, 18, 0, tzinfo=timezone.utc),
        fin=datetime(2025, 3, 20, 22, 0, tzinfo=timezone.utc),
        costo=Decimal("1500.00"),
        usuario_nombre="Ana López",
        usuario_rol="USER_CASUAL",
        usuario_email="ana@example.com",
    )


# ============================================================================
# ACTORES
# ============================================================================

@pytest.fixture
def admin() -> Actor:
    return Actor(id="a-1", nombre="Admin Torre", rol=RolUsuario.USER_ADMIN)


@pytest.fixture
def super_user() -> Actor:
    return Actor(id="s-1", nombre="Super", rol=RolUsuario.SUPER_USER)


@pytest.fixture
def casual() -> Actor:
    return Actor(id="u-100", nombre="Ana López", rol=RolUsuario.USER_CASUAL, email="ana@example.com")


@pytest.fixture
def otro_casual() -> Actor:
    return Actor(id="u-200", nombre="Beto", rol=RolUsuario.USER_CASUAL)


# ============================================================================
# FIXTURES DE CLIENTE HTTP
# ============================================================================

@pytest.fixture
def api_state(monkeypatch):
    """
    Resetea settings y singletons cacheados para que cada test arranque con
    un store in-memory limpio, gateways stub y áreas precargadas.
    """
    from app.api import dependencies
    from app.config import get_settings

    for var in ("STRIPE_SECRET_KEY", "SENDGRID_API_KEY", "STRIPE_WEBHOOK_SECRET", "DATABASE_URL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("USE_IN_MEMORY", "true")

    get_settings.cache_clear()
    dependencies._in_memory_bundle.cache_clear()
    dependencies.get_notification_dispatcher.cache_clear()
    dependencies.get_checkout_gateway.cache_clear()

    bundle = dependencies._in_memory_bundle()
    bundle["database"].add_area(1, "Salón de Eventos")
    bundle["database"].add_area(2, "Alberca")
    yield bundle

    get_settings.cache_clear()
    dependencies._in_memory_bundle.cache_clear()
    dependencies.get_notification_dispatcher.cache_clear()
    dependencies.get_checkout_gateway.cache_clear()


@pytest.fixture
def client(api_state) -> Generator[TestClient, None, None]:
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def reserva_json():
    return {
        "area_id": 1,
        "usuario_id": "u-100",
        "inicio": "2025-03-20T18:00:00Z",
        "fin": "2025-03-20T22:00:00Z",
        "costo": "1500.00",
        "usuario_nombre": "Ana López",
        "usuario_rol": "USER_CASUAL",
        "usuario_email": "ana@example.com",
    }


# ============================================================================
# HOOKS DE PYTEST
# ============================================================================

@pytest.fixture(autouse=True)
def reset_circuit_breakers():
    """
    Reset circuit breakers antes de cada test.
    Evita que tests fallen por breakers abiertos de tests anteriores.
    """
    from app.infrastructure.circuit_breaker import email_breaker, stripe_breaker

    stripe_breaker.close()
    email_breaker.close()

    yield

    stripe_breaker.close()
    email_breaker.close()
