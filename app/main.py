import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.dependencies import get_notification_dispatcher
from app.api.deps import engine
from app.api.routers.health import router as health_router
from app.api.routers.pago_danos import router as pago_danos_router
from app.api.routers.reservas import router as reservas_router
from app.api.routers.stripe import router as stripe_router
from app.config import get_settings
from app.domain.errors import (
    DomainError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    TransactionError,
    ValidationError,
)
from app.infrastructure.db.engine import create_schema

# Configure structured logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tablas SQL solo cuando no se usa el store en memoria
    if not settings.use_in_memory:
        await create_schema(engine)
    dispatcher = get_notification_dispatcher()
    await dispatcher.start()
    yield
    await dispatcher.stop()
    await engine.dispose()

app = FastAPI(
    title="Reservas de Áreas Comunes API",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Orden importa: subclases antes que DomainError
_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (ValidationError, 400),
    (PermissionDeniedError, 403),
    (NotFoundError, 404),
    (TransactionError, 409),
    (ExternalServiceError, 502),
)


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    status_code = next(
        (code for error_type, code in _STATUS_BY_ERROR if isinstance(exc, error_type)),
        400,
    )
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Domain error",
        extra={
            "code": exc.code,
            "path": request.url.path,
            "method": request.method,
            "status_code": status_code,
        },
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code},
    )


# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler to prevent stack trace exposure to clients.
    All unhandled exceptions are logged internally and return a generic error message.
    """
    error_id = str(uuid.uuid4())

    logger.error(
        "Unhandled exception occurred",
        exc_info=exc,
        extra={
            "error_id": error_id,
            "path": request.url.path,
            "method": request.method,
            "client_host": request.client.host if request.client else None,
        }
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "message": "Ocurrió un error inesperado. Contacta a soporte con el error_id si persiste."
        }
    )


app.include_router(health_router, tags=["Health"])
app.include_router(reservas_router, prefix="/api", tags=["Reservas"])
app.include_router(pago_danos_router, prefix="/api", tags=["Pago Daños"])
app.include_router(stripe_router, prefix="/api", tags=["Stripe"])
