"""
Health checks para monitoreo y orquestación (K8s, Docker, etc.).

- /health y /health/live: liveness, siempre 200 mientras el proceso responda
- /health/db: conectividad con la base de datos
- /health/ready: readiness, 503 si alguna dependencia no está lista
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "reservas-areas-comunes"


async def _database_ok(session: AsyncSession) -> bool:
    try:
        result = await session.execute(text("SELECT 1"))
        result.scalar()
    except Exception as e:
        logger.error("Database health check failed", exc_info=e)
        return False
    return True


@router.get("/health")
async def health_check():
    """Liveness: el proceso está vivo."""
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/live")
async def health_check_live():
    """Alias de /health para orquestadores que esperan /health/live."""
    return await health_check()


@router.get("/health/db")
async def health_check_db(session: AsyncSession = Depends(get_db_session)):
    """503 si la base no acepta consultas."""
    if await _database_ok(session):
        return {"status": "healthy", "component": "database"}
    return JSONResponse(
        status_code=503,
        content={
            "status": "unhealthy",
            "component": "database",
            "error": "Database connection failed",
        },
    )


@router.get("/health/ready")
async def health_check_ready(session: AsyncSession = Depends(get_db_session)):
    """
    Readiness: el servicio puede recibir tráfico.

    Hoy la única dependencia verificada es la base de datos; el store
    in-memory y los gateways stub no requieren chequeo.
    """
    database_ok = await _database_ok(session)
    checks = {"database": "healthy" if database_ok else "unhealthy"}
    if not database_ok:
        logger.error("Readiness check failed", extra={"checks": checks})
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "checks": checks},
        )
    return {"status": "ready", "checks": checks}
