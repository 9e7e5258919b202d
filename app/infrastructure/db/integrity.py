from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.errors import TransactionError


async def execute_guarded(session: AsyncSession, stmt, operation: str):
    """Ejecuta la sentencia traduciendo violaciones de integridad a TransactionError."""
    try:
        return await session.execute(stmt)
    except IntegrityError as exc:
        raise TransactionError(operation, str(exc.orig)) from exc
