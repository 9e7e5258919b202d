from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.confirmacion_repo import ConfirmacionRepo
from app.domain.entities.confirmacion import Confirmacion
from app.infrastructure.db.integrity import execute_guarded
from app.infrastructure.db.tables import confirmaciones


def map_confirmacion(row) -> Confirmacion:
    return Confirmacion(
        id=row["id"],
        reserva_id=row["reserva_id"],
        codigo_qr=row["codigo_qr"],
        verificada=row["verificada"],
        fecha_creacion=row["fecha_creacion"],
    )


class ConfirmacionRepoSQL(ConfirmacionRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, confirmacion: Confirmacion) -> Confirmacion:
        stmt = insert(confirmaciones).values(
            reserva_id=confirmacion.reserva_id,
            codigo_qr=confirmacion.codigo_qr,
            verificada=confirmacion.verificada,
            fecha_creacion=confirmacion.fecha_creacion,
        )
        result = await execute_guarded(self._session, stmt, "create confirmacion")
        return Confirmacion(
            id=result.inserted_primary_key[0],
            reserva_id=confirmacion.reserva_id,
            codigo_qr=confirmacion.codigo_qr,
            verificada=confirmacion.verificada,
            fecha_creacion=confirmacion.fecha_creacion,
        )

    async def get_by_reserva(self, reserva_id: int) -> Confirmacion | None:
        stmt = select(confirmaciones).where(confirmaciones.c.reserva_id == reserva_id)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return map_confirmacion(row) if row else None

    async def delete_by_reserva(self, reserva_id: int) -> int:
        stmt = delete(confirmaciones).where(confirmaciones.c.reserva_id == reserva_id)
        result = await execute_guarded(self._session, stmt, "delete confirmacion")
        return result.rowcount
