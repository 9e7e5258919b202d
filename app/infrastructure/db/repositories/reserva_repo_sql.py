from datetime import datetime
from typing import Any, Sequence

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.reserva_repo import AreaRepo, ReservaRepo
from app.domain.entities.reserva import Area, EstadoEntrega, EstadoReserva, Reserva
from app.domain.errors import TransactionError
from app.infrastructure.db.integrity import execute_guarded
from app.infrastructure.db.tables import areas, reservas


def _values(reserva: Reserva) -> dict[str, Any]:
    values = reserva.snapshot()
    values.pop("id")
    values["estado"] = reserva.estado.value
    values["estado_entrega"] = reserva.estado_entrega.value
    return values


def map_reserva(row) -> Reserva:
    return Reserva(
        id=row["id"],
        area_id=row["area_id"],
        usuario_id=row["usuario_id"],
        usuario_nombre=row["usuario_nombre"],
        usuario_rol=row["usuario_rol"],
        usuario_email=row["usuario_email"],
        inicio=row["inicio"],
        fin=row["fin"],
        costo=row["costo"],
        estado=EstadoReserva(row["estado"]),
        estado_entrega=EstadoEntrega(row["estado_entrega"]),
        costo_entrega=row["costo_entrega"],
        pago_entrega=bool(row["pago_entrega"]),
        observaciones_entrega=row["observaciones_entrega"],
        usuario_entrega=row["usuario_entrega"],
        fecha_entrega=row["fecha_entrega"],
        fecha_creacion=row["fecha_creacion"],
    )


class ReservaRepoSQL(ReservaRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, reserva: Reserva) -> Reserva:
        stmt = insert(reservas).values(**_values(reserva))
        result = await execute_guarded(self._session, stmt, "create reserva")
        return await self._fetch(result.inserted_primary_key[0])

    async def get_by_id(self, reserva_id: int) -> Reserva | None:
        stmt = select(reservas).where(reservas.c.id == reserva_id)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return map_reserva(row) if row else None

    async def list(
        self,
        usuario_id: str | None = None,
        inicio_desde: datetime | None = None,
        inicio_hasta: datetime | None = None,
    ) -> Sequence[Reserva]:
        stmt = select(reservas).order_by(reservas.c.id)
        if usuario_id is not None:
            stmt = stmt.where(reservas.c.usuario_id == usuario_id)
        if inicio_desde is not None:
            stmt = stmt.where(reservas.c.inicio >= inicio_desde)
        if inicio_hasta is not None:
            stmt = stmt.where(reservas.c.inicio <= inicio_hasta)
        result = await self._session.execute(stmt)
        return [map_reserva(row) for row in result.mappings().all()]

    async def update(self, reserva: Reserva) -> Reserva:
        stmt = update(reservas).where(reservas.c.id == reserva.id).values(**_values(reserva))
        result = await execute_guarded(self._session, stmt, "update reserva")
        if result.rowcount == 0:
            raise TransactionError("update reserva", f"reserva {reserva.id} no existe")
        return await self._fetch(reserva.id)

    async def delete(self, reserva_id: int) -> None:
        stmt = delete(reservas).where(reservas.c.id == reserva_id)
        result = await execute_guarded(self._session, stmt, "delete reserva")
        if result.rowcount == 0:
            raise TransactionError("delete reserva", f"reserva {reserva_id} no existe")

    async def _fetch(self, reserva_id: int) -> Reserva:
        reserva = await self.get_by_id(reserva_id)
        if not reserva:
            raise TransactionError("fetch reserva", f"reserva {reserva_id} no existe")
        return reserva


class AreaRepoSQL(AreaRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, area_id: int) -> Area | None:
        result = await self._session.execute(select(areas).where(areas.c.id == area_id))
        row = result.mappings().first()
        return Area(id=row["id"], nombre=row["nombre"]) if row else None

    async def list_by_ids(self, area_ids: Sequence[int]) -> dict[int, Area]:
        if not area_ids:
            return {}
        result = await self._session.execute(select(areas).where(areas.c.id.in_(list(area_ids))))
        return {
            row["id"]: Area(id=row["id"], nombre=row["nombre"])
            for row in result.mappings().all()
        }
