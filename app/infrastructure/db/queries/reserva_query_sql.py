from collections import defaultdict
from datetime import datetime
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.reserva_query import ReservaDetalle, ReservaQuery
from app.domain.entities.reserva import Area, Reserva
from app.infrastructure.db.repositories.confirmacion_repo_sql import map_confirmacion
from app.infrastructure.db.repositories.pago_danos_repo_sql import map_pago_danos
from app.infrastructure.db.repositories.pago_reserva_repo_sql import (
    map_factura,
    map_pago_reserva,
)
from app.infrastructure.db.repositories.reserva_repo_sql import map_reserva
from app.infrastructure.db.tables import (
    areas,
    confirmaciones,
    facturas,
    pagos_danos,
    pagos_reserva,
    reservas,
)


class ReservaQuerySQL(ReservaQuery):
    """Carga reservas y sus relaciones con una consulta por tabla (sin N+1)."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_detalle(self, reserva_id: int) -> ReservaDetalle | None:
        result = await self._session.execute(select(reservas).where(reservas.c.id == reserva_id))
        row = result.mappings().first()
        if not row:
            return None
        detalles = await self._with_relations([map_reserva(row)])
        return detalles[0]

    async def list_detalles(
        self,
        usuario_id: str | None = None,
        inicio_desde: datetime | None = None,
        inicio_hasta: datetime | None = None,
    ) -> list[ReservaDetalle]:
        stmt = select(reservas).order_by(reservas.c.id)
        if usuario_id is not None:
            stmt = stmt.where(reservas.c.usuario_id == usuario_id)
        if inicio_desde is not None:
            stmt = stmt.where(reservas.c.inicio >= inicio_desde)
        if inicio_hasta is not None:
            stmt = stmt.where(reservas.c.inicio <= inicio_hasta)
        result = await self._session.execute(stmt)
        return await self._with_relations([map_reserva(row) for row in result.mappings().all()])

    async def _with_relations(self, items: Sequence[Reserva]) -> list[ReservaDetalle]:
        if not items:
            return []
        ids = [reserva.id for reserva in items]

        area_rows = await self._session.execute(
            select(areas).where(areas.c.id.in_({reserva.area_id for reserva in items}))
        )
        areas_by_id = {
            row["id"]: Area(id=row["id"], nombre=row["nombre"])
            for row in area_rows.mappings().all()
        }

        confirmacion_rows = await self._session.execute(
            select(confirmaciones).where(confirmaciones.c.reserva_id.in_(ids))
        )
        confirmaciones_by_reserva = {
            row["reserva_id"]: map_confirmacion(row) for row in confirmacion_rows.mappings().all()
        }

        factura_rows = await self._session.execute(
            select(facturas)
            .join(pagos_reserva, facturas.c.pago_reserva_id == pagos_reserva.c.id)
            .where(pagos_reserva.c.reserva_id.in_(ids))
        )
        facturas_by_pago = {
            row["pago_reserva_id"]: map_factura(row) for row in factura_rows.mappings().all()
        }

        pago_rows = await self._session.execute(
            select(pagos_reserva)
            .where(pagos_reserva.c.reserva_id.in_(ids))
            .order_by(pagos_reserva.c.id)
        )
        pagos_by_reserva = defaultdict(list)
        for row in pago_rows.mappings().all():
            pagos_by_reserva[row["reserva_id"]].append(
                map_pago_reserva(row, facturas_by_pago.get(row["id"]))
            )

        danos_rows = await self._session.execute(
            select(pagos_danos)
            .where(pagos_danos.c.reserva_id.in_(ids))
            .order_by(pagos_danos.c.fecha_registro.desc(), pagos_danos.c.id.desc())
        )
        danos_by_reserva = defaultdict(list)
        for row in danos_rows.mappings().all():
            danos_by_reserva[row["reserva_id"]].append(map_pago_danos(row))

        return [
            ReservaDetalle(
                reserva=reserva,
                area=areas_by_id.get(reserva.area_id),
                confirmacion=confirmaciones_by_reserva.get(reserva.id),
                pagos_reserva=pagos_by_reserva[reserva.id],
                pagos_danos=danos_by_reserva[reserva.id],
            )
            for reserva in items
        ]
