from typing import Any, Sequence

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.pago_danos_repo import PagoDanosRepo
from app.domain.entities.pago_danos import EstadoPagoDanos, PagoDanos
from app.domain.errors import TransactionError
from app.infrastructure.db.integrity import execute_guarded
from app.infrastructure.db.tables import pagos_danos

_NEWEST_FIRST = (pagos_danos.c.fecha_registro.desc(), pagos_danos.c.id.desc())


def _values(pago: PagoDanos) -> dict[str, Any]:
    return {
        "reserva_id": pago.reserva_id,
        "monto_danos": pago.monto_danos,
        "descripcion_danos": pago.descripcion_danos,
        "usuario_registra": pago.usuario_registra,
        "usuario_actualiza": pago.usuario_actualiza,
        "estado_pago": pago.estado_pago.value,
        "stripe_session_id": pago.stripe_session_id,
        "stripe_payment_id": pago.stripe_payment_id,
        "fecha_pago": pago.fecha_pago,
        "fecha_registro": pago.fecha_registro,
    }


def map_pago_danos(row) -> PagoDanos:
    return PagoDanos(
        id=row["id"],
        reserva_id=row["reserva_id"],
        monto_danos=row["monto_danos"],
        descripcion_danos=row["descripcion_danos"],
        usuario_registra=row["usuario_registra"],
        usuario_actualiza=row["usuario_actualiza"],
        estado_pago=EstadoPagoDanos(row["estado_pago"]),
        stripe_session_id=row["stripe_session_id"],
        stripe_payment_id=row["stripe_payment_id"],
        fecha_pago=row["fecha_pago"],
        fecha_registro=row["fecha_registro"],
    )


class PagoDanosRepoSQL(PagoDanosRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, pago: PagoDanos) -> PagoDanos:
        stmt = insert(pagos_danos).values(**_values(pago))
        result = await execute_guarded(self._session, stmt, "create pago_danos")
        return await self._fetch(result.inserted_primary_key[0])

    async def get_by_id(self, pago_danos_id: int) -> PagoDanos | None:
        stmt = select(pagos_danos).where(pagos_danos.c.id == pago_danos_id)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return map_pago_danos(row) if row else None

    async def list_by_reserva(self, reserva_id: int) -> Sequence[PagoDanos]:
        stmt = (
            select(pagos_danos)
            .where(pagos_danos.c.reserva_id == reserva_id)
            .order_by(*_NEWEST_FIRST)
        )
        result = await self._session.execute(stmt)
        return [map_pago_danos(row) for row in result.mappings().all()]

    async def list_by_estado(self, estado: EstadoPagoDanos) -> Sequence[PagoDanos]:
        stmt = (
            select(pagos_danos)
            .where(pagos_danos.c.estado_pago == estado.value)
            .order_by(*_NEWEST_FIRST)
        )
        result = await self._session.execute(stmt)
        return [map_pago_danos(row) for row in result.mappings().all()]

    async def update(self, pago: PagoDanos) -> PagoDanos:
        stmt = update(pagos_danos).where(pagos_danos.c.id == pago.id).values(**_values(pago))
        result = await execute_guarded(self._session, stmt, "update pago_danos")
        if result.rowcount == 0:
            raise TransactionError("update pago_danos", f"pago {pago.id} no existe")
        return await self._fetch(pago.id)

    async def delete_by_reserva(self, reserva_id: int) -> int:
        stmt = delete(pagos_danos).where(pagos_danos.c.reserva_id == reserva_id)
        result = await execute_guarded(self._session, stmt, "delete pagos_danos")
        return result.rowcount

    async def _fetch(self, pago_danos_id: int) -> PagoDanos:
        pago = await self.get_by_id(pago_danos_id)
        if not pago:
            raise TransactionError("fetch pago_danos", f"pago {pago_danos_id} no existe")
        return pago
