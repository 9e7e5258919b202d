from typing import Sequence

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.pago_reserva_repo import FacturaRepo, PagoReservaRepo
from app.domain.entities.pago_reserva import Factura, MetodoPago, PagoReserva, PagoStatus
from app.infrastructure.db.integrity import execute_guarded
from app.infrastructure.db.tables import facturas, pagos_reserva


def map_pago_reserva(row, factura: Factura | None = None) -> PagoReserva:
    return PagoReserva(
        id=row["id"],
        reserva_id=row["reserva_id"],
        metodo_pago=MetodoPago(row["metodo_pago"]),
        monto=row["monto"],
        estado=PagoStatus(row["estado"]),
        referencia_pago=row["referencia_pago"],
        fecha_creacion=row["fecha_creacion"],
        factura=factura,
    )


def map_factura(row) -> Factura:
    return Factura(
        id=row["id"],
        pago_reserva_id=row["pago_reserva_id"],
        numero=row["numero"],
        monto=row["monto"],
        fecha_emision=row["fecha_emision"],
    )


class PagoReservaRepoSQL(PagoReservaRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, pago: PagoReserva) -> PagoReserva:
        stmt = insert(pagos_reserva).values(
            reserva_id=pago.reserva_id,
            metodo_pago=pago.metodo_pago.value,
            monto=pago.monto,
            estado=pago.estado.value,
            referencia_pago=pago.referencia_pago,
            fecha_creacion=pago.fecha_creacion,
        )
        result = await execute_guarded(self._session, stmt, "create pago_reserva")
        return PagoReserva(
            id=result.inserted_primary_key[0],
            reserva_id=pago.reserva_id,
            monto=pago.monto,
            referencia_pago=pago.referencia_pago,
            metodo_pago=pago.metodo_pago,
            estado=pago.estado,
            fecha_creacion=pago.fecha_creacion,
        )

    async def list_by_reserva(self, reserva_id: int) -> Sequence[PagoReserva]:
        stmt = (
            select(pagos_reserva)
            .where(pagos_reserva.c.reserva_id == reserva_id)
            .order_by(pagos_reserva.c.id)
        )
        result = await self._session.execute(stmt)
        rows = result.mappings().all()
        facturas_by_pago = await self._facturas_by_pago([row["id"] for row in rows])
        return [map_pago_reserva(row, facturas_by_pago.get(row["id"])) for row in rows]

    async def _facturas_by_pago(self, pago_ids: list[int]) -> dict[int, Factura]:
        if not pago_ids:
            return {}
        stmt = select(facturas).where(facturas.c.pago_reserva_id.in_(pago_ids))
        result = await self._session.execute(stmt)
        return {row["pago_reserva_id"]: map_factura(row) for row in result.mappings().all()}

    async def delete_by_reserva(self, reserva_id: int) -> int:
        stmt = delete(pagos_reserva).where(pagos_reserva.c.reserva_id == reserva_id)
        result = await execute_guarded(self._session, stmt, "delete pagos_reserva")
        return result.rowcount


class FacturaRepoSQL(FacturaRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, factura: Factura) -> Factura:
        stmt = insert(facturas).values(
            pago_reserva_id=factura.pago_reserva_id,
            numero=factura.numero,
            monto=factura.monto,
            fecha_emision=factura.fecha_emision,
        )
        result = await execute_guarded(self._session, stmt, "create factura")
        return Factura(
            id=result.inserted_primary_key[0],
            pago_reserva_id=factura.pago_reserva_id,
            numero=factura.numero,
            monto=factura.monto,
            fecha_emision=factura.fecha_emision,
        )

    async def get_by_pago(self, pago_reserva_id: int) -> Factura | None:
        stmt = select(facturas).where(facturas.c.pago_reserva_id == pago_reserva_id)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return map_factura(row) if row else None

    async def delete_by_reserva(self, reserva_id: int) -> int:
        pagos = select(pagos_reserva.c.id).where(pagos_reserva.c.reserva_id == reserva_id)
        stmt = delete(facturas).where(facturas.c.pago_reserva_id.in_(pagos))
        result = await execute_guarded(self._session, stmt, "delete facturas")
        return result.rowcount
