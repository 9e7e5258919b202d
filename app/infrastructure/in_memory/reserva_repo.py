import copy
from datetime import datetime
from typing import Sequence

from app.application.interfaces.reserva_repo import AreaRepo, ReservaRepo
from app.domain.entities.reserva import Area, Reserva
from app.domain.errors import TransactionError
from app.infrastructure.in_memory.database import InMemoryDatabase


class InMemoryReservaRepo(ReservaRepo):
    def __init__(self, database: InMemoryDatabase) -> None:
        self._db = database

    async def create(self, reserva: Reserva) -> Reserva:
        stored = copy.deepcopy(reserva)
        stored.id = self._db.next_id("reservas")
        self._db.reservas[stored.id] = stored
        return copy.deepcopy(stored)

    async def get_by_id(self, reserva_id: int) -> Reserva | None:
        reserva = self._db.reservas.get(reserva_id)
        return copy.deepcopy(reserva) if reserva else None

    async def list(
        self,
        usuario_id: str | None = None,
        inicio_desde: datetime | None = None,
        inicio_hasta: datetime | None = None,
    ) -> Sequence[Reserva]:
        result = []
        for reserva_id in sorted(self._db.reservas):
            reserva = self._db.reservas[reserva_id]
            if usuario_id is not None and reserva.usuario_id != usuario_id:
                continue
            if inicio_desde is not None and reserva.inicio < inicio_desde:
                continue
            if inicio_hasta is not None and reserva.inicio > inicio_hasta:
                continue
            result.append(copy.deepcopy(reserva))
        return result

    async def update(self, reserva: Reserva) -> Reserva:
        if reserva.id not in self._db.reservas:
            raise TransactionError("update reserva", f"reserva {reserva.id} no existe")
        self._db.reservas[reserva.id] = copy.deepcopy(reserva)
        return copy.deepcopy(reserva)

    async def delete(self, reserva_id: int) -> None:
        if reserva_id not in self._db.reservas:
            raise TransactionError("delete reserva", f"reserva {reserva_id} no existe")
        dependientes = [
            name
            for name, table in (
                ("confirmaciones", self._db.confirmaciones),
                ("pagos_reserva", self._db.pagos_reserva),
                ("pagos_danos", self._db.pagos_danos),
            )
            if any(row.reserva_id == reserva_id for row in table.values())
        ]
        if dependientes:
            raise TransactionError(
                "delete reserva",
                f"registros dependientes en {', '.join(dependientes)}",
            )
        del self._db.reservas[reserva_id]


class InMemoryAreaRepo(AreaRepo):
    def __init__(self, database: InMemoryDatabase) -> None:
        self._db = database

    async def get_by_id(self, area_id: int) -> Area | None:
        area = self._db.areas.get(area_id)
        return copy.copy(area) if area else None

    async def list_by_ids(self, area_ids: Sequence[int]) -> dict[int, Area]:
        return {
            area_id: copy.copy(self._db.areas[area_id])
            for area_id in area_ids
            if area_id in self._db.areas
        }
