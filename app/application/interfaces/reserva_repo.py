"""Interface ReservaRepo - Puerto para el repositorio de reservas."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Sequence

from app.domain.entities.reserva import Area, Reserva


class ReservaRepo(ABC):
    """
    Puerto para el repositorio de reservas.

    Solo maneja la fila de la reserva; los hijos tienen sus propios repositorios.
    """

    @abstractmethod
    async def create(self, reserva: Reserva) -> Reserva:
        """
        Inserta una reserva.

        Args:
            reserva: Reserva sin ID.

        Returns:
            Reserva con el ID asignado por el store.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, reserva_id: int) -> Reserva | None:
        raise NotImplementedError

    @abstractmethod
    async def list(
        self,
        usuario_id: str | None = None,
        inicio_desde: datetime | None = None,
        inicio_hasta: datetime | None = None,
    ) -> Sequence[Reserva]:
        """
        Lista reservas ordenadas por ID.

        Args:
            usuario_id: Filtra por dueño si se indica.
            inicio_desde: Límite inferior (inclusive) para `inicio`.
            inicio_hasta: Límite superior (inclusive) para `inicio`.
        """
        raise NotImplementedError

    @abstractmethod
    async def update(self, reserva: Reserva) -> Reserva:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, reserva_id: int) -> None:
        """
        Elimina solo la fila de la reserva.

        Raises:
            TransactionError: si aún existen filas hijas que la referencian.
        """
        raise NotImplementedError


class AreaRepo(ABC):
    """Puerto de lectura para las áreas comunes."""

    @abstractmethod
    async def get_by_id(self, area_id: int) -> Area | None:
        raise NotImplementedError

    @abstractmethod
    async def list_by_ids(self, area_ids: Sequence[int]) -> dict[int, Area]:
        raise NotImplementedError
