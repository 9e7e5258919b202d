"""Interface PagoDanosRepo - Puerto para pagos por daños."""

from abc import ABC, abstractmethod
from typing import Sequence

from app.domain.entities.pago_danos import EstadoPagoDanos, PagoDanos


class PagoDanosRepo(ABC):
    @abstractmethod
    async def create(self, pago: PagoDanos) -> PagoDanos:
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, pago_danos_id: int) -> PagoDanos | None:
        raise NotImplementedError

    @abstractmethod
    async def list_by_reserva(self, reserva_id: int) -> Sequence[PagoDanos]:
        """Pagos de la reserva, el registro más reciente primero."""
        raise NotImplementedError

    @abstractmethod
    async def list_by_estado(self, estado: EstadoPagoDanos) -> Sequence[PagoDanos]:
        """Pagos en un estado dado, el registro más reciente primero."""
        raise NotImplementedError

    @abstractmethod
    async def update(self, pago: PagoDanos) -> PagoDanos:
        raise NotImplementedError

    @abstractmethod
    async def delete_by_reserva(self, reserva_id: int) -> int:
        raise NotImplementedError
