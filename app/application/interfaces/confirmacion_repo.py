"""Interface ConfirmacionRepo - Puerto para confirmaciones de reserva."""

from abc import ABC, abstractmethod

from app.domain.entities.confirmacion import Confirmacion


class ConfirmacionRepo(ABC):
    @abstractmethod
    async def create(self, confirmacion: Confirmacion) -> Confirmacion:
        raise NotImplementedError

    @abstractmethod
    async def get_by_reserva(self, reserva_id: int) -> Confirmacion | None:
        raise NotImplementedError

    @abstractmethod
    async def delete_by_reserva(self, reserva_id: int) -> int:
        """
        Elimina la confirmación de una reserva.

        Returns:
            Número de filas eliminadas.
        """
        raise NotImplementedError
