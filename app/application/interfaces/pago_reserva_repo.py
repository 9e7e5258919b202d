"""Interfaces PagoReservaRepo y FacturaRepo - pagos principales y sus facturas."""

from abc import ABC, abstractmethod
from typing import Sequence

from app.domain.entities.pago_reserva import Factura, PagoReserva


class PagoReservaRepo(ABC):
    @abstractmethod
    async def create(self, pago: PagoReserva) -> PagoReserva:
        raise NotImplementedError

    @abstractmethod
    async def list_by_reserva(self, reserva_id: int) -> Sequence[PagoReserva]:
        """
        Lista los pagos de una reserva con su factura (si la tienen) ya cargada.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete_by_reserva(self, reserva_id: int) -> int:
        raise NotImplementedError


class FacturaRepo(ABC):
    @abstractmethod
    async def create(self, factura: Factura) -> Factura:
        raise NotImplementedError

    @abstractmethod
    async def get_by_pago(self, pago_reserva_id: int) -> Factura | None:
        raise NotImplementedError

    @abstractmethod
    async def delete_by_reserva(self, reserva_id: int) -> int:
        """
        Elimina las facturas colgadas de cualquier pago de la reserva.

        Returns:
            Número de facturas eliminadas.
        """
        raise NotImplementedError
