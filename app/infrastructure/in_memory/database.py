import copy
from dataclasses import dataclass, field
from typing import Any

from app.domain.entities.confirmacion import Confirmacion
from app.domain.entities.pago_danos import PagoDanos
from app.domain.entities.pago_reserva import Factura, PagoReserva
from app.domain.entities.reserva import Area, Reserva

TABLES = ("areas", "reservas", "confirmaciones", "pagos_reserva", "facturas", "pagos_danos")


@dataclass
class InMemoryDatabase:
    """
    Store en memoria compartido por los repositorios in-memory.

    Cada tabla es un dict id -> entidad. El transaction manager toma una copia
    profunda al iniciar y la restaura si la unidad de trabajo falla.
    """

    areas: dict[int, Area] = field(default_factory=dict)
    reservas: dict[int, Reserva] = field(default_factory=dict)
    confirmaciones: dict[int, Confirmacion] = field(default_factory=dict)
    pagos_reserva: dict[int, PagoReserva] = field(default_factory=dict)
    facturas: dict[int, Factura] = field(default_factory=dict)
    pagos_danos: dict[int, PagoDanos] = field(default_factory=dict)
    sequences: dict[str, int] = field(default_factory=dict)

    def next_id(self, table: str) -> int:
        value = self.sequences.get(table, 0) + 1
        self.sequences[table] = value
        return value

    def snapshot(self) -> dict[str, Any]:
        state = {name: getattr(self, name) for name in TABLES}
        state["sequences"] = self.sequences
        return copy.deepcopy(state)

    def restore(self, state: dict[str, Any]) -> None:
        for name, value in state.items():
            setattr(self, name, value)

    def add_area(self, area_id: int, nombre: str) -> Area:
        area = Area(id=area_id, nombre=nombre)
        self.areas[area_id] = area
        return area
