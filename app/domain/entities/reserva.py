"""Entidad Reserva - raíz del agregado de reservas de áreas comunes."""

from dataclasses import dataclass, fields
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from app.domain.errors import ValidationError
from app.domain.value_objects.datetime_range import DatetimeRange, ensure_utc


class EstadoReserva(str, Enum):
    """Ciclo de vida de una reserva."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"

    def confirma_desde(self, anterior: "EstadoReserva") -> bool:
        """True solo en el flanco hacia CONFIRMED (el estado previo era otro)."""
        return self == EstadoReserva.CONFIRMED and anterior != EstadoReserva.CONFIRMED


class EstadoEntrega(str, Enum):
    """Estado de la entrega/devolución física del área."""

    PENDIENTE = "PENDIENTE"
    ENTREGADO = "ENTREGADO"
    NO_APLICA = "NO_APLICA"

    @classmethod
    def para_danos(
        cls,
        monto_danos: Decimal | None,
        hay_danos_pendientes: bool = False,
    ) -> "EstadoEntrega":
        """
        Estado de entrega que corresponde a una evaluación de daños.

        Queda PENDIENTE mientras exista un cobro de daños positivo sin pagar,
        ya sea el declarado ahora o uno registrado antes para la misma reserva.
        """
        if monto_danos is not None and monto_danos > 0:
            return cls.PENDIENTE
        if hay_danos_pendientes:
            return cls.PENDIENTE
        return cls.ENTREGADO


@dataclass
class Area:
    """Área común reservable (solo lectura para este servicio)."""

    id: int
    nombre: str


# Campos que un parche de actualización puede tocar.
CAMPOS_ACTUALIZABLES = frozenset(
    {
        "area_id",
        "usuario_id",
        "usuario_nombre",
        "usuario_rol",
        "usuario_email",
        "inicio",
        "fin",
        "costo",
        "estado",
        "estado_entrega",
        "costo_entrega",
        "pago_entrega",
        "observaciones_entrega",
    }
)

# Campos de la entrega: solo roles administrativos los modifican.
CAMPOS_ENTREGA = frozenset(
    {"estado_entrega", "costo_entrega", "pago_entrega", "observaciones_entrega"}
)

# Campos que un parche no puede dejar en null.
CAMPOS_OBLIGATORIOS = frozenset(
    {"area_id", "usuario_id", "inicio", "fin", "costo", "estado", "estado_entrega", "pago_entrega"}
)


@dataclass
class Reserva:
    """
    Reserva de un área común por parte de un usuario.

    Es la raíz del agregado: Confirmacion, PagoReserva y PagoDanos viven y
    mueren con ella.
    """

    area_id: int
    usuario_id: str
    inicio: datetime
    fin: datetime
    costo: Decimal
    id: int | None = None

    # Snapshot del usuario
    usuario_nombre: str | None = None
    usuario_rol: str | None = None
    usuario_email: str | None = None

    # Estados
    estado: EstadoReserva = EstadoReserva.PENDING
    estado_entrega: EstadoEntrega = EstadoEntrega.PENDIENTE

    # Datos de entrega
    costo_entrega: Decimal | None = None
    pago_entrega: bool = False
    observaciones_entrega: str | None = None
    usuario_entrega: str | None = None
    fecha_entrega: datetime | None = None

    fecha_creacion: datetime | None = None

    # === Propiedades ===

    @property
    def ventana(self) -> DatetimeRange:
        """Ventana horaria como Value Object (valida inicio < fin)."""
        return DatetimeRange(start=self.inicio, end=self.fin)

    @property
    def esta_entregada(self) -> bool:
        return self.estado_entrega == EstadoEntrega.ENTREGADO

    def pertenece_a(self, usuario_id: str) -> bool:
        return self.usuario_id == str(usuario_id)

    # === Métodos de negocio ===

    def validar(self) -> None:
        """Verifica las invariantes de la reserva."""
        if not self.usuario_id:
            raise ValidationError("usuario_id", "usuario_id es requerido")
        if self.costo is None:
            raise ValidationError("costo", "costo es requerido")
        if self.costo < 0:
            raise ValidationError("costo", "costo no puede ser negativo")
        try:
            ventana = self.ventana
        except ValueError as exc:
            raise ValidationError("fin", "fin debe ser posterior a inicio") from exc
        self.inicio = ventana.start
        self.fin = ventana.end

    def aplicar_cambios(self, cambios: dict[str, Any]) -> bool:
        """
        Aplica un parche parcial y revalida.

        Returns:
            True si el parche llevó la reserva a CONFIRMED desde otro estado.
        """
        desconocidos = set(cambios) - CAMPOS_ACTUALIZABLES
        if desconocidos:
            raise ValidationError(
                ", ".join(sorted(desconocidos)), "campos no actualizables"
            )
        nulos = sorted(c for c in CAMPOS_OBLIGATORIOS & set(cambios) if cambios[c] is None)
        if nulos:
            raise ValidationError(", ".join(nulos), "no puede ser null")

        anterior = self.estado
        for campo, valor in cambios.items():
            if campo == "estado":
                valor = EstadoReserva(valor)
            elif campo == "estado_entrega":
                valor = EstadoEntrega(valor)
            elif campo in ("inicio", "fin"):
                valor = ensure_utc(valor)
            elif campo == "usuario_id":
                valor = str(valor)
            setattr(self, campo, valor)

        self.validar()
        return self.estado.confirma_desde(anterior)

    def registrar_entrega(
        self,
        estado_entrega: EstadoEntrega,
        usuario: str,
        ahora: datetime,
        costo_entrega: Decimal | None = None,
        pago_entrega: bool = False,
        observaciones: str | None = None,
    ) -> None:
        """Guarda los datos de la entrega; fecha_entrega solo existe si quedó ENTREGADO."""
        self.estado_entrega = estado_entrega
        self.costo_entrega = costo_entrega
        self.pago_entrega = pago_entrega
        self.observaciones_entrega = observaciones
        self.usuario_entrega = usuario
        self.fecha_entrega = ahora if estado_entrega == EstadoEntrega.ENTREGADO else None

    def marcar_entregada(self, ahora: datetime) -> None:
        """Cierra la entrega (daños resueltos o inexistentes)."""
        self.estado_entrega = EstadoEntrega.ENTREGADO
        if self.fecha_entrega is None:
            self.fecha_entrega = ahora

    def marcar_entrega_pendiente(self) -> None:
        """Reabre la entrega mientras haya daños por cobrar."""
        self.estado_entrega = EstadoEntrega.PENDIENTE
        self.fecha_entrega = None

    def cambiar_estado_entrega(self, estado: EstadoEntrega, ahora: datetime) -> None:
        """fecha_entrega existe solo mientras la entrega está ENTREGADO."""
        if estado == EstadoEntrega.ENTREGADO:
            self.marcar_entregada(ahora)
        elif estado == EstadoEntrega.PENDIENTE:
            self.marcar_entrega_pendiente()
        else:
            self.estado_entrega = estado
            self.fecha_entrega = None

    def snapshot(self) -> dict[str, Any]:
        """Diccionario plano con todos los campos (útil para logs y persistencia)."""
        return {f.name: getattr(self, f.name) for f in fields(self)}
