"""Entidad PagoDanos - cobro suplementario por daños detectados en la entrega."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from app.domain.errors import ValidationError


class EstadoPagoDanos(str, Enum):
    """Estados posibles de un pago por daños."""

    PENDIENTE = "PENDIENTE"
    PAGADO = "PAGADO"
    CANCELADO = "CANCELADO"


CAMPOS_ACTUALIZABLES = frozenset(
    {
        "monto_danos",
        "descripcion_danos",
        "estado_pago",
        "stripe_session_id",
        "stripe_payment_id",
        "fecha_pago",
    }
)

# Campos que un parche no puede dejar en null.
CAMPOS_OBLIGATORIOS = frozenset({"monto_danos", "descripcion_danos", "estado_pago"})


@dataclass
class PagoDanos:
    """
    Registro de daños de una reserva.

    Un monto 0 es un registro auditable de "sin daños" y nace PAGADO; un monto
    positivo queda PENDIENTE hasta completar el checkout.
    """

    reserva_id: int
    monto_danos: Decimal
    descripcion_danos: str
    usuario_registra: str
    estado_pago: EstadoPagoDanos = EstadoPagoDanos.PENDIENTE
    id: int | None = None
    usuario_actualiza: str | None = None
    stripe_session_id: str | None = None
    stripe_payment_id: str | None = None
    fecha_pago: datetime | None = None
    fecha_registro: datetime | None = None

    # === Propiedades ===

    @property
    def sin_danos(self) -> bool:
        return self.monto_danos == 0

    @property
    def esta_pendiente(self) -> bool:
        return self.estado_pago == EstadoPagoDanos.PENDIENTE

    @property
    def bloquea_entrega(self) -> bool:
        """Un cobro positivo sin pagar impide cerrar la entrega."""
        return self.esta_pendiente and self.monto_danos > 0

    # === Métodos de negocio ===

    @classmethod
    def registrar(
        cls,
        reserva_id: int,
        monto_danos: Decimal | None,
        descripcion_danos: str | None,
        usuario_registra: str,
        ahora: datetime,
    ) -> "PagoDanos":
        """Factory: decide el estado inicial según el monto."""
        if monto_danos is None:
            raise ValidationError("monto_danos", "monto_danos es requerido")
        if monto_danos < 0:
            raise ValidationError("monto_danos", "monto_danos no puede ser negativo")
        if not descripcion_danos:
            raise ValidationError("descripcion_danos", "descripcion_danos es requerida")

        sin_danos = monto_danos == 0
        return cls(
            reserva_id=reserva_id,
            monto_danos=monto_danos,
            descripcion_danos=descripcion_danos,
            usuario_registra=usuario_registra,
            estado_pago=EstadoPagoDanos.PAGADO if sin_danos else EstadoPagoDanos.PENDIENTE,
            fecha_pago=ahora if sin_danos else None,
            fecha_registro=ahora,
        )

    def aplicar_cambios(self, cambios: dict[str, Any], usuario: str) -> None:
        """Parche arbitrario; siempre deja constancia de quién actualizó."""
        desconocidos = set(cambios) - CAMPOS_ACTUALIZABLES
        if desconocidos:
            raise ValidationError(
                ", ".join(sorted(desconocidos)), "campos no actualizables"
            )
        nulos = sorted(c for c in CAMPOS_OBLIGATORIOS & set(cambios) if cambios[c] is None)
        if nulos:
            raise ValidationError(", ".join(nulos), "no puede ser null")
        if "descripcion_danos" in cambios and not cambios["descripcion_danos"]:
            raise ValidationError("descripcion_danos", "descripcion_danos es requerida")
        if "monto_danos" in cambios and cambios["monto_danos"] < 0:
            raise ValidationError("monto_danos", "monto_danos no puede ser negativo")
        for campo, valor in cambios.items():
            if campo == "estado_pago":
                valor = EstadoPagoDanos(valor)
            setattr(self, campo, valor)
        self.usuario_actualiza = usuario

    def marcar_pagado(
        self,
        stripe_session_id: str,
        stripe_payment_id: str,
        usuario: str,
        ahora: datetime,
    ) -> None:
        """Cierra el ciclo de checkout con los identificadores externos."""
        if not stripe_session_id:
            raise ValidationError("stripe_session_id", "stripe_session_id es requerido")
        if not stripe_payment_id:
            raise ValidationError("stripe_payment_id", "stripe_payment_id es requerido")
        self.aplicar_cambios(
            {
                "estado_pago": EstadoPagoDanos.PAGADO,
                "stripe_session_id": stripe_session_id,
                "stripe_payment_id": stripe_payment_id,
                "fecha_pago": ahora,
            },
            usuario=usuario,
        )
