from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
)
from sqlalchemy.types import TypeDecorator


class UTCDateTime(TypeDecorator):
    """Guarda UTC naive y devuelve datetimes con tzinfo=UTC."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect):
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value: datetime | None, dialect):
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


metadata = MetaData()

# Catálogo de áreas; lo administra otro servicio, aquí solo se lee
areas = Table(
    "areas",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("nombre", String(120), nullable=False),
)

reservas = Table(
    "reservas",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("area_id", Integer, nullable=False, index=True),
    Column("usuario_id", String(64), nullable=False, index=True),
    Column("usuario_nombre", String(150)),
    Column("usuario_rol", String(32)),
    Column("usuario_email", String(255)),
    Column("inicio", UTCDateTime, nullable=False, index=True),
    Column("fin", UTCDateTime, nullable=False),
    Column("costo", Numeric(12, 2), nullable=False),
    Column("estado", String(16), nullable=False),
    Column("estado_entrega", String(16), nullable=False),
    Column("costo_entrega", Numeric(12, 2)),
    Column("pago_entrega", Boolean, nullable=False, default=False),
    Column("observaciones_entrega", Text),
    Column("usuario_entrega", String(150)),
    Column("fecha_entrega", UTCDateTime),
    Column("fecha_creacion", UTCDateTime),
)

confirmaciones = Table(
    "confirmaciones",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("reserva_id", Integer, ForeignKey("reservas.id"), nullable=False, unique=True),
    Column("codigo_qr", String(80), nullable=False, unique=True),
    Column("verificada", String(16), nullable=False),
    Column("fecha_creacion", UTCDateTime),
)

pagos_reserva = Table(
    "pagos_reserva",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("reserva_id", Integer, ForeignKey("reservas.id"), nullable=False, index=True),
    Column("metodo_pago", String(16), nullable=False),
    Column("monto", Numeric(12, 2), nullable=False),
    Column("estado", String(16), nullable=False),
    Column("referencia_pago", String(80), nullable=False, unique=True),
    Column("fecha_creacion", UTCDateTime),
)

facturas = Table(
    "facturas",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "pago_reserva_id",
        Integer,
        ForeignKey("pagos_reserva.id"),
        nullable=False,
        unique=True,
    ),
    Column("numero", String(50), nullable=False, unique=True),
    Column("monto", Numeric(12, 2), nullable=False),
    Column("fecha_emision", UTCDateTime),
)

pagos_danos = Table(
    "pagos_danos",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("reserva_id", Integer, ForeignKey("reservas.id"), nullable=False, index=True),
    Column("monto_danos", Numeric(12, 2), nullable=False),
    Column("descripcion_danos", Text, nullable=False),
    Column("usuario_registra", String(150), nullable=False),
    Column("usuario_actualiza", String(150)),
    Column("estado_pago", String(16), nullable=False, index=True),
    Column("stripe_session_id", String(255)),
    Column("stripe_payment_id", String(255)),
    Column("fecha_pago", UTCDateTime),
    Column("fecha_registro", UTCDateTime, nullable=False),
)
