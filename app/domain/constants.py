"""Constantes del dominio de reservas."""

CONFIRMACION_PENDIENTE = "PENDING"

CODIGO_QR_PREFIX = "QR"
REFERENCIA_PAGO_PREFIX = "PAGO-RESERVA"

NOMBRE_USUARIO_DEFAULT = "Cliente"

STRIPE_METADATA_TIPO_PAGO_DANOS = "pago_danos"
