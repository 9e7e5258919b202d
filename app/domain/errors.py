"""Excepciones de dominio para el servicio de reservas de áreas comunes."""


class DomainError(Exception):
    """Clase base para todos los errores de dominio."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


# === Errores de Validación ===


class ValidationError(DomainError):
    """Error de validación de datos de entrada."""

    def __init__(self, field: str, message: str):
        super().__init__(
            message=f"Validación fallida en '{field}': {message}",
            code="VALIDATION_ERROR",
        )
        self.field = field


# === Errores de búsqueda ===


class NotFoundError(DomainError):
    """El recurso referenciado no existe."""

    def __init__(self, message: str, code: str = "NOT_FOUND"):
        super().__init__(message=message, code=code)


class ReservaNotFoundError(NotFoundError):
    """La reserva no existe."""

    def __init__(self, reserva_id: int):
        super().__init__(
            message=f"Reserva con ID {reserva_id} no encontrada",
            code="RESERVA_NOT_FOUND",
        )
        self.reserva_id = reserva_id


class PagoDanosNotFoundError(NotFoundError):
    """El pago por daños no existe."""

    def __init__(self, pago_danos_id: int):
        super().__init__(
            message=f"Pago por daños con ID {pago_danos_id} no encontrado",
            code="PAGO_DANOS_NOT_FOUND",
        )
        self.pago_danos_id = pago_danos_id


# === Errores de Autorización ===


class PermissionDeniedError(DomainError):
    """El rol del actor no alcanza para la operación solicitada."""

    def __init__(self, operation: str, rol: str | None = None):
        super().__init__(
            message=f"No tienes permisos para {operation}",
            code="PERMISSION_DENIED",
        )
        self.operation = operation
        self.rol = rol


# === Errores de Persistencia ===


class TransactionError(DomainError):
    """Falló una operación atómica del store; la unidad de trabajo se revierte completa."""

    def __init__(self, operation: str, detail: str | None = None):
        message = f"Falló la transacción '{operation}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message=message, code="TRANSACTION_ERROR")
        self.operation = operation
        self.detail = detail


# === Errores de Servicios Externos ===


class ExternalServiceError(DomainError):
    """Falla de un servicio externo (correo o pasarela de pagos)."""

    def __init__(self, service: str, detail: str):
        super().__init__(
            message=f"Error en servicio externo {service}: {detail}",
            code="EXTERNAL_SERVICE_ERROR",
        )
        self.service = service
        self.detail = detail
