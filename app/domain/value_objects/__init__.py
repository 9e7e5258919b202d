"""Value Objects del dominio de reservas."""

from app.domain.value_objects.datetime_range import DatetimeRange, ensure_utc

__all__ = [
    "DatetimeRange",
    "ensure_utc",
]
