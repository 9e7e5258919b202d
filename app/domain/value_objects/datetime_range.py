"""Value Object DatetimeRange - ventana horaria de una reserva."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone


def ensure_utc(value: datetime) -> datetime:
    """Normaliza un datetime a UTC; los valores naive se interpretan como UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class DatetimeRange:
    """
    Value Object inmutable que representa la ventana [inicio, fin) de una reserva.

    Attributes:
        start: Fecha/hora de inicio.
        end: Fecha/hora de fin.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", ensure_utc(self.start))
        object.__setattr__(self, "end", ensure_utc(self.end))
        if self.start >= self.end:
            raise ValueError(
                f"start debe ser anterior a end: {self.start} >= {self.end}"
            )

    @property
    def duration(self) -> timedelta:
        """Retorna la duración del rango."""
        return self.end - self.start

    def overlaps_with(self, other: "DatetimeRange") -> bool:
        """Verifica si este rango se superpone con otro."""
        return self.start < other.end and other.start < self.end

    def contains(self, dt: datetime) -> bool:
        """Verifica si una fecha está dentro del rango (extremos incluidos)."""
        return self.start <= ensure_utc(dt) <= self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()} -> {self.end.isoformat()}"

    @classmethod
    def whole_days(cls, first_day: date, last_day: date) -> "DatetimeRange":
        """
        Rango que cubre días completos, de 00:00 del primero al último instante del último.

        Usado por los reportes: el día final se incluye hasta 23:59:59.999999.
        """
        return cls(
            start=datetime.combine(first_day, time.min, tzinfo=timezone.utc),
            end=datetime.combine(last_day, time.max, tzinfo=timezone.utc),
        )
