"""Entidad Actor - identidad resuelta de quien ejecuta una operación."""

from dataclasses import dataclass
from enum import Enum


class RolUsuario(str, Enum):
    """Roles conocidos por el servicio."""

    USER_CASUAL = "USER_CASUAL"
    USER_ADMIN = "USER_ADMIN"
    SUPER_USER = "SUPER_USER"

    @property
    def es_administrativo(self) -> bool:
        return self in (RolUsuario.USER_ADMIN, RolUsuario.SUPER_USER)


@dataclass(frozen=True)
class Actor:
    """
    Usuario autenticado que invoca una operación.

    La identidad la resuelve el API gateway; aquí solo se consume.
    """

    id: str
    nombre: str
    rol: RolUsuario
    email: str | None = None

    @property
    def es_administrativo(self) -> bool:
        """USER_ADMIN o SUPER_USER."""
        return self.rol.es_administrativo

    @property
    def es_super_usuario(self) -> bool:
        return self.rol == RolUsuario.SUPER_USER

    @property
    def es_casual(self) -> bool:
        return self.rol == RolUsuario.USER_CASUAL

    @classmethod
    def system(cls, nombre: str = "Sistema") -> "Actor":
        """Actor interno usado por procesos sin usuario humano (webhooks)."""
        return cls(id="system", nombre=nombre, rol=RolUsuario.SUPER_USER)
