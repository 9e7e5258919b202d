"""
Resolución del actor a partir de los headers del API gateway.

El gateway autentica al usuario y reenvía su identidad en X-User-Id,
X-User-Role y X-User-Name (X-User-Email es opcional).
"""

from urllib.parse import unquote

from fastapi import Header, HTTPException, status

from app.domain.entities.actor import Actor, RolUsuario


def get_actor(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    x_user_role: str | None = Header(default=None, alias="X-User-Role"),
    x_user_name: str | None = Header(default=None, alias="X-User-Name"),
    x_user_email: str | None = Header(default=None, alias="X-User-Email"),
) -> Actor:
    if not x_user_id or not x_user_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuario no autenticado",
        )
    try:
        rol = RolUsuario(x_user_role.strip().upper())
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Rol desconocido: {x_user_role}",
        ) from exc
    # El gateway codifica el nombre para permitir acentos en headers
    nombre = unquote(x_user_name) if x_user_name else x_user_id
    return Actor(id=x_user_id, nombre=nombre, rol=rol, email=x_user_email or None)
