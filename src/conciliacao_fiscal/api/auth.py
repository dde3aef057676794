"""Session identity extraction and the role authorization guard."""

from __future__ import annotations

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request

from conciliacao_fiscal.core.settings import get_settings
from conciliacao_fiscal.domain.errors import (
    AuthenticationError,
    PermissionDeniedError,
    compose_error_message,
)
from conciliacao_fiscal.domain.value_objects import WRITE_ROLES, SessionUser, UserRole


def get_session_user(request: Request) -> SessionUser:
    """Resolve the authenticated user forwarded by the auth gateway."""

    settings = get_settings()
    user_id = request.headers.get(settings.auth_user_header, "").strip()
    raw_role = request.headers.get(settings.auth_role_header, "").strip().upper()
    if not user_id or not raw_role:
        raise AuthenticationError()
    try:
        role = UserRole(raw_role)
    except ValueError as exc:
        raise AuthenticationError(
            message=compose_error_message(
                cause=f"Perfil de usuário desconhecido: {raw_role}.",
                action="Autentique-se com um perfil válido.",
            )
        ) from exc
    return SessionUser(user_id=user_id, role=role)


def ensure_roles(user: SessionUser, roles: frozenset[UserRole]) -> SessionUser:
    """Raise PermissionDeniedError unless the user holds one of the roles."""

    if user.role in roles:
        return user
    raise PermissionDeniedError(
        details={
            "role": user.role.value,
            "allowed_roles": sorted(role.value for role in roles),
        }
    )


def require_roles(*roles: UserRole) -> Callable[[SessionUser], SessionUser]:
    """Build a dependency that admits only the given roles."""

    allowed = frozenset(roles)

    def dependency(
        user: Annotated[SessionUser, Depends(get_session_user)],
    ) -> SessionUser:
        return ensure_roles(user, allowed)

    return dependency


CurrentUser = Annotated[SessionUser, Depends(get_session_user)]
WriterUser = Annotated[SessionUser, Depends(require_roles(*WRITE_ROLES))]
AdminUser = Annotated[SessionUser, Depends(require_roles(UserRole.ADMIN))]
