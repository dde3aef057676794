"""Domain value objects for session identity."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class UserRole(enum.StrEnum):
    """Roles granted by the external authentication provider."""

    ADMIN = "ADMIN"
    FUNCIONARIO = "FUNCIONARIO"
    VISUALIZADOR = "VISUALIZADOR"


WRITE_ROLES: frozenset[UserRole] = frozenset({UserRole.ADMIN, UserRole.FUNCIONARIO})


@dataclass(frozen=True, slots=True)
class SessionUser:
    """Authenticated user attached to the current request."""

    user_id: str
    role: UserRole

    def __post_init__(self) -> None:
        if not self.user_id.strip():
            raise ValueError("user_id cannot be blank")

    def has_role(self, *roles: UserRole) -> bool:
        """Return whether the user holds one of the given roles."""
        return self.role in roles
