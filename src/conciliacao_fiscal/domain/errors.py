"""Domain exceptions used across API and services."""

from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any


def compose_error_message(*, cause: str, action: str) -> str:
    """Build a user-facing error message with cause and corrective action."""

    return f"Causa: {cause} Ação: {action}"


@dataclass(slots=True)
class DomainError(Exception):
    """Base exception for predictable domain failures."""

    code: str
    message: str
    status_code: int
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message


class AuthenticationError(DomainError):
    """Raised when the request carries no authenticated session."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="UNAUTHENTICATED",
            message=message
            or compose_error_message(
                cause="Nenhuma sessão autenticada foi informada.",
                action="Autentique-se e envie a requisição novamente.",
            ),
            status_code=HTTPStatus.UNAUTHORIZED,
            details=details or {},
        )


class PermissionDeniedError(DomainError):
    """Raised when the session role is not allowed to run an operation."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="FORBIDDEN",
            message=message
            or compose_error_message(
                cause="O perfil do usuário não permite esta operação.",
                action="Solicite a um administrador ou funcionário.",
            ),
            status_code=HTTPStatus.FORBIDDEN,
            details=details or {},
        )


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="NOT_FOUND",
            message=message
            or compose_error_message(
                cause="O registro solicitado não foi encontrado.",
                action="Confira o identificador informado.",
            ),
            status_code=HTTPStatus.NOT_FOUND,
            details=details or {},
        )


class InvalidRequestError(DomainError):
    """Raised when user sends semantically invalid input."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="INVALID_REQUEST",
            message=message
            or compose_error_message(
                cause="Os dados enviados violam regras de negócio.",
                action="Ajuste os campos e tente novamente.",
            ),
            status_code=HTTPStatus.BAD_REQUEST,
            details=details or {},
        )


class InvalidStateError(DomainError):
    """Raised when the current lifecycle state forbids the operation."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="INVALID_STATE",
            message=message
            or compose_error_message(
                cause="O estado atual do registro não permite esta operação.",
                action="Verifique a situação do processo ou acordo.",
            ),
            status_code=HTTPStatus.BAD_REQUEST,
            details=details or {},
        )
