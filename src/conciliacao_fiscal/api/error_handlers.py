"""Global API exception handlers aligned with contract response shape."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from conciliacao_fiscal.domain.errors import DomainError, compose_error_message

logger = logging.getLogger(__name__)


def _error_payload(code: str, message: str, details: dict[str, Any]) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "error": message,
        "code": code,
    }
    if details:
        payload["details"] = details
    return payload


async def handle_domain_error(_: Request, exc: DomainError) -> JSONResponse:
    """Serialize domain error to contract-compliant response."""

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_payload(exc.code, exc.message, exc.details),
    )


async def handle_validation_error(
    _: Request, exc: RequestValidationError
) -> JSONResponse:
    """Map request validation failures to HTTP 400 contract."""

    return JSONResponse(
        status_code=HTTPStatus.BAD_REQUEST,
        content=_error_payload(
            code="INVALID_REQUEST",
            message=compose_error_message(
                cause="A validação dos dados da requisição falhou.",
                action="Corrija os campos inválidos e envie novamente.",
            ),
            details={"errors": jsonable_encoder(exc.errors())},
        ),
    )


async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    """Translate persistence integrity errors to a conflict response."""

    logger.warning(
        "integrity_error",
        extra={"path": request.url.path, "constraint": str(exc.orig)},
    )
    return JSONResponse(
        status_code=HTTPStatus.CONFLICT,
        content=_error_payload(
            code="CONFLICT",
            message=compose_error_message(
                cause="Uma restrição de persistência foi violada.",
                action="Revise a consistência dos dados e tente novamente.",
            ),
            details={},
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Serialize unexpected failures with generic message."""

    logger.exception(
        "unexpected_error",
        exc_info=exc,
        extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
        content=_error_payload(
            code="INTERNAL_SERVER_ERROR",
            message=compose_error_message(
                cause="Ocorreu um erro interno inesperado.",
                action="Tente novamente mais tarde ou contate o suporte.",
            ),
            details={"error_type": type(exc).__name__},
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach all global handlers to the FastAPI application."""

    app.add_exception_handler(DomainError, cast(Any, handle_domain_error))
    app.add_exception_handler(
        RequestValidationError, cast(Any, handle_validation_error)
    )
    app.add_exception_handler(IntegrityError, cast(Any, handle_integrity_error))
    app.add_exception_handler(Exception, handle_unexpected_error)
