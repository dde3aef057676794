"""API dependency providers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from conciliacao_fiscal.core.settings import get_settings
from conciliacao_fiscal.db.models.processo import ProcessoStatus
from conciliacao_fiscal.db.session import get_db_session
from conciliacao_fiscal.repositories.acordo_query_repository import (
    AcordoQueryRepository,
)
from conciliacao_fiscal.repositories.acordo_repository import AcordoRepository
from conciliacao_fiscal.repositories.audit_repository import AuditRepository
from conciliacao_fiscal.repositories.parcela_repository import ParcelaRepository
from conciliacao_fiscal.repositories.pauta_repository import PautaRepository
from conciliacao_fiscal.repositories.processo_repository import ProcessoRepository
from conciliacao_fiscal.services.acordo_completion import AcordoCompletion
from conciliacao_fiscal.services.acordo_service import AcordoService
from conciliacao_fiscal.services.inadimplencia_service import InadimplenciaService
from conciliacao_fiscal.services.julgamento_service import JulgamentoService
from conciliacao_fiscal.services.pagamento_service import PagamentoService
from conciliacao_fiscal.services.parcela_service import ParcelaService
from conciliacao_fiscal.services.processo_service import ProcessoService


def fulfillment_status_override() -> ProcessoStatus | None:
    """Return the configured case status for fulfilled agreements, if any."""

    return get_settings().acordo_cumprido_processo_status


def build_completion(session: Session) -> AcordoCompletion:
    """Build the shared agreement fulfillment cascade for one session."""

    return AcordoCompletion(
        acordo_repository=AcordoRepository(session),
        parcela_repository=ParcelaRepository(session),
        processo_repository=ProcessoRepository(session),
        audit_repository=AuditRepository(session),
        processo_status_override=fulfillment_status_override(),
    )


def build_inadimplencia_service(session: Session) -> InadimplenciaService:
    """Build overdue service outside request scope, e.g. from the CLI."""

    settings = get_settings()
    return InadimplenciaService(
        parcela_repository=ParcelaRepository(session),
        acordo_repository=AcordoRepository(session),
        audit_repository=AuditRepository(session),
        session=session,
        multa_rate=settings.late_fee_rate,
        juros_diario_rate=settings.daily_interest_rate,
    )


def get_pagamento_service(
    session: Annotated[Session, Depends(get_db_session)],
) -> PagamentoService:
    """Build payment service with per-request session."""

    return PagamentoService(
        parcela_repository=ParcelaRepository(session),
        acordo_repository=AcordoRepository(session),
        audit_repository=AuditRepository(session),
        completion=build_completion(session),
        session=session,
    )


def get_parcela_service(
    session: Annotated[Session, Depends(get_db_session)],
) -> ParcelaService:
    """Build installment adjustment service with per-request session."""

    return ParcelaService(
        parcela_repository=ParcelaRepository(session),
        acordo_repository=AcordoRepository(session),
        audit_repository=AuditRepository(session),
        completion=build_completion(session),
        session=session,
    )


def get_acordo_service(
    session: Annotated[Session, Depends(get_db_session)],
) -> AcordoService:
    """Build agreement service with per-request session."""

    return AcordoService(
        acordo_repository=AcordoRepository(session),
        parcela_repository=ParcelaRepository(session),
        processo_repository=ProcessoRepository(session),
        audit_repository=AuditRepository(session),
        completion=build_completion(session),
        session=session,
    )


def get_acordo_query_repository(
    session: Annotated[Session, Depends(get_db_session)],
) -> AcordoQueryRepository:
    """Build read-only agreement query repository with per-request session."""

    return AcordoQueryRepository(session)


def get_inadimplencia_service(
    session: Annotated[Session, Depends(get_db_session)],
) -> InadimplenciaService:
    """Build overdue batch/report service with per-request session."""

    return build_inadimplencia_service(session)


def get_processo_service(
    session: Annotated[Session, Depends(get_db_session)],
) -> ProcessoService:
    """Build case registry service with per-request session."""

    return ProcessoService(
        processo_repository=ProcessoRepository(session),
        audit_repository=AuditRepository(session),
        session=session,
    )


def get_julgamento_service(
    session: Annotated[Session, Depends(get_db_session)],
) -> JulgamentoService:
    """Build docket and decision service with per-request session."""

    return JulgamentoService(
        pauta_repository=PautaRepository(session),
        processo_repository=ProcessoRepository(session),
        audit_repository=AuditRepository(session),
        session=session,
    )
