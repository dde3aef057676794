"""Case registry routes."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from conciliacao_fiscal.api.auth import CurrentUser, WriterUser
from conciliacao_fiscal.api.dependencies import get_processo_service
from conciliacao_fiscal.api.schemas.processos import (
    ChangeStatusRequest,
    CreateProcessoRequest,
    HistoricoListResponse,
    HistoricoResponse,
    ProcessoResponse,
)
from conciliacao_fiscal.services.processo_service import (
    ChangeStatusInput,
    ContribuinteInput,
    CreateProcessoInput,
    ProcessoService,
)

router = APIRouter(prefix="/processos", tags=["Processos"])


@router.post(
    "",
    response_model=ProcessoResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Payload invalido"},
        409: {"description": "Numero de processo duplicado"},
    },
)
def create_processo(
    payload: CreateProcessoRequest,
    user: WriterUser,
    service: Annotated[ProcessoService, Depends(get_processo_service)],
) -> ProcessoResponse:
    """Register a case in RECEPCIONADO status."""

    processo = service.create_processo(
        CreateProcessoInput(
            numero=payload.numero,
            tipo=payload.tipo,
            valor_original=payload.valor_original,
            contribuinte=ContribuinteInput(
                nome=payload.contribuinte.nome,
                documento=payload.contribuinte.documento,
                email=payload.contribuinte.email,
                telefone=payload.contribuinte.telefone,
            ),
            usuario_id=user.user_id,
            observacoes=payload.observacoes,
        )
    )
    return ProcessoResponse.from_model(processo)


@router.get(
    "/{processo_id}",
    response_model=ProcessoResponse,
    responses={404: {"description": "Processo nao encontrado"}},
)
def get_processo(
    processo_id: UUID,
    _user: CurrentUser,
    service: Annotated[ProcessoService, Depends(get_processo_service)],
) -> ProcessoResponse:
    return ProcessoResponse.from_model(service.get_processo(processo_id))


@router.put(
    "/{processo_id}/status",
    response_model=ProcessoResponse,
    responses={
        400: {"description": "Transicao de status nao permitida"},
        404: {"description": "Processo nao encontrado"},
    },
)
def change_status(
    processo_id: UUID,
    payload: ChangeStatusRequest,
    user: WriterUser,
    service: Annotated[ProcessoService, Depends(get_processo_service)],
) -> ProcessoResponse:
    """Apply a manual lifecycle transition."""

    processo = service.change_status(
        ChangeStatusInput(
            processo_id=processo_id,
            status=payload.status,
            usuario_id=user.user_id,
            observacoes=payload.observacoes,
        )
    )
    return ProcessoResponse.from_model(processo)


@router.get(
    "/{processo_id}/historico",
    response_model=HistoricoListResponse,
    responses={404: {"description": "Processo nao encontrado"}},
)
def list_historico(
    processo_id: UUID,
    _user: CurrentUser,
    service: Annotated[ProcessoService, Depends(get_processo_service)],
) -> HistoricoListResponse:
    """List the case timeline, newest entries first."""

    items = service.list_historico(processo_id)
    return HistoricoListResponse(
        processo_id=processo_id,
        items=[HistoricoResponse.from_model(item) for item in items],
    )
