"""Docket and judgment session routes."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from conciliacao_fiscal.api.auth import WriterUser
from conciliacao_fiscal.api.dependencies import get_julgamento_service
from conciliacao_fiscal.api.schemas.julgamento import (
    AbrirSessaoRequest,
    CreatePautaRequest,
    DecisaoResponse,
    IncluirProcessoRequest,
    PautaResponse,
    ProcessoPautaResponse,
    RegistrarDecisaoRequest,
    SessaoResponse,
)
from conciliacao_fiscal.services.julgamento_service import (
    AbrirSessaoInput,
    CreatePautaInput,
    FinalizarSessaoInput,
    IncluirProcessoInput,
    JulgamentoService,
    RegistrarDecisaoInput,
    VotoInput,
)

pautas_router = APIRouter(prefix="/pautas", tags=["Pautas"])
sessoes_router = APIRouter(prefix="/sessoes", tags=["Sessoes"])


@pautas_router.post(
    "",
    response_model=PautaResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Numero de pauta duplicado"}},
)
def create_pauta(
    payload: CreatePautaRequest,
    user: WriterUser,
    service: Annotated[JulgamentoService, Depends(get_julgamento_service)],
) -> PautaResponse:
    pauta = service.create_pauta(
        CreatePautaInput(
            numero=payload.numero,
            data_pauta=payload.data_pauta,
            usuario_id=user.user_id,
            descricao=payload.descricao,
        )
    )
    return PautaResponse.from_model(pauta)


@pautas_router.post(
    "/{pauta_id}/processos",
    response_model=ProcessoPautaResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Pauta fechada ou processo fora de analise"},
        404: {"description": "Pauta ou processo nao encontrado"},
    },
)
def incluir_processo(
    pauta_id: UUID,
    payload: IncluirProcessoRequest,
    user: WriterUser,
    service: Annotated[JulgamentoService, Depends(get_julgamento_service)],
) -> ProcessoPautaResponse:
    """Append a case to the docket and move it to EM_PAUTA."""

    entry = service.incluir_processo(
        IncluirProcessoInput(
            pauta_id=pauta_id,
            processo_id=payload.processo_id,
            usuario_id=user.user_id,
            relator=payload.relator,
            revisores=tuple(payload.revisores),
        )
    )
    return ProcessoPautaResponse.from_model(entry)


@sessoes_router.post(
    "",
    response_model=SessaoResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Pauta ja possui sessao"},
        404: {"description": "Pauta nao encontrada"},
    },
)
def abrir_sessao(
    payload: AbrirSessaoRequest,
    user: WriterUser,
    service: Annotated[JulgamentoService, Depends(get_julgamento_service)],
) -> SessaoResponse:
    sessao = service.abrir_sessao(
        AbrirSessaoInput(
            pauta_id=payload.pauta_id,
            usuario_id=user.user_id,
            data_inicio=payload.data_inicio,
            presidente=payload.presidente,
        )
    )
    return SessaoResponse.from_model(sessao)


@sessoes_router.post(
    "/{sessao_id}/decisoes",
    response_model=DecisaoResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Decisao invalida para o resultado informado"},
        404: {"description": "Sessao ou processo nao encontrado"},
    },
)
def registrar_decisao(
    sessao_id: UUID,
    payload: RegistrarDecisaoRequest,
    user: WriterUser,
    service: Annotated[JulgamentoService, Depends(get_julgamento_service)],
) -> DecisaoResponse:
    """Record the outcome of one docketed case with its votes."""

    decisao = service.registrar_decisao(
        RegistrarDecisaoInput(
            sessao_id=sessao_id,
            processo_id=payload.processo_id,
            tipo_resultado=payload.tipo_resultado,
            usuario_id=user.user_id,
            tipo_decisao=payload.tipo_decisao,
            observacoes=payload.observacoes,
            conselheiro_pedido_vista=payload.conselheiro_pedido_vista,
            prazo_vista=payload.prazo_vista,
            especificacao_diligencia=payload.especificacao_diligencia,
            prazo_diligencia=payload.prazo_diligencia,
            votos=tuple(
                VotoInput(
                    tipo_voto=voto.tipo_voto,
                    nome_votante=voto.nome_votante,
                    posicao_voto=voto.posicao_voto,
                    texto_voto=voto.texto_voto,
                    ordem_apresentacao=voto.ordem_apresentacao,
                    is_presidente=voto.is_presidente,
                )
                for voto in payload.votos
            ),
        )
    )
    return DecisaoResponse.from_model(decisao)


@sessoes_router.post(
    "/{sessao_id}/finalizar",
    response_model=SessaoResponse,
    responses={
        400: {"description": "Sessao ja finalizada"},
        404: {"description": "Sessao nao encontrada"},
    },
)
def finalizar_sessao(
    sessao_id: UUID,
    user: WriterUser,
    service: Annotated[JulgamentoService, Depends(get_julgamento_service)],
) -> SessaoResponse:
    """Close the session and its docket."""

    sessao = service.finalizar_sessao(
        FinalizarSessaoInput(sessao_id=sessao_id, usuario_id=user.user_id)
    )
    return SessaoResponse.from_model(sessao)
