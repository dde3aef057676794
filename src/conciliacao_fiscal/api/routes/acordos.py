"""Agreement routes."""

from __future__ import annotations

from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from conciliacao_fiscal.api.auth import AdminUser, CurrentUser, WriterUser, ensure_roles
from conciliacao_fiscal.api.dependencies import (
    get_acordo_query_repository,
    get_acordo_service,
    get_inadimplencia_service,
)
from conciliacao_fiscal.api.schemas.acordos import (
    AcordoDetailResponse,
    AcordoListResponse,
    AcordoMessageResponse,
    AcordoResponse,
    CancelAcordoRequest,
    ConcludeAcordoRequest,
    CreateAcordoRequest,
    DetalheResponse,
    HonorariosResponse,
    ParcelaVencidaResponse,
    RelatorioVencidasResponse,
    StatusUpdateResponse,
    TransacaoResponse,
    UpdateCustasRequest,
    UpdateCustasResponse,
    UpdateDetalheRequest,
    UpdateDetalheResponse,
    UpdateHonorariosRequest,
    UpdateHonorariosResponse,
)
from conciliacao_fiscal.db.models.acordo import AcordoStatus
from conciliacao_fiscal.db.models.processo import TipoProcesso
from conciliacao_fiscal.domain.dates import today_local
from conciliacao_fiscal.domain.value_objects import WRITE_ROLES
from conciliacao_fiscal.repositories.acordo_query_repository import (
    AcordoQueryFilters,
    AcordoQueryRepository,
)
from conciliacao_fiscal.services.acordo_service import (
    AcordoService,
    CancelAcordoInput,
    ConcludeAcordoInput,
    CreateAcordoInput,
    DetalheInput,
    InscricaoInput,
    UpdateCustasInput,
    UpdateDetalheInput,
    UpdateHonorariosInput,
)
from conciliacao_fiscal.services.inadimplencia_service import InadimplenciaService

router = APIRouter(prefix="/acordos", tags=["Acordos"])


@router.post(
    "/status",
    response_model=StatusUpdateResponse,
    responses={403: {"description": "Apenas administradores"}},
)
def update_parcelas_status(
    user: AdminUser,
    service: Annotated[InadimplenciaService, Depends(get_inadimplencia_service)],
) -> StatusUpdateResponse:
    """Mark past-due installments ATRASADO and their agreements vencido."""

    result = service.atualizar_status_parcelas(
        hoje=today_local(),
        usuario_id=user.user_id,
    )
    return StatusUpdateResponse.from_result(result)


@router.get(
    "/status",
    response_model=RelatorioVencidasResponse | StatusUpdateResponse,
    responses={
        400: {"description": "Parametros invalidos"},
        403: {"description": "Perfil sem permissao para atualizar"},
    },
)
def parcelas_status(
    user: CurrentUser,
    service: Annotated[InadimplenciaService, Depends(get_inadimplencia_service)],
    acao: Annotated[
        Literal["relatorio-vencidas", "atualizar"],
        Query(),
    ] = "relatorio-vencidas",
    dias: Annotated[int, Query()] = 0,
) -> RelatorioVencidasResponse | StatusUpdateResponse:
    """Report overdue installments or run the overdue batch."""

    hoje = today_local()
    if acao == "atualizar":
        ensure_roles(user, WRITE_ROLES)
        result = service.atualizar_status_parcelas(hoje=hoje, usuario_id=user.user_id)
        return StatusUpdateResponse.from_result(result)

    items = service.relatorio_parcelas_vencidas(hoje=hoje, dias=dias)
    return RelatorioVencidasResponse(
        data_referencia=hoje,
        dias=dias,
        total=len(items),
        parcelas=[ParcelaVencidaResponse.from_item(item) for item in items],
    )


@router.get(
    "",
    response_model=AcordoListResponse,
    responses={400: {"description": "Filtros invalidos"}},
)
def list_acordos(
    _user: CurrentUser,
    query_repository: Annotated[
        AcordoQueryRepository,
        Depends(get_acordo_query_repository),
    ],
    search: Annotated[str | None, Query(min_length=1, max_length=120)] = None,
    status_filter: Annotated[AcordoStatus | None, Query(alias="status")] = None,
    tipo: Annotated[TipoProcesso | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> AcordoListResponse:
    """List agreements newest first with optional filters and pagination."""

    filters = AcordoQueryFilters(
        search=search.strip() if search and search.strip() else None,
        status=status_filter,
        tipo=tipo,
        limit=limit,
        offset=offset,
    )
    items, total = query_repository.list_acordos(filters)
    return AcordoListResponse.from_rows(
        items=items,
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post(
    "",
    response_model=AcordoResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Valores invalidos ou processo nao julgado"},
        404: {"description": "Processo nao encontrado"},
    },
)
def create_acordo(
    payload: CreateAcordoRequest,
    user: WriterUser,
    service: Annotated[AcordoService, Depends(get_acordo_service)],
) -> AcordoResponse:
    """Create an agreement and its installment schedule."""

    acordo = service.create_acordo(
        CreateAcordoInput(
            processo_id=payload.processo_id,
            valor_total=payload.valor_total,
            valor_final=payload.valor_final,
            numero_parcelas=payload.numero_parcelas,
            data_assinatura=payload.data_assinatura,
            data_vencimento=payload.data_vencimento,
            usuario_id=user.user_id,
            valor_desconto=payload.valor_desconto,
            valor_entrada=payload.valor_entrada,
            observacoes=payload.observacoes,
            custas_advocaticias=payload.custas_advocaticias,
            custas_data_vencimento=payload.custas_data_vencimento,
            honorarios_valor=payload.honorarios_valor,
            honorarios_data_vencimento=payload.honorarios_data_vencimento,
            detalhes=tuple(
                DetalheInput(
                    tipo=detalhe.tipo,
                    descricao=detalhe.descricao,
                    valor=detalhe.valor,
                    inscricoes=tuple(
                        InscricaoInput(
                            numero_inscricao=inscricao.numero_inscricao,
                            tipo_inscricao=inscricao.tipo_inscricao,
                            valor_debito=inscricao.valor_debito,
                        )
                        for inscricao in detalhe.inscricoes
                    ),
                )
                for detalhe in payload.detalhes
            ),
        )
    )
    return AcordoResponse.from_model(acordo)


@router.get(
    "/{acordo_id}",
    response_model=AcordoDetailResponse,
    responses={404: {"description": "Acordo nao encontrado"}},
)
def get_acordo(
    acordo_id: UUID,
    _user: CurrentUser,
    service: Annotated[AcordoService, Depends(get_acordo_service)],
) -> AcordoDetailResponse:
    """Return the agreement with installments, payments and summary."""

    return AcordoDetailResponse.from_view(service.get_acordo(acordo_id))


@router.patch(
    "/{acordo_id}/concluir",
    response_model=AcordoMessageResponse,
    responses={
        400: {"description": "Tipo de processo ou status incompativel"},
        404: {"description": "Acordo nao encontrado"},
    },
)
def conclude_acordo(
    acordo_id: UUID,
    payload: ConcludeAcordoRequest,
    user: WriterUser,
    service: Annotated[AcordoService, Depends(get_acordo_service)],
) -> AcordoMessageResponse:
    """Conclude a compensation or payment-in-kind agreement directly."""

    acordo = service.conclude_acordo(
        ConcludeAcordoInput(
            acordo_id=acordo_id,
            usuario_id=user.user_id,
            atualizar_processo=payload.atualizar_processo,
            observacoes=payload.observacoes,
        )
    )
    return AcordoMessageResponse(
        message="Acordo concluído com sucesso.",
        acordo=AcordoResponse.from_model(acordo),
    )


@router.patch(
    "/{acordo_id}/detalhes",
    response_model=UpdateDetalheResponse,
    responses={
        400: {"description": "Acordo fora de vigencia"},
        404: {"description": "Acordo ou detalhe nao encontrado"},
    },
)
def update_detalhe(
    acordo_id: UUID,
    payload: UpdateDetalheRequest,
    user: WriterUser,
    service: Annotated[AcordoService, Depends(get_acordo_service)],
) -> UpdateDetalheResponse:
    """Change the execution status of an agreement component."""

    result = service.update_detalhe(
        UpdateDetalheInput(
            acordo_id=acordo_id,
            detalhe_id=payload.detalhe_id,
            status=payload.status,
            usuario_id=user.user_id,
            observacoes=payload.observacoes,
        )
    )
    return UpdateDetalheResponse(
        message="Detalhe do acordo atualizado.",
        detalhe=DetalheResponse.from_model(result.detalhe),
        acordo_cumprido=result.acordo_cumprido,
    )


@router.put(
    "/{acordo_id}/custas",
    response_model=UpdateCustasResponse,
    responses={
        400: {"description": "Acordo sem custas ou fora de vigencia"},
        404: {"description": "Acordo nao encontrado"},
    },
)
def update_custas(
    acordo_id: UUID,
    payload: UpdateCustasRequest,
    user: WriterUser,
    service: Annotated[AcordoService, Depends(get_acordo_service)],
) -> UpdateCustasResponse:
    """Record due and payment dates of legal costs."""

    result = service.update_custas(
        UpdateCustasInput(
            acordo_id=acordo_id,
            usuario_id=user.user_id,
            custas_data_vencimento=payload.custas_data_vencimento,
            custas_data_pagamento=payload.custas_data_pagamento,
        )
    )
    return UpdateCustasResponse(
        message="Custas atualizadas com sucesso.",
        transacao=TransacaoResponse.from_model(result.transacao),
        acordo_cumprido=result.acordo_cumprido,
    )


@router.put(
    "/{acordo_id}/honorarios",
    response_model=UpdateHonorariosResponse,
    responses={
        400: {"description": "Acordo sem honorarios ou fora de vigencia"},
        404: {"description": "Acordo nao encontrado"},
    },
)
def update_honorarios(
    acordo_id: UUID,
    payload: UpdateHonorariosRequest,
    user: WriterUser,
    service: Annotated[AcordoService, Depends(get_acordo_service)],
) -> UpdateHonorariosResponse:
    """Record due and payment dates of attorney fees."""

    honorarios = service.update_honorarios(
        UpdateHonorariosInput(
            acordo_id=acordo_id,
            usuario_id=user.user_id,
            honorarios_data_vencimento=payload.honorarios_data_vencimento,
            honorarios_data_pagamento=payload.honorarios_data_pagamento,
        )
    )
    return UpdateHonorariosResponse(
        message="Honorários atualizados com sucesso.",
        honorarios=HonorariosResponse.from_model(honorarios),
    )


@router.post(
    "/{acordo_id}/cancelar",
    response_model=AcordoMessageResponse,
    responses={
        400: {"description": "Acordo ja encerrado"},
        403: {"description": "Apenas administradores"},
        404: {"description": "Acordo nao encontrado"},
    },
)
def cancel_acordo(
    acordo_id: UUID,
    payload: CancelAcordoRequest,
    user: AdminUser,
    service: Annotated[AcordoService, Depends(get_acordo_service)],
) -> AcordoMessageResponse:
    """Cancel an agreement and its open installments."""

    acordo = service.cancel_acordo(
        CancelAcordoInput(
            acordo_id=acordo_id,
            usuario_id=user.user_id,
            motivo=payload.motivo,
        )
    )
    return AcordoMessageResponse(
        message="Acordo cancelado.",
        acordo=AcordoResponse.from_model(acordo),
    )
