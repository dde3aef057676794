"""Schemas for agreement endpoints."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import Field, model_validator

from conciliacao_fiscal.api.schemas.common import MONEY_PATTERN, CamelModel
from conciliacao_fiscal.api.schemas.parcelas import ParcelaResponse
from conciliacao_fiscal.db.models.acordo import (
    Acordo,
    AcordoDetalhe,
    AcordoHonorarios,
    AcordoStatus,
    AcordoTransacao,
    DetalheStatus,
    TipoDetalhe,
    TipoInscricao,
)
from conciliacao_fiscal.db.models.processo import TipoProcesso
from conciliacao_fiscal.domain.money import format_money
from conciliacao_fiscal.repositories.acordo_query_repository import AcordoListRow
from conciliacao_fiscal.services.acordo_service import AcordoView
from conciliacao_fiscal.services.inadimplencia_service import (
    ParcelaVencidaItem,
    StatusUpdateResult,
)


class InscricaoRequest(CamelModel):
    """Tax-roll registration settled by a component."""

    numero_inscricao: str = Field(min_length=1, max_length=60)
    tipo_inscricao: TipoInscricao
    valor_debito: Decimal = Field(ge=0)


class DetalheRequest(CamelModel):
    """Asset or credit component offered in the agreement."""

    tipo: TipoDetalhe
    descricao: str = Field(min_length=1, max_length=280)
    valor: Decimal = Field(gt=0)
    inscricoes: list[InscricaoRequest] = Field(default_factory=list)


class CreateAcordoRequest(CamelModel):
    """Payload for agreement creation."""

    processo_id: UUID
    valor_total: Decimal
    valor_desconto: Decimal = Decimal("0.00")
    valor_entrada: Decimal = Decimal("0.00")
    valor_final: Decimal | None = None
    numero_parcelas: int = Field(ge=1, le=360)
    data_assinatura: date
    data_vencimento: date
    observacoes: str | None = None
    custas_advocaticias: Decimal | None = None
    custas_data_vencimento: date | None = None
    honorarios_valor: Decimal | None = None
    honorarios_data_vencimento: date | None = None
    detalhes: list[DetalheRequest] = Field(default_factory=list)

    @model_validator(mode="after")
    def fill_valor_final(self) -> CreateAcordoRequest:
        if self.valor_final is None:
            self.valor_final = self.valor_total - self.valor_desconto
        return self


class ConcludeAcordoRequest(CamelModel):
    """Payload for direct agreement conclusion."""

    atualizar_processo: bool = False
    observacoes: str | None = None


class UpdateDetalheRequest(CamelModel):
    """Payload for component status change."""

    detalhe_id: UUID
    status: DetalheStatus
    observacoes: str | None = None


class UpdateCustasRequest(CamelModel):
    """Payload for legal cost dates."""

    custas_data_vencimento: date | None = None
    custas_data_pagamento: date | None = None


class UpdateHonorariosRequest(CamelModel):
    """Payload for attorney fee dates."""

    honorarios_data_vencimento: date
    honorarios_data_pagamento: date | None = None


class CancelAcordoRequest(CamelModel):
    """Payload for agreement cancellation."""

    motivo: str | None = Field(default=None, max_length=500)


class TransacaoResponse(CamelModel):
    """Serialized legal costs of an exceptional transaction."""

    id: UUID
    custas_advocaticias: str | None
    custas_data_vencimento: date | None
    custas_data_pagamento: date | None
    honorarios_valor: str | None

    @classmethod
    def from_model(cls, transacao: AcordoTransacao) -> TransacaoResponse:
        return cls(
            id=transacao.id,
            custas_advocaticias=(
                format_money(transacao.custas_advocaticias)
                if transacao.custas_advocaticias is not None
                else None
            ),
            custas_data_vencimento=transacao.custas_data_vencimento,
            custas_data_pagamento=transacao.custas_data_pagamento,
            honorarios_valor=(
                format_money(transacao.honorarios_valor)
                if transacao.honorarios_valor is not None
                else None
            ),
        )


class HonorariosResponse(CamelModel):
    """Serialized costs and attorney fees of a compensacao or dacao agreement."""

    id: UUID
    custas_advocaticias: str | None
    custas_data_vencimento: date | None
    honorarios_valor: str | None
    honorarios_data_vencimento: date | None
    honorarios_data_pagamento: date | None

    @classmethod
    def from_model(cls, honorarios: AcordoHonorarios) -> HonorariosResponse:
        return cls(
            id=honorarios.id,
            custas_advocaticias=(
                format_money(honorarios.custas_advocaticias)
                if honorarios.custas_advocaticias is not None
                else None
            ),
            custas_data_vencimento=honorarios.custas_data_vencimento,
            honorarios_valor=(
                format_money(honorarios.honorarios_valor)
                if honorarios.honorarios_valor is not None
                else None
            ),
            honorarios_data_vencimento=honorarios.honorarios_data_vencimento,
            honorarios_data_pagamento=honorarios.honorarios_data_pagamento,
        )


class DetalheResponse(CamelModel):
    """Serialized agreement component."""

    id: UUID
    acordo_id: UUID
    tipo: TipoDetalhe
    descricao: str
    valor: str = Field(pattern=MONEY_PATTERN)
    status: DetalheStatus
    data_execucao: datetime | None
    observacoes: str | None

    @classmethod
    def from_model(cls, detalhe: AcordoDetalhe) -> DetalheResponse:
        return cls(
            id=detalhe.id,
            acordo_id=detalhe.acordo_id,
            tipo=detalhe.tipo,
            descricao=detalhe.descricao,
            valor=format_money(detalhe.valor),
            status=detalhe.status,
            data_execucao=detalhe.data_execucao,
            observacoes=detalhe.observacoes,
        )


class AcordoResponse(CamelModel):
    """Serialized agreement header."""

    id: UUID
    processo_id: UUID
    numero_termo: str
    valor_total: str = Field(pattern=MONEY_PATTERN)
    valor_desconto: str = Field(pattern=MONEY_PATTERN)
    valor_entrada: str = Field(pattern=MONEY_PATTERN)
    valor_final: str = Field(pattern=MONEY_PATTERN)
    numero_parcelas: int
    data_assinatura: date
    data_vencimento: date
    status: AcordoStatus
    observacoes: str | None

    @classmethod
    def from_model(cls, acordo: Acordo) -> AcordoResponse:
        return cls(
            id=acordo.id,
            processo_id=acordo.processo_id,
            numero_termo=acordo.numero_termo,
            valor_total=format_money(acordo.valor_total),
            valor_desconto=format_money(acordo.valor_desconto),
            valor_entrada=format_money(acordo.valor_entrada),
            valor_final=format_money(acordo.valor_final),
            numero_parcelas=acordo.numero_parcelas,
            data_assinatura=acordo.data_assinatura,
            data_vencimento=acordo.data_vencimento,
            status=acordo.status,
            observacoes=acordo.observacoes,
        )


class ResumoResponse(CamelModel):
    """Financial summary of an agreement."""

    total_pago: str = Field(pattern=MONEY_PATTERN)
    valor_restante: str = Field(pattern=MONEY_PATTERN)
    percentual_pago: str = Field(pattern=MONEY_PATTERN)
    parcelas_pagas: int
    parcelas_pendentes: int
    parcelas_atrasadas: int


class AcordoDetailResponse(AcordoResponse):
    """Agreement with installments, payments, components and summary."""

    parcelas: list[ParcelaResponse]
    resumo: ResumoResponse
    transacao: TransacaoResponse | None = None
    honorarios: HonorariosResponse | None = None
    detalhes: list[DetalheResponse] = Field(default_factory=list)

    @classmethod
    def from_view(cls, view: AcordoView) -> AcordoDetailResponse:
        header = AcordoResponse.from_model(view.acordo)
        return cls(
            **header.model_dump(),
            parcelas=[
                ParcelaResponse.from_model(
                    item.parcela,
                    total_pago=item.total_pago,
                    valor_restante=item.valor_restante,
                    pagamentos=item.pagamentos,
                )
                for item in view.parcelas
            ],
            resumo=ResumoResponse(
                total_pago=format_money(view.resumo.total_pago),
                valor_restante=format_money(view.resumo.valor_restante),
                percentual_pago=format_money(view.resumo.percentual_pago),
                parcelas_pagas=view.resumo.parcelas_pagas,
                parcelas_pendentes=view.resumo.parcelas_pendentes,
                parcelas_atrasadas=view.resumo.parcelas_atrasadas,
            ),
            transacao=(
                TransacaoResponse.from_model(view.transacao)
                if view.transacao is not None
                else None
            ),
            honorarios=(
                HonorariosResponse.from_model(view.honorarios)
                if view.honorarios is not None
                else None
            ),
            detalhes=[DetalheResponse.from_model(item) for item in view.detalhes],
        )


class AcordoMessageResponse(CamelModel):
    """Agreement returned with an acknowledgement message."""

    message: str
    acordo: AcordoResponse


class UpdateDetalheResponse(CamelModel):
    """Result of a component status change."""

    message: str
    detalhe: DetalheResponse
    acordo_cumprido: bool


class UpdateCustasResponse(CamelModel):
    """Result of a legal cost update."""

    message: str
    transacao: TransacaoResponse
    acordo_cumprido: bool


class UpdateHonorariosResponse(CamelModel):
    """Result of an attorney fee update."""

    message: str
    honorarios: HonorariosResponse


class AcordoListItemResponse(AcordoResponse):
    """Agreement header with case and taxpayer context."""

    processo_numero: str
    processo_tipo: TipoProcesso
    contribuinte_nome: str

    @classmethod
    def from_row(cls, row: AcordoListRow) -> AcordoListItemResponse:
        header = AcordoResponse.from_model(row.acordo)
        return cls(
            **header.model_dump(),
            processo_numero=row.processo.numero,
            processo_tipo=row.processo.tipo,
            contribuinte_nome=row.contribuinte.nome,
        )


class AcordoListResponse(CamelModel):
    """Paginated agreement list response."""

    items: list[AcordoListItemResponse]
    total: int = Field(ge=0)
    limit: int = Field(ge=1)
    offset: int = Field(ge=0)

    @classmethod
    def from_rows(
        cls,
        *,
        items: list[AcordoListRow],
        total: int,
        limit: int,
        offset: int,
    ) -> AcordoListResponse:
        return cls(
            items=[AcordoListItemResponse.from_row(item) for item in items],
            total=total,
            limit=limit,
            offset=offset,
        )


class StatusUpdateResponse(CamelModel):
    """Counts produced by the overdue batch."""

    message: str
    parcelas_atualizadas: int
    acordos_atualizados: int

    @classmethod
    def from_result(cls, result: StatusUpdateResult) -> StatusUpdateResponse:
        return cls(
            message="Status das parcelas atualizado.",
            parcelas_atualizadas=result.parcelas_atualizadas,
            acordos_atualizados=result.acordos_atualizados,
        )


class ParcelaVencidaResponse(CamelModel):
    """One overdue installment with case context and late charges."""

    parcela_id: UUID
    acordo_id: UUID
    numero_termo: str
    numero: int
    tipo_parcela: str
    data_vencimento: date
    valor: str = Field(pattern=MONEY_PATTERN)
    valor_pago: str = Field(pattern=MONEY_PATTERN)
    valor_restante: str = Field(pattern=MONEY_PATTERN)
    dias_vencido: int
    multa: str = Field(pattern=MONEY_PATTERN)
    juros: str = Field(pattern=MONEY_PATTERN)
    valor_atualizado: str = Field(pattern=MONEY_PATTERN)
    processo_numero: str
    contribuinte_nome: str
    contribuinte_documento: str

    @classmethod
    def from_item(cls, item: ParcelaVencidaItem) -> ParcelaVencidaResponse:
        parcela = item.row.parcela
        return cls(
            parcela_id=parcela.id,
            acordo_id=item.row.acordo.id,
            numero_termo=item.row.acordo.numero_termo,
            numero=parcela.numero,
            tipo_parcela=parcela.tipo_parcela.value,
            data_vencimento=parcela.data_vencimento,
            valor=format_money(parcela.valor),
            valor_pago=format_money(item.valor_pago),
            valor_restante=format_money(item.valor_restante),
            dias_vencido=item.dias_vencido,
            multa=format_money(item.encargos.multa),
            juros=format_money(item.encargos.juros),
            valor_atualizado=format_money(item.encargos.total),
            processo_numero=item.row.processo.numero,
            contribuinte_nome=item.row.contribuinte.nome,
            contribuinte_documento=item.row.contribuinte.documento,
        )


class RelatorioVencidasResponse(CamelModel):
    """Overdue installment report."""

    acao: Literal["relatorio-vencidas"] = "relatorio-vencidas"
    data_referencia: date
    dias: int
    total: int
    parcelas: list[ParcelaVencidaResponse]
