"""Schemas for case registry endpoints."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import Field, field_validator

from conciliacao_fiscal.api.schemas.common import MONEY_PATTERN, CamelModel
from conciliacao_fiscal.db.models.historico import HistoricoProcesso, TipoHistorico
from conciliacao_fiscal.db.models.processo import Processo, ProcessoStatus, TipoProcesso
from conciliacao_fiscal.domain.money import format_money


class ContribuinteRequest(CamelModel):
    nome: str = Field(min_length=1, max_length=200)
    documento: str = Field(min_length=1, max_length=20)
    email: str | None = Field(default=None, max_length=200)
    telefone: str | None = Field(default=None, max_length=30)


class CreateProcessoRequest(CamelModel):
    """Payload for case registration."""

    numero: str = Field(min_length=1, max_length=40)
    tipo: TipoProcesso
    valor_original: Decimal
    contribuinte: ContribuinteRequest
    observacoes: str | None = None

    @field_validator("numero")
    @classmethod
    def validate_numero(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("numero must not be blank")
        return trimmed


class ChangeStatusRequest(CamelModel):
    """Payload for a manual case status change."""

    status: ProcessoStatus
    observacoes: str | None = None


class ContribuinteResponse(CamelModel):
    id: UUID
    nome: str
    documento: str
    email: str | None
    telefone: str | None


class ProcessoResponse(CamelModel):
    """Serialized case."""

    id: UUID
    numero: str
    tipo: TipoProcesso
    status: ProcessoStatus
    valor_original: str = Field(pattern=MONEY_PATTERN)
    valor_negociado: str | None = None
    observacoes: str | None
    contribuinte: ContribuinteResponse | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, processo: Processo) -> ProcessoResponse:
        contribuinte = processo.contribuinte
        return cls(
            id=processo.id,
            numero=processo.numero,
            tipo=processo.tipo,
            status=processo.status,
            valor_original=format_money(processo.valor_original),
            valor_negociado=(
                format_money(processo.valor_negociado)
                if processo.valor_negociado is not None
                else None
            ),
            observacoes=processo.observacoes,
            contribuinte=(
                ContribuinteResponse(
                    id=contribuinte.id,
                    nome=contribuinte.nome,
                    documento=contribuinte.documento,
                    email=contribuinte.email,
                    telefone=contribuinte.telefone,
                )
                if contribuinte is not None
                else None
            ),
            created_at=processo.created_at,
            updated_at=processo.updated_at,
        )


class HistoricoResponse(CamelModel):
    id: UUID
    processo_id: UUID
    usuario_id: str
    titulo: str
    descricao: str
    tipo: TipoHistorico
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, historico: HistoricoProcesso) -> HistoricoResponse:
        return cls(
            id=historico.id,
            processo_id=historico.processo_id,
            usuario_id=historico.usuario_id,
            titulo=historico.titulo,
            descricao=historico.descricao,
            tipo=historico.tipo,
            created_at=historico.created_at,
        )


class HistoricoListResponse(CamelModel):
    processo_id: UUID
    items: list[HistoricoResponse]
