"""Schemas for docket and judgment session endpoints."""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import Field

from conciliacao_fiscal.api.schemas.common import CamelModel
from conciliacao_fiscal.db.models.decisao import (
    Decisao,
    PosicaoVoto,
    TipoDecisao,
    TipoResultado,
    TipoVoto,
    Voto,
)
from conciliacao_fiscal.db.models.pauta import (
    Pauta,
    PautaStatus,
    ProcessoPauta,
    SessaoJulgamento,
)


class CreatePautaRequest(CamelModel):
    """Payload for docket creation."""

    numero: str = Field(min_length=1, max_length=40)
    data_pauta: date
    descricao: str | None = Field(default=None, max_length=280)


class IncluirProcessoRequest(CamelModel):
    """Payload for adding a case to a docket."""

    processo_id: UUID
    relator: str | None = Field(default=None, max_length=200)
    revisores: list[str] = Field(default_factory=list)


class AbrirSessaoRequest(CamelModel):
    pauta_id: UUID
    data_inicio: datetime | None = None
    presidente: str | None = Field(default=None, max_length=200)


class VotoRequest(CamelModel):
    tipo_voto: TipoVoto
    nome_votante: str = Field(min_length=1, max_length=200)
    posicao_voto: PosicaoVoto | None = None
    texto_voto: str | None = None
    ordem_apresentacao: int | None = Field(default=None, ge=1)
    is_presidente: bool = False


class RegistrarDecisaoRequest(CamelModel):
    """Payload for a case outcome within a session."""

    processo_id: UUID
    tipo_resultado: TipoResultado
    tipo_decisao: TipoDecisao | None = None
    observacoes: str | None = None
    conselheiro_pedido_vista: str | None = Field(default=None, max_length=200)
    prazo_vista: date | None = None
    especificacao_diligencia: str | None = None
    prazo_diligencia: date | None = None
    votos: list[VotoRequest] = Field(default_factory=list)


class PautaResponse(CamelModel):
    id: UUID
    numero: str
    data_pauta: date
    descricao: str | None
    status: PautaStatus

    @classmethod
    def from_model(cls, pauta: Pauta) -> PautaResponse:
        return cls(
            id=pauta.id,
            numero=pauta.numero,
            data_pauta=pauta.data_pauta,
            descricao=pauta.descricao,
            status=pauta.status,
        )


class ProcessoPautaResponse(CamelModel):
    id: UUID
    pauta_id: UUID
    processo_id: UUID
    ordem: int
    relator: str | None
    revisores: list[str]
    status_sessao: str | None

    @classmethod
    def from_model(cls, entry: ProcessoPauta) -> ProcessoPautaResponse:
        return cls(
            id=entry.id,
            pauta_id=entry.pauta_id,
            processo_id=entry.processo_id,
            ordem=entry.ordem,
            relator=entry.relator,
            revisores=list(entry.revisores or []),
            status_sessao=entry.status_sessao,
        )


class SessaoResponse(CamelModel):
    id: UUID
    pauta_id: UUID
    data_inicio: datetime
    data_fim: datetime | None
    presidente: str | None

    @classmethod
    def from_model(cls, sessao: SessaoJulgamento) -> SessaoResponse:
        return cls(
            id=sessao.id,
            pauta_id=sessao.pauta_id,
            data_inicio=sessao.data_inicio,
            data_fim=sessao.data_fim,
            presidente=sessao.presidente,
        )


class VotoResponse(CamelModel):
    id: UUID
    tipo_voto: TipoVoto
    nome_votante: str
    posicao_voto: PosicaoVoto | None
    ordem_apresentacao: int | None
    is_presidente: bool

    @classmethod
    def from_model(cls, voto: Voto) -> VotoResponse:
        return cls(
            id=voto.id,
            tipo_voto=voto.tipo_voto,
            nome_votante=voto.nome_votante,
            posicao_voto=voto.posicao_voto,
            ordem_apresentacao=voto.ordem_apresentacao,
            is_presidente=voto.is_presidente,
        )


class DecisaoResponse(CamelModel):
    """Serialized decision with its votes."""

    id: UUID
    sessao_id: UUID
    processo_id: UUID
    tipo_resultado: TipoResultado
    tipo_decisao: TipoDecisao | None
    observacoes: str | None
    conselheiro_pedido_vista: str | None
    prazo_vista: date | None
    especificacao_diligencia: str | None
    prazo_diligencia: date | None
    votos: list[VotoResponse]

    @classmethod
    def from_model(cls, decisao: Decisao) -> DecisaoResponse:
        return cls(
            id=decisao.id,
            sessao_id=decisao.sessao_id,
            processo_id=decisao.processo_id,
            tipo_resultado=decisao.tipo_resultado,
            tipo_decisao=decisao.tipo_decisao,
            observacoes=decisao.observacoes,
            conselheiro_pedido_vista=decisao.conselheiro_pedido_vista,
            prazo_vista=decisao.prazo_vista,
            especificacao_diligencia=decisao.especificacao_diligencia,
            prazo_diligencia=decisao.prazo_diligencia,
            votos=[VotoResponse.from_model(voto) for voto in decisao.votos],
        )
