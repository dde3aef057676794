"""Session and repository contracts consumed by the service layer."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Protocol
from uuid import UUID

from conciliacao_fiscal.db.models.acordo import (
    Acordo,
    AcordoDetalhe,
    AcordoHonorarios,
    AcordoInscricao,
    AcordoTransacao,
)
from conciliacao_fiscal.db.models.contribuinte import Contribuinte
from conciliacao_fiscal.db.models.decisao import Decisao
from conciliacao_fiscal.db.models.historico import (
    HistoricoProcesso,
    LogAuditoria,
    TipoHistorico,
)
from conciliacao_fiscal.db.models.parcela import PagamentoParcela, Parcela
from conciliacao_fiscal.db.models.pauta import Pauta, ProcessoPauta, SessaoJulgamento
from conciliacao_fiscal.db.models.processo import Processo
from conciliacao_fiscal.repositories.parcela_repository import OverdueParcelaRow


class SessionProtocol(Protocol):
    """Subset of SQLAlchemy session APIs used by services."""

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def refresh(self, instance: object) -> None: ...


class ProcessoRepositoryProtocol(Protocol):
    """Case registry contract."""

    def get(self, processo_id: UUID) -> Processo | None: ...

    def get_for_update(self, processo_id: UUID) -> Processo | None: ...

    def get_by_numero(self, numero: str) -> Processo | None: ...

    def get_contribuinte_by_documento(self, documento: str) -> Contribuinte | None: ...

    def add_contribuinte(self, contribuinte: Contribuinte) -> Contribuinte: ...

    def add(self, processo: Processo) -> Processo: ...

    def has_open_acordo(self, processo_id: UUID) -> bool: ...

    def get_latest_decisao(self, processo_id: UUID) -> Decisao | None: ...


class AcordoRepositoryProtocol(Protocol):
    """Agreement persistence contract."""

    def get(self, acordo_id: UUID) -> Acordo | None: ...

    def get_for_update(self, acordo_id: UUID) -> Acordo | None: ...

    def get_active_for_processo(self, processo_id: UUID) -> Acordo | None: ...

    def next_numero_termo(self, year: int) -> str: ...

    def get_transacao(self, acordo_id: UUID) -> AcordoTransacao | None: ...

    def get_honorarios(self, acordo_id: UUID) -> AcordoHonorarios | None: ...

    def get_detalhe(self, detalhe_id: UUID) -> AcordoDetalhe | None: ...

    def list_detalhes(self, acordo_id: UUID) -> list[AcordoDetalhe]: ...

    def list_inscricoes_for_detalhe(
        self, detalhe_id: UUID
    ) -> list[AcordoInscricao]: ...

    def list_active_with_overdue_parcelas(self) -> list[Acordo]: ...

    def add(self, instance: object) -> None: ...


class ParcelaRepositoryProtocol(Protocol):
    """Installment and payment persistence contract."""

    def get(self, parcela_id: UUID) -> Parcela | None: ...

    def get_for_update(self, parcela_id: UUID) -> Parcela | None: ...

    def list_for_acordo(self, acordo_id: UUID) -> list[Parcela]: ...

    def get_total_pago(self, parcela_id: UUID) -> Decimal: ...

    def list_pagamentos(self, parcela_id: UUID) -> list[PagamentoParcela]: ...

    def add(self, parcela: Parcela) -> Parcela: ...

    def add_pagamento(self, pagamento: PagamentoParcela) -> PagamentoParcela: ...

    def flush(self) -> None: ...

    def list_pending_past_due(self, hoje: date) -> list[Parcela]: ...

    def list_overdue_report(self, limite: date) -> list[OverdueParcelaRow]: ...


class PautaRepositoryProtocol(Protocol):
    """Docket and judgment session persistence contract."""

    def get_pauta(self, pauta_id: UUID) -> Pauta | None: ...

    def get_pauta_for_update(self, pauta_id: UUID) -> Pauta | None: ...

    def get_pauta_by_numero(self, numero: str) -> Pauta | None: ...

    def get_entry(self, pauta_id: UUID, processo_id: UUID) -> ProcessoPauta | None: ...

    def get_max_ordem(self, pauta_id: UUID) -> int: ...

    def get_sessao(self, sessao_id: UUID) -> SessaoJulgamento | None: ...

    def get_sessao_for_update(self, sessao_id: UUID) -> SessaoJulgamento | None: ...

    def get_sessao_for_pauta(self, pauta_id: UUID) -> SessaoJulgamento | None: ...

    def has_decisao(self, sessao_id: UUID, processo_id: UUID) -> bool: ...

    def add(self, instance: object) -> None: ...


class AuditRepositoryProtocol(Protocol):
    """History and audit trail contract."""

    def add_historico(
        self,
        *,
        processo_id: UUID,
        usuario_id: str,
        titulo: str,
        descricao: str,
        tipo: TipoHistorico,
    ) -> HistoricoProcesso: ...

    def add_log(
        self,
        *,
        usuario_id: str,
        acao: str,
        entidade: str,
        entidade_id: str,
        dados_anteriores: dict[str, Any] | None = None,
        dados_novos: dict[str, Any] | None = None,
    ) -> LogAuditoria: ...

    def list_historico(self, processo_id: UUID) -> list[HistoricoProcesso]: ...
