"""Append-only persistence for case history and audit log."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from conciliacao_fiscal.db.models.historico import (
    HistoricoProcesso,
    LogAuditoria,
    TipoHistorico,
)


class AuditRepository:
    """Repository writing history and audit rows in the caller transaction."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def add_historico(
        self,
        *,
        processo_id: UUID,
        usuario_id: str,
        titulo: str,
        descricao: str,
        tipo: TipoHistorico,
    ) -> HistoricoProcesso:
        historico = HistoricoProcesso(
            processo_id=processo_id,
            usuario_id=usuario_id,
            titulo=titulo,
            descricao=descricao,
            tipo=tipo,
        )
        self._session.add(historico)
        self._session.flush()
        return historico

    def add_log(
        self,
        *,
        usuario_id: str,
        acao: str,
        entidade: str,
        entidade_id: str,
        dados_anteriores: dict[str, Any] | None = None,
        dados_novos: dict[str, Any] | None = None,
    ) -> LogAuditoria:
        log = LogAuditoria(
            usuario_id=usuario_id,
            acao=acao,
            entidade=entidade,
            entidade_id=entidade_id,
            dados_anteriores=dados_anteriores,
            dados_novos=dados_novos,
        )
        self._session.add(log)
        self._session.flush()
        return log

    def list_historico(self, processo_id: UUID) -> list[HistoricoProcesso]:
        """Return a case timeline, newest entries first."""

        statement = (
            select(HistoricoProcesso)
            .where(HistoricoProcesso.processo_id == processo_id)
            .order_by(HistoricoProcesso.created_at.desc())
        )
        return list(self._session.scalars(statement).all())
