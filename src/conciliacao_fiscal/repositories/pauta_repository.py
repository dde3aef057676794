"""Persistence operations for dockets, sessions and decisions."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from conciliacao_fiscal.db.models.decisao import Decisao
from conciliacao_fiscal.db.models.pauta import Pauta, ProcessoPauta, SessaoJulgamento


class PautaRepository:
    """Repository for docket and judgment session state."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_pauta(self, pauta_id: UUID) -> Pauta | None:
        statement = select(Pauta).where(Pauta.id == pauta_id)
        return self._session.scalar(statement)

    def get_pauta_for_update(self, pauta_id: UUID) -> Pauta | None:
        statement = select(Pauta).where(Pauta.id == pauta_id).with_for_update()
        return self._session.scalar(statement)

    def get_pauta_by_numero(self, numero: str) -> Pauta | None:
        statement = select(Pauta).where(Pauta.numero == numero)
        return self._session.scalar(statement)

    def get_entry(self, pauta_id: UUID, processo_id: UUID) -> ProcessoPauta | None:
        statement = select(ProcessoPauta).where(
            ProcessoPauta.pauta_id == pauta_id,
            ProcessoPauta.processo_id == processo_id,
        )
        return self._session.scalar(statement)

    def get_max_ordem(self, pauta_id: UUID) -> int:
        statement = select(func.coalesce(func.max(ProcessoPauta.ordem), 0)).where(
            ProcessoPauta.pauta_id == pauta_id
        )
        return int(self._session.scalar(statement) or 0)

    def get_sessao(self, sessao_id: UUID) -> SessaoJulgamento | None:
        statement = select(SessaoJulgamento).where(SessaoJulgamento.id == sessao_id)
        return self._session.scalar(statement)

    def get_sessao_for_update(self, sessao_id: UUID) -> SessaoJulgamento | None:
        statement = (
            select(SessaoJulgamento)
            .where(SessaoJulgamento.id == sessao_id)
            .with_for_update()
        )
        return self._session.scalar(statement)

    def get_sessao_for_pauta(self, pauta_id: UUID) -> SessaoJulgamento | None:
        statement = select(SessaoJulgamento).where(
            SessaoJulgamento.pauta_id == pauta_id
        )
        return self._session.scalar(statement)

    def has_decisao(self, sessao_id: UUID, processo_id: UUID) -> bool:
        statement = select(Decisao.id).where(
            Decisao.sessao_id == sessao_id,
            Decisao.processo_id == processo_id,
        )
        return self._session.scalar(statement) is not None

    def add(self, instance: object) -> None:
        """Stage a docket, entry, session or decision."""

        self._session.add(instance)
        self._session.flush()
