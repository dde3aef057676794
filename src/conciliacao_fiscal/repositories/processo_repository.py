"""Persistence operations for taxpayers and cases."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from conciliacao_fiscal.db.models.acordo import Acordo, AcordoStatus
from conciliacao_fiscal.db.models.contribuinte import Contribuinte
from conciliacao_fiscal.db.models.decisao import Decisao
from conciliacao_fiscal.db.models.processo import Processo


class ProcessoRepository:
    """Repository for case registry lookups and inserts."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, processo_id: UUID) -> Processo | None:
        statement = select(Processo).where(Processo.id == processo_id)
        return self._session.scalar(statement)

    def get_for_update(self, processo_id: UUID) -> Processo | None:
        statement = select(Processo).where(Processo.id == processo_id).with_for_update()
        return self._session.scalar(statement)

    def get_by_numero(self, numero: str) -> Processo | None:
        statement = select(Processo).where(Processo.numero == numero)
        return self._session.scalar(statement)

    def get_contribuinte_by_documento(self, documento: str) -> Contribuinte | None:
        statement = select(Contribuinte).where(Contribuinte.documento == documento)
        return self._session.scalar(statement)

    def add_contribuinte(self, contribuinte: Contribuinte) -> Contribuinte:
        self._session.add(contribuinte)
        self._session.flush()
        return contribuinte

    def add(self, processo: Processo) -> Processo:
        self._session.add(processo)
        self._session.flush()
        return processo

    def has_open_acordo(self, processo_id: UUID) -> bool:
        """Return whether the case holds an ativo or vencido agreement."""

        statement = (
            select(Acordo.id)
            .where(
                Acordo.processo_id == processo_id,
                Acordo.status.in_((AcordoStatus.ATIVO, AcordoStatus.VENCIDO)),
            )
            .limit(1)
        )
        return self._session.scalar(statement) is not None

    def get_latest_decisao(self, processo_id: UUID) -> Decisao | None:
        """Return the most recent decision recorded for a case."""

        statement = (
            select(Decisao)
            .where(Decisao.processo_id == processo_id)
            .order_by(Decisao.created_at.desc())
            .limit(1)
        )
        return self._session.scalar(statement)
