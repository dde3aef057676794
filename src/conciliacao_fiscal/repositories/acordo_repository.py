"""Persistence operations for settlement agreements."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from conciliacao_fiscal.db.models.acordo import (
    Acordo,
    AcordoDetalhe,
    AcordoHonorarios,
    AcordoInscricao,
    AcordoStatus,
    AcordoTransacao,
)
from conciliacao_fiscal.db.models.parcela import Parcela, ParcelaStatus


class AcordoRepository:
    """Repository for agreements and their components."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, acordo_id: UUID) -> Acordo | None:
        statement = select(Acordo).where(Acordo.id == acordo_id)
        return self._session.scalar(statement)

    def get_for_update(self, acordo_id: UUID) -> Acordo | None:
        statement = select(Acordo).where(Acordo.id == acordo_id).with_for_update()
        return self._session.scalar(statement)

    def get_active_for_processo(self, processo_id: UUID) -> Acordo | None:
        statement = select(Acordo).where(
            Acordo.processo_id == processo_id,
            Acordo.status == AcordoStatus.ATIVO,
        )
        return self._session.scalar(statement)

    def next_numero_termo(self, year: int) -> str:
        """Return the next sequential term number for a year."""

        suffix = f"/{year}"
        statement = select(func.count(Acordo.id)).where(
            Acordo.numero_termo.like(f"%{suffix}")
        )
        current = self._session.scalar(statement) or 0
        return f"{current + 1:04d}{suffix}"

    def get_transacao(self, acordo_id: UUID) -> AcordoTransacao | None:
        statement = select(AcordoTransacao).where(
            AcordoTransacao.acordo_id == acordo_id
        )
        return self._session.scalar(statement)

    def get_honorarios(self, acordo_id: UUID) -> AcordoHonorarios | None:
        statement = select(AcordoHonorarios).where(
            AcordoHonorarios.acordo_id == acordo_id
        )
        return self._session.scalar(statement)

    def get_detalhe(self, detalhe_id: UUID) -> AcordoDetalhe | None:
        statement = select(AcordoDetalhe).where(AcordoDetalhe.id == detalhe_id)
        return self._session.scalar(statement)

    def list_detalhes(self, acordo_id: UUID) -> list[AcordoDetalhe]:
        statement = select(AcordoDetalhe).where(AcordoDetalhe.acordo_id == acordo_id)
        return list(self._session.scalars(statement).all())

    def list_inscricoes_for_detalhe(self, detalhe_id: UUID) -> list[AcordoInscricao]:
        statement = select(AcordoInscricao).where(
            AcordoInscricao.acordo_detalhe_id == detalhe_id
        )
        return list(self._session.scalars(statement).all())

    def list_active_with_overdue_parcelas(self) -> list[Acordo]:
        """Return active agreements holding at least one overdue installment."""

        overdue = select(Parcela.acordo_id).where(
            Parcela.status == ParcelaStatus.ATRASADO
        )
        statement = select(Acordo).where(
            Acordo.status == AcordoStatus.ATIVO,
            Acordo.id.in_(overdue),
        )
        return list(self._session.scalars(statement).all())

    def add(self, instance: object) -> None:
        """Stage an agreement or one of its components."""

        self._session.add(instance)
        self._session.flush()
