"""Persistence operations for installments and their payments."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from conciliacao_fiscal.db.models.acordo import Acordo, AcordoStatus
from conciliacao_fiscal.db.models.contribuinte import Contribuinte
from conciliacao_fiscal.db.models.parcela import (
    PagamentoParcela,
    Parcela,
    ParcelaStatus,
)
from conciliacao_fiscal.db.models.processo import Processo
from conciliacao_fiscal.domain.money import parse_money


@dataclass(slots=True, frozen=True)
class OverdueParcelaRow:
    """Overdue installment joined with its agreement and case context."""

    parcela: Parcela
    acordo: Acordo
    processo: Processo
    contribuinte: Contribuinte
    total_pago: Decimal


class ParcelaRepository:
    """Repository for installment state and append-only payments."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, parcela_id: UUID) -> Parcela | None:
        statement = select(Parcela).where(Parcela.id == parcela_id)
        return self._session.scalar(statement)

    def get_for_update(self, parcela_id: UUID) -> Parcela | None:
        statement = select(Parcela).where(Parcela.id == parcela_id).with_for_update()
        return self._session.scalar(statement)

    def list_for_acordo(self, acordo_id: UUID) -> list[Parcela]:
        statement = (
            select(Parcela)
            .where(Parcela.acordo_id == acordo_id)
            .order_by(Parcela.numero.asc())
        )
        return list(self._session.scalars(statement).all())

    def get_total_pago(self, parcela_id: UUID) -> Decimal:
        statement = select(
            func.coalesce(func.sum(PagamentoParcela.valor_pago), Decimal("0.00"))
        ).where(PagamentoParcela.parcela_id == parcela_id)
        total_pago = self._session.scalar(statement)
        if total_pago is None:
            return Decimal("0.00")
        return parse_money(total_pago)

    def list_pagamentos(self, parcela_id: UUID) -> list[PagamentoParcela]:
        statement = (
            select(PagamentoParcela)
            .where(PagamentoParcela.parcela_id == parcela_id)
            .order_by(PagamentoParcela.data_pagamento.asc())
        )
        return list(self._session.scalars(statement).all())

    def add(self, parcela: Parcela) -> Parcela:
        self._session.add(parcela)
        self._session.flush()
        return parcela

    def add_pagamento(self, pagamento: PagamentoParcela) -> PagamentoParcela:
        self._session.add(pagamento)
        self._session.flush()
        return pagamento

    def flush(self) -> None:
        self._session.flush()

    def list_pending_past_due(self, hoje: date) -> list[Parcela]:
        """Return PENDENTE installments of active agreements due before hoje."""

        statement = (
            select(Parcela)
            .join(Acordo, Acordo.id == Parcela.acordo_id)
            .where(
                Acordo.status == AcordoStatus.ATIVO,
                Parcela.status == ParcelaStatus.PENDENTE,
                Parcela.data_vencimento < hoje,
            )
            .with_for_update(of=Parcela)
        )
        return list(self._session.scalars(statement).all())

    def list_overdue_report(self, limite: date) -> list[OverdueParcelaRow]:
        """Return overdue installments due on or before limite."""

        paid_subquery = (
            select(
                PagamentoParcela.parcela_id.label("parcela_id"),
                func.sum(PagamentoParcela.valor_pago).label("total_pago"),
            )
            .group_by(PagamentoParcela.parcela_id)
            .subquery()
        )
        statement = (
            select(
                Parcela,
                Acordo,
                Processo,
                Contribuinte,
                func.coalesce(paid_subquery.c.total_pago, Decimal("0.00")),
            )
            .join(Acordo, Acordo.id == Parcela.acordo_id)
            .join(Processo, Processo.id == Acordo.processo_id)
            .join(Contribuinte, Contribuinte.id == Processo.contribuinte_id)
            .outerjoin(paid_subquery, paid_subquery.c.parcela_id == Parcela.id)
            .where(
                Parcela.status == ParcelaStatus.ATRASADO,
                Parcela.data_vencimento <= limite,
            )
            .order_by(Parcela.data_vencimento.asc(), Parcela.numero.asc())
        )
        rows = self._session.execute(statement).all()
        return [
            OverdueParcelaRow(
                parcela=parcela,
                acordo=acordo,
                processo=processo,
                contribuinte=contribuinte,
                total_pago=parse_money(total_pago),
            )
            for parcela, acordo, processo, contribuinte, total_pago in rows
        ]
