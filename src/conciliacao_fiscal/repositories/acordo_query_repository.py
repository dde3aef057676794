"""Read-oriented queries for agreement listing."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session

from conciliacao_fiscal.db.models.acordo import Acordo, AcordoStatus
from conciliacao_fiscal.db.models.contribuinte import Contribuinte
from conciliacao_fiscal.db.models.processo import Processo, TipoProcesso


@dataclass(frozen=True, slots=True)
class AcordoQueryFilters:
    """Supported query filters for agreement search endpoint."""

    search: str | None = None
    status: AcordoStatus | None = None
    tipo: TipoProcesso | None = None
    limit: int = 50
    offset: int = 0


@dataclass(frozen=True, slots=True)
class AcordoListRow:
    """Agreement joined with its case and taxpayer."""

    acordo: Acordo
    processo: Processo
    contribuinte: Contribuinte


class AcordoQueryRepository:
    """Repository focused on agreement listing."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_acordos(
        self,
        filters: AcordoQueryFilters,
    ) -> tuple[list[AcordoListRow], int]:
        statement = self._apply_filters(
            select(Acordo, Processo, Contribuinte)
            .join(Processo, Processo.id == Acordo.processo_id)
            .join(Contribuinte, Contribuinte.id == Processo.contribuinte_id),
            filters,
        )

        total_statement = select(func.count()).select_from(statement.subquery())
        total = int(self._session.scalar(total_statement) or 0)

        page_statement = (
            statement.order_by(Acordo.created_at.desc(), Acordo.numero_termo.desc())
            .limit(filters.limit)
            .offset(filters.offset)
        )
        rows = self._session.execute(page_statement).all()
        items = [
            AcordoListRow(acordo=acordo, processo=processo, contribuinte=contribuinte)
            for acordo, processo, contribuinte in rows
        ]
        return items, total

    @staticmethod
    def _apply_filters(
        statement: Select[tuple[Acordo, Processo, Contribuinte]],
        filters: AcordoQueryFilters,
    ) -> Select[tuple[Acordo, Processo, Contribuinte]]:
        typed_statement = statement

        if filters.search is not None:
            pattern = f"%{filters.search}%"
            typed_statement = typed_statement.where(
                or_(
                    Processo.numero.ilike(pattern),
                    Contribuinte.nome.ilike(pattern),
                )
            )
        if filters.status is not None:
            typed_statement = typed_statement.where(Acordo.status == filters.status)
        if filters.tipo is not None:
            typed_statement = typed_statement.where(Processo.tipo == filters.tipo)

        return typed_statement
