"""Overdue installment batch and delinquency report."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from conciliacao_fiscal.db.models.acordo import AcordoStatus
from conciliacao_fiscal.db.models.parcela import ParcelaStatus
from conciliacao_fiscal.domain.errors import InvalidRequestError, compose_error_message
from conciliacao_fiscal.domain.money import quantize_money
from conciliacao_fiscal.domain.services.settlement_rules import (
    LateCharges,
    compute_late_charges,
    remaining_balance,
)
from conciliacao_fiscal.repositories.parcela_repository import OverdueParcelaRow
from conciliacao_fiscal.services.ports import (
    AcordoRepositoryProtocol,
    AuditRepositoryProtocol,
    ParcelaRepositoryProtocol,
    SessionProtocol,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class StatusUpdateResult:
    """Counts produced by one overdue batch run."""

    parcelas_atualizadas: int
    acordos_atualizados: int


@dataclass(slots=True, frozen=True)
class ParcelaVencidaItem:
    """One line of the overdue installment report."""

    row: OverdueParcelaRow
    valor_pago: Decimal
    valor_restante: Decimal
    dias_vencido: int
    encargos: LateCharges


class InadimplenciaService:
    """Flags overdue installments and reports delinquency."""

    def __init__(
        self,
        *,
        parcela_repository: ParcelaRepositoryProtocol,
        acordo_repository: AcordoRepositoryProtocol,
        audit_repository: AuditRepositoryProtocol,
        session: SessionProtocol,
        multa_rate: Decimal,
        juros_diario_rate: Decimal,
    ) -> None:
        self._parcela_repository = parcela_repository
        self._acordo_repository = acordo_repository
        self._audit_repository = audit_repository
        self._session = session
        self._multa_rate = multa_rate
        self._juros_diario_rate = juros_diario_rate

    def atualizar_status_parcelas(
        self,
        *,
        hoje: date,
        usuario_id: str,
    ) -> StatusUpdateResult:
        """Mark past-due installments ATRASADO and their agreements vencido.

        Re-running on the same day changes nothing and reports zero counts.
        """

        try:
            parcelas = self._parcela_repository.list_pending_past_due(hoje)
            for parcela in parcelas:
                parcela.status = ParcelaStatus.ATRASADO
            self._parcela_repository.flush()

            acordos = self._acordo_repository.list_active_with_overdue_parcelas()
            for acordo in acordos:
                acordo.status = AcordoStatus.VENCIDO

            result = StatusUpdateResult(
                parcelas_atualizadas=len(parcelas),
                acordos_atualizados=len(acordos),
            )
            if result.parcelas_atualizadas or result.acordos_atualizados:
                self._audit_repository.add_log(
                    usuario_id=usuario_id,
                    acao="ATUALIZAR_STATUS_PARCELAS",
                    entidade="Parcela",
                    entidade_id=hoje.isoformat(),
                    dados_novos={
                        "parcelas": [str(parcela.id) for parcela in parcelas],
                        "acordos": [str(acordo.id) for acordo in acordos],
                    },
                )
            self._session.commit()
            logger.info(
                "parcelas_atualizadas",
                extra={
                    "data_referencia": hoje.isoformat(),
                    "parcelas_atualizadas": result.parcelas_atualizadas,
                    "acordos_atualizados": result.acordos_atualizados,
                },
            )
            return result
        except Exception:
            self._session.rollback()
            raise

    def relatorio_parcelas_vencidas(
        self,
        *,
        hoje: date,
        dias: int = 0,
    ) -> list[ParcelaVencidaItem]:
        """List overdue installments due at least ``dias`` days before hoje."""

        if dias < 0:
            raise InvalidRequestError(
                message=compose_error_message(
                    cause="O parâmetro dias não pode ser negativo.",
                    action="Informe um número de dias igual ou maior que zero.",
                )
            )

        limite = hoje - timedelta(days=dias)
        items: list[ParcelaVencidaItem] = []
        for row in self._parcela_repository.list_overdue_report(limite):
            valor_pago = quantize_money(row.total_pago)
            valor_restante = remaining_balance(row.parcela.valor, valor_pago)
            dias_vencido = (hoje - row.parcela.data_vencimento).days
            items.append(
                ParcelaVencidaItem(
                    row=row,
                    valor_pago=valor_pago,
                    valor_restante=valor_restante,
                    dias_vencido=dias_vencido,
                    encargos=compute_late_charges(
                        valor_restante,
                        dias_atraso=dias_vencido,
                        multa_rate=self._multa_rate,
                        juros_diario_rate=self._juros_diario_rate,
                    ),
                )
            )
        return items
