"""Shared agreement fulfillment cascade.

Payment registration, installment adjustment, cost settlement and
component execution all finish by asking this module whether the
agreement is now fulfilled. The module then moves the agreement and
its case and writes the single history entry for the event.
"""

from __future__ import annotations

import logging
from typing import Any

from conciliacao_fiscal.db.models.acordo import Acordo, AcordoStatus
from conciliacao_fiscal.db.models.historico import TipoHistorico
from conciliacao_fiscal.db.models.parcela import Parcela
from conciliacao_fiscal.db.models.processo import Processo, ProcessoStatus
from conciliacao_fiscal.domain.errors import NotFoundError, compose_error_message
from conciliacao_fiscal.domain.services.settlement_rules import (
    FulfillmentTrigger,
    is_acordo_fulfilled,
    processo_status_on_fulfillment,
)
from conciliacao_fiscal.services.ports import (
    AcordoRepositoryProtocol,
    AuditRepositoryProtocol,
    ParcelaRepositoryProtocol,
    ProcessoRepositoryProtocol,
)

logger = logging.getLogger(__name__)

SYSTEM_USER_ID = "sistema"


def parcela_snapshot(parcela: Parcela) -> dict[str, Any]:
    """Serialize installment fields tracked by the audit log."""

    return {
        "status": parcela.status.value,
        "valor": f"{parcela.valor:.2f}",
        "data_vencimento": parcela.data_vencimento.isoformat(),
        "data_pagamento": (
            parcela.data_pagamento.isoformat() if parcela.data_pagamento else None
        ),
    }


def acordo_snapshot(acordo: Acordo) -> dict[str, Any]:
    """Serialize agreement fields tracked by the audit log."""

    return {
        "numero_termo": acordo.numero_termo,
        "status": acordo.status.value,
        "valor_final": f"{acordo.valor_final:.2f}",
        "numero_parcelas": acordo.numero_parcelas,
    }


class AcordoCompletion:
    """Evaluates and applies agreement fulfillment."""

    def __init__(
        self,
        *,
        acordo_repository: AcordoRepositoryProtocol,
        parcela_repository: ParcelaRepositoryProtocol,
        processo_repository: ProcessoRepositoryProtocol,
        audit_repository: AuditRepositoryProtocol,
        processo_status_override: ProcessoStatus | None = None,
    ) -> None:
        self._acordo_repository = acordo_repository
        self._parcela_repository = parcela_repository
        self._processo_repository = processo_repository
        self._audit_repository = audit_repository
        self._processo_status_override = processo_status_override

    def complete_if_fulfilled(
        self,
        *,
        acordo: Acordo,
        trigger: FulfillmentTrigger,
        usuario_id: str,
    ) -> bool:
        """Complete an active agreement whose installments and costs are paid."""

        if acordo.status != AcordoStatus.ATIVO:
            return False

        parcelas = self._parcela_repository.list_for_acordo(acordo.id)
        transacao = self._acordo_repository.get_transacao(acordo.id)
        fulfilled = is_acordo_fulfilled(
            (parcela.status for parcela in parcelas),
            custas_advocaticias=transacao.custas_advocaticias if transacao else None,
            custas_data_pagamento=(
                transacao.custas_data_pagamento if transacao else None
            ),
        )
        if not fulfilled:
            return False

        self.mark_fulfilled(
            acordo=acordo,
            trigger=trigger,
            usuario_id=usuario_id,
            titulo="Acordo de Pagamento Cumprido",
            descricao=(
                f"Todas as parcelas do acordo {acordo.numero_termo} foram pagas "
                "e o acordo foi marcado como cumprido."
            ),
        )
        return True

    def mark_fulfilled(
        self,
        *,
        acordo: Acordo,
        trigger: FulfillmentTrigger,
        usuario_id: str,
        titulo: str,
        descricao: str,
    ) -> Processo:
        """Set the agreement cumprido and move its case per the fulfillment table."""

        processo = self._processo_repository.get_for_update(acordo.processo_id)
        if processo is None:
            raise NotFoundError(
                message=compose_error_message(
                    cause="Processo vinculado ao acordo não encontrado.",
                    action="Verifique a integridade do cadastro do acordo.",
                ),
                details={"processo_id": str(acordo.processo_id)},
            )

        acordo.status = AcordoStatus.CUMPRIDO
        # CONCLUIDO is terminal; a fulfilled agreement never reopens the case.
        if processo.status != ProcessoStatus.CONCLUIDO:
            processo.status = processo_status_on_fulfillment(
                trigger, self._processo_status_override
            )
        self._audit_repository.add_historico(
            processo_id=processo.id,
            usuario_id=usuario_id,
            titulo=titulo,
            descricao=descricao,
            tipo=TipoHistorico.ACORDO,
        )
        logger.info(
            "acordo_cumprido",
            extra={
                "acordo_id": str(acordo.id),
                "processo_id": str(processo.id),
                "trigger": trigger.value,
                "processo_status": processo.status.value,
            },
        )
        return processo
