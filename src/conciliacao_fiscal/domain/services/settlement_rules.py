"""Pure rules for installment, agreement and case status propagation.

Every code path that registers money against an agreement derives the
resulting statuses from the functions in this module, so the cascade
parcela -> acordo -> processo is decided in exactly one place.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from conciliacao_fiscal.db.models.acordo import AcordoStatus
from conciliacao_fiscal.db.models.parcela import ParcelaStatus
from conciliacao_fiscal.db.models.processo import ProcessoStatus
from conciliacao_fiscal.domain.money import ZERO, quantize_money


class FulfillmentTrigger(enum.StrEnum):
    """Code paths able to complete an agreement."""

    PAGAMENTO = "pagamento"
    PAGAMENTO_PARCELA = "pagamento_parcela"
    AJUSTE_PARCELA = "ajuste_parcela"
    QUITACAO_CUSTAS = "quitacao_custas"
    EXECUCAO_DETALHES = "execucao_detalhes"


# Status the owning case moves to when an agreement becomes fulfilled.
PROCESSO_STATUS_ON_FULFILLMENT: dict[FulfillmentTrigger, ProcessoStatus] = {
    FulfillmentTrigger.PAGAMENTO: ProcessoStatus.CONCLUIDO,
    FulfillmentTrigger.PAGAMENTO_PARCELA: ProcessoStatus.ACORDO_FIRMADO,
    FulfillmentTrigger.AJUSTE_PARCELA: ProcessoStatus.ACORDO_FIRMADO,
    FulfillmentTrigger.QUITACAO_CUSTAS: ProcessoStatus.CONCLUIDO,
    FulfillmentTrigger.EXECUCAO_DETALHES: ProcessoStatus.ACORDO_FIRMADO,
}

PAYABLE_ACORDO_STATUSES = frozenset({AcordoStatus.ATIVO})
OPEN_PARCELA_STATUSES = frozenset({ParcelaStatus.PENDENTE, ParcelaStatus.ATRASADO})


def remaining_balance(valor: Decimal, total_pago: Decimal) -> Decimal:
    """Return how much is still owed on an installment, never negative."""

    remaining = quantize_money(valor) - quantize_money(total_pago)
    return remaining if remaining > ZERO else ZERO


def next_parcela_status(
    current: ParcelaStatus,
    *,
    total_pago: Decimal,
    valor: Decimal,
) -> ParcelaStatus:
    """Return the installment status after a payment.

    Only escalates to PAGO. A partial payment keeps PENDENTE or ATRASADO
    and a PAGO installment is never downgraded.
    """

    if current == ParcelaStatus.PAGO:
        return current
    if quantize_money(total_pago) >= quantize_money(valor):
        return ParcelaStatus.PAGO
    if current in OPEN_PARCELA_STATUSES:
        return current
    return ParcelaStatus.PENDENTE


def custas_settled(
    custas_advocaticias: Decimal | None,
    custas_data_pagamento: date | None,
) -> bool:
    """Return whether owed legal costs, if any, have been paid."""

    if custas_advocaticias is None or custas_advocaticias <= ZERO:
        return True
    return custas_data_pagamento is not None


def is_acordo_fulfilled(
    parcela_statuses: Iterable[ParcelaStatus],
    *,
    custas_advocaticias: Decimal | None = None,
    custas_data_pagamento: date | None = None,
) -> bool:
    """Return whether every installment is paid and costs are settled."""

    statuses = list(parcela_statuses)
    if not statuses:
        return False
    if any(status != ParcelaStatus.PAGO for status in statuses):
        return False
    return custas_settled(custas_advocaticias, custas_data_pagamento)


def processo_status_on_fulfillment(
    trigger: FulfillmentTrigger,
    override: ProcessoStatus | None = None,
) -> ProcessoStatus:
    """Resolve the case status reached when an agreement is fulfilled."""

    if override is not None:
        return override
    return PROCESSO_STATUS_ON_FULFILLMENT[trigger]


@dataclass(frozen=True, slots=True)
class LateCharges:
    """Projected fine and interest over an overdue balance."""

    multa: Decimal
    juros: Decimal
    total: Decimal


def compute_late_charges(
    valor_restante: Decimal,
    *,
    dias_atraso: int,
    multa_rate: Decimal,
    juros_diario_rate: Decimal,
) -> LateCharges:
    """Compute fixed fine plus simple daily interest on an overdue balance."""

    if dias_atraso <= 0 or valor_restante <= ZERO:
        return LateCharges(multa=ZERO, juros=ZERO, total=quantize_money(valor_restante))

    multa = quantize_money(valor_restante * multa_rate)
    juros = quantize_money(valor_restante * juros_diario_rate * dias_atraso)
    return LateCharges(
        multa=multa,
        juros=juros,
        total=quantize_money(valor_restante + multa + juros),
    )
