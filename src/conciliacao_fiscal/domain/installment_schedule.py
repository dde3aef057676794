"""Installment schedule generation for new agreements."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from conciliacao_fiscal.db.models.parcela import TipoParcela
from conciliacao_fiscal.domain.dates import add_months
from conciliacao_fiscal.domain.money import ZERO, quantize_money


@dataclass(frozen=True, slots=True)
class ScheduledParcela:
    """One planned installment before persistence."""

    tipo_parcela: TipoParcela
    numero: int
    valor: Decimal
    data_vencimento: date


def build_schedule(
    *,
    valor_final: Decimal,
    valor_entrada: Decimal,
    numero_parcelas: int,
    data_vencimento: date,
) -> list[ScheduledParcela]:
    """Split an agreement value into a down payment and monthly installments.

    The down payment, when present, is due on ``data_vencimento`` and each
    regular installment ``i`` is due ``i`` months later. A single installment
    without down payment is due on ``data_vencimento`` itself. The last
    installment absorbs the rounding residue so the schedule sums exactly to
    ``valor_final``.
    """

    if numero_parcelas < 1:
        msg = "numero_parcelas must be at least 1."
        raise ValueError(msg)

    valor_final = quantize_money(valor_final)
    valor_entrada = quantize_money(valor_entrada)
    if valor_entrada < ZERO or valor_entrada >= valor_final:
        msg = "valor_entrada must be between zero and valor_final."
        raise ValueError(msg)

    schedule: list[ScheduledParcela] = []
    has_entrada = valor_entrada > ZERO
    if has_entrada:
        schedule.append(
            ScheduledParcela(
                tipo_parcela=TipoParcela.ENTRADA,
                numero=0,
                valor=valor_entrada,
                data_vencimento=data_vencimento,
            )
        )

    financed = valor_final - valor_entrada
    base_value = quantize_money(financed / numero_parcelas)
    last_value = financed - base_value * (numero_parcelas - 1)
    if base_value <= ZERO or last_value <= ZERO:
        msg = "Installment value must be at least 0.01."
        raise ValueError(msg)
    month_offset = 0 if numero_parcelas == 1 and not has_entrada else 1
    for numero in range(1, numero_parcelas + 1):
        valor = last_value if numero == numero_parcelas else base_value
        schedule.append(
            ScheduledParcela(
                tipo_parcela=TipoParcela.PARCELA_ACORDO,
                numero=numero,
                valor=quantize_money(valor),
                data_vencimento=add_months(
                    data_vencimento, numero - 1 + month_offset
                ),
            )
        )
    return schedule
