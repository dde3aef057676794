from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from conciliacao_fiscal.db.models.parcela import TipoParcela
from conciliacao_fiscal.domain.dates import add_months
from conciliacao_fiscal.domain.installment_schedule import build_schedule


def test_last_installment_absorbs_rounding_residue() -> None:
    schedule = build_schedule(
        valor_final=Decimal("1000.00"),
        valor_entrada=Decimal("0.00"),
        numero_parcelas=3,
        data_vencimento=date(2026, 1, 10),
    )

    assert [item.valor for item in schedule] == [
        Decimal("333.33"),
        Decimal("333.33"),
        Decimal("333.34"),
    ]
    assert sum(item.valor for item in schedule) == Decimal("1000.00")
    assert [item.data_vencimento for item in schedule] == [
        date(2026, 2, 10),
        date(2026, 3, 10),
        date(2026, 4, 10),
    ]


def test_down_payment_is_due_on_first_due_date() -> None:
    schedule = build_schedule(
        valor_final=Decimal("1200.00"),
        valor_entrada=Decimal("200.00"),
        numero_parcelas=2,
        data_vencimento=date(2026, 1, 31),
    )

    entrada, primeira, segunda = schedule
    assert entrada.tipo_parcela == TipoParcela.ENTRADA
    assert entrada.numero == 0
    assert entrada.valor == Decimal("200.00")
    assert entrada.data_vencimento == date(2026, 1, 31)
    assert primeira.tipo_parcela == TipoParcela.PARCELA_ACORDO
    assert primeira.data_vencimento == date(2026, 2, 28)
    assert segunda.data_vencimento == date(2026, 3, 31)
    assert primeira.valor + segunda.valor == Decimal("1000.00")


def test_single_installment_without_down_payment_is_due_immediately() -> None:
    schedule = build_schedule(
        valor_final=Decimal("750.00"),
        valor_entrada=Decimal("0.00"),
        numero_parcelas=1,
        data_vencimento=date(2026, 5, 15),
    )

    assert len(schedule) == 1
    assert schedule[0].data_vencimento == date(2026, 5, 15)
    assert schedule[0].valor == Decimal("750.00")


def test_down_payment_must_be_below_final_value() -> None:
    with pytest.raises(ValueError):
        build_schedule(
            valor_final=Decimal("500.00"),
            valor_entrada=Decimal("500.00"),
            numero_parcelas=2,
            data_vencimento=date(2026, 1, 10),
        )


def test_installments_below_one_cent_are_rejected() -> None:
    with pytest.raises(ValueError):
        build_schedule(
            valor_final=Decimal("0.01"),
            valor_entrada=Decimal("0.00"),
            numero_parcelas=2,
            data_vencimento=date(2026, 1, 10),
        )


def test_add_months_clamps_to_month_end() -> None:
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2026, 11, 30), 3) == date(2027, 2, 28)
