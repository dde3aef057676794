from decimal import Decimal

from conciliacao_fiscal.domain.money import (
    format_brl,
    format_money,
    parse_money,
    quantize_money,
)


def test_quantize_money_uses_half_up() -> None:
    assert quantize_money(Decimal("333.335")) == Decimal("333.34")
    assert quantize_money(Decimal("333.334")) == Decimal("333.33")


def test_parse_money_accepts_numbers_and_strings() -> None:
    assert parse_money("600") == Decimal("600.00")
    assert parse_money(400.5) == Decimal("400.50")
    assert parse_money(Decimal("0.1")) == Decimal("0.10")


def test_format_brl_renders_two_decimal_places() -> None:
    assert format_money(Decimal("500")) == "500.00"
    assert format_brl(Decimal("500")) == "R$ 500.00"
