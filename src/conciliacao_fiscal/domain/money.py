"""Money helpers using Decimal with BRL precision rules."""

from decimal import ROUND_HALF_UP, Decimal

MONEY_PRECISION = Decimal("0.01")
ZERO = Decimal("0.00")


def quantize_money(value: Decimal) -> Decimal:
    """Return value rounded to two decimal places with HALF_UP strategy."""

    return value.quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def parse_money(value: str | int | float | Decimal) -> Decimal:
    """Parse and normalize input money value into Decimal."""

    return quantize_money(Decimal(str(value)))


def format_money(value: Decimal) -> str:
    """Render money as string with exactly two decimal places."""

    return f"{quantize_money(value):.2f}"


def format_brl(value: Decimal) -> str:
    """Render money prefixed with the BRL symbol, e.g. ``R$ 500.00``."""

    return f"R$ {format_money(value)}"
