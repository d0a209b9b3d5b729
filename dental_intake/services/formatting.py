from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from dental_intake.schemas.catalog import PriceRange

Number = Union[int, float, Decimal]


def round_half_up(value: Number) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_thousands(amount: Number) -> str:
    # es-CL groups thousands with '.'
    return f"{abs(round_half_up(amount)):,}".replace(",", ".")


def format_clp(amount: Number) -> str:
    """Format an amount as Chilean pesos, e.g. 1500000 -> '$1.500.000'."""
    sign = "-" if round_half_up(amount) < 0 else ""
    return f"{sign}${format_thousands(amount)}"


def format_price_range(price: PriceRange) -> str:
    return f"{format_clp(price.min)} - {format_clp(price.max)}"


__all__ = ["round_half_up", "format_thousands", "format_clp", "format_price_range"]
