"""Installment simulation for the financing screen.

Referential only: the final financing depends on the lender's credit
evaluation.
"""
from typing import Optional

from dental_intake.schemas.catalog import PriceRange
from dental_intake.schemas.diagnosis import FinancingQuote
from dental_intake.services.catalog import Catalog, load_catalog
from dental_intake.services.formatting import format_clp, round_half_up


class FinancingError(ValueError):
    pass


def seed_amount(price: PriceRange) -> int:
    return round_half_up((price.min + price.max) / 2)


def snap_amount(price: PriceRange, amount: int, step: int) -> int:
    """Snap an amount to the slider grid anchored at price.min, then clamp."""
    if step > 0:
        amount = price.min + round_half_up((amount - price.min) / step) * step
    return max(price.min, min(price.max, amount))


def monthly_payment(amount: int, installments: int, monthly_rate: float) -> int:
    if monthly_rate == 0:
        return round_half_up(amount / installments)
    growth = (1 + monthly_rate) ** installments
    return round_half_up(amount * monthly_rate * growth / (growth - 1))


def simulate_financing(
    price: PriceRange,
    amount: Optional[int] = None,
    installments: Optional[int] = None,
    catalog: Optional[Catalog] = None,
) -> FinancingQuote:
    catalog = catalog or load_catalog()
    rules = catalog.financing
    if price.min > price.max:
        raise FinancingError("Invalid price range: min is greater than max")

    n = installments if installments is not None else rules.default_installments
    if n not in rules.installment_options:
        options = ", ".join(str(o) for o in rules.installment_options)
        raise FinancingError(f"Unsupported installments: {n} (choose one of {options})")

    value = seed_amount(price) if amount is None else snap_amount(price, amount, rules.step)
    payment = monthly_payment(value, n, rules.monthly_rate)
    total = payment * n
    return FinancingQuote(
        amount=value,
        installments=n,
        monthly_rate=rules.monthly_rate,
        monthly_payment=payment,
        total=total,
        min=price.min,
        max=price.max,
        amount_display=format_clp(value),
        monthly_payment_display=format_clp(payment),
        total_display=format_clp(total),
    )


__all__ = ["FinancingError", "simulate_financing", "seed_amount", "snap_amount", "monthly_payment"]
