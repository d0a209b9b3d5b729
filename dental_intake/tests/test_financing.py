import pytest

from dental_intake.schemas.catalog import PriceRange
from dental_intake.services import financing as svc

IMPLANT = PriceRange(min=890000, max=2500000)
PREVENTION = PriceRange(min=85000, max=350000)


def _annuity(amount, n, rate=0.018):
    growth = (1 + rate) ** n
    return amount * rate * growth / (growth - 1)


def test_default_quote_uses_midpoint_and_twelve_installments():
    quote = svc.simulate_financing(IMPLANT)
    assert quote.amount == 1695000
    assert quote.installments == 12
    assert quote.monthly_rate == pytest.approx(0.018)
    assert abs(quote.monthly_payment - _annuity(1695000, 12)) <= 0.5
    assert quote.total == quote.monthly_payment * 12
    assert quote.amount_display == "$1.695.000"
    assert (quote.min, quote.max) == (890000, 2500000)


def test_amount_snaps_to_slider_step():
    assert svc.simulate_financing(PREVENTION, amount=123456).amount == 125000


def test_amount_is_clamped_to_range():
    assert svc.simulate_financing(PREVENTION, amount=5_000_000).amount == 350000
    assert svc.simulate_financing(PREVENTION, amount=0).amount == 85000


@pytest.mark.parametrize("n", [3, 6, 12, 24])
def test_supported_installments(n):
    quote = svc.simulate_financing(PREVENTION, amount=200000, installments=n)
    assert quote.installments == n
    assert abs(quote.monthly_payment - _annuity(quote.amount, n)) <= 0.5


def test_longer_terms_lower_the_payment_and_raise_the_total():
    short = svc.simulate_financing(IMPLANT, installments=3)
    long = svc.simulate_financing(IMPLANT, installments=24)
    assert long.monthly_payment < short.monthly_payment
    assert long.total > short.total


def test_unsupported_installments_rejected():
    with pytest.raises(svc.FinancingError) as exc:
        svc.simulate_financing(IMPLANT, installments=5)
    assert "Unsupported installments: 5" in str(exc.value)


def test_inverted_price_range_rejected():
    with pytest.raises(svc.FinancingError):
        svc.simulate_financing(PriceRange(min=500, max=100))


def test_zero_rate_splits_evenly():
    assert svc.monthly_payment(120000, 12, 0) == 10000
