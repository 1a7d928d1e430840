import pytest

from tests.helpers import liability
from wealthline.liabilities import amortize_liabilities


def test_interest_then_minimum_payment():
    loan = liability("loan", 10000, interest_rate=0.05, minimum_payment=1000)

    result = amortize_liabilities([loan], available_cashflow=5000)

    assert result.updated_liabilities[0].value == pytest.approx(9500)
    assert result.total_payment == pytest.approx(1000)
    entry = result.history[0]
    assert entry.liability_id == "loan"
    assert entry.interest_charged == pytest.approx(500)
    assert entry.principal_paid == pytest.approx(1000)
    assert entry.remaining_balance == pytest.approx(9500)
    assert loan.value == 10000


def test_payment_limited_by_cashflow():
    loan = liability("loan", 10000, interest_rate=0.02, minimum_payment=1000)
    result = amortize_liabilities([loan], available_cashflow=300)
    assert result.total_payment == pytest.approx(300)
    assert result.updated_liabilities[0].value == pytest.approx(10200 - 300)


def test_no_payment_from_negative_cashflow():
    loan = liability("loan", 1000, interest_rate=0.12, minimum_payment=600)
    result = amortize_liabilities([loan], available_cashflow=-250, period_fraction=1 / 12)
    assert result.total_payment == 0
    assert result.updated_liabilities[0].value == pytest.approx(1010)


def test_payment_never_exceeds_balance():
    loan = liability("loan", 100, minimum_payment=1000)
    result = amortize_liabilities([loan], available_cashflow=5000)
    assert result.total_payment == pytest.approx(100)
    assert result.updated_liabilities[0].value == 0


def test_earlier_liabilities_are_paid_first():
    first = liability("card", 5000, minimum_payment=1000)
    second = liability("car", 5000, minimum_payment=1000)

    result = amortize_liabilities([first, second], available_cashflow=1500)

    assert [h.principal_paid for h in result.history] == pytest.approx([1000, 500])
    assert [item.value for item in result.updated_liabilities] == pytest.approx([4000, 4500])


def test_period_fraction_scales_interest_and_payment():
    loan = liability("loan", 12000, interest_rate=0.12, minimum_payment=2400)
    result = amortize_liabilities([loan], available_cashflow=1000, period_fraction=1 / 12)
    assert result.history[0].interest_charged == pytest.approx(120)
    assert result.history[0].principal_paid == pytest.approx(200)
    assert result.updated_liabilities[0].value == pytest.approx(11920)
