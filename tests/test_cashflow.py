import pytest

from tests.helpers import INFLATION, expense, income
from wealthline.cashflow import calculate_cashflow
from wealthline.schema import Frequency


def test_empty_input_is_zero():
    result = calculate_cashflow([], 2026)
    assert result.total == 0
    assert result.details == []


def test_default_period_is_one_month():
    salary = income("salary", 3000, frequency=Frequency.MONTHLY)
    bonus = income("bonus", 6000)

    result = calculate_cashflow([salary, bonus], 2026)

    assert result.total == pytest.approx(3500)
    assert [(d.id, d.name) for d in result.details] == [("salary", "salary"), ("bonus", "bonus")]
    assert result.details[0].amount == pytest.approx(3000)
    assert result.details[1].amount == pytest.approx(500)


def test_inactive_items_are_left_out():
    items = [
        expense("school", 9000, start_year=2030),
        expense("rent", 12000),
        expense("car", 3000, end_year=2026),
    ]
    result = calculate_cashflow(items, 2026, fraction_of_year=1.0)
    assert [d.id for d in result.details] == ["rent"]
    assert result.total == 12000


def test_growth_is_applied_before_the_period_fraction():
    item = expense("food", 12000, growth_mode=INFLATION)
    result = calculate_cashflow([item], 2027, inflation_rate=0.1, baseline_year=2026, fraction_of_year=0.5)
    assert result.total == pytest.approx(12000 * 1.1 * 0.5)
