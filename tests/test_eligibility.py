import pytest

from tests.helpers import INFLATION, PERCENTAGE, expense, income
from wealthline.cashflow import calculate_cashflow
from wealthline.eligibility import (
    annualize_amount,
    growth_adjusted_annual_amount,
    growth_multiplier,
    is_active_in_year,
)
from wealthline.schema import Frequency


@pytest.mark.parametrize(
    ("year", "active"),
    [(2019, False), (2020, True), (2025, True), (2029, True), (2030, False)],
)
def test_end_year_is_exclusive(year, active):
    item = income("job", 1000, start_year=2020, end_year=2030)
    assert is_active_in_year(item, year) is active


def test_open_bounds_are_always_active():
    item = income("job", 1000)
    assert is_active_in_year(item, 1900)
    assert is_active_in_year(item, 2200)


def test_handoff_year_never_double_counts():
    old_job = income("old", 50000, end_year=2030)
    new_job = income("new", 60000, start_year=2030)

    result = calculate_cashflow([old_job, new_job], 2030, fraction_of_year=1.0)

    assert [d.id for d in result.details] == ["new"]
    assert result.total == 60000


def test_annualize_amount():
    assert annualize_amount(100, Frequency.MONTHLY) == 1200
    assert annualize_amount(100, Frequency.ANNUAL) == 100


def test_no_growth_mode_keeps_amount():
    item = expense("rent", 12000, growth_rate=0.5)
    assert growth_adjusted_annual_amount(item, 2040, 0.03, baseline_year=2026) == 12000


def test_inflation_mode_compounds_from_projection_start():
    item = expense("food", 10000, growth_mode=INFLATION)
    assert growth_adjusted_annual_amount(item, 2028, 0.02, baseline_year=2026) == pytest.approx(10000 * 1.02**2)


def test_future_dated_inflation_item_is_entered_in_todays_money():
    item = income("pension", 10000, growth_mode=INFLATION, start_year=2040)
    amount = growth_adjusted_annual_amount(item, 2040, 0.02, baseline_year=2026)
    assert amount == pytest.approx(10000 * 1.02**14)


def test_percentage_mode_clock_starts_with_item():
    item = income("side", 1000, growth_mode=PERCENTAGE, growth_rate=0.05, start_year=2030)
    assert growth_adjusted_annual_amount(item, 2030, 0.0, baseline_year=2026) == pytest.approx(1000)
    assert growth_adjusted_annual_amount(item, 2032, 0.0, baseline_year=2026) == pytest.approx(1000 * 1.05**2)


def test_percentage_mode_running_item_starts_at_baseline():
    item = income("job", 1000, growth_mode=PERCENTAGE, growth_rate=0.05, start_year=2010)
    assert growth_adjusted_annual_amount(item, 2026, 0.0, baseline_year=2026) == pytest.approx(1000)


@pytest.mark.parametrize(("year", "expected"), [(2026, 1000), (2027, 1050), (2028, 1100), (2035, 1100)])
def test_max_value_clamps_after_growth(year, expected):
    item = income("raise", 1000, growth_mode=PERCENTAGE, growth_rate=0.05, max_value=1100, start_year=2026)
    assert growth_adjusted_annual_amount(item, year, 0.0, baseline_year=2026) == pytest.approx(expected)


def test_zero_max_value_does_not_clamp():
    item = income("job", 1000, max_value=0)
    assert growth_adjusted_annual_amount(item, 2026, 0.0, baseline_year=2026) == 1000


def test_without_baseline_clock_uses_item_start():
    item = income("job", 1000, growth_mode=PERCENTAGE, growth_rate=0.1, start_year=2026)
    assert growth_multiplier(item, 2028, 0.0) == pytest.approx(1.21)
    open_ended = income("gift", 1000, growth_mode=PERCENTAGE, growth_rate=0.1)
    assert growth_multiplier(open_ended, 2028, 0.0) == 1.0
