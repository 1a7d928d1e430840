"""Activity windows and growth-adjusted amounts for timed items."""

from __future__ import annotations

from .schema import FinancialItem, Frequency, GrowthMode

MONTHS_PER_YEAR = 12


def is_active_in_year(item: FinancialItem, year: int) -> bool:
    """Return True if ``item`` is active in ``year``.

    ``start_year`` is inclusive and ``end_year`` exclusive, so an item ending in
    2030 is active through 2029. A missing bound is open on that side.
    """
    if item.start_year is not None and year < item.start_year:
        return False
    if item.end_year is not None and year >= item.end_year:
        return False
    return True


def annualize_amount(value: float, frequency: Frequency) -> float:
    if frequency is Frequency.MONTHLY:
        return value * MONTHS_PER_YEAR
    return value


def _growth_origin(item: FinancialItem, year: int, baseline_year: int | None) -> int:
    if baseline_year is None:
        return item.start_year if item.start_year is not None else year
    if item.growth_mode is GrowthMode.INFLATION or item.start_year is None:
        # Inflation-linked amounts are entered in today's money.
        return baseline_year
    return max(item.start_year, baseline_year)


def growth_multiplier(
    item: FinancialItem,
    year: int,
    inflation_rate: float,
    baseline_year: int | None = None,
) -> float:
    if item.growth_mode is GrowthMode.INFLATION:
        annual_rate = inflation_rate
    elif item.growth_mode is GrowthMode.PERCENTAGE:
        annual_rate = item.growth_rate or 0.0
    else:
        return 1.0
    years_elapsed = max(0, year - _growth_origin(item, year, baseline_year))
    if years_elapsed <= 0 or annual_rate == 0:
        return 1.0
    return (1.0 + annual_rate) ** years_elapsed


def growth_adjusted_annual_amount(
    item: FinancialItem,
    year: int,
    inflation_rate: float,
    baseline_year: int | None = None,
) -> float:
    """Annualized amount for ``year`` after growth, clamped to ``max_value``."""
    annual = annualize_amount(item.value, item.frequency)
    annual *= growth_multiplier(item, year, inflation_rate, baseline_year)
    if item.max_value is not None and item.max_value > 0:
        annual = min(annual, item.max_value)
    return annual
