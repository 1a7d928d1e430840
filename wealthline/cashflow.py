"""Income and expense totals for a period."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .eligibility import MONTHS_PER_YEAR, growth_adjusted_annual_amount, is_active_in_year
from .schema import FinancialItem


@dataclass(slots=True)
class CashflowDetail:
    id: str
    name: str
    amount: float


@dataclass(slots=True)
class CashflowResult:
    total: float = 0.0
    details: list[CashflowDetail] = field(default_factory=list)


def calculate_cashflow(
    items: Iterable[FinancialItem],
    year: int,
    *,
    inflation_rate: float = 0.0,
    baseline_year: int | None = None,
    fraction_of_year: float = 1.0 / MONTHS_PER_YEAR,
) -> CashflowResult:
    """Sum the active ``items`` for a period covering ``fraction_of_year`` of ``year``.

    Details keep item order. Inactive items are left out entirely.
    """
    result = CashflowResult()
    for item in items:
        if not is_active_in_year(item, year):
            continue
        annual = growth_adjusted_annual_amount(item, year, inflation_rate, baseline_year)
        amount = annual * fraction_of_year
        result.details.append(CashflowDetail(id=item.id, name=item.name, amount=amount))
        result.total += amount
    return result
