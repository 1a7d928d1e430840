"""Core month-by-month deterministic projection engine."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
import logging
from typing import Any, Iterable, Sequence

from .age_year import age_for_label, age_year_boundary, iter_months
from .cashflow import CashflowDetail, calculate_cashflow
from .eligibility import MONTHS_PER_YEAR
from .growth import GrowthEntry, YieldEntry, apply_asset_growth, apply_asset_yield
from .liabilities import LiabilityPayment, amortize_liabilities
from .schema import FinancialItem, UserProfile, check_finite_items, require_finite, split_by_category
from .waterfall import (
    ALLOCATION_EPSILON,
    AllocationEntry,
    ContributionLedger,
    allocate_surplus,
    cover_deficit,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class YearHistory:
    income: list[CashflowDetail] = field(default_factory=list)
    expenses: list[CashflowDetail] = field(default_factory=list)
    asset_growth: list[GrowthEntry] = field(default_factory=list)
    asset_yield: list[YieldEntry] = field(default_factory=list)
    contributions: list[AllocationEntry] = field(default_factory=list)
    surplus: list[AllocationEntry] = field(default_factory=list)
    deficit: list[AllocationEntry] = field(default_factory=list)
    liability_payments: list[LiabilityPayment] = field(default_factory=list)


@dataclass(slots=True)
class YearResult:
    year: int
    age: int | None
    fraction_of_year: float
    total_income: float
    total_expenses: float
    net_cashflow: float
    remaining_cashflow: float
    assets: list[FinancialItem]
    liabilities: list[FinancialItem]
    opening_assets: dict[str, float]
    net_worth: float
    inflation_factor: float
    history: YearHistory = field(default_factory=YearHistory)


@dataclass(slots=True)
class ProjectionSummary:
    starting_net_worth: float = 0.0
    ending_net_worth: float = 0.0
    total_growth: float = 0.0
    average_annual_return: float = 0.0


@dataclass(slots=True)
class ProjectionResult:
    years: list[YearResult] = field(default_factory=list)
    summary: ProjectionSummary = field(default_factory=ProjectionSummary)

    def year_by_label(self, label: int) -> YearResult | None:
        for year in self.years:
            if year.year == label:
                return year
        return None


@dataclass(slots=True)
class _PeriodOutcome:
    assets: list[FinancialItem]
    liabilities: list[FinancialItem]
    total_income: float
    total_expenses: float
    remaining_cashflow: float
    history: YearHistory


def calculate_net_worth(assets: Iterable[FinancialItem], liabilities: Iterable[FinancialItem]) -> float:
    return sum(item.value for item in assets) - sum(item.value for item in liabilities)


def _run_period(
    incomes: list[FinancialItem],
    expenses: list[FinancialItem],
    assets: list[FinancialItem],
    liabilities: list[FinancialItem],
    year: int,
    fraction_of_year: float,
    surplus_priority: Sequence[str],
    deficit_priority: Sequence[str],
    inflation_rate: float,
    baseline_year: int | None,
    ledger: ContributionLedger,
    cap_fraction: float,
) -> _PeriodOutcome:
    opening = {asset.id: asset.value for asset in assets}
    history = YearHistory()

    income = calculate_cashflow(
        incomes, year, inflation_rate=inflation_rate, baseline_year=baseline_year, fraction_of_year=fraction_of_year
    )
    expense = calculate_cashflow(
        expenses, year, inflation_rate=inflation_rate, baseline_year=baseline_year, fraction_of_year=fraction_of_year
    )
    history.income = income.details
    history.expenses = expense.details
    cash = income.total - expense.total

    debt = amortize_liabilities(liabilities, cash, fraction_of_year)
    history.liability_payments = debt.history
    cash -= debt.total_payment

    if cash > ALLOCATION_EPSILON:
        allocation = allocate_surplus(cash, assets, surplus_priority, ledger, cap_fraction)
        assets = allocation.updated_assets
        history.contributions = allocation.contributions
        history.surplus = allocation.surplus
        cash = allocation.remaining_surplus
    elif cash < -ALLOCATION_EPSILON:
        withdrawal = cover_deficit(-cash, assets, deficit_priority)
        assets = withdrawal.updated_assets
        history.deficit = withdrawal.history
        cash = -withdrawal.remaining_deficit

    grown = apply_asset_growth(assets, opening, fraction_of_year)
    history.asset_growth = grown.history
    yielded = apply_asset_yield(grown.updated_assets, fraction_of_year)
    history.asset_yield = yielded.history

    return _PeriodOutcome(
        assets=yielded.updated_assets,
        liabilities=debt.updated_liabilities,
        total_income=income.total,
        total_expenses=expense.total,
        remaining_cashflow=cash,
        history=history,
    )


def _merge(target: dict[str, Any], entries: Iterable[Any], key: str, amount_attr: str) -> None:
    for entry in entries:
        entry_id = getattr(entry, key)
        existing = target.get(entry_id)
        if existing is None:
            target[entry_id] = replace(entry)
        else:
            setattr(existing, amount_attr, getattr(existing, amount_attr) + getattr(entry, amount_attr))


class _AgeYearBucket:
    """Monthly outcomes accumulated until an age-year closes."""

    def __init__(self, label: int, opening_assets: list[FinancialItem]) -> None:
        self.label = label
        self.months = 0
        self.opening = {asset.id: asset.value for asset in opening_assets}
        self.total_income = 0.0
        self.total_expenses = 0.0
        self.remaining_cashflow = 0.0
        self.income: dict[str, CashflowDetail] = {}
        self.expenses: dict[str, CashflowDetail] = {}
        self.growth: dict[str, GrowthEntry] = {}
        self.yields: dict[str, YieldEntry] = {}
        self.contributions: dict[str, AllocationEntry] = {}
        self.surplus: dict[str, AllocationEntry] = {}
        self.deficit: dict[str, AllocationEntry] = {}
        self.liability_payments: dict[str, LiabilityPayment] = {}

    def add(self, outcome: _PeriodOutcome) -> None:
        self.months += 1
        self.total_income += outcome.total_income
        self.total_expenses += outcome.total_expenses
        self.remaining_cashflow += outcome.remaining_cashflow
        hist = outcome.history
        _merge(self.income, hist.income, "id", "amount")
        _merge(self.expenses, hist.expenses, "id", "amount")
        _merge(self.growth, hist.asset_growth, "asset_id", "growth_amount")
        _merge(self.yields, hist.asset_yield, "asset_id", "yield_amount")
        _merge(self.contributions, hist.contributions, "asset_id", "amount")
        _merge(self.surplus, hist.surplus, "asset_id", "amount")
        _merge(self.deficit, hist.deficit, "asset_id", "amount")
        for payment in hist.liability_payments:
            existing = self.liability_payments.get(payment.liability_id)
            if existing is None:
                self.liability_payments[payment.liability_id] = replace(payment)
                continue
            existing.interest_charged += payment.interest_charged
            existing.principal_paid += payment.principal_paid
            existing.remaining_balance = payment.remaining_balance

    def close(
        self,
        age: int | None,
        assets: list[FinancialItem],
        liabilities: list[FinancialItem],
        inflation_factor: float,
    ) -> YearResult:
        return YearResult(
            year=self.label,
            age=age,
            fraction_of_year=self.months / MONTHS_PER_YEAR,
            total_income=self.total_income,
            total_expenses=self.total_expenses,
            net_cashflow=self.total_income - self.total_expenses,
            remaining_cashflow=self.remaining_cashflow,
            assets=list(assets),
            liabilities=list(liabilities),
            opening_assets=dict(self.opening),
            net_worth=calculate_net_worth(assets, liabilities),
            inflation_factor=inflation_factor,
            history=YearHistory(
                income=list(self.income.values()),
                expenses=list(self.expenses.values()),
                asset_growth=list(self.growth.values()),
                asset_yield=list(self.yields.values()),
                contributions=list(self.contributions.values()),
                surplus=list(self.surplus.values()),
                deficit=list(self.deficit.values()),
                liability_payments=list(self.liability_payments.values()),
            ),
        )


def _summarize(starting_net_worth: float, years: list[YearResult]) -> ProjectionSummary:
    if not years:
        return ProjectionSummary()
    ending = years[-1].net_worth
    span = sum(year.fraction_of_year for year in years)
    average = 0.0
    if starting_net_worth > 0 and ending > 0 and span > 0:
        average = (ending / starting_net_worth) ** (1.0 / span) - 1.0
    return ProjectionSummary(
        starting_net_worth=starting_net_worth,
        ending_net_worth=ending,
        total_growth=ending - starting_net_worth,
        average_annual_return=average,
    )


def run_multi_year_projection(
    items: Sequence[FinancialItem],
    start_year: int,
    number_of_years: int,
    user_profile: UserProfile | None = None,
    surplus_priority: Sequence[str] = (),
    deficit_priority: Sequence[str] = (),
    inflation_rate: float = 0.0,
    *,
    start_month: int = 1,
    now: date | None = None,
) -> ProjectionResult:
    """Advance ``items`` month by month and aggregate the months into age years.

    Age years run birthday to birthday when ``user_profile`` has a date of
    birth, and calendar years otherwise. A trailing partial year is kept.
    """
    check_finite_items(items)
    require_finite("settings", "inflation_rate", inflation_rate)
    if number_of_years <= 0:
        return ProjectionResult()

    if now is not None and start_year == now.year:
        start_month = now.month

    split = split_by_category(items)
    assets = list(split.assets)
    liabilities = list(split.liabilities)
    starting_net_worth = calculate_net_worth(assets, liabilities)

    birth = user_profile.birth_year_month() if user_profile is not None else None
    birth_year, birth_month = birth if birth is not None else (None, None)

    months = iter_months(start_year, start_month, number_of_years * MONTHS_PER_YEAR)
    logger.debug(
        "projection start %04d-%02d for %d months (%d assets, %d liabilities)",
        start_year,
        start_month,
        len(months),
        len(assets),
        len(liabilities),
    )

    ledger = ContributionLedger(year=start_year)
    years: list[YearResult] = []
    bucket: _AgeYearBucket | None = None

    for elapsed, (year, month) in enumerate(months, start=1):
        if month == 1:
            ledger.start_year(year)

        label, is_boundary = age_year_boundary(year, month, birth_month)
        if bucket is None:
            bucket = _AgeYearBucket(label, assets)

        outcome = _run_period(
            split.incomes,
            split.expenses,
            assets,
            liabilities,
            year,
            1.0 / MONTHS_PER_YEAR,
            surplus_priority,
            deficit_priority,
            inflation_rate,
            start_year,
            ledger,
            1.0,
        )
        assets = outcome.assets
        liabilities = outcome.liabilities
        if outcome.remaining_cashflow < -ALLOCATION_EPSILON:
            logger.debug("unmet deficit %.2f in %04d-%02d", -outcome.remaining_cashflow, year, month)
        bucket.add(outcome)

        if is_boundary or elapsed == len(months):
            inflation_factor = (1.0 + inflation_rate) ** (elapsed / MONTHS_PER_YEAR)
            closed = bucket.close(age_for_label(bucket.label, birth_year), assets, liabilities, inflation_factor)
            logger.debug(
                "closed age year %d after %d months, net worth %.2f",
                closed.year,
                bucket.months,
                closed.net_worth,
            )
            years.append(closed)
            bucket = None

    return ProjectionResult(years=years, summary=_summarize(starting_net_worth, years))


def run_single_year(
    incomes: list[FinancialItem],
    expenses: list[FinancialItem],
    assets: list[FinancialItem],
    liabilities: list[FinancialItem],
    year: int,
    fraction_of_year: float = 1.0,
    surplus_priority: Sequence[str] = (),
    deficit_priority: Sequence[str] = (),
    inflation_rate: float = 0.0,
    baseline_year: int | None = None,
) -> YearResult:
    """Run the monthly pipeline once over a single period of ``fraction_of_year``."""
    check_finite_items([*incomes, *expenses, *assets, *liabilities])
    require_finite("settings", "inflation_rate", inflation_rate)

    bucket = _AgeYearBucket(year, assets)
    outcome = _run_period(
        incomes,
        expenses,
        assets,
        liabilities,
        year,
        fraction_of_year,
        surplus_priority,
        deficit_priority,
        inflation_rate,
        baseline_year,
        ContributionLedger(year=year),
        fraction_of_year,
    )
    bucket.add(outcome)
    result = bucket.close(
        None,
        outcome.assets,
        outcome.liabilities,
        (1.0 + inflation_rate) ** fraction_of_year,
    )
    result.fraction_of_year = fraction_of_year
    return result
