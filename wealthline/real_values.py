"""Restate a nominal projection in today's money."""

from __future__ import annotations

from dataclasses import replace

from .cashflow import CashflowDetail
from .engine import ProjectionResult, ProjectionSummary, YearHistory, YearResult
from .growth import GrowthEntry, YieldEntry
from .liabilities import LiabilityPayment
from .waterfall import AllocationEntry


def _amounts_by_asset(entries: list[AllocationEntry]) -> dict[str, float]:
    out: dict[str, float] = {}
    for entry in entries:
        out[entry.asset_id] = out.get(entry.asset_id, 0.0) + entry.amount
    return out


def _scale_details(details: list[CashflowDetail], factor: float) -> list[CashflowDetail]:
    return [replace(d, amount=d.amount * factor) for d in details]


def _scale_allocations(entries: list[AllocationEntry], factor: float) -> list[AllocationEntry]:
    return [replace(e, amount=e.amount * factor) for e in entries]


def _real_growth(year: YearResult, multiplier: float, prev_multiplier: float) -> list[GrowthEntry]:
    nominal_growth = {entry.asset_id: entry.growth_amount for entry in year.history.asset_growth}
    nominal_yield = {entry.asset_id: entry.yield_amount for entry in year.history.asset_yield}
    inflows = _amounts_by_asset(year.history.contributions + year.history.surplus)
    outflows = _amounts_by_asset(year.history.deficit)
    finals = {asset.id: asset.value for asset in year.assets}

    ids = list(nominal_growth)
    ids.extend(asset_id for asset_id in nominal_yield if asset_id not in nominal_growth)

    entries: list[GrowthEntry] = []
    for asset_id in ids:
        real_gain = (
            finals.get(asset_id, 0.0) * multiplier
            - year.opening_assets.get(asset_id, 0.0) * prev_multiplier
            - inflows.get(asset_id, 0.0) * prev_multiplier
            + outflows.get(asset_id, 0.0) * prev_multiplier
        )
        real_growth = real_gain - nominal_yield.get(asset_id, 0.0) * multiplier
        nominal_real = nominal_growth.get(asset_id, 0.0) * multiplier
        entries.append(
            GrowthEntry(
                asset_id=asset_id,
                growth_amount=real_growth,
                nominal_growth_real_value=nominal_real,
                inflation_impact=real_growth - nominal_real,
            )
        )
    return entries


def _real_year(year: YearResult, multiplier: float, prev_multiplier: float) -> YearResult:
    history = year.history
    real_history = YearHistory(
        income=_scale_details(history.income, prev_multiplier),
        expenses=_scale_details(history.expenses, prev_multiplier),
        asset_growth=_real_growth(year, multiplier, prev_multiplier),
        asset_yield=[
            YieldEntry(asset_id=e.asset_id, yield_amount=e.yield_amount * multiplier) for e in history.asset_yield
        ],
        contributions=_scale_allocations(history.contributions, prev_multiplier),
        surplus=_scale_allocations(history.surplus, prev_multiplier),
        deficit=_scale_allocations(history.deficit, prev_multiplier),
        liability_payments=[
            LiabilityPayment(
                liability_id=p.liability_id,
                interest_charged=p.interest_charged * prev_multiplier,
                principal_paid=p.principal_paid * prev_multiplier,
                remaining_balance=p.remaining_balance * multiplier,
            )
            for p in history.liability_payments
        ],
    )
    return replace(
        year,
        total_income=year.total_income * prev_multiplier,
        total_expenses=year.total_expenses * prev_multiplier,
        net_cashflow=year.net_cashflow * prev_multiplier,
        remaining_cashflow=year.remaining_cashflow * prev_multiplier,
        assets=[a.with_value(a.value * multiplier) for a in year.assets],
        liabilities=[item.with_value(item.value * multiplier) for item in year.liabilities],
        opening_assets={k: v * prev_multiplier for k, v in year.opening_assets.items()},
        net_worth=year.net_worth * multiplier,
        history=real_history,
    )


def transform_to_real_values(result: ProjectionResult) -> ProjectionResult:
    """Deflate every year of ``result`` by its cumulative inflation factor.

    Balances at year end use the current year's deflator. Flows during the
    year use the previous year's deflator, which is the price level the
    integer-year growth clock applies to them.
    """
    years: list[YearResult] = []
    prev_multiplier = 1.0
    for year in result.years:
        multiplier = 1.0 / year.inflation_factor if year.inflation_factor else 1.0
        years.append(_real_year(year, multiplier, prev_multiplier))
        prev_multiplier = multiplier

    if not years:
        return ProjectionResult(years=[], summary=replace(result.summary))

    starting = result.summary.starting_net_worth
    ending = years[-1].net_worth
    summary = ProjectionSummary(
        starting_net_worth=starting,
        ending_net_worth=ending,
        total_growth=ending - starting,
        average_annual_return=result.summary.average_annual_return,
    )
    return ProjectionResult(years=years, summary=summary)
