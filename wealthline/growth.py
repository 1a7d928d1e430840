"""Asset appreciation (mid-period convention) and cash yield."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from .schema import FinancialItem


@dataclass(slots=True)
class GrowthEntry:
    asset_id: str
    growth_amount: float
    nominal_growth_real_value: float | None = None
    inflation_impact: float | None = None


@dataclass(slots=True)
class YieldEntry:
    asset_id: str
    yield_amount: float


@dataclass(slots=True)
class GrowthResult:
    updated_assets: list[FinancialItem] = field(default_factory=list)
    history: list[GrowthEntry] = field(default_factory=list)


@dataclass(slots=True)
class YieldResult:
    updated_assets: list[FinancialItem] = field(default_factory=list)
    history: list[YieldEntry] = field(default_factory=list)


def compound_gain(principal: float, annual_rate: float, periods: float) -> float:
    """Gain on ``principal`` compounded at ``annual_rate`` for ``periods`` years."""
    if principal == 0 or annual_rate == 0 or periods == 0:
        return 0.0
    if annual_rate <= -1.0:
        return -principal
    return principal * ((1.0 + annual_rate) ** periods - 1.0)


def apply_asset_growth(
    assets: list[FinancialItem],
    opening_balances: Mapping[str, float],
    period_fraction: float = 1.0,
) -> GrowthResult:
    """Grow each asset using the mid-period convention.

    The opening balance earns a full period of growth. Net money added or
    removed since the opening snapshot earns half a period, as if it arrived
    midway through.
    """
    result = GrowthResult()
    for asset in assets:
        rate = asset.growth_rate or 0.0
        opening = opening_balances.get(asset.id, 0.0)
        flow = asset.value - opening

        total = compound_gain(opening, rate, period_fraction) + compound_gain(flow, rate, period_fraction / 2.0)

        result.updated_assets.append(asset.with_value(asset.value + total))
        if total != 0:
            result.history.append(GrowthEntry(asset_id=asset.id, growth_amount=total))
    return result


def apply_asset_yield(assets: list[FinancialItem], period_fraction: float = 1.0) -> YieldResult:
    """Credit simple cash yield on the current (post-growth) balance."""
    result = YieldResult()
    for asset in assets:
        amount = asset.value * (asset.yield_rate or 0.0) * period_fraction
        result.updated_assets.append(asset.with_value(asset.value + amount))
        if amount != 0:
            result.history.append(YieldEntry(asset_id=asset.id, yield_amount=amount))
    return result
