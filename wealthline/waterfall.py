"""Surplus allocation and deficit coverage across assets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .schema import FinancialItem

# Anything at or below this is treated as fully allocated.
ALLOCATION_EPSILON = 0.01


@dataclass(slots=True)
class AllocationEntry:
    asset_id: str
    amount: float


@dataclass(slots=True)
class ContributionLedger:
    """Calendar-year contributions per asset id, for annual cap enforcement."""

    year: int | None = None
    by_asset: dict[str, float] = field(default_factory=dict)

    def used(self, asset_id: str) -> float:
        return self.by_asset.get(asset_id, 0.0)

    def record(self, asset_id: str, amount: float) -> None:
        if amount <= 0:
            return
        self.by_asset[asset_id] = self.by_asset.get(asset_id, 0.0) + amount

    def start_year(self, year: int) -> None:
        self.year = year
        self.by_asset.clear()


@dataclass(slots=True)
class SurplusResult:
    updated_assets: list[FinancialItem]
    remaining_surplus: float
    contributions: list[AllocationEntry] = field(default_factory=list)
    surplus: list[AllocationEntry] = field(default_factory=list)

    @property
    def total_allocated(self) -> float:
        return sum(e.amount for e in self.contributions) + sum(e.amount for e in self.surplus)


@dataclass(slots=True)
class DeficitResult:
    updated_assets: list[FinancialItem]
    remaining_deficit: float
    history: list[AllocationEntry] = field(default_factory=list)


def _allocation_for(asset: FinancialItem, remaining: float, ledger: ContributionLedger, cap_fraction: float) -> float:
    cap = asset.max_annual_contribution
    if cap is None:
        return remaining
    if cap <= 0:
        return 0.0
    room = max(0.0, cap * cap_fraction - ledger.used(asset.id))
    return min(remaining, room)


def allocate_surplus(
    surplus: float,
    assets: list[FinancialItem],
    surplus_priority: Sequence[str] = (),
    ledger: ContributionLedger | None = None,
    cap_fraction: float = 1.0,
) -> SurplusResult:
    """Route positive cashflow into assets following ``surplus_priority``.

    Only listed assets receive money; an empty list walks every asset in
    array order. Capped assets take at most their remaining annual room in
    ``ledger``. Unallocated money comes back as ``remaining_surplus``.
    """
    if ledger is None:
        ledger = ContributionLedger()
    updated = list(assets)
    result = SurplusResult(updated_assets=updated, remaining_surplus=max(0.0, surplus))
    if result.remaining_surplus <= 0 or not updated:
        return result

    index_by_id = {asset.id: idx for idx, asset in enumerate(updated)}
    if surplus_priority:
        order = [index_by_id[asset_id] for asset_id in surplus_priority if asset_id in index_by_id]
    else:
        order = list(range(len(updated)))

    for idx in order:
        if result.remaining_surplus <= ALLOCATION_EPSILON:
            break
        asset = updated[idx]
        amount = _allocation_for(asset, result.remaining_surplus, ledger, cap_fraction)
        if amount <= 0:
            continue
        updated[idx] = asset.with_value(asset.value + amount)
        ledger.record(asset.id, amount)
        entry = AllocationEntry(asset_id=asset.id, amount=amount)
        if asset.max_annual_contribution is None:
            result.surplus.append(entry)
        else:
            result.contributions.append(entry)
        result.remaining_surplus -= amount

    return result


def _withdrawal_order(assets: list[FinancialItem], deficit_priority: Sequence[str]) -> list[int]:
    index_by_id = {asset.id: idx for idx, asset in enumerate(assets)}
    order: list[int] = []
    for asset_id in deficit_priority:
        idx = index_by_id.get(asset_id)
        if idx is not None and idx not in order:
            order.append(idx)
    for idx in range(len(assets)):
        if idx not in order:
            order.append(idx)
    return order


def cover_deficit(
    deficit: float,
    assets: list[FinancialItem],
    deficit_priority: Sequence[str] = (),
) -> DeficitResult:
    """Withdraw from assets to cover ``deficit``.

    Prioritized assets are drained first, then everything else in array
    order. Balances never go below zero; whatever cannot be covered is
    returned as ``remaining_deficit``.
    """
    updated = list(assets)
    result = DeficitResult(updated_assets=updated, remaining_deficit=max(0.0, deficit))

    for idx in _withdrawal_order(updated, deficit_priority):
        if result.remaining_deficit <= 0:
            break
        asset = updated[idx]
        available = max(0.0, asset.value)
        if available <= 0:
            continue
        amount = min(result.remaining_deficit, available)
        updated[idx] = asset.with_value(asset.value - amount)
        result.history.append(AllocationEntry(asset_id=asset.id, amount=amount))
        result.remaining_deficit -= amount

    return result
