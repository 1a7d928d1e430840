"""Compare actual balances against a projected year."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from .engine import YearResult
from .schema import Category, FinancialItem


class ComparisonStatus(str, Enum):
    ON_TRACK = "on_track"
    AHEAD = "ahead"
    BEHIND = "behind"


@dataclass(slots=True)
class ComparisonItemResult:
    item_id: str
    name: str
    category: Category
    actual_value: float
    projected_value: float
    diff: float
    percent_diff: float
    status: ComparisonStatus


@dataclass(slots=True)
class ComparisonSummary:
    total_actual_net_worth: float = 0.0
    total_projected_net_worth: float = 0.0
    diff: float = 0.0
    percent_diff: float = 0.0


@dataclass(slots=True)
class ComparisonResult:
    items: list[ComparisonItemResult] = field(default_factory=list)
    summary: ComparisonSummary = field(default_factory=ComparisonSummary)


@dataclass(slots=True)
class _Bucket:
    name: str
    category: Category
    actual: float = 0.0
    projected: float = 0.0


def format_sub_category_name(sub_category: str) -> str:
    """``"credit_card"`` -> ``"Credit Card"``."""
    return " ".join(word[:1].upper() + word[1:] for word in sub_category.split("_"))


def _status(category: Category, percent_diff: float, tolerance: float) -> ComparisonStatus:
    if abs(percent_diff) <= tolerance:
        return ComparisonStatus.ON_TRACK
    if category is Category.LIABILITY:
        # Owing less than planned is ahead.
        return ComparisonStatus.AHEAD if percent_diff < 0 else ComparisonStatus.BEHIND
    return ComparisonStatus.AHEAD if percent_diff > 0 else ComparisonStatus.BEHIND


def _bucket_for(buckets: dict[str, _Bucket], category: Category, sub_category: str | None) -> _Bucket:
    sub = sub_category or "other"
    key = f"{category.value}:{sub}"
    bucket = buckets.get(key)
    if bucket is None:
        bucket = _Bucket(name=format_sub_category_name(sub), category=category)
        buckets[key] = bucket
    return bucket


def compare_financial_state(
    actual_items: Iterable[FinancialItem],
    projected_year: YearResult,
    tolerance_threshold: float = 0.05,
) -> ComparisonResult:
    """Aggregate actual and projected balances by (category, sub-category) and grade each bucket.

    Only assets and liabilities take part. A bucket is on track when the
    relative difference is within ``tolerance_threshold``.
    """
    buckets: dict[str, _Bucket] = {}
    for item in actual_items:
        if item.category not in (Category.ASSET, Category.LIABILITY):
            continue
        _bucket_for(buckets, item.category, item.sub_category).actual += item.value
    for item in projected_year.assets:
        _bucket_for(buckets, Category.ASSET, item.sub_category).projected += item.value
    for item in projected_year.liabilities:
        _bucket_for(buckets, Category.LIABILITY, item.sub_category).projected += item.value

    result = ComparisonResult()
    total_actual = 0.0
    total_projected = 0.0
    for key, bucket in buckets.items():
        diff = bucket.actual - bucket.projected
        if bucket.projected != 0:
            percent_diff = diff / bucket.projected
        elif bucket.actual != 0:
            percent_diff = 1.0
        else:
            percent_diff = 0.0

        result.items.append(
            ComparisonItemResult(
                item_id=key,
                name=bucket.name,
                category=bucket.category,
                actual_value=bucket.actual,
                projected_value=bucket.projected,
                diff=diff,
                percent_diff=percent_diff,
                status=_status(bucket.category, percent_diff, tolerance_threshold),
            )
        )
        sign = 1.0 if bucket.category is Category.ASSET else -1.0
        total_actual += sign * bucket.actual
        total_projected += sign * bucket.projected

    result.items.sort(key=lambda entry: (entry.category.value, entry.name))
    summary_diff = total_actual - total_projected
    result.summary = ComparisonSummary(
        total_actual_net_worth=total_actual,
        total_projected_net_worth=total_projected,
        diff=summary_diff,
        percent_diff=summary_diff / total_projected if total_projected != 0 else 0.0,
    )
    return result
