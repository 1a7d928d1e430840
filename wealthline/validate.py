"""Semantic and cross-reference validation for plans."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import re

from .life_expectancy import DEFAULT_LIFE_EXPECTANCY, countries
from .schema import Category, FinancialItem, Frequency, GrowthMode, Plan

DOB_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])$")

FLOW_CATEGORIES = {Category.INCOME, Category.EXPENSE}
BALANCE_CATEGORIES = {Category.ASSET, Category.LIABILITY}

# Fields that only mean something for one side of the item model.
FLOW_ONLY_FIELDS = ("start_year", "end_year", "max_value")
ASSET_ONLY_FIELDS = ("yield_rate", "max_annual_contribution")
LIABILITY_ONLY_FIELDS = ("interest_rate", "minimum_payment")


@dataclass(slots=True)
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _is_calendar_date(value: str) -> bool:
    if not DOB_RE.match(value):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def _check_priority(result: ValidationResult, path: str, ids: list[str], asset_ids: set[str]) -> None:
    seen: set[str] = set()
    for idx, asset_id in enumerate(ids):
        if asset_id not in asset_ids:
            result.errors.append(f"{path}[{idx}]: '{asset_id}' does not match any asset id")
        elif asset_id in seen:
            result.warnings.append(f"{path}[{idx}]: '{asset_id}' is listed more than once")
        seen.add(asset_id)


def _check_misplaced_fields(result: ValidationResult, base: str, item: FinancialItem) -> None:
    misplaced: list[str] = []
    if item.category in BALANCE_CATEGORIES:
        misplaced.extend(name for name in FLOW_ONLY_FIELDS if getattr(item, name) is not None)
        if item.frequency is not Frequency.ANNUAL:
            misplaced.append("frequency")
        if item.growth_mode is not GrowthMode.NONE:
            misplaced.append("growth_mode")
    if item.category is not Category.ASSET:
        misplaced.extend(name for name in ASSET_ONLY_FIELDS if getattr(item, name) is not None)
    if item.category is not Category.LIABILITY:
        misplaced.extend(name for name in LIABILITY_ONLY_FIELDS if getattr(item, name) is not None)
    if item.category is Category.LIABILITY and item.growth_rate is not None:
        misplaced.append("growth_rate")
    for name in misplaced:
        result.warnings.append(f"{base}.{name}: ignored for {item.category.value} items")


def _check_item(result: ValidationResult, base: str, item: FinancialItem) -> None:
    if item.category in FLOW_CATEGORIES:
        if item.start_year is not None and item.end_year is not None and item.end_year <= item.start_year:
            result.errors.append(f"{base}.start_year/{base}.end_year: end_year must be > start_year")
        if item.growth_mode is GrowthMode.PERCENTAGE and item.growth_rate is None:
            result.errors.append(f"{base}.growth_rate: required when growth_mode is 'percentage'")
    else:
        if item.value < 0:
            result.warnings.append(f"{base}.value: negative {item.category.value} balance {item.value:.2f}")

    if item.max_annual_contribution is not None and item.max_annual_contribution < 0:
        result.errors.append(f"{base}.max_annual_contribution: must be >= 0")

    if item.category is Category.LIABILITY and item.value > 0:
        first_year_interest = item.value * (item.interest_rate or 0.0)
        minimum = item.minimum_payment or 0.0
        if first_year_interest > 0 and minimum < first_year_interest:
            result.warnings.append(
                f"{base}.minimum_payment: {minimum:.2f} is below first-year interest "
                f"{first_year_interest:.2f}; the balance will grow"
            )

    _check_misplaced_fields(result, base, item)


def validate_plan(plan: Plan) -> ValidationResult:
    result = ValidationResult()

    profile = plan.profile
    dob = profile.date_of_birth
    if dob is not None and not _is_calendar_date(dob):
        result.errors.append(f"profile.date_of_birth: '{dob}' is not valid; expected YYYY-MM-DD")
    if profile.life_expectancy is None and profile.country and profile.country not in countries():
        result.warnings.append(
            f"profile.country: no life expectancy data for '{profile.country}'; using {DEFAULT_LIFE_EXPECTANCY}"
        )

    settings = plan.settings
    if not 1 <= settings.start_month <= 12:
        result.errors.append(f"settings.start_month: {settings.start_month} is not valid; expected 1-12")
    if settings.number_of_years is not None and settings.number_of_years <= 0:
        result.warnings.append("settings.number_of_years: projection will be empty")
    if settings.inflation_rate < 0:
        result.warnings.append(f"settings.inflation_rate: negative inflation ({settings.inflation_rate}) is unusual")

    item_ids: set[str] = set()
    asset_ids: set[str] = set()
    for idx, item in enumerate(plan.items):
        base = f"items[{idx}]"
        if item.id in item_ids:
            result.errors.append(f"{base}.id: duplicate item id '{item.id}'")
        item_ids.add(item.id)
        if item.category is Category.ASSET:
            asset_ids.add(item.id)
        _check_item(result, base, item)

    _check_priority(result, "surplus_priority", plan.surplus_priority, asset_ids)
    _check_priority(result, "deficit_priority", plan.deficit_priority, asset_ids)

    return result
