"""Plan schema dataclasses and JSON loading."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
import json
import math
from pathlib import Path
from typing import Any, Iterable


class SchemaError(ValueError):
    """Raised when raw JSON cannot be parsed into schema objects."""


class InvalidNumericInputError(SchemaError):
    """Raised when a numeric input is NaN or infinite."""

    def __init__(self, owner: str, field_name: str, value: float) -> None:
        super().__init__(f"{owner}.{field_name}: invalid numeric input ({value!r})")
        self.owner = owner
        self.field_name = field_name
        self.value = value


class Category(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    ASSET = "asset"
    LIABILITY = "liability"


class Frequency(str, Enum):
    MONTHLY = "monthly"
    ANNUAL = "annual"


class GrowthMode(str, Enum):
    NONE = "none"
    INFLATION = "inflation"
    PERCENTAGE = "percentage"


# Older plan files use the plural category names.
CATEGORY_ALIASES = {
    "expenses": "expense",
    "assets": "asset",
    "liabilities": "liability",
}

NUMERIC_FIELDS = (
    "value",
    "growth_rate",
    "max_value",
    "yield_rate",
    "max_annual_contribution",
    "interest_rate",
    "minimum_payment",
)


def _expect_dict(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise SchemaError(f"{path}: expected object")
    return value


def _expect_list(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise SchemaError(f"{path}: expected array")
    return value


def _require(data: dict[str, Any], key: str, path: str) -> Any:
    if key not in data:
        raise SchemaError(f"{path}.{key}: missing required field")
    return data[key]


def _optional(data: dict[str, Any], key: str, default: Any = None) -> Any:
    return data.get(key, default)


def _as_float(value: Any, path: str) -> float:
    if isinstance(value, bool):
        raise SchemaError(f"{path}: expected number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise SchemaError(f"{path}: expected number") from None


def _optional_float(data: dict[str, Any], key: str, path: str) -> float | None:
    value = _optional(data, key)
    return _as_float(value, f"{path}.{key}") if value is not None else None


def _optional_int(data: dict[str, Any], key: str, path: str) -> int | None:
    value = _optional(data, key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or int(value) != value:
        raise SchemaError(f"{path}.{key}: expected integer")
    return int(value)


def _parse_enum(enum_cls: type[Enum], raw: Any, path: str) -> Any:
    try:
        return enum_cls(raw)
    except ValueError:
        expected = ", ".join(sorted(member.value for member in enum_cls))
        raise SchemaError(f"{path}: '{raw}' is not valid; expected one of [{expected}]") from None


def _parse_category(raw: Any, path: str) -> Category:
    if isinstance(raw, str):
        raw = CATEGORY_ALIASES.get(raw, raw)
    return _parse_enum(Category, raw, path)


@dataclass(frozen=True, slots=True)
class FinancialItem:
    id: str
    name: str
    category: Category
    value: float
    sub_category: str | None = None
    start_year: int | None = None
    end_year: int | None = None
    frequency: Frequency = Frequency.ANNUAL
    growth_mode: GrowthMode = GrowthMode.NONE
    growth_rate: float | None = None
    max_value: float | None = None
    yield_rate: float | None = None
    max_annual_contribution: float | None = None
    interest_rate: float | None = None
    minimum_payment: float | None = None

    def with_value(self, value: float) -> "FinancialItem":
        return replace(self, value=value)

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str) -> "FinancialItem":
        growth_mode_raw = _optional(data, "growth_mode")
        if growth_mode_raw is None:
            # Legacy boolean flag predates growth_mode.
            legacy = bool(_optional(data, "is_adjusted_for_inflation", False))
            growth_mode = GrowthMode.INFLATION if legacy else GrowthMode.NONE
        else:
            growth_mode = _parse_enum(GrowthMode, growth_mode_raw, f"{path}.growth_mode")
        sub_category = _optional(data, "sub_category")
        return cls(
            id=str(_require(data, "id", path)),
            name=str(_optional(data, "name", _require(data, "id", path))),
            category=_parse_category(_require(data, "category", path), f"{path}.category"),
            value=_as_float(_require(data, "value", path), f"{path}.value"),
            sub_category=str(sub_category) if sub_category is not None else None,
            start_year=_optional_int(data, "start_year", path),
            end_year=_optional_int(data, "end_year", path),
            frequency=_parse_enum(Frequency, _optional(data, "frequency", "annual"), f"{path}.frequency"),
            growth_mode=growth_mode,
            growth_rate=_optional_float(data, "growth_rate", path),
            max_value=_optional_float(data, "max_value", path),
            yield_rate=_optional_float(data, "yield_rate", path),
            max_annual_contribution=_optional_float(data, "max_annual_contribution", path),
            interest_rate=_optional_float(data, "interest_rate", path),
            minimum_payment=_optional_float(data, "minimum_payment", path),
        )


@dataclass(slots=True)
class CategorizedItems:
    incomes: list[FinancialItem] = field(default_factory=list)
    expenses: list[FinancialItem] = field(default_factory=list)
    assets: list[FinancialItem] = field(default_factory=list)
    liabilities: list[FinancialItem] = field(default_factory=list)


def split_by_category(items: Iterable[FinancialItem]) -> CategorizedItems:
    """Partition items into the four category lists, preserving input order."""
    out = CategorizedItems()
    for item in items:
        if item.category is Category.INCOME:
            out.incomes.append(item)
        elif item.category is Category.EXPENSE:
            out.expenses.append(item)
        elif item.category is Category.ASSET:
            out.assets.append(item)
        elif item.category is Category.LIABILITY:
            out.liabilities.append(item)
        else:
            raise SchemaError(f"{item.id}.category: unsupported category {item.category!r}")
    return out


def require_finite(owner: str, field_name: str, value: float | None) -> None:
    if value is not None and not math.isfinite(value):
        raise InvalidNumericInputError(owner, field_name, value)


def check_finite_items(items: Iterable[FinancialItem]) -> None:
    """Fail fast on NaN/inf anywhere in the numeric fields of ``items``."""
    for item in items:
        for field_name in NUMERIC_FIELDS:
            require_finite(item.id, field_name, getattr(item, field_name))


@dataclass(slots=True)
class UserProfile:
    date_of_birth: str | None = None
    life_expectancy: float | None = None
    country: str | None = None

    def birth_year_month(self) -> tuple[int, int] | None:
        if not self.date_of_birth:
            return None
        dt = datetime.strptime(self.date_of_birth, "%Y-%m-%d")
        return dt.year, dt.month

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "profile") -> "UserProfile":
        return cls(
            date_of_birth=_optional(data, "date_of_birth"),
            life_expectancy=_optional_float(data, "life_expectancy", path),
            country=_optional(data, "country"),
        )


@dataclass(slots=True)
class PlanSettings:
    start_year: int
    start_month: int = 1
    number_of_years: int | None = None
    inflation_rate: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "settings") -> "PlanSettings":
        start_year = _optional_int(data, "start_year", path)
        if start_year is None:
            raise SchemaError(f"{path}.start_year: missing required field")
        start_month = _optional_int(data, "start_month", path)
        inflation_rate = _optional_float(data, "inflation_rate", path)
        return cls(
            start_year=start_year,
            start_month=start_month if start_month is not None else 1,
            number_of_years=_optional_int(data, "number_of_years", path),
            inflation_rate=inflation_rate if inflation_rate is not None else 0.0,
        )


@dataclass(slots=True)
class Plan:
    profile: UserProfile
    settings: PlanSettings
    items: list[FinancialItem]
    surplus_priority: list[str] = field(default_factory=list)
    deficit_priority: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Plan":
        return cls(
            profile=UserProfile.from_dict(_expect_dict(_optional(data, "profile", {}), "profile")),
            settings=PlanSettings.from_dict(_expect_dict(_require(data, "settings", "plan"), "settings")),
            items=[
                FinancialItem.from_dict(_expect_dict(item, f"items[{idx}]"), f"items[{idx}]")
                for idx, item in enumerate(_expect_list(_require(data, "items", "plan"), "items"))
            ],
            surplus_priority=[str(v) for v in _expect_list(_optional(data, "surplus_priority", []), "surplus_priority")],
            deficit_priority=[str(v) for v in _expect_list(_optional(data, "deficit_priority", []), "deficit_priority")],
        )


def _read_json_object(path: str | Path, label: str) -> dict[str, Any]:
    source = Path(path)
    raw = json.loads(source.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise SchemaError(f"{label}: root must be a JSON object")
    return raw


def load_plan(path: str | Path) -> Plan:
    """Load plan JSON into strongly-typed dataclasses."""
    plan = Plan.from_dict(_read_json_object(path, "plan"))
    check_finite_items(plan.items)
    require_finite("settings", "inflation_rate", plan.settings.inflation_rate)
    require_finite("profile", "life_expectancy", plan.profile.life_expectancy)
    return plan


def load_snapshot(path: str | Path) -> list[FinancialItem]:
    """Load a snapshot file of actual asset and liability balances."""
    raw = _read_json_object(path, "snapshot")
    items = [
        FinancialItem.from_dict(_expect_dict(item, f"items[{idx}]"), f"items[{idx}]")
        for idx, item in enumerate(_expect_list(_require(raw, "items", "snapshot"), "items"))
    ]
    check_finite_items(items)
    return items
