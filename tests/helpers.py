import copy
import json
from pathlib import Path

from wealthline.schema import Category, FinancialItem, Frequency, GrowthMode

SAMPLE_PLAN = Path(__file__).resolve().parent.parent / "sample_plan.json"


def write_plan(tmp_path: Path, data: dict, filename: str = "plan.json") -> Path:
    path = tmp_path / filename
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def clone_plan(data: dict) -> dict:
    return copy.deepcopy(data)


def income(item_id: str, value: float, **kwargs) -> FinancialItem:
    kwargs.setdefault("frequency", Frequency.ANNUAL)
    return FinancialItem(id=item_id, name=item_id, category=Category.INCOME, value=value, **kwargs)


def expense(item_id: str, value: float, **kwargs) -> FinancialItem:
    kwargs.setdefault("frequency", Frequency.ANNUAL)
    return FinancialItem(id=item_id, name=item_id, category=Category.EXPENSE, value=value, **kwargs)


def asset(item_id: str, value: float, **kwargs) -> FinancialItem:
    return FinancialItem(id=item_id, name=item_id, category=Category.ASSET, value=value, **kwargs)


def liability(item_id: str, value: float, **kwargs) -> FinancialItem:
    return FinancialItem(id=item_id, name=item_id, category=Category.LIABILITY, value=value, **kwargs)


INFLATION = GrowthMode.INFLATION
PERCENTAGE = GrowthMode.PERCENTAGE
