import math

import pytest

from tests.helpers import SAMPLE_PLAN, asset, clone_plan, expense, income, liability, write_plan
from wealthline.schema import (
    Category,
    Frequency,
    GrowthMode,
    InvalidNumericInputError,
    SchemaError,
    load_plan,
    load_snapshot,
    split_by_category,
)


def test_sample_plan_loads():
    plan = load_plan(SAMPLE_PLAN)

    assert plan.settings.start_year == 2026
    assert plan.settings.inflation_rate == 0.025
    assert plan.profile.birth_year_month() == (1990, 6)
    assert len(plan.items) == 11
    salary = plan.items[0]
    assert salary.category is Category.INCOME
    assert salary.frequency is Frequency.MONTHLY
    assert salary.growth_mode is GrowthMode.INFLATION
    assert plan.surplus_priority == ["pension_pot", "isa", "cash"]


def test_load_plan_rejects_non_object_root(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(SchemaError, match="plan: root must be a JSON object"):
        load_plan(path)


def test_load_plan_requires_settings(tmp_path, sample_plan_dict):
    data = clone_plan(sample_plan_dict)
    del data["settings"]
    path = write_plan(tmp_path, data)

    with pytest.raises(SchemaError, match=r"plan\.settings: missing required field"):
        load_plan(path)


def test_load_plan_requires_start_year(tmp_path, sample_plan_dict):
    data = clone_plan(sample_plan_dict)
    del data["settings"]["start_year"]
    path = write_plan(tmp_path, data)

    with pytest.raises(SchemaError, match=r"settings\.start_year: missing required field"):
        load_plan(path)


def test_load_plan_requires_item_value(tmp_path, sample_plan_dict):
    data = clone_plan(sample_plan_dict)
    del data["items"][2]["value"]
    path = write_plan(tmp_path, data)

    with pytest.raises(SchemaError, match=r"items\[2\]\.value: missing required field"):
        load_plan(path)


def test_load_plan_rejects_wrong_collection_types(tmp_path, sample_plan_dict):
    data = clone_plan(sample_plan_dict)
    data["items"] = {}
    path = write_plan(tmp_path, data)

    with pytest.raises(SchemaError, match=r"items: expected array"):
        load_plan(path)


def test_load_plan_rejects_unknown_category(tmp_path, sample_plan_dict):
    data = clone_plan(sample_plan_dict)
    data["items"][0]["category"] = "bogus"
    path = write_plan(tmp_path, data)

    with pytest.raises(
        SchemaError,
        match=r"items\[0\]\.category: 'bogus' is not valid; expected one of \[asset, expense, income, liability\]",
    ):
        load_plan(path)


def test_load_plan_rejects_non_numeric_value(tmp_path, sample_plan_dict):
    data = clone_plan(sample_plan_dict)
    data["items"][0]["value"] = "lots"
    path = write_plan(tmp_path, data)

    with pytest.raises(SchemaError, match=r"items\[0\]\.value: expected number"):
        load_plan(path)


def test_load_plan_rejects_nan(tmp_path, sample_plan_dict):
    data = clone_plan(sample_plan_dict)
    data["items"][0]["value"] = math.nan
    path = write_plan(tmp_path, data)

    with pytest.raises(InvalidNumericInputError, match=r"salary\.value: invalid numeric input \(nan\)"):
        load_plan(path)


@pytest.mark.parametrize(("value", "shown"), [(math.nan, "nan"), (math.inf, "inf")])
def test_load_plan_rejects_non_finite_life_expectancy(tmp_path, sample_plan_dict, value, shown):
    data = clone_plan(sample_plan_dict)
    data["profile"]["life_expectancy"] = value
    path = write_plan(tmp_path, data)

    with pytest.raises(InvalidNumericInputError, match=rf"profile\.life_expectancy: invalid numeric input \({shown}\)"):
        load_plan(path)


def test_plural_categories_and_legacy_inflation_flag(tmp_path, sample_plan_dict):
    data = clone_plan(sample_plan_dict)
    data["items"] = [
        {"id": "rent", "category": "expenses", "value": 900, "is_adjusted_for_inflation": True},
        {"id": "house", "category": "assets", "value": 250000},
        {"id": "loan", "category": "liabilities", "value": 5000},
    ]
    plan = load_plan(write_plan(tmp_path, data))

    assert [item.category for item in plan.items] == [Category.EXPENSE, Category.ASSET, Category.LIABILITY]
    assert plan.items[0].growth_mode is GrowthMode.INFLATION
    assert plan.items[0].name == "rent"
    assert plan.items[1].growth_mode is GrowthMode.NONE


def test_load_snapshot(tmp_path):
    path = write_plan(
        tmp_path,
        {"items": [{"id": "isa", "category": "asset", "value": 25000, "sub_category": "investments"}]},
        filename="snapshot.json",
    )
    items = load_snapshot(path)
    assert len(items) == 1
    assert items[0].sub_category == "investments"


def test_split_by_category_preserves_order():
    items = [asset("a1", 1), income("i1", 1), liability("l1", 1), asset("a2", 1), expense("e1", 1)]
    split = split_by_category(items)
    assert [a.id for a in split.assets] == ["a1", "a2"]
    assert [i.id for i in split.incomes] == ["i1"]
    assert [e.id for e in split.expenses] == ["e1"]
    assert [item.id for item in split.liabilities] == ["l1"]


def test_with_value_returns_new_record():
    original = asset("cash", 10)
    updated = original.with_value(20)
    assert original.value == 10
    assert updated.value == 20
    assert updated.id == "cash"
