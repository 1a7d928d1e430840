import json

from tests.helpers import asset, liability
from wealthline.comparison import compare_financial_state
from wealthline.engine import run_multi_year_projection
from wealthline.real_values import transform_to_real_values
from wealthline.report import comparison_payload, projection_payload, retirement_payload, write_json
from wealthline.retirement import RetirementParams, run_retirement_simulation


def test_projection_payload_renders_enums_as_values(tmp_path):
    result = run_multi_year_projection([asset("cash", 100), liability("card", 50)], 2026, 2, inflation_rate=0.02)
    payload = projection_payload(result, transform_to_real_values(result))

    year = payload["years"][0]
    assert year["assets"][0]["category"] == "asset"
    assert year["liabilities"][0]["frequency"] == "annual"
    assert payload["summary"]["starting_net_worth"] == 50
    assert [y["year"] for y in payload["real"]["years"]] == [2026, 2027]
    assert "plan_hash" not in payload

    path = tmp_path / "projection.json"
    write_json(path, payload)
    assert json.loads(path.read_text(encoding="utf-8"))["years"][1]["year"] == 2027


def test_comparison_payload_renders_status():
    projected = run_multi_year_projection([asset("cash", 100)], 2026, 1).years[0]
    payload = comparison_payload(compare_financial_state([asset("cash", 200)], projected))
    assert payload["items"][0]["status"] == "ahead"
    assert payload["items"][0]["category"] == "asset"


def test_retirement_payload_details_median_path():
    params = RetirementParams(
        initial_portfolio=500_000, annual_withdrawal=20_000, retirement_years=10, number_of_simulations=25
    )
    payload = retirement_payload(run_retirement_simulation(params, mode="monte_carlo", seed=5))

    details = payload["median_path_details"]
    assert [d["year"] for d in details] == list(range(1, 11))
    assert details[0]["starting_balance"] == 500_000
    assert details[-1]["ending_balance"] == payload["median_ending_balance"]
    assert "dataset" not in payload


def test_historical_retirement_payload_describes_dataset():
    params = RetirementParams(
        initial_portfolio=500_000, annual_withdrawal=20_000, retirement_years=5, number_of_simulations=10
    )
    payload = retirement_payload(run_retirement_simulation(params, mode="historical", seed=5))

    assert (payload["dataset"]["first_year"], payload["dataset"]["last_year"]) == (1970, 2024)
    assert set(payload["dataset"]["stats"]) == {"stocks", "bonds", "inflation"}
    assert payload["dataset"]["stats"]["stocks"]["minimum"] == -0.37


def test_empty_retirement_payload():
    params = RetirementParams(initial_portfolio=1000, annual_withdrawal=40, number_of_simulations=0)
    payload = retirement_payload(run_retirement_simulation(params, seed=1))
    assert payload["median_path"] is None
    assert payload["median_path_details"] == []
