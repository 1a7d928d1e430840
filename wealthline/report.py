"""JSON export of projection, comparison and retirement results."""

from __future__ import annotations

from dataclasses import asdict
from datetime import UTC, datetime
from enum import Enum
import hashlib
import json
from pathlib import Path
from typing import Any

from .comparison import ComparisonResult
from .engine import ProjectionResult
from .historical_data import FIRST_YEAR, LAST_YEAR, historical_stats
from .retirement import RetirementResult, year_details


def _plain(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    return {key: value.value if isinstance(value, Enum) else value for key, value in pairs}


def _to_dict(obj: Any) -> dict[str, Any]:
    return asdict(obj, dict_factory=_plain)


def projection_payload(
    result: ProjectionResult,
    real: ProjectionResult | None = None,
    *,
    plan_path: str | Path | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "generated": datetime.now(UTC).isoformat(timespec="seconds"),
        "summary": _to_dict(result.summary),
        "years": [_to_dict(year) for year in result.years],
    }
    if plan_path is not None:
        payload["plan_hash"] = hashlib.sha256(Path(plan_path).read_bytes()).hexdigest()[:12]
    if real is not None:
        payload["real"] = {
            "summary": _to_dict(real.summary),
            "years": [_to_dict(year) for year in real.years],
        }
    return payload


def comparison_payload(result: ComparisonResult) -> dict[str, Any]:
    return _to_dict(result)


def retirement_payload(result: RetirementResult) -> dict[str, Any]:
    """Aggregate figures and the median path; individual paths are left out.

    Historical runs also carry the span and summary statistics of the dataset
    the years were drawn from.
    """
    median = result.median_path
    payload: dict[str, Any] = {
        "mode": result.mode,
        "seed": result.seed,
        "success_rate": result.success_rate,
        "successful_paths": result.successful_paths,
        "total_paths": result.total_paths,
        "median_ending_balance": result.median_ending_balance,
        "worst_case_balance": result.worst_case_balance,
        "best_case_balance": result.best_case_balance,
        "median_path": _to_dict(median) if median is not None else None,
    }
    details = year_details(median, median.portfolio_values[0]) if median is not None else []
    payload["median_path_details"] = [_to_dict(detail) for detail in details]
    if result.mode == "historical":
        payload["dataset"] = {
            "first_year": FIRST_YEAR,
            "last_year": LAST_YEAR,
            "stats": {name: _to_dict(stats) for name, stats in historical_stats().items()},
        }
    return payload


def write_json(path: str | Path, payload: dict[str, Any]) -> None:
    Path(path).write_text(json.dumps(payload, indent=2), encoding="utf-8")
