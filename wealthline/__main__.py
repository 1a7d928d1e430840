"""CLI entry point for wealthline."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import random
import sys

from .comparison import ComparisonResult, compare_financial_state
from .engine import ProjectionResult, run_multi_year_projection
from .life_expectancy import projection_years
from .real_values import transform_to_real_values
from .report import comparison_payload, projection_payload, retirement_payload, write_json
from .retirement import (
    DEFAULT_WITHDRAWAL_RATE,
    SIM_MODES,
    RetirementParams,
    initial_withdrawal,
    run_retirement_simulation,
    select_sample_runs,
)
from .schema import Category, Plan, SchemaError, load_plan, load_snapshot
from .validate import validate_plan

logger = logging.getLogger("wealthline")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Personal finance projection engine")
    parser.add_argument("plan", help="Path to plan JSON file")
    parser.add_argument("-o", "--output", default="projection.json", help="Output JSON path")
    parser.add_argument("--validate", action="store_true", help="Validate JSON only")
    parser.add_argument("--summary", action="store_true", help="Print text summary to stdout")
    parser.add_argument("--real", action="store_true", help="Also compute the projection in today's money")
    parser.add_argument("--compare", metavar="SNAPSHOT", help="Compare a snapshot file against a projected year")
    parser.add_argument("--year", type=int, help="Projected year label to compare against (with --compare)")
    parser.add_argument("--tolerance", type=float, default=0.05, help="On-track tolerance for --compare (default: 0.05)")
    parser.add_argument("--retirement", action="store_true", help="Run the retirement survival simulation on current assets")
    parser.add_argument(
        "--withdrawal-rate",
        type=float,
        default=DEFAULT_WITHDRAWAL_RATE,
        help="Initial withdrawal rate for --retirement (default: 0.04)",
    )
    parser.add_argument("--runs", type=int, default=1000, help="Simulation count for --retirement")
    parser.add_argument("--seed", type=int, help="Random seed for reproducibility")
    parser.add_argument("--mode", choices=list(SIM_MODES), default="monte_carlo", help="Retirement simulation mode")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _print_validation(errors: list[str], warnings: list[str]) -> None:
    for warning in warnings:
        print(f"WARNING: {warning}")
    for error in errors:
        print(f"ERROR: {error}", file=sys.stderr)


def _run_projection(plan: Plan) -> ProjectionResult:
    settings = plan.settings
    years = settings.number_of_years
    if years is None:
        years = projection_years(plan.profile, settings.start_year)
    return run_multi_year_projection(
        plan.items,
        settings.start_year,
        years,
        user_profile=plan.profile,
        surplus_priority=plan.surplus_priority,
        deficit_priority=plan.deficit_priority,
        inflation_rate=settings.inflation_rate,
        start_month=settings.start_month,
    )


def _print_summary(result: ProjectionResult, real: ProjectionResult | None) -> None:
    if not result.years:
        print("Projection is empty.")
        return
    first = result.years[0]
    last = result.years[-1]
    print(f"Years: {first.year}-{last.year}")
    print(f"Starting net worth: ${result.summary.starting_net_worth:,.0f}")
    print(f"Ending net worth: ${result.summary.ending_net_worth:,.0f}")
    if real is not None:
        print(f"Ending net worth (today's money): ${real.summary.ending_net_worth:,.0f}")
    print(f"Average annual return: {result.summary.average_annual_return:.2%}")
    shortfall = [year.year for year in result.years if year.remaining_cashflow < 0]
    print(f"Years with unmet deficits: {len(shortfall)}")


def _run_compare(args: argparse.Namespace, result: ProjectionResult) -> ComparisonResult | None:
    if args.year is None:
        print("--compare requires --year", file=sys.stderr)
        return None
    target = result.year_by_label(args.year)
    if target is None:
        print(f"Projection has no year labelled {args.year}", file=sys.stderr)
        return None
    try:
        actual = load_snapshot(args.compare)
    except (SchemaError, OSError, ValueError) as exc:
        print(f"Failed to load snapshot: {exc}", file=sys.stderr)
        return None

    comparison = compare_financial_state(actual, target, args.tolerance)
    for item in comparison.items:
        print(
            f"{item.category.value:<10} {item.name:<24} actual ${item.actual_value:,.0f} "
            f"projected ${item.projected_value:,.0f} {item.percent_diff:+.1%} {item.status.value}"
        )
    print(f"Net worth difference: ${comparison.summary.diff:,.0f} ({comparison.summary.percent_diff:+.1%})")
    return comparison


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        plan = load_plan(args.plan)
    except (SchemaError, OSError, ValueError) as exc:
        print(f"Failed to load plan: {exc}", file=sys.stderr)
        return 2

    validation = validate_plan(plan)
    _print_validation(validation.errors, validation.warnings)
    if not validation.is_valid:
        return 1

    if args.validate:
        print("Plan is valid.")
        return 0

    result = _run_projection(plan)
    real = transform_to_real_values(result) if args.real else None
    payload = projection_payload(result, real, plan_path=args.plan)

    if args.summary:
        _print_summary(result, real)

    if args.compare:
        comparison = _run_compare(args, result)
        if comparison is None:
            return 2
        payload["comparison"] = comparison_payload(comparison)

    if args.retirement:
        portfolio = sum(item.value for item in plan.items if item.category is Category.ASSET)
        params = RetirementParams(
            initial_portfolio=portfolio,
            annual_withdrawal=initial_withdrawal(portfolio, args.withdrawal_rate),
            number_of_simulations=args.runs,
        )
        retirement = run_retirement_simulation(params, mode=args.mode, seed=args.seed)
        payload["retirement"] = retirement_payload(retirement)
        samples = select_sample_runs(retirement, random.Random(retirement.seed))
        if samples is not None and samples.random_failure is not None:
            logger.info("sample failed path ran out in year %s", samples.random_failure.failure_year)
        print(f"Retirement success rate: {retirement.success_rate:.1%} ({retirement.total_paths} runs)")
        print(f"Seed: {retirement.seed}")

    write_json(args.output, payload)
    print(f"Wrote projection to {Path(args.output)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
