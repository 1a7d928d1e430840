"""Retirement portfolio survival simulation."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
import random

from .historical_data import HISTORICAL_ANNUAL_RETURNS

logger = logging.getLogger(__name__)

SIM_MODES = ("monte_carlo", "historical")
DEFAULT_WITHDRAWAL_RATE = 0.04


@dataclass(slots=True)
class MarketAssumptions:
    stock_mean_return: float = 0.07
    stock_std_dev: float = 0.18
    bond_mean_return: float = 0.02
    bond_std_dev: float = 0.05
    inflation_mean: float = 0.03
    inflation_std_dev: float = 0.02


@dataclass(slots=True)
class RetirementParams:
    initial_portfolio: float
    annual_withdrawal: float
    retirement_years: int = 30
    stock_allocation: float = 0.60
    bond_allocation: float = 0.40
    number_of_simulations: int = 1000


@dataclass(slots=True)
class SimulationPath:
    portfolio_values: list[float] = field(default_factory=list)
    withdrawals: list[float] = field(default_factory=list)
    success: bool = True
    failure_year: int | None = None
    final_balance: float = 0.0


@dataclass(slots=True)
class RetirementResult:
    mode: str
    seed: int | None
    success_rate: float
    successful_paths: int
    total_paths: int
    median_ending_balance: float
    worst_case_balance: float
    best_case_balance: float
    paths: list[SimulationPath]
    median_path: SimulationPath | None


@dataclass(slots=True)
class SampleRuns:
    best_case: SimulationPath
    worst_case: SimulationPath
    median: SimulationPath
    random_success: SimulationPath | None
    random_failure: SimulationPath | None


@dataclass(slots=True)
class YearDetail:
    year: int
    starting_balance: float
    market_return: float
    withdrawal: float
    ending_balance: float


def initial_withdrawal(portfolio_value: float, withdrawal_rate: float = DEFAULT_WITHDRAWAL_RATE) -> float:
    return portfolio_value * withdrawal_rate


def _monte_carlo_year(params: RetirementParams, market: MarketAssumptions, rng: random.Random) -> tuple[float, float]:
    stock = rng.gauss(market.stock_mean_return, market.stock_std_dev)
    bond = rng.gauss(market.bond_mean_return, market.bond_std_dev)
    inflation = max(0.0, rng.gauss(market.inflation_mean, market.inflation_std_dev))
    return stock * params.stock_allocation + bond * params.bond_allocation, inflation


def _historical_year(params: RetirementParams, years: list[int], rng: random.Random) -> tuple[float, float]:
    stock, bond, inflation = HISTORICAL_ANNUAL_RETURNS[rng.choice(years)]
    return stock * params.stock_allocation + bond * params.bond_allocation, inflation


def _simulate_path(params: RetirementParams, draw) -> SimulationPath:
    portfolio = params.initial_portfolio
    withdrawal = params.annual_withdrawal
    path = SimulationPath(portfolio_values=[params.initial_portfolio])

    for year in range(1, params.retirement_years + 1):
        portfolio_return, inflation = draw()
        portfolio *= 1.0 + portfolio_return
        withdrawal *= 1.0 + inflation
        portfolio -= withdrawal
        path.portfolio_values.append(max(0.0, portfolio))
        path.withdrawals.append(withdrawal)
        if portfolio <= 0 and path.failure_year is None:
            path.failure_year = year

    path.success = portfolio > 0
    path.final_balance = max(0.0, portfolio)
    return path


def _percentile_index(count: int, pct: float) -> int:
    return min(count - 1, int(math.floor(count * pct)))


def run_retirement_simulation(
    params: RetirementParams,
    mode: str = "monte_carlo",
    seed: int | None = None,
    market: MarketAssumptions | None = None,
) -> RetirementResult:
    """Simulate ``params.number_of_simulations`` withdrawal paths.

    A path fails the first year its balance reaches zero. Percentile balances
    are read from paths sorted by final balance.
    """
    if mode not in SIM_MODES:
        raise ValueError(f"unsupported simulation mode: {mode}")
    if seed is None:
        seed = random.randint(1, 2**31 - 1)
    rng = random.Random(seed)
    market = market or MarketAssumptions()

    if mode == "monte_carlo":
        def draw() -> tuple[float, float]:
            return _monte_carlo_year(params, market, rng)
    else:
        years = sorted(HISTORICAL_ANNUAL_RETURNS)

        def draw() -> tuple[float, float]:
            return _historical_year(params, years, rng)

    runs = max(0, params.number_of_simulations)
    logger.debug("retirement simulation mode=%s runs=%d seed=%d", mode, runs, seed)
    paths = [_simulate_path(params, draw) for _ in range(runs)]
    if not paths:
        return RetirementResult(
            mode=mode,
            seed=seed,
            success_rate=0.0,
            successful_paths=0,
            total_paths=0,
            median_ending_balance=0.0,
            worst_case_balance=0.0,
            best_case_balance=0.0,
            paths=[],
            median_path=None,
        )

    successful = sum(1 for path in paths if path.success)
    ordered = sorted(paths, key=lambda path: path.final_balance)
    median_path = ordered[_percentile_index(len(ordered), 0.5)]
    return RetirementResult(
        mode=mode,
        seed=seed,
        success_rate=successful / len(paths),
        successful_paths=successful,
        total_paths=len(paths),
        median_ending_balance=median_path.final_balance,
        worst_case_balance=ordered[_percentile_index(len(ordered), 0.05)].final_balance,
        best_case_balance=ordered[_percentile_index(len(ordered), 0.95)].final_balance,
        paths=paths,
        median_path=median_path,
    )


def select_sample_runs(result: RetirementResult, rng: random.Random) -> SampleRuns | None:
    """Best, worst and median paths plus one random success and one random failure."""
    if not result.paths:
        return None
    ordered = sorted(result.paths, key=lambda path: path.final_balance)
    best = ordered[_percentile_index(len(ordered), 0.95)]
    worst = ordered[_percentile_index(len(ordered), 0.05)]
    median = ordered[_percentile_index(len(ordered), 0.5)]

    successes = [path for path in result.paths if path.success]
    failures = [path for path in result.paths if not path.success]
    candidates = [path for path in successes if path is not best and path is not median]
    if candidates:
        random_success = rng.choice(candidates)
    else:
        random_success = successes[0] if successes else None
    random_failure = rng.choice(failures) if failures else None

    return SampleRuns(
        best_case=best,
        worst_case=worst,
        median=median,
        random_success=random_success,
        random_failure=random_failure,
    )


def year_details(path: SimulationPath, initial_portfolio: float) -> list[YearDetail]:
    """Per-year balances with the market return implied by the path values."""
    details: list[YearDetail] = []
    for idx, withdrawal in enumerate(path.withdrawals):
        starting = initial_portfolio if idx == 0 else path.portfolio_values[idx]
        ending = path.portfolio_values[idx + 1]
        after_return = ending + withdrawal
        market_return = (after_return - starting) / starting if starting > 0 else 0.0
        details.append(
            YearDetail(
                year=idx + 1,
                starting_balance=starting,
                market_return=market_return,
                withdrawal=withdrawal,
                ending_balance=max(0.0, ending),
            )
        )
    return details
