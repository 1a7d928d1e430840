"""Life expectancy lookup and projection horizon."""

from __future__ import annotations

import math
from typing import Final

from .schema import UserProfile

# Approximate 2023 World Bank / WHO values, in years.
LIFE_EXPECTANCY_BY_COUNTRY: Final[dict[str, float]] = {
    "Afghanistan": 64.8,
    "Albania": 78.6,
    "Algeria": 76.9,
    "Argentina": 76.7,
    "Australia": 83.4,
    "Austria": 81.6,
    "Bangladesh": 72.6,
    "Belgium": 81.9,
    "Brazil": 75.9,
    "Canada": 82.3,
    "Chile": 80.2,
    "China": 77.5,
    "Colombia": 77.3,
    "Denmark": 81.4,
    "Egypt": 72.0,
    "Finland": 81.9,
    "France": 82.7,
    "Germany": 81.3,
    "Greece": 81.5,
    "India": 70.4,
    "Indonesia": 71.7,
    "Iran": 76.7,
    "Iraq": 70.6,
    "Ireland": 82.4,
    "Israel": 83.0,
    "Italy": 83.6,
    "Japan": 84.6,
    "Kenya": 66.7,
    "Mexico": 75.1,
    "Netherlands": 82.3,
    "New Zealand": 82.3,
    "Nigeria": 54.7,
    "Norway": 83.2,
    "Pakistan": 67.3,
    "Peru": 76.7,
    "Philippines": 71.2,
    "Poland": 78.0,
    "Portugal": 81.3,
    "Romania": 76.1,
    "Russia": 72.6,
    "Saudi Arabia": 75.1,
    "Singapore": 83.6,
    "South Africa": 64.4,
    "South Korea": 83.5,
    "Spain": 83.6,
    "Sweden": 83.0,
    "Switzerland": 83.8,
    "Thailand": 77.7,
    "Turkey": 77.7,
    "Ukraine": 72.1,
    "United Arab Emirates": 78.7,
    "United Kingdom": 81.3,
    "United States": 78.5,
    "Vietnam": 75.4,
}

DEFAULT_LIFE_EXPECTANCY: Final[float] = 78.0
DEFAULT_PROJECTION_YEARS: Final[int] = 30


def countries() -> list[str]:
    return sorted(LIFE_EXPECTANCY_BY_COUNTRY)


def life_expectancy_for(country: str | None) -> float:
    if not country:
        return DEFAULT_LIFE_EXPECTANCY
    return LIFE_EXPECTANCY_BY_COUNTRY.get(country, DEFAULT_LIFE_EXPECTANCY)


def target_age(profile: UserProfile) -> int:
    """Age the projection runs to: explicit profile value, else the country table."""
    if profile.life_expectancy is not None:
        return int(math.floor(profile.life_expectancy))
    return int(math.floor(life_expectancy_for(profile.country)))


def projection_years(profile: UserProfile | None, start_year: int, default: int = DEFAULT_PROJECTION_YEARS) -> int:
    """Years from ``start_year`` until the subject reaches their target age.

    Falls back to ``default`` without a date of birth. Never negative.
    """
    if profile is None:
        return default
    birth = profile.birth_year_month()
    if birth is None:
        return default
    birth_year, _ = birth
    return max(0, target_age(profile) - (start_year - birth_year))
