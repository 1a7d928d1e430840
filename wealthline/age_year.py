"""Calendar helpers for age-year bucketing."""

from __future__ import annotations

from .eligibility import MONTHS_PER_YEAR


def age_year_boundary(calendar_year: int, calendar_month: int, birth_month: int | None) -> tuple[int, bool]:
    """Return ``(label, is_boundary_month)`` for a calendar month.

    An age year runs from the birth month to the month before the next
    birthday, and is labelled with the calendar year of that next birthday.
    Without a birth month, buckets are plain calendar years.
    """
    if birth_month is None:
        return calendar_year, calendar_month == MONTHS_PER_YEAR

    label = calendar_year if calendar_month < birth_month else calendar_year + 1
    boundary_month = birth_month - 1 if birth_month > 1 else MONTHS_PER_YEAR
    return label, calendar_month == boundary_month


def age_for_label(label: int, birth_year: int | None) -> int | None:
    if birth_year is None:
        return None
    return label - birth_year - 1


def iter_months(start_year: int, start_month: int, count: int) -> list[tuple[int, int]]:
    """``count`` consecutive (year, month) pairs starting at the given month."""
    current_y, current_m = start_year, start_month
    out: list[tuple[int, int]] = []
    for _ in range(max(0, count)):
        out.append((current_y, current_m))
        current_m += 1
        if current_m > MONTHS_PER_YEAR:
            current_m = 1
            current_y += 1
    return out
