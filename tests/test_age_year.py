import pytest

from wealthline.age_year import age_for_label, age_year_boundary, iter_months


@pytest.mark.parametrize(
    ("birth_month", "boundary_month"),
    [(1, 12), (2, 1), (3, 2), (4, 3), (5, 4), (6, 5), (7, 6), (8, 7), (9, 8), (10, 9), (11, 10), (12, 11)],
)
def test_every_birth_month(birth_month, boundary_month):
    for month in range(1, 13):
        label, is_boundary = age_year_boundary(2030, month, birth_month)
        expected_label = 2030 if month < birth_month else 2031
        assert label == expected_label, month
        assert is_boundary is (month == boundary_month), month


def test_bucket_closes_on_month_before_birthday_with_that_years_label():
    assert age_year_boundary(2030, 5, 6) == (2030, True)
    assert age_year_boundary(2030, 6, 6) == (2031, False)
    assert age_year_boundary(2031, 5, 6) == (2031, True)


def test_january_birthday_buckets_run_with_calendar_year():
    assert age_year_boundary(2030, 1, 1) == (2031, False)
    assert age_year_boundary(2030, 12, 1) == (2031, True)


def test_no_birth_month_uses_calendar_years():
    assert age_year_boundary(2030, 3, None) == (2030, False)
    assert age_year_boundary(2030, 12, None) == (2030, True)


def test_age_for_label():
    assert age_for_label(2030, 1990) == 39
    assert age_for_label(2030, None) is None


def test_iter_months_wraps_year():
    assert iter_months(2026, 11, 3) == [(2026, 11), (2026, 12), (2027, 1)]
    assert iter_months(2026, 1, 0) == []
