"""Tests for the recurrence engine."""

from datetime import date, timedelta

import pytest

import recurrence
from schemas import Category, Record


def test_occurrence_today_is_zero():
    assert recurrence.days_until_next_occurrence(date(2000, 3, 15), date(2024, 3, 15)) == 0
    assert recurrence.days_until_next_occurrence(date(1975, 1, 1), date(2023, 1, 1)) == 0
    assert recurrence.days_until_next_occurrence(date(1999, 12, 31), date(2025, 12, 31)) == 0


def test_elapsed_years_on_the_day():
    assert recurrence.elapsed_years(date(2000, 3, 15), date(2024, 3, 15)) == 24


def test_elapsed_years_ignores_whether_occurrence_has_passed():
    # Dec 31 has not come round yet on Jan 1, the count is still the year difference
    assert recurrence.elapsed_years(date(2000, 12, 31), date(2024, 1, 1)) == 24


def test_passed_date_rolls_to_next_year():
    # 2024 is a leap year
    assert recurrence.days_until_next_occurrence(date(1990, 12, 31), date(2024, 1, 1)) == 365
    assert recurrence.days_until_next_occurrence(date(1990, 5, 1), date(2023, 5, 2)) == 365
    assert recurrence.next_occurrence(date(1990, 5, 1), date(2023, 5, 2)) == date(2024, 5, 1)


def test_upcoming_date_this_year():
    assert recurrence.days_until_next_occurrence(date(1975, 5, 20), date(2024, 5, 10)) == 10
    assert recurrence.next_occurrence(date(1975, 5, 20), date(2024, 5, 10)) == date(2024, 5, 20)


@pytest.mark.parametrize("today,expected", [
    (date(2023, 2, 28), 1),      # non-leap year: Mar 1
    (date(2023, 3, 1), 0),
    (date(2023, 3, 2), 364),     # next is Feb 29, 2024
    (date(2024, 2, 28), 1),
    (date(2024, 2, 29), 0),
    (date(2024, 3, 1), 365),     # next is Mar 1, 2025
])
def test_leap_day_origin(today, expected):
    assert recurrence.days_until_next_occurrence(date(2000, 2, 29), today) == expected


def test_leap_day_resolves_to_march_first():
    assert recurrence.occurrence_in_year(date(2000, 2, 29), 2023) == date(2023, 3, 1)
    assert recurrence.occurrence_in_year(date(2000, 2, 29), 2024) == date(2024, 2, 29)


def test_days_until_stays_within_a_year():
    origins = [date(2000, 1, 1), date(2000, 2, 29), date(1990, 6, 15), date(1985, 12, 31)]
    start = date(2023, 1, 1)
    for offset in range(0, 800, 7):
        today = start + timedelta(days=offset)
        for origin in origins:
            days = recurrence.days_until_next_occurrence(origin, today)
            assert 0 <= days < 366, (origin, today, days)


def test_format_month_day():
    assert recurrence.format_month_day(date(1975, 5, 20)) == "05月20日"
    assert recurrence.format_month_day(date(2020, 10, 1)) == "10月01日"


def test_category_label():
    assert recurrence.category_label(Category.BIRTHDAY) == "生日"
    assert recurrence.category_label("ANNIVERSARY") == "纪念日"
    assert recurrence.category_label(Category.OTHER) == "其他"
    assert recurrence.category_label("HOLIDAY") == "事件"


def test_age_caption():
    today = date(2024, 6, 1)
    birthday = Record(id="1", title="妈妈生日", origin_date=date(1975, 5, 20), category=Category.BIRTHDAY)
    anniversary = Record(id="2", title="结婚纪念日", origin_date=date(2020, 10, 1), category=Category.ANNIVERSARY)
    other = Record(id="3", title="搬家", origin_date=date(2018, 3, 3), category=Category.OTHER)

    assert recurrence.age_caption(birthday, today) == "49岁"
    assert recurrence.age_caption(anniversary, today) == "4周年"
    assert recurrence.age_caption(other, today) == ""


def test_is_urgent_threshold():
    assert recurrence.is_urgent(0)
    assert recurrence.is_urgent(7)
    assert not recurrence.is_urgent(8)
