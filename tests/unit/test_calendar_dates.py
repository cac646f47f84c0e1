from datetime import date, timedelta

import pytest

from app.features.booking_calendar import dates
from app.features.booking_calendar.domain.models import ViewMode


@pytest.mark.parametrize(
    "day", [date(2025, 1, 6), date(2025, 1, 8), date(2025, 1, 12)]
)
def test_week_dates_run_monday_to_sunday(day):
    week = dates.get_week_dates(day)

    assert len(week) == 7
    assert week[0] == date(2025, 1, 6)
    assert week[-1] == date(2025, 1, 12)
    assert all(later - earlier == timedelta(days=1) for earlier, later in zip(week, week[1:]))


def test_week_crossing_year_boundary():
    week = dates.get_week_dates(date(2025, 1, 1))

    assert week[0] == date(2024, 12, 30)
    assert week[-1] == date(2025, 1, 5)


def test_month_dates_handle_leap_year():
    february = dates.get_month_dates(2024, 2)

    assert len(february) == 29
    assert february[0] == date(2024, 2, 1)
    assert february[-1] == date(2024, 2, 29)


def test_month_range_ends_on_last_day_across_year_end():
    december = dates.get_month_range(date(2024, 12, 17))

    assert (december.start_date, december.end_date) == (date(2024, 12, 1), date(2024, 12, 31))


def test_dates_in_range_inclusive_and_empty_when_reversed():
    assert dates.get_dates_in_range(date(2025, 3, 1), date(2025, 3, 1)) == [date(2025, 3, 1)]
    assert dates.get_dates_in_range(date(2025, 3, 2), date(2025, 3, 1)) == []


def test_format_labels():
    assert dates.format_date_range(date(2025, 1, 6), date(2025, 1, 12)) == "Jan 06 - Jan 12, 2025"
    assert dates.format_day_label(date(2025, 1, 6)) == "Monday, Jan 06"


def test_navigation_by_week():
    current = date(2025, 1, 8)

    assert dates.navigate_previous(current, ViewMode.WEEK) == date(2025, 1, 1)
    assert dates.navigate_next(current, ViewMode.WEEK) == date(2025, 1, 15)


def test_navigation_by_month_clamps_day():
    assert dates.navigate_next(date(2025, 1, 31), ViewMode.MONTH) == date(2025, 2, 28)
    assert dates.navigate_previous(date(2024, 3, 31), ViewMode.MONTH) == date(2024, 2, 29)
    assert dates.navigate_next(date(2024, 12, 15), ViewMode.MONTH) == date(2025, 1, 15)
    assert dates.navigate_previous(date(2025, 1, 15), ViewMode.MONTH) == date(2024, 12, 15)


def test_is_date_in_range_is_inclusive():
    start, end = date(2025, 1, 6), date(2025, 1, 12)

    assert dates.is_date_in_range(start, start, end)
    assert dates.is_date_in_range(end, start, end)
    assert not dates.is_date_in_range(date(2025, 1, 13), start, end)
