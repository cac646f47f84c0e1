"""
Calendar date arithmetic for the booking calendar views.

Pure local-date helpers: a "day" is a ``datetime.date`` and nothing here
shifts timezones or looks at time of day. Weeks start on Monday.
"""

from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from .domain.models import DateRange, ViewMode


def get_week_range(day: date) -> DateRange:
    """Monday..Sunday of the week containing ``day``."""
    start_date = day - timedelta(days=day.weekday())
    return DateRange(start_date=start_date, end_date=start_date + timedelta(days=6))


def get_month_range(day: date) -> DateRange:
    """First..last day of the month containing ``day``."""
    start_date = day.replace(day=1)
    return DateRange(start_date=start_date, end_date=start_date + relativedelta(months=1, days=-1))


def get_dates_in_range(start_date: date, end_date: date) -> list[date]:
    """Every date from start to end inclusive; empty when start > end."""
    span = (end_date - start_date).days
    return [start_date + timedelta(days=offset) for offset in range(span + 1)]


def get_week_dates(day: date) -> list[date]:
    week = get_week_range(day)
    return get_dates_in_range(week.start_date, week.end_date)


def get_month_dates(year: int, month: int) -> list[date]:
    month_range = get_month_range(date(year, month, 1))
    return get_dates_in_range(month_range.start_date, month_range.end_date)


def format_date_range(start_date: date, end_date: date) -> str:
    """e.g. ``Jan 06 - Jan 12, 2025``"""
    return f"{start_date.strftime('%b %d')} - {end_date.strftime('%b %d, %Y')}"


def format_day_label(day: date) -> str:
    """e.g. ``Monday, Jan 06``"""
    return day.strftime("%A, %b %d")


def navigate_previous(current: date, view_mode: ViewMode) -> date:
    if view_mode == ViewMode.WEEK:
        return current - timedelta(days=7)
    return current - relativedelta(months=1)


def navigate_next(current: date, view_mode: ViewMode) -> date:
    if view_mode == ViewMode.WEEK:
        return current + timedelta(days=7)
    return current + relativedelta(months=1)


def is_date_in_range(day: date, start_date: date, end_date: date) -> bool:
    return start_date <= day <= end_date
