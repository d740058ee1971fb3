"""
Timezone utilities for consistent time handling across the application

Ledger timestamps are stored as naive datetimes in the configured TIMEZONE, so
the "current month" of a payment is always judged in local time.
"""
from datetime import datetime, date
from dateutil.relativedelta import relativedelta
import pytz
from flask import current_app, has_app_context

DEFAULT_TIMEZONE = 'Asia/Kolkata'


def get_timezone():
    timezone_name = DEFAULT_TIMEZONE
    if has_app_context():
        timezone_name = current_app.config.get('TIMEZONE', DEFAULT_TIMEZONE)
    return pytz.timezone(timezone_name)


def get_local_time():
    """
    Get current time in the configured timezone
    Returns naive datetime for database compatibility
    """
    utc_time = datetime.now(pytz.UTC)
    return utc_time.astimezone(get_timezone()).replace(tzinfo=None)


def get_local_date():
    return get_local_time().date()


def month_key(value):
    """Format a date/datetime as YYYY-MM"""
    if not value:
        return None
    return value.strftime('%Y-%m')


def is_same_month(first, second):
    """True when both dates fall in the same calendar month"""
    return first.year == second.year and first.month == second.month


def month_bounds(year, month):
    """
    Get the [start, end) datetimes of a calendar month

    Args:
        year: Four digit year
        month: Month number (1-12)

    Returns:
        Tuple of (first instant of the month, first instant of the next month)
    """
    start = datetime(year, month, 1)
    return start, start + relativedelta(months=1)


def month_date_bounds(year, month):
    """Same as month_bounds but as dates, for DATE columns"""
    start = date(year, month, 1)
    return start, start + relativedelta(months=1)
