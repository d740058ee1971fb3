from datetime import datetime, date

from libraryhub.utils.timezone_utils import (
    get_local_time, is_same_month, month_bounds, month_date_bounds, month_key
)


def test_local_time_is_naive(app_ctx):
    assert get_local_time().tzinfo is None


def test_local_time_follows_configured_timezone(app):
    app.config['TIMEZONE'] = 'Pacific/Kiritimati'
    with app.app_context():
        ahead = get_local_time()
    app.config['TIMEZONE'] = 'Pacific/Pago_Pago'
    with app.app_context():
        behind = get_local_time()
    # UTC+14 and UTC-11
    assert round((ahead - behind).total_seconds() / 3600) == 25


def test_month_bounds_wraps_year():
    assert month_bounds(2026, 12) == (datetime(2026, 12, 1), datetime(2027, 1, 1))
    assert month_date_bounds(2026, 2) == (date(2026, 2, 1), date(2026, 3, 1))


def test_is_same_month():
    assert is_same_month(datetime(2026, 10, 1), datetime(2026, 10, 31, 23, 59))
    assert not is_same_month(datetime(2026, 9, 30, 23, 59), datetime(2026, 10, 1))
    assert not is_same_month(datetime(2025, 10, 15), datetime(2026, 10, 15))


def test_month_key():
    assert month_key(datetime(2026, 3, 9, 8, 0)) == '2026-03'
    assert month_key(None) is None
