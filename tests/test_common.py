"""Local calendar and rounding helpers."""
from datetime import date, datetime, timezone as dt_timezone

from common.localtime import days_between, local_date_of, start_of_local_month, today_local
from common.numbers import percent, round_half_up


def test_local_day_rolls_over_at_16_utc():
    assert local_date_of(datetime(2025, 3, 10, 15, 59, tzinfo=dt_timezone.utc)) == date(2025, 3, 10)
    assert local_date_of(datetime(2025, 3, 10, 16, 0, tzinfo=dt_timezone.utc)) == date(2025, 3, 11)


def test_naive_datetimes_are_read_as_utc():
    assert local_date_of(datetime(2025, 3, 10, 20, 0)) == date(2025, 3, 11)


def test_today_local_uses_given_instant():
    assert today_local(datetime(2025, 12, 31, 17, 0, tzinfo=dt_timezone.utc)) == date(2026, 1, 1)


def test_start_of_local_month():
    start = start_of_local_month(datetime(2025, 3, 31, 17, 0, tzinfo=dt_timezone.utc))
    # already April 1st in UTC+8
    assert start == datetime(2025, 3, 31, 16, 0, tzinfo=dt_timezone.utc)


def test_days_between():
    assert days_between(date(2025, 2, 28), date(2025, 3, 1)) == 1


def test_round_half_up():
    assert round_half_up(69.5) == 70
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


def test_percent():
    assert percent(7, 10) == 70
    assert percent(2, 3) == 67
    assert percent(1, 8) == 13
    assert percent(0, 0) == 0
