# common/localtime.py
"""
Calendar-day helpers for user-facing counters (daily quotas, streaks,
monthly exam caps, weekly activity).

Every "day" in the product is a Philippine calendar day (fixed UTC+8), no
matter what TIME_ZONE the server runs with. Keep all day bucketing going
through ``local_date_of`` so quotas and streaks always agree on boundaries.
"""
from datetime import date, datetime, timedelta, timezone as dt_timezone

from django.utils import timezone

LOCAL_UTC_OFFSET = timedelta(hours=8)
LOCAL_TZ = dt_timezone(LOCAL_UTC_OFFSET, name="PHT")


def local_date_of(instant: datetime) -> date:
    """Calendar date of ``instant`` in the fixed UTC+8 calendar."""
    if timezone.is_naive(instant):
        instant = instant.replace(tzinfo=dt_timezone.utc)
    return instant.astimezone(LOCAL_TZ).date()


def today_local(now: datetime | None = None) -> date:
    return local_date_of(now or timezone.now())


def days_between(earlier: date, later: date) -> int:
    return (later - earlier).days


def start_of_local_day(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=LOCAL_TZ)


def start_of_local_month(now: datetime | None = None) -> datetime:
    """First instant of the current local calendar month."""
    today = today_local(now)
    return start_of_local_day(today.replace(day=1))
