# practice/services/streak.py
"""
Consecutive-day activity streaks on the fixed UTC+8 calendar.

A streak grows by one on the first qualifying activity of each local day and
resets to 1 after a gap. A single missed day can be repaired once per day:
the repair back-dates ``last_activity_date`` to yesterday so the next
activity continues the streak. The repair cost is reported but waived.
"""
import logging
from dataclasses import dataclass
from datetime import date, timedelta

from django.conf import settings
from django.db import transaction
from rest_framework.exceptions import ValidationError

from accounts.access import AccessService
from common.localtime import days_between, today_local
from practice.models import StreakRecord

logger = logging.getLogger(__name__)

MAX_REPAIRABLE_DAYS = 1


@dataclass(frozen=True)
class StreakStatus:
    current_streak: int
    longest_streak: int
    last_activity_date: date | None
    missed_days: int
    can_repair: bool
    repair_cost: int

    def as_dict(self):
        return {
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "last_activity_date": self.last_activity_date.isoformat() if self.last_activity_date else None,
            "missed_days": self.missed_days,
            "can_repair": self.can_repair,
            "repair_cost": self.repair_cost,
        }


class StreakTracker:
    def __init__(self, access: AccessService, repair_cost: int | None = None):
        self.access = access
        self.repair_cost = settings.STREAK_REPAIR_COST if repair_cost is None else repair_cost

    def today(self) -> date:
        return today_local(self.access.clock())

    def _locked_record(self, user) -> StreakRecord:
        record, _ = StreakRecord.objects.select_for_update().get_or_create(user=user)
        return record

    def _status(self, record: StreakRecord, today: date) -> StreakStatus:
        missed, can_repair = 0, False
        if record.last_activity_date:
            since = days_between(record.last_activity_date, today)
            missed = max(0, since - 1)
            can_repair = since == MAX_REPAIRABLE_DAYS + 1 and record.streak_repaired_at != today
        return StreakStatus(
            current_streak=record.current_streak,
            longest_streak=record.longest_streak,
            last_activity_date=record.last_activity_date,
            missed_days=missed,
            can_repair=can_repair,
            repair_cost=self.repair_cost if can_repair else 0,
        )

    @transaction.atomic
    def update_streak(self, user) -> dict:
        """Record a qualifying activity for today."""
        record = self._locked_record(user)
        today = self.today()
        since = days_between(record.last_activity_date, today) if record.last_activity_date else None
        is_new_record = False

        # same local day: repeat activity doesn't count twice
        if since is None or since > 0:
            if since == 1:
                record.current_streak += 1
            else:
                if since is not None and record.current_streak > 1:
                    logger.info("Streak for user %s reset after %s missed day(s)", user.pk, since - 1)
                record.current_streak = 1
            if record.current_streak > record.longest_streak:
                record.longest_streak = record.current_streak
                is_new_record = True
            record.last_activity_date = today
            record.save(update_fields=["current_streak", "longest_streak", "last_activity_date", "updated_at"])

        return {
            "current_streak": record.current_streak,
            "longest_streak": record.longest_streak,
            "is_new_record": is_new_record,
        }

    def get_streak_status(self, user) -> StreakStatus:
        record = StreakRecord.objects.filter(user=user).first() or StreakRecord(user=user)
        return self._status(record, self.today())

    @transaction.atomic
    def repair_streak(self, user) -> dict:
        record = self._locked_record(user)
        today = self.today()
        status = self._status(record, today)

        if not status.can_repair:
            if record.last_activity_date is None:
                raise ValidationError("Streak repair not available")
            if status.missed_days == 0:
                raise ValidationError("Your streak is not broken. Keep it up!")
            if status.missed_days > MAX_REPAIRABLE_DAYS:
                raise ValidationError(
                    f"You missed {status.missed_days} days. Streak repair is only available for 1 missed day."
                )
            raise ValidationError("Streak repair not available")

        record.last_activity_date = today - timedelta(days=1)
        record.streak_repaired_at = today
        record.save(update_fields=["last_activity_date", "streak_repaired_at", "updated_at"])
        logger.info("Streak for user %s repaired (streak=%s)", user.pk, record.current_streak)

        # no points ledger exists yet, so repairs are free
        return {
            "success": True,
            "message": "Streak repaired successfully! Your streak continues.",
            "current_streak": record.current_streak,
            "repair_cost": 0,
        }
