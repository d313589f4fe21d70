# practice/services/quota.py
"""
Daily quota counters (practice answers, explanation views).

Counters are keyed by (user, UTC+8 date, kind) and incremented with an
``F()`` expression so concurrent requests cannot both read the same value.
A denied action still increments inside the surrounding atomic block and is
rolled back together with it when ``QuotaExceeded`` propagates.
"""
import logging

from django.db import IntegrityError, transaction
from django.db.models import F

from accounts.access import AccessService, exceeds_limit, limit_value, remaining
from common.enums import UsageKind
from common.exceptions import QuotaExceeded
from common.localtime import today_local
from practice.models import DailyUsageCounter

logger = logging.getLogger(__name__)

DENIAL_MESSAGES = {
    UsageKind.PRACTICE: "Daily practice limit reached. Free users can answer up to {limit} questions per day.",
    UsageKind.EXPLANATION_VIEW: "Daily explanation limit reached. Free users can view up to {limit} explanations per day.",
}


class QuotaService:
    def __init__(self, access: AccessService):
        self.access = access

    def _today(self):
        return today_local(self.access.clock())

    def used_today(self, user, kind: str) -> int:
        return (
            DailyUsageCounter.objects
            .filter(user=user, date=self._today(), kind=kind)
            .values_list("count", flat=True)
            .first()
        ) or 0

    def _increment(self, user, day, kind) -> int:
        """Atomically add one; returns the count before this increment."""
        rows = DailyUsageCounter.objects.filter(user=user, date=day, kind=kind)
        if not rows.update(count=F("count") + 1):
            try:
                with transaction.atomic():
                    DailyUsageCounter.objects.create(user=user, date=day, kind=kind, count=1)
                return 0
            except IntegrityError:
                # another request created today's row first
                rows.update(count=F("count") + 1)
        return rows.values_list("count", flat=True).get() - 1

    @transaction.atomic
    def consume(self, user, kind: str) -> int:
        """
        Count one quota-consuming action and return today's new total.
        Raises ``QuotaExceeded`` (and rolls the increment back) when the
        count before this action already met a bounded daily limit.
        """
        limit = self.access.limits(user).daily_limit(kind)
        before = self._increment(user, self._today(), kind)
        if exceeds_limit(before, limit):
            logger.info("Quota %s denied for user %s (%s/%s)", kind, user.pk, before, limit_value(limit))
            raise QuotaExceeded(
                DENIAL_MESSAGES[kind].format(limit=limit_value(limit)),
                limit=limit_value(limit), used=before,
            )
        return before + 1

    def usage(self, user, kind: str) -> dict:
        limits = self.access.limits(user)
        limit = limits.daily_limit(kind)
        used = self.used_today(user, kind)
        return {
            "is_premium": limits.can_access_premium_features,
            "daily_limit": limit_value(limit),
            "used_today": used,
            "remaining_today": remaining(used, limit),
            "limit_reached": exceeds_limit(used, limit),
        }
