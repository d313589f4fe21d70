# accounts/access.py
"""
Tier limits derived from the user record.

A limit is either ``UNLIMITED`` (Season Pass) or ``Bounded(n)`` (free tier).
Callers compare usage through ``exceeds_limit`` / ``above_cap`` and only turn a
limit into a number (``-1`` for unlimited) when writing a response.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Union

from django.conf import settings
from django.utils import timezone

from common.enums import UsageKind


@dataclass(frozen=True)
class Unlimited:
    pass


@dataclass(frozen=True)
class Bounded:
    value: int


Limit = Union[Unlimited, Bounded]

UNLIMITED = Unlimited()


def exceeds_limit(current: int, limit: Limit) -> bool:
    """True when ``current`` usage already uses up the limit."""
    if isinstance(limit, Unlimited):
        return False
    return current >= limit.value


def above_cap(value: int, limit: Limit) -> bool:
    """True when a requested size is larger than the cap."""
    if isinstance(limit, Unlimited):
        return False
    return value > limit.value


def limit_value(limit: Limit) -> int:
    return -1 if isinstance(limit, Unlimited) else limit.value


def remaining(current: int, limit: Limit) -> int:
    if isinstance(limit, Unlimited):
        return -1
    return max(0, limit.value - current)


@dataclass(frozen=True)
class AccessLimits:
    can_access_premium_features: bool
    practice_limit_per_day: Limit
    mock_exam_questions_limit: Limit
    mock_exams_per_month: Limit
    explanation_views_per_day: Limit

    def daily_limit(self, kind: str) -> Limit:
        if kind == UsageKind.PRACTICE:
            return self.practice_limit_per_day
        if kind == UsageKind.EXPLANATION_VIEW:
            return self.explanation_views_per_day
        raise ValueError(f"Unknown usage kind: {kind}")

    def as_dict(self):
        return {
            "can_access_premium_features": self.can_access_premium_features,
            "practice_limit_per_day": limit_value(self.practice_limit_per_day),
            "mock_exam_questions_limit": limit_value(self.mock_exam_questions_limit),
            "mock_exams_per_month": limit_value(self.mock_exams_per_month),
            "explanation_views_per_day": limit_value(self.explanation_views_per_day),
        }


PREMIUM_LIMITS = AccessLimits(
    can_access_premium_features=True,
    practice_limit_per_day=UNLIMITED,
    mock_exam_questions_limit=UNLIMITED,
    mock_exams_per_month=UNLIMITED,
    explanation_views_per_day=UNLIMITED,
)


def free_limits() -> AccessLimits:
    return AccessLimits(
        can_access_premium_features=False,
        practice_limit_per_day=Bounded(settings.FREE_TIER_PRACTICE_LIMIT_PER_DAY),
        mock_exam_questions_limit=Bounded(settings.FREE_TIER_MOCK_EXAM_QUESTIONS_LIMIT),
        mock_exams_per_month=Bounded(settings.FREE_TIER_MOCK_EXAMS_PER_MONTH),
        explanation_views_per_day=Bounded(settings.FREE_TIER_EXPLANATION_VIEWS_PER_DAY),
    )


def is_premium(user, now: datetime | None = None) -> bool:
    if not getattr(user, "is_premium", False):
        return False
    expiry = user.premium_expiry
    if expiry is None:
        return True
    return expiry > (now or timezone.now())


def limits_for(user, now: datetime | None = None) -> AccessLimits:
    return PREMIUM_LIMITS if is_premium(user, now) else free_limits()


class AccessService:
    """Entitlement lookups bound to a clock, shared by the exam and practice services."""

    def __init__(self, clock: Callable[[], datetime] = timezone.now):
        self.clock = clock

    def is_premium(self, user) -> bool:
        return is_premium(user, self.clock())

    def limits(self, user) -> AccessLimits:
        return limits_for(user, self.clock())
