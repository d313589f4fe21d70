# subscriptions/services.py
"""
Season Pass activation codes.

Codes look like ``RGSP-XXXX-XXXX`` over an alphabet without the easily
confused 0/O/1/I. Redemption claims the row with a conditional UPDATE, so of
two concurrent redeemers exactly one gets the premium extension.
"""
import logging
import re
import secrets

from django.apps import apps
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound, ValidationError

from accounts.access import is_premium
from subscriptions.models import SeasonPassCode

logger = logging.getLogger(__name__)

CODE_PREFIX = "RGSP"
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_RE = re.compile(r"^RGSP-[A-HJ-NP-Z2-9]{4}-[A-HJ-NP-Z2-9]{4}$")


def _now():
    return apps.get_app_config("accounts").access.clock()


def normalize_code(raw: str) -> str:
    return (raw or "").strip().upper()


def generate_code(rng=None) -> str:
    rng = rng or secrets.SystemRandom()
    body = "".join(rng.choice(CODE_ALPHABET) for _ in range(8))
    return f"{CODE_PREFIX}-{body[:4]}-{body[4:]}"


def create_codes(count: int, duration_days=None, batch: str = "", expires_at=None) -> list[SeasonPassCode]:
    """Create ``count`` fresh codes; a rare collision with an existing code is retried."""
    extra = {"duration_days": duration_days} if duration_days else {}
    created = []
    while len(created) < count:
        try:
            with transaction.atomic():
                created.append(SeasonPassCode.objects.create(
                    code=generate_code(), batch=batch, expires_at=expires_at, **extra,
                ))
        except IntegrityError:
            continue
    logger.info("Generated %s season pass code(s) (batch=%r)", count, batch)
    return created


def _usable_code(raw: str, now) -> SeasonPassCode:
    code = normalize_code(raw)
    if not CODE_RE.match(code):
        raise ValidationError("Invalid code format. Expected RGSP-XXXX-XXXX.")
    obj = SeasonPassCode.objects.filter(code=code).first()
    if obj is None:
        raise NotFound("Season pass code not found.")
    if obj.is_redeemed:
        raise ValidationError("This code has already been redeemed.")
    if obj.is_expired(now):
        raise ValidationError("This code has expired.")
    return obj


def verify_code(raw: str, now=None) -> dict:
    obj = _usable_code(raw, now or _now())
    return {
        "valid": True,
        "code": obj.code,
        "duration_days": obj.duration_days,
        "expires_at": obj.expires_at,
    }


@transaction.atomic
def redeem_code(user, raw: str, now=None) -> dict:
    now = now or _now()
    obj = _usable_code(raw, now)

    claimed = SeasonPassCode.objects.filter(pk=obj.pk, redeemed_by__isnull=True).update(
        redeemed_by=user, redeemed_at=now,
    )
    if not claimed:
        raise ValidationError("This code has already been redeemed.")

    locked = get_user_model().objects.select_for_update().get(pk=user.pk)
    locked.grant_season_pass(obj.duration_days, now=now)
    logger.info("User %s redeemed %s (+%s days, until %s)", user.pk, obj.code, obj.duration_days, locked.premium_expiry)

    return {
        "code": obj.code,
        "duration_days": obj.duration_days,
        "is_premium": True,
        "premium_expiry": locked.premium_expiry,
    }


def subscription_status(user, now=None) -> dict:
    now = now or _now()
    active = is_premium(user, now)
    days_left = 0
    if active and user.premium_expiry:
        days_left = max(0, (user.premium_expiry - now).days)
    return {
        "is_premium": active,
        "premium_expiry": user.premium_expiry if active else None,
        "days_remaining": days_left,
    }
