"""Season Pass codes and premium status."""
import random
from datetime import datetime, timedelta, timezone as dt_timezone

import pytest
from django.core.management import call_command
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from accounts.access import is_premium
from accounts.models import User
from subscriptions.models import SeasonPassCode
from subscriptions.services import CODE_RE, generate_code, redeem_code, subscription_status, verify_code
from tests.helpers import client_for

pytestmark = pytest.mark.django_db


def test_generated_codes_match_format():
    rng = random.Random(3)
    for _ in range(50):
        code = generate_code(rng)
        assert CODE_RE.match(code)
        assert not set(code[5:].replace("-", "")) & set("0O1I")


def test_verify_accepts_lowercase_and_rejects_bad_codes(db):
    SeasonPassCode.objects.create(code="RGSP-ABCD-EFGH", duration_days=30)
    assert verify_code(" rgsp-abcd-efgh ")["duration_days"] == 30

    with pytest.raises(ValidationError):
        verify_code("RGSP-0000-1111")
    with pytest.raises(NotFound):
        verify_code("RGSP-ZZZZ-ZZZZ")


def test_expired_code_is_rejected(db):
    SeasonPassCode.objects.create(code="RGSP-ABCD-EFGH", expires_at=timezone.now() - timedelta(days=1))
    with pytest.raises(ValidationError):
        verify_code("RGSP-ABCD-EFGH")


def test_redeem_grants_premium_once(user, other_user):
    SeasonPassCode.objects.create(code="RGSP-ABCD-EFGH", duration_days=30)
    now = timezone.now()

    result = redeem_code(user, "RGSP-ABCD-EFGH", now=now)
    user.refresh_from_db()
    assert result["is_premium"] is True
    assert user.is_premium is True
    assert user.premium_expiry == now + timedelta(days=30)

    code = SeasonPassCode.objects.get()
    assert code.redeemed_by == user
    assert code.redeemed_at == now

    with pytest.raises(ValidationError):
        redeem_code(other_user, "RGSP-ABCD-EFGH")
    other_user.refresh_from_db()
    assert other_user.is_premium is False


def test_redeeming_while_premium_extends_expiry(user):
    now = timezone.now()
    user.is_premium = True
    user.premium_expiry = now + timedelta(days=10)
    user.save()
    SeasonPassCode.objects.create(code="RGSP-ABCD-EFGH", duration_days=30)

    redeem_code(user, "RGSP-ABCD-EFGH", now=now)
    user.refresh_from_db()
    assert user.premium_expiry == now + timedelta(days=40)


def test_redeem_and_subscription_endpoints(user):
    SeasonPassCode.objects.create(code="RGSP-ABCD-EFGH", duration_days=365)
    client = client_for(user)

    before = client.get("/api/subscription/").json()
    assert before == {"is_premium": False, "premium_expiry": None, "days_remaining": 0}

    assert client.post("/api/season-pass-codes/verify/", {"code": "RGSP-ABCD-EFGH"}, format="json").status_code == 200
    assert client.post("/api/season-pass-codes/redeem/", {"code": "RGSP-ABCD-EFGH"}, format="json").status_code == 200
    assert client.post("/api/season-pass-codes/redeem/", {"code": "RGSP-ABCD-EFGH"}, format="json").status_code == 400

    # force_authenticate keeps the stale instance
    client = client_for(User.objects.get(pk=user.pk))
    after = client.get("/api/subscription/").json()
    assert after["is_premium"] is True
    assert after["days_remaining"] in (364, 365)
    assert client.get("/api/mock-exams/limits/").json()["max_exams_per_month"] == -1


def test_generate_codes_command(db, capsys):
    call_command("generate_codes", "5", "--days", "90", "--batch", "launch")
    codes = SeasonPassCode.objects.filter(batch="launch")
    assert codes.count() == 5
    assert {c.duration_days for c in codes} == {90}
    out = capsys.readouterr().out
    assert all(c.code in out for c in codes)


def test_redeeming_keeps_open_ended_premium(premium_user, clock):
    SeasonPassCode.objects.create(code="RGSP-ABCD-EFGH", duration_days=365)

    result = redeem_code(premium_user, "RGSP-ABCD-EFGH")
    premium_user.refresh_from_db()
    assert result["premium_expiry"] is None
    assert premium_user.premium_expiry is None
    assert is_premium(premium_user, datetime(2027, 1, 1, tzinfo=dt_timezone.utc))
    assert SeasonPassCode.objects.get().redeemed_by == premium_user


def test_redemption_and_status_follow_service_clock(user, clock):
    SeasonPassCode.objects.create(code="RGSP-ABCD-EFGH", duration_days=30)
    redeem_code(user, "RGSP-ABCD-EFGH")
    user.refresh_from_db()
    assert user.premium_expiry == clock.now + timedelta(days=30)
    assert SeasonPassCode.objects.get().redeemed_at == clock.now

    clock.advance(days=29, hours=12)
    assert subscription_status(user) == {
        "is_premium": True, "premium_expiry": user.premium_expiry, "days_remaining": 0,
    }
    clock.advance(hours=12)
    assert subscription_status(user)["is_premium"] is False
