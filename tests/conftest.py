import itertools
from datetime import datetime, timezone as dt_timezone

import pytest
from django.apps import apps
from django.core.cache import cache

from accounts.models import User
from common.enums import Difficulty, QuestionCategory
from exams.models import Question, QuestionOption
from tests.helpers import FrozenClock, client_for


@pytest.fixture(autouse=True)
def _reset_throttles():
    # throttle history lives in the default cache
    cache.clear()
    yield


@pytest.fixture
def clock(monkeypatch):
    # 2025-03-10 10:00 in UTC+8
    frozen = FrozenClock(datetime(2025, 3, 10, 2, 0, tzinfo=dt_timezone.utc))
    monkeypatch.setattr(apps.get_app_config("accounts").access, "clock", frozen)
    monkeypatch.setattr(apps.get_app_config("exams").engine, "clock", frozen)
    return frozen


@pytest.fixture
def user(db):
    return User.objects.create_user(
        username="student", email="student@example.com", password="Sampaguita-2025",
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(
        username="other", email="other@example.com", password="Sampaguita-2025",
    )


@pytest.fixture
def premium_user(db):
    return User.objects.create_user(
        username="premium", email="premium@example.com", password="Sampaguita-2025",
        is_premium=True,
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        username="admin", email="admin@example.com", password="Sampaguita-2025",
        role=User.Roles.ADMIN,
    )


@pytest.fixture
def make_question(db):
    counter = itertools.count(1)

    def make(category=QuestionCategory.VERBAL_ABILITY, difficulty=Difficulty.MEDIUM,
             is_active=True, n_options=4):
        n = next(counter)
        q = Question.objects.create(
            category=category, difficulty=difficulty, is_active=is_active,
            text=f"Question {n}?", explanation=f"Explanation {n}.",
        )
        # option A is always the correct one
        QuestionOption.objects.bulk_create([
            QuestionOption(question=q, label="ABCDE"[i], text=f"Choice {i}", is_correct=(i == 0), order=i + 1)
            for i in range(n_options)
        ])
        return q

    return make


@pytest.fixture
def question_bank(make_question):
    """Ten active questions per category."""
    return [
        make_question(category=category)
        for category in QuestionCategory.values
        for _ in range(10)
    ]


@pytest.fixture
def api(user):
    return client_for(user)
