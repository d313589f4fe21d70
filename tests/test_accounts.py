"""Registration, login, user settings and profile."""
import pytest
from rest_framework.test import APIClient

from accounts.models import User
from accounts.utils import username_from_email

pytestmark = pytest.mark.django_db


def test_register_returns_tokens_for_free_student():
    resp = APIClient().post("/api/auth/register/", {
        "email": "Juan.DelaCruz@Example.com", "password": "Sampaguita-2025", "first_name": "Juan",
    }, format="json")
    assert resp.status_code == 201
    body = resp.json()
    assert body["access"] and body["refresh"]
    assert body["user"]["email"] == "juan.delacruz@example.com"
    assert body["user"]["role"] == User.Roles.STUDENT
    assert body["user"]["has_season_pass"] is False


def test_register_rejects_duplicate_email_and_weak_password(user):
    client = APIClient()
    dup = client.post("/api/auth/register/", {"email": "STUDENT@example.com", "password": "Sampaguita-2025"},
                      format="json")
    assert dup.status_code == 400
    weak = client.post("/api/auth/register/", {"email": "new@example.com", "password": "123"}, format="json")
    assert weak.status_code == 400


def test_login_by_email(user):
    client = APIClient()
    ok = client.post("/api/auth/login/", {"email": "Student@Example.com", "password": "Sampaguita-2025"},
                     format="json")
    assert ok.status_code == 200
    bad = client.post("/api/auth/login/", {"email": "student@example.com", "password": "nope"}, format="json")
    assert bad.status_code == 400

    client.credentials(HTTP_AUTHORIZATION=f"Bearer {ok.json()['access']}")
    assert client.get("/api/auth/me/").json()["username"] == "student"


def test_endpoints_require_authentication():
    assert APIClient().get("/api/auth/me/").status_code == 401
    assert APIClient().get("/api/mock-exams/limits/").status_code == 401


def test_settings_update(api, user):
    resp = api.patch("/api/users/settings/", {"daily_goal": 40, "theme": "DARK"}, format="json")
    assert resp.status_code == 200
    user.refresh_from_db()
    assert (user.daily_goal, user.theme) == (40, "DARK")
    assert api.patch("/api/users/settings/", {"daily_goal": 0}, format="json").status_code == 400


def test_username_from_email_is_unique(user):
    assert username_from_email("student@other.org") == "student1"
    assert username_from_email("maria.santos@example.com") == "mariasantos"


def test_profile_update(api, user):
    resp = api.patch("/api/users/profile/",
                     {"first_name": "Maria", "last_name": "Santos", "exam_date": "2025-08-10"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["exam_date"] == "2025-08-10"
    user.refresh_from_db()
    assert (user.first_name, user.last_name, str(user.exam_date)) == ("Maria", "Santos", "2025-08-10")

    # fields outside the profile are ignored
    api.patch("/api/users/profile/", {"email": "x@example.com", "is_premium": True}, format="json")
    user.refresh_from_db()
    assert (user.email, user.is_premium) == ("student@example.com", False)

    assert api.patch("/api/users/profile/", {"exam_date": "next week"}, format="json").status_code == 400
    assert api.get("/api/users/profile/").json() == {
        "first_name": "Maria", "last_name": "Santos", "exam_date": "2025-08-10",
    }
